"""
Agent stream HTTP/SSE server.

Exposes the core's invoke/resume/cancel operations over FastAPI and streams
each thread's events to clients with Server-Sent Events.
"""

from .app import app
from .routes import register_routes
from .state import get_service, require_service, set_service
from .transport import SSETransport, get_transport

# Register all routes with the app
register_routes(app)

__all__ = ["app", "set_service", "get_service", "require_service", "SSETransport", "get_transport"]
