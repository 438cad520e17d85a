"""
Server-side state management.

Holds the AgentService the routes operate on. It is set by the application
lifespan in main.py (or directly by tests).
"""

from fastapi import HTTPException

from core import AgentService


# =============================================================================
# Service Management
# =============================================================================

_service: AgentService | None = None


def set_service(service: AgentService | None) -> None:
    """Set the agent service instance."""
    global _service
    _service = service


def get_service() -> AgentService | None:
    """Get the current agent service instance."""
    return _service


def require_service() -> AgentService:
    """Get the agent service, or fail the request with 503."""
    if _service is None:
        raise HTTPException(status_code=503, detail="Agent not configured")
    return _service
