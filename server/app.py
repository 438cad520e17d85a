"""
FastAPI application setup and configuration.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import get_config


# =============================================================================
# Constants
# =============================================================================

API_TITLE = "Agent Stream API"
API_VERSION = "1.0.0"


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(title=API_TITLE, version=API_VERSION)


# =============================================================================
# CORS Configuration
# =============================================================================

# allow_origins=["*"] accepts any origin. Set CORS_ORIGINS (comma separated)
# or "cors_origins" in agentstream.jsonc to restrict it.

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
