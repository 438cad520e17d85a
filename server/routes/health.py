"""
Health check endpoint.
"""

from fastapi import APIRouter

from ..state import get_service


router = APIRouter()


@router.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    service = get_service()
    return {
        "status": "ok",
        "agent_configured": service is not None,
        "active_runs": len(service.registry) if service is not None else 0,
    }
