"""
Route registration for the agent stream API.
"""

from fastapi import FastAPI

from . import agent, events, health


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application."""
    app.include_router(agent.router)
    app.include_router(events.router)
    app.include_router(health.router)
