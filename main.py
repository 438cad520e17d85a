"""
Agent stream server entry point.
"""
import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from agent import PydanticAgentRuntime, create_agent
from config import get_config, get_working_directory
from config.defaults import DEFAULT_HOST, DEFAULT_PORT
from core import AgentService
from server import app, get_service, set_service
from server.logging_config import setup_logging
from server.transport import get_transport

# Initialize logging before anything else
setup_logging(get_config().log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the agent runtime and service for the lifetime of the app."""
    config = get_config()
    workspace_path = config.agent.workspace_path or get_working_directory()

    logger.info("Starting agent stream server")
    logger.info("Model: %s", config.agent.model)
    logger.info("Workspace: %s", workspace_path)

    agent = create_agent(model=config.agent.model, system_prompt=config.agent.system_prompt)
    runtime = PydanticAgentRuntime(agent, workspace_path=workspace_path)
    set_service(
        AgentService(
            runtime,
            get_transport(),
            channel_prefix=config.channel_prefix,
            workspace_path=workspace_path,
        )
    )
    logger.info("Agent ready")

    yield

    service = get_service()
    if service is not None:
        logger.info("Cancelling %d active runs...", len(service.registry))
        await service.shutdown()
    set_service(None)
    logger.info("Agent stream server stopped")


app.router.lifespan_context = lifespan


def main() -> None:
    """Start the server."""
    host = os.environ.get("HOST", DEFAULT_HOST)
    port = int(os.environ.get("PORT", str(DEFAULT_PORT)))

    logger.info("Server listening on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
