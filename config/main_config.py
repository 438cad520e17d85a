"""Main Config model."""

from pydantic import BaseModel, Field

from .agent_config import AgentConfig
from .defaults import CHANNEL_PREFIX, DEFAULT_CORS_ORIGINS, DEFAULT_LOG_LEVEL


class Config(BaseModel):
    """Main configuration model."""

    agent: AgentConfig = Field(
        default_factory=AgentConfig,
        description="Agent runtime settings",
    )
    channel_prefix: str = Field(
        default=CHANNEL_PREFIX,
        description="Prefix of per-thread event channel names",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Root log level",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: [DEFAULT_CORS_ORIGINS],
        description="Allowed CORS origins",
    )
