"""AgentConfig model for configuration."""

from pydantic import BaseModel, Field

from .defaults import DEFAULT_MODEL, DEFAULT_SYSTEM_PROMPT


class AgentConfig(BaseModel):
    """Agent runtime configuration."""

    model: str = Field(
        default=DEFAULT_MODEL,
        description="pydantic-ai model name, e.g. anthropic:claude-sonnet-4-20250514",
    )
    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        description="System prompt for the agent",
    )
    workspace_path: str | None = Field(
        default=None,
        description="Workspace path reported with file events (defaults to cwd)",
    )
