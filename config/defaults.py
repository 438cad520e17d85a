"""Default configuration values."""

DEFAULT_MODEL = "anthropic:claude-sonnet-4-20250514"

# Event channels are named "<prefix>:<thread_id>"
CHANNEL_PREFIX = "agent-stream"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_CORS_ORIGINS = "*"

# Config file locations, checked in order (project files win over global)
CONFIG_DIRNAME = ".agentstream"
CONFIG_FILENAMES = [
    "agentstream.jsonc",
    "agentstream.json",
    f"{CONFIG_DIRNAME}/agentstream.jsonc",
]
GLOBAL_CONFIG_FILENAME = "agentstream.jsonc"

DEFAULT_SYSTEM_PROMPT = """You are a helpful assistant working in a shared workspace.

Keep a todo list up to date with write_todos while you work on multi-step tasks.
Use write_file to create or replace files in the workspace; every write is
reviewed by a person before it happens, and a refused write must not be retried
unchanged."""

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000
