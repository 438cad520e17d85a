"""
Pydantic AI agent and the runtime that drives it for the stream core.
"""
from .agent import TodoItem, create_agent
from .runtime import PydanticAgentRuntime, snapshot_messages
from .state import AgentState, ThreadCheckpoint

__all__ = [
    # Agent creation
    "create_agent",
    "TodoItem",
    # Runtime
    "PydanticAgentRuntime",
    "snapshot_messages",
    # State
    "AgentState",
    "ThreadCheckpoint",
]
