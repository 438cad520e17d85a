"""
Per-thread agent state.

AgentState is what the tools mutate during a run (it is passed to the agent
as deps). ThreadCheckpoint is everything the runtime keeps between runs so a
paused thread can be resumed.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic_ai.messages import ModelMessage, ToolCallPart
from pydantic_ai.tools import DeferredToolResults


@dataclass
class AgentState:
    """Workspace state shared with the agent's tools."""

    workspace_path: str
    todos: list[dict[str, Any]] = field(default_factory=list)
    # path -> {"content": str, "lastModified": float}
    files: dict[str, dict[str, Any]] = field(default_factory=dict)
    subagents: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class ThreadCheckpoint:
    """Conversation and approval state of one thread."""

    state: AgentState
    history: list[ModelMessage] = field(default_factory=list)
    # Tool calls still waiting for a decision, surfaced one at a time
    pending_calls: list[ToolCallPart] = field(default_factory=list)
    # Decisions taken so far; handed to the agent once pending_calls is empty
    decisions: DeferredToolResults | None = None
    edited_args: dict[str, dict[str, Any]] = field(default_factory=dict)
    interrupt_id: str | None = None

    def head(self) -> ToolCallPart | None:
        """The tool call currently waiting for a decision."""
        return self.pending_calls[0] if self.pending_calls else None

    def is_paused(self) -> bool:
        return bool(self.pending_calls) or self.decisions is not None
