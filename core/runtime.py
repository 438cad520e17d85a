"""
AgentRuntime protocol.

The agent runtime owns the actual reasoning loop and its checkpoints. The
core only pulls snapshots from it and hands it resumption commands.
"""

from typing import Any, AsyncIterator, Literal, Protocol

from pydantic import BaseModel

from .cancellation import CancellationToken

RawSnapshot = Any


class Continuation(BaseModel):
    """
    How a paused run should continue.

    ``approve`` lets the pending tool call run as checkpointed; ``reject``
    refuses that specific call so its side effect never happens.
    """

    action: Literal["approve", "reject"]
    tool_call_id: str | None = None
    reason: str | None = None


class AgentRuntime(Protocol):
    """Protocol for agent runtimes."""

    def stream(
        self,
        message: str | None,
        *,
        thread_id: str,
        cancellation_token: CancellationToken,
    ) -> AsyncIterator[RawSnapshot]:
        """
        Run the agent on a thread, yielding its full state after each step.

        A ``None`` message continues the thread from its checkpoint. The
        session stops a cancelled run by closing the iterator at its next
        snapshot; closing it abandons the run without advancing the checkpoint.
        """
        ...

    async def get_interrupt(self, thread_id: str) -> dict[str, Any] | None:
        """Return the thread's pending interrupt (``{"id", "tool_call"}``), if any."""
        ...

    async def update_tool_call(
        self, thread_id: str, tool_call_id: str | None, args: dict[str, Any]
    ) -> None:
        """Overwrite the pending tool call's arguments in the checkpoint."""
        ...

    async def resume(self, thread_id: str, continuation: Continuation) -> None:
        """Issue a resumption command for a paused thread."""
        ...
