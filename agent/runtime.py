"""
Pydantic AI backed agent runtime.

Runs the workspace agent one thread at a time and reports its full state as a
snapshot after every graph step. A write that needs approval pauses the
thread: the pending calls are surfaced as interrupts one by one, and the run
only continues once every call has a decision.
"""

import copy
import json
import logging
import os
from collections.abc import AsyncIterator
from typing import Any

from pydantic_ai import Agent
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    RetryPromptPart,
    SystemPromptPart,
    TextPart,
    ThinkingPart,
    ToolCallPart,
    ToolReturnPart,
    UserPromptPart,
)
from pydantic_ai.tools import DeferredToolRequests, DeferredToolResults, ToolApproved, ToolDenied

from core.cancellation import CancellationToken
from core.exceptions import InvalidOperationError, NoPendingInterrupt
from core.models import gen_id
from core.runtime import Continuation

from .state import AgentState, ThreadCheckpoint

logger = logging.getLogger(__name__)

DEFAULT_DENIAL = "The user rejected this tool call."


# =============================================================================
# Snapshot encoding
# =============================================================================


def _text_of(content: Any) -> str:
    if isinstance(content, str):
        return content
    try:
        return json.dumps(content, default=str)
    except (TypeError, ValueError):
        return str(content)


def _tool_call(part: ToolCallPart, args: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "id": part.tool_call_id,
        "name": part.tool_name,
        "args": args if args is not None else part.args_as_dict(),
    }


def _request_message(msg_id: str, part: Any) -> dict[str, Any] | None:
    if isinstance(part, SystemPromptPart):
        return {"id": msg_id, "type": "system", "content": part.content}
    if isinstance(part, UserPromptPart):
        if isinstance(part.content, str):
            content: Any = part.content
        else:
            content = [{"type": "text", "text": item} for item in part.content if isinstance(item, str)]
        return {"id": msg_id, "type": "human", "content": content}
    if isinstance(part, (ToolReturnPart, RetryPromptPart)):
        return {
            "id": msg_id,
            "type": "tool",
            "content": _text_of(part.content),
            "tool_call_id": part.tool_call_id,
        }
    return None


def _response_message(msg_id: str, response: ModelResponse) -> dict[str, Any]:
    blocks: list[dict[str, Any]] = []
    tool_calls = []
    for part in response.parts:
        if isinstance(part, TextPart):
            blocks.append({"type": "text", "text": part.content})
        elif isinstance(part, ThinkingPart):
            blocks.append({"type": "thinking", "thinking": part.content})
        elif isinstance(part, ToolCallPart):
            call = _tool_call(part)
            blocks.append({"type": "tool_use", "id": call["id"], "name": call["name"], "input": call["args"]})
            tool_calls.append(call)
    return {"id": msg_id, "type": "ai", "content": blocks, "tool_calls": tool_calls or None}


def snapshot_messages(thread_id: str, history: list[ModelMessage]) -> list[dict[str, Any]]:
    """
    Encode pydantic-ai history as tagged snapshot messages.

    IDs are positional within the thread, so a message keeps its ID across
    every snapshot and every run of the thread.
    """
    messages = []
    for index, message in enumerate(history):
        if isinstance(message, ModelResponse):
            messages.append(_response_message(f"{thread_id}-{index}", message))
        elif isinstance(message, ModelRequest):
            for part_index, part in enumerate(message.parts):
                item = _request_message(f"{thread_id}-{index}-{part_index}", part)
                if item is not None:
                    messages.append(item)
    return messages


# =============================================================================
# Runtime
# =============================================================================


class PydanticAgentRuntime:
    """
    AgentRuntime over a pydantic-ai agent with in-memory checkpoints.

    Runs work on a copy of the thread's state, and checkpoints only advance
    when a run finishes. A cancelled or failed run leaves both the history
    and the tool state where they were before the run started.
    """

    def __init__(self, agent: Agent[AgentState, Any], workspace_path: str | None = None):
        self.agent = agent
        self.workspace_path = workspace_path or os.getcwd()
        self._checkpoints: dict[str, ThreadCheckpoint] = {}

    def checkpoint(self, thread_id: str) -> ThreadCheckpoint:
        """Get or create a thread's checkpoint."""
        checkpoint = self._checkpoints.get(thread_id)
        if checkpoint is None:
            checkpoint = ThreadCheckpoint(state=AgentState(workspace_path=self.workspace_path))
            self._checkpoints[thread_id] = checkpoint
        return checkpoint

    def snapshot(
        self,
        thread_id: str,
        history: list[ModelMessage] | None = None,
        state: AgentState | None = None,
    ) -> dict[str, Any]:
        """Build the raw snapshot of a thread, or of a run in progress when history and state are given."""
        checkpoint = self.checkpoint(thread_id)
        state = checkpoint.state if state is None else state
        snapshot: dict[str, Any] = {
            "messages": snapshot_messages(thread_id, checkpoint.history if history is None else history),
            "todos": [dict(todo) for todo in state.todos],
            "files": {path: dict(data) for path, data in state.files.items()},
            "subagents": [dict(subagent) for subagent in state.subagents],
            "workspacePath": state.workspace_path,
        }
        interrupt = self._interrupt(checkpoint)
        if interrupt is not None:
            snapshot["__interrupt__"] = interrupt
        return snapshot

    async def stream(
        self,
        message: str | None,
        *,
        thread_id: str,
        cancellation_token: CancellationToken,
    ) -> AsyncIterator[dict[str, Any]]:
        """
        Run the agent and yield a snapshot after every step.

        Args:
            message: New user message, or None to continue a resumed thread
            thread_id: Thread to run
            cancellation_token: A run that is already cancelled never starts.
                Cancelling mid-run is done by closing this generator, which
                discards the run

        Raises:
            InvalidOperationError: If a message is sent to a paused thread, or
                a continuation is asked for with nothing to continue
        """
        checkpoint = self.checkpoint(thread_id)
        if message is None:
            if checkpoint.head() is not None:
                # Next undecided call of a multi-call pause
                yield self.snapshot(thread_id)
                return
            if checkpoint.decisions is None:
                raise InvalidOperationError(f"Thread {thread_id} has nothing to continue")
        elif checkpoint.is_paused():
            raise InvalidOperationError(f"Thread {thread_id} is waiting for a decision")

        if cancellation_token.is_cancelled():
            logger.info("Agent run on thread %s not started: %s", thread_id, cancellation_token.reason)
            return

        state = copy.deepcopy(checkpoint.state)
        finished = False
        try:
            async with self.agent.iter(
                message,
                message_history=list(checkpoint.history),
                deps=state,
                deferred_tool_results=checkpoint.decisions,
            ) as run:
                async for _node in run:
                    yield self.snapshot(thread_id, list(run.ctx.state.message_history), state)
                result = run.result
            finished = True
        finally:
            if not finished:
                logger.info("Agent run on thread %s stopped before finishing; checkpoint kept", thread_id)

        if result is None:
            return
        checkpoint.history = list(result.all_messages())
        checkpoint.state = state
        checkpoint.decisions = None
        checkpoint.edited_args.clear()

        output = result.output
        if isinstance(output, DeferredToolRequests):
            if output.calls:
                logger.warning(
                    "Thread %s requested %d external tool calls; they are not supported",
                    thread_id,
                    len(output.calls),
                )
            if output.approvals:
                checkpoint.pending_calls = list(output.approvals)
                checkpoint.interrupt_id = gen_id("int_")
                logger.info("Thread %s paused on %d tool calls", thread_id, len(output.approvals))
                yield self.snapshot(thread_id)

    async def get_interrupt(self, thread_id: str) -> dict[str, Any] | None:
        checkpoint = self._checkpoints.get(thread_id)
        if checkpoint is None:
            return None
        return self._interrupt(checkpoint)

    async def update_tool_call(self, thread_id: str, tool_call_id: str | None, args: dict[str, Any]) -> None:
        """Replace the arguments of the pending tool call."""
        checkpoint, head = self._require_head(thread_id, tool_call_id)
        checkpoint.edited_args[head.tool_call_id] = dict(args)

    async def resume(self, thread_id: str, continuation: Continuation) -> None:
        """
        Record a decision for the pending tool call.

        The run itself continues on the next ``stream(None)`` call.
        """
        checkpoint, head = self._require_head(thread_id, continuation.tool_call_id)
        if checkpoint.decisions is None:
            checkpoint.decisions = DeferredToolResults()

        if continuation.action == "reject":
            decision: Any = ToolDenied(continuation.reason or DEFAULT_DENIAL)
        else:
            decision = ToolApproved(override_args=checkpoint.edited_args.get(head.tool_call_id))
        checkpoint.decisions.approvals[head.tool_call_id] = decision

        checkpoint.pending_calls.pop(0)
        checkpoint.interrupt_id = gen_id("int_") if checkpoint.pending_calls else None
        logger.debug("Recorded %s for %s on thread %s", continuation.action, head.tool_name, thread_id)

    def _interrupt(self, checkpoint: ThreadCheckpoint) -> dict[str, Any] | None:
        head = checkpoint.head()
        if head is None:
            return None
        return {
            "id": checkpoint.interrupt_id,
            "tool_call": _tool_call(head, checkpoint.edited_args.get(head.tool_call_id)),
        }

    def _require_head(self, thread_id: str, tool_call_id: str | None) -> tuple[ThreadCheckpoint, ToolCallPart]:
        checkpoint = self._checkpoints.get(thread_id)
        head = checkpoint.head() if checkpoint is not None else None
        if checkpoint is None or head is None:
            raise NoPendingInterrupt(thread_id)
        if tool_call_id is not None and tool_call_id != head.tool_call_id:
            raise InvalidOperationError(
                f"Tool call {tool_call_id} is not the pending call on thread {thread_id}"
            )
        return checkpoint, head
