"""
Interrupt resumer.

Turns an external approve/reject/edit decision into a resumption command for
a thread the agent runtime has paused. Pause state lives in the runtime's
checkpoint, so the lookup goes through the runtime and never the run
registry.
"""

import logging
from collections.abc import Mapping
from typing import Any

from .exceptions import CoreError, InvalidDecisionError, NoPendingInterrupt, RuntimeResumeFault
from .models import HITLDecision
from .runtime import AgentRuntime, Continuation

logger = logging.getLogger(__name__)


def _tool_call_id(interrupt: Mapping[str, Any]) -> str | None:
    tool_call = interrupt.get("tool_call")
    if isinstance(tool_call, Mapping):
        call_id = tool_call.get("id")
        if isinstance(call_id, str) and call_id:
            return call_id
    return None


def _reject_reason(payload: Any) -> str | None:
    if isinstance(payload, str) and payload:
        return payload
    if isinstance(payload, Mapping):
        for key in ("message", "reason"):
            reason = payload.get(key)
            if isinstance(reason, str) and reason:
                return reason
    return None


class InterruptResumer:
    """Resume paused runs from human decisions."""

    def __init__(self, runtime: AgentRuntime):
        self.runtime = runtime

    async def resume(self, thread_id: str, decision: HITLDecision) -> None:
        """
        Resume a paused thread.

        - approve: continue from the checkpoint unchanged
        - reject: continue with the pending tool call refused
        - edit: overwrite the pending call's arguments with the payload,
          then continue as approve

        Args:
            thread_id: The paused thread
            decision: The human decision

        Raises:
            NoPendingInterrupt: If the thread is not waiting for a decision
            InvalidDecisionError: If an edit carries no argument mapping
            RuntimeResumeFault: If the runtime fails to take the command
        """
        interrupt = await self._pending_interrupt(thread_id)
        tool_call_id = _tool_call_id(interrupt)
        logger.info(
            "Resuming thread %s with %s (tool call %s)",
            thread_id,
            decision.type,
            tool_call_id or "unknown",
        )

        if decision.type == "edit":
            if not isinstance(decision.payload, Mapping):
                raise InvalidDecisionError("Edit decisions need a mapping of tool arguments")
            await self._call(
                thread_id,
                self.runtime.update_tool_call(thread_id, tool_call_id, dict(decision.payload)),
            )
            continuation = Continuation(action="approve", tool_call_id=tool_call_id)
        elif decision.type == "reject":
            continuation = Continuation(
                action="reject",
                tool_call_id=tool_call_id,
                reason=_reject_reason(decision.payload),
            )
        else:
            continuation = Continuation(action="approve", tool_call_id=tool_call_id)

        await self._call(thread_id, self.runtime.resume(thread_id, continuation))

    async def _pending_interrupt(self, thread_id: str) -> Mapping[str, Any]:
        try:
            interrupt = await self.runtime.get_interrupt(thread_id)
        except CoreError:
            raise
        except Exception as e:
            raise RuntimeResumeFault(thread_id, str(e) or type(e).__name__) from e
        if not interrupt:
            raise NoPendingInterrupt(thread_id)
        return interrupt

    async def _call(self, thread_id: str, awaitable: Any) -> None:
        try:
            await awaitable
        except (NoPendingInterrupt, RuntimeResumeFault):
            raise
        except Exception as e:
            logger.error("Runtime failed to resume thread %s: %s", thread_id, e)
            raise RuntimeResumeFault(thread_id, str(e) or type(e).__name__) from e
