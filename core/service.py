"""
Agent service.

Boundary operations of the core: invoke a run on a thread, resume a paused
thread from a decision, and cancel a run. Events for a thread are delivered
on the channel ``<prefix>:<thread_id>``.
"""

import asyncio
import logging

from config.defaults import CHANNEL_PREFIX

from .exceptions import RunAlreadyActiveError
from .models import HITLDecision
from .registry import RunRegistry
from .resumer import InterruptResumer
from .runtime import AgentRuntime
from .session import SessionState, StreamSession
from .transport import Transport

logger = logging.getLogger(__name__)


def channel_name(thread_id: str, prefix: str = CHANNEL_PREFIX) -> str:
    """Name of the event channel for a thread."""
    return f"{prefix}:{thread_id}"


class AgentService:
    """Wires the registry, sessions and resumer around one runtime and transport."""

    def __init__(
        self,
        runtime: AgentRuntime,
        transport: Transport,
        registry: RunRegistry | None = None,
        channel_prefix: str = CHANNEL_PREFIX,
        workspace_path: str | None = None,
    ):
        self.runtime = runtime
        self.transport = transport
        self.registry = registry or RunRegistry()
        self.resumer = InterruptResumer(runtime)
        self.channel_prefix = channel_prefix
        self.workspace_path = workspace_path
        self._tasks: dict[str, asyncio.Task[SessionState]] = {}

    def channel(self, thread_id: str) -> str:
        return channel_name(thread_id, self.channel_prefix)

    def invoke(self, thread_id: str, message: str | None) -> asyncio.Task[SessionState]:
        """
        Start streaming a run on a thread.

        Must be called from a running event loop. Events are emitted
        asynchronously on the thread's channel until a terminal event.

        Args:
            thread_id: The thread ID
            message: User message, or None to continue a resumed thread

        Returns:
            The task running the session

        Raises:
            RunAlreadyActiveError: If the thread already has an active run,
                including a cancelled run that has not finished yet
        """
        loop = asyncio.get_running_loop()
        previous = self._tasks.get(thread_id)
        if previous is not None and not previous.done():
            # A cancelled run still owns the thread until its session ends
            raise RunAlreadyActiveError(thread_id)
        token = self.registry.register(thread_id)
        if message is None:
            logger.info("Continuing thread %s from checkpoint", thread_id)
        else:
            logger.info("Invoke on thread %s: %s", thread_id, message[:50])

        session = StreamSession(
            thread_id=thread_id,
            message=message,
            runtime=self.runtime,
            transport=self.transport,
            registry=self.registry,
            token=token,
            channel=self.channel(thread_id),
            default_path=self.workspace_path,
        )
        task = loop.create_task(session.run())
        self._tasks[thread_id] = task
        task.add_done_callback(lambda t: self._forget(thread_id, t))
        return task

    async def resume(self, thread_id: str, decision: HITLDecision) -> None:
        """
        Issue a resumption command for a paused thread.

        Further events are streamed by a following ``invoke(thread_id, None)``.

        Raises:
            NoPendingInterrupt: If the thread is not paused
            InvalidDecisionError: If the decision payload is unusable
            RuntimeResumeFault: If the runtime fails to take the command
        """
        await self.resumer.resume(thread_id, decision)

    def cancel(self, thread_id: str) -> bool:
        """
        Cancel a thread's run. Idempotent; unknown or finished threads are a no-op.

        Returns:
            True if a run was signaled
        """
        return self.registry.cancel(thread_id)

    def is_active(self, thread_id: str) -> bool:
        """True while a run is registered or a cancelled session is still winding down."""
        task = self._tasks.get(thread_id)
        return self.registry.is_active(thread_id) or (task is not None and not task.done())

    async def wait(self, thread_id: str) -> SessionState | None:
        """Wait for a thread's current session task, if any."""
        task = self._tasks.get(thread_id)
        if task is None:
            return None
        return await task

    async def shutdown(self) -> None:
        """Cancel every active run and wait for the sessions to finish."""
        for thread_id in self.registry.active_threads():
            self.registry.cancel(thread_id, reason="Server shutting down")
        tasks = list(self._tasks.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _forget(self, thread_id: str, task: asyncio.Task[SessionState]) -> None:
        if self._tasks.get(thread_id) is task:
            del self._tasks[thread_id]
        if not task.cancelled() and task.exception() is not None:
            logger.error("Stream task for thread %s failed", thread_id, exc_info=task.exception())
