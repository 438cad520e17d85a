"""
Stream session.

A StreamSession owns one run of the agent on one thread: it pulls snapshots
from the runtime, turns them into events and pushes those to the transport
until the run ends with exactly one terminal event.
"""

import logging
import time
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .cancellation import CancellationToken
from .dedup import DedupTracker
from .exceptions import SnapshotFault, TransportUnavailable
from .extractors import extract_events
from .models import DoneEvent, ErrorEvent, MessageEvent
from .registry import RunRegistry
from .runtime import AgentRuntime
from .transport import Transport

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Lifecycle of a stream session."""

    STREAMING = "streaming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ERRORED = "errored"
    ABORTED = "aborted"  # transport went away, nothing left to send to


def _error_message(error: BaseException) -> str:
    return str(error) or type(error).__name__


class StreamSession:
    """
    One cancellable run of the agent on a thread.

    Snapshots are handled strictly one after another. The cancellation token
    is checked each time a snapshot arrives; a signaled token stops the
    session before that snapshot is processed, never in the middle of one.
    """

    def __init__(
        self,
        thread_id: str,
        message: str | None,
        runtime: AgentRuntime,
        transport: Transport,
        registry: RunRegistry,
        token: CancellationToken,
        channel: str,
        default_path: str | None = None,
    ):
        """
        Initialize the session.

        Args:
            thread_id: Thread the run belongs to
            message: Initial user message, or None to continue from the
                runtime's checkpoint
            runtime: Agent runtime to pull snapshots from
            transport: Transport to push events to
            registry: Registry holding this run's handle
            token: This run's cancellation token
            channel: Channel name events are sent on
            default_path: Workspace path used when snapshots name none
        """
        self.thread_id = thread_id
        self.message = message
        self.runtime = runtime
        self.transport = transport
        self.registry = registry
        self.token = token
        self.channel = channel
        self.default_path = default_path
        self.tracker = DedupTracker()
        self.state = SessionState.STREAMING
        self.events_sent = 0

    async def run(self) -> SessionState:
        """
        Stream the run to completion.

        The registry entry is always removed, whichever way the run ends, and
        before the terminal event goes out so the thread can be invoked again
        as soon as a consumer sees Done or Error.

        Returns:
            The final session state
        """
        start = time.perf_counter()
        logger.info("Stream started for thread %s on %s", self.thread_id, self.channel)
        try:
            terminal = await self._stream()
            self._release()
            await self._send(terminal)
        except TransportUnavailable as e:
            self.state = SessionState.ABORTED
            logger.warning("Stream aborted for thread %s: %s", self.thread_id, e)
        finally:
            self._release()

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Stream %s for thread %s: %d events (%.1fms)",
            self.state.value,
            self.thread_id,
            self.events_sent,
            duration_ms,
        )
        return self.state

    async def _stream(self) -> BaseModel:
        """Pull and process snapshots; return the terminal event to send."""
        if self.token.is_cancelled():
            return self._cancelled()

        snapshots = None
        interrupted = False
        try:
            snapshots = self.runtime.stream(
                self.message,
                thread_id=self.thread_id,
                cancellation_token=self.token,
            )
            async for snapshot in snapshots:
                if self.token.is_cancelled():
                    interrupted = True
                    break
                await self._process(snapshot)
        except TransportUnavailable:
            raise
        except Exception as e:
            logger.exception("Error during agent streaming for thread %s", self.thread_id)
            self.state = SessionState.ERRORED
            return ErrorEvent(message=_error_message(e))
        finally:
            await self._close(snapshots)

        # A signal that arrives after the last snapshot does not undo a completed run
        if interrupted:
            return self._cancelled()
        self.state = SessionState.COMPLETED
        return DoneEvent(result=None, reason="completed")

    def _cancelled(self) -> DoneEvent:
        logger.info("Stream cancelled for thread %s: %s", self.thread_id, self.token.reason)
        self.state = SessionState.CANCELLED
        return DoneEvent(result=None, reason="cancelled")

    async def _process(self, snapshot: Any) -> None:
        try:
            events = extract_events(snapshot, self.tracker, self.default_path)
        except Exception as e:
            raise SnapshotFault(f"Failed to process snapshot: {_error_message(e)}") from e

        for event in events:
            if isinstance(event, MessageEvent) and not self.tracker.record(event.message.id):
                continue
            await self._send(event)

    async def _send(self, event: BaseModel) -> None:
        try:
            await self.transport.send(self.channel, event)
        except TransportUnavailable:
            raise
        except Exception:
            logger.warning(
                "Failed to deliver %s event on %s",
                getattr(event, "type", "unknown"),
                self.channel,
                exc_info=True,
            )
            return
        self.events_sent += 1

    async def _close(self, snapshots: Any) -> None:
        aclose = getattr(snapshots, "aclose", None)
        if aclose is None:
            return
        try:
            await aclose()
        except Exception:
            logger.warning("Failed to close snapshot stream for thread %s", self.thread_id, exc_info=True)

    def _release(self) -> None:
        self.registry.remove(self.thread_id, self.token)
