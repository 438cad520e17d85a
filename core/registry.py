"""
Run registry.

Process-wide table of in-flight stream sessions, keyed by thread ID. Callers
only see register/cancel/remove; the table itself is never exposed.
"""

import logging
import threading
from dataclasses import dataclass, field

from .cancellation import CancellationToken
from .exceptions import RunAlreadyActiveError
from .models import gen_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunHandle:
    """An in-flight run: its thread and the token that cancels it."""

    thread_id: str
    token: CancellationToken = field(default_factory=CancellationToken)
    run_id: str = field(default_factory=lambda: gen_id("run_"))


class RunRegistry:
    """
    Single-owner table of active runs.

    Every operation holds one lock, so a register racing a cancel for the same
    thread either sees the old entry or none, never a half-applied update. A
    thread can hold at most one handle; registering again while a run is
    active is refused rather than silently orphaning the earlier run.
    """

    def __init__(self) -> None:
        self._runs: dict[str, RunHandle] = {}
        self._lock = threading.Lock()

    def register(self, thread_id: str) -> CancellationToken:
        """
        Register a new run for a thread.

        Args:
            thread_id: The thread ID

        Returns:
            A fresh cancellation token for the run

        Raises:
            RunAlreadyActiveError: If the thread already has an active run
        """
        return self.register_handle(thread_id).token

    def register_handle(self, thread_id: str) -> RunHandle:
        """Like register(), but returns the whole handle."""
        with self._lock:
            if thread_id in self._runs:
                raise RunAlreadyActiveError(thread_id)
            handle = RunHandle(thread_id=thread_id)
            self._runs[thread_id] = handle
        logger.debug("Registered run %s for thread %s", handle.run_id, thread_id)
        return handle

    def cancel(self, thread_id: str, reason: str = "Cancelled by request") -> bool:
        """
        Signal and remove a thread's run.

        Returns:
            True if a run was cancelled, False if the thread had none
        """
        with self._lock:
            handle = self._runs.pop(thread_id, None)
            if handle is None:
                return False
            handle.token.cancel(reason)
        logger.info("Cancelled run %s for thread %s", handle.run_id, thread_id)
        return True

    def remove(self, thread_id: str, token: CancellationToken | None = None) -> bool:
        """
        Remove a thread's run without signaling it.

        Args:
            thread_id: The thread ID
            token: If given, only remove the entry while it still holds this
                token, so a finished run never evicts a newer one

        Returns:
            True if an entry was removed
        """
        with self._lock:
            handle = self._runs.get(thread_id)
            if handle is None:
                return False
            if token is not None and handle.token is not token:
                return False
            del self._runs[thread_id]
        logger.debug("Removed run %s for thread %s", handle.run_id, thread_id)
        return True

    def get(self, thread_id: str) -> RunHandle | None:
        with self._lock:
            return self._runs.get(thread_id)

    def is_active(self, thread_id: str) -> bool:
        with self._lock:
            return thread_id in self._runs

    def active_threads(self) -> list[str]:
        with self._lock:
            return list(self._runs)

    def __len__(self) -> int:
        with self._lock:
            return len(self._runs)
