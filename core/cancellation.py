"""
Cooperative cancellation for streaming runs.

A token is created by the run registry for each run and checked by the
stream session between snapshots. Signaling never interrupts work already
in progress.
"""

import threading


class CancellationToken:
    """
    One-shot cancellation flag shared by a run and whoever may cancel it.

    Examples:
        >>> token = CancellationToken()
        >>> token.cancel("User cancelled")
        >>> token.is_cancelled()
        True
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: str | None = None

    def cancel(self, reason: str = "Run cancelled") -> None:
        """Signal cancellation. Later calls keep the first reason."""
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        """Reason given to the first cancel() call, if any."""
        return self._reason

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled()})"
