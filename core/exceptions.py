"""
Core domain exceptions.

These exceptions are transport-agnostic and should be caught by the server
layer to convert into appropriate HTTP responses.
"""


class CoreError(Exception):
    """Base exception for all core errors."""

    pass


class NotFoundError(CoreError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvalidOperationError(CoreError):
    """Raised when an operation cannot be performed in the current state."""

    pass


# =============================================================================
# Run Lifecycle
# =============================================================================


class RunAlreadyActiveError(InvalidOperationError):
    """Raised when a thread already has a run in flight."""

    def __init__(self, thread_id: str):
        self.thread_id = thread_id
        super().__init__(f"Thread already has an active run: {thread_id}")


class TransportUnavailable(CoreError):
    """Raised by a transport when a channel has no live recipient."""

    def __init__(self, channel: str):
        self.channel = channel
        super().__init__(f"No live recipient for channel: {channel}")


class SnapshotFault(CoreError):
    """Raised when a snapshot cannot be pulled from the runtime or processed."""

    pass


# =============================================================================
# Human-in-the-loop
# =============================================================================


class NoPendingInterrupt(NotFoundError):
    """Raised when a decision arrives for a thread that is not paused."""

    def __init__(self, thread_id: str):
        super().__init__("Pending interrupt", thread_id)
        self.thread_id = thread_id


class InvalidDecisionError(InvalidOperationError):
    """Raised when a decision payload does not fit its decision type."""

    pass


class RuntimeResumeFault(CoreError):
    """Raised when the agent runtime rejects or fails a resumption command."""

    def __init__(self, thread_id: str, reason: str):
        self.thread_id = thread_id
        self.reason = reason
        super().__init__(f"Failed to resume thread {thread_id}: {reason}")
