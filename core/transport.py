"""
Transport protocol.

The Transport is the abstract interface the core uses to deliver stream
events to a listener. The server layer provides an SSE-based implementation.
"""

from typing import Protocol

from pydantic import BaseModel


class Transport(Protocol):
    """Abstract interface for delivering events on a named channel."""

    async def send(self, channel: str, event: BaseModel) -> None:
        """
        Deliver an event.

        Raises:
            TransportUnavailable: If the channel has no live recipient
        """
        ...


class NullTransport:
    """No-op Transport implementation for testing."""

    async def send(self, channel: str, event: BaseModel) -> None:
        """Discard the event."""
        pass
