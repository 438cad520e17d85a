"""
SSE transport.

Server-side Transport: events sent on a channel are fanned out to every
queue subscribed to that channel. The SSE routes drain those queues into
EventSourceResponse streams.
"""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

from pydantic import BaseModel

from core import TransportUnavailable, is_terminal

logger = logging.getLogger(__name__)


class SSETransport:
    """Per-channel subscriber queues holding JSON-ready event dicts."""

    def __init__(self) -> None:
        self.subscribers: dict[str, list[asyncio.Queue[dict[str, Any]]]] = {}

    async def send(self, channel: str, event: BaseModel) -> None:
        """
        Deliver an event to every subscriber of a channel.

        Raises:
            TransportUnavailable: If nobody is subscribed to the channel
        """
        queues = self.subscribers.get(channel)
        if not queues:
            logger.debug("No subscribers on %s, dropping %s event", channel, getattr(event, "type", "unknown"))
            raise TransportUnavailable(channel)
        data = event.model_dump(mode="json")
        for queue in list(queues):
            await queue.put(data)

    def subscribe(self, channel: str) -> asyncio.Queue[dict[str, Any]]:
        """
        Create a new subscription queue for a channel.

        Returns:
            A queue that will receive every event sent on the channel
        """
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.subscribers.setdefault(channel, []).append(queue)
        return queue

    def unsubscribe(self, channel: str, queue: asyncio.Queue[dict[str, Any]]) -> None:
        queues = self.subscribers.get(channel)
        if not queues:
            return
        if queue in queues:
            queues.remove(queue)
        if not queues:
            del self.subscribers[channel]

    def subscriber_count(self, channel: str) -> int:
        return len(self.subscribers.get(channel, ()))


async def channel_events(
    transport: SSETransport,
    channel: str,
    queue: asyncio.Queue[dict[str, Any]],
    follow: bool = False,
) -> AsyncGenerator[dict, None]:
    """
    Drain a subscription queue as SSE messages.

    Stops after the first terminal event unless ``follow`` is set. The queue
    is unsubscribed when the stream ends or the client goes away.
    """
    try:
        while True:
            event = await queue.get()
            yield {"event": event["type"], "data": json.dumps(event)}
            if not follow and is_terminal(event):
                return
    finally:
        transport.unsubscribe(channel, queue)


# Global transport instance
_transport: SSETransport | None = None


def get_transport() -> SSETransport:
    """Get the global SSE transport, creating it if necessary."""
    global _transport
    if _transport is None:
        _transport = SSETransport()
    return _transport
