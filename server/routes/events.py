"""
Thread event SSE endpoint.
"""

from fastapi import APIRouter, Query
from sse_starlette.sse import EventSourceResponse

from ..state import require_service
from ..transport import channel_events, get_transport


router = APIRouter()


@router.get("/agent/{threadID}/events")
async def thread_events(threadID: str, follow: bool = Query(False)) -> EventSourceResponse:
    """
    Subscribe to a thread's events via SSE.

    The stream ends after the next Done or Error event unless ``follow`` is
    set, in which case it spans runs until the client disconnects.
    """
    service = require_service()
    transport = get_transport()
    channel = service.channel(threadID)
    queue = transport.subscribe(channel)
    return EventSourceResponse(channel_events(transport, channel, queue, follow=follow))
