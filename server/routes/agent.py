"""
Agent run endpoints: invoke, resume and cancel.
"""

import logging

from fastapi import APIRouter, HTTPException
from sse_starlette.sse import EventSourceResponse

from core import InvalidDecisionError, NoPendingInterrupt, RunAlreadyActiveError, RuntimeResumeFault

from ..requests import InvokeRequest, ResumeRequest
from ..state import require_service
from ..transport import channel_events, get_transport

logger = logging.getLogger(__name__)


router = APIRouter()


@router.post("/agent/{threadID}/invoke")
async def invoke_route(threadID: str, request: InvokeRequest) -> EventSourceResponse:
    """Start a run on a thread and stream its events via SSE until it ends."""
    service = require_service()
    transport = get_transport()
    channel = service.channel(threadID)

    # Subscribe first so no event of the run is missed
    queue = transport.subscribe(channel)
    try:
        service.invoke(threadID, request.message)
    except RunAlreadyActiveError as e:
        transport.unsubscribe(channel, queue)
        raise HTTPException(status_code=409, detail=str(e))

    return EventSourceResponse(channel_events(transport, channel, queue))


@router.post("/agent/{threadID}/resume")
async def resume_route(threadID: str, request: ResumeRequest) -> dict:
    """Apply a human decision to a paused thread."""
    service = require_service()
    try:
        await service.resume(threadID, request)
    except NoPendingInterrupt as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidDecisionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeResumeFault as e:
        logger.warning("Resume failed for thread %s: %s", threadID, e)
        raise HTTPException(status_code=502, detail=str(e))
    return {"success": True}


@router.post("/agent/{threadID}/cancel")
async def cancel_route(threadID: str) -> bool:
    """Cancel a thread's active run. Returns False if nothing was running."""
    return require_service().cancel(threadID)
