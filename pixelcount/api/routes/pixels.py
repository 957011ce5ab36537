"""
Pixel Routes - Current total, display messages and event stream
"""

import asyncio

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from ..dependencies import get_event_sink, get_session
from ..schemas.response import PixelsResponse, RefreshResponse
from ...core.config import settings
from ...document.loader import PageLoadError
from ...document.nodes import PageNotLoadedError
from ...session.controller import PixelCountSession, QueueEventSink, SessionClosedError

router = APIRouter()


@router.get("/pixels", response_model=PixelsResponse)
async def get_pixels(session: PixelCountSession = Depends(get_session)):
    """Last total posted to the display."""
    return PixelsResponse(
        pixels=session.last_posted,
        state=session.aggregator.state.value,
        closed=session.closed,
    )


@router.post("/messages", response_model=RefreshResponse)
async def post_message(
    message: dict = Body(...),
    session: PixelCountSession = Depends(get_session),
):
    """
    Deliver a display message (`refresh` or `close`) to the session.
    """
    try:
        pixels = await session.handle_message(message)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SessionClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (PageLoadError, PageNotLoadedError) as e:
        raise HTTPException(status_code=502, detail=str(e))

    return RefreshResponse(type=message["type"], pixels=pixels)


async def event_frames(request: Request, sink: QueueEventSink, queue: asyncio.Queue, keepalive_seconds: float):
    """
    SSE frames for one subscriber until the client disconnects.

    Waits at most keepalive_seconds per message so a silent stream still
    notices a dead client and releases its queue.
    """
    try:
        while not await request.is_disconnected():
            try:
                message = await asyncio.wait_for(queue.get(), timeout=keepalive_seconds)
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
                continue
            yield f"data: {message.model_dump_json()}\n\n"
    finally:
        sink.unsubscribe(queue)


@router.get("/events")
async def stream_events(
    request: Request,
    sink: QueueEventSink = Depends(get_event_sink),
):
    """
    Server-sent events carrying `loading` and `count` messages.
    """
    queue = sink.subscribe()

    return StreamingResponse(
        event_frames(request, sink, queue, settings.event_keepalive_seconds),
        media_type="text/event-stream"
    )
