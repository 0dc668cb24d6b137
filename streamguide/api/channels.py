"""Channel API endpoints: day views, appends, fillers and reorders"""

import asyncio
import logging
from typing import Any, AsyncIterator, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from streamguide.api.dependencies import get_schedule_service, get_youtube_client
from streamguide.api.schemas import (
    ChannelResponse,
    DayViewResponse,
    NowPlayingProgressEvent,
    NowPlayingResponse,
    ProgramAppend,
    ProgramResponse,
    ReorderRequest,
    ReorderResponse,
)
from streamguide.config import get_config
from streamguide.metadata import YouTubeMetadataClient
from streamguide.playout.state import NowPlaying, Program
from streamguide.services import DayView, NowPlayingMonitor, ProgressSnapshot, ScheduleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/channels", tags=["Channels"])


def program_to_response(program: Program) -> ProgramResponse:
    return ProgramResponse.model_validate(program)


def day_view_to_response(view: DayView) -> dict[str, Any]:
    """Convert a DayView to the response dictionary."""
    return {
        "channel": ChannelResponse.model_validate(view.channel),
        "date": view.date,
        "programs": [program_to_response(p) for p in view.programs],
        "dayparts": {
            part.value: [program_to_response(p) for p in bucket]
            for part, bucket in view.groups.items()
        },
        "active_daypart": view.active_daypart.value,
        "live_program_id": view.live_program_id,
        "stats": {
            "count": view.stats.count,
            "scheduled_seconds": view.stats.scheduled_seconds,
            "missing_seconds": view.stats.missing_seconds,
            "is_full": view.stats.is_full,
            "fill_percent": view.stats.fill_percent,
        },
        "tabs": view.tabs,
    }


def now_playing_to_response(playing: NowPlaying) -> dict[str, Any]:
    return {
        "current": program_to_response(playing.current) if playing.current else None,
        "next": program_to_response(playing.next) if playing.next else None,
        "offset": playing.offset,
        "remaining": playing.remaining,
    }


@router.get("", response_model=list[ChannelResponse])
async def get_all_channels(
    service: ScheduleService = Depends(get_schedule_service),
) -> list[ChannelResponse]:
    """Get all channels"""
    channels = await service.list_channels()
    return [ChannelResponse.model_validate(c) for c in channels]


@router.get("/{channel_id}/programs", response_model=list[ProgramResponse])
async def get_channel_programs(
    channel_id: str,
    service: ScheduleService = Depends(get_schedule_service),
) -> list[ProgramResponse]:
    """Programs of a channel from the trailing history window onward."""
    programs = await service.channel_programs(channel_id)
    return [program_to_response(p) for p in programs]


@router.get("/{channel_id}/days/{date}", response_model=DayViewResponse)
async def get_day(
    channel_id: str,
    date: str,
    service: ScheduleService = Depends(get_schedule_service),
) -> dict[str, Any]:
    """Admin view of one broadcast day.

    Args:
        channel_id: Channel slug
        date: Broadcast day (YYYY-MM-DD)

    Returns:
        DayViewResponse: Programs, daypart groups, live program and totals
    """
    view = await service.day_view(channel_id, date)
    return day_view_to_response(view)


@router.post(
    "/{channel_id}/days/{date}/programs",
    response_model=ProgramResponse,
    status_code=status.HTTP_201_CREATED,
)
async def append_program(
    channel_id: str,
    date: str,
    body: ProgramAppend,
    service: ScheduleService = Depends(get_schedule_service),
    youtube: YouTubeMetadataClient = Depends(get_youtube_client),
) -> ProgramResponse:
    """Append a video at the tail of the day.

    Responds 409 with the planned times when the video would run past the
    end of the day, unless ``confirm_overflow`` is set.
    """
    title = body.title
    duration = body.duration
    description = body.description
    video_id = body.video_id
    thumbnail = body.thumbnail

    if body.video_url:
        details = await youtube.lookup(body.video_url)
        title = title or details.title
        duration = duration if duration is not None else details.duration
        description = description if description is not None else details.description
        video_id = video_id or details.video_id
        thumbnail = thumbnail or details.thumbnail

    if not title or duration is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Either video_url or title and duration are required",
        )

    program = await service.append(
        channel_id,
        date,
        title=title,
        duration=duration,
        description=description,
        video_id=video_id,
        thumbnail=thumbnail,
        confirm_overflow=body.confirm_overflow,
    )
    return program_to_response(program)


@router.post(
    "/{channel_id}/days/{date}/filler",
    response_model=ProgramResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_filler(
    channel_id: str,
    date: str,
    service: ScheduleService = Depends(get_schedule_service),
) -> ProgramResponse:
    """Fill the rest of the day up to 24:00 with the filler video."""
    program = await service.add_filler(channel_id, date)
    return program_to_response(program)


@router.post("/{channel_id}/days/{date}/reorder", response_model=ReorderResponse)
async def reorder_day(
    channel_id: str,
    date: str,
    body: ReorderRequest,
    service: ScheduleService = Depends(get_schedule_service),
) -> dict[str, Any]:
    """Move one program to a new position and reflow the day."""
    result = await service.reorder(channel_id, date, body.program_id, body.new_index)
    return {
        "programs": [program_to_response(p) for p in result.updated],
        "changed": [p.id for p in result.changed],
        "overflow": result.overflow,
    }


@router.get("/{channel_id}/now", response_model=NowPlayingResponse)
async def get_now_playing(
    channel_id: str,
    service: ScheduleService = Depends(get_schedule_service),
) -> dict[str, Any]:
    """What the channel is broadcasting right now, and what comes next."""
    playing = await service.now_playing(channel_id)
    return now_playing_to_response(playing)


def snapshot_to_event(snapshot: ProgressSnapshot) -> str:
    event = NowPlayingProgressEvent(
        channel_id=snapshot.channel_id,
        current=program_to_response(snapshot.current) if snapshot.current else None,
        next=program_to_response(snapshot.next) if snapshot.next else None,
        offset=snapshot.offset,
        remaining=snapshot.remaining,
        progress=snapshot.progress,
    )
    return f"data: {event.model_dump_json()}\n\n"


@router.get("/{channel_id}/now/stream")
async def stream_now_playing(
    channel_id: str,
    events: Optional[int] = Query(None, ge=1, description="Close the stream after this many events"),
    service: ScheduleService = Depends(get_schedule_service),
) -> StreamingResponse:
    """Stream playback progress of the channel's live program (SSE).

    Storage is re-queried every ``guide.poll_interval_seconds``; between
    polls the progress advances locally every ``guide.tick_seconds``.
    """
    await service.store.get_channel(channel_id)

    guide = get_config().guide
    monitor = NowPlayingMonitor(
        service.store.get_current_program,
        clock=service.clock,
        poll_interval=guide.poll_interval_seconds,
        tick_interval=guide.tick_seconds,
    )
    monitor.switch_channel(channel_id)
    await monitor.start()

    async def progress_generator() -> AsyncIterator[str]:
        sent = 0
        try:
            while True:
                yield snapshot_to_event(monitor.snapshot())
                sent += 1
                if events is not None and sent >= events:
                    break
                await asyncio.sleep(monitor.tick_interval)
        finally:
            await monitor.stop()

    return StreamingResponse(progress_generator(), media_type="text/event-stream")
