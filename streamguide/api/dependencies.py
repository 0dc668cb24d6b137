"""FastAPI dependencies shared by the API routers"""

from datetime import datetime
from typing import AsyncGenerator, Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from streamguide.config import get_config
from streamguide.database import ProgramStore, get_db
from streamguide.metadata import YouTubeMetadataClient
from streamguide.playout.filler import FillerPreset
from streamguide.scheduling import timeline
from streamguide.services import ScheduleService

Clock = Callable[[], datetime]


def get_clock() -> Clock:
    """Wall clock in the configured guide time zone."""
    timezone = get_config().guide.timezone
    return lambda: timeline.current_time(timezone)


def get_store(db: AsyncSession = Depends(get_db)) -> ProgramStore:
    return ProgramStore(db, history_days=get_config().guide.history_days)


def get_schedule_service(
    store: ProgramStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> ScheduleService:
    config = get_config()
    return ScheduleService(
        store,
        filler_preset=FillerPreset(**config.scheduling.filler.model_dump()),
        clock=clock,
        date_tab_count=config.guide.date_tabs,
    )


async def get_youtube_client() -> AsyncGenerator[YouTubeMetadataClient, None]:
    async with YouTubeMetadataClient() as client:
        yield client
