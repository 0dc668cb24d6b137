"""Viewer guide API endpoint"""

from typing import Optional

from fastapi import APIRouter, Depends

from streamguide.api.channels import program_to_response
from streamguide.api.dependencies import get_schedule_service
from streamguide.api.schemas import ProgramResponse
from streamguide.services import ScheduleService

router = APIRouter(prefix="/guide", tags=["Guide"])


@router.get("/{date}", response_model=list[ProgramResponse])
async def get_guide(
    date: str,
    channel_id: Optional[str] = None,
    service: ScheduleService = Depends(get_schedule_service),
) -> list[ProgramResponse]:
    """
    Programs overlapping a day, across all channels unless one is given.

    Programs that cross midnight show 00:00 / 24:00 at the day's edges.
    """
    programs = await service.guide(date, channel_id)
    return [program_to_response(p) for p in programs]
