"""Program API endpoints: edit and delete"""

import logging

from fastapi import APIRouter, Depends, status

from streamguide.api.channels import program_to_response
from streamguide.api.dependencies import get_schedule_service
from streamguide.api.schemas import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    ProgramResponse,
    ProgramUpdate,
)
from streamguide.services import ScheduleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/programs", tags=["Programs"])


@router.patch("/{program_id}", response_model=ProgramResponse)
async def update_program(
    program_id: int,
    body: ProgramUpdate,
    service: ScheduleService = Depends(get_schedule_service),
) -> ProgramResponse:
    """Edit a program's title and description. Timing is not editable."""
    program = await service.update(program_id, title=body.title, description=body.description)
    return program_to_response(program)


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_programs(
    body: BulkDeleteRequest,
    service: ScheduleService = Depends(get_schedule_service),
) -> BulkDeleteResponse:
    """Delete several programs. Remaining programs are not reflowed."""
    deleted = await service.delete_many(body.ids)
    return BulkDeleteResponse(deleted=deleted)


@router.delete("/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_program(
    program_id: int,
    service: ScheduleService = Depends(get_schedule_service),
) -> None:
    """Delete a program. Remaining programs are not reflowed."""
    await service.delete(program_id)
