"""Pydantic schemas for API requests and responses"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Channel Schemas
class ChannelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    logo: str
    color: str = "#000000"
    description: Optional[str] = None


# Program Schemas
class ProgramResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Union[int, str]
    channel_id: str
    title: str
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    video_id: Optional[str] = None
    duration: int
    start_time: str
    end_time: str
    date: str


class ProgramAppend(BaseModel):
    """
    Append request. Either ``video_url`` (looked up on YouTube) or an
    explicit ``title`` + ``duration`` must be given.
    """

    video_url: Optional[str] = None
    title: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    video_id: Optional[str] = None
    thumbnail: Optional[str] = None
    confirm_overflow: bool = False

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("title must not be blank")
        return v


class ProgramUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("title must not be blank")
        return v


class ReorderRequest(BaseModel):
    program_id: Union[int, str]
    new_index: int = Field(ge=0)


class ReorderResponse(BaseModel):
    programs: list[ProgramResponse]
    changed: list[Union[int, str]]
    overflow: bool = False


class BulkDeleteRequest(BaseModel):
    ids: list[Union[int, str]] = Field(min_length=1)


class BulkDeleteResponse(BaseModel):
    deleted: int


# Day view Schemas
class DayStatsResponse(BaseModel):
    count: int
    scheduled_seconds: int
    missing_seconds: int
    is_full: bool
    fill_percent: float


class DayViewResponse(BaseModel):
    channel: ChannelResponse
    date: str
    programs: list[ProgramResponse]
    dayparts: dict[str, list[ProgramResponse]]
    active_daypart: str
    live_program_id: Optional[Union[int, str]] = None
    stats: DayStatsResponse
    tabs: list[str]


class NowPlayingResponse(BaseModel):
    current: Optional[ProgramResponse] = None
    next: Optional[ProgramResponse] = None
    offset: float = 0.0
    remaining: float = 0.0


class NowPlayingProgressEvent(NowPlayingResponse):
    """One server-sent event of the now-playing stream."""

    channel_id: Optional[str] = None
    progress: float = 0.0


# Video lookup Schemas
class VideoDetailsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    video_id: str
    title: str
    description: str
    duration: int
    thumbnail: Optional[str] = None


class ErrorResponse(BaseModel):
    detail: str
    error: str
    details: dict = Field(default_factory=dict)
