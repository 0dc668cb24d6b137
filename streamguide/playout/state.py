"""
Program state for a channel's broadcast schedule.

A Program is the unit the scheduling core works on: split ``HH:mm`` start
and end times within a ``YYYY-MM-DD`` broadcast day, plus the exact
instants when they are known from storage.
"""

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Union

from streamguide.scheduling import timeline

ProgramId = Union[int, str]


@dataclass
class Program:
    """
    A scheduled video on a channel.

    ``starts_at``/``ends_at`` hold the absolute instants when the program
    was loaded from storage. They are preferred over the split fields for
    arithmetic since ``HH:mm`` drops seconds.
    """

    id: ProgramId
    channel_id: str
    title: str
    start_time: str  # HH:mm
    end_time: str  # HH:mm, "24:00" when running to the end of the day
    date: str  # YYYY-MM-DD broadcast day
    duration: int = 0  # seconds
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    video_id: Optional[str] = None
    starts_at: Optional[datetime] = field(default=None, compare=False)
    ends_at: Optional[datetime] = field(default=None, compare=False)

    def span(self) -> tuple[datetime, datetime]:
        """Absolute ``(start, end)`` of this program."""
        if self.starts_at is not None and self.ends_at is not None:
            return self.starts_at, self.ends_at
        return timeline.span(self.start_time, self.end_time, self.date)

    @property
    def start(self) -> datetime:
        return self.span()[0]

    @property
    def end(self) -> datetime:
        return self.span()[1]

    @property
    def length(self) -> timedelta:
        return timedelta(seconds=self.duration)

    def with_times(self, start: datetime, end: datetime) -> "Program":
        """Copy of this program moved to ``[start, end)`` in its own day."""
        return replace(
            self,
            start_time=timeline.format_time(start),
            end_time=timeline.format_end(end, self.date),
            starts_at=start,
            ends_at=end,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("starts_at")
        data.pop("ends_at")
        return data


@dataclass
class ProgramCreate:
    """A program insert request, with absolute start/end instants."""

    channel_id: str
    title: str
    duration: int
    start: datetime
    end: datetime
    description: Optional[str] = None
    video_id: Optional[str] = None
    thumbnail: Optional[str] = None


@dataclass
class ChannelInfo:
    """Read-only channel data the scheduling core needs."""

    id: str
    name: str
    slug: str
    logo: str
    color: str = "#000000"
    description: Optional[str] = None


@dataclass
class NowPlaying:
    """What a channel is broadcasting at a given instant."""

    current: Optional[Program] = None
    next: Optional[Program] = None
    offset: float = 0.0  # seconds into the current program

    @property
    def remaining(self) -> float:
        """Seconds left in the current program."""
        if self.current is None:
            return 0.0
        return max(0.0, self.current.duration - self.offset)
