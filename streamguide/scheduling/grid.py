"""
Day-window queries and daypart grouping for the guide.

Two views of "the programs of a day" exist:

- ``programs_for_date``: programs tagged with the date (admin view).
- ``overlaps_date`` + ``clip_to_date``: programs whose real interval
  intersects the day, with display times clipped to ``00:00``/``24:00``
  (viewer grid). Clipping is a display transform and never written back.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List

from streamguide.scheduling import timeline

if TYPE_CHECKING:
    from streamguide.playout.state import Program


class Daypart(str, Enum):
    """Fixed hour-range buckets, in broadcast order."""

    NIGHT = "night"  # 00:00 - 05:59
    MORNING = "morning"  # 06:00 - 11:59
    AFTERNOON = "afternoon"  # 12:00 - 17:59
    EVENING = "evening"  # 18:00 - 23:59


def daypart_for_hour(hour: int) -> Daypart:
    if hour < 6:
        return Daypart.NIGHT
    if hour < 12:
        return Daypart.MORNING
    if hour < 18:
        return Daypart.AFTERNOON
    return Daypart.EVENING


@dataclass
class DaypartGroups:
    """Programs of one day partitioned by daypart."""

    night: List["Program"] = field(default_factory=list)
    morning: List["Program"] = field(default_factory=list)
    afternoon: List["Program"] = field(default_factory=list)
    evening: List["Program"] = field(default_factory=list)

    def bucket(self, part: Daypart) -> List["Program"]:
        return getattr(self, part.value)

    def items(self) -> list[tuple[Daypart, List["Program"]]]:
        return [(part, self.bucket(part)) for part in Daypart]

    def __len__(self) -> int:
        return sum(len(bucket) for _, bucket in self.items())


def sort_by_start(programs: Iterable["Program"]) -> List["Program"]:
    """Stable ascending sort by ``HH:mm`` start time."""
    return sorted(programs, key=lambda p: p.start_time)


def programs_for_date(programs: Iterable["Program"], date: timeline.DateLike) -> List["Program"]:
    """Programs tagged with ``date``, stably sorted by start time."""
    wanted = timeline.format_date(date)
    return sort_by_start(p for p in programs if p.date == wanted)


def group_by_daypart(programs: Iterable["Program"]) -> DaypartGroups:
    """Partition programs by the hour of their start time."""
    groups = DaypartGroups()
    for program in programs:
        hour = timeline.to_minutes(program.start_time) // 60
        groups.bucket(daypart_for_hour(hour)).append(program)

    for part, bucket in groups.items():
        bucket.sort(key=lambda p: p.start_time)
    return groups


def overlaps_date(start: datetime, end: datetime, date: timeline.DateLike) -> bool:
    """True interval overlap of ``[start, end]`` with the day's window."""
    return start <= timeline.day_end(date) and end >= timeline.day_start(date)


def clip_to_date(program: "Program", date: timeline.DateLike) -> "Program":
    """
    Display copy of ``program`` for the grid of ``date``.

    A program that started before the day shows ``00:00`` as its start; one
    that ends after the day shows ``24:00``. The copy is re-tagged with the
    viewed date.
    """
    start, end = program.span()
    clipped = replace(program, date=timeline.format_date(date))
    if start < timeline.day_start(date):
        clipped.start_time = timeline.START_OF_DAY
    if end > timeline.day_end(date):
        clipped.end_time = timeline.END_OF_DAY
    return clipped


def window_for_date(programs: Iterable["Program"], date: timeline.DateLike) -> List["Program"]:
    """Overlap-filter and clip ``programs`` for the viewer grid of ``date``."""
    visible = [p for p in programs if overlaps_date(*p.span(), date)]
    visible.sort(key=lambda p: p.span()[0])
    return [clip_to_date(p, date) for p in visible]


def active_daypart(now: datetime, date: timeline.DateLike) -> Daypart:
    """Daypart to expand by default: the current one today, morning otherwise."""
    if timeline.format_date(date) == now.date().isoformat():
        return daypart_for_hour(now.hour)
    return Daypart.MORNING
