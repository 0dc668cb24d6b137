"""
Append scheduler for a channel's broadcast day.

New programs always go at the tail of the day: immediately after the
program with the latest start time, or at 00:00 when the day is empty.
The schedule follows the previous program's end, not the wall clock.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Iterator, List, Tuple

from streamguide.errors import DayFullError, InvalidInputError
from streamguide.playout.state import Program
from streamguide.scheduling import grid, timeline

logger = logging.getLogger(__name__)


@dataclass
class AppendPlan:
    """Where a newly appended program would go."""

    date: str
    start: datetime
    end: datetime
    duration: int
    overflow: bool = False

    @property
    def start_time(self) -> str:
        return timeline.format_time(self.start)

    @property
    def end_time(self) -> str:
        return timeline.format_end(self.end, self.date)


def tail_start(day_programs: Iterable[Program], date: timeline.DateLike) -> datetime:
    """
    Instant at which the next program of ``date`` would start.

    ``day_programs`` may contain programs of other days; only those tagged
    with ``date`` are considered.
    """
    programs = grid.programs_for_date(day_programs, date)
    if not programs:
        return timeline.day_start(date)
    return programs[-1].end


def append_program(
    day_programs: Iterable[Program],
    duration: int,
    date: timeline.DateLike,
) -> AppendPlan:
    """
    Plan a program of ``duration`` seconds at the tail of ``date``.

    Args:
        day_programs: Existing programs (filtered to ``date`` here).
        duration: Length of the new program in seconds.
        date: Broadcast day to append to.

    Returns:
        AppendPlan. ``overflow`` is set when the program runs past the end
        of the day; the caller must get confirmation before persisting it.

    Raises:
        DayFullError: If the day's tail is already at or past the day end.
        InvalidInputError: If ``duration`` is negative.
    """
    if duration < 0:
        raise InvalidInputError(f"Duration must be non-negative, got {duration}")

    day = timeline.format_date(date)
    start = tail_start(day_programs, day)
    if start >= timeline.day_end(day):
        raise DayFullError(day)

    end = start + timedelta(seconds=duration)
    plan = AppendPlan(
        date=day,
        start=start,
        end=end,
        duration=duration,
        overflow=end > timeline.day_end(day),
    )

    if plan.overflow:
        logger.info(
            f"Append on {day} overflows the day: {plan.start_time}-{plan.end_time} "
            f"({duration}s)"
        )
    return plan


def fill_until(
    durations: List[int],
    start: datetime,
    until: datetime,
    offset: int = 0,
) -> Iterator[Tuple[int, datetime, datetime]]:
    """
    Tail-chain a cycling list of durations from ``start`` until ``until``.

    Yields ``(index, start, end)`` where index points into ``durations``.
    Used to seed several broadcast days from one catalog.
    """
    if not durations:
        return
    if not any(durations):
        raise InvalidInputError("Cannot fill time with zero-length programs")

    cursor = start
    index = offset % len(durations)
    while cursor < until:
        end = cursor + timedelta(seconds=durations[index])
        yield index, cursor, end
        cursor = end
        index = (index + 1) % len(durations)
