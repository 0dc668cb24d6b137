"""
Live / past / future classification of programs.

Classification works on the split ``HH:mm`` fields and whole minutes of
``now``, the same granularity the guide displays. A program is only ever
live on the day it is tagged with. A program whose end is earlier than its
start (it crosses midnight) is never classified live. It is past once
the clock passes its end minute, which on its own date is nearly all day, so
it stays fixed for reflow while it airs.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from streamguide.scheduling import timeline


class ProgramStatus(str, Enum):
    """Where a program sits relative to now."""

    PAST = "past"
    LIVE = "live"
    FUTURE = "future"


def _is_today(program: Any, now: datetime) -> bool:
    return program.date == now.date().isoformat()


def is_live(program: Any, now: datetime) -> bool:
    """True when ``now`` falls in ``[start_time, end_time)`` on the program's date."""
    if not _is_today(program, now):
        return False

    current = timeline.minutes_of(now)
    start = timeline.to_minutes(program.start_time)
    end = timeline.to_minutes(program.end_time)
    return start <= current < end


def is_past(program: Any, now: datetime) -> bool:
    """True when the program's date is today and its end time has been reached."""
    if not _is_today(program, now):
        return False
    return timeline.minutes_of(now) >= timeline.to_minutes(program.end_time)


def is_future(program: Any, now: datetime) -> bool:
    """Neither past nor live; only future programs may be moved."""
    return not (is_past(program, now) or is_live(program, now))


def is_fixed(program: Any, now: datetime) -> bool:
    """Past or live programs are fixed points for reflow."""
    return not is_future(program, now)


def classify(program: Any, now: datetime) -> ProgramStatus:
    if is_live(program, now):
        return ProgramStatus.LIVE
    if is_past(program, now):
        return ProgramStatus.PAST
    return ProgramStatus.FUTURE
