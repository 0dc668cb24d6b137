"""
Broadcast-day time model.

Programs carry wall-clock ``HH:mm`` strings plus a ``YYYY-MM-DD`` date. All
arithmetic here lifts those to absolute (naive, local) datetimes first and
only projects back to the split representation at the boundary, so that a
duration that rolls past midnight is never lost.

A broadcast day is the window ``[date 00:00, date+1 00:00)``. For overlap
tests the inclusive upper bound ``day_end`` (23:59:59.999) is used instead,
which is intentionally one millisecond short of the next day's start.
"""

import logging
import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from streamguide.errors import InvalidInputError

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60
SECONDS_PER_DAY = MINUTES_PER_DAY * 60

# Rendered end time for a program that runs exactly to the end of the day
END_OF_DAY = "24:00"
START_OF_DAY = "00:00"

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

DateLike = Union[str, date]


def to_minutes(value: str) -> int:
    """
    Convert ``HH:mm`` to minutes since midnight.

    ``"24:00"`` is accepted and maps to 1440.

    Raises:
        InvalidInputError: If the string is not a valid wall-clock time.
    """
    match = _TIME_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidInputError(f"Invalid time of day: {value!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes > 59 or hours > 24 or (hours == 24 and minutes != 0):
        raise InvalidInputError(f"Invalid time of day: {value!r}")

    return hours * 60 + minutes


def from_minutes(minutes: int) -> str:
    """Format minutes since midnight as zero-padded ``HH:mm`` (mod 24h)."""
    minutes = minutes % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_date(value: DateLike) -> date:
    """Parse a ``YYYY-MM-DD`` string (dates and datetimes pass through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError) as e:
        raise InvalidInputError(f"Invalid date: {value!r}") from e


def format_date(value: DateLike) -> str:
    """Format a date as ``YYYY-MM-DD``."""
    return parse_date(value).isoformat()


def day_start(value: DateLike) -> datetime:
    """Start of the broadcast day: ``date 00:00:00.000``."""
    return datetime.combine(parse_date(value), time.min)


def day_end(value: DateLike) -> datetime:
    """Inclusive end of the broadcast day: ``date 23:59:59.999``."""
    return datetime.combine(parse_date(value), time(23, 59, 59, 999000))


def next_day_start(value: DateLike) -> datetime:
    """Start of the following broadcast day."""
    return day_start(value) + timedelta(days=1)


def combine(value: DateLike, hhmm: str) -> datetime:
    """Lift a date plus ``HH:mm`` to an absolute instant."""
    return day_start(value) + timedelta(minutes=to_minutes(hhmm))


def format_time(instant: datetime) -> str:
    """Project an instant to ``HH:mm`` (seconds truncated)."""
    return f"{instant.hour:02d}:{instant.minute:02d}"


def format_end(end: datetime, owning_date: DateLike) -> str:
    """
    Project an end instant to ``HH:mm`` within its owning day.

    An end that lands exactly on the next day's midnight renders as the
    ``"24:00"`` sentinel instead of ``"00:00"``.
    """
    if end == next_day_start(owning_date):
        return END_OF_DAY
    return format_time(end)


def project(instant: datetime) -> tuple[str, str]:
    """Split an instant into ``(YYYY-MM-DD, HH:mm)``."""
    return instant.date().isoformat(), format_time(instant)


def add_seconds(hhmm: str, value: DateLike, seconds: int) -> tuple[str, int]:
    """
    Add a duration to a start time.

    Returns:
        ``(HH:mm, rollover)`` where rollover is the number of days the
        result moved past ``value``. Callers decide whether a rollover moves
        the result into the next day's grouping or is clamped.
    """
    start = combine(value, hhmm)
    end = start + timedelta(seconds=seconds)
    rollover = (end.date() - parse_date(value)).days
    return format_time(end), rollover


def span(start_hhmm: str, end_hhmm: str, value: DateLike) -> tuple[datetime, datetime]:
    """
    Absolute ``(start, end)`` for a program given as split fields.

    An end earlier than the start is taken to fall on the following day.
    """
    start = combine(value, start_hhmm)
    end = combine(value, end_hhmm)
    if end < start:
        end += timedelta(days=1)
    return start, end


def minutes_of(instant: datetime) -> int:
    """Whole minutes since midnight for an instant."""
    return instant.hour * 60 + instant.minute


def current_time(timezone: Optional[str] = None) -> datetime:
    """
    Wall-clock "now" as a naive local datetime.

    Only the outer layers call this; every core function receives ``now``
    as a parameter.
    """
    if timezone:
        try:
            return datetime.now(ZoneInfo(timezone)).replace(tzinfo=None)
        except ZoneInfoNotFoundError:
            logger.warning(f"Unknown timezone {timezone!r}, falling back to system local time")
    return datetime.now()


def date_tabs(today: DateLike, count: int = 7) -> list[str]:
    """``count`` consecutive dates starting at ``today``."""
    first = parse_date(today)
    return [(first + timedelta(days=offset)).isoformat() for offset in range(count)]


__all__ = [
    "MINUTES_PER_DAY",
    "SECONDS_PER_DAY",
    "END_OF_DAY",
    "START_OF_DAY",
    "to_minutes",
    "from_minutes",
    "parse_date",
    "format_date",
    "day_start",
    "day_end",
    "next_day_start",
    "combine",
    "format_time",
    "format_end",
    "project",
    "add_seconds",
    "span",
    "minutes_of",
    "current_time",
    "date_tabs",
]
