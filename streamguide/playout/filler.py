"""
Filler content for the unused tail of a broadcast day.

A filler is a single program, sized to run from the day's tail to exactly
24:00, built from a fixed preset (a long timer video by default).
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from streamguide.errors import DayFullError
from streamguide.playout.scheduler import tail_start
from streamguide.playout.state import Program, ProgramCreate
from streamguide.scheduling import timeline

logger = logging.getLogger(__name__)


@dataclass
class FillerPreset:
    """Metadata stamped on every generated filler program."""

    title: str = "Schedule Filler (Timer)"
    description: str = "Automatically added filler video."
    video_id: str = "ILzo07ipH40"
    thumbnail: Optional[str] = "https://img.youtube.com/vi/ILzo07ipH40/hqdefault.jpg"


@dataclass
class FillerPlan:
    """The computed filler slot for a day."""

    date: str
    start: datetime
    end: datetime
    duration: int

    @property
    def start_time(self) -> str:
        return timeline.format_time(self.start)

    @property
    def end_time(self) -> str:
        return timeline.format_end(self.end, self.date)

    def to_create(self, channel_id: str, preset: FillerPreset) -> ProgramCreate:
        return ProgramCreate(
            channel_id=channel_id,
            title=preset.title,
            description=preset.description,
            video_id=preset.video_id,
            thumbnail=preset.thumbnail,
            duration=self.duration,
            start=self.start,
            end=self.end,
        )


def remaining_seconds(start: datetime, date: timeline.DateLike) -> int:
    """Whole seconds from ``start`` to the end of the broadcast day."""
    return math.ceil((timeline.day_end(date) - start).total_seconds())


def compute_filler(day_programs: Iterable[Program], date: timeline.DateLike) -> FillerPlan:
    """
    Compute a filler that exactly consumes the rest of ``date``.

    Raises:
        DayFullError: If no time remains after the day's last program.
    """
    day = timeline.format_date(date)
    start = tail_start(day_programs, day)
    duration = remaining_seconds(start, day)
    if duration <= 0:
        raise DayFullError(day)

    plan = FillerPlan(
        date=day,
        start=start,
        end=start + timedelta(seconds=duration),
        duration=duration,
    )
    logger.debug(f"Filler for {day}: {plan.start_time}-{plan.end_time} ({duration}s)")
    return plan
