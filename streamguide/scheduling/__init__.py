"""
StreamGuide Scheduling Module

Time model, liveness and guide-grid queries for broadcast days.

Components:
- timeline: HH:mm / date arithmetic on absolute instants
- liveness: live / past / future classification
- grid: day-window queries and daypart grouping
"""

from . import timeline
from .liveness import ProgramStatus, classify, is_fixed, is_future, is_live, is_past
from .grid import (
    Daypart,
    DaypartGroups,
    active_daypart,
    clip_to_date,
    group_by_daypart,
    overlaps_date,
    programs_for_date,
    sort_by_start,
    window_for_date,
)

__all__ = [
    "timeline",
    # Liveness
    "ProgramStatus",
    "classify",
    "is_fixed",
    "is_future",
    "is_live",
    "is_past",
    # Grid
    "Daypart",
    "DaypartGroups",
    "active_daypart",
    "clip_to_date",
    "group_by_daypart",
    "overlaps_date",
    "programs_for_date",
    "sort_by_start",
    "window_for_date",
]
