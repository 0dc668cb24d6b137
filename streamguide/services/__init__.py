"""StreamGuide services."""

from streamguide.services.now_playing import NowPlayingMonitor, ProgressSnapshot, QueryGeneration
from streamguide.services.schedule_service import DayStats, DayView, ScheduleService

__all__ = [
    "DayStats",
    "DayView",
    "NowPlayingMonitor",
    "ProgressSnapshot",
    "QueryGeneration",
    "ScheduleService",
]
