"""
Scheduling error taxonomy.

Every failure a scheduling operation can surface to an operator is one of
these. The API layer maps them to HTTP responses.
"""

from typing import Any, Optional


class ScheduleError(Exception):
    """Base class for scheduling errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DayFullError(ScheduleError):
    """The broadcast day has no remaining capacity."""

    def __init__(self, date: str, message: Optional[str] = None):
        super().__init__(message or f"Broadcast day {date} is already full", {"date": date})
        self.date = date


class OverflowWarning(ScheduleError):
    """
    An append would run past the end of the broadcast day.

    Non-fatal: the plan is attached so the caller can persist it once the
    operator confirms.
    """

    def __init__(self, plan: Any, message: Optional[str] = None):
        super().__init__(
            message or "Program runs past the end of the broadcast day (23:59)",
            {"start_time": plan.start_time, "end_time": plan.end_time},
        )
        self.plan = plan


class NotFoundError(ScheduleError):
    """A storage or provider lookup found nothing."""


class InvalidInputError(ScheduleError):
    """Input could not be parsed or is not allowed."""


class StorageError(ScheduleError):
    """
    Storage collaborator failure.

    For bulk writes, ``failed_ids`` lists the records that could not be
    written.
    """

    def __init__(
        self,
        message: str,
        failed_ids: Optional[list[Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, {"failed_ids": list(failed_ids or [])})
        self.failed_ids = list(failed_ids or [])
        self.original_error = original_error


__all__ = [
    "ScheduleError",
    "DayFullError",
    "OverflowWarning",
    "NotFoundError",
    "InvalidInputError",
    "StorageError",
]
