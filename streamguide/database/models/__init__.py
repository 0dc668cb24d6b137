"""
StreamGuide Database Models

SQLAlchemy models for channels and their scheduled programs.
"""

from streamguide.database.models.base import Base, TimestampMixin
from streamguide.database.models.channel import Channel
from streamguide.database.models.program import ProgramRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "Channel",
    "ProgramRecord",
]
