"""
StreamGuide Database Module

Provides SQLAlchemy models, sessions, and the program store.
"""

from streamguide.database.connection import (
    close_db,
    create_session_factory,
    get_db,
    get_session,
    get_sync_session,
    init_db,
    init_sync_db,
)
from streamguide.database.models import (
    Base,
    Channel,
    ProgramRecord,
    TimestampMixin,
)
from streamguide.database.store import ProgramStore, channel_to_info, record_to_program

__all__ = [
    # Connection
    "close_db",
    "create_session_factory",
    "get_db",
    "get_session",
    "get_sync_session",
    "init_db",
    "init_sync_db",
    # Models
    "Base",
    "Channel",
    "ProgramRecord",
    "TimestampMixin",
    # Store
    "ProgramStore",
    "channel_to_info",
    "record_to_program",
]
