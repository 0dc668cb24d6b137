"""
Test Fixtures

Shared test data and mock responses.
"""

from .dates import NOW, TODAY, TOMORROW, YESTERDAY
from .factories import (
    ChannelFactory,
    ProgramFactory,
    ProgramRecordFactory,
    spans,
)

__all__ = [
    "NOW",
    "TODAY",
    "TOMORROW",
    "YESTERDAY",
    "ChannelFactory",
    "ProgramFactory",
    "ProgramRecordFactory",
    "spans",
]
