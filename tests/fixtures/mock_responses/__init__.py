"""
Mock API Responses

Pre-defined mock responses for external service testing.
"""

from .youtube_responses import (
    YOUTUBE_EMPTY_RESPONSE,
    YOUTUBE_VIDEO_RESPONSE,
    YOUTUBE_VIDEO_NO_MAXRES_RESPONSE,
)

__all__ = [
    "YOUTUBE_EMPTY_RESPONSE",
    "YOUTUBE_VIDEO_RESPONSE",
    "YOUTUBE_VIDEO_NO_MAXRES_RESPONSE",
]
