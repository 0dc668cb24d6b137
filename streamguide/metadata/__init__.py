"""
StreamGuide Metadata Module

Video metadata lookups for scheduling.
"""

from streamguide.metadata.youtube import (
    VideoDetails,
    YouTubeMetadataClient,
    extract_video_id,
    parse_duration,
)

__all__ = [
    "VideoDetails",
    "YouTubeMetadataClient",
    "extract_video_id",
    "parse_duration",
]
