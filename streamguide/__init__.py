"""
StreamGuide - TV guide and channel scheduling service

- Channels broadcast a continuous, gap-free sequence of video programs
- Admin API to append, fill, reorder, edit and delete a day's programs
- Viewer API for the guide grid and the program that is live right now
"""

__version__ = "1.0.0"

from streamguide.config import get_config, load_config

__all__ = [
    "__version__",
    "get_config",
    "load_config",
]
