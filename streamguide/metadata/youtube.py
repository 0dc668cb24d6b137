"""
YouTube Metadata Client

Looks up title, description, duration and thumbnail for a YouTube video
through the YouTube Data API v3.
"""

import logging
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import httpx

from streamguide.config import get_config
from streamguide.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

# YouTube URL patterns
URL_PATTERNS = [
    r"(?:https?://)?(?:www\.|m\.)?youtube\.com/watch\?(?:.*&)?v=([a-zA-Z0-9_-]{11})",
    r"(?:https?://)?(?:www\.)?youtu\.be/([a-zA-Z0-9_-]{11})",
    r"(?:https?://)?(?:www\.)?youtube\.com/embed/([a-zA-Z0-9_-]{11})",
    r"(?:https?://)?(?:www\.)?youtube\.com/v/([a-zA-Z0-9_-]{11})",
    r"(?:https?://)?(?:www\.)?youtube\.com/shorts/([a-zA-Z0-9_-]{11})",
]

_VIDEO_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{11}$")
_DURATION_RE = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)

# Thumbnail sizes in order of preference
THUMBNAIL_PREFERENCE = ("maxres", "high", "default")


@dataclass
class VideoDetails:
    """Metadata needed to schedule a video."""

    video_id: str
    title: str
    description: str
    duration: int  # seconds
    thumbnail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def extract_video_id(url: str) -> Optional[str]:
    """Extract the 11-character video ID from a YouTube URL or bare ID."""
    if not url:
        return None
    url = url.strip()

    for pattern in URL_PATTERNS:
        match = re.search(pattern, url)
        if match:
            return match.group(1)

    # Check if it's just a video ID
    if _VIDEO_ID_RE.match(url):
        return url

    return None


def parse_duration(value: Optional[str]) -> int:
    """
    Parse an ISO-8601 duration such as ``PT1H2M10S`` into seconds.

    Unparseable values yield 0.
    """
    match = _DURATION_RE.match(value or "")
    if not match:
        return 0
    parts = {k: int(v) if v else 0 for k, v in match.groupdict().items()}
    return parts["days"] * 86400 + parts["hours"] * 3600 + parts["minutes"] * 60 + parts["seconds"]


def pick_thumbnail(thumbnails: Dict[str, Any]) -> Optional[str]:
    for size in THUMBNAIL_PREFERENCE:
        entry = thumbnails.get(size)
        if entry and entry.get("url"):
            return entry["url"]
    return None


class YouTubeMetadataClient:
    """
    YouTube Data API client.

    ``fetch_video_details`` never raises; it logs and returns None on any
    failure. ``lookup`` is the raising variant for the API layer.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Data API key (defaults to ``youtube.api_key``)
            api_url: Videos endpoint (defaults to ``youtube.api_url``)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        yt_config = get_config().youtube
        self.api_key = api_key if api_key is not None else yt_config.api_key
        self.api_url = api_url or yt_config.api_url
        self.timeout = timeout or yt_config.timeout
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "YouTubeMetadataClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
                follow_redirects=True,
            )
        return self._http_client

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch_video_details(self, url: str) -> Optional[VideoDetails]:
        """
        Fetch metadata for a YouTube video.

        Args:
            url: Any supported YouTube URL form, or a bare video ID

        Returns:
            VideoDetails, or None if the URL is invalid, the API key is
            missing, the request fails, or the video does not exist.
        """
        video_id = extract_video_id(url)
        if not video_id:
            logger.error(f"Invalid YouTube URL: {url!r}")
            return None

        if not self.api_key:
            logger.error("YouTube API key is missing")
            return None

        params = {
            "part": "snippet,contentDetails",
            "id": video_id,
            "key": self.api_key,
        }

        try:
            client = await self._ensure_client()
            response = await client.get(self.api_url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Error fetching YouTube details for {video_id}: {e}")
            return None

        if response.is_error:
            logger.error(
                f"YouTube API error for {video_id}: {response.status_code} {response.reason_phrase}"
            )
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Malformed YouTube API response for {video_id}: {e}")
            return None

        items = data.get("items") or []
        if not items:
            logger.warning(f"YouTube video not found: {video_id}")
            return None

        item = items[0]
        snippet = item.get("snippet", {})
        content_details = item.get("contentDetails", {})

        details = VideoDetails(
            video_id=video_id,
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            duration=parse_duration(content_details.get("duration")),
            thumbnail=pick_thumbnail(snippet.get("thumbnails", {})),
        )
        logger.debug(f"Fetched YouTube details for {video_id}: {details.title!r} ({details.duration}s)")
        return details

    async def lookup(self, url: str) -> VideoDetails:
        """
        Raising variant of ``fetch_video_details``.

        Raises:
            InvalidInputError: If the URL is not a YouTube video or no API key
                is configured.
            NotFoundError: If the provider returned nothing usable.
        """
        if not extract_video_id(url):
            raise InvalidInputError("Invalid YouTube URL", {"url": url})
        if not self.api_key:
            raise InvalidInputError("YouTube API key is missing")

        details = await self.fetch_video_details(url)
        if details is None:
            raise NotFoundError("Video not found or YouTube API unavailable", {"url": url})
        return details
