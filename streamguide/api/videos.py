"""Video metadata lookup endpoint"""

from fastapi import APIRouter, Depends, Query

from streamguide.api.dependencies import get_youtube_client
from streamguide.api.schemas import VideoDetailsResponse
from streamguide.metadata import YouTubeMetadataClient

router = APIRouter(prefix="/videos", tags=["Videos"])


@router.get("/lookup", response_model=VideoDetailsResponse)
async def lookup_video(
    url: str = Query(..., min_length=1),
    youtube: YouTubeMetadataClient = Depends(get_youtube_client),
) -> VideoDetailsResponse:
    """Fetch title, description, duration and thumbnail for a YouTube URL."""
    details = await youtube.lookup(url)
    return VideoDetailsResponse.model_validate(details)
