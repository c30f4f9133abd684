"""Pexels video search endpoints (passthrough)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from filmunity.core.dependencies import CurrentIdentity
from filmunity.services.video_search_service import VideoSearchService, get_video_search_service

router = APIRouter()

VideoSearch = Annotated[VideoSearchService, Depends(get_video_search_service)]


@router.get("/popular")
async def get_popular_videos(identity: CurrentIdentity, videos: VideoSearch):
    """Ten popular HD videos."""
    return await videos.popular()


@router.get("/search")
async def search_videos(
    identity: CurrentIdentity,
    videos: VideoSearch,
    query: str = "movies",
    per_page: int = 10,
    page: int = 1,
    orientation: str = "landscape",
    size: str = "small",
    locale: str = "es-ES",
):
    """Search videos. `per_page` must be between 1 and 80."""
    return await videos.search(
        query=query,
        per_page=per_page,
        page=page,
        orientation=orientation,
        size=size,
        locale=locale,
    )


@router.get("/videos/{video_id}")
async def get_video(video_id: str, identity: CurrentIdentity, videos: VideoSearch):
    return await videos.get_video(video_id)
