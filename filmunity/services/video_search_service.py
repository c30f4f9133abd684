"""
Pexels video search passthrough.

Read-only proxy to the Pexels video API. Responses are returned as the
provider sends them.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from filmunity.core.config import get_settings
from filmunity.core.exceptions import InternalError, ValidationError

logger = logging.getLogger(__name__)

MIN_PER_PAGE = 1
MAX_PER_PAGE = 80


class VideoSearchService:
    """Thin async client for https://api.pexels.com/videos."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = get_settings()
        self.api_key = settings.pexels_api_key
        self.base_url = settings.pexels_base_url.rstrip("/")
        self.timeout = settings.pexels_timeout_seconds
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if not self.is_configured:
            logger.error("Pexels API key is not configured")
            raise InternalError("Video search is not available")

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Authorization": self.api_key},
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(path, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Pexels returned {e.response.status_code} for {path}")
            raise InternalError("Failed to fetch videos")
        except httpx.HTTPError as e:
            logger.error(f"Pexels request to {path} failed: {type(e).__name__}: {e}")
            raise InternalError("Failed to fetch videos")

    async def popular(self) -> Dict[str, Any]:
        return await self._get(
            "/popular",
            params={"per_page": 10, "min_width": 1280, "min_height": 720},
        )

    async def search(
        self,
        query: str = "movies",
        per_page: int = 10,
        page: int = 1,
        orientation: str = "landscape",
        size: str = "small",
        locale: str = "es-ES",
    ) -> Dict[str, Any]:
        if not MIN_PER_PAGE <= per_page <= MAX_PER_PAGE:
            raise ValidationError(f"per_page must be between {MIN_PER_PAGE} and {MAX_PER_PAGE}")
        if page < 1:
            raise ValidationError("page must be 1 or greater")

        return await self._get(
            "/search",
            params={
                "query": query or "movies",
                "per_page": per_page,
                "page": page,
                "orientation": orientation,
                "size": size,
                "locale": locale,
            },
        )

    async def get_video(self, video_id: str) -> Dict[str, Any]:
        return await self._get(f"/videos/{video_id}")


def get_video_search_service() -> VideoSearchService:
    return VideoSearchService()
