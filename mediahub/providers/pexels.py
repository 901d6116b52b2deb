"""Pexels API provider.

API Documentation: https://www.pexels.com/api/documentation/

Rate Limits:
- 200 requests per hour (default)
- 20,000 requests per month

Authentication: API key in Authorization header

Attribution Required:
- Must show "Photos provided by Pexels" with link
- Credit photographers when possible
"""

from __future__ import annotations

import logging
from typing import Any

from mediahub.errors import MediaHubError
from mediahub.models.photo import Photo, PhotoPage
from mediahub.providers.base import (
    APIProvider,
    ProviderAuthType,
    ProviderConfig,
    ProviderKind,
    page_count,
)

logger = logging.getLogger(__name__)


PEXELS_CONFIG = ProviderConfig(
    id="pexels",
    name="Pexels",
    kind=ProviderKind.PHOTOS,
    base_url="https://api.pexels.com/",
    auth_type=ProviderAuthType.HEADER,
    auth_param="Authorization",
    api_key_setting="pexels_api_key",
    rate_limit_window=3600,
    rate_limit_requests=200,
    cache_duration=3600,
    requires_attribution=True,
    attribution_template="Photo by {author} on Pexels",
)


class PexelsProvider(APIProvider):
    """Pexels photo search and curated listing."""

    config = PEXELS_CONFIG

    def _parse_photo(self, photo: dict[str, Any]) -> Photo:
        src = photo.get("src") or {}

        return Photo(
            id=str(photo["id"]),
            source="pexels",
            url=src.get("large", ""),
            thumb=src.get("medium", ""),
            full=src.get("original", ""),
            download=src.get("original", ""),
            description=photo.get("alt") or "Untitled",
            photographer=photo.get("photographer"),
            photographer_url=photo.get("photographer_url"),
            width=photo.get("width", 0),
            height=photo.get("height", 0),
        )

    def _parse_page(self, data: dict[str, Any], page: int, per_page: int) -> PhotoPage:
        total = data.get("total_results", 0)
        return PhotoPage(
            images=[self._parse_photo(p) for p in data.get("photos", [])],
            total=total,
            total_pages=page_count(total, per_page),
            current_page=page,
        )

    async def search(self, query: str, *, page: int = 1, per_page: int = 20) -> PhotoPage:
        """Search photos.

        Args:
            query: Search term
            page: Page number (1-based)
            per_page: Results per page (max 80)
        """
        self.require_configured()

        params = {"query": query, "page": page, "per_page": min(per_page, 80)}

        data = await self.cached("search", params, lambda: self._request("v1/search", params=params))
        return self._parse_page(data, page, per_page)

    async def curated(self, *, page: int = 1, per_page: int = 20) -> PhotoPage:
        """Curated photos (editor's picks, updated hourly)."""
        self.require_configured()

        params = {"page": page, "per_page": min(per_page, 80)}

        data = await self.cached("curated", params, lambda: self._request("v1/curated", params=params))
        return self._parse_page(data, page, per_page)

    async def get_photo(self, photo_id: str) -> Photo | None:
        try:
            data = await self._request(f"v1/photos/{photo_id}")
        except MediaHubError as e:
            logger.warning(f"Pexels photo {photo_id} lookup failed: {e}")
            return None
        return self._parse_photo(data)
