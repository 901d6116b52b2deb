"""Unsplash API provider.

API Documentation: https://unsplash.com/documentation

Rate Limits:
- Demo mode: 50 requests per hour
- Production mode: 5,000 requests per hour (after approval)
- Headers: X-Ratelimit-Limit, X-Ratelimit-Remaining

Authentication: Client-ID header (Authorization: Client-ID ACCESS_KEY)

Attribution Required:
- Must credit photographer and Unsplash
- Downloads must be reported through the download_location endpoint
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
    ProviderTier,
)

logger = logging.getLogger(__name__)


UNSPLASH_CONFIG = ProviderConfig(
    id="unsplash",
    name="Unsplash",
    kind=ProviderKind.PHOTOS,
    base_url="https://api.unsplash.com/",
    auth_type=ProviderAuthType.HEADER,
    auth_param="Authorization",
    auth_prefix="Client-ID ",
    api_key_setting="unsplash_access_key",
    rate_limit_window=3600,
    rate_limit_requests=50,  # Demo mode
    cache_duration=3600,
    requires_attribution=True,
    attribution_template="Photo by {author} on Unsplash",
    tier=ProviderTier.RESTRICTED,
)


class UnsplashProvider(APIProvider):
    """Unsplash photo search."""

    config = UNSPLASH_CONFIG

    def _parse_photo(self, photo: dict[str, Any]) -> Photo:
        urls = photo.get("urls") or {}
        links = photo.get("links") or {}
        user = photo.get("user") or {}

        return Photo(
            id=str(photo["id"]),
            source="unsplash",
            url=urls.get("regular", ""),
            thumb=urls.get("thumb", ""),
            full=urls.get("full", ""),
            download=links.get("download", ""),
            download_location=links.get("download_location"),
            description=photo.get("description") or photo.get("alt_description") or "Untitled",
            photographer=user.get("name"),
            photographer_url=(user.get("links") or {}).get("html"),
            width=photo.get("width", 0),
            height=photo.get("height", 0),
        )

    async def search(self, query: str, *, page: int = 1, per_page: int = 20) -> PhotoPage:
        """Search photos.

        Args:
            query: Search term
            page: Page number (1-based)
            per_page: Results per page (Unsplash caps this at 30)
        """
        self.require_configured()

        params = {"query": query, "page": page, "per_page": min(per_page, 30)}

        async def fetch() -> dict[str, Any]:
            data = await self._request(
                "search/photos", params=params, headers={"Accept-Version": "v1"}
            )
            images = [self._parse_photo(p) for p in data.get("results", [])]
            return PhotoPage(
                images=images,
                total=data.get("total", 0),
                total_pages=data.get("total_pages", 0),
                current_page=page,
            ).model_dump()

        return PhotoPage.model_validate(await self.cached("search", params, fetch))

    async def get_photo(self, photo_id: str) -> Photo | None:
        try:
            data = await self._request(f"photos/{photo_id}", headers={"Accept-Version": "v1"})
        except MediaHubError as e:
            logger.warning(f"Unsplash photo {photo_id} lookup failed: {e}")
            return None
        return self._parse_photo(data)

    async def track_download(self, download_location: str) -> bool:
        """Report a download (required by the Unsplash API guidelines).

        ``download_location`` is the ``links.download_location`` URL of a photo.
        """
        try:
            await self._request(download_location, headers={"Accept-Version": "v1"})
            return True
        except MediaHubError as e:
            logger.warning(f"Unsplash download tracking failed: {e}")
            return False
