"""Pixabay API provider.

API Documentation: https://pixabay.com/api/docs/

Rate Limits:
- 100 requests per 60 seconds (default)
- Must cache results for 24 hours
- No permanent hotlinking

Authentication: API key as query parameter
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from mediahub.errors import MediaHubError
from mediahub.models.asset import Asset, AssetType
from mediahub.providers.assets import AssetProvider
from mediahub.providers.base import ProviderAuthType, ProviderConfig, ProviderKind

logger = logging.getLogger(__name__)


PIXABAY_CONFIG = ProviderConfig(
    id="pixabay",
    name="Pixabay",
    kind=ProviderKind.ASSETS,
    base_url="https://pixabay.com/api/",
    auth_type=ProviderAuthType.QUERY_PARAM,
    auth_param="key",
    api_key_setting="pixabay_api_key",
    rate_limit_window=60,
    rate_limit_requests=100,
    cache_duration=86400,  # 24 hours required by Pixabay
    attribution_template="Image from Pixabay",
)


PIXABAY_CATEGORIES = [
    "backgrounds", "fashion", "nature", "science", "education", "feelings",
    "health", "people", "religion", "places", "animals", "industry", "computer",
    "food", "sports", "transportation", "travel", "buildings", "business", "music",
]

# Requested asset type -> Pixabay image_type values to query
IMAGE_TYPES: dict[AssetType, list[str]] = {
    AssetType.ALL: ["vector", "illustration", "photo"],
    AssetType.VECTOR: ["vector"],
    AssetType.ILLUSTRATION: ["illustration"],
    AssetType.PHOTO: ["photo"],
    AssetType.TEMPLATE: ["photo"],
}


def split_tags(tags: str | None) -> list[str]:
    return [t.strip() for t in (tags or "").split(",") if t.strip()]


class PixabayProvider(AssetProvider):
    """Vectors, illustrations and photos from Pixabay."""

    config = PIXABAY_CONFIG
    supported_types = frozenset(
        {AssetType.ALL, AssetType.VECTOR, AssetType.ILLUSTRATION, AssetType.PHOTO}
    )

    def _parse_hit(self, hit: dict[str, Any], query: str, image_type: str) -> Asset:
        return Asset(
            id=f"pixabay-{hit['id']}",
            title=query,
            description=f"{image_type} asset",
            type=image_type,
            thumbnail=hit.get("previewURL", ""),
            preview=hit.get("largeImageURL", ""),
            author=hit.get("user"),
            downloads=hit.get("downloads") or 0,
            tags=split_tags(hit.get("tags")),
            formats=["jpg", "png"],
            source="pixabay",
            source_url=hit.get("pageURL", ""),
            source_id=hit["id"],
        )

    async def _search_type(
        self,
        query: str,
        image_type: str,
        page: int,
        per_page: int,
        category: str | None,
    ) -> list[Asset]:
        params: dict[str, Any] = {
            "q": query[:100],  # Max 100 chars
            "image_type": image_type,
            "page": page,
            "per_page": min(max(per_page, 3), 200),  # 3-200
            "order": "popular",
        }
        if category and category in PIXABAY_CATEGORIES:
            params["category"] = category

        async def fetch() -> list[dict[str, Any]]:
            data = await self._request("", params=params)
            return [self._parse_hit(h, query, image_type).model_dump() for h in data.get("hits", [])]

        cached = await self.cached("search", params, fetch)
        return [Asset.model_validate(a) for a in cached]

    async def search(
        self,
        query: str,
        asset_type: AssetType = AssetType.ALL,
        *,
        page: int = 1,
        per_page: int = 20,
        category: str | None = None,
    ) -> list[Asset]:
        """Search Pixabay once per image type the requested asset type covers.

        A failing image type is skipped; the others still contribute.
        """
        self.require_configured()

        image_types = IMAGE_TYPES.get(asset_type, IMAGE_TYPES[AssetType.ALL])
        batches = await asyncio.gather(
            *(self._search_type(query, t, page, per_page, category) for t in image_types),
            return_exceptions=True,
        )

        results: list[Asset] = []
        for image_type, batch in zip(image_types, batches):
            if isinstance(batch, MediaHubError):
                logger.warning(f"Pixabay {image_type} search failed: {batch}")
                continue
            if isinstance(batch, BaseException):
                raise batch
            results.extend(batch)
        return results

    async def _lookup(self, source_id: str) -> dict[str, Any] | None:
        data = await self._request("", params={"id": source_id})
        hits = data.get("hits") or []
        return hits[0] if hits else None

    async def _fetch_asset(self, source_id: str) -> Asset | None:
        item = await self._lookup(source_id)
        if item is None:
            return None

        return Asset(
            id=f"pixabay-{item['id']}",
            title="Design Asset",
            description="High-quality design asset from Pixabay",
            type=item.get("type", "photo"),
            thumbnail=item.get("previewURL", ""),
            preview=item.get("largeImageURL", ""),
            # imageURL needs full API access
            full=item.get("imageURL") or item.get("largeImageURL"),
            author=item.get("user"),
            downloads=item.get("downloads") or 0,
            tags=split_tags(item.get("tags")),
            formats=["jpg", "png"],
            source="pixabay",
            source_url=item.get("pageURL", ""),
            source_id=item["id"],
            width=item.get("imageWidth"),
            height=item.get("imageHeight"),
            category="Design",
            license="Pixabay License",
        )

    async def _fetch_download_url(self, source_id: str, fmt: str) -> str | None:
        item = await self._lookup(source_id)
        if item is None:
            return None
        return item.get("imageURL") or item.get("largeImageURL")
