"""OpenVerse API provider (Creative Commons images).

API Documentation: https://api.openverse.org/v1/

Anonymous access is allowed; anonymous requests may ask for at most
20 results per page.
"""

from __future__ import annotations

from typing import Any

from mediahub.models.asset import Asset, AssetType
from mediahub.providers.assets import AssetProvider
from mediahub.providers.base import ProviderConfig, ProviderKind

OPENVERSE_CONFIG = ProviderConfig(
    id="openverse",
    name="OpenVerse",
    kind=ProviderKind.ASSETS,
    base_url="https://api.openverse.org/v1/",
    rate_limit_window=3600,
    rate_limit_requests=200,
    cache_duration=3600,
    requires_attribution=True,
    attribution_template="{title} by {author}, licensed under {license}",
)

ANONYMOUS_PAGE_SIZE = 20


class OpenverseProvider(AssetProvider):
    """Creative Commons photos and illustrations from OpenVerse."""

    config = OPENVERSE_CONFIG
    supported_types = frozenset({AssetType.ALL, AssetType.PHOTO, AssetType.ILLUSTRATION})

    def _parse_item(
        self,
        item: dict[str, Any],
        *,
        title: str,
        description: str,
        full: str | None = None,
        category: str | None = None,
    ) -> Asset:
        return Asset(
            id=f"openverse-{item['id']}",
            title=item.get("title") or title,
            description=item.get("description") or description,
            type="photo",
            thumbnail=item.get("thumbnail") or "",
            preview=item.get("url") or "",
            full=full,
            author=item.get("creator"),
            downloads=item.get("download_count") or 0,
            tags=[t["name"] for t in item.get("tags") or [] if t.get("name")],
            formats=["jpg", "png"],
            source="openverse",
            source_url=item.get("url") or "",
            source_id=item["id"],
            license=item.get("license") or "CC0",
            category=category,
        )

    async def search(
        self,
        query: str,
        asset_type: AssetType = AssetType.ALL,
        *,
        page: int = 1,
        per_page: int = 20,
        category: str | None = None,
    ) -> list[Asset]:
        params = {"q": query, "page": page, "page_size": min(per_page, ANONYMOUS_PAGE_SIZE)}

        async def fetch() -> list[dict[str, Any]]:
            data = await self._request("images/", params=params)
            return [
                self._parse_item(item, title=query, description="Design asset").model_dump()
                for item in data.get("results", [])
            ]

        cached = await self.cached("search", params, fetch)
        return [Asset.model_validate(a) for a in cached]

    async def _fetch_asset(self, source_id: str) -> Asset | None:
        item = await self._request(f"images/{source_id}/")
        return self._parse_item(
            item,
            title="Design Asset",
            description="Creative Commons licensed asset",
            full=item.get("url"),
            category="Photo",
        )

    async def _fetch_download_url(self, source_id: str, fmt: str) -> str | None:
        item = await self._request(f"images/{source_id}/")
        return item.get("url")
