"""IconFinder API provider (SVG icons).

API Documentation: https://developer.iconfinder.com/reference/overview-1

Authentication: Bearer token
"""

from __future__ import annotations

from typing import Any

from mediahub.models.asset import Asset, AssetType
from mediahub.providers.assets import AssetProvider
from mediahub.providers.base import ProviderAuthType, ProviderConfig, ProviderKind

ICONFINDER_CONFIG = ProviderConfig(
    id="iconfinder",
    name="IconFinder",
    kind=ProviderKind.ASSETS,
    base_url="https://api.iconfinder.com/v4/",
    auth_type=ProviderAuthType.BEARER,
    api_key_setting="iconfinder_api_key",
    rate_limit_window=3600,
    rate_limit_requests=1000,
    cache_duration=86400,
)


def _first_preview(sizes: list[dict[str, Any]] | None) -> str:
    """``preview_url`` of the first format of the first size, or ``""``."""
    if not sizes:
        return ""
    formats = sizes[0].get("formats") or []
    return (formats[0].get("preview_url") or "") if formats else ""


class IconfinderProvider(AssetProvider):
    """SVG icon search on IconFinder."""

    config = ICONFINDER_CONFIG
    supported_types = frozenset({AssetType.ALL, AssetType.VECTOR})

    def _parse_icon(self, item: dict[str, Any], *, title: str, description: str) -> Asset:
        tags = item.get("tags") or []
        return Asset(
            id=f"iconfinder-{item['icon_id']}",
            title=tags[0] if tags else title,
            description=description,
            type="vector",
            thumbnail=_first_preview(item.get("raster_sizes")),
            preview=_first_preview(item.get("vector_sizes")),
            author=(item.get("creator") or {}).get("name") or "IconFinder",
            downloads=0,
            tags=tags,
            formats=["svg", "eps"],
            source="iconfinder",
            source_url=(item.get("urls") or {}).get("page", ""),
            source_id=item["icon_id"],
            is_premium=item.get("is_premium", item.get("premium")),
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
        self.require_configured()

        params = {"query": query, "count": per_page, "offset": (page - 1) * per_page}

        async def fetch() -> list[dict[str, Any]]:
            data = await self._request("icons/search", params=params)
            return [
                self._parse_icon(icon, title=query, description="SVG icon vector").model_dump()
                for icon in data.get("icons", [])
            ]

        cached = await self.cached("search", params, fetch)
        return [Asset.model_validate(a) for a in cached]

    async def _fetch_asset(self, source_id: str) -> Asset | None:
        item = await self._request(f"icons/{source_id}")
        asset = self._parse_icon(item, title="SVG Icon", description="High-quality SVG icon vector")
        asset.category = "Vector"
        asset.license = "Various"
        return asset

    async def _fetch_download_url(self, source_id: str, fmt: str) -> str | None:
        data = await self._request(f"icons/{source_id}/download")
        formats = data.get("formats") or []
        for entry in formats:
            if entry.get("format") == fmt and entry.get("download_url"):
                return entry["download_url"]
        return formats[0].get("download_url") if formats else None
