"""Freepik API provider (vectors, illustrations, templates).

API Documentation: https://docs.freepik.com/

Authentication: ``x-freepik-api-key`` header
"""

from __future__ import annotations

from typing import Any

from mediahub.models.asset import Asset, AssetType
from mediahub.providers.assets import AssetProvider
from mediahub.providers.base import ProviderAuthType, ProviderConfig, ProviderKind

FREEPIK_CONFIG = ProviderConfig(
    id="freepik",
    name="Freepik",
    kind=ProviderKind.ASSETS,
    base_url="https://api.freepik.com/v1/",
    auth_type=ProviderAuthType.HEADER,
    auth_param="x-freepik-api-key",
    api_key_setting="freepik_api_key",
    rate_limit_window=86400,
    rate_limit_requests=100,
    cache_duration=3600,
    requires_attribution=True,
    attribution_template="Designed by {author} / Freepik",
)


def _tag_name(tag: Any) -> str:
    return tag if isinstance(tag, str) else (tag or {}).get("name", "")


class FreepikProvider(AssetProvider):
    """Freepik resources search."""

    config = FREEPIK_CONFIG
    supported_types = frozenset(
        {AssetType.ALL, AssetType.VECTOR, AssetType.ILLUSTRATION, AssetType.TEMPLATE}
    )

    def _parse_resource(self, item: dict[str, Any], *, title: str, type_name: str) -> Asset:
        thumbnails = item.get("thumbnails") or {}
        image = item.get("image")
        if isinstance(image, dict):
            image = (image.get("source") or {}).get("url")

        return Asset(
            id=f"freepik-{item['id']}",
            title=item.get("title") or title,
            description=item.get("description") or f"{type_name} design asset",
            type=item.get("resource_type") or type_name,
            thumbnail=thumbnails.get("original") or image or "",
            preview=image or thumbnails.get("original") or "",
            author=(item.get("author") or {}).get("name") or "Freepik Creator",
            downloads=item.get("download_count") or 0,
            tags=[n for n in (_tag_name(t) for t in item.get("tags") or []) if n],
            formats=["png", "eps", "svg"],
            source="freepik",
            source_url=item.get("url") or "",
            source_id=item["id"],
            is_premium=bool(item.get("is_premium")),
            rating=item.get("rating") or 0,
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

        params = {"query": query, "type": asset_type.value, "page": page, "limit": per_page}

        async def fetch() -> list[dict[str, Any]]:
            data = await self._request(
                "resources", params=params, headers={"Accept": "application/json"}
            )
            return [
                self._parse_resource(item, title=query, type_name=asset_type.value).model_dump()
                for item in data.get("data", [])
            ]

        cached = await self.cached("search", params, fetch)
        return [Asset.model_validate(a) for a in cached]

    async def _fetch_asset(self, source_id: str) -> Asset | None:
        data = await self._request(
            f"resources/{source_id}", headers={"Accept": "application/json"}
        )
        item = data.get("data") or data
        if not item.get("id"):
            return None
        asset = self._parse_resource(item, title="Design Asset", type_name="design")
        asset.category = "Design"
        asset.license = (item.get("licenses") or [{}])[0].get("type") or "Freepik License"
        return asset

    async def _fetch_download_url(self, source_id: str, fmt: str) -> str | None:
        data = await self._request(
            f"resources/{source_id}/download", headers={"Accept": "application/json"}
        )
        return (data.get("data") or {}).get("url")
