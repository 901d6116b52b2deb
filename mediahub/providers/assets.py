"""Shared behaviour of design asset providers and result merging."""

from __future__ import annotations

import logging
from typing import Iterable

from mediahub.errors import MediaHubError
from mediahub.models.asset import Asset, AssetType
from mediahub.providers.base import APIProvider

logger = logging.getLogger(__name__)


class AssetProvider(APIProvider):
    """A provider that contributes to the aggregated asset search.

    Subclasses implement ``search``, ``_fetch_asset`` and ``_fetch_download_url``.
    Lookups return ``None`` on any upstream failure so a single broken
    provider never turns into a server error.
    """

    # Asset types this provider is queried for
    supported_types: frozenset[AssetType] = frozenset()

    def supports(self, asset_type: AssetType) -> bool:
        return asset_type in self.supported_types

    async def search(
        self,
        query: str,
        asset_type: AssetType = AssetType.ALL,
        *,
        page: int = 1,
        per_page: int = 20,
        category: str | None = None,
    ) -> list[Asset]:
        raise NotImplementedError

    def strip_prefix(self, asset_id: str) -> str:
        """Accept both ``"123"`` and the unified ``"pixabay-123"`` form."""
        prefix = f"{self.id}-"
        return asset_id[len(prefix):] if asset_id.startswith(prefix) else asset_id

    async def get_asset(self, asset_id: str) -> Asset | None:
        source_id = self.strip_prefix(asset_id)
        try:
            return await self._fetch_asset(source_id)
        except MediaHubError as e:
            logger.warning(f"{self.config.name} details error for {source_id}: {e}")
            return None
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"{self.config.name} returned a malformed asset {source_id}: {e!r}")
            return None

    async def download_url(self, asset_id: str, fmt: str = "jpg") -> str | None:
        source_id = self.strip_prefix(asset_id)
        try:
            return await self._fetch_download_url(source_id, fmt)
        except MediaHubError as e:
            logger.warning(f"{self.config.name} download error for {source_id}: {e}")
            return None
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"{self.config.name} returned a malformed download for {source_id}: {e!r}")
            return None

    async def _fetch_asset(self, source_id: str) -> Asset | None:
        raise NotImplementedError

    async def _fetch_download_url(self, source_id: str, fmt: str) -> str | None:
        raise NotImplementedError


def merge_assets(batches: Iterable[list[Asset]]) -> list[Asset]:
    """Combine provider results into one ranked list.

    Duplicate ids collapse into one entry that keeps the position of the
    first occurrence and the data of the last one. The result is ordered by
    downloads, most popular first; ties keep provider order.
    """
    unique: dict[str, Asset] = {}
    for batch in batches:
        for asset in batch:
            unique[asset.id] = asset

    return sorted(unique.values(), key=lambda a: a.downloads or 0, reverse=True)


def paginate(items: list[Asset], page: int, per_page: int) -> list[Asset]:
    start = (page - 1) * per_page
    return items[start:start + per_page]
