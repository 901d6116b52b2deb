"""Provider registry and unified search interface.

Owns every provider and downloader, the shared response cache and the
shared HTTP client, and implements the operations that span providers
(aggregated asset search, lookups by source id).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from mediahub.config import Settings
from mediahub.content.base import RapidAPIClient
from mediahub.content.instagram import InstagramClient
from mediahub.content.tiktok import TikTokClient
from mediahub.content.vidu import ViduClient
from mediahub.content.youtube import YouTubeClient
from mediahub.errors import ProviderNotConfiguredError
from mediahub.models.asset import Asset, AssetPage, AssetType
from mediahub.models.photo import PhotoPage
from mediahub.providers.assets import AssetProvider, merge_assets, paginate
from mediahub.providers.base import APIProvider, page_count
from mediahub.providers.cache import ResponseCache
from mediahub.providers.freepik import FreepikProvider
from mediahub.providers.iconfinder import IconfinderProvider
from mediahub.providers.openverse import OpenverseProvider
from mediahub.providers.pexels import PexelsProvider
from mediahub.providers.pixabay import PixabayProvider
from mediahub.providers.tmdb import TMDBProvider
from mediahub.providers.unsplash import UnsplashProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Registry of all upstream services.

    Provides:
    - One instance per provider sharing a cache and an HTTP client
    - Aggregated asset search across design asset providers
    - Provider introspection and cache management
    """

    PROVIDER_CLASSES: dict[str, type[APIProvider]] = {
        "unsplash": UnsplashProvider,
        "pexels": PexelsProvider,
        "pixabay": PixabayProvider,
        "openverse": OpenverseProvider,
        "iconfinder": IconfinderProvider,
        "freepik": FreepikProvider,
        "tmdb": TMDBProvider,
        "youtube": YouTubeClient,
        "instagram": InstagramClient,
        "tiktok": TikTokClient,
        "vidu": ViduClient,
    }

    # Asset providers in merge order
    ASSET_PROVIDERS = ["pixabay", "openverse", "iconfinder", "freepik"]

    def __init__(
        self,
        settings: Settings,
        cache: ResponseCache | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize registry.

        Args:
            settings: API keys and tunables
            cache: Shared response cache (created from settings when omitted)
            client: Shared HTTP client; created and owned here when omitted
        """
        self.settings = settings
        if cache is None and settings.cache_enabled:
            cache = ResponseCache(max_size=settings.cache_max_size)
        self.cache = cache

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=settings.request_timeout,
            follow_redirects=True,
        )

        self._providers: dict[str, APIProvider] = {
            provider_id: provider_class(settings, cache=self.cache, client=self.client)
            for provider_id, provider_class in self.PROVIDER_CLASSES.items()
        }

    def get(self, provider_id: str) -> APIProvider | None:
        return self._providers.get(provider_id)

    def __getitem__(self, provider_id: str) -> APIProvider:
        return self._providers[provider_id]

    def list_providers(self) -> list[str]:
        return list(self._providers)

    def info(self) -> list[dict[str, Any]]:
        """Public provider descriptions (no API keys)."""
        return [p.info() for p in self._providers.values()]

    # --- Typed accessors ---

    @property
    def unsplash(self) -> UnsplashProvider:
        return self._providers["unsplash"]  # type: ignore[return-value]

    @property
    def pexels(self) -> PexelsProvider:
        return self._providers["pexels"]  # type: ignore[return-value]

    @property
    def tmdb(self) -> TMDBProvider:
        return self._providers["tmdb"]  # type: ignore[return-value]

    @property
    def youtube(self) -> YouTubeClient:
        return self._providers["youtube"]  # type: ignore[return-value]

    @property
    def instagram(self) -> InstagramClient:
        return self._providers["instagram"]  # type: ignore[return-value]

    @property
    def tiktok(self) -> TikTokClient:
        return self._providers["tiktok"]  # type: ignore[return-value]

    @property
    def vidu(self) -> ViduClient:
        return self._providers["vidu"]  # type: ignore[return-value]

    def downloader(self, platform: str) -> RapidAPIClient | None:
        provider = self._providers.get(platform)
        return provider if isinstance(provider, RapidAPIClient) else None

    def asset_provider(self, source: str) -> AssetProvider | None:
        provider = self._providers.get(source)
        return provider if isinstance(provider, AssetProvider) else None

    # --- Photos ---

    async def search_photos(
        self,
        query: str,
        *,
        source: str = "unsplash",
        page: int = 1,
        per_page: int = 20,
    ) -> PhotoPage:
        """Search Pexels when asked for it, Unsplash otherwise."""
        provider = self.pexels if source == "pexels" else self.unsplash
        return await provider.search(query, page=page, per_page=per_page)

    # --- Design assets ---

    async def search_assets(
        self,
        query: str,
        asset_type: AssetType = AssetType.ALL,
        *,
        page: int = 1,
        per_page: int = 20,
        category: str | None = None,
    ) -> AssetPage:
        """Search all asset providers concurrently and merge the results.

        Raises:
            ProviderNotConfiguredError: neither Pixabay nor Freepik has a key
        """
        if not (self["pixabay"].is_configured or self["freepik"].is_configured):
            raise ProviderNotConfiguredError("No API keys configured for asset search")

        participants: list[AssetProvider] = []
        for provider_id in self.ASSET_PROVIDERS:
            provider = self.asset_provider(provider_id)
            if provider and provider.is_configured and provider.supports(asset_type):
                participants.append(provider)

        results = await asyncio.gather(
            *(
                p.search(query, asset_type, page=page, per_page=per_page, category=category)
                for p in participants
            ),
            return_exceptions=True,
        )

        batches: list[list[Asset]] = []
        for provider, result in zip(participants, results):
            if isinstance(result, Exception):
                logger.warning(f"{provider.id} asset search failed: {result}")
                continue
            if isinstance(result, BaseException):
                raise result
            batches.append(result)

        merged = merge_assets(batches)
        total = len(merged)
        return AssetPage(
            assets=paginate(merged, page, per_page),
            total=total,
            page=page,
            per_page=per_page,
            total_pages=page_count(total, per_page),
            query=query,
            type=asset_type,
        )

    async def asset_details(self, source: str, asset_id: str) -> Asset | None:
        provider = self.asset_provider(source)
        if provider is None:
            return None
        return await provider.get_asset(asset_id)

    async def asset_download_url(self, source: str, asset_id: str, fmt: str = "jpg") -> str | None:
        provider = self.asset_provider(source)
        if provider is None:
            return None
        return await provider.download_url(asset_id, fmt)

    # --- Cache ---

    def cache_stats(self) -> dict[str, Any]:
        if self.cache is None:
            return {"enabled": False}
        return {"enabled": True, **self.cache.stats()}

    def clear_cache(self, provider_id: str | None = None) -> int:
        """Clear cache for a provider or all providers; returns entries removed."""
        if self.cache is None:
            return 0
        return self.cache.clear(provider_id)

    async def close(self) -> None:
        """Close all provider connections."""
        for provider in self._providers.values():
            await provider.close()
        if self._owns_client:
            await self.client.aclose()
