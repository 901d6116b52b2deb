"""Upstream API providers: stock photos, design assets and movies."""

from mediahub.providers.assets import AssetProvider, merge_assets
from mediahub.providers.base import (
    APIProvider,
    ProviderAuthType,
    ProviderConfig,
    ProviderKind,
    ProviderTier,
    RateLimitInfo,
)
from mediahub.providers.cache import ResponseCache
from mediahub.providers.freepik import FreepikProvider
from mediahub.providers.iconfinder import IconfinderProvider
from mediahub.providers.openverse import OpenverseProvider
from mediahub.providers.pexels import PexelsProvider
from mediahub.providers.pixabay import PixabayProvider
from mediahub.providers.tmdb import TMDBProvider
from mediahub.providers.unsplash import UnsplashProvider

__all__ = [
    "APIProvider",
    "AssetProvider",
    "FreepikProvider",
    "IconfinderProvider",
    "OpenverseProvider",
    "PexelsProvider",
    "PixabayProvider",
    "ProviderAuthType",
    "ProviderConfig",
    "ProviderKind",
    "ProviderTier",
    "RateLimitInfo",
    "ResponseCache",
    "TMDBProvider",
    "UnsplashProvider",
    "merge_assets",
]
