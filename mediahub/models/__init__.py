"""Data models for MediaHub."""

from mediahub.models.asset import Asset, AssetDetailResponse, AssetPage, AssetType
from mediahub.models.content import (
    ContentRequest,
    InstagramInfo,
    MediaItem,
    MusicInfo,
    TikTokInfo,
    VideoFormat,
    YouTubeInfo,
)
from mediahub.models.movie import Movie, MoviePage
from mediahub.models.photo import Photo, PhotoPage

__all__ = [
    "Asset",
    "AssetDetailResponse",
    "AssetPage",
    "AssetType",
    "ContentRequest",
    "InstagramInfo",
    "MediaItem",
    "Movie",
    "MoviePage",
    "MusicInfo",
    "Photo",
    "PhotoPage",
    "TikTokInfo",
    "VideoFormat",
    "YouTubeInfo",
]
