"""Social media downloader response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from mediahub.models.base import CamelModel


class ContentRequest(BaseModel):
    """Body of the POST info endpoints."""
    url: str | None = None


class MediaItem(CamelModel):
    """One downloadable file belonging to a post or video."""
    id: int
    url: str
    type: str  # video, image or audio
    thumbnail: str | None = None
    extension: str | None = None
    quality: str | None = None


class VideoFormat(CamelModel):
    quality: str
    format: str
    itag: str
    url: str | None = None


class YouTubeInfo(CamelModel):
    success: bool = True
    video_id: str
    title: str
    duration: int = 0
    thumbnail: str | None = None
    formats: list[VideoFormat] = Field(default_factory=list)
    download_url: str


class YouTubeDemoData(CamelModel):
    success: bool = True
    video_id: str
    title: str
    duration: int
    formats: list[VideoFormat]


class YouTubeDemoResponse(CamelModel):
    """Returned when no RapidAPI key is configured."""
    error: str
    is_demo: bool = True
    demo_data: YouTubeDemoData


class InstagramInfo(CamelModel):
    success: bool = True
    shortcode: str
    caption: str = "Instagram Content"
    author: str = "Unknown"
    thumbnail: str | None = None
    media_items: list[MediaItem] | None = None
    download_url: str


class MusicInfo(CamelModel):
    title: str | None = None
    author: str | None = None
    cover: str | None = None


class TikTokInfo(CamelModel):
    success: bool = True
    title: str = "TikTok Video"
    author: str = "Unknown"
    author_avatar: str | None = None
    thumbnail: str | None = None
    duration: int = 0
    play_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    share_count: int = 0
    media_items: list[MediaItem] | None = None
    music_info: MusicInfo | None = None


class EndpointDescription(CamelModel):
    """Returned by the GET download endpoints when called without a URL."""
    message: str
    methods: list[str] = Field(default_factory=lambda: ["POST", "GET"])
    description: str
    example_post: dict[str, str] | None = None
