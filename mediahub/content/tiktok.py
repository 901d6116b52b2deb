"""TikTok downloader backed by the RapidAPI "TikTok no watermark" service.

API: form ``POST https://{host}/`` with ``url=<tiktok link>``; the payload of
interest is under ``data``.
"""

from __future__ import annotations

import logging
from typing import Any

from mediahub.content.base import RapidAPIClient, rapidapi_config
from mediahub.errors import ContentUnavailableError, InvalidRequestError, ProviderRequestError
from mediahub.models.content import MediaItem, MusicInfo, TikTokInfo

logger = logging.getLogger(__name__)

TIKTOK_CONFIG = rapidapi_config("tiktok", "TikTok")

UNAVAILABLE = "Could not access this content. It may be private or unavailable."

# (payload field, item id, quality label, media type)
MEDIA_FIELDS = [
    ("play", 0, "No Watermark", "video"),
    ("hdplay", 1, "HD No Watermark", "video"),
    ("wmplay", 2, "With Watermark", "video"),
    ("music", 3, "Audio Only", "audio"),
]


def validate_url(url: str | None) -> str:
    if not url:
        raise InvalidRequestError("URL is required")
    if "tiktok.com" not in url:
        raise InvalidRequestError("Invalid TikTok URL")
    return url


def media_items(video: dict[str, Any]) -> list[MediaItem]:
    cover = video.get("cover") or video.get("origin_cover")
    music_cover = (video.get("music_info") or {}).get("cover")
    return [
        MediaItem(
            id=item_id,
            url=video[field],
            type=kind,
            quality=quality,
            thumbnail=music_cover if kind == "audio" else cover,
        )
        for field, item_id, quality, kind in MEDIA_FIELDS
        if video.get(field)
    ]


def parse_video(video: dict[str, Any]) -> TikTokInfo:
    author = video.get("author") or {}
    music = video.get("music_info")
    items = media_items(video)
    return TikTokInfo(
        title=video.get("title") or "TikTok Video",
        author=author.get("nickname") or author.get("unique_id") or "Unknown",
        author_avatar=author.get("avatar"),
        thumbnail=video.get("cover") or video.get("origin_cover"),
        duration=video.get("duration") or 0,
        play_count=video.get("play_count") or 0,
        like_count=video.get("digg_count") or 0,
        comment_count=video.get("comment_count") or 0,
        share_count=video.get("share_count") or 0,
        media_items=items or None,
        music_info=MusicInfo(
            title=music.get("title"),
            author=music.get("author"),
            cover=music.get("cover"),
        ) if music else None,
    )


class TikTokClient(RapidAPIClient):
    """Watermark-free TikTok video resolution."""

    config = TIKTOK_CONFIG
    host_setting = "tiktok_rapidapi_host"
    not_configured_message = "TikTok download service not configured"

    async def video(self, url: str, *, error: str = UNAVAILABLE) -> dict[str, Any] | None:
        """The ``data`` object for ``url``, or None when the service has none."""
        try:
            payload = await self._request("", method="POST", data={"url": url})
        except ProviderRequestError as e:
            logger.warning(f"TikTok lookup failed: {e.message}")
            raise ContentUnavailableError(error) from e
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
            return None
        return payload["data"]

    async def fetch_info(self, url: str) -> TikTokInfo:
        self.require_configured()
        video = await self.video(url)
        if not video:
            raise ContentUnavailableError("Could not fetch content information")
        return parse_video(video)

    async def resolve(self, url: str) -> str:
        """Best direct video URL: HD, then standard, then watermarked."""
        self.require_configured()
        video = await self.video(url, error="Could not fetch download link") or {}
        media_url = video.get("hdplay") or video.get("play") or video.get("wmplay")
        if not media_url:
            raise ContentUnavailableError("No download URL found")
        return media_url
