"""YouTube downloader backed by the RapidAPI "YouTube Media Downloader" service.

API: ``GET https://{host}/v2/video/details?videoId=<id>``
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from mediahub.content.base import RapidAPIClient, rapidapi_config
from mediahub.content.streaming import safe_title
from mediahub.errors import (
    ContentUnavailableError,
    InvalidRequestError,
    ProviderRequestError,
)
from mediahub.models.content import VideoFormat, YouTubeDemoData, YouTubeDemoResponse, YouTubeInfo

logger = logging.getLogger(__name__)

YOUTUBE_CONFIG = rapidapi_config("youtube", "YouTube")

VIDEO_ID_PATTERN = re.compile(
    r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/shorts/)([a-zA-Z0-9_-]+)"
)

AUDIO_ITAG = "251"

DEMO_FORMATS = [
    VideoFormat(quality="4K (2160p)", format="mp4", itag="313"),
    VideoFormat(quality="1440p (2K)", format="mp4", itag="271"),
    VideoFormat(quality="1080p (Full HD)", format="mp4", itag="18"),
    VideoFormat(quality="720p (HD)", format="mp4", itag="22"),
    VideoFormat(quality="480p (SD)", format="mp4", itag="135"),
]

FALLBACK_FORMATS = [
    VideoFormat(quality="720p", format="mp4", itag="22"),
    VideoFormat(quality="Audio Only", format="mp3", itag=AUDIO_ITAG),
]

UNAVAILABLE = "Could not access this video. It may be private, age-restricted, or unavailable."


def validate_url(url: str | None) -> str:
    if not url:
        raise InvalidRequestError("URL is required")
    if "youtube" not in url and "youtu.be" not in url:
        raise InvalidRequestError("Invalid YouTube URL")
    return url


def extract_video_id(url: str) -> str | None:
    match = VIDEO_ID_PATTERN.search(url)
    return match.group(1) if match else None


def _items(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    items = (data.get(key) or {}).get("items")
    return items if isinstance(items, list) else []


def parse_formats(data: dict[str, Any]) -> list[VideoFormat]:
    """Video formats with a quality label, then one "Audio Only" entry."""
    formats = [
        VideoFormat(
            quality=str(video.get("qualityLabel") or video.get("quality")),
            format=video.get("extension") or "mp4",
            itag=str(video.get("itag") or video.get("id") or ""),
            url=video.get("url"),
        )
        for video in _items(data, "videos")
        if video.get("quality") or video.get("qualityLabel")
    ]

    audios = _items(data, "audios")
    if audios:
        audio = audios[0]
        formats.append(
            VideoFormat(
                quality="Audio Only",
                format=audio.get("extension") or "mp3",
                itag=str(audio.get("itag") or AUDIO_ITAG),
                url=audio.get("url"),
            )
        )
    return formats or list(FALLBACK_FORMATS)


def download_path(url: str) -> str:
    """Relative link to the streaming endpoint for ``url``."""
    return f"/api/content/youtube?url={quote(url, safe='')}"


@dataclass
class ResolvedMedia:
    """A direct media URL picked for download."""
    url: str
    extension: str
    filename: str

    @property
    def fallback_content_type(self) -> str:
        return "audio/mpeg" if self.extension == "mp3" else "video/mp4"


def select_format(data: dict[str, Any], itag: str | None) -> tuple[str | None, str]:
    """Pick ``(url, extension)`` for ``itag``.

    Lookup order: matching video, matching audio (itag 251 falls back to the
    first audio), then the first video.
    """
    wanted = str(itag)
    videos = _items(data, "videos")
    audios = _items(data, "audios")

    for video in videos:
        if str(video.get("itag")) == wanted and video.get("url"):
            return video["url"], video.get("extension") or "mp4"

    if audios:
        for audio in audios:
            if str(audio.get("itag")) == wanted and audio.get("url"):
                return audio["url"], audio.get("extension") or "mp3"
        if itag == AUDIO_ITAG and audios[0].get("url"):
            return audios[0]["url"], audios[0].get("extension") or "mp3"

    if videos and videos[0].get("url"):
        return videos[0]["url"], videos[0].get("extension") or "mp4"
    return None, "mp4"


class YouTubeClient(RapidAPIClient):
    """Video info and format resolution for YouTube links."""

    config = YOUTUBE_CONFIG
    host_setting = "rapidapi_host"
    not_configured_message = "YouTube download service not configured"

    def demo_response(self) -> YouTubeDemoResponse:
        """Canned answer served when no RapidAPI key is configured."""
        return YouTubeDemoResponse(
            error="YouTube download service not configured. Please add RAPIDAPI_KEY to the environment",
            demo_data=YouTubeDemoData(
                video_id="dQw4w9WgXcQ",
                title="YouTube Video Title",
                duration=213,
                formats=list(DEMO_FORMATS),
            ),
        )

    async def video_details(self, video_id: str, *, error: str = UNAVAILABLE) -> dict[str, Any]:
        try:
            data = await self._request("v2/video/details", params={"videoId": video_id})
        except ProviderRequestError as e:
            logger.warning(f"YouTube details failed for {video_id}: {e.message}")
            raise ContentUnavailableError(error) from e
        return data if isinstance(data, dict) else {}

    async def fetch_info(self, url: str) -> YouTubeInfo:
        self.require_configured()
        video_id = extract_video_id(url)
        if not video_id:
            raise InvalidRequestError("Could not extract video ID from URL")

        data = await self.video_details(video_id)
        if data.get("errorId") != "Success" or not data.get("title"):
            raise ContentUnavailableError("Could not fetch video information")

        thumbnails = data.get("thumbnails") or []
        return YouTubeInfo(
            video_id=data.get("id") or video_id,
            title=data["title"],
            duration=data.get("lengthSeconds") or 0,
            thumbnail=thumbnails[-1].get("url") if thumbnails else None,
            formats=parse_formats(data),
            download_url=download_path(url),
        )

    async def resolve(self, url: str, itag: str | None) -> ResolvedMedia:
        """Resolve the direct media URL for ``url`` in format ``itag``."""
        self.require_configured()
        video_id = extract_video_id(url)
        if not video_id:
            raise InvalidRequestError("Could not extract video ID")

        data = await self.video_details(video_id, error="Could not fetch download link")
        if data.get("errorId") != "Success":
            raise ContentUnavailableError("No download formats available")

        media_url, extension = select_format(data, itag)
        if not media_url:
            raise ContentUnavailableError("Download URL not found for selected format")

        return ResolvedMedia(
            url=media_url,
            extension=extension,
            filename=f"{safe_title(data.get('title'))}.{extension}",
        )
