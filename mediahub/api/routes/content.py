"""Social media downloaders.

Each platform has ``POST /api/content/<platform>`` (info and formats) and
``GET /api/content/<platform>`` (stream the media as an attachment).
"""

from __future__ import annotations

import logging
from typing import Annotated, Awaitable, TypeVar

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse, Response

from mediahub.api.deps import Registry
from mediahub.content import instagram, tiktok, youtube
from mediahub.content.streaming import open_media, stream_download, timestamped_filename
from mediahub.errors import MediaHubError
from mediahub.models.content import (
    ContentRequest,
    EndpointDescription,
    InstagramInfo,
    TikTokInfo,
    YouTubeDemoResponse,
    YouTubeInfo,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/content", tags=["content"])

T = TypeVar("T")

INFO_FAILED = "Failed to fetch content information. Please try again."
DOWNLOAD_FAILED = "Failed to download content"


async def _guarded(awaitable: Awaitable[T], message: str) -> T:
    """Await, turning unexpected exceptions into a 500 with ``message``."""
    try:
        return await awaitable
    except MediaHubError:
        raise
    except Exception as e:
        logger.error(f"{message}: {e}", exc_info=True)
        raise MediaHubError(message) from e


def _describe(platform: str, description: str, example: dict[str, str] | None = None) -> JSONResponse:
    info = EndpointDescription(
        message=f"{platform} download API endpoint",
        description=description,
        example_post=example,
    )
    return JSONResponse(info.model_dump(by_alias=True, exclude_none=True))


def _url(body: ContentRequest | None) -> str | None:
    return body.url if body else None


# --- YouTube ---


@router.post("/youtube")
async def youtube_info(
    registry: Registry, body: ContentRequest | None = None
) -> YouTubeInfo | YouTubeDemoResponse:
    url = youtube.validate_url(_url(body))
    client = registry.youtube
    if not client.is_configured:
        return client.demo_response()
    return await _guarded(client.fetch_info(url), "Failed to fetch video information. Please try again.")


@router.get("/youtube", response_model=None)
async def youtube_download(
    registry: Registry,
    url: str | None = None,
    itag: str | None = None,
) -> Response:
    if not url:
        return _describe(
            "YouTube",
            "POST: Get video info and available formats. GET: Download video",
            {"url": "https://www.youtube.com/watch?v=..."},
        )
    youtube.validate_url(url)

    async def download() -> Response:
        media = await registry.youtube.resolve(url, itag)
        upstream = await open_media(registry.client, media.url, error="Failed to fetch video file")
        return stream_download(
            upstream,
            filename=media.filename,
            media_type=upstream.headers.get("content-type") or media.fallback_content_type,
            forward_length=True,
        )

    return await _guarded(download(), "Failed to download video")


# --- Instagram ---


@router.post("/instagram", response_model=InstagramInfo)
async def instagram_info(registry: Registry, body: ContentRequest | None = None) -> InstagramInfo:
    url = instagram.validate_url(_url(body))
    return await _guarded(registry.instagram.fetch_info(url), INFO_FAILED)


@router.get("/instagram", response_model=None)
async def instagram_download(
    registry: Registry,
    url: str | None = None,
    media_url: Annotated[str | None, Query(alias="mediaUrl")] = None,
) -> Response:
    if not url and not media_url:
        return _describe("Instagram", "POST: Get content info. GET: Download media")

    async def download() -> Response:
        if media_url:
            upstream = await open_media(registry.client, media_url, error="Failed to fetch media")
        else:
            instagram.validate_url(url)
            resolved = await registry.instagram.resolve(url)
            upstream = await open_media(registry.client, resolved, error="Failed to fetch media file")

        content_type = upstream.headers.get("content-type") or "video/mp4"
        filename = timestamped_filename("instagram", instagram.download_extension(content_type))
        return stream_download(upstream, filename=filename, media_type=content_type)

    return await _guarded(download(), DOWNLOAD_FAILED)


# --- TikTok ---


@router.post("/tiktok", response_model=TikTokInfo)
async def tiktok_info(registry: Registry, body: ContentRequest | None = None) -> TikTokInfo:
    url = tiktok.validate_url(_url(body))
    return await _guarded(registry.tiktok.fetch_info(url), INFO_FAILED)


@router.get("/tiktok", response_model=None)
async def tiktok_download(
    registry: Registry,
    url: str | None = None,
    media_url: Annotated[str | None, Query(alias="mediaUrl")] = None,
    media_type: Annotated[str, Query(alias="type")] = "video",
) -> Response:
    if not url and not media_url:
        return _describe("TikTok", "POST: Get content info. GET: Download media")

    async def download() -> Response:
        if media_url:
            upstream = await open_media(registry.client, media_url, error="Failed to fetch media")
            is_audio = media_type == "audio"
            return stream_download(
                upstream,
                filename=timestamped_filename("tiktok", "mp3" if is_audio else "mp4"),
                media_type="audio/mpeg" if is_audio else "video/mp4",
            )

        tiktok.validate_url(url)
        resolved = await registry.tiktok.resolve(url)
        upstream = await open_media(registry.client, resolved, error="Failed to fetch media file")
        return stream_download(
            upstream,
            filename=timestamped_filename("tiktok", "mp4"),
            media_type="video/mp4",
        )

    return await _guarded(download(), DOWNLOAD_FAILED)
