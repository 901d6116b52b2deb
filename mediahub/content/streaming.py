"""Pass-through media streaming with download headers."""

from __future__ import annotations

import logging
import re
import time
from typing import AsyncIterator
from urllib.parse import urlsplit

import httpx
from fastapi.responses import StreamingResponse

from mediahub.errors import ContentUnavailableError, InvalidRequestError

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


def is_http_url(url: str) -> bool:
    parts = urlsplit(url)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def safe_title(title: str | None, fallback: str = "youtube_video") -> str:
    """Filesystem-safe name: letters, digits and hyphens, spaces -> ``_``, max 100 chars."""
    cleaned = re.sub(r"[^a-zA-Z0-9\s-]", "", title or "")
    cleaned = re.sub(r"\s+", "_", cleaned)[:100]
    return cleaned or fallback


def timestamped_filename(prefix: str, extension: str) -> str:
    """``instagram_1700000000000.mp4`` style names."""
    return f"{prefix}_{int(time.time() * 1000)}.{extension}"


async def open_media(
    client: httpx.AsyncClient,
    url: str,
    *,
    error: str = "Failed to fetch media",
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """Start streaming ``url``; the caller owns the returned response.

    Raises:
        InvalidRequestError: ``url`` is not an http(s) URL
        ContentUnavailableError: transport failure or non-2xx upstream status
    """
    if not is_http_url(url):
        raise InvalidRequestError("Invalid media URL")

    request = client.build_request("GET", url, headers=headers)
    try:
        response = await client.send(request, stream=True)
    except httpx.HTTPError as e:
        logger.warning(f"Media fetch failed for {urlsplit(url).netloc}: {e}")
        raise ContentUnavailableError(error) from e

    if response.is_error:
        logger.warning(f"Media fetch returned {response.status_code} for {urlsplit(url).netloc}")
        await response.aclose()
        raise ContentUnavailableError(error)
    return response


async def _relay(upstream: httpx.Response) -> AsyncIterator[bytes]:
    try:
        async for chunk in upstream.aiter_bytes():
            yield chunk
    finally:
        await upstream.aclose()


def stream_download(
    upstream: httpx.Response,
    *,
    filename: str,
    media_type: str,
    forward_length: bool = False,
) -> StreamingResponse:
    """Re-stream an upstream body as an attachment."""
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}

    # Decoded chunks no longer match a compressed Content-Length
    length = upstream.headers.get("content-length")
    if forward_length and length and "content-encoding" not in upstream.headers:
        headers["Content-Length"] = length

    return StreamingResponse(_relay(upstream), media_type=media_type, headers=headers)
