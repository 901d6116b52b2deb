"""Stock photo download proxy.

Browsers cannot save cross-origin images with a chosen filename, so the
client hands us the image URL (base64, then URL-encoded) and we return the
bytes with attachment headers. Only allow-listed hosts are fetched.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from urllib.parse import quote, unquote, urlsplit

import httpx

from mediahub.content.streaming import BROWSER_USER_AGENT
from mediahub.errors import ForbiddenSourceError, InvalidRequestError, MediaHubError

logger = logging.getLogger(__name__)

# Substring checks run in order; anything else is served as JPEG
IMAGE_TYPES = [
    ("png", "image/png", "png"),
    ("webp", "image/webp", "webp"),
    ("gif", "image/gif", "gif"),
]


def decode_image_url(encoded: str | None) -> str:
    """Undo the client's ``encodeURIComponent(btoa(url))``."""
    if not encoded:
        raise InvalidRequestError("url parameter is required")
    try:
        return base64.b64decode(unquote(encoded), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        raise InvalidRequestError("Invalid URL encoding") from None


def check_host(url: str, allowed_hosts: list[str]) -> None:
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError:
        host = None
    if not host or parts.scheme not in ("http", "https") or host not in allowed_hosts:
        raise ForbiddenSourceError("Invalid image source")


def normalize_content_type(content_type: str | None) -> tuple[str, str]:
    """Map an upstream content type to ``(content_type, extension)``."""
    base = (content_type or "image/jpeg").split(";")[0].strip().lower()
    for needle, normalized, extension in IMAGE_TYPES:
        if needle in base:
            return normalized, extension
    return "image/jpeg", "jpg"


def sanitize_id(image_id: str | None) -> str:
    return re.sub(r"[^a-zA-Z0-9_-]", "", image_id or "")


def download_filename(source: str, image_id: str | None, extension: str) -> str:
    return f"{source}-{sanitize_id(image_id) or 'image'}.{extension}"


@dataclass
class ImageDownload:
    content: bytes
    content_type: str
    filename: str

    def headers(self) -> dict[str, str]:
        return {
            "Content-Disposition": (
                f"attachment; filename*=UTF-8''{quote(self.filename, safe='')}; "
                f'filename="{self.filename}"'
            ),
            "Content-Length": str(len(self.content)),
            "Cache-Control": "no-cache, no-store, must-revalidate",
            "Pragma": "no-cache",
            "Expires": "0",
            "X-Content-Type-Options": "nosniff",
        }


async def fetch_image(
    client: httpx.AsyncClient,
    encoded_url: str | None,
    *,
    image_id: str | None,
    source: str,
    allowed_hosts: list[str],
) -> ImageDownload:
    """Decode, validate and fetch an image for download.

    Raises:
        InvalidRequestError: url missing or not decodable
        ForbiddenSourceError: host outside ``allowed_hosts``
        MediaHubError: upstream answered non-2xx (same status is returned)
    """
    image_url = decode_image_url(encoded_url)
    check_host(image_url, allowed_hosts)

    try:
        response = await client.get(image_url, headers={"User-Agent": BROWSER_USER_AGENT})
    except httpx.HTTPError as e:
        logger.warning(f"Image fetch failed: {e}")
        raise MediaHubError("Failed to download image") from e

    if response.is_error:
        logger.warning(f"Image fetch returned {response.status_code}")
        raise MediaHubError("Failed to fetch image", status_code=response.status_code)

    content_type, extension = normalize_content_type(response.headers.get("content-type"))
    return ImageDownload(
        content=response.content,
        content_type=content_type,
        filename=download_filename(source, image_id, extension),
    )
