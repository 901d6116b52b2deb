"""Instagram downloader backed by a RapidAPI service.

API: ``POST https://{host}/api/instagram/links`` with ``{"url": ...}``

The service has answered in several shapes over time, all handled here::

    [{"urls": [...], "meta": {...}, "pictureUrl": ...}, ...]
    {"value": [<same items>], "Count": N}
    {"urls": [...], "author": ..., "caption": ...}
    {"url": ..., "type": ...}
"""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import quote

from mediahub.content.base import RapidAPIClient, rapidapi_config
from mediahub.errors import ContentUnavailableError, InvalidRequestError, ProviderRequestError
from mediahub.models.content import InstagramInfo, MediaItem

logger = logging.getLogger(__name__)

INSTAGRAM_CONFIG = rapidapi_config("instagram", "Instagram")

SHORTCODE_PATTERN = re.compile(r"instagram\.com/(?:p|reel|reels|tv)/([a-zA-Z0-9_-]+)")

UNAVAILABLE = "Could not access this content. It may be private or unavailable."


def validate_url(url: str | None) -> str:
    if not url:
        raise InvalidRequestError("URL is required")
    if "instagram.com" not in url:
        raise InvalidRequestError("Invalid Instagram URL")
    return url


def extract_shortcode(url: str) -> str | None:
    match = SHORTCODE_PATTERN.search(url)
    return match.group(1) if match else None


def _entry_url(entry: Any) -> str:
    """URL entries are either plain strings or ``{"url": ...}`` objects."""
    if isinstance(entry, dict):
        return entry.get("url") or ""
    return entry if isinstance(entry, str) else ""


def _item_list(data: Any) -> list[dict[str, Any]] | None:
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("value"), list):
        return data["value"]
    return None


def parse_links(data: Any) -> tuple[list[MediaItem], str, str, str | None]:
    """Normalize a links response into ``(items, author, caption, thumbnail)``."""
    items: list[MediaItem] = []
    author = "Unknown"
    caption = "Instagram Content"
    thumbnail = None

    entries = _item_list(data)
    if entries:
        for index, entry in enumerate(entries):
            picture = entry.get("pictureUrl")
            if index == 0 and entry.get("meta"):
                author = entry["meta"].get("username") or "Unknown"
                caption = entry["meta"].get("title") or "Instagram Content"
                thumbnail = picture

            for link in entry.get("urls") or []:
                url = _entry_url(link)
                extension = (link.get("extension") if isinstance(link, dict) else None) or "jpg"
                is_video = extension == "mp4" or ".mp4" in url
                items.append(
                    MediaItem(
                        id=len(items),
                        url=url,
                        type="video" if is_video else "image",
                        thumbnail=picture,
                        extension=extension,
                    )
                )
    elif isinstance(data, dict) and isinstance(data.get("urls"), list):
        for index, link in enumerate(data["urls"]):
            url = _entry_url(link)
            meta = link if isinstance(link, dict) else {}
            items.append(
                MediaItem(
                    id=index,
                    url=url,
                    type=meta.get("type") or ("video" if ".mp4" in url else "image"),
                    thumbnail=meta.get("thumbnail"),
                )
            )
        author = data.get("author") or data.get("username") or "Unknown"
        caption = data.get("caption") or data.get("title") or "Instagram Content"
    elif isinstance(data, dict) and data.get("url"):
        items.append(
            MediaItem(
                id=0,
                url=data["url"],
                type=data.get("type") or "video",
                thumbnail=data.get("thumbnail"),
            )
        )
        author = data.get("author") or data.get("username") or "Unknown"
        caption = data.get("caption") or data.get("title") or "Instagram Content"

    return items, author, caption, thumbnail


def first_download_url(data: Any) -> str | None:
    """First media URL in a links response, whatever its shape."""
    entries = _item_list(data)
    if entries:
        if entries[0].get("urls"):
            return _entry_url(entries[0]["urls"][0]) or None
        return None
    if isinstance(data, dict):
        if data.get("urls"):
            return _entry_url(data["urls"][0]) or None
        return data.get("url") or None
    return None


def download_extension(content_type: str) -> str:
    return "mp4" if "video" in content_type else "jpg"


class InstagramClient(RapidAPIClient):
    """Post, reel and IGTV link resolution."""

    config = INSTAGRAM_CONFIG
    host_setting = "instagram_rapidapi_host"
    not_configured_message = "Instagram download service not configured"

    async def links(self, url: str, *, error: str = UNAVAILABLE) -> Any:
        try:
            return await self._request(
                "api/instagram/links", method="POST", json={"url": url}
            )
        except ProviderRequestError as e:
            logger.warning(f"Instagram links failed: {e.message}")
            raise ContentUnavailableError(error) from e

    async def fetch_info(self, url: str) -> InstagramInfo:
        self.require_configured()
        shortcode = extract_shortcode(url)
        if not shortcode:
            raise InvalidRequestError(
                "Could not extract post ID from URL. Please use a direct post/reel URL."
            )

        data = await self.links(url)
        if not data:
            raise ContentUnavailableError("Could not fetch content information")

        items, author, caption, thumbnail = parse_links(data)
        return InstagramInfo(
            shortcode=shortcode,
            caption=caption,
            author=author,
            thumbnail=thumbnail,
            media_items=items or None,
            download_url=f"/api/content/instagram?url={quote(url, safe='')}",
        )

    async def resolve(self, url: str) -> str:
        """Direct URL of the first media file of a post."""
        self.require_configured()
        data = await self.links(url, error="Could not fetch download link")
        media_url = first_download_url(data)
        if not media_url:
            raise ContentUnavailableError("No download URL found")
        return media_url
