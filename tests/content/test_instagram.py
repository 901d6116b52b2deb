"""Tests for the Instagram downloader client."""

from __future__ import annotations

import pytest

from mediahub.content.instagram import (
    download_extension,
    extract_shortcode,
    first_download_url,
    parse_links,
    validate_url,
)
from mediahub.errors import (
    ContentUnavailableError,
    InvalidRequestError,
    ProviderNotConfiguredError,
)

REEL_URL = "https://www.instagram.com/reel/Cx1abc_-9/"


class TestUrlHandling:

    @pytest.mark.parametrize(
        ("url", "shortcode"),
        [
            ("https://www.instagram.com/p/ABC123/", "ABC123"),
            ("https://instagram.com/reel/Cx1abc_-9/?igsh=1", "Cx1abc_-9"),
            ("https://www.instagram.com/reels/XyZ/", "XyZ"),
            ("https://www.instagram.com/tv/TV42/", "TV42"),
        ],
    )
    def test_extract_shortcode(self, url, shortcode):
        assert extract_shortcode(url) == shortcode

    def test_profile_url_has_no_shortcode(self):
        assert extract_shortcode("https://www.instagram.com/natgeo/") is None

    def test_validate_url(self):
        with pytest.raises(InvalidRequestError, match="URL is required"):
            validate_url(None)
        with pytest.raises(InvalidRequestError, match="Invalid Instagram URL"):
            validate_url("https://example.com/p/1")

    def test_download_extension(self):
        assert download_extension("video/mp4") == "mp4"
        assert download_extension("image/jpeg") == "jpg"


class TestParseLinks:

    def test_list_shape(self, mock_instagram_links):
        items, author, caption, thumbnail = parse_links(mock_instagram_links)

        assert author == "natgeo"
        assert caption == "Into the wild"
        assert thumbnail == "https://cdn.instagram.com/thumb.jpg"
        assert [(i.id, i.type, i.extension) for i in items] == [(0, "video", "mp4"), (1, "image", "jpg")]

    def test_value_shape(self, mock_instagram_links):
        items, author, _, _ = parse_links({"value": mock_instagram_links, "Count": 1})

        assert author == "natgeo"
        assert len(items) == 2

    def test_plain_string_urls_default_to_images(self):
        items, author, caption, _ = parse_links([{"urls": ["https://cdn.instagram.com/a.jpg"]}])

        assert items[0].type == "image"
        assert items[0].extension == "jpg"
        assert author == "Unknown"
        assert caption == "Instagram Content"

    def test_urls_object_shape(self):
        data = {
            "urls": ["https://cdn.instagram.com/a.mp4", {"url": "https://cdn.instagram.com/b.jpg", "type": "image"}],
            "username": "someone",
            "title": "A post",
        }
        items, author, caption, _ = parse_links(data)

        assert [i.type for i in items] == ["video", "image"]
        assert author == "someone"
        assert caption == "A post"

    def test_single_url_shape(self):
        items, _, _, _ = parse_links({"url": "https://cdn.instagram.com/a.mp4"})

        assert len(items) == 1
        assert items[0].type == "video"

    def test_unknown_shape(self):
        assert parse_links({"status": "fail"})[0] == []

    def test_first_download_url(self, mock_instagram_links):
        assert first_download_url(mock_instagram_links) == "https://cdn.instagram.com/reel.mp4"
        assert first_download_url({"value": []}) is None
        assert first_download_url({"urls": ["https://x.example/a.jpg"]}) == "https://x.example/a.jpg"
        assert first_download_url({"url": "https://x.example/b.mp4"}) == "https://x.example/b.mp4"
        assert first_download_url("nope") is None

    def test_first_download_url_empty_value_falls_back(self):
        data = {"value": [], "urls": [{"url": "https://x.example/c.mp4"}], "url": "https://x.example/d.mp4"}
        assert first_download_url(data) == "https://x.example/c.mp4"
        assert first_download_url({"value": [], "url": "https://x.example/d.mp4"}) == "https://x.example/d.mp4"


@pytest.mark.mock
class TestInstagramClient:

    @pytest.mark.asyncio
    async def test_info(self, registry, upstream):
        info = await registry.instagram.fetch_info(REEL_URL)

        assert info.shortcode == "Cx1abc_-9"
        assert info.author == "natgeo"
        assert len(info.media_items) == 2
        assert info.download_url.startswith("/api/content/instagram?url=https%3A%2F%2F")

        request = upstream.calls("instagram120.p.rapidapi.com", "/api/instagram/links")[0]
        assert request.method == "POST"
        assert request.headers["x-rapidapi-host"] == "instagram120.p.rapidapi.com"

    @pytest.mark.asyncio
    async def test_info_without_shortcode(self, registry):
        with pytest.raises(InvalidRequestError, match="direct post/reel URL"):
            await registry.instagram.fetch_info("https://www.instagram.com/natgeo/")

    @pytest.mark.asyncio
    async def test_info_empty_response(self, registry, upstream):
        upstream.add("instagram120.p.rapidapi.com", "/api/instagram/links", [])

        with pytest.raises(ContentUnavailableError, match="Could not fetch content information"):
            await registry.instagram.fetch_info(REEL_URL)

    @pytest.mark.asyncio
    async def test_info_upstream_error(self, registry, upstream):
        upstream.add("instagram120.p.rapidapi.com", "/api/instagram/links", {}, status=403)

        with pytest.raises(ContentUnavailableError, match="private or unavailable"):
            await registry.instagram.fetch_info(REEL_URL)

    @pytest.mark.asyncio
    async def test_requires_key(self, bare_registry):
        with pytest.raises(ProviderNotConfiguredError, match="Instagram download service not configured"):
            await bare_registry.instagram.fetch_info(REEL_URL)

    @pytest.mark.asyncio
    async def test_resolve(self, registry, upstream):
        assert await registry.instagram.resolve(REEL_URL) == "https://cdn.instagram.com/reel.mp4"

        upstream.add("instagram120.p.rapidapi.com", "/api/instagram/links", {"value": []})
        with pytest.raises(ContentUnavailableError, match="No download URL found"):
            await registry.instagram.resolve(REEL_URL)
