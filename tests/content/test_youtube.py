"""Tests for the YouTube downloader client."""

from __future__ import annotations

import pytest

from mediahub.content.youtube import (
    FALLBACK_FORMATS,
    download_path,
    extract_video_id,
    parse_formats,
    select_format,
    validate_url,
)
from mediahub.errors import (
    ContentUnavailableError,
    InvalidRequestError,
    ProviderNotConfiguredError,
)

WATCH_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


class TestUrlHandling:

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ",
            "https://youtube.com/shorts/dQw4w9WgXcQ",
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
        ],
    )
    def test_extract_video_id(self, url):
        assert extract_video_id(url) == "dQw4w9WgXcQ"

    def test_extract_video_id_no_match(self):
        assert extract_video_id("https://www.youtube.com/channel/UC123") is None

    def test_validate_url(self):
        assert validate_url(WATCH_URL) == WATCH_URL

        with pytest.raises(InvalidRequestError, match="URL is required"):
            validate_url("")
        with pytest.raises(InvalidRequestError, match="Invalid YouTube URL"):
            validate_url("https://vimeo.com/123")

    def test_download_path(self):
        assert download_path(WATCH_URL) == (
            "/api/content/youtube?url=https%3A%2F%2Fwww.youtube.com%2Fwatch%3Fv%3DdQw4w9WgXcQ"
        )


class TestFormats:

    def test_parse_formats(self, mock_youtube_details):
        formats = parse_formats(mock_youtube_details)

        assert [(f.quality, f.itag) for f in formats] == [
            ("1080p60", "137"),
            ("720p", "22"),
            ("Audio Only", "140"),
        ]
        assert formats[-1].format == "m4a"

    def test_parse_formats_fallback(self):
        assert parse_formats({"videos": {"items": []}}) == FALLBACK_FORMATS

    def test_select_matching_video(self, mock_youtube_details):
        assert select_format(mock_youtube_details, "22") == ("https://media.example.com/video-720.mp4", "mp4")

    def test_select_matching_audio(self, mock_youtube_details):
        assert select_format(mock_youtube_details, "140") == ("https://media.example.com/audio.m4a", "m4a")

    def test_select_audio_itag_falls_back_to_first_audio(self, mock_youtube_details):
        url, extension = select_format(mock_youtube_details, "251")
        assert url == "https://media.example.com/audio.m4a"

    def test_select_unknown_itag_uses_first_video(self, mock_youtube_details):
        assert select_format(mock_youtube_details, "5")[0] == "https://media.example.com/video-1080.mp4"
        assert select_format(mock_youtube_details, None)[0] == "https://media.example.com/video-1080.mp4"

    def test_select_nothing(self):
        assert select_format({}, "22") == (None, "mp4")


@pytest.mark.mock
class TestYouTubeClient:

    def test_demo_response(self, bare_registry):
        demo = bare_registry.youtube.demo_response().model_dump(by_alias=True)

        assert demo["isDemo"] is True
        assert demo["demoData"]["videoId"] == "dQw4w9WgXcQ"
        assert demo["demoData"]["duration"] == 213
        assert [f["itag"] for f in demo["demoData"]["formats"]] == ["313", "271", "18", "22", "135"]

    @pytest.mark.asyncio
    async def test_info(self, registry, upstream):
        info = await registry.youtube.fetch_info(WATCH_URL)

        assert info.video_id == "dQw4w9WgXcQ"
        assert info.title == "Never Gonna Give You Up (Official Video)"
        assert info.duration == 213
        assert info.thumbnail == "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"
        assert len(info.formats) == 3
        assert info.download_url == download_path(WATCH_URL)

        request = upstream.calls("youtube-media-downloader.p.rapidapi.com")[0]
        assert request.url.params["videoId"] == "dQw4w9WgXcQ"
        assert request.headers["x-rapidapi-key"] == "test_rapidapi_key"
        assert request.headers["x-rapidapi-host"] == "youtube-media-downloader.p.rapidapi.com"

    @pytest.mark.asyncio
    async def test_info_without_video_id(self, registry):
        with pytest.raises(InvalidRequestError, match="Could not extract video ID from URL"):
            await registry.youtube.fetch_info("https://www.youtube.com/")

    @pytest.mark.asyncio
    async def test_info_upstream_failure(self, registry, upstream):
        upstream.add("youtube-media-downloader.p.rapidapi.com", "/v2/video/details", {}, status=500)

        with pytest.raises(ContentUnavailableError, match="private, age-restricted"):
            await registry.youtube.fetch_info(WATCH_URL)

    @pytest.mark.asyncio
    async def test_info_unsuccessful_lookup(self, registry, upstream):
        upstream.add(
            "youtube-media-downloader.p.rapidapi.com",
            "/v2/video/details",
            {"errorId": "VideoNotFound"},
        )

        with pytest.raises(ContentUnavailableError, match="Could not fetch video information"):
            await registry.youtube.fetch_info(WATCH_URL)

    @pytest.mark.asyncio
    async def test_info_requires_key(self, bare_registry):
        with pytest.raises(ProviderNotConfiguredError):
            await bare_registry.youtube.fetch_info(WATCH_URL)

    @pytest.mark.asyncio
    async def test_resolve(self, registry):
        media = await registry.youtube.resolve(WATCH_URL, "22")

        assert media.url == "https://media.example.com/video-720.mp4"
        assert media.filename == "Never_Gonna_Give_You_Up_Official_Video.mp4"
        assert media.fallback_content_type == "video/mp4"

    @pytest.mark.asyncio
    async def test_resolve_errors(self, registry, upstream):
        with pytest.raises(InvalidRequestError, match="Could not extract video ID"):
            await registry.youtube.resolve("https://youtube.com/", "22")

        upstream.add(
            "youtube-media-downloader.p.rapidapi.com",
            "/v2/video/details",
            {"errorId": "Success", "title": "Empty", "videos": {"items": []}},
        )
        with pytest.raises(ContentUnavailableError, match="Download URL not found"):
            await registry.youtube.resolve(WATCH_URL, "22")

    @pytest.mark.asyncio
    async def test_resolve_unsuccessful_lookup(self, registry, upstream):
        upstream.add(
            "youtube-media-downloader.p.rapidapi.com",
            "/v2/video/details",
            {"errorId": "LoginRequired"},
        )

        with pytest.raises(ContentUnavailableError, match="No download formats available"):
            await registry.youtube.resolve(WATCH_URL, "22")
