"""Pytest configuration and shared fixtures.

Upstream APIs are replaced by ``MockUpstream``, an ``httpx.MockTransport``
handler routing on host and path. Each test gets a registry whose providers
share one ``httpx.AsyncClient`` on top of it.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from mediahub.api import create_app
from mediahub.config import Settings
from mediahub.providers.cache import ResponseCache
from mediahub.providers.registry import ProviderRegistry

Handler = Callable[[httpx.Request], httpx.Response]


class MockUpstream:
    """Routes ``(host, path)`` to canned responses and records requests."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        host: str,
        path: str,
        json_body: Any = None,
        *,
        status: int = 200,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
        handler: Handler | None = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if content is not None:
                return httpx.Response(status, content=content, headers=headers)
            return httpx.Response(status, json=json_body, headers=headers)

        self.routes[(host, path)] = handler or respond

    def calls(self, host: str, path: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.url.host == host and (path is None or r.url.path == path)
        ]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.url.host, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": f"no mock for {request.url}"})
        return handler(request)


@pytest.fixture(scope="session")
def event_loop_policy():
    """Use default event loop policy for async tests."""
    return asyncio.DefaultEventLoopPolicy()


@pytest.fixture
def settings() -> Settings:
    """Settings with every key configured."""
    return Settings(
        unsplash_access_key="test_unsplash_key",
        pexels_api_key="test_pexels_key",
        pixabay_api_key="test_pixabay_key",
        iconfinder_api_key="test_iconfinder_key",
        freepik_api_key="test_freepik_key",
        tmdb_api_key="test_tmdb_key",
        rapidapi_key="test_rapidapi_key",
        vidu_rapidapi_host="vidu.p.rapidapi.com",
        log_level="WARNING",
    )


@pytest.fixture
def bare_settings() -> Settings:
    """Settings without any API key."""
    return Settings(log_level="WARNING")


# --- Upstream fixtures ---


@pytest.fixture
def mock_unsplash_response() -> dict:
    """Sample Unsplash API response."""
    return {
        "total": 500,
        "total_pages": 25,
        "results": [
            {
                "id": "abc123xyz",
                "width": 4000,
                "height": 3000,
                "description": "Beautiful mountain landscape",
                "alt_description": "snow covered mountain under blue sky",
                "urls": {
                    "raw": "https://images.unsplash.com/photo-abc123?ixlib=rb-4.0.3",
                    "full": "https://images.unsplash.com/photo-abc123?q=85&w=2000",
                    "regular": "https://images.unsplash.com/photo-abc123?q=80&w=1080",
                    "small": "https://images.unsplash.com/photo-abc123?q=80&w=400",
                    "thumb": "https://images.unsplash.com/photo-abc123?q=80&w=200",
                },
                "links": {
                    "html": "https://unsplash.com/photos/abc123xyz",
                    "download": "https://unsplash.com/photos/abc123xyz/download",
                    "download_location": "https://api.unsplash.com/photos/abc123xyz/download",
                },
                "user": {
                    "name": "John Nature",
                    "links": {"html": "https://unsplash.com/@naturephotographer"},
                },
            },
            {
                "id": "def456uvw",
                "width": 3000,
                "height": 2000,
                "description": None,
                "alt_description": None,
                "urls": {
                    "regular": "https://images.unsplash.com/photo-def456?w=1080",
                    "thumb": "https://images.unsplash.com/photo-def456?w=200",
                    "full": "https://images.unsplash.com/photo-def456",
                },
                "links": {"download": "https://unsplash.com/photos/def456uvw/download"},
                "user": {"name": "Jane Doe", "links": {"html": "https://unsplash.com/@jane"}},
            },
        ],
    }


@pytest.fixture
def mock_pexels_response() -> dict:
    """Sample Pexels API response."""
    return {
        "total_results": 1000,
        "page": 1,
        "per_page": 20,
        "photos": [
            {
                "id": 2014422,
                "width": 3024,
                "height": 4032,
                "url": "https://www.pexels.com/photo/2014422/",
                "photographer": "Joey Bautista",
                "photographer_url": "https://www.pexels.com/@joey-bautista",
                "src": {
                    "original": "https://images.pexels.com/photos/original.jpeg",
                    "large": "https://images.pexels.com/photos/large.jpeg",
                    "medium": "https://images.pexels.com/photos/medium.jpeg",
                },
                "alt": "Brown Rocks During Golden Hour",
            }
        ],
    }


def pixabay_hit(hit_id: int, image_type: str, downloads: int, **extra: Any) -> dict:
    return {
        "id": hit_id,
        "pageURL": f"https://pixabay.com/{image_type}s/{hit_id}/",
        "type": image_type,
        "tags": "blossom, bloom, flower",
        "previewURL": f"https://cdn.pixabay.com/{hit_id}/preview.jpg",
        "largeImageURL": f"https://cdn.pixabay.com/{hit_id}/large.jpg",
        "imageWidth": 4000,
        "imageHeight": 2250,
        "downloads": downloads,
        "user": "Josch13",
        **extra,
    }


@pytest.fixture
def mock_pixabay_hits() -> dict[str, list[dict]]:
    """Pixabay hits per ``image_type``."""
    return {
        "vector": [pixabay_hit(1001, "vector", 500)],
        "illustration": [pixabay_hit(1002, "illustration", 9000)],
        "photo": [
            pixabay_hit(195893, "photo", 6439),
            pixabay_hit(195894, "photo", 8000),
        ],
    }


@pytest.fixture
def mock_openverse_response() -> dict:
    return {
        "result_count": 2,
        "results": [
            {
                "id": "ov-1",
                "title": "Forest path",
                "url": "https://live.staticflickr.com/forest.jpg",
                "thumbnail": "https://api.openverse.org/v1/images/ov-1/thumb/",
                "creator": "flickr_user",
                "license": "by",
                "tags": [{"name": "forest"}, {"name": "path"}],
            },
            {
                "id": "ov-2",
                "title": None,
                "url": "https://live.staticflickr.com/lake.jpg",
                "thumbnail": "https://api.openverse.org/v1/images/ov-2/thumb/",
                "creator": "another_user",
                "tags": [],
            },
        ],
    }


@pytest.fixture
def mock_iconfinder_icon() -> dict:
    return {
        "icon_id": 4781,
        "tags": ["home", "house"],
        "is_premium": False,
        "raster_sizes": [
            {"size": 64, "formats": [{"format": "png", "preview_url": "https://cdn.iconfinder.com/4781-64.png"}]}
        ],
        "vector_sizes": [
            {"size": 512, "formats": [{"format": "svg", "preview_url": "https://cdn.iconfinder.com/4781.svg"}]}
        ],
        "creator": {"name": "Icon Artist"},
        "urls": {"page": "https://www.iconfinder.com/icons/4781"},
    }


@pytest.fixture
def mock_freepik_response() -> dict:
    return {
        "data": [
            {
                "id": 777,
                "title": "Flat design template",
                "url": "https://www.freepik.com/free-vector/777.htm",
                "image": {"source": {"url": "https://img.freepik.com/777.jpg"}},
                "author": {"name": "studio"},
                "download_count": 20000,
                "tags": [{"name": "flat"}, "template"],
                "is_premium": True,
            }
        ]
    }


@pytest.fixture
def mock_tmdb_response() -> dict:
    return {
        "page": 1,
        "total_pages": 42,
        "total_results": 830,
        "results": [
            {
                "id": 603,
                "title": "The Matrix",
                "overview": "Set in the 22nd century...",
                "poster_path": "/matrix.jpg",
                "release_date": "1999-03-30",
                "vote_average": 8.2,
                "genre_ids": [28, 878],
                "media_type": "movie",
            }
        ],
    }


@pytest.fixture
def mock_youtube_details() -> dict:
    return {
        "errorId": "Success",
        "id": "dQw4w9WgXcQ",
        "title": "Never Gonna Give You Up (Official Video)",
        "lengthSeconds": 213,
        "thumbnails": [
            {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/default.jpg"},
            {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"},
        ],
        "videos": {
            "items": [
                {
                    "url": "https://media.example.com/video-1080.mp4",
                    "quality": "1080p",
                    "qualityLabel": "1080p60",
                    "extension": "mp4",
                    "itag": 137,
                },
                {
                    "url": "https://media.example.com/video-720.mp4",
                    "quality": "720p",
                    "extension": "mp4",
                    "itag": 22,
                },
                {"url": "https://media.example.com/no-quality.mp4", "itag": 999},
            ]
        },
        "audios": {
            "items": [
                {"url": "https://media.example.com/audio.m4a", "extension": "m4a", "itag": 140},
            ]
        },
    }


@pytest.fixture
def mock_instagram_links() -> list:
    return [
        {
            "pictureUrl": "https://cdn.instagram.com/thumb.jpg",
            "meta": {"username": "natgeo", "title": "Into the wild"},
            "urls": [
                {"url": "https://cdn.instagram.com/reel.mp4", "extension": "mp4"},
                {"url": "https://cdn.instagram.com/cover.jpg", "extension": "jpg"},
            ],
        }
    ]


@pytest.fixture
def mock_tiktok_response() -> dict:
    return {
        "code": 0,
        "data": {
            "title": "Dance challenge",
            "cover": "https://cdn.tiktok.com/cover.jpg",
            "duration": 15,
            "play": "https://cdn.tiktok.com/play.mp4",
            "hdplay": "https://cdn.tiktok.com/hdplay.mp4",
            "wmplay": "https://cdn.tiktok.com/wmplay.mp4",
            "music": "https://cdn.tiktok.com/music.mp3",
            "music_info": {"title": "original sound", "author": "dancer", "cover": "https://cdn.tiktok.com/music.jpg"},
            "play_count": 1000,
            "digg_count": 250,
            "comment_count": 12,
            "share_count": 3,
            "author": {"nickname": "Dancer", "unique_id": "dancer01", "avatar": "https://cdn.tiktok.com/a.jpg"},
        },
    }


@pytest.fixture
def mock_rate_limit_headers() -> dict:
    """Mock rate limit response headers."""
    return {
        "X-RateLimit-Limit": "100",
        "X-RateLimit-Remaining": "95",
        "X-RateLimit-Reset": "60",
    }


# --- Transport, registry and app ---


@pytest.fixture
def upstream(
    mock_unsplash_response,
    mock_pexels_response,
    mock_pixabay_hits,
    mock_openverse_response,
    mock_iconfinder_icon,
    mock_freepik_response,
    mock_tmdb_response,
    mock_youtube_details,
    mock_instagram_links,
    mock_tiktok_response,
    mock_rate_limit_headers,
) -> MockUpstream:
    """All upstream services answering with their sample payloads."""
    mock = MockUpstream()

    mock.add("api.unsplash.com", "/search/photos", mock_unsplash_response,
             headers={"X-Ratelimit-Limit": "50", "X-Ratelimit-Remaining": "45"})
    mock.add("api.unsplash.com", "/photos/abc123xyz/download", {"url": "https://unsplash.com/x"})
    mock.add("api.pexels.com", "/v1/search", mock_pexels_response, headers=mock_rate_limit_headers)
    mock.add("api.pexels.com", "/v1/curated", mock_pexels_response, headers=mock_rate_limit_headers)

    def pixabay(request: httpx.Request) -> httpx.Response:
        params = request.url.params
        if "id" in params:
            hits = [
                dict(h, imageURL=f"https://pixabay.com/get/{h['id']}-full.jpg")
                for batch in mock_pixabay_hits.values()
                for h in batch
                if str(h["id"]) == params["id"]
            ]
        else:
            hits = mock_pixabay_hits.get(params.get("image_type", "photo"), [])
        return httpx.Response(200, json={"total": len(hits), "totalHits": len(hits), "hits": hits},
                              headers=mock_rate_limit_headers)

    mock.add("pixabay.com", "/api/", handler=pixabay)

    mock.add("api.openverse.org", "/v1/images/", mock_openverse_response)
    mock.add("api.openverse.org", "/v1/images/ov-1/", mock_openverse_response["results"][0])
    mock.add("api.iconfinder.com", "/v4/icons/search", {"total_count": 1, "icons": [mock_iconfinder_icon]})
    mock.add("api.iconfinder.com", "/v4/icons/4781", mock_iconfinder_icon)
    mock.add("api.iconfinder.com", "/v4/icons/4781/download", {
        "formats": [
            {"format": "png", "download_url": "https://api.iconfinder.com/v4/icons/4781/download/png"},
            {"format": "svg", "download_url": "https://api.iconfinder.com/v4/icons/4781/download/svg"},
        ]
    })
    mock.add("api.freepik.com", "/v1/resources", mock_freepik_response)
    mock.add("api.freepik.com", "/v1/resources/777", {"data": mock_freepik_response["data"][0]})
    mock.add("api.freepik.com", "/v1/resources/777/download", {"data": {"url": "https://downloadscdn.freepik.com/777.zip"}})

    for path in (
        "/3/search/movie",
        "/3/movie/popular",
        "/3/movie/top_rated",
        "/3/trending/movie/week",
        "/3/discover/movie",
    ):
        mock.add("api.themoviedb.org", path, mock_tmdb_response)

    mock.add("youtube-media-downloader.p.rapidapi.com", "/v2/video/details", mock_youtube_details)
    mock.add("instagram120.p.rapidapi.com", "/api/instagram/links", mock_instagram_links)
    mock.add("tiktok-video-no-watermark2.p.rapidapi.com", "/", mock_tiktok_response)
    mock.add("vidu.p.rapidapi.com", "/download", {"status": "ok", "links": ["https://v.example.com/1.mp4"]})

    # Media CDNs
    mock.add("media.example.com", "/video-1080.mp4", content=b"video-1080",
             headers={"content-type": "video/mp4", "content-length": "10"})
    mock.add("media.example.com", "/video-720.mp4", content=b"video-720",
             headers={"content-type": "video/mp4"})
    mock.add("media.example.com", "/audio.m4a", content=b"audio", headers={"content-type": "audio/mp4"})
    mock.add("cdn.instagram.com", "/reel.mp4", content=b"reel-bytes", headers={"content-type": "video/mp4"})
    mock.add("cdn.instagram.com", "/cover.jpg", content=b"jpeg-bytes", headers={"content-type": "image/jpeg"})
    mock.add("cdn.tiktok.com", "/hdplay.mp4", content=b"hd-video")
    mock.add("cdn.tiktok.com", "/music.mp3", content=b"mp3-bytes")
    mock.add("images.unsplash.com", "/photo-abc123", content=b"\x89PNG-bytes",
             headers={"content-type": "image/png; charset=binary"})
    mock.add("images.pexels.com", "/photos/original.jpeg", content=b"jpeg-bytes",
             headers={"content-type": "image/jpeg"})
    return mock


@pytest.fixture
def http_client(upstream: MockUpstream) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream), follow_redirects=True)


@pytest.fixture
def cache() -> ResponseCache:
    return ResponseCache(max_size=100)


@pytest.fixture
def registry(settings: Settings, cache: ResponseCache, http_client: httpx.AsyncClient) -> ProviderRegistry:
    """Registry with every provider configured, on the mock transport."""
    return ProviderRegistry(settings, cache=cache, client=http_client)


@pytest.fixture
def bare_registry(bare_settings: Settings, http_client: httpx.AsyncClient) -> ProviderRegistry:
    """Registry without any API key, on the mock transport."""
    return ProviderRegistry(bare_settings, cache=ResponseCache(max_size=100), client=http_client)


@pytest.fixture
def fastapi_app(settings: Settings, registry: ProviderRegistry) -> FastAPI:
    return create_app(settings, registry=registry)


@pytest.fixture
def api_client(fastapi_app: FastAPI) -> TestClient:
    """Create a test client for the FastAPI app."""
    return TestClient(fastapi_app, raise_server_exceptions=False)


@pytest.fixture
def bare_api_client(bare_settings: Settings, bare_registry: ProviderRegistry) -> TestClient:
    return TestClient(create_app(bare_settings, registry=bare_registry), raise_server_exceptions=False)


# Markers for test categories
def pytest_configure(config):
    config.addinivalue_line("markers", "mock: tests using mocked API responses")
    config.addinivalue_line("markers", "integration: tests requiring real API keys")
    config.addinivalue_line("markers", "slow: slow running tests")
