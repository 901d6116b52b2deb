"""TMDB movie listings and the VIDU downloader passthrough."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Query

from mediahub.api.deps import Registry
from mediahub.errors import InvalidRequestError
from mediahub.models.content import ContentRequest
from mediahub.models.movie import MoviePage

router = APIRouter(prefix="/api/movies", tags=["movies"])

Page = Annotated[int, Query(ge=1)]


@router.get("/search", response_model=MoviePage)
async def search_movies(registry: Registry, query: str | None = None, page: Page = 1) -> MoviePage:
    if not query:
        raise InvalidRequestError("Query parameter is required")
    return await registry.tmdb.search(query, page=page)


@router.get("/popular", response_model=MoviePage)
async def popular_movies(registry: Registry, page: Page = 1) -> MoviePage:
    return await registry.tmdb.popular(page=page)


@router.get("/trending", response_model=MoviePage)
async def trending_movies(registry: Registry, page: Page = 1) -> MoviePage:
    return await registry.tmdb.trending(page=page)


@router.get("/top", response_model=MoviePage)
async def top_rated_movies(registry: Registry, page: Page = 1) -> MoviePage:
    return await registry.tmdb.top_rated(page=page)


@router.get("/category", response_model=MoviePage)
async def movies_by_genre(registry: Registry, genre: str | None = None, page: Page = 1) -> MoviePage:
    if not genre:
        raise InvalidRequestError("Genre parameter is required")
    return await registry.tmdb.by_genre(genre, page=page)


@router.post("")
async def vidu_download(registry: Registry, body: ContentRequest | None = None) -> Any:
    """Relay a video link to the VIDU downloader and return its JSON."""
    return await registry.vidu.download(body.url if body else None)
