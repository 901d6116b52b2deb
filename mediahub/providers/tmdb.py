"""TMDB (The Movie Database) API provider.

API Documentation: https://developer.themoviedb.org/reference/intro/getting-started

Authentication: ``api_key`` query parameter (v3 auth)
"""

from __future__ import annotations

from typing import Any

from mediahub.errors import InvalidRequestError, ProviderRequestError
from mediahub.models.movie import Movie, MoviePage
from mediahub.providers.base import APIProvider, ProviderAuthType, ProviderConfig, ProviderKind

TMDB_CONFIG = ProviderConfig(
    id="tmdb",
    name="TMDB",
    kind=ProviderKind.MOVIES,
    base_url="https://api.themoviedb.org/3/",
    auth_type=ProviderAuthType.QUERY_PARAM,
    auth_param="api_key",
    api_key_setting="tmdb_api_key",
    rate_limit_window=1,
    rate_limit_requests=50,
    cache_duration=1800,
    requires_attribution=True,
    attribution_template="This product uses the TMDB API but is not endorsed or certified by TMDB.",
)

# Genre slug -> TMDB genre id
GENRES: dict[str, int] = {
    "action": 28,
    "adventure": 12,
    "animation": 16,
    "comedy": 35,
    "crime": 80,
    "documentary": 99,
    "drama": 18,
    "family": 10751,
    "fantasy": 14,
    "history": 36,
    "horror": 27,
    "music": 10402,
    "mystery": 9648,
    "romance": 10749,
    "sci-fi": 878,
    "thriller": 53,
    "war": 10752,
    "western": 37,
}

FETCH_ERROR = "Failed to fetch from TMDB"


def genre_id(genre: str) -> int:
    """Resolve a genre slug (case-insensitive)."""
    try:
        return GENRES[genre.lower()]
    except KeyError:
        raise InvalidRequestError(f"Unknown genre: {genre}") from None


class TMDBProvider(APIProvider):
    """Movie search and listings."""

    config = TMDB_CONFIG

    async def _list(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any],
        page: int,
        genre: str | None = None,
    ) -> MoviePage:
        self.require_configured()
        params = {**params, "page": page}

        async def fetch() -> dict[str, Any]:
            try:
                data = await self._request(endpoint, params=params)
            except ProviderRequestError as e:
                raise ProviderRequestError(
                    FETCH_ERROR,
                    provider=self.id,
                    upstream_status=e.upstream_status,
                    status_code=e.status_code,
                ) from e
            return MoviePage(
                movies=[Movie.model_validate(m) for m in data.get("results") or []],
                total_pages=data.get("total_pages") or 1,
                total_results=data.get("total_results") or 0,
                current_page=page,
            ).model_dump()

        result = MoviePage.model_validate(await self.cached(method, params, fetch))
        if genre is not None:
            result.genre = genre
        return result

    async def search(self, query: str, *, page: int = 1) -> MoviePage:
        return await self._list("search", "search/movie", {"query": query}, page)

    async def popular(self, *, page: int = 1) -> MoviePage:
        return await self._list("popular", "movie/popular", {}, page)

    async def top_rated(self, *, page: int = 1) -> MoviePage:
        return await self._list("top_rated", "movie/top_rated", {}, page)

    async def trending(self, *, page: int = 1, window: str = "week") -> MoviePage:
        return await self._list("trending", f"trending/movie/{window}", {}, page)

    async def by_genre(self, genre: str, *, page: int = 1) -> MoviePage:
        params = {"with_genres": genre_id(genre), "sort_by": "popularity.desc"}
        return await self._list("discover", "discover/movie", params, page, genre=genre)
