"""TMDB movie models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from mediahub.models.base import CamelModel


class Movie(BaseModel):
    """A TMDB movie result.

    Keeps TMDB's snake_case field names and passes unknown fields through,
    so clients see the upstream object unchanged.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    title: str | None = None
    original_title: str | None = None
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str | None = None
    vote_average: float | None = None
    vote_count: int | None = None
    popularity: float | None = None
    genre_ids: list[int] = Field(default_factory=list)
    original_language: str | None = None
    adult: bool | None = None
    video: bool | None = None


class MoviePage(CamelModel):
    movies: list[Movie]
    total_pages: int = 1
    total_results: int = 0
    current_page: int
    genre: str | None = None
