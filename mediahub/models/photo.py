"""Stock photo search models (Unsplash, Pexels)."""

from __future__ import annotations

from mediahub.models.base import CamelModel


class Photo(CamelModel):
    """A photo normalised from any stock photo provider."""

    id: str
    source: str
    url: str
    thumb: str
    full: str
    download: str
    download_location: str | None = None
    description: str = "Untitled"
    photographer: str | None = None
    photographer_url: str | None = None
    width: int = 0
    height: int = 0


class PhotoPage(CamelModel):
    images: list[Photo]
    total: int
    total_pages: int
    current_page: int
