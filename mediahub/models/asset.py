"""Design asset models shared by every asset provider."""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from mediahub.models.base import CamelModel


class AssetType(str, Enum):
    """Asset type filter accepted by the aggregated search."""
    ALL = "all"
    VECTOR = "vector"
    ILLUSTRATION = "illustration"
    PHOTO = "photo"
    TEMPLATE = "template"


class Asset(CamelModel):
    """Unified asset; ``id`` is ``"{source}-{source_id}"`` so it is unique across providers."""

    id: str
    title: str
    description: str = ""
    type: str
    thumbnail: str = ""
    preview: str = ""
    full: str | None = None
    author: str | None = None
    downloads: int = 0
    tags: list[str] = Field(default_factory=list)
    formats: list[str] = Field(default_factory=list)
    source: str
    source_url: str = ""
    source_id: str | int
    license: str | None = None
    category: str | None = None
    width: int | None = None
    height: int | None = None
    is_premium: bool | None = None
    rating: float | None = None


class AssetPage(CamelModel):
    assets: list[Asset]
    total: int
    page: int
    per_page: int
    total_pages: int
    query: str
    type: AssetType


class AssetDetailResponse(CamelModel):
    asset: Asset
