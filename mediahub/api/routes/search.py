"""Stock photo search: ``GET /api/search``."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from mediahub.api.deps import Registry
from mediahub.errors import MediaHubError, ProviderRequestError, RateLimitError
from mediahub.models.photo import PhotoPage

router = APIRouter(prefix="/api", tags=["photos"])


@router.get("/search", response_model=PhotoPage)
async def search_photos(
    registry: Registry,
    query: str = "nature",
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(alias="perPage", ge=1)] = 20,
    source: str = "unsplash",
) -> PhotoPage:
    """Search Unsplash (default) or Pexels.

    Any ``source`` other than ``pexels`` is served by Unsplash.
    """
    try:
        return await registry.search_photos(query, source=source, page=page, per_page=per_page)
    except RateLimitError:
        raise
    except ProviderRequestError as e:
        raise MediaHubError("Failed to fetch images", extra={"details": e.message}) from e
