"""Design asset search, details and download redirects."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import RedirectResponse

from mediahub.api.deps import Registry
from mediahub.errors import InvalidRequestError, NotFoundError
from mediahub.models.asset import AssetDetailResponse, AssetPage, AssetType

router = APIRouter(prefix="/api/assets", tags=["assets"])


def _require_id_and_source(asset_id: str | None, source: str | None) -> tuple[str, str]:
    if not asset_id or not source:
        raise InvalidRequestError("id and source parameters are required")
    return asset_id, source


@router.get("/search", response_model=AssetPage)
async def search_assets(
    registry: Registry,
    query: str = "design",
    asset_type: Annotated[AssetType, Query(alias="type")] = AssetType.ALL,
    category: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(alias="perPage", ge=1)] = 20,
) -> AssetPage:
    """Aggregated search across Pixabay, OpenVerse, IconFinder and Freepik."""
    return await registry.search_assets(
        query, asset_type, page=page, per_page=per_page, category=category
    )


@router.get("/details", response_model=AssetDetailResponse)
async def asset_details(
    registry: Registry,
    asset_id: Annotated[str | None, Query(alias="id")] = None,
    source: str | None = None,
) -> AssetDetailResponse:
    asset_id, source = _require_id_and_source(asset_id, source)
    asset = await registry.asset_details(source, asset_id)
    if asset is None:
        raise NotFoundError("Asset not found")
    return AssetDetailResponse(asset=asset)


@router.get("/download")
async def asset_download(
    registry: Registry,
    asset_id: Annotated[str | None, Query(alias="id")] = None,
    source: str | None = None,
    fmt: Annotated[str, Query(alias="format")] = "jpg",
) -> RedirectResponse:
    """Redirect (307) to the provider's download URL."""
    asset_id, source = _require_id_and_source(asset_id, source)
    url = await registry.asset_download_url(source, asset_id, fmt)
    if not url:
        raise NotFoundError("Download URL not available")
    return RedirectResponse(url, status_code=307)
