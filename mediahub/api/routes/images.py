"""Stock photo download proxy: ``GET /api/image/download``."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import Response

from mediahub.api.deps import AppSettings, Registry
from mediahub.content.images import fetch_image

router = APIRouter(prefix="/api/image", tags=["photos"])


@router.get("/download", response_model=None)
async def download_image(
    registry: Registry,
    settings: AppSettings,
    url: str | None = None,
    image_id: Annotated[str | None, Query(alias="id")] = None,
    source: str = "unsplash",
) -> Response:
    """Return an Unsplash or Pexels image as a named attachment.

    ``url`` is the image URL, base64 encoded and then URL encoded.
    """
    image = await fetch_image(
        registry.client,
        url,
        image_id=image_id,
        source=source,
        allowed_hosts=settings.allowed_image_hosts,
    )
    return Response(content=image.content, media_type=image.content_type, headers=image.headers())
