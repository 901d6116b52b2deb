"""Provider introspection, cache management and health check."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from mediahub.api.deps import Registry

router = APIRouter(prefix="/api", tags=["providers"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/providers/cache/stats")
async def cache_stats(registry: Registry) -> dict[str, Any]:
    """Get cache statistics."""
    return registry.cache_stats()


@router.post("/providers/cache/clear")
async def clear_cache(registry: Registry, provider: str | None = None) -> dict[str, Any]:
    """Clear the response cache, optionally for one provider only."""
    return {"cleared": registry.clear_cache(provider), "provider": provider}


@router.get("/providers")
async def list_providers(registry: Registry) -> list[dict[str, Any]]:
    """List every provider with its status (API keys are never included)."""
    return registry.info()
