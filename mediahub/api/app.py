"""FastAPI application factory.

Usage:
    from mediahub.api import create_app

    app = create_app()                 # settings from the environment
    app = create_app(settings, registry=registry)   # tests, embedding

    uvicorn mediahub.api.app:create_app --factory
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mediahub import __version__
from mediahub.api.errors import register_error_handlers
from mediahub.api.routes import ROUTERS
from mediahub.config import Settings, get_settings
from mediahub.log import setup_logging
from mediahub.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    registry: ProviderRegistry | None = None,
) -> FastAPI:
    """Build the MediaHub API.

    Args:
        settings: Configuration (defaults to ``get_settings()``)
        registry: Provider registry; one is built from ``settings`` when omitted.
            The app closes the registry's connections on shutdown either way.
    """
    settings = settings or (registry.settings if registry else get_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(settings.log_level)
        configured = [p["id"] for p in app.state.registry.info() if p["configured"]]
        logger.info(f"MediaHub API started; configured providers: {', '.join(configured) or 'none'}")
        yield
        await app.state.registry.close()
        logger.info("MediaHub API shut down")

    app = FastAPI(title="MediaHub API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry or ProviderRegistry(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    return app
