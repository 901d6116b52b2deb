"""API routers, one module per area."""

from mediahub.api.routes import assets, content, images, movies, providers, search

ROUTERS = [
    search.router,
    assets.router,
    movies.router,
    content.router,
    images.router,
    providers.router,
]

__all__ = ["ROUTERS"]
