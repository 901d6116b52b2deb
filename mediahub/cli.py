"""CLI commands for MediaHub."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import click
from rich.console import Console
from rich.table import Table

from mediahub.config import Settings, load_settings
from mediahub.errors import MediaHubError
from mediahub.log import setup_logging
from mediahub.models.asset import AssetType
from mediahub.models.photo import PhotoPage
from mediahub.providers.registry import ProviderRegistry

console = Console()

T = TypeVar("T")


def run_with_registry(settings: Settings, fn: Callable[[ProviderRegistry], Awaitable[T]]) -> T:
    """Run ``fn`` against a fresh registry, printing MediaHub errors and exiting 1."""

    async def run() -> T:
        registry = ProviderRegistry(settings)
        try:
            return await fn(registry)
        finally:
            await registry.close()

    try:
        return asyncio.run(run())
    except MediaHubError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        sys.exit(1)


def _truncate(text: str | None, width: int = 50) -> str:
    text = text or ""
    return text if len(text) <= width else text[: width - 3] + "..."


def _print_photos(result: PhotoPage, title: str) -> None:
    table = Table(title=f"{title} ({result.total} total, page {result.current_page}/{result.total_pages})")
    table.add_column("ID", style="cyan")
    table.add_column("Description")
    table.add_column("Photographer", style="green")
    table.add_column("Size", justify="right", style="dim")

    for photo in result.images:
        table.add_row(
            photo.id,
            _truncate(photo.description),
            photo.photographer or "",
            f"{photo.width}x{photo.height}",
        )
    console.print(table)


@click.group()
@click.option("--config", "-c", "config_path", default=None, type=click.Path(exists=True),
              help="YAML settings file (environment variables take precedence)")
@click.option("--log-level", default=None, help="Override the configured log level")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, log_level: str | None) -> None:
    """MediaHub - stock photos, design assets, movies and social media downloads."""
    settings = load_settings(Path(config_path) if config_path else None)
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level.upper()})
    setup_logging(settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@main.command()
@click.option("--host", default="127.0.0.1", help="Host to bind")
@click.option("--port", "-p", default=8000, help="Port to bind")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """Start the API server."""
    import uvicorn

    from mediahub.api import create_app

    settings: Settings = ctx.obj["settings"]
    app = create_app(settings)

    console.print(f"[green]Starting server at http://{host}:{port}/api[/green]")
    uvicorn.run(app, host=host, port=port, log_config=None)


# --- Photos ---


@main.group()
def photos() -> None:
    """Stock photos from Unsplash and Pexels."""


@photos.command("search")
@click.argument("query")
@click.option("--source", "-s", type=click.Choice(["unsplash", "pexels"]), default="unsplash")
@click.option("--page", default=1, help="Page number")
@click.option("--per-page", "-n", default=20, help="Results per page")
@click.pass_context
def photos_search(ctx: click.Context, query: str, source: str, page: int, per_page: int) -> None:
    """Search stock photos."""
    result = run_with_registry(
        ctx.obj["settings"],
        lambda r: r.search_photos(query, source=source, page=page, per_page=per_page),
    )
    _print_photos(result, f"{source.title()}: '{query}'")


@photos.command("curated")
@click.option("--page", default=1, help="Page number")
@click.option("--per-page", "-n", default=20, help="Results per page")
@click.pass_context
def photos_curated(ctx: click.Context, page: int, per_page: int) -> None:
    """Show Pexels' curated photos."""
    result = run_with_registry(
        ctx.obj["settings"], lambda r: r.pexels.curated(page=page, per_page=per_page)
    )
    _print_photos(result, "Pexels curated")


@photos.command("track-download")
@click.argument("download_location")
@click.pass_context
def photos_track_download(ctx: click.Context, download_location: str) -> None:
    """Report an Unsplash download (required by the Unsplash API guidelines)."""
    ok = run_with_registry(
        ctx.obj["settings"], lambda r: r.unsplash.track_download(download_location)
    )
    if ok:
        console.print("[green]Download tracked[/green]")
    else:
        console.print("[yellow]Download could not be tracked[/yellow]")


# --- Assets ---


@main.command()
@click.argument("query")
@click.option("--type", "-t", "asset_type", type=click.Choice([t.value for t in AssetType]),
              default="all", help="Asset type")
@click.option("--category", default=None, help="Pixabay category")
@click.option("--page", default=1, help="Page number")
@click.option("--per-page", "-n", default=20, help="Results per page")
@click.pass_context
def assets(
    ctx: click.Context,
    query: str,
    asset_type: str,
    category: str | None,
    page: int,
    per_page: int,
) -> None:
    """Search design assets across all asset providers."""
    result = run_with_registry(
        ctx.obj["settings"],
        lambda r: r.search_assets(
            query, AssetType(asset_type), page=page, per_page=per_page, category=category
        ),
    )

    table = Table(title=f"Assets: '{query}' ({result.total} unique, page {result.page}/{result.total_pages})")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Type")
    table.add_column("Author", style="green")
    table.add_column("Downloads", justify="right", style="dim")

    for asset in result.assets:
        table.add_row(
            asset.id,
            _truncate(asset.title, 40),
            asset.type,
            asset.author or "",
            str(asset.downloads or 0),
        )
    console.print(table)


# --- Movies ---


@main.command()
@click.argument("query", required=False)
@click.option("--list", "listing", type=click.Choice(["popular", "trending", "top"]),
              default="popular", help="Listing used when no query or genre is given")
@click.option("--genre", "-g", default=None, help="Filter by genre (e.g. action, sci-fi)")
@click.option("--page", default=1, help="Page number")
@click.pass_context
def movies(ctx: click.Context, query: str | None, listing: str, genre: str | None, page: int) -> None:
    """Search TMDB movies or show a listing."""

    async def fetch(registry: ProviderRegistry) -> Any:
        tmdb = registry.tmdb
        if query:
            return await tmdb.search(query, page=page)
        if genre:
            return await tmdb.by_genre(genre, page=page)
        if listing == "trending":
            return await tmdb.trending(page=page)
        if listing == "top":
            return await tmdb.top_rated(page=page)
        return await tmdb.popular(page=page)

    result = run_with_registry(ctx.obj["settings"], fetch)

    title = f"'{query}'" if query else (genre or listing)
    table = Table(title=f"Movies: {title} (page {result.current_page}/{result.total_pages})")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Title")
    table.add_column("Released", style="dim")
    table.add_column("Rating", justify="right", style="green")

    for movie in result.movies:
        table.add_row(
            str(movie.id),
            movie.title or "",
            movie.release_date or "",
            f"{movie.vote_average:.1f}" if movie.vote_average is not None else "",
        )
    console.print(table)


# --- Social content ---


def _platform(url: str) -> str | None:
    if "youtube" in url or "youtu.be" in url:
        return "youtube"
    if "instagram.com" in url:
        return "instagram"
    if "tiktok.com" in url:
        return "tiktok"
    return None


@main.command()
@click.argument("url")
@click.pass_context
def content(ctx: click.Context, url: str) -> None:
    """Show download options for a YouTube, Instagram or TikTok link."""
    platform = _platform(url)
    if platform is None:
        console.print("[red]Unsupported URL (expected YouTube, Instagram or TikTok)[/red]")
        sys.exit(1)

    info = run_with_registry(ctx.obj["settings"], lambda r: getattr(r, platform).fetch_info(url))

    if platform == "youtube":
        console.print(f"[bold]{info.title}[/bold] [dim]({info.duration}s)[/dim]")
        table = Table(title="Formats")
        table.add_column("Quality", style="cyan")
        table.add_column("Format")
        table.add_column("itag", style="dim")
        for fmt in info.formats:
            table.add_row(fmt.quality, fmt.format, fmt.itag)
        console.print(table)
        return

    title = info.caption if platform == "instagram" else info.title
    console.print(f"[bold]{_truncate(title, 80)}[/bold] by [green]{info.author}[/green]")

    table = Table(title="Media")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Quality")
    table.add_column("URL")
    for item in info.media_items or []:
        table.add_row(str(item.id), item.type, item.quality or "", _truncate(item.url, 60))
    console.print(table)


# --- Providers ---


@main.command()
@click.pass_context
def providers(ctx: click.Context) -> None:
    """List providers and their configuration status."""
    registry = ProviderRegistry(ctx.obj["settings"], cache=None)
    table = Table(title="Providers")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Configured")
    table.add_column("Tier", style="dim")
    table.add_column("Rate Limit", justify="right", style="dim")

    for info in registry.info():
        configured = "[green]yes[/green]" if info["configured"] else "[red]no[/red]"
        table.add_row(
            info["id"],
            info["name"],
            info["kind"],
            configured,
            info["tier"],
            str(info["rateLimit"]["limit"]),
        )
    asyncio.run(registry.close())
    console.print(table)


if __name__ == "__main__":
    main()
