"""Application settings.

Secrets come from the environment. A YAML file with the same field names
can provide defaults; environment values take precedence over it.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_PATH_ENV = "MEDIAHUB_CONFIG"

# Settings field -> environment variable
ENV_VARS: dict[str, str] = {
    "unsplash_access_key": "UNSPLASH_ACCESS_KEY",
    "pexels_api_key": "PEXELS_API_KEY",
    "pixabay_api_key": "PIXABAY_API_KEY",
    "iconfinder_api_key": "ICONFINDER_API_KEY",
    "freepik_api_key": "FREEPIK_API_KEY",
    "tmdb_api_key": "TMDB_API_KEY",
    "rapidapi_key": "RAPIDAPI_KEY",
    "rapidapi_host": "RAPIDAPI_HOST",
    "instagram_rapidapi_host": "INSTAGRAM_RAPIDAPI_HOST",
    "tiktok_rapidapi_host": "TIKTOK_RAPIDAPI_HOST",
    "vidu_rapidapi_host": "VIDU_RAPIDAPI_HOST",
    "request_timeout": "MEDIAHUB_REQUEST_TIMEOUT",
    "cache_enabled": "MEDIAHUB_CACHE_ENABLED",
    "cache_max_size": "MEDIAHUB_CACHE_MAX_SIZE",
    "allowed_image_hosts": "MEDIAHUB_ALLOWED_IMAGE_HOSTS",
    "cors_origins": "MEDIAHUB_CORS_ORIGINS",
    "log_level": "MEDIAHUB_LOG_LEVEL",
}


class Settings(BaseModel):
    """Runtime configuration for providers, downloaders and the API server."""

    # Stock photos
    unsplash_access_key: str = ""
    pexels_api_key: str = ""

    # Design assets
    pixabay_api_key: str = ""
    iconfinder_api_key: str = ""
    freepik_api_key: str = ""

    # Movies
    tmdb_api_key: str = ""

    # RapidAPI downloaders
    rapidapi_key: str = ""
    rapidapi_host: str = "youtube-media-downloader.p.rapidapi.com"
    instagram_rapidapi_host: str = "instagram120.p.rapidapi.com"
    tiktok_rapidapi_host: str = "tiktok-video-no-watermark2.p.rapidapi.com"
    vidu_rapidapi_host: str = ""

    # HTTP / cache
    request_timeout: float = 30.0
    cache_enabled: bool = True
    cache_max_size: int = Field(default=1000, ge=1)

    # Server
    allowed_image_hosts: list[str] = Field(
        default_factory=lambda: ["images.unsplash.com", "images.pexels.com"]
    )
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @field_validator("allowed_image_hosts", "cors_origins", mode="before")
    @classmethod
    def split_comma_list(cls, v: Any) -> Any:
        """Accept comma separated strings as they come from the environment."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables."""
        return cls.model_validate(_env_values(environ))

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML mapping of field names."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return cls.model_validate(data)


def _env_values(environ: Mapping[str, str] | None) -> dict[str, str]:
    env = os.environ if environ is None else environ
    return {
        field: env[var]
        for field, var in ENV_VARS.items()
        if env.get(var) not in (None, "")
    }


def load_settings(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from an optional YAML file overlaid with the environment."""
    data: dict[str, Any] = {}
    if path is not None:
        data = Settings.from_yaml(path).model_dump(exclude_unset=True)
    data.update(_env_values(environ))
    return Settings.model_validate(data)


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, honouring MEDIAHUB_CONFIG when set."""
    config_path = os.environ.get(CONFIG_PATH_ENV)
    return load_settings(Path(config_path) if config_path else None)
