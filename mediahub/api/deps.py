"""Request dependencies shared by the routers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from mediahub.config import Settings
from mediahub.providers.registry import ProviderRegistry


def get_registry(request: Request) -> ProviderRegistry:
    return request.app.state.registry


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


Registry = Annotated[ProviderRegistry, Depends(get_registry)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
