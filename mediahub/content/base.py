"""RapidAPI-hosted downloader services.

All downloaders share one RapidAPI key; each service lives on its own host,
which is configurable because RapidAPI listings change hosts over time.
"""

from __future__ import annotations

from mediahub.errors import ProviderNotConfiguredError
from mediahub.providers.base import APIProvider, ProviderAuthType, ProviderConfig, ProviderKind


def rapidapi_config(provider_id: str, name: str) -> ProviderConfig:
    return ProviderConfig(
        id=provider_id,
        name=name,
        kind=ProviderKind.CONTENT,
        base_url="",  # Resolved from settings, see RapidAPIClient.host
        auth_type=ProviderAuthType.HEADER,
        auth_param="x-rapidapi-key",
        api_key_setting="rapidapi_key",
        rate_limit_window=86400,
        rate_limit_requests=500,
        cache_duration=0,
    )


class RapidAPIClient(APIProvider):
    """Base for downloader services reached through RapidAPI."""

    # Settings field holding this service's RapidAPI host
    host_setting: str = "rapidapi_host"
    # Message used when the key or host is missing
    not_configured_message: str = "Download service not configured"

    @property
    def host(self) -> str:
        return getattr(self.settings, self.host_setting, "")

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.rapidapi_key and self.host)

    def require_configured(self) -> None:
        if not self.is_configured:
            raise ProviderNotConfiguredError(self.not_configured_message)

    def get_auth_headers(self) -> dict[str, str]:
        self.require_configured()
        return {
            "x-rapidapi-key": self.settings.rapidapi_key,
            "x-rapidapi-host": self.host,
        }

    def build_url(self, endpoint: str) -> str:
        return f"https://{self.host}/{endpoint.lstrip('/')}"
