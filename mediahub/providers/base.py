"""Base API provider with authentication, rate limit tracking and caching.

Every upstream service (stock photos, design assets, TMDB, RapidAPI
downloaders) is wrapped in an ``APIProvider`` subclass. Providers share:

1. Authentication resolved from ``Settings`` (never hardcoded)
2. A lazily created ``httpx.AsyncClient`` (or one injected by the registry)
3. Rate limit tracking from upstream headers
4. Optional response caching through ``ResponseCache``
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping

import httpx
from pydantic import BaseModel

from mediahub.config import Settings
from mediahub.errors import (
    ProviderNotConfiguredError,
    ProviderRequestError,
    RateLimitError,
)
from mediahub.providers.cache import ResponseCache

logger = logging.getLogger(__name__)

# Reset header values above (now - slack) are absolute epoch times
EPOCH_RESET_SLACK = 86400


class ProviderAuthType(str, Enum):
    """How the provider authenticates requests."""
    NONE = "none"  # Public API
    QUERY_PARAM = "query_param"  # API key in URL query string
    HEADER = "header"  # API key as a raw header value
    BEARER = "bearer"  # Bearer token in Authorization header


class ProviderKind(str, Enum):
    """What a provider is used for."""
    PHOTOS = "photos"
    ASSETS = "assets"
    MOVIES = "movies"
    CONTENT = "content"


class ProviderTier(str, Enum):
    """Provider tier classification.

    standard: Normal rate limits
    restricted: Low rate limits or strict terms (e.g. Unsplash demo mode)
    """
    STANDARD = "standard"
    RESTRICTED = "restricted"


@dataclass
class RateLimitInfo:
    """Rate limit status from the last provider response."""
    limit: int = 100
    remaining: int = 100
    reset_seconds: int = 60
    timestamp: float = field(default_factory=time.time)

    @property
    def is_exhausted(self) -> bool:
        return self.remaining <= 0

    @property
    def is_low(self) -> bool:
        """Less than 20% of the window left."""
        return self.remaining < (self.limit * 0.2)

    def seconds_until_reset(self) -> float:
        elapsed = time.time() - self.timestamp
        return max(0.0, self.reset_seconds - elapsed)

    @property
    def blocks_requests(self) -> bool:
        """Exhausted and the window has not rolled over yet."""
        return self.is_exhausted and self.seconds_until_reset() > 0

    @classmethod
    def from_headers(
        cls,
        headers: Mapping[str, str],
        default: "RateLimitInfo | None" = None,
    ) -> "RateLimitInfo":
        """Parse ``X-RateLimit-*`` headers, falling back to ``default`` values.

        Header lookup is case-insensitive when ``headers`` is an
        ``httpx.Headers`` instance; plain dicts are matched on both the
        ``X-RateLimit`` and ``X-Ratelimit`` spellings.
        """
        default = default or cls()

        def read(name: str, fallback: int) -> int:
            for key in (f"X-RateLimit-{name}", f"X-Ratelimit-{name}"):
                value = headers.get(key)
                if value is not None:
                    try:
                        return int(float(value))
                    except ValueError:
                        return fallback
            return fallback

        now = time.time()
        reset = read("Reset", default.reset_seconds)
        # Pexels sends the reset as a UNIX timestamp, not a window length
        if reset > now - EPOCH_RESET_SLACK:
            reset = max(0, int(reset - now))

        return cls(
            limit=read("Limit", default.limit),
            remaining=read("Remaining", default.remaining),
            reset_seconds=reset,
            timestamp=now,
        )


def page_count(total: int, per_page: int) -> int:
    """Number of pages needed to show ``total`` results."""
    return math.ceil(total / per_page) if per_page > 0 else 0


class ProviderConfig(BaseModel):
    """Static configuration for an API provider."""
    id: str
    name: str
    kind: ProviderKind
    base_url: str
    auth_type: ProviderAuthType = ProviderAuthType.NONE
    auth_param: str = "key"  # Query param name or header name
    auth_prefix: str = ""  # e.g. "Client-ID " for Unsplash
    api_key_setting: str | None = None  # Settings field holding the key
    rate_limit_window: int = 3600
    rate_limit_requests: int = 100
    cache_duration: int = 3600
    requires_attribution: bool = False
    attribution_template: str = ""
    tier: ProviderTier = ProviderTier.STANDARD


class APIProvider:
    """Base class for all upstream API wrappers."""

    config: ProviderConfig

    def __init__(
        self,
        settings: Settings,
        cache: ResponseCache | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.cache = cache
        self._client = client
        self._owns_client = client is None
        self._rate_limit = RateLimitInfo(
            limit=self.config.rate_limit_requests,
            remaining=self.config.rate_limit_requests,
            reset_seconds=self.config.rate_limit_window,
        )

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.request_timeout,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    # --- Authentication ---

    @property
    def is_configured(self) -> bool:
        if self.config.api_key_setting is None:
            return True
        return bool(getattr(self.settings, self.config.api_key_setting, ""))

    @property
    def api_key(self) -> str:
        """API key from settings; raises when it is missing."""
        if self.config.api_key_setting is None:
            return ""
        key = getattr(self.settings, self.config.api_key_setting, "")
        if not key:
            raise ProviderNotConfiguredError(f"{self.config.name} API key not configured")
        return key

    def require_configured(self) -> None:
        """Raise ProviderNotConfiguredError unless the API key is set."""
        self.api_key

    def get_auth_headers(self) -> dict[str, str]:
        if self.config.auth_type == ProviderAuthType.HEADER:
            return {self.config.auth_param: f"{self.config.auth_prefix}{self.api_key}"}
        if self.config.auth_type == ProviderAuthType.BEARER:
            return {"Authorization": f"Bearer {self.api_key}"}
        return {}

    def get_auth_params(self) -> dict[str, str]:
        if self.config.auth_type == ProviderAuthType.QUERY_PARAM:
            return {self.config.auth_param: self.api_key}
        return {}

    # --- Rate limiting ---

    @property
    def rate_limit(self) -> RateLimitInfo:
        return self._rate_limit

    def update_rate_limit(self, headers: Mapping[str, str]) -> None:
        self._rate_limit = RateLimitInfo.from_headers(headers, default=self._rate_limit)

    # --- Requests ---

    def build_url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.config.base_url}{endpoint}"

    async def _request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Call the upstream API and return the decoded JSON body.

        Raises:
            ProviderNotConfiguredError: API key missing
            RateLimitError: upstream answered 429 or the window is exhausted
            ProviderRequestError: any other non-2xx status or transport error
        """
        name = self.config.name
        if self.rate_limit.blocks_requests:
            raise RateLimitError(
                f"{name} rate limit exceeded. Try again later.",
                provider=self.id,
            )

        request_headers = {**self.get_auth_headers(), **(headers or {})}
        request_params = {**(params or {}), **self.get_auth_params()}
        url = self.build_url(endpoint)

        try:
            response = await self.client.request(
                method,
                url,
                params=request_params or None,
                json=json,
                data=data,
                headers=request_headers,
            )
        except httpx.HTTPError as e:
            logger.warning(f"{name} request to {endpoint or '/'} failed: {e}")
            raise ProviderRequestError(
                f"{name} API request failed: {e}", provider=self.id
            ) from e

        self.update_rate_limit(response.headers)

        if response.status_code == 429:
            raise RateLimitError(
                f"{name} rate limit exceeded. Try again later.",
                provider=self.id,
                upstream_status=429,
            )

        if response.is_error:
            logger.warning(f"{name} API error {response.status_code} for {endpoint or '/'}")
            raise ProviderRequestError(
                f"{name} API error: {response.status_code}",
                provider=self.id,
                upstream_status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderRequestError(
                f"{name} API returned invalid JSON", provider=self.id
            ) from e

    async def cached(
        self,
        method: str,
        params: dict[str, Any],
        fetch: Callable[[], Awaitable[Any]],
        ttl: int | None = None,
    ) -> Any:
        """Return a cached JSON-compatible value or compute and store it."""
        if self.cache is None:
            return await fetch()

        hit = self.cache.get(self.id, method, params)
        if hit is not None:
            return hit

        value = await fetch()
        self.cache.set(self.id, method, params, value, ttl=ttl or self.config.cache_duration)
        return value

    def info(self) -> dict[str, Any]:
        """Public description of the provider (never includes the API key)."""
        return {
            "id": self.config.id,
            "name": self.config.name,
            "kind": self.config.kind.value,
            "configured": self.is_configured,
            "tier": self.config.tier.value,
            "requiresAttribution": self.config.requires_attribution,
            "attributionTemplate": self.config.attribution_template,
            "cacheDuration": self.config.cache_duration,
            "rateLimit": {
                "limit": self.rate_limit.limit,
                "remaining": self.rate_limit.remaining,
                "resetSeconds": self.rate_limit.reset_seconds,
                "isExhausted": self.rate_limit.is_exhausted,
            },
        }
