"""Exception hierarchy shared by providers, downloaders and routes.

Each exception knows the HTTP status and user-facing message it maps to, so
route handlers can simply let them propagate to the app's error handlers.
"""

from __future__ import annotations

from typing import Any


class MediaHubError(Exception):
    """Base error. Rendered as ``{"error": message, **extra}``."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra or {}

    def to_response(self) -> dict[str, Any]:
        return {"error": self.message, **self.extra}


class InvalidRequestError(MediaHubError):
    """Missing or malformed request parameters."""

    status_code = 400


class ProviderNotConfiguredError(MediaHubError):
    """A provider was used without its API key."""

    status_code = 500


class ProviderRequestError(MediaHubError):
    """An upstream API answered with an error or could not be reached."""

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        provider: str = "",
        upstream_status: int | None = None,
        status_code: int | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, extra=extra)
        self.provider = provider
        self.upstream_status = upstream_status


class RateLimitError(ProviderRequestError):
    """Upstream rate limit exhausted."""

    status_code = 429


class ContentUnavailableError(MediaHubError):
    """A downloader service could not resolve the requested content."""

    status_code = 400


class NotFoundError(MediaHubError):
    status_code = 404


class ForbiddenSourceError(MediaHubError):
    """URL points at a host outside the allow-list."""

    status_code = 403
