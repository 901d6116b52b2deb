"""HTTP API for MediaHub."""

from mediahub.api.app import create_app

__all__ = ["create_app"]
