"""Generic RapidAPI video downloader ("VIDU") passthrough.

The upstream JSON is relayed as-is, including error payloads, so callers
see whatever the service reports about a link.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from mediahub.content.base import RapidAPIClient, rapidapi_config
from mediahub.errors import InvalidRequestError, ProviderRequestError

logger = logging.getLogger(__name__)

VIDU_CONFIG = rapidapi_config("vidu", "VIDU")


class ViduClient(RapidAPIClient):
    config = VIDU_CONFIG
    host_setting = "vidu_rapidapi_host"
    not_configured_message = "VIDU download service not configured"

    async def download(self, url: str | None) -> Any:
        if not url:
            raise InvalidRequestError("URL is required")
        headers = self.get_auth_headers()

        logger.info(f"VIDU lookup via {self.host}")
        try:
            response = await self.client.post(self.build_url("download"), json={"url": url}, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderRequestError(f"VIDU API request failed: {e}", provider=self.id) from e

        self.update_rate_limit(response.headers)
        try:
            return response.json()
        except ValueError as e:
            raise ProviderRequestError("VIDU API returned invalid JSON", provider=self.id) from e
