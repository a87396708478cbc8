# app/adapters/admin_transport.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from app.api.errors import ConfigurationError, UpstreamError
from app.core.config import AppSettings

logger = logging.getLogger("helphub.upstream")


class AdminApiTransport:
    """
    Authenticated JSON calls to the Shopify Admin API.

    Every failure surfaces as UpstreamError with a message that carries
    neither the access token nor the request URL. No retries.
    """

    def __init__(
        self,
        settings: AppSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        if not self.settings.is_configured:
            raise ConfigurationError()
        return httpx.AsyncClient(
            base_url=self.settings.admin_base_url,
            headers={
                "X-Shopify-Access-Token": self.settings.ADMIN_TOKEN,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=self.settings.UPSTREAM_TIMEOUT,
            transport=self._transport,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            async with self._client() as client:
                resp = await client.request(method, path, params=params, json=json_body)
        except httpx.TimeoutException as exc:
            logger.error("Shopify Admin timeout: %s %s", method, path.split("?")[0])
            raise UpstreamError("Shopify Admin request timed out") from exc
        except httpx.HTTPError as exc:
            logger.error("Shopify Admin transport error: %s", type(exc).__name__)
            raise UpstreamError(
                f"Shopify Admin request failed ({type(exc).__name__})"
            ) from exc

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.is_error:
            logger.error("Shopify Admin error: status=%s path=%s", resp.status_code, path)
            errors = data.get("errors") if isinstance(data, dict) else None
            detail = json.dumps(errors) if errors else resp.reason_phrase
            raise UpstreamError(
                f"Shopify Admin error: {detail}", upstream_status=resp.status_code
            )

        if not isinstance(data, dict):
            raise UpstreamError(
                "Shopify Admin returned an unreadable body", upstream_status=resp.status_code
            )
        return data
