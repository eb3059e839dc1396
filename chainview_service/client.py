"""
Chain Preview Client
====================

Fetches a subscription's chain preview from the admin API.

Responsibility: capture the preview payload from the wire and hand it
to PreviewMapper. No rule evaluation happens here.
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import logging

import httpx

from chainview.config import ServiceConfig
from chainview.dtos import ChainPreviewDTO
from chainview.errors import PreviewFetchError
from chainview.mapper import PreviewMapper

logger = logging.getLogger(__name__)


PREVIEW_PATH = "/api/v1/subcription/{subscription_id}/chain-rules/preview"
BUSINESS_OK = 200


class PreviewClient:
    """
    Thin wrapper over httpx for the chain-preview endpoint.

    A transport may be injected (httpx.MockTransport in tests).
    """

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._config = config or ServiceConfig.from_env()
        self._transport = transport

    @property
    def config(self) -> ServiceConfig:
        return self._config

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._config.access_token:
            # Token is sent as-is, without a scheme prefix.
            headers["Authorization"] = self._config.access_token
        return headers

    def fetch_payload(self, subscription_id: int) -> Dict[str, Any]:
        """Raw `data` object of the preview response."""
        url = PREVIEW_PATH.format(subscription_id=subscription_id)
        try:
            with httpx.Client(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers=self._headers(),
                transport=self._transport,
            ) as client:
                response = client.get(url)
        except httpx.HTTPError as e:
            logger.error("Chain preview request failed: %s", e)
            raise PreviewFetchError(f"Request failed: {e}") from e

        if response.status_code != 200:
            message = self._error_message(response) or f"HTTP {response.status_code}"
            logger.error("Chain preview for subscription %s returned %s", subscription_id, message)
            raise PreviewFetchError(message, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise PreviewFetchError("Response is not JSON", status_code=response.status_code) from e

        if not isinstance(body, dict):
            raise PreviewFetchError("Response is not a JSON object", status_code=response.status_code)

        # Business errors come back as HTTP 200 with a non-200 code.
        code = body.get("code")
        if isinstance(code, int) and not isinstance(code, bool) and code != BUSINESS_OK:
            raise PreviewFetchError(body.get("msg") or "Request rejected", status_code=code)

        data = body.get("data")
        if not isinstance(data, dict):
            raise PreviewFetchError("Response has no preview data", status_code=response.status_code)
        return data

    def fetch_preview(self, subscription_id: int) -> ChainPreviewDTO:
        payload = self.fetch_payload(subscription_id)
        preview = PreviewMapper().map_preview(payload)
        logger.info(
            "Fetched chain preview for subscription %s: %d rules, %d degradations",
            subscription_id, len(preview.rules), len(preview.degradations),
        )
        return preview

    @staticmethod
    def _error_message(response: httpx.Response) -> Optional[str]:
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            return body.get("error") or body.get("msg")
        return None
