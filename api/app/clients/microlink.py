"""Microlink client for link-preview metadata."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from app.clients.http import parse_json_object
from app.core.config import settings
from app.preview.metadata import LinkMetadata
from app.utils.redaction import redact_secrets

logger = logging.getLogger("app.clients.microlink")

SUCCESS_STATUS = "success"


@dataclass(slots=True)
class MicrolinkResponse:
    """Status and payload as reported by microlink."""
    status: str
    data: dict[str, Any] = field(default_factory=dict)
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS_STATUS

    @property
    def metadata(self) -> LinkMetadata:
        return LinkMetadata.from_payload(self.data)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "MicrolinkResponse":
        data = payload.get("data")
        message = payload.get("message")
        return cls(
            status=str(payload.get("status") or ""),
            data=data if isinstance(data, dict) else {},
            message=message if isinstance(message, str) else None,
        )


class MicrolinkClient:
    """Single-shot metadata lookups against the microlink API.

    One request per call, no retries and no caching. Transport failures
    (timeouts, DNS, malformed URLs) propagate as ``httpx`` errors.
    """

    def __init__(
        self,
        *,
        api_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url or settings.microlink_api_url
        self.api_key = api_key if api_key is not None else settings.microlink_api_key
        self.timeout = timeout or settings.microlink_timeout_seconds
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    async def fetch(self, url: str) -> MicrolinkResponse:
        """Look up preview metadata for ``url``."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(self.api_url, params={"url": url}, headers=self._headers())
        result = MicrolinkResponse.from_payload(parse_json_object(response))
        logger.info(
            "Microlink lookup for %s returned %s (http %s)",
            redact_secrets(url),
            result.status or "<none>",
            response.status_code,
        )
        return result


microlink_client = MicrolinkClient()
