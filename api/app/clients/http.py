from __future__ import annotations

from typing import Any

import httpx


class ExternalAPIError(Exception):
    pass


def parse_json_object(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body or raise ExternalAPIError."""
    try:
        payload = response.json()
    except ValueError as exc:
        raise ExternalAPIError(f"Unexpected non-JSON response ({response.status_code})") from exc
    if not isinstance(payload, dict):
        raise ExternalAPIError(f"Unexpected response shape ({response.status_code})")
    return payload
