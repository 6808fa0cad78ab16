"""Redaction helpers for URLs that end up in logs."""

from __future__ import annotations

import re

_URL_USERINFO_RE = re.compile(r"([a-z][a-z0-9+.-]*://)([^@/\s]+)@", re.IGNORECASE)
# Signed image URLs (S3, CDNs) carry their credentials in the query string.
_QUERY_SECRET_RE = re.compile(
    r"(?i)([?&](?:token|secret|password|api_key|apikey|key|access_token|sig|signature"
    r"|x-amz-signature|x-amz-credential|x-amz-security-token))=([^&\s]+)"
)


def redact_secrets(text: str) -> str:
    """Redact credentials embedded in URLs within a log string."""
    if not text:
        return text
    redacted = _URL_USERINFO_RE.sub(r"\1***@", text)
    return _QUERY_SECRET_RE.sub(r"\1=***", redacted)
