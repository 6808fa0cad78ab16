"""Download remote images into memory for attachment."""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from email.message import Message
from urllib.parse import unquote, urlparse

import httpx

from app.clients.http import ExternalAPIError
from app.core.config import settings
from app.utils.redaction import redact_secrets

logger = logging.getLogger("app.clients.downloader")

DEFAULT_FILENAME = "thumbnail"
MAX_REDIRECTS = 5


class DownloadError(ExternalAPIError):
    """Download failed in a way that may succeed on a later attempt."""


class InvalidURLError(DownloadError):
    """The URL can never be downloaded; callers should give up."""


@dataclass(slots=True)
class DownloadedFile:
    content: bytes
    original_filename: str
    content_type: str | None
    url: str

    @property
    def size(self) -> int:
        return len(self.content)


def _filename_from_disposition(header: str | None) -> str | None:
    if not header:
        return None
    message = Message()
    message["content-disposition"] = header
    filename = message.get_filename()
    if not filename:
        return None
    return posixpath.basename(filename.replace("\\", "/")) or None


def _filename_from_url(url: httpx.URL) -> str | None:
    name = posixpath.basename(unquote(url.path or ""))
    return name or None


def _validate_url(url: str) -> None:
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        raise InvalidURLError(f"Malformed URL: {redact_secrets(url)}") from exc
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise InvalidURLError(f"URL scheme not allowed or host missing: {redact_secrets(url)}")


class ThumbnailDownloader:
    """Fetch an image URL and report the file the server handed back."""

    def __init__(
        self,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout or settings.thumbnail_download_timeout_seconds
        self._transport = transport

    async def download(self, url: str) -> DownloadedFile:
        _validate_url(url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=True,
                max_redirects=MAX_REDIRECTS,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise InvalidURLError(str(exc)) from exc
        except httpx.HTTPStatusError as exc:
            raise DownloadError(f"Download failed with status {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise DownloadError(str(exc) or exc.__class__.__name__) from exc

        filename = (
            _filename_from_disposition(response.headers.get("content-disposition"))
            or _filename_from_url(response.url)
            or DEFAULT_FILENAME
        )
        content_type = response.headers.get("content-type")
        if content_type:
            content_type = content_type.split(";", 1)[0].strip() or None
        logger.info("Downloaded %d bytes from %s as %s", len(response.content), redact_secrets(url), filename)
        return DownloadedFile(
            content=response.content,
            original_filename=filename,
            content_type=content_type,
            url=str(response.url),
        )


thumbnail_downloader = ThumbnailDownloader()
