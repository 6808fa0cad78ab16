"""Shared helpers for API tests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from app.clients.downloader import DownloadedFile
from app.clients.microlink import MicrolinkResponse
from app.preview.render import FormRender


def success_response(**data: Any) -> MicrolinkResponse:
    return MicrolinkResponse(status="success", data=data)


@dataclass
class StubMicrolinkClient:
    """Returns canned responses (or raises canned errors) keyed by URL."""

    responses: dict[str, MicrolinkResponse | Exception] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def fetch(self, url: str) -> MicrolinkResponse:
        self.calls.append(url)
        outcome = self.responses[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@dataclass
class GatedMicrolinkClient:
    """Holds each fetch open until the test releases it."""

    responses: dict[str, MicrolinkResponse] = field(default_factory=dict)
    gates: dict[str, asyncio.Event] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    def gate(self, url: str) -> asyncio.Event:
        return self.gates.setdefault(url, asyncio.Event())

    async def fetch(self, url: str) -> MicrolinkResponse:
        self.calls.append(url)
        await self.gate(url).wait()
        return self.responses[url]


@dataclass
class RecordingView:
    renders: list[FormRender] = field(default_factory=list)

    def apply(self, render: FormRender) -> None:
        self.renders.append(render)

    @property
    def last(self) -> FormRender:
        return self.renders[-1]


@dataclass
class StubDownloader:
    """Serves a fixed file or raises a fixed error, recording requested URLs."""

    result: DownloadedFile | Exception
    calls: list[str] = field(default_factory=list)

    async def download(self, url: str) -> DownloadedFile:
        self.calls.append(url)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def png_file(url: str = "https://img.example.com/x.png", *, content: bytes = b"\x89PNG\r\n\x1a\nfake") -> DownloadedFile:
    return DownloadedFile(content=content, original_filename="x.png", content_type="image/png", url=url)
