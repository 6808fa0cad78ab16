"""Ephemeral state for one attached link-preview form."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from app.preview.metadata import LinkMetadata

FETCHING_MESSAGE = "Fetching link preview..."
FETCH_ERROR_MESSAGE = "Unable to fetch link preview."


class Phase(str, enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class FormFields:
    """Values written into the description/image/title inputs."""
    description: str = ""
    image: str = ""
    title: str = ""

    @classmethod
    def from_metadata(cls, metadata: LinkMetadata) -> "FormFields":
        # Missing values are written as "" so nothing from a prior cycle survives.
        return cls(
            description=metadata.description or "",
            image=metadata.image or "",
            title=metadata.title or "",
        )


@dataclass(slots=True, frozen=True)
class PreviewState:
    url: str = ""
    phase: Phase = Phase.IDLE
    fields: FormFields = field(default_factory=FormFields)
    preview_visible: bool = False
    message: str = ""
    metadata: LinkMetadata | None = None
    error: str | None = None

    @classmethod
    def idle(cls, url: str = "") -> "PreviewState":
        return cls(url=url)

    @classmethod
    def fetching(cls, url: str) -> "PreviewState":
        return cls(url=url, phase=Phase.FETCHING, message=FETCHING_MESSAGE)

    @classmethod
    def success(cls, url: str, metadata: LinkMetadata) -> "PreviewState":
        return cls(
            url=url,
            phase=Phase.SUCCESS,
            fields=FormFields.from_metadata(metadata),
            preview_visible=True,
            metadata=metadata,
        )

    @classmethod
    def failed(cls, url: str, reason: str) -> "PreviewState":
        return cls(url=url, phase=Phase.FAILED, message=reason, error=reason)
