"""Link schemas for the form submission and API responses."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ORMModel(BaseModel):
    """Base model that reads attributes straight off SQLAlchemy rows."""

    model_config = {"from_attributes": True}


def _require_present(value: str) -> str:
    if not value.strip():
        raise ValueError("url can't be blank")
    return value


class LinkCreate(BaseModel):
    """Payload posted by the link form; metadata fields come from the preview."""
    url: str = Field(min_length=1, max_length=2048)
    description: str | None = None
    image: str | None = None
    title: str | None = None

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return _require_present(value)


class LinkUpdate(BaseModel):
    """Partial update; omitted fields are left untouched."""
    url: str | None = Field(default=None, min_length=1, max_length=2048)
    description: str | None = None
    image: str | None = None
    title: str | None = None

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return _require_present(value)


class ThumbnailRead(ORMModel):
    """Attachment facts exposed alongside a link; the bytes are served separately."""
    filename: str
    content_type: str | None = None
    byte_size: int
    checksum: str
    created_at: datetime


class LinkRead(ORMModel):
    """Link response including the raw metadata document."""
    id: UUID
    url: str
    meta_data: dict = Field(default_factory=dict)
    description: str | None = None
    image: str | None = None
    title: str | None = None
    thumbnail: ThumbnailRead | None = None
    created_at: datetime
    updated_at: datetime
