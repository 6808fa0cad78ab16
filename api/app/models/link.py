"""Link records, their metadata document, and the attached thumbnail."""

from __future__ import annotations

import typing
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, LargeBinary, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from app.db.base_class import Base

METADATA_KEYS = ("description", "image", "title")


class LinkValidationError(ValueError):
    """Raised when a link cannot be persisted as given."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MetaDataAccessor:
    """Expose one key of ``Link.meta_data`` as a plain attribute.

    Reading a missing key yields ``None``. Writing replaces the whole document
    so SQLAlchemy notices the change without mutation tracking.
    """

    key: str

    def __set_name__(self, owner: type, name: str) -> None:
        self.key = name

    def __get__(self, instance: "Link | None", owner: type) -> typing.Any:
        if instance is None:
            return self
        return (instance.meta_data or {}).get(self.key)

    def __set__(self, instance: "Link", value: str | None) -> None:
        document = dict(instance.meta_data or {})
        document[self.key] = value
        instance.meta_data = document


class Link(Base):
    """A saved URL plus the preview metadata captured when it was submitted."""
    __tablename__ = "links"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    meta_data: Mapped[dict[str, typing.Any]] = mapped_column(default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    thumbnail: Mapped["LinkThumbnail | None"] = relationship(
        back_populates="link", uselist=False, cascade="all, delete-orphan"
    )

    description = MetaDataAccessor()
    image = MetaDataAccessor()
    title = MetaDataAccessor()

    @validates("url")
    def _validate_url(self, _key: str, value: str | None) -> str:
        if value is None or not value.strip():
            raise LinkValidationError("url can't be blank")
        return value


class LinkThumbnail(Base):
    """Binary thumbnail owned by a link; one per link, replaced on re-attach."""
    __tablename__ = "link_thumbnails"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    link_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("links.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    byte_size: Mapped[int] = mapped_column(Integer, nullable=False)
    checksum: Mapped[str] = mapped_column(String(64), nullable=False)
    source_url: Mapped[str | None] = mapped_column(Text(), nullable=True)
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False, deferred=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    link: Mapped[Link] = relationship(back_populates="thumbnail")
