"""SQLAlchemy ORM models for the link preview API."""

from app.models.link import METADATA_KEYS, Link, LinkThumbnail, LinkValidationError

__all__ = [
    "METADATA_KEYS",
    "Link",
    "LinkThumbnail",
    "LinkValidationError",
]
