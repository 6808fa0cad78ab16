"""SQLAlchemy declarative base and shared column types."""

from typing import Any

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

JSON_COMPATIBLE = JSON().with_variant(JSONB, "postgresql")


class Base(DeclarativeBase):
    """Declarative base that stores plain dict columns as JSONB on Postgres."""

    type_annotation_map = {dict[str, Any]: JSON_COMPATIBLE}
