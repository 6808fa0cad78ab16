"""Total accessors over the loosely shaped microlink payload."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence


def field_value(data: Any, path: str | Sequence[str]) -> str | None:
    """Walk ``path`` through nested mappings; never raises on missing keys.

    ``path`` is either a dotted string (``"image.url"``) or a sequence of keys.
    Non-mapping intermediates, missing keys and non-scalar leaves all yield
    ``None``. Numbers are rendered with ``str`` so they can fill a text field.
    """
    keys = path.split(".") if isinstance(path, str) else list(path)
    current = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    if current is None or isinstance(current, (dict, list, bool)):
        return None
    return current if isinstance(current, str) else str(current)


@dataclass(slots=True, frozen=True)
class LinkMetadata:
    """The three preview values the form cares about."""
    description: str | None = None
    image: str | None = None
    title: str | None = None

    @classmethod
    def from_payload(cls, data: Any) -> "LinkMetadata":
        return cls(
            description=field_value(data, "description"),
            image=field_value(data, "image.url"),
            title=field_value(data, "title"),
        )
