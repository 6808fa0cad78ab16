"""Pure mapping from PreviewState to what the form should display."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Protocol

from app.preview.state import FormFields, Phase, PreviewState


@dataclass(slots=True, frozen=True)
class PreviewPanel:
    visible: bool = False
    title: str = ""
    description: str = ""
    image: str = ""


@dataclass(slots=True, frozen=True)
class FormRender:
    """Every element the controller writes; the view never reads back."""
    phase: Phase
    fields: FormFields
    preview: PreviewPanel | None
    message: str

    def as_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["phase"] = self.phase.value
        return payload


class FormView(Protocol):
    """Anything that can display a FormRender (socket, template, test double)."""

    def apply(self, render: FormRender) -> None: ...


def render(state: PreviewState, *, has_preview: bool = True) -> FormRender:
    preview: PreviewPanel | None = None
    if has_preview:
        if state.preview_visible:
            preview = PreviewPanel(
                visible=True,
                title=state.fields.title,
                description=state.fields.description,
                image=state.fields.image,
            )
        else:
            preview = PreviewPanel()
    return FormRender(phase=state.phase, fields=state.fields, preview=preview, message=state.message)
