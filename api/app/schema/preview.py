"""Render payloads pushed to the link form."""

from __future__ import annotations

from pydantic import BaseModel


class FormFieldsRead(BaseModel):
    description: str = ""
    image: str = ""
    title: str = ""


class PreviewPanelRead(BaseModel):
    visible: bool = False
    title: str = ""
    description: str = ""
    image: str = ""


class PreviewRenderRead(BaseModel):
    """One render of the form: input values, preview panel and status line."""
    phase: str
    fields: FormFieldsRead
    preview: PreviewPanelRead | None = None
    message: str = ""
