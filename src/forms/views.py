from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class FormFieldView(BaseModel):
    """Render hints for a single form field."""

    name: str
    label: str
    type: str  # text | number | money | checkbox | choice
    required: bool = False
    value: Any = None
    choices: list[Any] | None = None


class FormView(BaseModel):
    """Render-ready description of a form for the embedding admin page."""

    name: str
    method: str
    fields: list[FormFieldView] = []
    errors: list[str] = []
