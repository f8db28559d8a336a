"""Pydantic request/response models for the survey routes.

Declared apart from the route modules so logic helpers can build views
without importing the HTTP layer.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from parish_survey.models.page import FieldOption


class PageSubmitModel(BaseModel):
    # Raw values of the fields on the visible page, as a form would post them
    values: Dict[str, Any] = Field(default_factory=dict)


class FieldChangeModel(BaseModel):
    value: str | bool | int | float | None = None


class FieldView(BaseModel):
    field_id: str
    kind: str
    label: str
    required: bool
    options: List[FieldOption] = Field(default_factory=list)
    value: str | bool | None = None
    visible: bool = True
    error: Optional[str] = None


class PageView(BaseModel):
    page_key: str
    title: str
    index: int
    total: int
    progress: float
    is_terminal: bool
    visible_section: Optional[str] = None
    scroll_to_top: bool = False
    fields: List[FieldView] = Field(default_factory=list)
    errors: Dict[str, str] = Field(default_factory=dict)


class NavigationResult(BaseModel):
    moved: bool
    view: PageView


__all__ = [
    "PageSubmitModel",
    "FieldChangeModel",
    "FieldView",
    "PageView",
    "NavigationResult",
]
