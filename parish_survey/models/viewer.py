"""Viewer payload types: header stats, table rows and record details."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ViewerStats(BaseModel):
    total: int
    last_submission: Optional[str] = None


class ResponseRow(BaseModel):
    record_id: Optional[str] = None
    date_label: str
    is_new: bool = False
    full_name: str
    email: str
    parish_member: Optional[str] = None
    membership_label: str
    age_group: str


class DetailItem(BaseModel):
    label: str
    value: str


class DetailGroup(BaseModel):
    title: str
    items: List[DetailItem] = Field(default_factory=list)


__all__ = ["ViewerStats", "ResponseRow", "DetailItem", "DetailGroup"]
