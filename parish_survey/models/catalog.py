"""Question catalog and summary types used by the response viewer."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator

from parish_survey.models.field_kind import QuestionKind


class CatalogEntry(BaseModel):
    label: str
    key: str
    kind: str

    @field_validator("kind")
    @classmethod
    def kind_must_be_known(cls, v: str) -> str:
        if v not in {QuestionKind.CHOICE, QuestionKind.TEXT}:
            raise ValueError(f"unknown question kind: {v}")
        return v


class ChoiceTally(BaseModel):
    label: str
    count: int
    percent: int


class SummaryBlock(BaseModel):
    label: str
    key: str
    kind: str
    # Number of non-empty answers for this question, not the record-set size
    total: int
    tallies: List[ChoiceTally] = Field(default_factory=list)
    answers: List[str] = Field(default_factory=list)


__all__ = ["CatalogEntry", "ChoiceTally", "SummaryBlock"]
