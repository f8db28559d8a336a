"""Page schema types for the multi-page survey.

Each page is described once as an ordered list of field descriptors. The field
kind is resolved here, so collection, validation and restoration dispatch on
`FieldDescriptor.kind` instead of re-detecting it per call.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from parish_survey.models.field_kind import FieldKind


class FieldOption(BaseModel):
    value: str
    label: str


class FieldDescriptor(BaseModel):
    field_id: str
    kind: str
    label: str = ""
    required: bool = False
    options: List[FieldOption] = Field(default_factory=list)
    # Name of the age-conditional section this field belongs to, if any
    age_section: Optional[str] = None

    @field_validator("kind")
    @classmethod
    def kind_must_be_known(cls, v: str) -> str:
        if v not in FieldKind.ALL:
            raise ValueError(f"unknown field kind: {v}")
        return v

    @model_validator(mode="after")
    def radio_needs_options(self) -> "FieldDescriptor":
        if self.kind == FieldKind.RADIO and not self.options:
            raise ValueError(f"radio field {self.field_id} declares no options")
        return self

    @property
    def option_values(self) -> List[str]:
        return [o.value for o in self.options]


class PageSchema(BaseModel):
    key: str
    title: str
    fields: List[FieldDescriptor] = Field(default_factory=list)

    def field(self, field_id: str) -> Optional[FieldDescriptor]:
        for f in self.fields:
            if f.field_id == field_id:
                return f
        return None

    @property
    def age_sections(self) -> set[str]:
        return {f.age_section for f in self.fields if f.age_section}


__all__ = ["FieldOption", "FieldDescriptor", "PageSchema"]
