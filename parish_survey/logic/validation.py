"""Per-page validation of required survey fields.

Validation never raises: it returns a `ValidationResult` whose `errors` map
each failing field to a human-readable annotation. Fields hidden by the
current age section are skipped even when marked required.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from pydantic import BaseModel, Field

from parish_survey.models.field_kind import FieldKind
from parish_survey.models.page import FieldDescriptor, PageSchema
from parish_survey.logic.visibility_rules import is_field_visible

MSG_REQUIRED = "This field is required"
MSG_INVALID_EMAIL = "Please enter a valid email address"
MSG_SELECT_OPTION = "Please select an option"
MSG_CHECKBOX_REQUIRED = "This box must be checked to continue"

_TRUTHY = {"on", "true", "1", "yes", "checked"}


class ValidationResult(BaseModel):
    ok: bool
    errors: Dict[str, str] = Field(default_factory=dict)


def is_checked(raw: Any) -> bool:
    """Interpret a posted checkbox value; browsers send "on" when checked."""
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    return str(raw).strip().lower() in _TRUTHY


def _text(raw: Any) -> str:
    if raw is None or isinstance(raw, bool):
        return ""
    return str(raw)


def check_field(field: FieldDescriptor, raw: Any) -> str | None:
    """Return the annotation for a failing required field, else None."""
    if not field.required:
        return None
    if field.kind == FieldKind.CHECKBOX:
        return None if is_checked(raw) else MSG_CHECKBOX_REQUIRED
    if field.kind == FieldKind.RADIO:
        return None if _text(raw) in field.option_values else MSG_SELECT_OPTION
    value = _text(raw).strip()
    if not value:
        return MSG_REQUIRED
    # Only the presence of "@" is checked
    if field.kind == FieldKind.EMAIL and "@" not in value:
        return MSG_INVALID_EMAIL
    return None


def validate_page(
    page: PageSchema,
    values: Mapping[str, Any],
    visible_section: str | None,
) -> ValidationResult:
    """Validate the posted values of one page.

    `values` holds the raw form values of the visible page only; a radio group
    is represented by its name with the selected option's value.
    """
    errors: Dict[str, str] = {}
    for field in page.fields:
        if not is_field_visible(field, visible_section):
            continue
        message = check_field(field, values.get(field.field_id))
        if message is not None:
            errors[field.field_id] = message
    return ValidationResult(ok=not errors, errors=errors)


__all__ = [
    "MSG_REQUIRED",
    "MSG_INVALID_EMAIL",
    "MSG_SELECT_OPTION",
    "MSG_CHECKBOX_REQUIRED",
    "ValidationResult",
    "is_checked",
    "check_field",
    "validate_page",
]
