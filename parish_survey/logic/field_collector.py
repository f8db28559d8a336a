"""Collect the values of one page into the cumulative Answer Map.

Dispatches on the descriptor kind resolved in the page schema:
- checkbox: stored as a boolean (posted "on" -> True, absent -> False)
- radio: stored as the selected option's value; an unselected group, or a
  value that is not one of its options, leaves any earlier answer untouched
- everything else: stored as the posted string verbatim ("" when absent)
"""

from __future__ import annotations

from typing import Any, Mapping

from parish_survey.models.field_kind import FieldKind
from parish_survey.models.page import FieldDescriptor, PageSchema
from parish_survey.models.session import AnswerMap, AnswerValue
from parish_survey.logic.validation import is_checked


def collect_value(field: FieldDescriptor, raw: Any) -> AnswerValue | None:
    """Return the Answer Map value for one field, or None to leave it unset."""
    if field.kind == FieldKind.CHECKBOX:
        return is_checked(raw)
    if field.kind == FieldKind.RADIO:
        if raw is None or isinstance(raw, bool) or str(raw) not in field.option_values:
            return None
        return str(raw)
    if raw is None or isinstance(raw, bool):
        return ""
    return str(raw)


def collect_page(page: PageSchema, values: Mapping[str, Any]) -> AnswerMap:
    """Read every field of the page into a flat Answer Map."""
    collected: AnswerMap = {}
    for field in page.fields:
        value = collect_value(field, values.get(field.field_id))
        if value is not None:
            collected[field.field_id] = value
    return collected


def merge_answers(answers: AnswerMap, page_answers: AnswerMap) -> AnswerMap:
    """Merge one page's answers into the session map in place and return it."""
    answers.update(page_answers)
    return answers


__all__ = ["collect_value", "collect_page", "merge_answers"]
