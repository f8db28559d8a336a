"""Visibility rule evaluation for age-conditional survey sections.

Centralizes the equality-based check that decides which age section is shown
so the navigator, validator and page view agree on it.
"""

from __future__ import annotations

from typing import Iterable, Mapping
import logging

from parish_survey.models.page import FieldDescriptor, PageSchema

logger = logging.getLogger(__name__)

AGE_FIELD = "age"


def visible_age_section(answers: Mapping[str, object], sections: Iterable[str]) -> str | None:
    """Return the age section matching the stored age value, or None.

    At most one section is visible: the one whose name equals the `age`
    answer. No age answer, or a value naming no known section, shows none.
    """
    selected = answers.get(AGE_FIELD)
    if not isinstance(selected, str) or not selected:
        return None
    known = set(sections)
    if selected in known:
        return selected
    logger.info("age_section_unknown age=%s known=%s", selected, sorted(known))
    return None


def is_field_visible(field: FieldDescriptor, visible_section: str | None) -> bool:
    """Fields outside any age section are always visible."""
    if field.age_section is None:
        return True
    return field.age_section == visible_section


def compute_visible_fields(page: PageSchema, visible_section: str | None) -> set[str]:
    """Compute the set of visible field ids for a page."""
    return {f.field_id for f in page.fields if is_field_visible(f, visible_section)}


__all__ = [
    "AGE_FIELD",
    "visible_age_section",
    "is_field_visible",
    "compute_visible_fields",
]
