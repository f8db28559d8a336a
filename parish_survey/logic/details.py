"""Grouped, labelled details of one response record.

Values are read through the record accessor; unanswered items are dropped and
a group with no remaining items is omitted altogether.
"""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional, Tuple

from parish_survey.logic.record_access import get_field
from parish_survey.logic.timestamps import format_datetime, parse_timestamp
from parish_survey.models.session import is_answered
from parish_survey.models.viewer import DetailGroup, DetailItem

NO_DETAILS_MESSAGE = "No detailed information available for this response."

Formatter = Callable[[Any], str]


def _format_created_at(value: Any) -> str:
    dt = parse_timestamp(value)
    return format_datetime(dt) if dt is not None else str(value)


# (title, [(label, key, formatter)])
DETAIL_GROUPS: List[Tuple[str, List[Tuple[str, str, Optional[Formatter]]]]] = [
    (
        "Basic Information",
        [
            ("Full Name", "full_name", None),
            ("Email", "email", None),
            ("Parish Member", "parish_member", None),
            ("Age Group", "age_group", None),
            ("Specific Age", "age", None),
            ("Submitted At", "created_at", _format_created_at),
        ],
    ),
    (
        "Ministry Interests",
        [
            ("Current Ministries", "current_ministries", None),
            ("Faith Formation", "cat_faith_formation", None),
            ("Liturgical / Mass", "cat_liturgical", None),
            ("Youth Ministry", "cat_youth", None),
            ("Service Groups", "cat_groups", None),
            ("Seasonal/Events", "cat_seasonal", None),
        ],
    ),
    (
        "Communication Preferences",
        [
            ("Email Updates", "pref_email", None),
            ("Printed Bulletin", "pref_bulletin", None),
            ("Parish Website", "pref_website", None),
        ],
    ),
    (
        "Feedback & Community",
        [
            ("Community Connection (1-5)", "community_connection", None),
            ("New Program Ideas", "community_additions", None),
            ("Family Support Needs", "community_families", None),
            ("Family Growth (Adults)", "adult_family", None),
            ("Faith Challenges (Young Adults)", "young_challenge", None),
            ("Experience (Seniors)", "senior_service", None),
            ("Minor: Favorite Part", "minor_fav", None),
            ("Minor: Excitement (1-5)", "minor_excitement", None),
            ("Minor: Feedback", "minor_feedback", None),
            ("Prayer Intentions / Final Comments", "final_comments", None),
        ],
    ),
]


def _display(value: Any, formatter: Optional[Formatter]) -> str:
    if formatter is not None:
        return formatter(value)
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def build_details(record: Mapping[str, Any]) -> List[DetailGroup]:
    """Return the non-empty detail groups of a record (empty list if none)."""
    groups: List[DetailGroup] = []
    for title, fields in DETAIL_GROUPS:
        items = []
        for label, key, formatter in fields:
            value = get_field(record, key)
            if not is_answered(value):
                continue
            items.append(DetailItem(label=label, value=_display(value, formatter)))
        if items:
            groups.append(DetailGroup(title=title, items=items))
    return groups


__all__ = ["NO_DETAILS_MESSAGE", "DETAIL_GROUPS", "build_details"]
