"""Equality filtering of the viewer's in-memory result set."""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence

ALL = "all"


def _matches(constraint: str | None, value: Any) -> bool:
    if constraint is None or constraint == ALL:
        return True
    return value == constraint


def filter_responses(
    records: Sequence[Mapping[str, Any]],
    age_group: str | None = ALL,
    parish_member: str | None = ALL,
) -> List[Mapping[str, Any]]:
    """Return the records matching both constraints, in their original order.

    The input sequence is not modified; `"all"` (or None) bypasses a constraint.
    """
    return [
        r
        for r in records
        if _matches(age_group, r.get("age_group")) and _matches(parish_member, r.get("parish_member"))
    ]


__all__ = ["ALL", "filter_responses"]
