"""Single accessor for reading a field of a stored response record.

Top-level columns and the nested `data` map form one logical namespace:
an answered top-level column wins, otherwise the nested value is returned.
"""

from __future__ import annotations

from typing import Any, Mapping

from parish_survey.models.session import is_answered

NESTED_KEY = "data"


def get_field(record: Mapping[str, Any], key: str) -> Any:
    top = record.get(key)
    if is_answered(top):
        return top
    nested = record.get(NESTED_KEY)
    if isinstance(nested, Mapping):
        return nested.get(key)
    return None


__all__ = ["NESTED_KEY", "get_field"]
