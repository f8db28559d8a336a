"""Parsing and display helpers for record timestamps.

Records from the SQL sink and the hosted REST sink both carry ISO-8601
`created_at` strings; naive values are taken to be UTC. Display strings are
rendered in UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_date(dt: datetime) -> str:
    """Short date label, e.g. "Jan 25, 2026"."""
    return f"{dt:%b} {dt.day}, {dt.year}"


def format_datetime(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d %H:%M:%S UTC")


__all__ = ["parse_timestamp", "format_date", "format_datetime"]
