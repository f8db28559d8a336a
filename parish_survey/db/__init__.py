"""Database bootstrap utilities for the Parish Survey service.

Exposes engine construction and the schema bootstrap used by the SQL sink and
the SQL draft backend. Route handlers never import from here.
"""

from parish_survey.db.base import get_engine
from parish_survey.db.schema import ensure_schema

__all__ = [
    "get_engine",
    "ensure_schema",
]
