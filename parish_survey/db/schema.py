"""Schema bootstrap for the SQL sink and SQL draft backend.

Creates the `survey_responses` and `survey_drafts` tables from the ORM
metadata when they are missing. Existing tables are left untouched; the
hosted deployment manages its own schema.
"""

from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from parish_survey.models.response import Base

logger = logging.getLogger(__name__)


def ensure_schema(engine: Engine) -> list[str]:
    """Create missing survey tables; return the names that were created."""
    existing = set(inspect(engine).get_table_names())
    missing = [name for name in Base.metadata.tables if name not in existing]
    if not missing:
        logger.info("db_schema_ready tables=%s", sorted(Base.metadata.tables))
        return []
    Base.metadata.create_all(engine)
    logger.info("db_schema_created tables=%s", missing)
    return missing


__all__ = ["ensure_schema"]
