"""ORM models for submitted survey responses and persisted drafts.

`survey_responses` mirrors the hosted table read by the viewer: a fixed set of
scalar columns plus a JSON `data` column holding the full Answer Map.
`survey_drafts` backs the SQL draft store, one row per (session, key).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SurveyResponse(Base):  # type: ignore[valid-type]
    __tablename__ = "survey_responses"

    id = Column(String, primary_key=True, default=_new_id)
    full_name = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    parish_member = Column(String(8), nullable=True)
    age_group = Column(String(32), nullable=True)
    age = Column(String(32), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    data = Column(JSON, nullable=True)


class SurveyDraft(Base):  # type: ignore[valid-type]
    __tablename__ = "survey_drafts"
    __table_args__ = (
        UniqueConstraint("session_id", "draft_key", name="uq_survey_draft_session_key"),
    )

    draft_id = Column(String, primary_key=True, default=_new_id)
    session_id = Column(String, nullable=False, index=True)
    draft_key = Column(String, nullable=False)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


__all__ = ["Base", "SurveyResponse", "SurveyDraft"]
