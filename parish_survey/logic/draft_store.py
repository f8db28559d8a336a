"""Draft persistence for the in-progress Answer Map.

A draft lives under a fixed key inside the respondent's session namespace and
survives reloads until it is cleared after a successful submission or an
explicit restart. Loading fails soft: missing or unreadable data yields an
empty draft and never raises.

Two key-value backends are provided: an in-process dict for development and
tests, and a SQL table (`survey_drafts`) reached through SQLAlchemy.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol, Tuple

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from parish_survey.models.field_kind import FieldKind
from parish_survey.models.page import PageSchema
from parish_survey.models.session import AnswerMap

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "ht_survey_data"
DEFAULT_PAGE_KEY = "ht_survey_page"


class KeyValueBackend(Protocol):
    def get(self, namespace: str, key: str) -> Optional[str]: ...

    def set(self, namespace: str, key: str, value: str) -> None: ...

    def delete(self, namespace: str, key: str) -> None: ...


class InMemoryBackend:
    """Process-local key-value store keyed by (namespace, key)."""

    def __init__(self) -> None:
        self._items: Dict[Tuple[str, str], str] = {}

    def get(self, namespace: str, key: str) -> Optional[str]:
        return self._items.get((namespace, key))

    def set(self, namespace: str, key: str, value: str) -> None:
        self._items[(namespace, key)] = value

    def delete(self, namespace: str, key: str) -> None:
        self._items.pop((namespace, key), None)


class SqlBackend:
    """Key-value store over the `survey_drafts` table."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def get(self, namespace: str, key: str) -> Optional[str]:
        with self.engine.connect() as conn:
            row = conn.execute(
                sql_text(
                    "SELECT payload FROM survey_drafts WHERE session_id = :sid AND draft_key = :key"
                ),
                {"sid": namespace, "key": key},
            ).fetchone()
        return None if row is None else str(row[0])

    def set(self, namespace: str, key: str, value: str) -> None:
        params = {
            "sid": namespace,
            "key": key,
            "payload": value,
            "updated_at": datetime.now(timezone.utc),
        }
        with self.engine.begin() as conn:
            updated = conn.execute(
                sql_text(
                    """
                    UPDATE survey_drafts
                    SET payload = :payload, updated_at = :updated_at
                    WHERE session_id = :sid AND draft_key = :key
                    """
                ),
                params,
            ).rowcount
            if not updated:
                conn.execute(
                    sql_text(
                        """
                        INSERT INTO survey_drafts (draft_id, session_id, draft_key, payload, updated_at)
                        VALUES (:draft_id, :sid, :key, :payload, :updated_at)
                        """
                    ),
                    {**params, "draft_id": f"{namespace}:{key}"},
                )

    def delete(self, namespace: str, key: str) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                sql_text("DELETE FROM survey_drafts WHERE session_id = :sid AND draft_key = :key"),
                {"sid": namespace, "key": key},
            )


class DraftStore:
    """Save, load and clear one respondent's draft under fixed keys."""

    def __init__(
        self,
        backend: KeyValueBackend,
        session_id: str,
        storage_key: str = DEFAULT_STORAGE_KEY,
        page_key: str = DEFAULT_PAGE_KEY,
    ) -> None:
        self.backend = backend
        self.session_id = session_id
        self.storage_key = storage_key
        self.page_key = page_key

    def save(self, answers: AnswerMap) -> None:
        """Serialize and persist the Answer Map, overwriting any prior draft."""
        payload = json.dumps(answers, ensure_ascii=False, sort_keys=True)
        try:
            self.backend.set(self.session_id, self.storage_key, payload)
        except SQLAlchemyError:
            logger.error("draft_save_failed session=%s", self.session_id, exc_info=True)

    def load(self) -> AnswerMap:
        """Return the persisted Answer Map, or {} when absent or unreadable."""
        try:
            raw = self.backend.get(self.session_id, self.storage_key)
        except SQLAlchemyError:
            logger.error("draft_load_failed session=%s", self.session_id, exc_info=True)
            return {}
        if raw is None:
            return {}
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("draft_corrupt session=%s", self.session_id)
            return {}
        if not isinstance(data, dict):
            logger.warning("draft_not_a_map session=%s type=%s", self.session_id, type(data).__name__)
            return {}
        return {
            str(k): v for k, v in data.items() if isinstance(v, (str, bool))
        }

    def save_page(self, index: int) -> None:
        try:
            self.backend.set(self.session_id, self.page_key, str(int(index)))
        except SQLAlchemyError:
            logger.error("draft_page_save_failed session=%s", self.session_id, exc_info=True)

    def load_page(self) -> Optional[int]:
        try:
            raw = self.backend.get(self.session_id, self.page_key)
        except SQLAlchemyError:
            logger.error("draft_page_load_failed session=%s", self.session_id, exc_info=True)
            return None
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning("draft_page_corrupt session=%s value=%r", self.session_id, raw)
            return None

    def clear(self) -> None:
        """Remove the persisted draft and page index."""
        try:
            self.backend.delete(self.session_id, self.storage_key)
            self.backend.delete(self.session_id, self.page_key)
        except SQLAlchemyError:
            logger.error("draft_clear_failed session=%s", self.session_id, exc_info=True)
            return
        logger.info("draft_cleared session=%s", self.session_id)


def restore_page(page: PageSchema, answers: AnswerMap) -> Dict[str, str | bool | None]:
    """Return the value each field of the page should show.

    - checkbox: checked state from the stored boolean
    - radio: the option whose value equals the stored string, else none
    - plain: the stored string verbatim
    Fields with no stored value get their empty default.
    """
    restored: Dict[str, str | bool | None] = {}
    for field in page.fields:
        stored = answers.get(field.field_id)
        if field.kind == FieldKind.CHECKBOX:
            restored[field.field_id] = stored is True
        elif field.kind == FieldKind.RADIO:
            restored[field.field_id] = stored if isinstance(stored, str) and stored in field.option_values else None
        else:
            restored[field.field_id] = "" if stored is None or isinstance(stored, bool) else str(stored)
    return restored


__all__ = [
    "DEFAULT_STORAGE_KEY",
    "DEFAULT_PAGE_KEY",
    "KeyValueBackend",
    "InMemoryBackend",
    "SqlBackend",
    "DraftStore",
    "restore_page",
]
