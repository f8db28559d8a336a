"""Service wiring shared by the route handlers.

`build_services` turns an `AppConfig` into the collaborators the routes need:
the draft backend, the data sink, the response viewer and the registry of live
survey sessions. The container is stored on `app.state.services`; tests build
their own with in-memory or fake collaborators.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.engine import Engine

from parish_survey.config import AppConfig
from parish_survey.logic.draft_store import DraftStore, InMemoryBackend, KeyValueBackend, SqlBackend
from parish_survey.logic.navigator import Navigator, restore_session
from parish_survey.logic.session_registry import SessionRegistry
from parish_survey.logic.sink import DataSink, build_sink
from parish_survey.logic.submitter import Submitter
from parish_survey.logic.survey_pages import SURVEY_PAGES
from parish_survey.logic.viewer import ResponseViewer
from parish_survey.models.page import PageSchema

logger = logging.getLogger(__name__)


@dataclass
class Services:
    config: AppConfig
    draft_backend: KeyValueBackend
    sink: Optional[DataSink]
    viewer: ResponseViewer
    pages: List[PageSchema] = field(default_factory=lambda: list(SURVEY_PAGES))
    sessions: SessionRegistry = field(default_factory=SessionRegistry)

    def draft_store(self, session_id: str) -> DraftStore:
        return DraftStore(
            self.draft_backend,
            session_id,
            storage_key=self.config.draft.storage_key,
            page_key=self.config.draft.page_key,
        )

    def navigator(self, session_id: str) -> Navigator:
        store = self.draft_store(session_id)
        session = self.sessions.get_or_restore(
            session_id, lambda sid: restore_session(sid, store, len(self.pages))
        )
        submitter = Submitter(self.sink, store, table=self.config.sink.table)
        return Navigator(self.pages, session, store, submitter)

    def release(self, session_id: str) -> None:
        """Drop the live session; its draft, if any, still restores it."""
        self.sessions.discard(session_id)


def build_services(
    config: AppConfig,
    engine: Optional[Engine] = None,
    sink: Optional[DataSink] = None,
    draft_backend: Optional[KeyValueBackend] = None,
) -> Services:
    """Build the service container for the given configuration.

    Explicit `sink` / `draft_backend` arguments take precedence over config.
    """
    if config.uses_sql and engine is None:
        from parish_survey.db.base import get_engine

        engine = get_engine(config.sink.database_url)
    if engine is not None:
        from parish_survey.db.schema import ensure_schema

        ensure_schema(engine)

    if sink is None:
        sink = build_sink(config.sink, engine=engine)
    if draft_backend is None:
        if config.draft.backend == "sql" and engine is not None:
            draft_backend = SqlBackend(engine)
        else:
            draft_backend = InMemoryBackend()

    viewer = ResponseViewer(
        sink,
        table=config.sink.table,
        new_badge_hours=config.viewer.new_badge_hours,
    )
    logger.info(
        "services_built sink=%s draft=%s",
        type(sink).__name__ if sink is not None else None,
        type(draft_backend).__name__,
    )
    return Services(
        config=config,
        draft_backend=draft_backend,
        sink=sink,
        viewer=viewer,
        sessions=SessionRegistry(config.draft.max_sessions),
    )


__all__ = ["Services", "build_services"]
