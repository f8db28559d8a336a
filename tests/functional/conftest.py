from __future__ import annotations

"""Functional test bootstrap.

Each test gets its own in-memory SQLite engine (StaticPool keeps the single
connection alive) with the survey schema applied, plus a service container
and a TestClient wired to it. Fake sinks let tests script sink failures.
"""

from typing import Any, Dict, List, Mapping, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from parish_survey.config import AppConfig
from parish_survey.db.schema import ensure_schema
from parish_survey.logic.draft_store import DraftStore, InMemoryBackend
from parish_survey.logic.events import get_buffered_events
from parish_survey.logic.sink import SinkError, SqlSink
from parish_survey.logic.submitter import Submitter
from parish_survey.main import create_app
from parish_survey.services import build_services


class FakeSink:
    """Records inserts and serves scripted rows; can be told to fail."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None) -> None:
        self.rows: List[Dict[str, Any]] = list(rows or [])
        self.inserted: List[Dict[str, Any]] = []
        self.selects = 0
        self.fail_insert = False
        self.fail_select = False

    def select(self, table: str, filters: Optional[Mapping[str, Any]] = None, order=None) -> List[Dict[str, Any]]:
        self.selects += 1
        if self.fail_select:
            raise SinkError("select unavailable")
        return [dict(r) for r in self.rows]

    def insert(self, table: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        if self.fail_insert:
            raise SinkError("insert rejected")
        stored = {"id": f"rec-{len(self.inserted) + 1}", **dict(record)}
        self.inserted.append(stored)
        return stored


@pytest.fixture(autouse=True)
def _clear_events():
    get_buffered_events(clear=True)
    yield
    get_buffered_events(clear=True)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    ensure_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def sql_sink(engine) -> SqlSink:
    return SqlSink(engine)


@pytest.fixture
def fake_sink() -> FakeSink:
    return FakeSink()


@pytest.fixture
def draft_store() -> DraftStore:
    return DraftStore(InMemoryBackend(), "session-1")


@pytest.fixture
def submitter(fake_sink, draft_store) -> Submitter:
    return Submitter(fake_sink, draft_store)


@pytest.fixture
def services(engine, sql_sink):
    return build_services(AppConfig(), engine=engine, sink=sql_sink)


@pytest.fixture
def client(services) -> TestClient:
    with TestClient(create_app(services=services)) as c:
        yield c
