"""Data sink: the external tabular store responses are written to and read from.

The core depends only on the `DataSink` contract:
- select(table, filters, order) -> rows
- insert(table, record) -> stored row

`SqlSink` targets any SQLAlchemy engine (SQLite in development and tests).
`RestSink` targets a hosted PostgREST-style endpoint over authenticated HTTPS
using httpx. Both raise `SinkError` for any I/O failure so callers handle one
exception type.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

import httpx
from sqlalchemy import select as sa_select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from parish_survey.config import SinkConfig
from parish_survey.models.response import Base

logger = logging.getLogger(__name__)

# (column, descending)
Order = Tuple[str, bool]


class SinkError(RuntimeError):
    """Raised when the sink cannot complete a select or insert."""


class DataSink(Protocol):
    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[Order] = None,
    ) -> List[Dict[str, Any]]: ...

    def insert(self, table: str, record: Mapping[str, Any]) -> Dict[str, Any]: ...


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return value


class SqlSink:
    """Sink over tables declared in the ORM metadata."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def _table(self, table: str):  # type: ignore[no-untyped-def]
        tbl = Base.metadata.tables.get(table)
        if tbl is None:
            raise SinkError(f"unknown table: {table}")
        return tbl

    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[Order] = None,
    ) -> List[Dict[str, Any]]:
        tbl = self._table(table)
        stmt = sa_select(tbl)
        for column, value in (filters or {}).items():
            if column not in tbl.c:
                raise SinkError(f"unknown column: {table}.{column}")
            stmt = stmt.where(tbl.c[column] == value)
        if order is not None:
            column, descending = order
            if column not in tbl.c:
                raise SinkError(f"unknown column: {table}.{column}")
            stmt = stmt.order_by(tbl.c[column].desc() if descending else tbl.c[column].asc())
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as exc:
            logger.error("sink_select_failed table=%s", table, exc_info=True)
            raise SinkError(str(exc)) from exc
        return [{k: _jsonable(v) for k, v in row.items()} for row in rows]

    def insert(self, table: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        tbl = self._table(table)
        unknown = set(record) - set(tbl.c.keys())
        if unknown:
            raise SinkError(f"unknown columns for {table}: {sorted(unknown)}")
        row: Dict[str, Any] = dict(record)
        # Generated server-side by the hosted store; produced here for SQL targets
        if "id" in tbl.c and not row.get("id"):
            row["id"] = str(uuid.uuid4())
        if "created_at" in tbl.c and not row.get("created_at"):
            row["created_at"] = datetime.now(timezone.utc)
        try:
            with self.engine.begin() as conn:
                conn.execute(tbl.insert().values(**row))
        except SQLAlchemyError as exc:
            logger.error("sink_insert_failed table=%s", table, exc_info=True)
            raise SinkError(str(exc)) from exc
        logger.info("sink_insert_ok table=%s id=%s", table, row.get("id"))
        return {k: _jsonable(v) for k, v in row.items()}


class RestSink:
    """Sink over a hosted PostgREST-style HTTP API.

    Requests carry the project key both as `apikey` and as a bearer token.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.client = httpx.Client(
            base_url=base_url.rstrip("/") + "/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[Order] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, str] = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"
        if order is not None:
            column, descending = order
            params["order"] = f"{column}.{'desc' if descending else 'asc'}"
        try:
            resp = self.client.get(f"/{table}", params=params)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("sink_select_failed table=%s", table, exc_info=True)
            raise SinkError(str(exc)) from exc
        if not isinstance(data, list):
            raise SinkError(f"unexpected select payload for {table}: {type(data).__name__}")
        return [dict(row) for row in data if isinstance(row, dict)]

    def insert(self, table: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            resp = self.client.post(
                f"/{table}",
                json=[dict(record)],
                headers={"Prefer": "return=representation"},
            )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("sink_insert_failed table=%s", table, exc_info=True)
            raise SinkError(str(exc)) from exc
        try:
            data = resp.json()
        except ValueError:
            data = None
        if isinstance(data, list) and data and isinstance(data[0], dict):
            stored = dict(data[0])
        else:
            stored = dict(record)
        logger.info("sink_insert_ok table=%s id=%s", table, stored.get("id"))
        return stored

    def close(self) -> None:
        self.client.close()


def build_sink(config: SinkConfig, engine: Optional[Engine] = None) -> Optional[DataSink]:
    """Construct the configured sink, or None when it cannot be initialized."""
    if config.backend == "rest":
        if not config.rest_ready:
            logger.error("sink_not_initialized backend=rest reason=missing_credentials")
            return None
        return RestSink(str(config.rest_url), str(config.api_key), timeout=config.timeout_seconds)
    if engine is None:
        from parish_survey.db.base import get_engine

        engine = get_engine(config.database_url)
    return SqlSink(engine)


__all__ = [
    "Order",
    "SinkError",
    "DataSink",
    "SqlSink",
    "RestSink",
    "build_sink",
]
