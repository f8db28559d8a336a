"""Functional tests for the SQL and REST data sinks."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from parish_survey.config import SinkConfig
from parish_survey.logic.sink import RestSink, SinkError, SqlSink, build_sink
from parish_survey.logic.submitter import RESPONSES_TABLE


def test_sql_insert_generates_id_and_timestamp(sql_sink):
    stored = sql_sink.insert(RESPONSES_TABLE, {"full_name": "Jane", "data": {"age": "adult"}})
    assert stored["id"]
    assert stored["created_at"].endswith("+00:00")
    assert stored["data"] == {"age": "adult"}


def test_sql_select_filters_and_orders(sql_sink):
    sql_sink.insert(RESPONSES_TABLE, {"full_name": "Old", "parish_member": "yes", "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc), "data": {}})
    sql_sink.insert(RESPONSES_TABLE, {"full_name": "New", "parish_member": "yes", "data": {}})
    sql_sink.insert(RESPONSES_TABLE, {"full_name": "Visitor", "parish_member": "no", "data": {}})

    members = sql_sink.select(RESPONSES_TABLE, filters={"parish_member": "yes"}, order=("created_at", True))
    assert [r["full_name"] for r in members] == ["New", "Old"]


def test_sql_sink_rejects_unknown_table_and_columns(sql_sink):
    with pytest.raises(SinkError):
        sql_sink.select("no_such_table")
    with pytest.raises(SinkError):
        sql_sink.insert(RESPONSES_TABLE, {"shoe_size": 9})
    with pytest.raises(SinkError):
        sql_sink.select(RESPONSES_TABLE, order=("shoe_size", True))


def test_sql_sink_wraps_database_errors(engine):
    sink = SqlSink(engine)
    with engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE survey_responses")
    with pytest.raises(SinkError):
        sink.select(RESPONSES_TABLE)


def _rest_sink(handler) -> RestSink:
    return RestSink("https://example.supabase.co/", "anon-key", transport=httpx.MockTransport(handler))


def test_rest_select_builds_query_and_auth_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["headers"] = request.headers
        return httpx.Response(200, json=[{"id": "1", "full_name": "Jane"}])

    rows = _rest_sink(handler).select(RESPONSES_TABLE, filters={"parish_member": "yes"}, order=("created_at", True))
    assert rows == [{"id": "1", "full_name": "Jane"}]
    assert seen["url"].path == "/rest/v1/survey_responses"
    params = dict(seen["url"].params)
    assert params == {"select": "*", "parish_member": "eq.yes", "order": "created_at.desc"}
    assert seen["headers"]["apikey"] == "anon-key"
    assert seen["headers"]["authorization"] == "Bearer anon-key"


def test_rest_insert_posts_single_row_list():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        seen["prefer"] = request.headers.get("prefer")
        return httpx.Response(201, json=[{"id": "abc", **seen["body"][0]}])

    stored = _rest_sink(handler).insert(RESPONSES_TABLE, {"full_name": "Jane", "data": {"cat_youth": True}})
    assert seen["body"] == [{"full_name": "Jane", "data": {"cat_youth": True}}]
    assert seen["prefer"] == "return=representation"
    assert stored["id"] == "abc"


def test_rest_insert_without_representation_echoes_record():
    sink = _rest_sink(lambda request: httpx.Response(201))
    assert sink.insert(RESPONSES_TABLE, {"full_name": "Jane"}) == {"full_name": "Jane"}


@pytest.mark.parametrize("status", [400, 401, 500])
def test_rest_http_errors_become_sink_errors(status):
    sink = _rest_sink(lambda request: httpx.Response(status, json={"message": "nope"}))
    with pytest.raises(SinkError):
        sink.select(RESPONSES_TABLE)
    with pytest.raises(SinkError):
        sink.insert(RESPONSES_TABLE, {"full_name": "Jane"})


def test_rest_transport_failure_becomes_sink_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(SinkError):
        _rest_sink(handler).select(RESPONSES_TABLE)


def test_rest_select_rejects_non_list_payload():
    sink = _rest_sink(lambda request: httpx.Response(200, json={"rows": []}))
    with pytest.raises(SinkError):
        sink.select(RESPONSES_TABLE)


def test_build_sink_without_rest_credentials_is_none():
    assert build_sink(SinkConfig(backend="rest", rest_url="https://example.supabase.co")) is None


def test_build_sink_selects_backend(engine):
    assert isinstance(build_sink(SinkConfig(), engine), SqlSink)
    sink = build_sink(SinkConfig(backend="rest", rest_url="https://example.supabase.co", api_key="k"))
    assert isinstance(sink, RestSink)
    sink.close()
