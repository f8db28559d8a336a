"""Functional tests for the HTTP surface: survey flow and response viewer."""

from __future__ import annotations

from fastapi.testclient import TestClient

from parish_survey.config import AppConfig
from parish_survey.http.problem import PROBLEM_MEDIA_TYPE
from parish_survey.logic.events import SURVEY_COMPLETED, get_buffered_events
from parish_survey.main import create_app
from parish_survey.routes.responses import _listing
from parish_survey.routes.survey import SESSION_COOKIE
from parish_survey.services import build_services

API = "/api/v1"

WALK = [
    {},
    {"full_name": "Jane Doe", "email": "jane@example.org", "parish_member": "yes", "age": "minor", "specific_age": "15"},
    {"cat_youth": "on"},
    {"pref_website": "on"},
    {"community_connection": "5"},
    {"minor_fav": "Youth group", "minor_excitement": "4"},
    {"consent": "on"},
]


def _walk(client: TestClient) -> dict:
    body = None
    for values in WALK:
        resp = client.post(f"{API}/survey/next", json={"values": values})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["moved"] is True, body["view"]["errors"]
    return body


def test_first_request_issues_session_cookie_and_shows_welcome(client):
    resp = client.get(f"{API}/survey")
    assert resp.status_code == 200
    assert SESSION_COOKIE in resp.cookies
    view = resp.json()
    assert view["page_key"] == "welcome"
    assert view["index"] == 0
    assert view["progress"] == 0
    assert view["is_terminal"] is False


def test_blocked_advance_is_not_an_http_error(client):
    client.post(f"{API}/survey/next", json={"values": {}})
    resp = client.post(f"{API}/survey/next", json={"values": {"full_name": ""}})
    assert resp.status_code == 200
    body = resp.json()
    assert body["moved"] is False
    view = body["view"]
    assert view["page_key"] == "about_you"
    assert view["errors"]["full_name"] == "This field is required"
    field = next(f for f in view["fields"] if f["field_id"] == "full_name")
    assert field["error"] == "This field is required"


def test_full_walk_submits_and_appears_in_viewer(client):
    body = _walk(client)
    view = body["view"]
    assert view["page_key"] == "thank_you"
    assert view["is_terminal"] is True
    assert view["progress"] == 100
    assert [e["type"] for e in get_buffered_events()] == [SURVEY_COMPLETED]

    listing = client.get(f"{API}/responses").json()
    assert listing["error"] is None
    assert listing["stats"]["total"] == 1
    row = listing["rows"][0]
    assert row["full_name"] == "Jane Doe"
    assert row["membership_label"] == "Member"
    assert row["age_group"] == "minor"
    assert row["is_new"] is True

    summary = client.get(f"{API}/responses/summary", params={"age_group": "minor"}).json()
    assert summary["total"] == 1
    keys = [b["key"] for b in summary["blocks"]]
    assert "minor_fav" in keys
    assert "adult_family" not in keys

    details = client.get(f"{API}/responses/{row['record_id']}").json()
    assert details["groups"][0]["title"] == "Basic Information"
    assert details["message"] is None


def test_age_section_visibility_in_page_view(client):
    for values in WALK[:5]:
        client.post(f"{API}/survey/next", json={"values": values})
    view = client.get(f"{API}/survey").json()
    assert view["page_key"] == "your_stage"
    assert view["visible_section"] == "minor"
    visible = {f["field_id"] for f in view["fields"] if f["visible"]}
    assert visible == {"minor_fav", "minor_excitement", "minor_feedback"}


def test_back_and_restored_values(client):
    for values in WALK[:3]:
        client.post(f"{API}/survey/next", json={"values": values})
    body = client.post(f"{API}/survey/back").json()
    assert body["moved"] is True
    view = body["view"]
    assert view["page_key"] == "ministries"
    values = {f["field_id"]: f["value"] for f in view["fields"]}
    assert values["cat_youth"] is True
    assert values["cat_groups"] is False


def test_scroll_flag_reported_once_per_transition(client):
    body = client.post(f"{API}/survey/next", json={"values": {}}).json()
    assert body["view"]["scroll_to_top"] is True
    assert client.get(f"{API}/survey").json()["scroll_to_top"] is False


def test_patch_field_autosaves(client):
    client.post(f"{API}/survey/next", json={"values": {}})
    resp = client.patch(f"{API}/survey/fields/age", json={"value": "senior"})
    assert resp.status_code == 200
    assert resp.json()["visible_section"] == "senior"
    age = next(f for f in client.get(f"{API}/survey").json()["fields"] if f["field_id"] == "age")
    assert age["value"] == "senior"


def test_patch_field_not_on_page_is_problem_404(client):
    resp = client.patch(f"{API}/survey/fields/consent", json={"value": True})
    assert resp.status_code == 404
    assert resp.headers["content-type"].startswith(PROBLEM_MEDIA_TYPE)
    assert resp.json()["title"] == "Not Found"


def test_restart_returns_to_welcome(client):
    for values in WALK[:3]:
        client.post(f"{API}/survey/next", json={"values": values})
    view = client.post(f"{API}/survey/restart").json()
    assert view["page_key"] == "welcome"
    body = client.post(f"{API}/survey/next", json={"values": {}}).json()
    name = next(f for f in body["view"]["fields"] if f["field_id"] == "full_name")
    assert name["value"] == ""


def test_sessions_are_isolated_by_cookie(services):
    app = create_app(services=services)
    with TestClient(app) as a, TestClient(app) as b:
        a.post(f"{API}/survey/next", json={"values": {}})
        assert a.get(f"{API}/survey").json()["page_key"] == "about_you"
        assert b.get(f"{API}/survey").json()["page_key"] == "welcome"


def test_unknown_response_is_problem_404(client):
    resp = client.get(f"{API}/responses/does-not-exist")
    assert resp.status_code == 404
    assert resp.headers["content-type"].startswith(PROBLEM_MEDIA_TYPE)


def test_empty_viewer_and_refresh(client):
    listing = client.get(f"{API}/responses").json()
    assert listing["empty"] is True
    assert listing["stats"] == {"total": 0, "last_submission": None}
    _walk(client)
    # The cached set is stale until refreshed
    assert client.get(f"{API}/responses").json()["stats"]["total"] == 0
    refreshed = client.post(f"{API}/responses/refresh").json()
    assert refreshed["stats"]["total"] == 1
    assert refreshed["empty"] is False


def test_viewer_filters_by_query(client):
    _walk(client)
    client.post(f"{API}/responses/refresh")
    assert client.get(f"{API}/responses", params={"parish_member": "no"}).json()["empty"] is True
    assert len(client.get(f"{API}/responses", params={"parish_member": "yes"}).json()["rows"]) == 1


def test_viewer_without_sink_reports_error_inline():
    config = AppConfig.model_validate({"sink": {"backend": "rest"}})
    app = create_app(services=build_services(config))
    with TestClient(app) as c:
        listing = c.get(f"{API}/responses").json()
        assert listing["error"] == "Data sink not initialized. Check credentials."
        assert c.get("/health").json()["status"] == "degraded"


def test_request_id_is_echoed(client):
    resp = client.get("/health", headers={"X-Request-Id": "abc-123"})
    assert resp.headers["x-request-id"] == "abc-123"
    assert resp.json()["status"] == "ok"
    assert client.get("/health").headers["x-request-id"]


def test_cors_with_explicit_origin_allows_credentials(engine, sql_sink):
    config = AppConfig(cors_origins=["https://holytrinity.example"])
    app = create_app(services=build_services(config, engine=engine, sink=sql_sink))
    with TestClient(app) as c:
        resp = c.get(f"{API}/survey", headers={"Origin": "https://holytrinity.example"})
        assert resp.headers["access-control-allow-origin"] == "https://holytrinity.example"
        assert resp.headers["access-control-allow-credentials"] == "true"
        assert "x-request-id" in resp.headers["access-control-expose-headers"].lower()


def test_failed_initial_load_is_not_refetched_by_reads(engine, fake_sink):
    fake_sink.fail_select = True
    app = create_app(services=build_services(AppConfig(), engine=engine, sink=fake_sink))
    with TestClient(app) as c:
        first = c.get(f"{API}/responses").json()
        second = c.get(f"{API}/responses").json()
        c.get(f"{API}/responses/summary")
        assert fake_sink.selects == 1
        assert first["error"] == second["error"] == "Failed to load responses. Please try again."
        fake_sink.fail_select = False
        assert c.post(f"{API}/responses/refresh").json()["error"] is None
        assert fake_sink.selects == 2


def test_listing_reports_loading_while_a_fetch_is_in_flight(engine, fake_sink):
    services = build_services(AppConfig(), engine=engine, sink=fake_sink)
    seen = []
    select = fake_sink.select

    def select_seen_from_another_request(*args, **kwargs):
        seen.append(_listing(services.viewer, "all", "all").loading)
        return select(*args, **kwargs)

    fake_sink.select = select_seen_from_another_request
    with TestClient(create_app(services=services)) as c:
        listing = c.post(f"{API}/responses/refresh").json()
    assert seen == [True]
    assert listing["loading"] is False


def test_completion_releases_the_live_session(client, services):
    body = _walk(client)
    assert body["view"]["page_key"] == "thank_you"
    session_id = client.cookies[SESSION_COOKIE]
    assert session_id not in services.sessions
    # The submitted draft was cleared, so the next visit starts over
    assert client.get(f"{API}/survey").json()["page_key"] == "welcome"


def test_restart_releases_the_live_session(client, services):
    for values in WALK[:3]:
        client.post(f"{API}/survey/next", json={"values": values})
    session_id = client.cookies[SESSION_COOKIE]
    assert session_id in services.sessions
    client.post(f"{API}/survey/restart")
    assert session_id not in services.sessions


def test_cookieless_requests_keep_registry_bounded(engine, sql_sink):
    config = AppConfig.model_validate({"draft": {"max_sessions": 5}})
    services = build_services(config, engine=engine, sink=sql_sink)
    with TestClient(create_app(services=services)) as c:
        for _ in range(50):
            c.cookies.clear()
            assert c.get(f"{API}/survey").status_code == 200
    assert len(services.sessions) == 5
