"""Testes HTTP da API de eventos com provedor fake."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from tests.fakes.fake_calendar_provider import FakeCalendarProvider
from tests.fakes.fake_calendar_stack import build_gateway, raw_event
from tests.fakes.fake_credentials import FakeTokenIssuer

from app.app import create_app
from app.bootstrap import get_calendar_gateway, get_credential_refresher
from app.services.credential_refresher import CredentialRefresher
from utils.errors import TransientServerError

ACCESS_COOKIE = "google_access_token"


@pytest.fixture
def provider() -> FakeCalendarProvider:
    return FakeCalendarProvider(
        [
            raw_event("evt-a", "2024-03-16T10:00:00Z", "2024-03-16T11:00:00Z", "Daily"),
            raw_event("evt-b", "2024-03-16T14:00:00Z", "2024-03-16T15:00:00Z", "Retro"),
        ]
    )


@pytest.fixture
def issuer() -> FakeTokenIssuer:
    return FakeTokenIssuer()


@pytest.fixture
def api(provider: FakeCalendarProvider, issuer: FakeTokenIssuer):
    app = create_app()
    gateway = build_gateway(provider)
    refresher = CredentialRefresher(issuer)
    app.dependency_overrides[get_calendar_gateway] = lambda: gateway
    app.dependency_overrides[get_credential_refresher] = lambda: refresher
    return app


def _client(app, **cookies: str) -> TestClient:
    return TestClient(app, cookies=cookies)


def test_list_events_returns_envelope(api) -> None:
    response = _client(api, google_access_token="token").get("/api/calendar/events")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert [event["id"] for event in body["data"]] == ["evt-a", "evt-b"]
    assert body["data"][0]["summary"] == "Daily"


def test_list_events_with_q_searches(api, provider: FakeCalendarProvider) -> None:
    response = _client(api, google_access_token="token").get(
        "/api/calendar/events", params={"q": "retro", "maxResults": 10}
    )

    assert [event["id"] for event in response.json()["data"]] == ["evt-b"]
    query = provider.calls[0][1]["query"]
    assert query["q"] == "retro"
    assert query["maxResults"] == 10


def test_bearer_header_is_accepted(api, provider: FakeCalendarProvider) -> None:
    response = TestClient(api).get(
        "/api/calendar/events", headers={"Authorization": "Bearer header-token"}
    )

    assert response.status_code == 200
    assert provider.calls[0][1]["access_token"] == "header-token"


def test_missing_credentials_return_401(api) -> None:
    response = TestClient(api).get("/api/calendar/events")

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Authentication failed"}


def test_expired_token_is_refreshed_and_cookie_is_set(
    api,
    provider: FakeCalendarProvider,
    issuer: FakeTokenIssuer,
) -> None:
    provider.rejected_tokens.add("expired")

    response = _client(api, google_access_token="expired", google_refresh_token="r1").get(
        "/api/calendar/events"
    )

    assert response.status_code == 200
    assert issuer.calls == ["r1"]
    assert response.cookies.get(ACCESS_COOKIE) == "fresh-1"
    assert "httponly" in response.headers["set-cookie"].lower()


def test_revoked_refresh_token_returns_401(api, provider: FakeCalendarProvider) -> None:
    provider.rejected_tokens.add("expired")
    app_issuer = FakeTokenIssuer(revoked={"r1"})
    api.dependency_overrides[get_credential_refresher] = lambda: CredentialRefresher(app_issuer)

    response = _client(api, google_access_token="expired", google_refresh_token="r1").get(
        "/api/calendar/events"
    )

    assert response.status_code == 401
    assert response.json()["error"] == "Authentication failed"


def test_create_event_returns_201(api, provider: FakeCalendarProvider) -> None:
    response = _client(api, google_access_token="token").post(
        "/api/calendar/events",
        json={
            "summary": "Planejamento",
            "start": "2024-03-18T10:00:00Z",
            "end": "2024-03-18T11:00:00Z",
            "location": "Sala 1",
        },
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["summary"] == "Planejamento"
    assert data["location"] == "Sala 1"
    assert data["id"] in provider.events


def test_create_event_rejects_incomplete_body(api, provider: FakeCalendarProvider) -> None:
    response = _client(api, google_access_token="token").post(
        "/api/calendar/events", json={"summary": "Sem datas"}
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["error"].startswith("invalid_event:")
    assert provider.calls == []


def test_create_event_rejects_invalid_json(api) -> None:
    response = _client(api, google_access_token="token").post(
        "/api/calendar/events",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "invalid_json"}


def test_get_event_not_found(api) -> None:
    response = _client(api, google_access_token="token").get("/api/calendar/events/nope")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Resource not found"}


def test_patch_event_updates_summary(api, provider: FakeCalendarProvider) -> None:
    response = _client(api, google_access_token="token").patch(
        "/api/calendar/events/evt-a", json={"summary": "Daily adiada"}
    )

    assert response.status_code == 200
    assert response.json()["data"]["summary"] == "Daily adiada"
    assert provider.events["evt-a"]["summary"] == "Daily adiada"


def test_delete_event(api, provider: FakeCalendarProvider) -> None:
    response = _client(api, google_access_token="token").delete("/api/calendar/events/evt-a")

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {"id": "evt-a"}}
    assert "evt-a" not in provider.events


def test_delete_missing_event_succeeds_with_warning(api) -> None:
    response = _client(api, google_access_token="token").delete("/api/calendar/events/nope")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {"id": "nope"},
        "warning": "Event not found or already deleted",
    }


def test_delete_failure_is_not_reported_as_missing(api, provider: FakeCalendarProvider) -> None:
    provider.fail_next("delete_event", *[TransientServerError(status_code=503)] * 4)

    response = _client(api, google_access_token="token").delete("/api/calendar/events/nope")

    assert response.status_code == 503
    assert response.json()["success"] is False
    assert "warning" not in response.json()


def test_persistent_server_errors_return_503(api, provider: FakeCalendarProvider) -> None:
    provider.fail_next("list_events", *[TransientServerError(status_code=503)] * 4)

    response = _client(api, google_access_token="token").get("/api/calendar/events")

    assert response.status_code == 503
    assert response.json()["error"] == "Calendar service unavailable. Please try again later."
    assert provider.call_count("list_events") == 4


def test_list_calendars(api) -> None:
    response = _client(api, google_access_token="token").get("/api/calendar/calendars")

    assert response.status_code == 200
    assert response.json()["data"] == [
        {"id": "primary", "summary": "Agenda principal"},
        {"id": "team@group.calendar.google.com", "summary": "Equipe"},
    ]


def test_correlation_id_is_echoed(api) -> None:
    response = _client(api, google_access_token="token").get(
        "/api/calendar/calendars", headers={"x-correlation-id": "corr-42"}
    )

    assert response.headers["x-correlation-id"] == "corr-42"
