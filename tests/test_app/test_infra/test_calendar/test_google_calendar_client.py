"""Testes unitários para o client de Google Calendar."""

from __future__ import annotations

from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any

import pytest
from googleapiclient.errors import HttpError

from app.domain.calendar_event import EventDraft, EventPatch
from app.infra.calendar.google_calendar_client import GoogleCalendarClient
from utils.errors import AuthError, NotFoundError, RateLimitError, TransientServerError


def _build_http_error(status: int) -> HttpError:
    return HttpError(resp=SimpleNamespace(status=status, reason="error"), content=b"error")


@pytest.mark.asyncio
async def test_list_events_returns_items_and_drops_empty_params(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    client = GoogleCalendarClient()
    captured: dict[str, Any] = {}

    def _fake_list(access_token: str, calendar_id: str, query: dict[str, Any]) -> dict[str, Any]:
        captured.update(access_token=access_token, calendar_id=calendar_id, query=query)
        return {"items": [{"id": "evt-1"}], "nextPageToken": None}

    monkeypatch.setattr(client, "_list_events_sync", _fake_list)

    items = await client.list_events(
        "token", calendar_id="primary", query={"timeMin": "2024-03-15T00:00:00Z"}
    )

    assert items == [{"id": "evt-1"}]
    assert captured["access_token"] == "token"
    assert captured["calendar_id"] == "primary"


@pytest.mark.asyncio
async def test_list_events_without_items_returns_empty_list(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    client = GoogleCalendarClient()
    monkeypatch.setattr(client, "_list_events_sync", lambda *args: {"kind": "calendar#events"})

    assert await client.list_events("token", calendar_id="primary", query={}) == []


@pytest.mark.asyncio
async def test_insert_event_sends_api_body(monkeypatch: pytest.MonkeyPatch) -> None:
    client = GoogleCalendarClient()
    captured: dict[str, Any] = {}

    def _fake_insert(access_token: str, calendar_id: str, body: dict[str, Any]) -> dict[str, Any]:
        captured["body"] = body
        return {"id": "evt-new", **body}

    monkeypatch.setattr(client, "_insert_event_sync", _fake_insert)
    draft = EventDraft(
        summary="Consulta",
        start=datetime(2024, 3, 15, 10, 0, tzinfo=UTC),
        end=datetime(2024, 3, 15, 11, 0, tzinfo=UTC),
        location="Sala 2",
    )

    created = await client.insert_event("token", calendar_id="primary", draft=draft)

    assert created["id"] == "evt-new"
    assert captured["body"] == {
        "summary": "Consulta",
        "start": {"dateTime": "2024-03-15T10:00:00+00:00"},
        "end": {"dateTime": "2024-03-15T11:00:00+00:00"},
        "location": "Sala 2",
    }


@pytest.mark.asyncio
async def test_patch_event_sends_only_provided_fields(monkeypatch: pytest.MonkeyPatch) -> None:
    client = GoogleCalendarClient()
    captured: dict[str, Any] = {}

    def _fake_patch(
        access_token: str, calendar_id: str, event_id: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        captured.update(event_id=event_id, body=body)
        return {"id": event_id, **body}

    monkeypatch.setattr(client, "_patch_event_sync", _fake_patch)

    await client.patch_event(
        "token",
        calendar_id="primary",
        event_id="evt-1",
        patch=EventPatch.model_validate({"summary": "Novo", "description": None}),
    )

    assert captured == {"event_id": "evt-1", "body": {"summary": "Novo", "description": None}}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (401, AuthError),
        (404, NotFoundError),
        (429, RateLimitError),
        (503, TransientServerError),
    ],
)
async def test_http_errors_are_translated(
    monkeypatch: pytest.MonkeyPatch,
    status: int,
    expected: type[Exception],
) -> None:
    client = GoogleCalendarClient()
    error = _build_http_error(status)

    def _raise_http_error(access_token: str, calendar_id: str, event_id: str) -> None:
        raise error

    monkeypatch.setattr(client, "_delete_event_sync", _raise_http_error)

    with pytest.raises(expected) as exc_info:
        await client.delete_event("token", calendar_id="primary", event_id="evt-1")

    assert exc_info.value.status_code == status
    assert exc_info.value.__cause__ is error


@pytest.mark.asyncio
async def test_list_calendars_returns_items(monkeypatch: pytest.MonkeyPatch) -> None:
    client = GoogleCalendarClient()
    monkeypatch.setattr(
        client,
        "_list_calendars_sync",
        lambda access_token: {"items": [{"id": "primary", "summary": "Agenda"}]},
    )

    assert await client.list_calendars("token") == [{"id": "primary", "summary": "Agenda"}]
