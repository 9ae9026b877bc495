"""Provedor concreto de Google Calendar (API v3) com credencial do usuário."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from app.infra.calendar.google_calendar_parsers import (
    build_event_body,
    build_patch_body,
    map_provider_error,
)
from app.observability import get_correlation_id
from app.protocols.calendar_provider import CalendarProviderProtocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.domain.calendar_event import EventDraft, EventPatch
    from utils.errors import CalendarApiError

logger = logging.getLogger(__name__)

_COMPONENT = "google_calendar_client"


class GoogleCalendarClient(CalendarProviderProtocol):
    """Implementação do protocolo de provedor usando a API v3 do Google.

    O SDK é síncrono; cada chamada roda em thread via asyncio.to_thread
    e toda falha sai traduzida para a taxonomia de utils.errors. O
    service e construido por chamada porque o access_token pertence ao
    usuário da requisição.
    """

    def __init__(self, *, send_updates: str = "all") -> None:
        self._send_updates = send_updates

    async def list_events(
        self,
        access_token: str,
        *,
        calendar_id: str,
        query: dict[str, Any],
    ) -> list[Any]:
        response = await self._run(
            "list_events", self._list_events_sync, access_token, calendar_id, query
        )
        items = response.get("items") if isinstance(response, dict) else None
        return list(items) if isinstance(items, list) else []

    async def get_event(self, access_token: str, *, calendar_id: str, event_id: str) -> Any:
        return await self._run(
            "get_event", self._get_event_sync, access_token, calendar_id, event_id
        )

    async def insert_event(
        self,
        access_token: str,
        *,
        calendar_id: str,
        draft: EventDraft,
    ) -> Any:
        body = build_event_body(draft)
        return await self._run(
            "insert_event", self._insert_event_sync, access_token, calendar_id, body
        )

    async def patch_event(
        self,
        access_token: str,
        *,
        calendar_id: str,
        event_id: str,
        patch: EventPatch,
    ) -> Any:
        body = build_patch_body(patch)
        return await self._run(
            "patch_event", self._patch_event_sync, access_token, calendar_id, event_id, body
        )

    async def delete_event(self, access_token: str, *, calendar_id: str, event_id: str) -> None:
        await self._run(
            "delete_event", self._delete_event_sync, access_token, calendar_id, event_id
        )

    async def list_calendars(self, access_token: str) -> list[Any]:
        response = await self._run("list_calendars", self._list_calendars_sync, access_token)
        items = response.get("items") if isinstance(response, dict) else None
        return list(items) if isinstance(items, list) else []

    async def _run(self, action: str, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return await asyncio.to_thread(func, *args)
        except Exception as exc:
            error = map_provider_error(exc)
            self._log_error(action=action, error=error, original=exc)
            raise error from exc

    def _service(self, access_token: str) -> Any:
        credentials = Credentials(token=access_token)
        return build("calendar", "v3", credentials=credentials, cache_discovery=False)

    def _list_events_sync(
        self, access_token: str, calendar_id: str, query: dict[str, Any]
    ) -> dict[str, Any]:
        params = {key: value for key, value in query.items() if value is not None}
        return self._service(access_token).events().list(calendarId=calendar_id, **params).execute()

    def _get_event_sync(self, access_token: str, calendar_id: str, event_id: str) -> dict[str, Any]:
        return (
            self._service(access_token)
            .events()
            .get(calendarId=calendar_id, eventId=event_id)
            .execute()
        )

    def _insert_event_sync(
        self, access_token: str, calendar_id: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        return (
            self._service(access_token)
            .events()
            .insert(calendarId=calendar_id, body=body, sendUpdates=self._send_updates)
            .execute()
        )

    def _patch_event_sync(
        self,
        access_token: str,
        calendar_id: str,
        event_id: str,
        body: dict[str, Any],
    ) -> dict[str, Any]:
        return (
            self._service(access_token)
            .events()
            .patch(
                calendarId=calendar_id,
                eventId=event_id,
                body=body,
                sendUpdates=self._send_updates,
            )
            .execute()
        )

    def _delete_event_sync(self, access_token: str, calendar_id: str, event_id: str) -> None:
        self._service(access_token).events().delete(
            calendarId=calendar_id,
            eventId=event_id,
            sendUpdates=self._send_updates,
        ).execute()

    def _list_calendars_sync(self, access_token: str) -> dict[str, Any]:
        return self._service(access_token).calendarList().list().execute()

    def _log_error(
        self,
        *,
        action: str,
        error: CalendarApiError,
        original: BaseException,
    ) -> None:
        extra = {
            "component": _COMPONENT,
            "action": action,
            "result": "error",
            "status_code": error.status_code,
            "error_type": type(error).__name__,
            "original_error_type": type(original).__name__,
            "correlation_id": get_correlation_id(),
        }
        if error.status_code is not None and error.status_code < 500:
            logger.warning("google_calendar_http_error", extra=extra)
            return
        logger.error("google_calendar_http_error", extra=extra)
