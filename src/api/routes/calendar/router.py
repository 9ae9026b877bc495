"""Endpoints de eventos e calendários do usuário autenticado.

Endpoints:
- GET    /api/calendar/events: lista (ou busca, com q) eventos
- POST   /api/calendar/events: cria evento (201)
- GET    /api/calendar/events/{event_id}: busca um evento
- PATCH  /api/calendar/events/{event_id}: atualização parcial
- DELETE /api/calendar/events/{event_id}: exclusão idempotente
- GET    /api/calendar/calendars: calendários acessíveis

Credenciais vêm dos cookies google_access_token/google_refresh_token (ou
Authorization: Bearer). Um access_token renovado volta como cookie.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from api.routes.calendar.credentials import RequestCredentialStore, get_request_credentials
from api.routes.calendar.responses import (
    handle_api_error,
    success_response,
)
from app.bootstrap import get_calendar_gateway, get_credential_refresher
from app.domain.calendar_event import ListEventsParams
from app.observability import get_correlation_id
from app.services.calendar_gateway import CalendarGateway
from app.services.credential_refresher import CredentialRefresher
from app.services.deletion_reconciler import DeleteOutcome, delete_remote_event
from utils.errors import CalendarApiError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_json_object(request: Request) -> dict[str, Any]:
    raw_body = await request.body()
    try:
        payload = json.loads(raw_body or b"null")
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValidationError("invalid_json", status_code=400) from exc
    if not isinstance(payload, dict):
        raise ValidationError("invalid_event:body:expected object", status_code=400)
    return payload


async def _execute(
    action: str,
    credentials: RequestCredentialStore,
    refresher: CredentialRefresher,
    operation: Callable[[str], Awaitable[Any]],
    *,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    try:
        data = await refresher.call_with_credentials(credentials, operation)
    except CalendarApiError as exc:
        return credentials.apply_cookies(handle_api_error(exc, action=action))
    logger.info(
        "calendar_api_request",
        extra={
            "component": "calendar_api",
            "action": action,
            "result": "ok",
            "correlation_id": get_correlation_id(),
        },
    )
    return credentials.apply_cookies(success_response(data, status_code))


def _dump(value: Any) -> Any:
    if isinstance(value, list):
        return [_dump(item) for item in value]
    if hasattr(value, "to_payload"):
        return value.to_payload()
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    return value


@router.get("/events")
async def list_events(
    calendar_id: str | None = Query(default=None, alias="calendarId"),
    time_min: datetime | None = Query(default=None, alias="timeMin"),
    time_max: datetime | None = Query(default=None, alias="timeMax"),
    max_results: int | None = Query(default=None, alias="maxResults", ge=1, le=2500),
    single_events: bool | None = Query(default=None, alias="singleEvents"),
    order_by: str | None = Query(default=None, alias="orderBy"),
    q: str | None = Query(default=None),
    credentials: RequestCredentialStore = Depends(get_request_credentials),
    gateway: CalendarGateway = Depends(get_calendar_gateway),
    refresher: CredentialRefresher = Depends(get_credential_refresher),
) -> JSONResponse:
    """Lista eventos; com q usa a busca textual do provedor."""
    params = ListEventsParams(
        calendar_id=calendar_id,
        time_min=time_min,
        time_max=time_max,
        max_results=max_results,
        single_events=single_events,
        order_by=order_by,
    )

    async def operation(token: str) -> Any:
        if q:
            return _dump(await gateway.search_events(token, q, params))
        return _dump(await gateway.list_events(token, params))

    return await _execute("list_events", credentials, refresher, operation)


@router.post("/events")
async def create_event(
    request: Request,
    calendar_id: str | None = Query(default=None, alias="calendarId"),
    credentials: RequestCredentialStore = Depends(get_request_credentials),
    gateway: CalendarGateway = Depends(get_calendar_gateway),
    refresher: CredentialRefresher = Depends(get_credential_refresher),
) -> JSONResponse:
    try:
        payload = await _read_json_object(request)
    except ValidationError as exc:
        return handle_api_error(exc, action="create_event")

    async def operation(token: str) -> Any:
        return _dump(await gateway.create_event(token, payload, calendar_id))

    return await _execute(
        "create_event",
        credentials,
        refresher,
        operation,
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/events/{event_id}")
async def get_event(
    event_id: str,
    calendar_id: str | None = Query(default=None, alias="calendarId"),
    credentials: RequestCredentialStore = Depends(get_request_credentials),
    gateway: CalendarGateway = Depends(get_calendar_gateway),
    refresher: CredentialRefresher = Depends(get_credential_refresher),
) -> JSONResponse:
    async def operation(token: str) -> Any:
        return _dump(await gateway.get_event(token, event_id, calendar_id))

    return await _execute("get_event", credentials, refresher, operation)


@router.patch("/events/{event_id}")
async def update_event(
    event_id: str,
    request: Request,
    calendar_id: str | None = Query(default=None, alias="calendarId"),
    credentials: RequestCredentialStore = Depends(get_request_credentials),
    gateway: CalendarGateway = Depends(get_calendar_gateway),
    refresher: CredentialRefresher = Depends(get_credential_refresher),
) -> JSONResponse:
    try:
        payload = await _read_json_object(request)
    except ValidationError as exc:
        return handle_api_error(exc, action="update_event")

    async def operation(token: str) -> Any:
        return _dump(await gateway.update_event(token, event_id, payload, calendar_id))

    return await _execute("update_event", credentials, refresher, operation)


@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    calendar_id: str | None = Query(default=None, alias="calendarId"),
    credentials: RequestCredentialStore = Depends(get_request_credentials),
    gateway: CalendarGateway = Depends(get_calendar_gateway),
    refresher: CredentialRefresher = Depends(get_credential_refresher),
) -> JSONResponse:
    """Exclui o evento; se ele já não existir responde sucesso com warning."""

    async def operation(token: str) -> DeleteOutcome:
        return await delete_remote_event(
            lambda target: gateway.delete_event(token, target, calendar_id),
            event_id,
        )

    try:
        outcome = await refresher.call_with_credentials(credentials, operation)
    except CalendarApiError as exc:
        return credentials.apply_cookies(handle_api_error(exc, action="delete_event"))
    logger.info(
        "calendar_api_request",
        extra={
            "component": "calendar_api",
            "action": "delete_event",
            "result": "not_found" if outcome.warning else "ok",
            "event_id": event_id,
            "correlation_id": get_correlation_id(),
        },
    )
    return credentials.apply_cookies(
        success_response({"id": event_id}, warning=outcome.warning)
    )


@router.get("/calendars")
async def list_calendars(
    credentials: RequestCredentialStore = Depends(get_request_credentials),
    gateway: CalendarGateway = Depends(get_calendar_gateway),
    refresher: CredentialRefresher = Depends(get_credential_refresher),
) -> JSONResponse:
    async def operation(token: str) -> Any:
        return _dump(await gateway.list_calendars(token))

    return await _execute("list_calendars", credentials, refresher, operation)

