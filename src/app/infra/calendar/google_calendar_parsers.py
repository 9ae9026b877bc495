"""Helpers internos de mapeamento entre domínio e Google Calendar API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error

from utils.errors import (
    AuthError,
    CalendarApiError,
    TransientServerError,
    UnknownError,
    classify_status,
)

if TYPE_CHECKING:
    from datetime import datetime

    from app.domain.calendar_event import EventAttendee, EventDraft, EventPatch


def http_status(exc: HttpError) -> int | None:
    response = getattr(exc, "resp", None)
    return int(response.status) if response and getattr(response, "status", None) else None


def map_provider_error(exc: BaseException) -> CalendarApiError:
    """Traduz exceções do SDK/transporte para a taxonomia do serviço."""
    if isinstance(exc, CalendarApiError):
        return exc
    if isinstance(exc, HttpError):
        status_code = http_status(exc)
        reason = str(getattr(exc, "reason", "") or "") or f"google_http_{status_code}"
        return classify_status(status_code, reason)
    if isinstance(exc, RefreshError):
        # Sem refresh_token o transporte do SDK não consegue renovar um 401.
        return AuthError("access_token_rejected", status_code=401)
    if isinstance(exc, (TimeoutError, ConnectionError, HttpLib2Error)):
        return TransientServerError(
            f"calendar_transport_error:{type(exc).__name__}",
            is_retryable=True,
        )
    return UnknownError(f"calendar_unexpected_error:{type(exc).__name__}")


def format_event_datetime(value: datetime) -> dict[str, str]:
    return {"dateTime": value.isoformat()}


def _attendees_body(attendees: list[EventAttendee]) -> list[dict[str, Any]]:
    return [
        attendee.model_dump(by_alias=True, exclude_none=True, include={"email", "display_name"})
        for attendee in attendees
    ]


def build_event_body(draft: EventDraft) -> dict[str, Any]:
    """Corpo do events.insert sem campos vazios."""
    body: dict[str, Any] = {
        "summary": draft.summary,
        "start": format_event_datetime(draft.start),
        "end": format_event_datetime(draft.end),
    }
    if draft.description is not None:
        body["description"] = draft.description
    if draft.location is not None:
        body["location"] = draft.location
    if draft.attendees is not None:
        body["attendees"] = _attendees_body(draft.attendees)
    if draft.color_id is not None:
        body["colorId"] = draft.color_id
    return body


def build_patch_body(patch: EventPatch) -> dict[str, Any]:
    """Corpo do events.patch apenas com os campos informados."""
    provided = patch.provided_fields()
    body: dict[str, Any] = {}
    for field_name in ("summary", "description", "location"):
        if field_name in provided:
            body[field_name] = getattr(patch, field_name)
    if "start" in provided and patch.start is not None:
        body["start"] = format_event_datetime(patch.start)
    if "end" in provided and patch.end is not None:
        body["end"] = format_event_datetime(patch.end)
    if "attendees" in provided:
        body["attendees"] = _attendees_body(patch.attendees or [])
    if "color_id" in provided:
        body["colorId"] = patch.color_id
    return body
