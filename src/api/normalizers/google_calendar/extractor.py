"""Extrator de campos de eventos Google Calendar API.

Cada função lê um campo do registro bruto de forma defensiva: tipos
inesperados viram None (ou lista vazia) em vez de exceção. A decisão de
default fica no normalizer.

Campos típicos de evento:
- id, summary, description, location, status, htmlLink, colorId
- start/end como {"dateTime": ...} ou {"date": "YYYY-MM-DD"}
- creator {"email", "displayName"}, attendees [{"email", ...}]
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, date, datetime, time
from typing import Any

_START_OF_DAY = time(0, 0, 0, tzinfo=UTC)
_END_OF_DAY = time(23, 59, 59, tzinfo=UTC)


def extract_text(record: Mapping[str, Any], *keys: str) -> str | None:
    """Primeiro valor textual não vazio entre as chaves informadas."""
    for key in keys:
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _parse_datetime(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed.replace(tzinfo=UTC) if parsed.tzinfo is None else parsed


def _parse_date(value: str) -> date | None:
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def _from_all_day(day: date, *, is_end: bool) -> datetime:
    # Dia inteiro: início 00:00:00Z e fim 23:59:59Z da mesma data.
    return datetime.combine(day, _END_OF_DAY if is_end else _START_OF_DAY)


def extract_event_datetime(value: Any, *, is_end: bool = False) -> datetime | None:
    """Converte start/end do evento em datetime timezone-aware.

    Aceita o bloco da API ({"dateTime"} tem prioridade sobre {"date"}),
    uma string ISO ou um datetime já canônico. Datetimes sem fuso são
    tratados como UTC.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=UTC) if value.tzinfo is None else value
    if isinstance(value, date):
        return _from_all_day(value, is_end=is_end)
    if isinstance(value, str):
        if "T" in value or " " in value.strip():
            return _parse_datetime(value)
        day = _parse_date(value)
        return _from_all_day(day, is_end=is_end) if day else None
    if not isinstance(value, Mapping):
        return None

    date_time = value.get("dateTime") or value.get("date_time")
    if isinstance(date_time, datetime | str):
        parsed = extract_event_datetime(date_time, is_end=is_end)
        if parsed is not None:
            return parsed
    all_day = value.get("date")
    if isinstance(all_day, date) and not isinstance(all_day, datetime):
        return _from_all_day(all_day, is_end=is_end)
    if isinstance(all_day, str):
        day = _parse_date(all_day)
        return _from_all_day(day, is_end=is_end) if day else None
    return None


def extract_person(value: Any) -> dict[str, Any] | None:
    """Extrai email/display_name/response_status de creator ou attendee."""
    if hasattr(value, "model_dump"):
        value = value.model_dump()
    if not isinstance(value, Mapping):
        return None
    return {
        "email": extract_text(value, "email"),
        "display_name": extract_text(value, "displayName", "display_name"),
        "response_status": extract_text(value, "responseStatus", "response_status"),
    }


def extract_attendees(record: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Lista de convidados; entradas que não são objetos são descartadas."""
    attendees_block = record.get("attendees")
    if not isinstance(attendees_block, list | tuple):
        return []
    attendees: list[dict[str, Any]] = []
    for item in attendees_block:
        person = extract_person(item)
        if person is not None:
            attendees.append(person)
    return attendees


def extract_calendar_event(record: Mapping[str, Any]) -> dict[str, Any]:
    """Converte o registro bruto em estrutura intermediária padronizada.

    Não aplica defaults de negócio: campos ausentes ou inválidos saem
    como None.
    """
    return {
        "id": extract_text(record, "id"),
        "summary": extract_text(record, "summary"),
        "description": extract_text(record, "description"),
        "location": extract_text(record, "location"),
        "start": extract_event_datetime(record.get("start")),
        "end": extract_event_datetime(record.get("end"), is_end=True),
        "creator": extract_person(record.get("creator")),
        "attendees": extract_attendees(record),
        "recurring_event_id": extract_text(record, "recurringEventId", "recurring_event_id"),
        "color_id": extract_text(record, "colorId", "color_id"),
        "status": extract_text(record, "status"),
        "html_link": extract_text(record, "htmlLink", "html_link"),
    }
