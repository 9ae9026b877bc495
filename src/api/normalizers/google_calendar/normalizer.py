"""Normalizer Google Calendar — converte registros brutos em CalendarEvent.

normalize_event é total: qualquer entrada (payload da API, dict já
canônico, CalendarEvent ou lixo) produz um CalendarEvent válido. Campos
ausentes recebem defaults e geram log de qualidade de dados, nunca
exceção.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from app.domain.calendar_event import (
    UNKNOWN_EMAIL,
    CalendarEvent,
    EventAttendee,
    EventCreator,
)

from .extractor import extract_calendar_event

logger = logging.getLogger(__name__)

UNTITLED_SUMMARY = "Untitled Event"
INVALID_SUMMARY = "Invalid Event"


def generate_event_id() -> str:
    """Id sintético único no processo: timestamp em ms + sufixo aleatório."""
    return f"generated-{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}"


def _warn(issue: str, event_id: str | None) -> None:
    logger.warning(
        "calendar_event_data_quality",
        extra={
            "component": "event_normalizer",
            "action": "normalize_event",
            "result": issue,
            "event_id": event_id,
        },
    )


def _placeholder_event(raw: Any) -> CalendarEvent:
    event_id = generate_event_id()
    _warn("invalid_record", event_id)
    logger.debug("calendar_event_invalid_type", extra={"raw_type": type(raw).__name__})
    now = datetime.now(UTC)
    return CalendarEvent(id=event_id, summary=INVALID_SUMMARY, start=now, end=now)


def _build_creator(person: dict[str, Any] | None) -> EventCreator | None:
    if person is None:
        return None
    return EventCreator(
        email=person.get("email") or UNKNOWN_EMAIL,
        display_name=person.get("display_name"),
    )


def _build_attendees(people: list[dict[str, Any]]) -> list[EventAttendee]:
    return [
        EventAttendee(
            email=person.get("email") or UNKNOWN_EMAIL,
            display_name=person.get("display_name"),
            response_status=person.get("response_status"),
        )
        for person in people
    ]


def normalize_event(raw: Any) -> CalendarEvent:
    """Normaliza um registro de evento para o modelo canônico.

    - id ausente vira "generated-<ms>-<aleatório>"
    - summary ausente vira "Untitled Event"
    - datas só com "date" expandem para 00:00:00Z / 23:59:59Z
    - datas ausentes ou inválidas viram o instante atual (com warning)
    - entradas que não são objeto viram placeholder "Invalid Event"

    Aplicar duas vezes produz o mesmo resultado.
    """
    if isinstance(raw, CalendarEvent):
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        return _placeholder_event(raw)

    fields = extract_calendar_event(raw)
    event_id = fields["id"] or generate_event_id()

    start = fields["start"]
    end = fields["end"]
    if start is None or end is None:
        _warn("missing_dates", event_id)
        now = datetime.now(UTC)
        start = start or now
        end = end or now

    return CalendarEvent(
        id=event_id,
        summary=fields["summary"] or UNTITLED_SUMMARY,
        description=fields["description"],
        location=fields["location"],
        start=start,
        end=end,
        creator=_build_creator(fields["creator"]),
        attendees=_build_attendees(fields["attendees"]),
        recurring_event_id=fields["recurring_event_id"],
        color_id=fields["color_id"],
        status=fields["status"],
        html_link=fields["html_link"],
    )


def normalize_events(items: Iterable[Any] | None) -> list[CalendarEvent]:
    """Normaliza uma lista de registros; None vira lista vazia."""
    if items is None:
        return []
    return [normalize_event(item) for item in items]


class GoogleCalendarEventNormalizer:
    """Adapter do normalizer para o protocolo consumido pelo gateway."""

    def normalize(self, raw: Any) -> CalendarEvent:
        return normalize_event(raw)

    def normalize_many(self, items: Iterable[Any] | None) -> list[CalendarEvent]:
        return normalize_events(items)
