"""Normalizer Google Calendar — extração e normalização de eventos.

Responsabilidades:
- Extrair campos do registro bruto da Calendar API v3 de forma defensiva
- Normalizar para o modelo interno CalendarEvent
- Aplicar defaults (id sintético, "Untitled Event", datas de dia inteiro)
"""

from .extractor import extract_calendar_event, extract_event_datetime
from .normalizer import (
    INVALID_SUMMARY,
    UNTITLED_SUMMARY,
    GoogleCalendarEventNormalizer,
    generate_event_id,
    normalize_event,
    normalize_events,
)

__all__ = [
    "INVALID_SUMMARY",
    "UNTITLED_SUMMARY",
    "GoogleCalendarEventNormalizer",
    "extract_calendar_event",
    "extract_event_datetime",
    "generate_event_id",
    "normalize_event",
    "normalize_events",
]
