"""Protocolo de normalização de eventos do provedor."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.domain.calendar_event import CalendarEvent


@runtime_checkable
class EventNormalizerProtocol(Protocol):
    """Contrato mínimo para converter registros brutos em CalendarEvent."""

    def normalize(self, raw: Any) -> CalendarEvent: ...

    def normalize_many(self, items: Iterable[Any] | None) -> list[CalendarEvent]: ...
