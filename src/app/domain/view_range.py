"""Tipos de visualização do calendário e janelas de consulta."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum


class ViewMode(StrEnum):
    MONTH = "month"
    DAY = "day"


class DateRange(StrEnum):
    ONE_DAY = "1-day"
    SEVEN_DAY = "7-day"
    THIRTY_DAY = "30-day"


@dataclass(frozen=True, slots=True)
class CalendarWindow:
    """Intervalo [start, end] usado para buscar eventos e chavear o cache."""

    start: datetime
    end: datetime
    key: str
    max_results: int | None = None

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start <= end and start <= self.end

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


@dataclass(frozen=True, slots=True)
class RangeLayout:
    """Janela ativa mais os dias que a interface precisa desenhar."""

    window: CalendarWindow
    days: list[date] = field(default_factory=list)
    weeks: list[list[date]] = field(default_factory=list)


__all__ = ["CalendarWindow", "DateRange", "RangeLayout", "ViewMode"]
