"""Estado da visualização do calendário (modo, intervalo, datas, eventos).

Cada mudanca de data, modo ou intervalo recalcula a janela ativa e
dispara uma carga. Cargas carregam um número de sequência: respostas de
cargas superadas são descartadas. Falhas viram um erro descartável e os
últimos eventos bons continuam visíveis.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo

from app.domain.view_range import DateRange, RangeLayout, ViewMode
from app.observability import get_correlation_id
from app.services.view_ranges import (
    filter_events_for_date,
    layout_for,
    month_grid_days,
    shift_date,
    sort_events_by_time,
)
from utils.errors import CalendarApiError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from app.domain.calendar_event import CalendarEvent, EventDraft
    from app.services.calendar_sync import CalendarSyncService
    from app.services.deletion_reconciler import DeleteOutcome
    from app.services.event_cache import CacheChange

logger = logging.getLogger(__name__)

_COMPONENT = "view_state"


class ViewStateController:
    """Controlador da visualização; default: mês corrente com intervalo de 7 dias."""

    def __init__(
        self,
        sync: CalendarSyncService,
        *,
        timezone: str = "UTC",
        today: Callable[[], date] | None = None,
        month_max_results: int = 500,
    ) -> None:
        self._sync = sync
        self._tz = ZoneInfo(timezone)
        self._today = today or (lambda: datetime.now(self._tz).date())
        self._month_max_results = month_max_results

        initial = self._today()
        self._view_mode = ViewMode.MONTH
        self._date_range = DateRange.SEVEN_DAY
        self._current_date = initial
        self._selected_date = initial
        self._events: list[CalendarEvent] = []
        self._error: CalendarApiError | None = None
        self._is_loading = False
        self._sequence = 0
        self._layout = self._compute_layout()
        self._unsubscribe = sync.subscribe(self._on_cache_change)

    # Estado

    @property
    def view_mode(self) -> ViewMode:
        return self._view_mode

    @property
    def date_range(self) -> DateRange:
        return self._date_range

    @property
    def current_date(self) -> date:
        return self._current_date

    @property
    def selected_date(self) -> date:
        return self._selected_date

    @property
    def events(self) -> list[CalendarEvent]:
        return list(self._events)

    @property
    def error(self) -> CalendarApiError | None:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def layout(self) -> RangeLayout:
        return self._layout

    @property
    def range_start(self) -> datetime:
        return self._layout.window.start

    @property
    def range_end(self) -> datetime:
        return self._layout.window.end

    @property
    def range_days(self) -> list[date]:
        return list(self._layout.days)

    @property
    def weeks(self) -> list[list[date]]:
        return [list(week) for week in self._layout.weeks]

    @property
    def month_days(self) -> list[date]:
        return month_grid_days(self._current_date.year, self._current_date.month)

    @property
    def selected_date_events(self) -> list[CalendarEvent]:
        """Eventos cujo início, no fuso configurado, cai na data selecionada."""
        return sort_events_by_time(
            filter_events_for_date(self._events, self._selected_date, self._tz)
        )

    # Ações

    async def set_view_mode(self, mode: ViewMode | str) -> None:
        self._view_mode = ViewMode(mode)
        if self._view_mode is ViewMode.DAY and self._date_range is DateRange.THIRTY_DAY:
            self._date_range = DateRange.SEVEN_DAY
        await self._apply()

    async def set_date_range(self, date_range: DateRange | str) -> None:
        self._date_range = DateRange(date_range)
        await self._apply()

    async def set_current_date(self, value: date) -> None:
        self._current_date = value
        await self._apply()

    async def handle_date_select(self, value: date) -> None:
        """Seleciona a data; no modo dia com 1 dia, também move a data atual."""
        self._selected_date = value
        if self._view_mode is ViewMode.DAY and self._date_range is DateRange.ONE_DAY:
            await self.set_current_date(value)

    async def go_to_previous(self) -> None:
        await self.set_current_date(
            shift_date(self._view_mode, self._date_range, self._current_date, -1)
        )

    async def go_to_next(self) -> None:
        await self.set_current_date(
            shift_date(self._view_mode, self._date_range, self._current_date, 1)
        )

    async def go_to_today(self) -> None:
        today = self._today()
        self._selected_date = today
        await self.set_current_date(today)

    def dismiss_error(self) -> None:
        self._error = None

    async def reload(self) -> None:
        """Carrega a janela ativa, descartando respostas de cargas superadas."""
        self._sequence += 1
        sequence = self._sequence
        window = self._layout.window
        self._is_loading = True
        try:
            events = await self._sync.activate(window)
        except CalendarApiError as exc:
            if sequence != self._sequence:
                return
            self._error = exc
            self._is_loading = False
            self._log("load_failed", window.key, error_type=type(exc).__name__)
            return

        if sequence != self._sequence:
            self._log("stale_response_dropped", window.key)
            return
        self._events = events
        self._error = None
        self._is_loading = False

    async def create_event(self, draft: EventDraft | Mapping[str, Any]) -> CalendarEvent:
        event = await self._sync.create_event(draft)
        await self.reload()
        return event

    async def delete_event(self, event_id: str) -> DeleteOutcome:
        return await self._sync.delete_event(event_id)

    def close(self) -> None:
        self._unsubscribe()

    # Internos

    async def _apply(self) -> None:
        self._layout = self._compute_layout()
        await self.reload()

    def _compute_layout(self) -> RangeLayout:
        return layout_for(
            self._view_mode,
            self._date_range,
            self._current_date,
            self._tz,
            month_max_results=self._month_max_results,
        )

    def _on_cache_change(self, change: CacheChange) -> None:
        if change.kind != "updated" or change.key != self._layout.window.key:
            return
        entry = self._sync.cache.get(change.key)
        if entry is not None:
            self._events = list(entry.events)

    def _log(self, result: str, key: str, *, error_type: str | None = None) -> None:
        logger.info(
            "calendar_view_load",
            extra={
                "component": _COMPONENT,
                "action": "reload",
                "result": result,
                "cache_key": key,
                "error_type": error_type,
                "correlation_id": get_correlation_id(),
            },
        )
