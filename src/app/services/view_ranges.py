"""Cálculo de janelas de consulta e grades de dias da visualização.

Semana começa no domingo. Limites de dia são calculados no fuso
configurado; o fim de uma janela é o último milissegundo do dia.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, tzinfo
from typing import TYPE_CHECKING

from app.domain.view_range import CalendarWindow, DateRange, RangeLayout, ViewMode

if TYPE_CHECKING:
    from app.domain.calendar_event import CalendarEvent

THIRTY_DAY_SPAN = 30
_END_OF_DAY = time(23, 59, 59, 999000)


def start_of_week(day: date) -> date:
    # weekday(): segunda=0 ... domingo=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def end_of_week(day: date) -> date:
    return start_of_week(day) + timedelta(days=6)


def range_days(start: date, end: date) -> list[date]:
    """Dias de start até end, inclusive."""
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def weeks_in_range(start: date, end: date) -> list[list[date]]:
    """Agrupa [start, end] em semanas domingo-sábado.

    O primeiro grupo vai de start até o sábado seguinte (pode ser curto);
    o último é truncado em end.
    """
    weeks: list[list[date]] = []
    bucket_start = start
    while bucket_start <= end:
        bucket_end = min(end_of_week(bucket_start), end)
        weeks.append(range_days(bucket_start, bucket_end))
        bucket_start = bucket_end + timedelta(days=1)
    return weeks


def month_grid_days(year: int, month: int) -> list[date]:
    """Grade mensal completa, incluindo dias do mês anterior e seguinte."""
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    return range_days(start_of_week(first), end_of_week(last))


def day_bounds(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    return datetime.combine(day, time.min, tzinfo=tz), datetime.combine(day, _END_OF_DAY, tzinfo=tz)


def range_key(start: datetime, end: datetime) -> str:
    return f"events:range:{start.isoformat()}:{end.isoformat()}"


def month_key(year: int, month: int) -> str:
    return f"events:month:{year}:{month:02d}"


def range_window(first_day: date, last_day: date, tz: tzinfo) -> CalendarWindow:
    start, _ = day_bounds(first_day, tz)
    _, end = day_bounds(last_day, tz)
    return CalendarWindow(start=start, end=end, key=range_key(start, end))


def month_window(year: int, month: int, tz: tzinfo, max_results: int = 500) -> CalendarWindow:
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    start, _ = day_bounds(first, tz)
    _, end = day_bounds(last, tz)
    return CalendarWindow(
        start=start,
        end=end,
        key=month_key(year, month),
        max_results=max_results,
    )


def day_layout(current: date, tz: tzinfo) -> RangeLayout:
    return RangeLayout(window=range_window(current, current, tz), days=[current], weeks=[[current]])


def week_layout(current: date, tz: tzinfo) -> RangeLayout:
    first, last = start_of_week(current), end_of_week(current)
    days = range_days(first, last)
    return RangeLayout(window=range_window(first, last, tz), days=days, weeks=[days])


def thirty_day_layout(current: date, tz: tzinfo) -> RangeLayout:
    last = current + timedelta(days=THIRTY_DAY_SPAN)
    return RangeLayout(
        window=range_window(current, last, tz),
        days=range_days(current, last),
        weeks=weeks_in_range(current, last),
    )


def month_layout(current: date, tz: tzinfo, max_results: int = 500) -> RangeLayout:
    days = month_grid_days(current.year, current.month)
    weeks = [days[index : index + 7] for index in range(0, len(days), 7)]
    return RangeLayout(
        window=month_window(current.year, current.month, tz, max_results),
        days=days,
        weeks=weeks,
    )


def layout_for(
    view_mode: ViewMode,
    date_range: DateRange,
    current: date,
    tz: tzinfo,
    *,
    month_max_results: int = 500,
) -> RangeLayout:
    """Janela e grade ativas para o estado de visualização."""
    if view_mode is ViewMode.MONTH:
        return month_layout(current, tz, month_max_results)
    if date_range is DateRange.ONE_DAY:
        return day_layout(current, tz)
    if date_range is DateRange.SEVEN_DAY:
        return week_layout(current, tz)
    return thirty_day_layout(current, tz)


def shift_date(view_mode: ViewMode, date_range: DateRange, current: date, steps: int) -> date:
    """Move current pelo tamanho da visualização (mês, 1, 7 ou 30 dias)."""
    if view_mode is ViewMode.MONTH:
        month_index = current.year * 12 + (current.month - 1) + steps
        year, month = divmod(month_index, 12)
        month += 1
        day = min(current.day, calendar.monthrange(year, month)[1])
        return date(year, month, day)
    span = {DateRange.ONE_DAY: 1, DateRange.SEVEN_DAY: 7, DateRange.THIRTY_DAY: THIRTY_DAY_SPAN}
    return current + timedelta(days=span[date_range] * steps)


def local_date(event: CalendarEvent, tz: tzinfo) -> date:
    return event.start.astimezone(tz).date()


def sort_events_by_time(events: Iterable[CalendarEvent]) -> list[CalendarEvent]:
    return sorted(events, key=lambda event: event.start)


def filter_events_for_date(
    events: Iterable[CalendarEvent],
    day: date,
    tz: tzinfo,
) -> list[CalendarEvent]:
    """Eventos cujo início, no fuso informado, cai em day."""
    return [event for event in events if local_date(event, tz) == day]


def group_events_by_day(
    events: Iterable[CalendarEvent],
    days: Iterable[date],
    tz: tzinfo,
) -> dict[date, list[CalendarEvent]]:
    """Distribui eventos pelos dias informados, ordenados por início.

    Eventos fora dos dias informados são ignorados.
    """
    grouped: dict[date, list[CalendarEvent]] = {day: [] for day in days}
    for event in events:
        bucket = grouped.get(local_date(event, tz))
        if bucket is not None:
            bucket.append(event)
    return {day: sort_events_by_time(bucket) for day, bucket in grouped.items()}
