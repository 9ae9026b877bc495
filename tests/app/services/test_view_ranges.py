"""Testes do cálculo de janelas e grades de dias."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from app.domain.calendar_event import CalendarEvent
from app.domain.view_range import DateRange, ViewMode
from app.services import view_ranges


def _event(event_id: str, start: datetime, minutes: int = 30) -> CalendarEvent:
    return CalendarEvent(
        id=event_id,
        summary=event_id,
        start=start,
        end=start + timedelta(minutes=minutes),
    )


def test_week_starts_on_sunday() -> None:
    assert view_ranges.start_of_week(date(2024, 3, 15)) == date(2024, 3, 10)
    assert view_ranges.start_of_week(date(2024, 3, 10)) == date(2024, 3, 10)
    assert view_ranges.end_of_week(date(2024, 3, 15)) == date(2024, 3, 16)


def test_seven_day_layout_covers_sunday_to_saturday() -> None:
    layout = view_ranges.layout_for(ViewMode.DAY, DateRange.SEVEN_DAY, date(2024, 3, 15), UTC)

    assert layout.days[0] == date(2024, 3, 10)
    assert layout.days[-1] == date(2024, 3, 16)
    assert len(layout.days) == 7
    assert layout.window.start == datetime(2024, 3, 10, tzinfo=UTC)
    assert layout.window.end == datetime(2024, 3, 16, 23, 59, 59, 999000, tzinfo=UTC)


def test_one_day_layout_bounds() -> None:
    layout = view_ranges.layout_for(ViewMode.DAY, DateRange.ONE_DAY, date(2024, 3, 15), UTC)

    assert layout.days == [date(2024, 3, 15)]
    assert layout.window.start == datetime(2024, 3, 15, tzinfo=UTC)
    assert layout.window.end == datetime(2024, 3, 15, 23, 59, 59, 999000, tzinfo=UTC)


def test_thirty_day_layout_groups_weeks() -> None:
    layout = view_ranges.layout_for(ViewMode.DAY, DateRange.THIRTY_DAY, date(2024, 3, 15), UTC)

    assert layout.days[0] == date(2024, 3, 15)
    assert layout.days[-1] == date(2024, 4, 14)
    assert layout.weeks[0] == [date(2024, 3, 15), date(2024, 3, 16)]
    assert all(len(week) <= 7 for week in layout.weeks)
    assert [day for week in layout.weeks for day in week] == layout.days


def test_month_layout_uses_full_grid_and_month_window() -> None:
    layout = view_ranges.layout_for(ViewMode.MONTH, DateRange.SEVEN_DAY, date(2024, 3, 15), UTC)

    assert layout.days[0] == date(2024, 2, 25)
    assert layout.days[-1] == date(2024, 4, 6)
    assert len(layout.days) % 7 == 0
    assert all(len(week) == 7 for week in layout.weeks)
    assert layout.window.key == "events:month:2024:03"
    assert layout.window.max_results == 500
    assert layout.window.start == datetime(2024, 3, 1, tzinfo=UTC)


def test_range_key_is_stable() -> None:
    window = view_ranges.range_window(date(2024, 3, 10), date(2024, 3, 16), UTC)

    assert window.key == (
        "events:range:2024-03-10T00:00:00+00:00:2024-03-16T23:59:59.999000+00:00"
    )


@pytest.mark.parametrize(
    ("view_mode", "date_range", "expected"),
    [
        (ViewMode.MONTH, DateRange.SEVEN_DAY, date(2024, 2, 29)),
        (ViewMode.DAY, DateRange.ONE_DAY, date(2024, 3, 30)),
        (ViewMode.DAY, DateRange.SEVEN_DAY, date(2024, 3, 24)),
        (ViewMode.DAY, DateRange.THIRTY_DAY, date(2024, 3, 1)),
    ],
)
def test_shift_date_moves_by_view_size(
    view_mode: ViewMode,
    date_range: DateRange,
    expected: date,
) -> None:
    assert view_ranges.shift_date(view_mode, date_range, date(2024, 3, 31), -1) == expected


def test_group_events_by_day_respects_timezone() -> None:
    sao_paulo = ZoneInfo("America/Sao_Paulo")
    late = _event("late", datetime(2024, 3, 16, 1, 0, tzinfo=UTC))
    morning = _event("morning", datetime(2024, 3, 15, 12, 0, tzinfo=UTC))
    early = _event("early", datetime(2024, 3, 15, 11, 0, tzinfo=UTC))
    days = [date(2024, 3, 15), date(2024, 3, 16)]

    grouped = view_ranges.group_events_by_day([late, morning, early], days, sao_paulo)

    assert [event.id for event in grouped[date(2024, 3, 15)]] == ["early", "morning", "late"]
    assert grouped[date(2024, 3, 16)] == []


def test_filter_events_for_date() -> None:
    events = [
        _event("a", datetime(2024, 3, 15, 9, tzinfo=UTC)),
        _event("b", datetime(2024, 3, 16, 9, tzinfo=UTC)),
    ]

    selected = view_ranges.filter_events_for_date(events, date(2024, 3, 16), UTC)

    assert [event.id for event in selected] == ["b"]
