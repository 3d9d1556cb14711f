"""Tests for the month grid builder and the decorated month view."""

from __future__ import annotations

import calendar
from datetime import date

import pytest

from monthview.domain.models import Event
from monthview.services.grid import (
    build_month_grid,
    build_month_view,
    days_in_month,
    draft_for_date,
    first_weekday,
    month_label,
    normalize_month,
    shift_month,
)


def _make_event(event_id: int, day: str, time: str, duration: int = 60) -> Event:
    return Event(
        id=event_id, title=f"Event {event_id}", date=day, time=time, duration=duration
    )


# ---------------------------------------------------------------------------
# Grid layout
# ---------------------------------------------------------------------------


def test_november_2025_layout():
    """Nov 1 2025 is a Saturday: six leading October cells, then 30 days."""
    cells = build_month_grid(2025, 10)

    assert len(cells) == 42
    assert [c.is_current_month for c in cells[:6]] == [False] * 6
    assert cells[0].date == "2025-10-26"
    assert cells[5].date == "2025-10-31"
    assert cells[6].date == "2025-11-01"
    assert cells[6].day == 1
    assert cells[6].is_current_month is True
    assert sum(c.is_current_month for c in cells) == 30
    assert cells[35].date == "2025-11-30"
    assert cells[36].date == "2025-12-01"
    assert cells[-1].date == "2025-12-06"
    assert cells[-1].day == 6


@pytest.mark.parametrize("month", range(12))
def test_every_month_has_42_cells_and_true_day_count(month):
    cells = build_month_grid(2025, month)
    current = [c for c in cells if c.is_current_month]

    assert len(cells) == 42
    assert len(current) == calendar.monthrange(2025, month + 1)[1]
    assert [c.day for c in current] == list(range(1, len(current) + 1))


def test_month_starting_on_sunday_has_no_leading_cells():
    """Feb 1 2026 is a Sunday."""
    cells = build_month_grid(2026, 1)
    assert cells[0].date == "2026-02-01"
    assert cells[0].is_current_month is True
    assert sum(c.is_current_month for c in cells) == 28


def test_leap_february():
    assert days_in_month(2024, 1) == 29
    assert days_in_month(2025, 1) == 28
    assert days_in_month(1900, 1) == 28
    assert days_in_month(2000, 1) == 29


def test_negative_month_is_december_of_previous_year():
    cells = build_month_grid(2025, -1)
    current = [c for c in cells if c.is_current_month]

    assert current[0].date == "2024-12-01"
    assert current[-1].date == "2024-12-31"
    # Dec 1 2024 is a Sunday
    assert cells[0].date == "2024-12-01"


def test_month_twelve_is_january_of_next_year():
    cells = build_month_grid(2024, 12)
    # Jan 1 2025 is a Wednesday
    assert first_weekday(2024, 12) == 3
    assert cells[0].date == "2024-12-29"
    assert cells[3].date == "2025-01-01"
    assert sum(c.is_current_month for c in cells) == 31


def test_normalize_and_shift():
    assert normalize_month(2025, -1) == (2024, 11)
    assert normalize_month(2025, -13) == (2023, 11)
    assert normalize_month(2025, 24) == (2027, 0)
    assert shift_month(2025, 0, -1) == (2024, 11)
    assert shift_month(2025, 11, 1) == (2026, 0)
    assert month_label(2025, 10) == "November 2025"
    assert month_label(2025, 12) == "January 2026"


def test_first_weekday_is_sunday_based():
    assert first_weekday(2025, 10) == 6
    assert first_weekday(2026, 1) == 0


def test_out_of_range_year_raises_value_error():
    with pytest.raises(ValueError):
        build_month_grid(10000, 0)
    # January of year 1 would need leading days before date.min
    with pytest.raises(ValueError):
        build_month_grid(1, 0)


def test_december_9999_raises_but_november_9999_builds():
    # trailing cells of December 9999 would run past date.max
    with pytest.raises(ValueError):
        build_month_grid(9999, 11)
    cells = build_month_grid(9999, 10)
    assert len(cells) == 42
    assert cells[-1].date.startswith("9999-12-")


# ---------------------------------------------------------------------------
# Month view
# ---------------------------------------------------------------------------


def test_month_view_places_events_and_today():
    events = [
        _make_event(1, "2025-11-01", "08:30", 90),
        _make_event(2, "2025-11-01", "11:00", 120),
        _make_event(3, "2025-11-02", "12:00"),
    ]
    view = build_month_view(2025, 10, events, today=date(2025, 11, 1))

    assert view.label == "November 2025"
    assert view.total_events == 3
    assert len(view.days) == 42

    nov_first = view.days[6]
    assert nov_first.is_today is True
    assert [card.id for card in nov_first.events] == [1, 2]
    assert nov_first.events[0].label == "08:30 Event 1"
    assert all(not card.has_conflict for card in nov_first.events)
    assert view.days[7].is_today is False
    assert [card.id for card in view.days[7].events] == [3]


def test_month_view_caps_visible_events_at_three():
    events = [_make_event(i, "2025-11-03", f"{8 + 2 * i:02d}:00") for i in range(1, 6)]
    view = build_month_view(2025, 10, events, today=date(2020, 1, 1))

    cell = next(d for d in view.days if d.date == "2025-11-03")
    assert [card.id for card in cell.events] == [1, 2, 3]
    assert cell.more_count == 2


def test_month_view_flags_conflicts():
    events = [
        _make_event(1, "2025-11-05", "09:00", 60),
        _make_event(2, "2025-11-05", "09:30", 30),
        _make_event(3, "2025-11-05", "10:00", 30),
    ]
    view = build_month_view(2025, 10, events, today=date(2020, 1, 1))

    cell = next(d for d in view.days if d.date == "2025-11-05")
    flags = {card.id: card.has_conflict for card in cell.events}
    assert flags == {1: True, 2: True, 3: False}


def test_month_view_out_of_month_cells_are_empty():
    events = [_make_event(1, "2025-10-31", "09:00")]
    view = build_month_view(2025, 10, events, today=date(2025, 10, 31))

    october_cell = view.days[5]
    assert october_cell.date == "2025-10-31"
    assert october_cell.is_current_month is False
    assert october_cell.events == []
    assert october_cell.is_today is False


def test_month_view_all_day_label_and_navigation():
    events = [_make_event(1, "2025-11-10", "00:00", 1440)]
    view = build_month_view(2025, 11, events, today=date(2020, 1, 1))

    assert view.year == 2025 and view.month == 11
    assert (view.previous.year, view.previous.month) == (2025, 10)
    assert (view.next.year, view.next.month) == (2026, 0)
    # November events are outside the December view
    assert all(not d.events for d in view.days if d.is_current_month)

    view = build_month_view(2025, 10, events, today=date(2020, 1, 1))
    card = next(d for d in view.days if d.date == "2025-11-10").events[0]
    assert card.is_all_day is True
    assert card.label == "Event 1"


def test_month_view_normalises_month():
    view = build_month_view(2026, -2, [], today=date(2020, 1, 1))
    assert (view.year, view.month) == (2025, 10)
    assert view.label == "November 2025"


def test_draft_for_date_uses_form_defaults():
    draft = draft_for_date(date(2025, 11, 15))
    assert draft.date == "2025-11-15"
    assert draft.title == ""
    assert draft.time == "09:00"
    assert draft.duration == 60
    assert draft.reminder == 15
    assert draft.color == "#3b82f6"
