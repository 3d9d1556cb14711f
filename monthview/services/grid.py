"""Service for building the 42-cell month grid and the decorated month view.

Months are 0-indexed (0 = January) and may fall outside 0..11; they are
normalised into the neighbouring years, so month -1 of 2025 is December 2024.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from dateutil.relativedelta import relativedelta

from monthview.domain.models import (
    MAX_VISIBLE_EVENTS,
    CalendarDay,
    DayCell,
    Event,
    EventCard,
    EventDraft,
    MonthRef,
    MonthView,
    format_date,
)
from monthview.services.conflicts import detect_conflicts, group_by_date

GRID_SIZE = 42

_MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def normalize_month(year: int, month: int) -> tuple[int, int]:
    """Fold an out-of-range 0-indexed month into ``(year, 0..11)``."""
    return year + month // 12, month % 12


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    return normalize_month(year, month + delta)


def month_label(year: int, month: int) -> str:
    year, month = normalize_month(year, month)
    return f"{_MONTH_NAMES[month]} {year}"


def _first_of_month(year: int, month: int) -> date:
    year, month = normalize_month(year, month)
    return date(year, month + 1, 1)


def days_in_month(year: int, month: int) -> int:
    # Absolute day=31 clamps to the last day of the month.
    return (_first_of_month(year, month) + relativedelta(day=31)).day


def first_weekday(year: int, month: int) -> int:
    """Weekday index of day 1 of the month, 0 = Sunday."""
    return (_first_of_month(year, month).weekday() + 1) % 7


def build_month_grid(year: int, month: int) -> list[DayCell]:
    """Return exactly 42 day descriptors laying out the given month.

    Leading cells are the trailing days of the previous month, followed by
    every day of the month, padded with days of the next month.
    """
    first = _first_of_month(year, month)
    try:
        origin = first - timedelta(days=first_weekday(year, month))
        cells = []
        for offset in range(GRID_SIZE):
            current = origin + timedelta(days=offset)
            cells.append(
                DayCell(
                    day=current.day,
                    is_current_month=(
                        current.year == first.year and current.month == first.month
                    ),
                    date=format_date(current),
                )
            )
    except OverflowError:
        raise ValueError(f"month {month} of year {year} is out of range") from None
    return cells


def _card(event: Event, conflicts: set[int]) -> EventCard:
    return EventCard(
        id=event.id,
        title=event.title,
        color=event.color,
        label=event.title if event.is_all_day else f"{event.time} {event.title}",
        is_all_day=event.is_all_day,
        has_conflict=event.id in conflicts,
    )


def build_month_view(
    year: int,
    month: int,
    events: Iterable[Event],
    today: date,
) -> MonthView:
    """Decorate the month grid with event cards, conflict flags and navigation."""
    events = list(events)
    conflicts = detect_conflicts(events)
    by_date = group_by_date(events)
    today_str = format_date(today)

    days: list[CalendarDay] = []
    for cell in build_month_grid(year, month):
        if not cell.is_current_month:
            # Out-of-month cells render empty and take no clicks.
            days.append(CalendarDay(**cell.model_dump()))
            continue
        day_events = by_date.get(cell.date, [])
        days.append(
            CalendarDay(
                **cell.model_dump(),
                is_today=cell.date == today_str,
                events=[_card(e, conflicts) for e in day_events[:MAX_VISIBLE_EVENTS]],
                more_count=max(len(day_events) - MAX_VISIBLE_EVENTS, 0),
            )
        )

    norm_year, norm_month = normalize_month(year, month)
    prev_year, prev_month = shift_month(norm_year, norm_month, -1)
    next_year, next_month = shift_month(norm_year, norm_month, 1)
    return MonthView(
        year=norm_year,
        month=norm_month,
        label=month_label(norm_year, norm_month),
        days=days,
        total_events=len(events),
        previous=MonthRef(year=prev_year, month=prev_month),
        next=MonthRef(year=next_year, month=next_month),
    )


def draft_for_date(day: date) -> EventDraft:
    """Form defaults prefilled with the clicked day."""
    return EventDraft(date=format_date(day))
