"""Domain models for the month-view calendar."""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

MIN_DURATION_MINUTES = 15
ALL_DAY_MINUTES = 1440
MAX_VISIBLE_EVENTS = 3
MAX_REMINDER_MINUTES = 525_600

WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]


class EventColor(StrEnum):
    BLUE = "#3b82f6"
    GREEN = "#16a34a"
    RED = "#ef4444"
    PURPLE = "#8b5cf6"
    AMBER = "#f59e0b"
    PINK = "#ec4899"


def format_date(value: date) -> str:
    return value.isoformat()


def parse_time(value: str) -> int:
    """Return the minutes since midnight for an ``HH:MM`` string."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class EventForm(BaseModel):
    """User-submitted event fields; an Event is only built from a valid form."""

    title: str = Field(min_length=1)
    date: str
    time: str
    duration: int = Field(ge=MIN_DURATION_MINUTES)
    color: EventColor = EventColor.BLUE
    description: str = ""
    reminder: int = Field(default=15, ge=0, le=MAX_REMINDER_MINUTES)

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("date")
    @classmethod
    def _valid_date(cls, value: str) -> str:
        try:
            datetime.strptime(value, DATE_FORMAT)
        except ValueError:
            raise ValueError("date must be in YYYY-MM-DD form") from None
        if len(value) != 10:
            raise ValueError("date must be in YYYY-MM-DD form")
        return value

    @field_validator("time")
    @classmethod
    def _valid_time(cls, value: str) -> str:
        try:
            datetime.strptime(value, TIME_FORMAT)
        except ValueError:
            raise ValueError("time must be in HH:MM (24-hour) form") from None
        if len(value) != 5:
            raise ValueError("time must be in HH:MM (24-hour) form")
        return value


class Event(EventForm):
    id: int

    @classmethod
    def from_form(cls, event_id: int, form: EventForm) -> Event:
        return cls(id=event_id, **form.model_dump())

    @property
    def start(self) -> datetime:
        return datetime.strptime(
            f"{self.date} {self.time}", f"{DATE_FORMAT} {TIME_FORMAT}"
        )

    @property
    def start_minutes(self) -> int:
        return parse_time(self.time)

    @property
    def is_all_day(self) -> bool:
        return self.duration >= ALL_DAY_MINUTES

    @property
    def reminder_key(self) -> str:
        return f"{self.id}-{self.date}-{self.time}"


class EventDraft(BaseModel):
    """Unvalidated form defaults used to prefill the create form."""

    title: str = ""
    date: str
    time: str = "09:00"
    duration: int = 60
    color: EventColor = EventColor.BLUE
    description: str = ""
    reminder: int = 15


# ---------------------------------------------------------------------------
# Calendar grid / view models
# ---------------------------------------------------------------------------


class DayCell(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: int
    is_current_month: bool = Field(alias="isCurrentMonth")
    date: str


class EventCard(BaseModel):
    id: int
    title: str
    color: EventColor
    label: str
    is_all_day: bool
    has_conflict: bool


class CalendarDay(DayCell):
    is_today: bool = False
    events: list[EventCard] = Field(default_factory=list)
    more_count: int = 0


class MonthRef(BaseModel):
    year: int
    month: int


class MonthView(BaseModel):
    year: int
    month: int
    label: str
    weekdays: list[str] = Field(default_factory=lambda: list(WEEKDAY_NAMES))
    days: list[CalendarDay]
    total_events: int
    previous: MonthRef
    next: MonthRef


class EventDetails(BaseModel):
    event: Event
    is_all_day: bool
    has_conflict: bool
    conflicting_event_ids: list[int] = Field(default_factory=list)


class Notification(BaseModel):
    title: str
    body: str
    delivered_at: datetime
