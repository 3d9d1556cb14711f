"""In-memory event collection and the injected EventStore capability."""

from __future__ import annotations

import logging
import time
from typing import Protocol

from monthview.domain.models import Event, EventColor

logger = logging.getLogger(__name__)


class EventNotFoundError(LookupError):
    """Raised when an update or removal names an unknown event id."""


class DuplicateEventError(ValueError):
    """Raised when adding an event whose id is already in the collection."""


class EventRepository:
    """Ordered, list-backed collection that is the sole owner of all events.

    Every mutation builds a new list and swaps it in, so readers never see
    a half-applied change.
    """

    def __init__(self, events: list[Event] | None = None) -> None:
        self._events: list[Event] = []
        self._last_id = 0
        for event in events or []:
            self.add(event)

    def next_id(self) -> int:
        """Time-based id (epoch milliseconds), strictly increasing."""
        candidate = max(int(time.time() * 1000), self._last_id + 1)
        self._last_id = candidate
        return candidate

    def add(self, event: Event) -> None:
        if self.get(event.id) is not None:
            raise DuplicateEventError(f"Event {event.id} already exists")
        self._events = [*self._events, event]
        self._last_id = max(self._last_id, event.id)

    def update(self, event: Event) -> Event:
        """Replace the event with the same id in place and return the old one."""
        previous = self.get(event.id)
        if previous is None:
            raise EventNotFoundError(event.id)
        self._events = [event if e.id == event.id else e for e in self._events]
        return previous

    def remove(self, event_id: int) -> Event:
        removed = self.get(event_id)
        if removed is None:
            raise EventNotFoundError(event_id)
        self._events = [e for e in self._events if e.id != event_id]
        return removed

    def get(self, event_id: int) -> Event | None:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def list_all(self) -> list[Event]:
        return list(self._events)

    def list_for_date(self, date: str) -> list[Event]:
        return [e for e in self._events if e.date == date]

    def replace_all(self, events: list[Event]) -> None:
        """Swap in a whole collection, e.g. the result of ``EventStore.load``."""
        seen: set[int] = set()
        for event in events:
            if event.id in seen:
                raise DuplicateEventError(f"Event {event.id} already exists")
            seen.add(event.id)
        self._events = list(events)
        self._last_id = max(seen | {self._last_id})

    def __len__(self) -> int:
        return len(self._events)


# ---------------------------------------------------------------------------
# Persistence capability
# ---------------------------------------------------------------------------


class EventStore(Protocol):
    def load(self) -> list[Event]: ...

    def save(self, events: list[Event]) -> None: ...


class MemoryEventStore:
    """Keeps a snapshot of the last saved collection for the session."""

    def __init__(self, events: list[Event] | None = None) -> None:
        self._snapshot: list[Event] = list(events or [])
        self.save_count = 0

    def load(self) -> list[Event]:
        return [e.model_copy() for e in self._snapshot]

    def save(self, events: list[Event]) -> None:
        self._snapshot = [e.model_copy() for e in events]
        self.save_count += 1


class LoggingEventStore:
    """Wraps another store and logs every sync."""

    def __init__(self, inner: EventStore) -> None:
        self.inner = inner

    def load(self) -> list[Event]:
        events = self.inner.load()
        logger.info("Loaded %d events", len(events))
        return events

    def save(self, events: list[Event]) -> None:
        logger.debug("Syncing %d events", len(events))
        self.inner.save(events)


# ---------------------------------------------------------------------------
# Seed data – the sample month, including a busy 2025-11-01
# ---------------------------------------------------------------------------


def sample_events() -> list[Event]:
    return [
        Event(
            id=1,
            title="Chhat Puja (Pratihar Sashthi/Sandhya Arghya)",
            date="2025-11-28",
            time="08:30",
            duration=120,
            color=EventColor.GREEN,
            description="Traditional Hindu festival",
            reminder=30,
        ),
        Event(
            id=2,
            title="Advanced Java",
            date="2025-11-02",
            time="12:00",
            duration=60,
            description="Programming class",
            reminder=15,
        ),
        Event(
            id=3,
            title="Async Programming",
            date="2025-11-01",
            time="08:30",
            duration=90,
            description="Advanced programming concepts",
            reminder=15,
        ),
        Event(
            id=4,
            title="Dynamic Programming - I",
            date="2025-11-01",
            time="11:00",
            duration=120,
            description="Algorithm course",
            reminder=15,
        ),
        Event(
            id=5,
            title="Async Programming - II",
            date="2025-11-01",
            time="17:00",
            duration=90,
            description="Advanced session",
            reminder=15,
        ),
    ]


def create_event_store(seed: bool = True) -> LoggingEventStore:
    """Return the session store, optionally pre-loaded with sample events."""
    return LoggingEventStore(MemoryEventStore(sample_events() if seed else None))
