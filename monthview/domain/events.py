"""Domain events emitted during the calendar event lifecycle."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class EventCreated(BaseModel):
    """Fired when a new Event is added to the collection."""

    event_id: int


class EventUpdated(BaseModel):
    """Fired when an Event is edited in place."""

    event_id: int


class EventDeleted(BaseModel):
    """Fired after an Event has been removed from the collection."""

    event_id: int
    title: str


class ConflictDetected(BaseModel):
    """Fired when a created or edited event overlaps others on the same date."""

    event_id: int
    conflicting_event_ids: list[int]


class ReminderDue(BaseModel):
    """Fired when an event enters its reminder window (once per key)."""

    event_id: int
    reminder_key: str
    due_at: datetime
