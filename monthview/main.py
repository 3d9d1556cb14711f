"""FastAPI application: entry point for the month-view calendar service."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date, datetime

from fastapi import FastAPI, HTTPException, Query

from monthview.config import Settings, configure_logging
from monthview.domain.bus import EventBus
from monthview.domain.events import (
    EventCreated,
    EventDeleted,
    EventUpdated,
    ReminderDue,
)
from monthview.domain.handlers import HandlerRegistry
from monthview.domain.models import (
    Event,
    EventDetails,
    EventDraft,
    EventForm,
    MonthView,
    Notification,
)
from monthview.repos.memory import (
    EventNotFoundError,
    EventRepository,
    create_event_store,
)
from monthview.services.conflicts import detect_conflicts, find_conflicts
from monthview.services.grid import build_month_view, draft_for_date, normalize_month
from monthview.services.notifications import (
    FallbackNotifier,
    InboxNotifier,
    LogNotifier,
)
from monthview.services.reminders import (
    ReminderPoller,
    ReminderTracker,
    check_reminders,
)

settings = Settings.from_env()
configure_logging(settings.log_level)

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
event_store = create_event_store(seed=settings.seed_sample_events)
event_repo = EventRepository()
event_repo.replace_all(event_store.load())
reminder_tracker = ReminderTracker()
inbox = InboxNotifier(
    enabled=settings.notifications_enabled, maxlen=settings.inbox_size
)
notifier = FallbackNotifier(primary=inbox, fallback=LogNotifier())

handler_registry = HandlerRegistry(
    bus=event_bus,
    event_repo=event_repo,
    event_store=event_store,
    notifier=notifier,
)


def fire_due_reminders(now: datetime) -> list[int]:
    """Publish ReminderDue for every reminder that is due and not yet fired."""

    def publish(event: Event) -> None:
        event_bus.publish(
            ReminderDue(event_id=event.id, reminder_key=event.reminder_key, due_at=now)
        )

    due = check_reminders(
        event_repo.list_all(), now, reminder_tracker, deliver=publish
    )
    return [event.id for event in due]


@asynccontextmanager
async def lifespan(_: FastAPI):
    poller = ReminderPoller(fire_due_reminders, settings.reminder_poll_seconds)
    poller.start()
    try:
        yield
    finally:
        await poller.stop()


app = FastAPI(title="Month View Calendar", lifespan=lifespan)


def _month_view(year: int, month: int) -> MonthView:
    try:
        return build_month_view(year, month, event_repo.list_all(), date.today())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _require_event(event_id: int) -> Event:
    event = event_repo.get(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


# ── Calendar routes ───────────────────────────────────────────────────


@app.get("/calendar/today", response_model=MonthView)
async def current_month() -> MonthView:
    """Return the month view containing today."""
    today = date.today()
    return _month_view(today.year, today.month - 1)


@app.get("/calendar/{year}/{month}", response_model=MonthView)
async def month_view(year: int, month: int) -> MonthView:
    """Return the month view; *month* is 0-indexed and may be out of range."""
    return _month_view(year, month)


@app.get("/calendar/{year}/{month}/days/{day}/draft", response_model=EventDraft)
async def day_draft(year: int, month: int, day: int) -> EventDraft:
    """Return create-form defaults prefilled with the clicked day."""
    norm_year, norm_month = normalize_month(year, month)
    try:
        clicked = date(norm_year, norm_month + 1, day)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return draft_for_date(clicked)


# ── Event routes ──────────────────────────────────────────────────────


@app.get("/events", response_model=list[Event])
async def list_events(on: str | None = Query(default=None, alias="date")) -> list[Event]:
    """Return all events in collection order, optionally for one date."""
    if on is not None:
        return event_repo.list_for_date(on)
    return event_repo.list_all()


@app.post("/events", response_model=Event, status_code=201)
async def create_event(form: EventForm) -> Event:
    """Create an event from a validated form."""
    event = Event.from_form(event_repo.next_id(), form)
    event_repo.add(event)
    event_bus.publish(EventCreated(event_id=event.id))
    return event


@app.get("/events/{event_id}", response_model=EventDetails)
async def get_event(event_id: int) -> EventDetails:
    """Return a single event with its conflict information."""
    event = _require_event(event_id)
    conflicting = find_conflicts(event, event_repo.list_for_date(event.date))
    return EventDetails(
        event=event,
        is_all_day=event.is_all_day,
        has_conflict=bool(conflicting),
        conflicting_event_ids=[c.id for c in conflicting],
    )


@app.put("/events/{event_id}", response_model=Event)
async def update_event(event_id: int, form: EventForm) -> Event:
    """Edit an event in place, keeping its id."""
    event = Event.from_form(event_id, form)
    try:
        event_repo.update(event)
    except EventNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Event not found") from exc
    event_bus.publish(EventUpdated(event_id=event_id))
    return event


@app.delete("/events/{event_id}")
async def delete_event(event_id: int, confirm: bool = False) -> dict:
    """Delete an event. Requires ``confirm=true``; there is no undo."""
    _require_event(event_id)
    if not confirm:
        raise HTTPException(status_code=409, detail="Deletion must be confirmed")
    try:
        removed = event_repo.remove(event_id)
    except EventNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Event not found") from exc
    event_bus.publish(EventDeleted(event_id=removed.id, title=removed.title))
    return {"status": "deleted", "event_id": removed.id}


@app.get("/conflicts", response_model=list[int])
async def list_conflicts() -> list[int]:
    """Return the ids of all events involved in a same-day overlap."""
    return sorted(detect_conflicts(event_repo.list_all()))


# ── Reminders ─────────────────────────────────────────────────────────


@app.post("/tick")
async def tick(now: datetime | None = None) -> dict:
    """Run one reminder check and deliver any due reminders.

    Pass *now* as a query param to control the simulated clock. Times are
    local wall-clock; any timezone offset on *now* is dropped.
    """
    current_time = now or datetime.now()
    current_time = current_time.replace(tzinfo=None)
    fired = fire_due_reminders(current_time)
    return {"time": current_time.isoformat(), "reminders_fired": fired}


@app.get("/notifications", response_model=list[Notification])
async def list_notifications() -> list[Notification]:
    """Return the notifications delivered to the inbox this session."""
    return inbox.list_all()

