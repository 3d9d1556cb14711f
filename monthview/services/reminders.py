"""Service for deciding when event reminders are due and polling for them."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable

from monthview.domain.models import Event

logger = logging.getLogger(__name__)

REMINDER_TITLE = "Event Reminder"
MAX_POLL_SECONDS = 60


def reminder_window(event: Event) -> tuple[datetime, datetime] | None:
    """Return ``(reminder_time, start)`` or None when reminders are off."""
    if event.reminder <= 0:
        return None
    start = event.start
    try:
        reminder_time = start - timedelta(minutes=event.reminder)
    except OverflowError:
        reminder_time = datetime.min
    return reminder_time, start


def is_reminder_due(event: Event, now: datetime) -> bool:
    """A reminder is due while ``reminder_time <= now < start``."""
    window = reminder_window(event)
    if window is None:
        return False
    reminder_time, start = window
    return reminder_time <= now < start


def reminder_message(event: Event) -> tuple[str, str]:
    return REMINDER_TITLE, f"{event.title} starts at {event.time}"


class ReminderTracker:
    """Set of fired ``id-date-time`` keys, kept for the whole session."""

    def __init__(self) -> None:
        self._fired: set[str] = set()

    def has_fired(self, key: str) -> bool:
        return key in self._fired

    def mark_fired(self, key: str) -> None:
        self._fired.add(key)

    def clear(self) -> None:
        self._fired.clear()

    def __len__(self) -> int:
        return len(self._fired)


def check_reminders(
    events: Iterable[Event],
    now: datetime,
    tracker: ReminderTracker,
    deliver: Callable[[Event], object] | None = None,
) -> list[Event]:
    """Return events whose reminder is due and has not fired yet.

    Returned events are recorded in *tracker*, so repeated polling inside
    the same window yields each ``(id, date, time)`` only once.

    When *deliver* is given it is called for each due event before the key
    is recorded. If it raises, the error is logged, the key stays unfired
    and the remaining events are still checked.
    """
    due: list[Event] = []
    for event in events:
        if not is_reminder_due(event, now):
            continue
        key = event.reminder_key
        if tracker.has_fired(key):
            continue
        if deliver is not None:
            try:
                deliver(event)
            except Exception:
                logger.exception("Reminder delivery failed for %s", key)
                continue
        tracker.mark_fired(key)
        due.append(event)
    return due


class ReminderPoller:
    """Runs *check* immediately and then every *interval_seconds* on the loop."""

    def __init__(
        self,
        check: Callable[[datetime], object],
        interval_seconds: float = MAX_POLL_SECONDS,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if not 0 < interval_seconds <= MAX_POLL_SECONDS:
            raise ValueError(
                f"interval_seconds must be in (0, {MAX_POLL_SECONDS}], "
                f"got {interval_seconds}"
            )
        self._check = check
        self._interval = interval_seconds
        self._clock = clock
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Reminder poller started (every %ss)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Reminder poller stopped")

    async def _run(self) -> None:
        while True:
            now = self._clock()
            logger.debug("Checking reminders at %s", now.isoformat())
            try:
                self._check(now)
            except Exception:
                logger.exception("Reminder check failed at %s", now.isoformat())
            await asyncio.sleep(self._interval)
