"""Domain event handlers, wired up at application startup."""

from __future__ import annotations

import logging

from monthview.domain.bus import EventBus
from monthview.domain.events import (
    ConflictDetected,
    EventCreated,
    EventDeleted,
    EventUpdated,
    ReminderDue,
)
from monthview.repos.memory import EventRepository, EventStore
from monthview.services.conflicts import find_conflicts
from monthview.services.notifications import Notifier
from monthview.services.reminders import reminder_message

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Wires domain-event handlers to the bus with access to the collection."""

    def __init__(
        self,
        bus: EventBus,
        event_repo: EventRepository,
        event_store: EventStore,
        notifier: Notifier,
    ) -> None:
        self.bus = bus
        self.event_repo = event_repo
        self.event_store = event_store
        self.notifier = notifier
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(
            self.on_collection_changed, EventCreated, EventUpdated, EventDeleted
        )
        self.bus.subscribe(self.on_conflict_detected, ConflictDetected)
        self.bus.subscribe(self.on_reminder_due, ReminderDue)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_collection_changed(
        self, event: EventCreated | EventUpdated | EventDeleted
    ) -> None:
        """Save the collection after a change and re-check saved events."""
        if isinstance(event, EventDeleted):
            logger.info("Deleted event %s (%s)", event.event_id, event.title)
            self._sync()
            return
        stored = self.event_repo.get(event.event_id)
        if stored is None:
            return
        verb = "Created" if isinstance(event, EventCreated) else "Updated"
        logger.info(
            "%s event %s (%s on %s)", verb, stored.id, stored.title, stored.date
        )
        self._sync()
        self._check_conflicts(stored.id)

    def on_conflict_detected(self, event: ConflictDetected) -> None:
        logger.warning(
            "Event %s conflicts with %s",
            event.event_id,
            ", ".join(str(cid) for cid in event.conflicting_event_ids),
        )

    def on_reminder_due(self, event: ReminderDue) -> None:
        stored = self.event_repo.get(event.event_id)
        if stored is None:
            return
        title, body = reminder_message(stored)
        self.notifier.notify(title, body)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _sync(self) -> None:
        self.event_store.save(self.event_repo.list_all())

    def _check_conflicts(self, event_id: int) -> None:
        stored = self.event_repo.get(event_id)
        if stored is None:
            return
        conflicts = find_conflicts(stored, self.event_repo.list_for_date(stored.date))
        if conflicts:
            self.bus.publish(
                ConflictDetected(
                    event_id=event_id,
                    conflicting_event_ids=[c.id for c in conflicts],
                )
            )
