"""In-process dispatch of calendar domain events."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class EventBus:
    """Routes each published domain event to the handlers for its type.

    One handler may listen to several event types. Dispatch is synchronous:
    handlers run in subscription order and have all returned by the time
    ``publish`` does. A handler subscribed while an event is being dispatched
    only sees later events.
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Handler]] = defaultdict(list)

    def subscribe(self, handler: Handler, *event_types: type) -> None:
        if not event_types:
            raise ValueError("subscribe needs at least one event type")
        for event_type in event_types:
            self._handlers[event_type].append(handler)

    def handlers_for(self, event_type: type) -> list[Handler]:
        return list(self._handlers.get(event_type, ()))

    def publish(self, event: Any) -> int:
        """Dispatch *event*; return how many handlers received it."""
        handlers = self.handlers_for(type(event))
        logger.debug(
            "Publishing %s to %d handler(s)", type(event).__name__, len(handlers)
        )
        for handler in handlers:
            handler(event)
        return len(handlers)
