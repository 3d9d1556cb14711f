"""Notification delivery behind a ``notify(title, body)`` capability."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime
from typing import Callable, Protocol

from monthview.domain.models import Notification

logger = logging.getLogger(__name__)


class NotificationUnavailable(RuntimeError):
    """Raised by a notifier that is not permitted to deliver right now."""


class Notifier(Protocol):
    def notify(self, title: str, body: str) -> None: ...


class LogNotifier:
    """Last-resort surface: writes the message to the log."""

    def notify(self, title: str, body: str) -> None:
        logger.warning("%s: %s", title, body)


class InboxNotifier:
    """Keeps the most recent notifications for the UI to display.

    When *enabled* is False (permission not granted) delivery raises
    ``NotificationUnavailable`` so a fallback can take over.
    """

    def __init__(
        self,
        enabled: bool = True,
        maxlen: int = 50,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.enabled = enabled
        self._clock = clock
        self._messages: deque[Notification] = deque(maxlen=maxlen)

    def notify(self, title: str, body: str) -> None:
        if not self.enabled:
            raise NotificationUnavailable("inbox notifications are disabled")
        self._messages.append(
            Notification(title=title, body=body, delivered_at=self._clock())
        )
        logger.info("Notification delivered: %s", body)

    def list_all(self) -> list[Notification]:
        return list(self._messages)

    def clear(self) -> None:
        self._messages.clear()


class FallbackNotifier:
    """Tries *primary* and falls back when it reports itself unavailable."""

    def __init__(self, primary: Notifier, fallback: Notifier) -> None:
        self.primary = primary
        self.fallback = fallback

    def notify(self, title: str, body: str) -> None:
        try:
            self.primary.notify(title, body)
        except NotificationUnavailable as exc:
            logger.debug("Primary notifier unavailable (%s), using fallback", exc)
            self.fallback.notify(title, body)
