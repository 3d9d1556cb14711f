"""Service for detecting scheduling conflicts between events."""

from __future__ import annotations

from collections import defaultdict
from itertools import combinations
from typing import Iterable

from monthview.domain.models import Event


def events_overlap(first: Event, second: Event) -> bool:
    """Return True when two events on the same date overlap in time.

    Overlap rule: conflict if start_a < end_b AND start_b < end_a, using
    minutes since midnight. Exact boundary touches (end == start) are NOT
    considered conflicts, and events on different dates never conflict.
    """
    if first.date != second.date:
        return False
    start_a = first.start_minutes
    end_a = start_a + first.duration
    start_b = second.start_minutes
    end_b = start_b + second.duration
    return start_a < end_b and start_b < end_a


def group_by_date(events: Iterable[Event]) -> dict[str, list[Event]]:
    """Bucket events by their exact ``date`` string, keeping collection order."""
    buckets: dict[str, list[Event]] = defaultdict(list)
    for event in events:
        buckets[event.date].append(event)
    return dict(buckets)


def detect_conflicts(events: Iterable[Event]) -> set[int]:
    """Return the ids of every event involved in at least one conflict."""
    conflicts: set[int] = set()
    for bucket in group_by_date(events).values():
        for first, second in combinations(bucket, 2):
            if events_overlap(first, second):
                conflicts.add(first.id)
                conflicts.add(second.id)
    return conflicts


def find_conflicts(event: Event, others: Iterable[Event]) -> list[Event]:
    """Return the events in *others* that overlap *event* (itself excluded)."""
    return [
        other
        for other in others
        if other.id != event.id and events_overlap(event, other)
    ]
