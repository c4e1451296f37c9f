"""
scheduling/schedule_tree.py — Interval Placement Store

An ordered collection of non-overlapping Entries keyed by start time, with
bounded gap search in both directions.

Invariants held before and after every public method:
  1. No two entries overlap: for distinct a, b either a.end <= b.start or b.end <= a.start.
  2. Iteration yields entries in ascending (start, end) order.
  3. A payload occupies at most one entry.
  4. Lookup by payload goes through a dict, not a scan.

Entries live in a list kept sorted with bisect. Because entries never overlap,
their end times are sorted too, which is what makes both gap searches a
bisect followed by a walk over neighbouring entries.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Generic, Hashable, Iterator, Optional, TypeVar

P = TypeVar("P", bound=Hashable)


@dataclass(frozen=True)
class Entry(Generic[P]):
    start: datetime
    end: datetime
    payload: P

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


def _sort_key(entry: Entry) -> tuple[datetime, datetime]:
    return (entry.start, entry.end)


class ScheduleTree(Generic[P]):
    """
    Non-overlapping placement of payloads on a timeline.

    Usage::

        tree = ScheduleTree()
        tree.schedule_close_before(deadline, duration, now, handle)   # as late as possible
        entry = tree.unschedule(handle)
        tree.schedule_close_after(now, duration, entry.end, handle)   # as early as possible
        for entry in tree: ...
    """

    def __init__(self) -> None:
        self._entries: list[Entry[P]] = []
        self._by_payload: dict[P, Entry[P]] = {}

    # ── Introspection ─────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, payload: object) -> bool:
        return payload in self._by_payload

    def __iter__(self) -> Iterator[Entry[P]]:
        """Entries in ascending start order. Each call starts a fresh pass."""
        return iter(tuple(self._entries))

    def __repr__(self) -> str:
        return f"ScheduleTree({self._entries!r})"

    def is_empty(self) -> bool:
        return not self._entries

    def when_scheduled(self, payload: P) -> Optional[datetime]:
        entry = self._by_payload.get(payload)
        return entry.start if entry is not None else None

    def entry_for(self, payload: P) -> Optional[Entry[P]]:
        return self._by_payload.get(payload)

    # ── Placement ─────────────────────────────────────────────────────────────

    def schedule_close_before(
        self,
        deadline: datetime,
        duration: timedelta,
        lower_bound: Optional[datetime],
        payload: P,
    ) -> bool:
        """
        Place `payload` so it ends as late as possible, but no later than `deadline`.

        Gaps are tried from the latest to the earliest. The chosen start must not
        be before `lower_bound` when one is given. Returns False, leaving the tree
        untouched, when no gap before the deadline is wide enough.
        """
        self._check_placeable(duration, payload)

        # Entries [0, idx) start before the deadline; everything from idx on
        # starts at or after it and cannot constrain an entry ending there.
        idx = bisect.bisect_left(self._entries, (deadline,), key=_sort_key)
        upper = deadline
        while True:
            start = upper - duration
            if lower_bound is not None and start < lower_bound:
                return False
            if idx == 0 or self._entries[idx - 1].end <= start:
                self._insert(Entry(start, upper, payload))
                return True
            idx -= 1
            upper = min(upper, self._entries[idx].start)

    def schedule_close_after(
        self,
        start: datetime,
        duration: timedelta,
        upper_bound: Optional[datetime],
        payload: P,
    ) -> bool:
        """
        Place `payload` so it starts as early as possible, but no earlier than `start`.

        Gaps are tried from the earliest to the latest. The chosen end must not be
        after `upper_bound` when one is given. Returns False, leaving the tree
        untouched, when no such gap exists.
        """
        self._check_placeable(duration, payload)

        idx = bisect.bisect_left(self._entries, (start,), key=_sort_key)
        # At most one entry starting before `start` can still reach past it.
        if idx > 0 and self._entries[idx - 1].end > start:
            idx -= 1
        lower = start
        while True:
            end = lower + duration
            if upper_bound is not None and end > upper_bound:
                return False
            if idx == len(self._entries) or end <= self._entries[idx].start:
                self._insert(Entry(lower, end, payload))
                return True
            lower = max(lower, self._entries[idx].end)
            idx += 1

    def unschedule(self, payload: P) -> Optional[Entry[P]]:
        """Remove and return the entry holding `payload`, or None if it isn't placed."""
        entry = self._by_payload.pop(payload, None)
        if entry is None:
            return None
        idx = bisect.bisect_left(self._entries, _sort_key(entry), key=_sort_key)
        # Zero-length entries can share a key; match on identity.
        while self._entries[idx] is not entry:
            idx += 1
        del self._entries[idx]
        return entry

    # ── Internals ─────────────────────────────────────────────────────────────

    def _check_placeable(self, duration: timedelta, payload: P) -> None:
        if duration < timedelta(0):
            raise ValueError(f"duration must be non-negative, got {duration}")
        if payload in self._by_payload:
            raise ValueError(f"{payload!r} is already scheduled")

    def _insert(self, entry: Entry[P]) -> None:
        bisect.insort_right(self._entries, entry, key=_sort_key)
        self._by_payload[entry.payload] = entry
