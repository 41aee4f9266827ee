"""Time-based seek over recorded entry timestamps."""

from __future__ import annotations

from bisect import bisect_left
from datetime import datetime
from typing import Optional, Sequence, TypeVar

from undo_engine.core.entry import Entry, as_utc
from undo_engine.core.timeline import Timeline

T = TypeVar("T")
R = TypeVar("R")


def find_index(entries: Sequence[Entry[T, R]], when: datetime) -> int:
    """Return how many entries were recorded strictly before ``when``.

    Entry timestamps are non-decreasing, so a binary search is enough.
    Naive datetimes are read as UTC.
    """

    return bisect_left(entries, as_utc(when), key=lambda entry: entry.timestamp)


def time_travel(timeline: Timeline[T, R], target: T, when: datetime) -> Optional[R]:
    """Move ``timeline`` to the state it had at ``when``."""

    return timeline.go_to(target, find_index(timeline.entries, when))


__all__ = ["find_index", "time_travel"]
