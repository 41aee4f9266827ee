"""Recorded timeline entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from .action import Action

T = TypeVar("T")
R = TypeVar("R")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Entry(Generic[T, R]):
    action: Action[T, R]
    timestamp: datetime = field(default_factory=utc_now)

    def apply(self, target: T) -> R:
        return self.action.apply(target)

    def undo(self, target: T) -> R:
        return self.action.undo(target)

    def merge(self, action: Action[T, R]) -> bool:
        return self.action.merge(action)

    def __str__(self) -> str:
        return str(self.action)


def as_utc(moment: datetime) -> datetime:
    """Normalize ``moment`` to an aware UTC datetime (naive means UTC)."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def describe(entry: Entry[Any, Any]) -> str:
    return f"{entry.timestamp.isoformat()} {entry}"


__all__ = ["Entry", "as_utc", "describe", "utc_now"]
