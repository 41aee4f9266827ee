"""Bounded, cursor-addressed undo/redo history for a single target."""

from __future__ import annotations

from collections import deque
from datetime import datetime
from typing import Callable, Deque, Generic, Optional, Tuple, TypeVar

from undo_engine.runtime.telemetry import span

from .action import Action
from .config import TimelineConfig
from .entry import Entry, as_utc, utc_now
from .signal import Signal, SignalCallback, Slot

T = TypeVar("T")
R = TypeVar("R")

_Flags = Tuple[bool, bool, bool]


class Timeline(Generic[T, R]):
    """Linear history of reversible actions with a cursor and saved marker.

    ``current`` counts the entries applied from the start, so entries at
    ``current`` and beyond form the redo tail. The entry buffer never grows
    past ``config.capacity``: the oldest entry is evicted to make room.
    """

    def __init__(
        self,
        config: TimelineConfig | None = None,
        *,
        callback: Optional[SignalCallback] = None,
        clock: Optional[Callable[[], datetime]] = None,
        logger_name: str | None = None,
    ) -> None:
        self.config = config or TimelineConfig()
        self._entries: Deque[Entry[T, R]] = deque()
        self._current = 0
        self._saved: Optional[int] = 0 if self.config.saved else None
        self._logger_name = logger_name or "undo_engine.timeline"
        self._slot = Slot(callback, logger_name=self._logger_name)
        self._clock = clock or utc_now

    @property
    def capacity(self) -> int:
        return self.config.capacity

    @property
    def current(self) -> int:
        return self._current

    @property
    def saved(self) -> Optional[int]:
        return self._saved

    @property
    def entries(self) -> Tuple[Entry[T, R], ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def connect(self, callback: SignalCallback) -> Optional[SignalCallback]:
        """Register ``callback`` for signals, returning the previous one."""

        return self._slot.connect(callback)

    def disconnect(self) -> Optional[SignalCallback]:
        return self._slot.disconnect()

    def can_undo(self) -> bool:
        return self._current > 0

    def can_redo(self) -> bool:
        return self._current < len(self._entries)

    def is_saved(self) -> bool:
        return self._saved is not None and self._saved == self._current

    def apply(self, target: T, action: Action[T, R]) -> R:
        """Apply ``action`` to ``target`` and record it.

        The redo tail is discarded. The action is folded into the previous
        entry when that entry's ``merge`` accepts it and the timeline is not
        sitting on its saved position.
        """

        with span(
            "timeline::apply",
            logger_name=self._logger_name,
            component="timeline",
            metadata={"action": str(action), "current": self._current},
        ) as handle:
            before = self._flags()
            output = action.apply(target)
            self._discard_tail()
            if self._merge(action):
                handle.add_metadata("merged", True)
            else:
                self._append(Entry(action, self._timestamp()))
            self._emit_changes(before)
            return output

    def undo(self, target: T) -> Optional[R]:
        """Undo the entry before the cursor; ``None`` when there is none."""

        if not self.can_undo():
            return None
        with span(
            "timeline::undo",
            logger_name=self._logger_name,
            component="timeline",
            metadata={"current": self._current},
        ):
            before = self._flags()
            output = self._step_back(target)
            self._emit_changes(before)
            return output

    def redo(self, target: T) -> Optional[R]:
        """Re-apply the entry at the cursor; ``None`` when there is none."""

        if not self.can_redo():
            return None
        with span(
            "timeline::redo",
            logger_name=self._logger_name,
            component="timeline",
            metadata={"current": self._current},
        ):
            before = self._flags()
            output = self._step_forward(target)
            self._emit_changes(before)
            return output

    def go_to(self, target: T, index: int) -> Optional[R]:
        """Undo or redo repeatedly until ``current == index``.

        Returns the output of the last step taken. A failing step stops the
        walk with the cursor on the last position reached, and its error
        propagates.
        """

        if index < 0 or index > len(self._entries):
            raise IndexError(
                f"index {index} out of range for timeline of length "
                f"{len(self._entries)}"
            )
        if index == self._current:
            return None
        with span(
            "timeline::go_to",
            logger_name=self._logger_name,
            component="timeline",
            metadata={"current": self._current, "index": index},
        ) as handle:
            before = self._flags()
            output: Optional[R] = None
            try:
                while self._current != index:
                    if index < self._current:
                        output = self._step_back(target)
                    else:
                        output = self._step_forward(target)
            finally:
                handle.add_metadata("reached", self._current)
                self._emit_changes(before)
            return output

    def set_saved(self, saved: bool) -> None:
        """Mark (or unmark) the current position as the saved state."""

        was_saved = self.is_saved()
        if saved:
            self._saved = self._current
            self._slot.emit_if(not was_saved, Signal.saved(True))
        else:
            self._saved = None
            self._slot.emit_if(was_saved, Signal.saved(False))

    def revert(self, target: T) -> Optional[R]:
        """Go back to the saved position, if there is one."""

        if self._saved is None:
            return None
        return self.go_to(target, self._saved)

    def clear(self) -> None:
        could_undo = self.can_undo()
        could_redo = self.can_redo()
        self._saved = 0 if self.is_saved() else None
        self._entries.clear()
        self._current = 0
        self._slot.emit_if(could_undo, Signal.undo(False))
        self._slot.emit_if(could_redo, Signal.redo(False))

    def _step_back(self, target: T) -> R:
        output = self._entries[self._current - 1].undo(target)
        self._current -= 1
        return output

    def _step_forward(self, target: T) -> R:
        output = self._entries[self._current].apply(target)
        self._current += 1
        return output

    def _discard_tail(self) -> None:
        while len(self._entries) > self._current:
            self._entries.pop()
        # A saved position inside the dropped tail can never be reached again.
        if self._saved is not None and self._saved > self._current:
            self._saved = None

    def _merge(self, action: Action[T, R]) -> bool:
        if not self._entries or self.is_saved():
            return False
        return self._entries[-1].merge(action)

    def _append(self, entry: Entry[T, R]) -> None:
        if len(self._entries) == self.capacity:
            self._entries.popleft()
            self._current -= 1
            if self._saved is not None:
                self._saved = self._saved - 1 if self._saved > 0 else None
        self._entries.append(entry)
        self._current += 1

    def _timestamp(self) -> datetime:
        now = as_utc(self._clock())
        if self._entries and now < self._entries[-1].timestamp:
            return self._entries[-1].timestamp
        return now

    def _flags(self) -> _Flags:
        return self.can_undo(), self.can_redo(), self.is_saved()

    def _emit_changes(self, before: _Flags) -> None:
        could_undo, could_redo, was_saved = before
        can_undo, can_redo, is_saved = self._flags()
        self._slot.emit_if(could_undo != can_undo, Signal.undo(can_undo))
        self._slot.emit_if(could_redo != can_redo, Signal.redo(can_redo))
        self._slot.emit_if(was_saved != is_saved, Signal.saved(is_saved))

    def __repr__(self) -> str:
        return (
            f"Timeline(len={len(self._entries)}, capacity={self.capacity}, "
            f"current={self._current}, saved={self._saved}, slot={self._slot!r})"
        )


__all__ = ["Timeline"]
