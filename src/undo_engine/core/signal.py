"""Signals describing timeline state flips and the slot that emits them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from undo_engine.runtime import telemetry


class SignalKind(str, Enum):
    UNDO = "undo"
    REDO = "redo"
    SAVED = "saved"


@dataclass(frozen=True, slots=True)
class Signal:
    """A boolean state transition: ``kind`` is now ``value``."""

    kind: SignalKind
    value: bool

    @classmethod
    def undo(cls, value: bool) -> "Signal":
        return cls(SignalKind.UNDO, value)

    @classmethod
    def redo(cls, value: bool) -> "Signal":
        return cls(SignalKind.REDO, value)

    @classmethod
    def saved(cls, value: bool) -> "Signal":
        return cls(SignalKind.SAVED, value)


SignalCallback = Callable[[Signal], None]


class Slot:
    """Holds an optional callback and forwards signals to it."""

    def __init__(
        self,
        callback: Optional[SignalCallback] = None,
        *,
        logger_name: str | None = None,
    ) -> None:
        self._callback = callback
        self._logger_name = logger_name

    def connect(self, callback: SignalCallback) -> Optional[SignalCallback]:
        previous, self._callback = self._callback, callback
        return previous

    def disconnect(self) -> Optional[SignalCallback]:
        previous, self._callback = self._callback, None
        return previous

    def emit(self, signal: Signal) -> None:
        telemetry.record_event(
            "timeline.signal",
            level="debug",
            data={"kind": signal.kind.value, "value": signal.value},
            logger_name=self._logger_name,
        )
        if self._callback is not None:
            self._callback(signal)

    def emit_if(self, condition: bool, signal: Signal) -> None:
        if condition:
            self.emit(signal)

    def __repr__(self) -> str:
        return f"Slot(connected={self._callback is not None})"


__all__ = ["Signal", "SignalCallback", "SignalKind", "Slot"]
