"""Construction options for timelines."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from undo_engine.runtime.telemetry import ENV_PREFIX

DEFAULT_CAPACITY = 32


@dataclass(frozen=True, slots=True)
class TimelineConfig:
    """Fixed capacity plus whether the empty state counts as saved."""

    capacity: int = DEFAULT_CAPACITY
    saved: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.capacity, bool) or not isinstance(self.capacity, int):
            raise TypeError("capacity must be an int")
        if self.capacity < 1:
            raise ValueError("capacity must be at least 1")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TimelineConfig":
        """Read ``UNDO_ENGINE_CAPACITY`` / ``UNDO_ENGINE_INITIALLY_SAVED``."""

        env = os.environ if environ is None else environ
        raw_capacity = env.get(f"{ENV_PREFIX}CAPACITY")
        raw_saved = env.get(f"{ENV_PREFIX}INITIALLY_SAVED")

        capacity = DEFAULT_CAPACITY
        if raw_capacity:
            try:
                capacity = int(raw_capacity)
            except ValueError as exc:
                raise ValueError(
                    f"{ENV_PREFIX}CAPACITY must be an integer, got {raw_capacity!r}"
                ) from exc

        saved = True
        if raw_saved is not None:
            saved = raw_saved.lower() in {"1", "true", "yes", "on"}

        return cls(capacity=capacity, saved=saved)


__all__ = ["DEFAULT_CAPACITY", "TimelineConfig"]
