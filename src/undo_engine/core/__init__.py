"""Reversible actions, timelines, and timeline groups."""

from .action import Action
from .config import DEFAULT_CAPACITY, TimelineConfig
from .entry import Entry
from .group import Group, StackId, UnknownStackError
from .signal import Signal, SignalCallback, SignalKind, Slot
from .timeline import Timeline

__all__ = [
    "Action",
    "DEFAULT_CAPACITY",
    "Entry",
    "Group",
    "Signal",
    "SignalCallback",
    "SignalKind",
    "Slot",
    "StackId",
    "Timeline",
    "TimelineConfig",
    "UnknownStackError",
]
