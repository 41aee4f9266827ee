"""Command-pattern undo/redo engine."""

from .core import (
    Action,
    Entry,
    Group,
    Signal,
    SignalKind,
    StackId,
    Timeline,
    TimelineConfig,
    UnknownStackError,
)

__all__ = [
    "Action",
    "Entry",
    "Group",
    "Signal",
    "SignalKind",
    "StackId",
    "Timeline",
    "TimelineConfig",
    "UnknownStackError",
    "core",
    "extensions",
    "runtime",
]

__version__ = "0.1.0"
