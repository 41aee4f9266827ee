"""Optional helpers built on a timeline's read-only state."""

from .display import redo_text, render, undo_text
from .seek import find_index, time_travel

__all__ = [
    "find_index",
    "redo_text",
    "render",
    "time_travel",
    "undo_text",
]
