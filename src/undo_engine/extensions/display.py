"""Text rendering of a timeline's pending actions and history."""

from __future__ import annotations

from typing import Any, Optional

from undo_engine.core.entry import describe
from undo_engine.core.timeline import Timeline


def undo_text(timeline: Timeline[Any, Any]) -> Optional[str]:
    """Describe the action the next ``undo`` would reverse."""

    if not timeline.can_undo():
        return None
    return str(timeline.entries[timeline.current - 1])


def redo_text(timeline: Timeline[Any, Any]) -> Optional[str]:
    """Describe the action the next ``redo`` would re-apply."""

    if not timeline.can_redo():
        return None
    return str(timeline.entries[timeline.current])


def render(timeline: Timeline[Any, Any]) -> str:
    """Render the history newest first, one line per position.

    Position ``n`` is the state after ``n`` entries have been applied, so the
    bottom line (position 0) is the state before any entry. ``*`` marks the
    cursor and ``(saved)`` marks the saved position.
    """

    entries = timeline.entries
    lines = []
    for position in range(len(entries), -1, -1):
        marker = "*" if position == timeline.current else " "
        label = describe(entries[position - 1]) if position else "<origin>"
        suffix = " (saved)" if timeline.saved == position else ""
        lines.append(f"{marker} {position}: {label}{suffix}")
    return "\n".join(lines)


__all__ = ["redo_text", "render", "undo_text"]
