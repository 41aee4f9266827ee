from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from undo_engine import Action, Timeline
from undo_engine.extensions import find_index, redo_text, render, time_travel, undo_text

BASE = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@dataclass
class Text:
    value: str = ""


class Add(Action[Text, None]):
    def __init__(self, char: str) -> None:
        self.char = char

    def apply(self, target: Text) -> None:
        target.value += self.char

    def undo(self, target: Text) -> None:
        target.value = target.value[:-1]

    def __str__(self) -> str:
        return f"add {self.char!r}"


def make_clock(*offsets: int) -> Callable[[], datetime]:
    moments = iter(BASE + timedelta(seconds=offset) for offset in offsets)
    return lambda: next(moments)


def make_timeline(chars: str, *offsets: int) -> tuple[Timeline[Text, None], Text]:
    timeline: Timeline[Text, None] = Timeline(clock=make_clock(*offsets))
    text = Text()
    for char in chars:
        timeline.apply(text, Add(char))
    return timeline, text


def test_find_index_counts_earlier_entries() -> None:
    timeline, _ = make_timeline("abc", 0, 10, 20)

    assert find_index(timeline.entries, BASE - timedelta(seconds=1)) == 0
    assert find_index(timeline.entries, BASE + timedelta(seconds=5)) == 1
    assert find_index(timeline.entries, BASE + timedelta(seconds=10)) == 1
    assert find_index(timeline.entries, BASE + timedelta(seconds=25)) == 3


def test_find_index_reads_naive_datetimes_as_utc() -> None:
    timeline, _ = make_timeline("abc", 0, 10, 20)

    assert find_index(timeline.entries, datetime(2024, 1, 1, 12, 0, 15)) == 2


def test_time_travel_moves_cursor() -> None:
    timeline, text = make_timeline("abc", 0, 10, 20)

    time_travel(timeline, text, BASE + timedelta(seconds=5))
    assert text.value == "a"
    assert timeline.current == 1

    time_travel(timeline, text, BASE + timedelta(minutes=1))
    assert text.value == "abc"

    assert time_travel(timeline, text, BASE + timedelta(minutes=2)) is None


def test_timestamps_never_go_backwards() -> None:
    timeline, _ = make_timeline("ab", 10, 5)

    first, second = timeline.entries

    assert second.timestamp == first.timestamp


def test_undo_and_redo_text() -> None:
    timeline, text = make_timeline("ab", 0, 10)

    assert undo_text(timeline) == "add 'b'"
    assert redo_text(timeline) is None

    timeline.undo(text)

    assert undo_text(timeline) == "add 'a'"
    assert redo_text(timeline) == "add 'b'"


def test_text_of_empty_timeline() -> None:
    timeline: Timeline[Text, None] = Timeline()

    assert undo_text(timeline) is None
    assert redo_text(timeline) is None
    assert render(timeline) == "* 0: <origin> (saved)"


def test_render_marks_cursor_and_saved_position() -> None:
    timeline, text = make_timeline("ab", 0, 10)
    timeline.undo(text)

    assert render(timeline).splitlines() == [
        "  2: 2024-01-01T12:00:10+00:00 add 'b'",
        "* 1: 2024-01-01T12:00:00+00:00 add 'a'",
        "  0: <origin> (saved)",
    ]
