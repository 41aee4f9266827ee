from __future__ import annotations

from typing import List, Optional

import pytest

from undo_engine import (
    Action,
    Group,
    StackId,
    Timeline,
    TimelineConfig,
    UnknownStackError,
)


class Pop(Action[List[int], Optional[int]]):
    """Pops the last element of a list; undo pushes it back."""

    def __init__(self) -> None:
        self.popped: Optional[int] = None

    def apply(self, target: List[int]) -> Optional[int]:
        if not target:
            raise IndexError("pop from empty list")
        self.popped = target.pop()
        return self.popped

    def undo(self, target: List[int]) -> Optional[int]:
        assert self.popped is not None
        target.append(self.popped)
        return self.popped


def make_group() -> tuple[Group, StackId, StackId]:
    group = Group()
    a = group.add_stack(Timeline())
    b = group.add_stack(Timeline())
    return group, a, b


def test_push_goes_to_active_stack_only() -> None:
    group, a, b = make_group()
    vec_a = [1, 2, 3]
    vec_b = [1, 2, 3]

    group.set_active_stack(a)
    assert group.push(vec_a, Pop()) == 3
    assert vec_a == [1, 2]

    group.set_active_stack(b)
    group.push(vec_b, Pop())
    assert vec_b == [1, 2]
    assert len(group.get_stack(a)) == 1
    assert len(group.get_stack(b)) == 1

    group.set_active_stack(a)
    group.undo(vec_a)
    assert vec_a == [1, 2, 3]
    assert vec_b == [1, 2]
    assert group.get_stack(b).current == 1

    group.set_active_stack(b)
    group.undo(vec_b)
    assert vec_b == [1, 2, 3]


def test_remove_active_stack_disables_delegation() -> None:
    group, a, b = make_group()
    vec = [1, 2, 3]
    group.set_active_stack(b)
    group.push(vec, Pop())
    group.undo(vec)

    removed = group.remove_stack(b)

    assert removed.can_redo()
    assert group.active_id is None
    assert len(group) == 1
    assert group.redo(vec) is None
    assert group.push(vec, Pop()) is None
    assert group.undo(vec) is None
    assert vec == [1, 2, 3]

    group.set_active_stack(a)
    group.push(vec, Pop())
    assert vec == [1, 2]


def test_removing_inactive_stack_keeps_selection() -> None:
    group, a, b = make_group()
    group.set_active_stack(a)

    group.remove_stack(b)

    assert group.active_id == a
    assert b not in group


def test_stack_ids_are_never_reused() -> None:
    group = Group()
    first = group.add_stack(Timeline())
    group.remove_stack(first)

    second = group.add_stack(Timeline())

    assert second != first
    with pytest.raises(UnknownStackError):
        group.set_active_stack(first)
    with pytest.raises(UnknownStackError):
        group.remove_stack(first)


def test_set_active_unknown_keeps_previous_selection() -> None:
    group, a, b = make_group()
    group.set_active_stack(a)
    group.remove_stack(b)

    with pytest.raises(UnknownStackError) as excinfo:
        group.set_active_stack(b)

    assert excinfo.value.stack_id == b
    assert group.active_id == a


def test_clean_state_follows_active_stack() -> None:
    group = Group()
    a = group.add_stack(Timeline())
    b = group.add_stack(Timeline(TimelineConfig(saved=False)))
    vec = [1, 2]

    assert group.is_clean() is None
    assert group.is_dirty() is None

    group.set_active_stack(a)
    assert group.is_clean() is True
    group.push(vec, Pop())
    assert group.is_dirty() is True
    group.set_saved(True)
    assert group.is_clean() is True

    group.set_active_stack(b)
    assert group.is_clean() is False

    group.clear_active_stack()
    assert group.is_clean() is None
    assert len(group) == 2


def test_delegated_go_to_and_revert() -> None:
    group, a, _ = make_group()
    vec = [1, 2, 3, 4]
    group.set_active_stack(a)
    for _ in range(3):
        group.push(vec, Pop())

    group.go_to(vec, 1)
    assert vec == [1, 2, 3]

    group.revert(vec)
    assert vec == [1, 2, 3, 4]
    assert group.is_clean() is True


def test_action_errors_propagate_through_group() -> None:
    group, a, _ = make_group()
    group.set_active_stack(a)
    vec: List[int] = []

    with pytest.raises(IndexError):
        group.push(vec, Pop())

    assert group.active_stack is not None
    assert group.active_stack.is_empty()
