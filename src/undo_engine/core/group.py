"""Keyed collection of timelines with a single active selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from undo_engine.runtime.telemetry import span

from .action import Action
from .timeline import Timeline


@dataclass(frozen=True, slots=True)
class StackId:
    """Opaque token handed out by ``Group.add_stack``."""

    _value: int = field(repr=False)

    def __repr__(self) -> str:
        return f"StackId(#{self._value})"


class UnknownStackError(KeyError):
    """Raised when a ``StackId`` does not name a timeline in the group."""

    def __init__(self, stack_id: StackId) -> None:
        super().__init__(f"{stack_id!r} is not in this group")
        self.stack_id = stack_id


class Group:
    """Holds many timelines, delegating history calls to the active one.

    Useful when several targets each keep their own history but only one is
    edited at a time, like a text editor with multiple documents open.
    Without an active timeline every delegated call is a no-op.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._stacks: Dict[StackId, Timeline[Any, Any]] = {}
        self._active: Optional[StackId] = None
        self._next_id = 0
        self._logger_name = logger_name or "undo_engine.group"

    def __len__(self) -> int:
        return len(self._stacks)

    def __contains__(self, stack_id: object) -> bool:
        return stack_id in self._stacks

    @property
    def active_id(self) -> Optional[StackId]:
        return self._active

    @property
    def active_stack(self) -> Optional[Timeline[Any, Any]]:
        if self._active is None:
            return None
        return self._stacks.get(self._active)

    def get_stack(self, stack_id: StackId) -> Timeline[Any, Any]:
        try:
            return self._stacks[stack_id]
        except KeyError as exc:
            raise UnknownStackError(stack_id) from exc

    def add_stack(self, timeline: Timeline[Any, Any]) -> StackId:
        stack_id = StackId(self._next_id)
        self._next_id += 1
        self._stacks[stack_id] = timeline
        return stack_id

    def remove_stack(self, stack_id: StackId) -> Timeline[Any, Any]:
        with span(
            "group::remove_stack",
            logger_name=self._logger_name,
            component="group",
            metadata={"stack": stack_id},
        ):
            timeline = self._stacks.pop(stack_id, None)
            if timeline is None:
                raise UnknownStackError(stack_id)
            if self._active == stack_id:
                self._active = None
            return timeline

    def set_active_stack(self, stack_id: StackId) -> None:
        """Select ``stack_id`` as the target of delegated calls.

        Unknown or removed ids raise ``UnknownStackError`` and leave the
        current selection as it was.
        """

        if stack_id not in self._stacks:
            raise UnknownStackError(stack_id)
        self._active = stack_id

    def clear_active_stack(self) -> None:
        self._active = None

    def is_clean(self) -> Optional[bool]:
        """``is_saved`` of the active timeline, or ``None`` without one."""

        timeline = self.active_stack
        return None if timeline is None else timeline.is_saved()

    def is_dirty(self) -> Optional[bool]:
        clean = self.is_clean()
        return None if clean is None else not clean

    def push(self, target: Any, action: Action[Any, Any]) -> Any:
        timeline = self.active_stack
        if timeline is None:
            return None
        return timeline.apply(target, action)

    def undo(self, target: Any) -> Any:
        timeline = self.active_stack
        if timeline is None:
            return None
        return timeline.undo(target)

    def redo(self, target: Any) -> Any:
        timeline = self.active_stack
        if timeline is None:
            return None
        return timeline.redo(target)

    def go_to(self, target: Any, index: int) -> Any:
        timeline = self.active_stack
        if timeline is None:
            return None
        return timeline.go_to(target, index)

    def revert(self, target: Any) -> Any:
        timeline = self.active_stack
        if timeline is None:
            return None
        return timeline.revert(target)

    def set_saved(self, saved: bool) -> None:
        timeline = self.active_stack
        if timeline is not None:
            timeline.set_saved(saved)


__all__ = ["Group", "StackId", "UnknownStackError"]
