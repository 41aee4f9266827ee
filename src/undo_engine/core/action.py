"""Reversible action contract implemented by integrators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class Action(ABC, Generic[T, R]):
    """A reversible mutation of a caller-owned target.

    ``apply`` and ``undo`` receive the target on every call and mutate it in
    place. Either may raise; a raising call must leave the target untouched,
    since timelines never roll back partial mutation.
    """

    @abstractmethod
    def apply(self, target: T) -> R:
        """Run the forward effect on ``target``."""

    @abstractmethod
    def undo(self, target: T) -> R:
        """Reverse the forward effect on ``target``."""

    def merge(self, other: "Action[T, R]") -> bool:
        """Absorb ``other`` into this action.

        Return ``True`` when ``other`` has been folded in and should not be
        recorded on its own. Only ever called with the action that directly
        follows this one.
        """

        del other
        return False

    def __str__(self) -> str:
        return type(self).__name__


__all__ = ["Action"]
