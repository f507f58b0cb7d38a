"""
Undo/redo over immutable class snapshots.

Because every edit produces a new value, the history only keeps
references; nothing is copied.
"""

from typing import Generic, TypeVar

from .config import UNDO_DEPTH

T = TypeVar("T")


class EditHistory(Generic[T]):
    """
    Past/present/future stacks of snapshots.

    ``push`` records a new present and forgets any redo states; ``undo``
    and ``redo`` step through the stacks and report whether they moved.
    """

    def __init__(
        self,
        present: T,
        past: list[T] | None = None,
        future: list[T] | None = None,
        max_depth: int = UNDO_DEPTH,
    ):
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.present = present
        self.past: list[T] = list(past or [])[-max_depth:]
        self.future: list[T] = list(future or [])
        self.max_depth = max_depth

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)

    def push(self, new_present: T) -> None:
        """Make new_present current; the old present becomes undoable."""
        if new_present == self.present:
            return
        self.past.append(self.present)
        if len(self.past) > self.max_depth:
            del self.past[0]
        self.present = new_present
        self.future.clear()

    def undo(self) -> bool:
        """Step back one snapshot. Returns False when there is nothing to undo."""
        if not self.past:
            return False
        self.future.insert(0, self.present)
        self.present = self.past.pop()
        return True

    def redo(self) -> bool:
        """Step forward one snapshot. Returns False when there is nothing to redo."""
        if not self.future:
            return False
        self.past.append(self.present)
        self.present = self.future.pop(0)
        return True

    def reset(self, present: T) -> None:
        """Start over from a new present with empty stacks."""
        self.present = present
        self.past.clear()
        self.future.clear()
