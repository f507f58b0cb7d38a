"""
Reorder engine: insert, remove, move and update class items.

Every operation returns a new tuple and leaves its input untouched, so
callers may keep earlier snapshots (for undo) without copying. Operations
that reference an id or index that is not there return an EditResult with
found=False and the input unchanged; a miss is a normal UI race (a double
click during an animation), not an error.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from .models import (
    CalloutColor,
    ExerciseEntry,
    InvariantViolation,
    SectionMarker,
    SequenceItem,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditResult:
    """Outcome of an edit that may reference a missing item."""

    items: tuple[SequenceItem, ...]
    found: bool = True


def ensure_invariants(items: Sequence[SequenceItem]) -> None:
    """
    Check structural invariants of a class item list.

    Raises:
        InvariantViolation: If two items share an id, or an item is neither
            an exercise entry nor a section marker
    """
    seen: set[str] = set()
    for item in items:
        if not isinstance(item, (ExerciseEntry, SectionMarker)):
            raise InvariantViolation(f"Not a sequence item: {item!r}")
        if item.id in seen:
            raise InvariantViolation(f"Duplicate item id: {item.id!r}")
        seen.add(item.id)


def index_of(items: Sequence[SequenceItem], item_id: str) -> int | None:
    """Return the position of the first item with the given id, or None."""
    for i, item in enumerate(items):
        if item.id == item_id:
            return i
    return None


def _miss(items: Sequence[SequenceItem], op: str, ref: object) -> EditResult:
    logger.debug("%s: no item at %r; list left unchanged", op, ref)
    return EditResult(tuple(items), found=False)


def insert(
    items: Sequence[SequenceItem],
    item: SequenceItem,
    at_index: int | None = None,
) -> tuple[SequenceItem, ...]:
    """
    Insert an item (exercise or section marker).

    Args:
        items: Current items
        item: Item to insert
        at_index: Target position, clamped to [0, len(items)]; None appends

    Returns:
        New item tuple
    """
    result = list(items)
    if at_index is None:
        at_index = len(result)
    at_index = max(0, min(at_index, len(result)))
    result.insert(at_index, item)
    if __debug__:
        ensure_invariants(result)
    return tuple(result)


def remove(items: Sequence[SequenceItem], item_id: str) -> EditResult:
    """Remove the first item with the given id."""
    index = index_of(items, item_id)
    if index is None:
        return _miss(items, "remove", item_id)
    return EditResult(tuple(items[:index]) + tuple(items[index + 1:]))


def move(items: Sequence[SequenceItem], from_index: int, to_index: int) -> EditResult:
    """
    Move the item at from_index so that it ends up at to_index.

    Splice semantics: the item is removed first, then re-inserted at
    to_index counted against the shortened list. Both indices must be
    valid positions in the list.
    """
    size = len(items)
    if not 0 <= from_index < size:
        return _miss(items, "move", from_index)
    if not 0 <= to_index < size:
        return _miss(items, "move", to_index)
    if from_index == to_index:
        return EditResult(tuple(items))

    result = list(items)
    item = result.pop(from_index)
    result.insert(to_index, item)
    return EditResult(tuple(result))


def move_item(items: Sequence[SequenceItem], item_id: str, to_index: int) -> EditResult:
    """Move the item with the given id to to_index (see move)."""
    index = index_of(items, item_id)
    if index is None:
        return _miss(items, "move_item", item_id)
    return move(items, index, to_index)


def shift(items: Sequence[SequenceItem], item_id: str, offset: int) -> EditResult:
    """Nudge an item up (negative offset) or down, stopping at either end."""
    index = index_of(items, item_id)
    if index is None:
        return _miss(items, "shift", item_id)
    target = max(0, min(index + offset, len(items) - 1))
    return move(items, index, target)


def replace(items: Sequence[SequenceItem], item: SequenceItem) -> EditResult:
    """Replace the item that has the same id, keeping its position."""
    index = index_of(items, item.id)
    if index is None:
        return _miss(items, "replace", item.id)
    result = list(items)
    result[index] = item
    if __debug__:
        ensure_invariants(result)
    return EditResult(tuple(result))


def update_entry(items: Sequence[SequenceItem], entry_id: str, **changes) -> EditResult:
    """
    Edit fields of an exercise entry in place.

    Returns found=False when the id is absent or belongs to a section marker.

    Raises:
        ValueError: If the changes would alter the id or produce an invalid entry
    """
    index = index_of(items, entry_id)
    if index is None or not isinstance(items[index], ExerciseEntry):
        return _miss(items, "update_entry", entry_id)
    return replace(items, items[index].with_changes(**changes))


def rename_marker(
    items: Sequence[SequenceItem],
    marker_id: str,
    label: str,
    color: CalloutColor | None = None,
) -> EditResult:
    """
    Rename (and optionally recolour) a section marker in place.

    Returns found=False when the id is absent or belongs to an exercise.
    """
    index = index_of(items, marker_id)
    if index is None or not isinstance(items[index], SectionMarker):
        return _miss(items, "rename_marker", marker_id)
    return replace(items, items[index].renamed(label, color))
