"""
Section grouping.

Partitions a flat list of class items into groups keyed by the section
marker that precedes them. Group membership is never stored; it is
derived here from item order on every call.
"""

from dataclasses import dataclass
from typing import Sequence

from .config import LEADING_GROUP_LABEL
from .models import ExerciseEntry, SectionMarker, SequenceItem


@dataclass(frozen=True)
class SectionGroup:
    """
    A section marker and the exercises that follow it.

    ``marker`` is None for the leading exercises that come before the first
    marker. ``start_index`` is the position in the item list of the marker,
    or of the first exercise for the leading group.
    """

    marker: SectionMarker | None
    entries: tuple[ExerciseEntry, ...]
    start_index: int

    @property
    def label(self) -> str:
        return self.marker.label if self.marker is not None else LEADING_GROUP_LABEL

    @property
    def exercise_count(self) -> int:
        return len(self.entries)

    @property
    def duration_minutes(self) -> int:
        return sum(e.duration_minutes for e in self.entries)

    @property
    def end_index(self) -> int:
        """Position just past the last item of this group (insertion point for 'add to section')."""
        offset = 1 if self.marker is not None else 0
        return self.start_index + offset + len(self.entries)


def group_items(items: Sequence[SequenceItem]) -> list[SectionGroup]:
    """
    Group class items by section marker in a single left-to-right pass.

    Rules:
    - Exercises before the first marker form a leading group with marker=None
      (only when there is at least one such exercise).
    - Every marker opens a group, even when no exercise follows it, so
      adjacent markers each produce their own empty group.
    - Groups keep the relative order of their markers.

    Args:
        items: Class items in playback order (not modified)

    Returns:
        Ordered list of SectionGroup
    """
    groups: list[SectionGroup] = []
    marker: SectionMarker | None = None
    pending: list[ExerciseEntry] = []
    start: int | None = None  # start index of the open group, None when nothing is open

    def flush() -> None:
        if start is not None:
            groups.append(SectionGroup(marker=marker, entries=tuple(pending), start_index=start))

    for index, item in enumerate(items):
        if isinstance(item, SectionMarker):
            flush()
            marker, pending, start = item, [], index
        elif isinstance(item, ExerciseEntry):
            if start is None:
                start = index
            pending.append(item)
        else:
            raise TypeError(f"Not a sequence item: {item!r}")

    flush()
    return groups


def group_for_item(items: Sequence[SequenceItem], item_id: str) -> SectionGroup | None:
    """Return the group containing the item with the given id (marker or exercise), or None."""
    for group in group_items(items):
        if group.marker is not None and group.marker.id == item_id:
            return group
        if any(e.id == item_id for e in group.entries):
            return group
    return None
