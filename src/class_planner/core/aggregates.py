"""
Pure aggregate computation over class items.

Section markers never count toward any aggregate.
"""

from dataclasses import dataclass
from typing import Sequence

from .grouping import SectionGroup, group_items
from .models import ExerciseEntry, SectionMarker, SequenceItem


@dataclass(frozen=True)
class ClassAggregate:
    """Summary of a list of class items."""

    real_exercise_count: int = 0
    total_duration_minutes: int = 0
    muscle_group_coverage: frozenset[str] = frozenset()
    section_count: int = 0


def aggregate_items(items: Sequence[SequenceItem]) -> ClassAggregate:
    """
    Compute exercise count, total duration and muscle-group coverage.

    An empty or markers-only list yields zeros and an empty coverage set.

    Args:
        items: Class items in any order

    Returns:
        ClassAggregate
    """
    entries = [item for item in items if isinstance(item, ExerciseEntry)]
    coverage: set[str] = set()
    for e in entries:
        coverage.update(e.muscle_groups)

    return ClassAggregate(
        real_exercise_count=len(entries),
        total_duration_minutes=sum(e.duration_minutes for e in entries),
        muscle_group_coverage=frozenset(coverage),
        section_count=sum(1 for item in items if isinstance(item, SectionMarker)),
    )


def remaining_minutes(items: Sequence[SequenceItem], target_duration_minutes: int) -> int:
    """Minutes left before the target duration (negative when the class overruns)."""
    return target_duration_minutes - aggregate_items(items).total_duration_minutes


def summarize_groups(items: Sequence[SequenceItem]) -> list[tuple[SectionGroup, ClassAggregate]]:
    """Pair every section group with the aggregate of its own exercises."""
    return [(group, aggregate_items(group.entries)) for group in group_items(items)]
