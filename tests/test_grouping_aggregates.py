"""
Unit tests for section grouping and class aggregates.

Groups are derived purely from item order; markers never count toward
duration, exercise count or muscle coverage.
"""

import pytest

from class_planner.core.aggregates import (
    ClassAggregate,
    aggregate_items,
    remaining_minutes,
    summarize_groups,
)
from class_planner.core.config import LEADING_GROUP_LABEL
from class_planner.core.grouping import group_for_item, group_items
from class_planner.core.models import ExerciseEntry, SectionMarker, make_marker

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _entry(
    entry_id: str,
    minutes: int = 3,
    muscles: tuple[str, ...] = ("core",),
    category: str = "supine",
) -> ExerciseEntry:
    return ExerciseEntry(
        id=entry_id,
        catalog_id=entry_id.split("-")[0],
        name=f"Exercise {entry_id}",
        category=category,
        duration_minutes=minutes,
        springs="light",
        difficulty="beginner",
        muscle_groups=muscles,
    )


def _marker(marker_id: str, label: str = "") -> SectionMarker:
    return make_marker(label or marker_id.title(), marker_id=marker_id)


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------

class TestGroupItems:

    def test_empty_list_has_no_groups(self):
        """An empty class has no groups."""
        assert group_items([]) == []

    def test_no_markers_is_one_leading_group(self):
        """Without markers everything is one unlabelled group."""
        a, b = _entry("a"), _entry("b")
        groups = group_items([a, b])
        assert len(groups) == 1
        assert groups[0].marker is None
        assert groups[0].entries == (a, b)

    def test_exercises_before_first_marker_form_leading_group(self):
        """Exercises before the first marker get a group with no marker."""
        a, b = _entry("a"), _entry("b")
        warm = _marker("warm")
        c = _entry("c")

        groups = group_items([a, b, warm, c])

        assert len(groups) == 2
        assert groups[0].marker is None
        assert groups[0].label == LEADING_GROUP_LABEL
        assert groups[0].entries == (a, b)
        assert groups[1].marker == warm
        assert groups[1].entries == (c,)

    def test_no_leading_group_when_list_starts_with_marker(self):
        """No unlabelled group when the class opens with a marker."""
        groups = group_items([_marker("warm"), _entry("a")])
        assert len(groups) == 1
        assert groups[0].marker is not None

    def test_adjacent_markers_each_get_their_own_empty_group(self):
        """Back-to-back markers each open a group."""
        first, second = _marker("first"), _marker("second")
        a = _entry("a")

        groups = group_items([first, second, a])

        assert [g.marker for g in groups] == [first, second]
        assert groups[0].entries == ()
        assert groups[1].entries == (a,)

    def test_trailing_marker_yields_empty_group(self):
        """A marker at the end gives an empty group."""
        groups = group_items([_entry("a"), _marker("end")])
        assert groups[-1].label == "End"
        assert groups[-1].exercise_count == 0
        assert groups[-1].duration_minutes == 0

    def test_markers_only(self):
        """A class of markers only gives one empty group per marker."""
        groups = group_items([_marker("x"), _marker("y")])
        assert len(groups) == 2
        assert all(g.entries == () for g in groups)

    def test_group_order_follows_marker_order(self):
        """Groups come out in marker order."""
        items = [_marker("m1"), _entry("a"), _marker("m2"), _entry("b"), _marker("m3")]
        assert [g.marker.id for g in group_items(items)] == ["m1", "m2", "m3"]

    def test_group_duration_and_indexes(self):
        """Groups carry their duration and item positions."""
        a, b = _entry("a", minutes=2), _entry("b", minutes=5)
        items = [_entry("lead", minutes=1), _marker("core"), a, b]

        groups = group_items(items)

        assert groups[0].start_index == 0
        assert groups[0].end_index == 1
        assert groups[1].start_index == 1
        assert groups[1].end_index == 4
        assert groups[1].duration_minutes == 7
        assert groups[1].exercise_count == 2

    def test_input_is_not_modified(self):
        """Grouping leaves the item list alone."""
        items = [_entry("a"), _marker("m"), _entry("b")]
        snapshot = list(items)
        group_items(items)
        assert items == snapshot

    def test_rejects_non_items(self):
        """Anything other than entries and markers is a TypeError."""
        with pytest.raises(TypeError):
            group_items([_entry("a"), "not an item"])


class TestGroupForItem:

    def test_finds_group_of_entry_and_marker(self):
        """Entries and markers both resolve to their group."""
        m = _marker("core")
        items = [_entry("a"), m, _entry("b")]

        assert group_for_item(items, "a").marker is None
        assert group_for_item(items, "b").marker == m
        assert group_for_item(items, "core").marker == m

    def test_unknown_id(self):
        """Unknown ids have no group."""
        assert group_for_item([_entry("a")], "zzz") is None


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------

class TestAggregates:

    def test_empty_list_is_all_zero(self):
        """An empty class aggregates to zeros."""
        assert aggregate_items([]) == ClassAggregate()

    def test_markers_only_is_all_zero_except_section_count(self):
        """Markers count as sections and nothing else."""
        agg = aggregate_items([_marker("x"), _marker("y")])
        assert agg.real_exercise_count == 0
        assert agg.total_duration_minutes == 0
        assert agg.muscle_group_coverage == frozenset()
        assert agg.section_count == 2

    def test_markers_do_not_contribute(self):
        """Markers add no time or muscle groups."""
        items = [
            _entry("a", minutes=3, muscles=("core", "arms")),
            _marker("m"),
            _entry("b", minutes=4, muscles=("legs", "core")),
        ]

        agg = aggregate_items(items)

        assert agg.real_exercise_count == 2
        assert agg.total_duration_minutes == 7
        assert agg.muscle_group_coverage == frozenset({"core", "arms", "legs"})

    def test_zero_duration_entry_still_counts_as_exercise(self):
        """A 0-minute entry is still an exercise."""
        agg = aggregate_items([_entry("a", minutes=0)])
        assert agg.real_exercise_count == 1
        assert agg.total_duration_minutes == 0

    def test_remaining_minutes_can_go_negative(self):
        """Going over the target gives negative remaining time."""
        items = [_entry("a", minutes=30), _entry("b", minutes=20)]
        assert remaining_minutes(items, 45) == -5
        assert remaining_minutes([], 45) == 45

    def test_summarize_groups_pairs_each_group_with_its_totals(self):
        """Each group is summarized on its own."""
        items = [
            _marker("warm"),
            _entry("a", minutes=2),
            _marker("core"),
            _entry("b", minutes=3),
            _entry("c", minutes=4),
        ]

        summary = summarize_groups(items)

        assert [(g.label, agg.total_duration_minutes) for g, agg in summary] == [
            ("Warm", 2),
            ("Core", 7),
        ]
        assert summary[1][1].real_exercise_count == 2
