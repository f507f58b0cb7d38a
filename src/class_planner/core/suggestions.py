"""
Next-exercise suggestions.

Scores catalog exercises against the class built so far and returns a
short ranked list of good next additions.

Rules, in order:
1. Exclusion: candidates whose name already appears in the class are
   dropped (by name, not id); with pregnancy_safe_only, unsafe candidates
   are dropped too.
2. Cold start: with no exercises yet, return the first warm-up candidates
   in catalog order.
3. Scoring against the last exercise and the muscle groups already used:
   novelty per unused group, position transition, spring continuity,
   bounded difficulty step, intensity change, and time awareness (cool-down
   near the end of class, anything else while plenty of time remains).
4. Stable descending sort by score (ties keep catalog order).
5. Truncate to the suggestion limit.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from .aggregates import aggregate_items
from .config import (
    COLD_START_LIMIT,
    DIFFICULTY_RANK,
    DIFFICULTY_STEP_BONUS,
    EARLY_CLASS_BONUS,
    EARLY_CLASS_MINUTES,
    END_OF_CLASS_COOL_DOWN_BONUS,
    END_OF_CLASS_MINUTES,
    INTENSITY_CHANGE_BONUS,
    INTENSITY_RANK,
    NOVELTY_PER_GROUP,
    SPRING_CONTINUITY_BONUS,
    SUGGESTION_LIMIT,
    TRANSITION_BONUS,
    TRANSITIONS,
)
from .models import CatalogExercise, ExerciseEntry, Preferences, SequenceItem, normalize_springs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringWeights:
    """Tunable weights, thresholds and limits for suggestion scoring."""

    novelty_per_group: int = NOVELTY_PER_GROUP
    transition: int = TRANSITION_BONUS
    spring_continuity: int = SPRING_CONTINUITY_BONUS
    difficulty_step: int = DIFFICULTY_STEP_BONUS
    intensity_change: int = INTENSITY_CHANGE_BONUS
    end_of_class_cool_down: int = END_OF_CLASS_COOL_DOWN_BONUS
    early_class: int = EARLY_CLASS_BONUS
    end_of_class_minutes: int = END_OF_CLASS_MINUTES
    early_class_minutes: int = EARLY_CLASS_MINUTES
    suggestion_limit: int = SUGGESTION_LIMIT
    cold_start_limit: int = COLD_START_LIMIT
    transitions: dict[str, frozenset[str]] = field(
        default_factory=lambda: dict(TRANSITIONS), hash=False
    )

    def __post_init__(self):
        for name in (
            "novelty_per_group",
            "transition",
            "spring_continuity",
            "difficulty_step",
            "intensity_change",
            "end_of_class_cool_down",
            "early_class",
            "end_of_class_minutes",
            "early_class_minutes",
            "suggestion_limit",
            "cold_start_limit",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

        # One transition must never beat two muscle groups of novelty.
        if self.transition >= 2 * self.novelty_per_group:
            raise ValueError(
                f"transition ({self.transition}) must be less than twice "
                f"novelty_per_group ({2 * self.novelty_per_group})"
            )

        # A cool-down near the end must outrank two new groups plus every other bonus.
        best_other = (
            2 * self.novelty_per_group
            + self.transition
            + self.spring_continuity
            + self.difficulty_step
            + self.intensity_change
        )
        if self.end_of_class_cool_down <= best_other:
            raise ValueError(
                f"end_of_class_cool_down ({self.end_of_class_cool_down}) must exceed "
                f"the other bonuses combined ({best_other})"
            )

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> "ScoringWeights":
        """
        Build weights from a merged scoring config dict.

        Reads the ``weights``, ``thresholds``, ``limits`` and ``transitions``
        sections; any missing key keeps its default from config.py.
        """
        defaults = cls()
        weights = cfg.get("weights", {}) or {}
        thresholds = cfg.get("thresholds", {}) or {}
        limits = cfg.get("limits", {}) or {}

        transitions = dict(defaults.transitions)
        for category, targets in (cfg.get("transitions", {}) or {}).items():
            transitions[category] = frozenset(targets or ())

        return cls(
            novelty_per_group=int(weights.get("novelty_per_group", defaults.novelty_per_group)),
            transition=int(weights.get("transition", defaults.transition)),
            spring_continuity=int(weights.get("spring_continuity", defaults.spring_continuity)),
            difficulty_step=int(weights.get("difficulty_step", defaults.difficulty_step)),
            intensity_change=int(weights.get("intensity_change", defaults.intensity_change)),
            end_of_class_cool_down=int(
                weights.get("end_of_class_cool_down", defaults.end_of_class_cool_down)
            ),
            early_class=int(weights.get("early_class", defaults.early_class)),
            end_of_class_minutes=int(
                thresholds.get("end_of_class_minutes", defaults.end_of_class_minutes)
            ),
            early_class_minutes=int(
                thresholds.get("early_class_minutes", defaults.early_class_minutes)
            ),
            suggestion_limit=int(limits.get("suggestions", defaults.suggestion_limit)),
            cold_start_limit=int(limits.get("cold_start", defaults.cold_start_limit)),
            transitions=transitions,
        )


@dataclass(frozen=True)
class Suggestion:
    """A ranked candidate with the reasons behind its score."""

    exercise: CatalogExercise
    score: int
    reasons: tuple[str, ...] = ()


def score_candidate(
    candidate: CatalogExercise,
    last: ExerciseEntry,
    used_groups: frozenset[str] | set[str],
    remaining: int,
    weights: ScoringWeights,
) -> tuple[int, list[str]]:
    """
    Score one candidate against the last exercise of the class.

    Args:
        candidate: Catalog exercise being considered
        last: Last exercise entry in the class
        used_groups: Muscle groups already covered by the class
        remaining: Minutes left before the target duration
        weights: Scoring weights

    Returns:
        (score, reasons) where reasons describe each bonus applied
    """
    score = 0
    reasons: list[str] = []

    unused = [g for g in candidate.muscle_groups if g not in used_groups]
    if unused:
        score += weights.novelty_per_group * len(unused)
        reasons.append(f"new muscle groups: {', '.join(unused)}")

    if candidate.category in weights.transitions.get(last.category, frozenset()):
        score += weights.transition
        reasons.append(f"flows from {last.category} to {candidate.category}")

    if normalize_springs(candidate.springs) == normalize_springs(last.springs):
        score += weights.spring_continuity
        reasons.append("same springs")

    if abs(DIFFICULTY_RANK[candidate.difficulty] - DIFFICULTY_RANK[last.difficulty]) <= 1:
        score += weights.difficulty_step
        reasons.append("steady difficulty")

    if INTENSITY_RANK[candidate.intensity_level] != INTENSITY_RANK[last.intensity_level]:
        score += weights.intensity_change
        reasons.append("varies intensity")

    if remaining <= weights.end_of_class_minutes and candidate.category == "cool-down":
        score += weights.end_of_class_cool_down
        reasons.append(f"{remaining} min left: time to cool down")
    if remaining > weights.early_class_minutes and candidate.category != "cool-down":
        score += weights.early_class
        reasons.append("plenty of class time left")

    return score, reasons


def _eligible(
    entries: list[ExerciseEntry],
    catalog: Sequence[CatalogExercise],
    preferences: Preferences,
) -> list[CatalogExercise]:
    used_names = {e.name for e in entries}
    return [
        c for c in catalog
        if c.name not in used_names
        and (c.pregnancy_safe or not preferences.pregnancy_safe_only)
    ]


def rank_candidates(
    items: Sequence[SequenceItem],
    catalog: Sequence[CatalogExercise],
    target_duration: int,
    preferences: Preferences | None = None,
    weights: ScoringWeights | None = None,
    limit: int | None = None,
) -> list[Suggestion]:
    """
    Rank catalog exercises as next additions to the class.

    Args:
        items: Current class items (markers are ignored)
        catalog: Candidate exercises, in catalog order
        target_duration: Target class length in minutes
        preferences: User preferences (pregnancy-safe filter)
        weights: Scoring weights (defaults from config.py)
        limit: Maximum number of suggestions (defaults to the weights' limit)

    Returns:
        Ranked suggestions; empty when nothing qualifies
    """
    preferences = preferences or Preferences()
    weights = weights or ScoringWeights()

    entries = [item for item in items if isinstance(item, ExerciseEntry)]
    candidates = _eligible(entries, catalog, preferences)

    if not entries:
        cap = weights.cold_start_limit if limit is None else min(limit, weights.cold_start_limit)
        warm_ups = [c for c in candidates if c.category == "warm-up"][:cap]
        logger.debug("cold start: %d warm-up suggestions", len(warm_ups))
        return [Suggestion(c, 0, ("good opening exercise",)) for c in warm_ups]

    aggregate = aggregate_items(entries)
    remaining = target_duration - aggregate.total_duration_minutes
    last = entries[-1]

    scored: list[Suggestion] = []
    for c in candidates:
        score, reasons = score_candidate(
            c, last, aggregate.muscle_group_coverage, remaining, weights
        )
        scored.append(Suggestion(c, score, tuple(reasons)))

    # sorted() is stable: equal scores keep catalog order
    scored = sorted(scored, key=lambda s: s.score, reverse=True)
    cap = weights.suggestion_limit if limit is None else limit
    logger.debug(
        "scored %d candidates after %r (%d min left)", len(scored), last.name, remaining
    )
    return scored[:cap]


def suggest_next(
    items: Sequence[SequenceItem],
    catalog: Sequence[CatalogExercise],
    target_duration: int,
    preferences: Preferences | None = None,
    weights: ScoringWeights | None = None,
    limit: int | None = None,
) -> list[CatalogExercise]:
    """Return up to a handful of catalog exercises to add next (see rank_candidates)."""
    return [
        s.exercise
        for s in rank_candidates(items, catalog, target_duration, preferences, weights, limit)
    ]
