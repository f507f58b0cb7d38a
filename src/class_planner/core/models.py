"""
Data models for the class planner.

A class plan is an ordered list of SequenceItem values: either an
ExerciseEntry (an exercise copied from the catalog into the class) or a
SectionMarker (a zero-duration divider such as "Warm-up" or "Core Block").
The two variants are told apart by type, never by inspecting a category
string. All models are frozen; edits produce new values.
"""

import re
import uuid
from dataclasses import dataclass, field, replace
from typing import ClassVar, Literal, Union

from .config import (
    CALLOUT_COLORS,
    CATEGORIES,
    DEFAULT_CALLOUT_COLOR,
    DEFAULT_CLASS_NAME,
    DEFAULT_SECTION_LABEL,
    DEFAULT_TARGET_DURATION_MINUTES,
    DIFFICULTY_RANK,
    INTENSITY_RANK,
    MUSCLE_GROUPS,
)

Category = Literal[
    "warm-up", "supine", "prone", "sitting", "side-lying",
    "kneeling", "standing", "cool-down", "other",
]
Difficulty = Literal["beginner", "intermediate", "advanced"]
IntensityLevel = Literal["low", "medium", "high"]
CalloutColor = Literal["amber", "blue", "green", "purple", "red"]
# Springs may be a named setting ("light"), a count ("3") or a compound ("2 red + 1 blue").
Springs = str


class InvariantViolation(AssertionError):
    """Raised when a sequence breaks a structural invariant (programmer error)."""

    pass


def normalize_springs(springs: object) -> str:
    """Canonical form used to compare spring settings: trimmed, lower-case, single spaces."""
    return re.sub(r"\s+", " ", str(springs).strip().lower())


def _as_tuple(values) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


def _validate_exercise_fields(obj: "CatalogExercise | ExerciseEntry") -> None:
    """Shared validation for catalog exercises and their copies in a class."""
    if not obj.name or not obj.name.strip():
        raise ValueError("name must be a non-empty string")
    if obj.category not in CATEGORIES:
        raise ValueError(f"Invalid category: {obj.category!r}")
    if obj.duration_minutes < 0:
        raise ValueError("duration_minutes must be non-negative")
    if obj.difficulty not in DIFFICULTY_RANK:
        raise ValueError(f"Invalid difficulty: {obj.difficulty!r}")
    if obj.intensity_level not in INTENSITY_RANK:
        raise ValueError(f"Invalid intensity_level: {obj.intensity_level!r}")

    # Tuple-ify list inputs
    for name in ("muscle_groups", "equipment", "cues", "safety_notes"):
        object.__setattr__(obj, name, _as_tuple(getattr(obj, name)))
    object.__setattr__(obj, "springs", str(obj.springs))

    unknown = [g for g in obj.muscle_groups if g not in MUSCLE_GROUPS]
    if unknown:
        raise ValueError(f"Unknown muscle groups: {unknown}")
    # Duplicates collapse, first occurrence wins
    object.__setattr__(obj, "muscle_groups", tuple(dict.fromkeys(obj.muscle_groups)))


@dataclass(frozen=True)
class CatalogExercise:
    """
    An exercise as it appears in the catalog.

    The catalog is read-only: the engine copies catalog exercises into a
    class as ExerciseEntry values and never changes the originals.
    """

    id: str
    name: str
    category: Category
    duration_minutes: int
    springs: Springs
    difficulty: Difficulty
    intensity_level: IntensityLevel = "medium"
    muscle_groups: tuple[str, ...] = ()
    equipment: tuple[str, ...] = ()
    pregnancy_safe: bool = False
    description: str = ""
    cues: tuple[str, ...] = ()
    setup: str = ""
    notes: str = ""
    safety_notes: tuple[str, ...] = ()  # contraindications
    image: str = ""

    def __post_init__(self) -> None:
        """Validate catalog exercise data."""
        if not self.id:
            raise ValueError("id must be a non-empty string")
        _validate_exercise_fields(self)


@dataclass(frozen=True)
class ExerciseEntry:
    """
    One exercise placed in a class.

    ``id`` is unique within the class and differs from ``catalog_id``, so
    the same catalog exercise can appear several times.
    """

    kind: ClassVar[str] = "exercise"

    id: str
    catalog_id: str
    name: str
    category: Category
    duration_minutes: int
    springs: Springs
    difficulty: Difficulty
    intensity_level: IntensityLevel = "medium"
    muscle_groups: tuple[str, ...] = ()
    equipment: tuple[str, ...] = ()
    pregnancy_safe: bool = False
    description: str = ""
    cues: tuple[str, ...] = ()
    setup: str = ""
    notes: str = ""
    safety_notes: tuple[str, ...] = ()
    image: str = ""

    def __post_init__(self) -> None:
        """Validate entry data."""
        if not self.id:
            raise ValueError("id must be a non-empty string")
        _validate_exercise_fields(self)

    def with_changes(self, **changes) -> "ExerciseEntry":
        """Return a copy with some fields replaced; the id is preserved."""
        if "id" in changes and changes["id"] != self.id:
            raise ValueError("An entry's id cannot be changed")
        return replace(self, **changes)


@dataclass(frozen=True)
class SectionMarker:
    """
    A section divider inside a class.

    Markers never contribute duration or muscle groups; the exercises that
    follow a marker (up to the next one) form its group.
    """

    kind: ClassVar[str] = "section"

    id: str
    label: str
    color: CalloutColor = DEFAULT_CALLOUT_COLOR

    def __post_init__(self) -> None:
        """Validate marker data."""
        if not self.id:
            raise ValueError("id must be a non-empty string")
        if self.color not in CALLOUT_COLORS:
            raise ValueError(f"Invalid callout color: {self.color!r}")

    @property
    def duration_minutes(self) -> int:
        return 0

    @property
    def muscle_groups(self) -> tuple[str, ...]:
        return ()

    def renamed(self, label: str, color: CalloutColor | None = None) -> "SectionMarker":
        """Return a copy with a new label (and optionally colour); the id is preserved."""
        return replace(
            self,
            label=label.strip() or DEFAULT_SECTION_LABEL,
            color=color if color is not None else self.color,
        )


SequenceItem = Union[ExerciseEntry, SectionMarker]


@dataclass(frozen=True)
class CustomCallout:
    """A user-defined preset for new section markers."""

    label: str
    color: CalloutColor = DEFAULT_CALLOUT_COLOR

    def __post_init__(self) -> None:
        if not self.label.strip():
            raise ValueError("Callout label must be non-empty")
        if self.color not in CALLOUT_COLORS:
            raise ValueError(f"Invalid callout color: {self.color!r}")


@dataclass(frozen=True)
class Preferences:
    """
    User preferences read by the suggestion engine and the CLI.

    Passed explicitly wherever needed; there is no global preference state.
    """

    pregnancy_safe_only: bool = False
    custom_callouts: tuple[CustomCallout, ...] = ()

    def callout(self, label: str) -> CustomCallout | None:
        """Return the custom callout with the given label (case-insensitive), or None."""
        wanted = label.strip().lower()
        for c in self.custom_callouts:
            if c.label.lower() == wanted:
                return c
        return None


@dataclass(frozen=True)
class ClassSequence:
    """
    A class plan: metadata plus the ordered list of items.

    Item order is the single source of truth for playback order and for
    section membership; no item stores a reference to its marker.
    """

    name: str = DEFAULT_CLASS_NAME
    target_duration_minutes: int = DEFAULT_TARGET_DURATION_MINUTES
    notes: str = ""
    image_ref: str = ""
    items: tuple[SequenceItem, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate class data."""
        if self.target_duration_minutes <= 0:
            raise ValueError("target_duration_minutes must be positive")
        object.__setattr__(self, "items", tuple(self.items))
        seen: set[str] = set()
        for item in self.items:
            if item.id in seen:
                raise InvariantViolation(f"Duplicate item id in class: {item.id!r}")
            seen.add(item.id)

    @property
    def entries(self) -> list[ExerciseEntry]:
        """Exercise entries in order, markers excluded."""
        return [item for item in self.items if isinstance(item, ExerciseEntry)]

    @property
    def markers(self) -> list[SectionMarker]:
        """Section markers in order."""
        return [item for item in self.items if isinstance(item, SectionMarker)]

    def is_empty(self) -> bool:
        """True when the class has no items at all."""
        return not self.items

    def with_items(self, items) -> "ClassSequence":
        """Return a copy of this class holding the given items."""
        return replace(self, items=tuple(items))


# =============================================================================
# Constructors
# =============================================================================


def new_entry_id(catalog_id: str) -> str:
    """Return a fresh entry id derived from the catalog id."""
    return f"{catalog_id}-{uuid.uuid4().hex}"


def new_marker_id() -> str:
    """Return a fresh section marker id."""
    return f"section-{uuid.uuid4().hex}"


def entry_from_catalog(exercise: CatalogExercise, entry_id: str | None = None) -> ExerciseEntry:
    """
    Copy a catalog exercise into a new class entry.

    Args:
        exercise: Catalog exercise to copy
        entry_id: Explicit id (a fresh unique id is generated when omitted)

    Returns:
        ExerciseEntry with the same descriptive fields and its own id
    """
    return ExerciseEntry(
        id=entry_id or new_entry_id(exercise.id),
        catalog_id=exercise.id,
        name=exercise.name,
        category=exercise.category,
        duration_minutes=exercise.duration_minutes,
        springs=exercise.springs,
        difficulty=exercise.difficulty,
        intensity_level=exercise.intensity_level,
        muscle_groups=exercise.muscle_groups,
        equipment=exercise.equipment,
        pregnancy_safe=exercise.pregnancy_safe,
        description=exercise.description,
        cues=exercise.cues,
        setup=exercise.setup,
        notes=exercise.notes,
        safety_notes=exercise.safety_notes,
        image=exercise.image,
    )


def make_marker(
    label: str,
    color: CalloutColor = DEFAULT_CALLOUT_COLOR,
    marker_id: str | None = None,
) -> SectionMarker:
    """Create a section marker; a blank label becomes the default section name."""
    return SectionMarker(
        id=marker_id or new_marker_id(),
        label=label.strip() or DEFAULT_SECTION_LABEL,
        color=color,
    )


def marker_from_callout(callout: CustomCallout) -> SectionMarker:
    """Create a section marker from a custom callout preset."""
    return make_marker(callout.label, callout.color)
