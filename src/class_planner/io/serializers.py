"""
JSON serialization for class planner models.

Handles conversion between dataclasses and JSON-compatible dicts.
Items carry an explicit ``kind`` ("exercise" or "section").
"""

from typing import Any

from ..core.config import CALLOUT_COLORS, CATEGORIES, DIFFICULTY_RANK, INTENSITY_RANK
from ..core.models import (
    ClassSequence,
    CustomCallout,
    ExerciseEntry,
    InvariantViolation,
    Preferences,
    SectionMarker,
    SequenceItem,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_choice(value: Any, choices, name: str) -> str:
    """
    Validate that a value is one of the allowed choices.

    Args:
        value: Value to validate
        choices: Allowed values
        name: Name for error message

    Returns:
        The value if valid

    Raises:
        ValidationError: If value is not allowed
    """
    if value not in choices:
        raise ValidationError(f"Invalid {name}: {value!r}. Must be one of {tuple(choices)}")
    return value


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is not a number or is negative
    """
    _require_number(value, name)
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not a number or is not positive
    """
    _require_number(value, name)
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def _require_number(value: Any, name: str) -> None:
    # bool is an int subclass; true/false in JSON is never a duration
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")


def _require_dict(data: Any, name: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(f"{name} must be an object, got {data!r}")
    return data


def _require_list(value: Any, name: str) -> list:
    if not isinstance(value, list):
        raise ValidationError(f"{name} must be a list, got {value!r}")
    return value


def _require(data: dict[str, Any], *keys: str) -> None:
    missing = [k for k in keys if k not in data]
    if missing:
        raise ValidationError(f"Missing fields: {missing}")


def entry_to_dict(entry: ExerciseEntry) -> dict[str, Any]:
    """Convert ExerciseEntry to JSON-compatible dict."""
    return {
        "kind": ExerciseEntry.kind,
        "id": entry.id,
        "catalog_id": entry.catalog_id,
        "name": entry.name,
        "category": entry.category,
        "duration_minutes": entry.duration_minutes,
        "springs": entry.springs,
        "difficulty": entry.difficulty,
        "intensity_level": entry.intensity_level,
        "muscle_groups": list(entry.muscle_groups),
        "equipment": list(entry.equipment),
        "pregnancy_safe": entry.pregnancy_safe,
        "description": entry.description,
        "cues": list(entry.cues),
        "setup": entry.setup,
        "notes": entry.notes,
        "safety_notes": list(entry.safety_notes),
        "image": entry.image,
    }


def dict_to_entry(data: dict[str, Any]) -> ExerciseEntry:
    """
    Convert dict to ExerciseEntry.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, "id", "name", "category", "duration_minutes")
    validate_choice(data["category"], CATEGORIES, "category")
    validate_non_negative(data["duration_minutes"], "duration_minutes")
    validate_choice(data.get("difficulty", "beginner"), DIFFICULTY_RANK, "difficulty")
    validate_choice(data.get("intensity_level", "medium"), INTENSITY_RANK, "intensity_level")

    try:
        return ExerciseEntry(
            id=str(data["id"]),
            catalog_id=str(data.get("catalog_id", "")),
            name=str(data["name"]),
            category=data["category"],
            duration_minutes=int(data["duration_minutes"]),
            springs=str(data.get("springs", "none")),
            difficulty=data.get("difficulty", "beginner"),
            intensity_level=data.get("intensity_level", "medium"),
            muscle_groups=tuple(data.get("muscle_groups", [])),
            equipment=tuple(data.get("equipment", [])),
            pregnancy_safe=bool(data.get("pregnancy_safe", False)),
            description=data.get("description", "") or "",
            cues=tuple(data.get("cues", [])),
            setup=data.get("setup", "") or "",
            notes=data.get("notes", "") or "",
            safety_notes=tuple(data.get("safety_notes", [])),
            image=data.get("image", "") or "",
        )
    except ValueError as e:
        raise ValidationError(f"Invalid exercise entry {data.get('id')!r}: {e}") from e


def marker_to_dict(marker: SectionMarker) -> dict[str, Any]:
    """Convert SectionMarker to JSON-compatible dict."""
    return {
        "kind": SectionMarker.kind,
        "id": marker.id,
        "label": marker.label,
        "color": marker.color,
    }


def dict_to_marker(data: dict[str, Any]) -> SectionMarker:
    """
    Convert dict to SectionMarker.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, "id", "label")
    color = data.get("color", "amber")
    validate_choice(color, CALLOUT_COLORS, "color")
    return SectionMarker(id=str(data["id"]), label=str(data["label"]), color=color)


def item_to_dict(item: SequenceItem) -> dict[str, Any]:
    """Convert either kind of sequence item to a dict."""
    if isinstance(item, SectionMarker):
        return marker_to_dict(item)
    if isinstance(item, ExerciseEntry):
        return entry_to_dict(item)
    raise TypeError(f"Not a sequence item: {item!r}")


def dict_to_item(data: dict[str, Any]) -> SequenceItem:
    """
    Convert a dict to a sequence item, dispatching on its ``kind``.

    Raises:
        ValidationError: If kind is missing/unknown or the data is invalid
    """
    kind = _require_dict(data, "sequence item").get("kind")
    if kind == SectionMarker.kind:
        return dict_to_marker(data)
    if kind == ExerciseEntry.kind:
        return dict_to_entry(data)
    raise ValidationError(f"Unknown item kind: {kind!r}")


def sequence_to_dict(sequence: ClassSequence) -> dict[str, Any]:
    """Convert ClassSequence to JSON-compatible dict."""
    return {
        "name": sequence.name,
        "target_duration_minutes": sequence.target_duration_minutes,
        "notes": sequence.notes,
        "image_ref": sequence.image_ref,
        "items": [item_to_dict(item) for item in sequence.items],
    }


def dict_to_sequence(data: dict[str, Any]) -> ClassSequence:
    """
    Convert dict to ClassSequence.

    Raises:
        ValidationError: If data is invalid or item ids repeat
    """
    _require_dict(data, "class plan")
    target = data.get("target_duration_minutes", 45)
    validate_positive(target, "target_duration_minutes")
    items = [dict_to_item(d) for d in _require_list(data.get("items", []), "items")]
    try:
        return ClassSequence(
            name=str(data.get("name", "New Class Plan")),
            target_duration_minutes=int(target),
            notes=data.get("notes", "") or "",
            image_ref=data.get("image_ref", "") or "",
            items=tuple(items),
        )
    except InvariantViolation as e:
        raise ValidationError(str(e)) from e


def preferences_to_dict(prefs: Preferences) -> dict[str, Any]:
    """Convert Preferences to JSON-compatible dict."""
    return {
        "pregnancy_safe_only": prefs.pregnancy_safe_only,
        "custom_callouts": [
            {"label": c.label, "color": c.color} for c in prefs.custom_callouts
        ],
    }


def dict_to_preferences(data: dict[str, Any]) -> Preferences:
    """
    Convert dict to Preferences.

    Raises:
        ValidationError: If the data is not an object or a custom callout is invalid
    """
    _require_dict(data, "preferences")
    callouts = []
    for c in _require_list(data.get("custom_callouts", []), "custom_callouts"):
        color = _require_dict(c, "custom callout").get("color", "amber")
        validate_choice(color, CALLOUT_COLORS, "callout color")
        try:
            callouts.append(CustomCallout(label=str(c["label"]), color=color))
        except (KeyError, ValueError) as e:
            raise ValidationError(f"Invalid custom callout {c!r}: {e}") from e
    return Preferences(
        pregnancy_safe_only=bool(data.get("pregnancy_safe_only", False)),
        custom_callouts=tuple(callouts),
    )
