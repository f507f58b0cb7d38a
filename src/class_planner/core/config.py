"""
Configuration constants for the class sequencing engine.

All adjustable parameters are centralized here for easy tuning.
The suggestion weights can also be overridden from scoring.yaml
(see core/engine/config_loader.py).
"""

from typing import Final

# =============================================================================
# VOCABULARIES
# =============================================================================

CATEGORIES: Final[tuple[str, ...]] = (
    "warm-up",
    "supine",
    "prone",
    "sitting",
    "side-lying",
    "kneeling",
    "standing",
    "cool-down",
    "other",
)

DIFFICULTY_RANK: Final[dict[str, int]] = {
    "beginner": 1,
    "intermediate": 2,
    "advanced": 3,
}

INTENSITY_RANK: Final[dict[str, int]] = {
    "low": 1,
    "medium": 2,
    "high": 3,
}

# Canonical spring settings; numeric or compound values ("2 red + 1 blue") are also accepted.
SPRING_SETTINGS: Final[tuple[str, ...]] = ("light", "medium", "heavy", "mixed", "none")

MUSCLE_GROUPS: Final[frozenset[str]] = frozenset(
    {
        # Core
        "core", "lower-abs", "upper-abs", "obliques", "transverse-abdominis",
        "pelvic-floor", "diaphragm",
        # Legs
        "legs", "quadriceps", "hamstrings", "calves", "hip-flexors",
        "hip-adductors", "hip-abductors", "ankles", "feet",
        # Glutes
        "glutes",
        # Arms
        "arms", "biceps", "triceps", "forearms", "wrists",
        # Back
        "back", "lats", "rhomboids", "erector-spinae", "traps",
        "thoracic-spine", "lumbar-spine",
        # Shoulders
        "shoulders", "deltoids", "rotator-cuff",
        # Chest
        "chest", "serratus-anterior", "intercostals",
        # Neck
        "neck", "cervical-spine",
        # Other
        "deep-stabilizers", "spinal-extensors", "psoas", "iliotibial-band",
        "full-body",
    }
)

CALLOUT_COLORS: Final[tuple[str, ...]] = ("amber", "blue", "green", "purple", "red")
DEFAULT_CALLOUT_COLOR: Final[str] = "amber"
DEFAULT_SECTION_LABEL: Final[str] = "New Section"
LEADING_GROUP_LABEL: Final[str] = "Exercises"

# =============================================================================
# CLASS DEFAULTS
# =============================================================================

DEFAULT_CLASS_NAME: Final[str] = "New Class Plan"
DEFAULT_TARGET_DURATION_MINUTES: Final[int] = 45
UNDO_DEPTH: Final[int] = 50  # Snapshots kept in the edit history

# =============================================================================
# POSITION FLOW
# =============================================================================

# Categories that make a smooth next step after the key category.
TRANSITIONS: Final[dict[str, frozenset[str]]] = {
    "warm-up": frozenset({"supine", "prone"}),
    "supine": frozenset({"sitting", "prone", "side-lying"}),
    "prone": frozenset({"sitting", "kneeling"}),
    "sitting": frozenset({"standing", "kneeling", "side-lying"}),
    "kneeling": frozenset({"standing", "cool-down"}),
    "standing": frozenset({"sitting", "kneeling", "cool-down"}),
    "side-lying": frozenset({"supine", "sitting"}),
    "cool-down": frozenset(),
    "other": frozenset(),
}

# =============================================================================
# SUGGESTION SCORING
# =============================================================================

NOVELTY_PER_GROUP: Final[int] = 3  # Per muscle group not yet used in the class
TRANSITION_BONUS: Final[int] = 4  # Must stay below 2 * NOVELTY_PER_GROUP
SPRING_CONTINUITY_BONUS: Final[int] = 3  # Same springs as the last exercise
DIFFICULTY_STEP_BONUS: Final[int] = 1  # Difficulty within one rank of the last exercise
INTENSITY_CHANGE_BONUS: Final[int] = 1  # Different intensity from the last exercise

# Outweighs a fully novel two-group candidate collecting every other bonus (6+4+3+1+1).
END_OF_CLASS_COOL_DOWN_BONUS: Final[int] = 16
EARLY_CLASS_BONUS: Final[int] = 2  # Non-cool-down while plenty of time remains

END_OF_CLASS_MINUTES: Final[int] = 10  # remaining <= this favours cool-down
EARLY_CLASS_MINUTES: Final[int] = 30  # remaining > this discourages cool-down

SUGGESTION_LIMIT: Final[int] = 4
COLD_START_LIMIT: Final[int] = 3
