"""
File-based storage for class plans.

Handles the draft class being edited (with its undo/redo snapshots),
saved class plans, and user preferences.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..core.config import UNDO_DEPTH
from ..core.history import EditHistory
from ..core.models import ClassSequence, Preferences
from .serializers import (
    ValidationError,
    dict_to_preferences,
    dict_to_sequence,
    preferences_to_dict,
    sequence_to_dict,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedPlan:
    """A class plan as stored in plans.jsonl."""

    saved_at: str  # ISO timestamp
    sequence: ClassSequence


class PlanStore:
    """
    Manages class planner data in a single directory.

    - ``draft.json``: the class being built plus undo/redo snapshots
    - ``plans.jsonl``: one saved class plan per line
    - ``preferences.json``: user preferences
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the data files
        """
        self.data_dir = Path(data_dir)
        self.draft_path = self.data_dir / "draft.json"
        self.plans_path = self.data_dir / "plans.jsonl"
        self.preferences_path = self.data_dir / "preferences.json"

    def init(self) -> None:
        """Create the data directory if needed."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    # -- draft ---------------------------------------------------------------

    def load_draft(self) -> EditHistory[ClassSequence]:
        """
        Load the draft class and its edit history.

        Returns:
            EditHistory whose present is the draft (an empty class if none saved)

        Raises:
            ValidationError: If the draft file is malformed
        """
        if not self.draft_path.exists():
            return EditHistory(ClassSequence())

        try:
            with open(self.draft_path, "r") as f:
                data = json.load(f)
            return EditHistory(
                dict_to_sequence(data["present"]),
                past=[dict_to_sequence(d) for d in data.get("past", [])],
                future=[dict_to_sequence(d) for d in data.get("future", [])],
                max_depth=UNDO_DEPTH,
            )
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            raise ValidationError(f"Error reading draft {self.draft_path}: {e}") from e

    def save_draft(self, history: EditHistory[ClassSequence]) -> None:
        """
        Write the draft class and its edit history.

        Args:
            history: Edit history to persist
        """
        self.init()
        data = {
            "present": sequence_to_dict(history.present),
            "past": [sequence_to_dict(s) for s in history.past],
            "future": [sequence_to_dict(s) for s in history.future],
        }
        with open(self.draft_path, "w") as f:
            json.dump(data, f, indent=2)

    # -- saved plans ---------------------------------------------------------

    def save_plan(self, sequence: ClassSequence) -> bool:
        """
        Append a finished class plan to plans.jsonl.

        Args:
            sequence: Class plan to store

        Returns:
            True on success, False if the file could not be written
        """
        record = {
            "saved_at": datetime.now().isoformat(timespec="seconds"),
            "plan": sequence_to_dict(sequence),
        }
        try:
            self.init()
            with open(self.plans_path, "a") as f:
                f.write(json.dumps(record, separators=(",", ":")) + "\n")
        except OSError as e:
            logger.warning("could not save class plan to %s: %s", self.plans_path, e)
            return False
        return True

    def load_plans(self) -> list[SavedPlan]:
        """
        Load all saved class plans in the order they were saved.

        Returns:
            List of SavedPlan (empty if nothing saved yet)

        Raises:
            ValidationError: If a line cannot be parsed
        """
        if not self.plans_path.exists():
            return []

        plans: list[SavedPlan] = []
        with open(self.plans_path, "r") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                    plans.append(
                        SavedPlan(
                            saved_at=str(data.get("saved_at", "")),
                            sequence=dict_to_sequence(data["plan"]),
                        )
                    )
                except (
                    json.JSONDecodeError,
                    KeyError,
                    TypeError,
                    AttributeError,
                    ValidationError,
                ) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.plans_path}: {e}"
                    ) from e
        return plans

    def _write_plans(self, plans: list[SavedPlan]) -> None:
        with open(self.plans_path, "w") as f:
            for p in plans:
                record = {"saved_at": p.saved_at, "plan": sequence_to_dict(p.sequence)}
                f.write(json.dumps(record, separators=(",", ":")) + "\n")

    def delete_plan_at(self, index: int) -> SavedPlan:
        """
        Delete the saved plan at the given 0-based index.

        Returns:
            The deleted plan

        Raises:
            IndexError: If index is out of range
        """
        plans = self.load_plans()
        if index < 0 or index >= len(plans):
            raise IndexError(f"Plan index {index} out of range (0-{len(plans) - 1})")
        removed = plans.pop(index)
        self._write_plans(plans)
        return removed

    # -- preferences ---------------------------------------------------------

    def load_preferences(self) -> Preferences:
        """
        Load user preferences.

        Returns:
            Preferences (defaults if the file is missing or unreadable)
        """
        if not self.preferences_path.exists():
            return Preferences()
        try:
            with open(self.preferences_path, "r") as f:
                return dict_to_preferences(json.load(f))
        except (json.JSONDecodeError, TypeError, AttributeError, ValidationError) as e:
            logger.warning("ignoring unreadable preferences %s: %s", self.preferences_path, e)
            return Preferences()

    def save_preferences(self, prefs: Preferences) -> None:
        """Write user preferences."""
        self.init()
        with open(self.preferences_path, "w") as f:
            json.dump(preferences_to_dict(prefs), f, indent=2)


def get_default_data_dir() -> Path:
    """Return the default data directory (~/.class-planner)."""
    return Path.home() / ".class-planner"
