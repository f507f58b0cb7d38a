"""
Smoke tests for the class-planner CLI.

Tests basic functionality:
- App runs and shows help
- Exercises and sections can be added, moved, edited and removed
- Undo/redo step through the draft
- Suggestions respect the class so far and preferences
- Plans can be saved, listed, loaded and deleted
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from class_planner.cli.main import app
from class_planner.core.catalog import get_catalog_exercise


runner = CliRunner()


@pytest.fixture
def data_dir():
    """Create a temporary directory for draft, plans and preferences."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _run(data_dir: Path, *args: str, input: str | None = None):
    return runner.invoke(app, [*args, "--data-dir", str(data_dir)], input=input)


def _show(data_dir: Path) -> dict:
    result = _run(data_dir, "show", "--json")
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def _suggest(data_dir: Path, *args: str) -> list[dict]:
    result = _run(data_dir, "suggest", "--json", *args)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        """App shows help with the reformer description."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "reformer" in result.output.lower()

    def test_no_command_shows_empty_class(self, tmp_path, monkeypatch):
        """Running with no command shows the (empty) default draft."""
        monkeypatch.setenv("HOME", str(tmp_path))
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "Class is empty" in result.output

    def test_no_command_shows_class_from_data_dir(self, data_dir):
        """The root --data-dir option picks which draft the default view shows."""
        assert _run(data_dir, "add", "wu-breathing").exit_code == 0
        result = runner.invoke(app, ["--data-dir", str(data_dir)])
        assert result.exit_code == 0
        assert "Exercises: 1" in result.output

    def test_new_class(self, data_dir):
        """'new' starts a named class with its own target and writes the draft."""
        result = _run(data_dir, "new", "--name", "Tuesday Flow", "--target-minutes", "50")
        assert result.exit_code == 0
        data = _show(data_dir)
        assert data["name"] == "Tuesday Flow"
        assert data["target_duration_minutes"] == 50
        assert data["items"] == []
        assert (data_dir / "draft.json").exists()

    def test_new_rejects_non_positive_target(self, data_dir):
        """A zero-minute target is refused."""
        result = _run(data_dir, "new", "--target-minutes", "0")
        assert result.exit_code == 1

    def test_build_a_class(self, data_dir):
        """Exercises and sections are stored in order with fresh entry ids."""
        assert _run(data_dir, "add", "wu-breathing").exit_code == 0
        assert _run(data_dir, "add-section", "Core", "--color", "blue").exit_code == 0
        assert _run(data_dir, "add", "2").exit_code == 0

        items = _show(data_dir)["items"]

        assert [i["kind"] for i in items] == ["exercise", "section", "exercise"]
        assert items[0]["catalog_id"] == "wu-breathing"
        assert items[0]["id"] != "wu-breathing"
        assert items[1]["label"] == "Core"
        assert items[1]["color"] == "blue"
        assert items[2]["name"] == "Hundred"

    def test_show_table(self, data_dir):
        """The table view lists sections and the exercise count."""
        _run(data_dir, "add-section", "Warm")
        _run(data_dir, "add", "wu-breathing")
        result = _run(data_dir, "show")
        assert result.exit_code == 0
        assert "Warm" in result.output
        assert "Exercises: 1" in result.output

    def test_add_at_position(self, data_dir):
        """--at inserts at a 1-based position."""
        _run(data_dir, "add", "wu-breathing")
        _run(data_dir, "add", "2", "--at", "1")
        names = [i["name"] for i in _show(data_dir)["items"]]
        assert names == ["Hundred", "Supine Breathing"]

    def test_same_exercise_twice_gets_distinct_ids(self, data_dir):
        """Adding one catalog exercise twice gives two entries."""
        _run(data_dir, "add", "2")
        _run(data_dir, "add", "2")
        items = _show(data_dir)["items"]
        assert len(items) == 2
        assert items[0]["id"] != items[1]["id"]

    def test_add_unknown_exercise(self, data_dir):
        """Unknown catalog ids are an error."""
        result = _run(data_dir, "add", "no-such-exercise")
        assert result.exit_code == 1
        assert "Unknown exercise" in result.output

    def test_add_section_rejects_unknown_color(self, data_dir):
        """Section colours are limited to the callout palette."""
        result = _run(data_dir, "add-section", "Core", "--color", "pink")
        assert result.exit_code == 1

    def test_move_and_shift(self, data_dir):
        """'move' splices by position and 'shift' stops at the end."""
        for ex_id in ("wu-breathing", "2", "3"):
            _run(data_dir, "add", ex_id)

        assert _run(data_dir, "move", "3", "1").exit_code == 0
        items = _show(data_dir)["items"]
        assert [i["catalog_id"] for i in items] == ["3", "wu-breathing", "2"]

        assert _run(data_dir, "shift", items[0]["id"], "5").exit_code == 0
        assert [i["catalog_id"] for i in _show(data_dir)["items"]] == ["wu-breathing", "2", "3"]

    def test_move_out_of_range(self, data_dir):
        """Positions past the end are reported with the valid range."""
        _run(data_dir, "add", "2")
        result = _run(data_dir, "move", "1", "4")
        assert result.exit_code == 1
        assert "between 1 and 1" in result.output

    def test_remove_rename_edit(self, data_dir):
        """Renaming, editing and removing items update the draft."""
        _run(data_dir, "add-section", "Warm")
        _run(data_dir, "add", "wu-breathing")
        marker, entry = _show(data_dir)["items"]

        assert _run(data_dir, "rename", marker["id"], "Opening", "--color", "green").exit_code == 0
        assert _run(data_dir, "edit", entry["id"], "--minutes", "6", "--springs", "2 red").exit_code == 0

        marker, entry = _show(data_dir)["items"]
        assert marker["label"] == "Opening"
        assert marker["color"] == "green"
        assert entry["duration_minutes"] == 6
        assert entry["springs"] == "2 red"

        assert _run(data_dir, "remove", marker["id"]).exit_code == 0
        assert [i["kind"] for i in _show(data_dir)["items"]] == ["exercise"]

    def test_rename_entry_is_an_error(self, data_dir):
        """Only section dividers can be renamed."""
        _run(data_dir, "add", "2")
        entry_id = _show(data_dir)["items"][0]["id"]
        assert _run(data_dir, "rename", entry_id, "Nope").exit_code == 1

    def test_edit_rejects_negative_minutes(self, data_dir):
        """Negative durations are refused."""
        _run(data_dir, "add", "2")
        entry_id = _show(data_dir)["items"][0]["id"]
        assert _run(data_dir, "edit", entry_id, "--minutes", "-1").exit_code == 1

    def test_remove_missing_item(self, data_dir):
        """Removing an unknown id is an error."""
        result = _run(data_dir, "remove", "nothing-here")
        assert result.exit_code == 1

    def test_undo_redo(self, data_dir):
        """Undo and redo step through edits, including 'new'."""
        _run(data_dir, "add", "wu-breathing")
        _run(data_dir, "add", "2")

        assert _run(data_dir, "undo").exit_code == 0
        assert len(_show(data_dir)["items"]) == 1

        assert _run(data_dir, "redo").exit_code == 0
        assert len(_show(data_dir)["items"]) == 2

        _run(data_dir, "new", "--name", "Fresh")
        assert _show(data_dir)["items"] == []
        _run(data_dir, "undo")
        assert len(_show(data_dir)["items"]) == 2

    def test_undo_with_nothing_to_undo(self, data_dir):
        """Undo on a fresh draft just says so."""
        result = _run(data_dir, "undo")
        assert result.exit_code == 0
        assert "Nothing to undo" in result.output

    def test_unreadable_draft_can_be_replaced_with_new(self, data_dir):
        """A wrongly shaped draft blocks editing until 'new' starts over."""
        (data_dir / "draft.json").write_text(json.dumps({"present": {"items": [1]}}))

        result = _run(data_dir, "show")
        assert result.exit_code == 1
        assert "Run 'new'" in result.output

        assert _run(data_dir, "new", "--name", "Fresh").exit_code == 0
        assert _show(data_dir)["name"] == "Fresh"


class TestSuggestCommand:

    def test_cold_start_suggests_warm_ups(self, data_dir):
        """An empty class gets the first warm-ups in catalog order."""
        suggestions = _suggest(data_dir)
        assert [s["id"] for s in suggestions] == ["wu-breathing", "wu-pelvic-curl", "wu-footwork-heels"]

    def test_exercises_in_class_are_not_suggested(self, data_dir):
        """Exercises already in the class are left out."""
        _run(data_dir, "add", "wu-breathing")
        _run(data_dir, "add", "2")

        ids = [s["id"] for s in _suggest(data_dir, "--limit", "50")]

        assert "wu-breathing" not in ids
        assert "2" not in ids
        assert len(_suggest(data_dir)) == 4

    def test_pregnancy_safe_preference(self, data_dir):
        """The pregnancy-safe preference filters suggestions."""
        assert _run(data_dir, "prefs", "--pregnancy-safe").exit_code == 0
        _run(data_dir, "add", "wu-breathing")

        ids = [s["id"] for s in _suggest(data_dir, "--limit", "50")]

        assert ids
        assert all(get_catalog_exercise(i).pregnancy_safe for i in ids)

    def test_table_output(self, data_dir):
        """--explain prints the suggestion table."""
        _run(data_dir, "add", "wu-breathing")
        result = _run(data_dir, "suggest", "--explain")
        assert result.exit_code == 0
        assert "Suggested" in result.output


class TestCatalogCommand:

    def test_catalog_table(self):
        """Catalog prints as a table."""
        result = runner.invoke(app, ["catalog"])
        assert result.exit_code == 0
        assert "Exercise catalog" in result.output

    def test_catalog_filters(self):
        """--category narrows the JSON listing."""
        result = runner.invoke(app, ["catalog", "--category", "cool-down", "--json"])
        assert result.exit_code == 0
        exercises = json.loads(result.stdout)
        assert exercises
        assert all(ex["category"] == "cool-down" for ex in exercises)

    def test_catalog_rejects_unknown_category(self):
        """Unknown categories are an error."""
        result = runner.invoke(app, ["catalog", "--category", "flying"])
        assert result.exit_code == 1


class TestPlansAndPreferences:

    def test_save_empty_class_fails(self, data_dir):
        """A class without exercises cannot be saved."""
        result = _run(data_dir, "save")
        assert result.exit_code == 1

    def test_save_list_load_delete(self, data_dir):
        """Full saved-plan cycle: save, list, load, delete."""
        _run(data_dir, "new", "--name", "Monday")
        _run(data_dir, "add", "wu-breathing")
        assert _run(data_dir, "save").exit_code == 0
        assert _show(data_dir)["items"] == []
        assert _run(data_dir, "undo").exit_code == 0
        assert _show(data_dir)["items"] == []

        listed = json.loads(_run(data_dir, "plans", "--json").stdout)
        assert [p["plan"]["name"] for p in listed] == ["Monday"]

        _run(data_dir, "new", "--name", "Scratch")
        assert _run(data_dir, "load", "1").exit_code == 0
        data = _show(data_dir)
        assert data["name"] == "Monday"
        assert len(data["items"]) == 1

        assert _run(data_dir, "load", "2").exit_code == 1

        assert _run(data_dir, "delete-plan", "1", "--force").exit_code == 0
        assert json.loads(_run(data_dir, "plans", "--json").stdout) == []

    def test_delete_plan_can_be_cancelled(self, data_dir):
        """Answering no at the prompt keeps the plan."""
        _run(data_dir, "add", "2")
        _run(data_dir, "save")

        result = _run(data_dir, "delete-plan", "1", input="n\n")

        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert len(json.loads(_run(data_dir, "plans", "--json").stdout)) == 1

    def test_plans_table(self, data_dir):
        """Saved plans print as a table."""
        _run(data_dir, "add", "2")
        _run(data_dir, "save")
        result = _run(data_dir, "plans")
        assert result.exit_code == 0
        assert "Saved class plans" in result.output

    def test_wrongly_shaped_plans_file_is_reported(self, data_dir):
        """A saved plan with a text duration gives an error naming the line."""
        _run(data_dir, "add", "2")
        _run(data_dir, "save")
        plan = _show(data_dir)
        plan["items"] = [{"kind": "exercise", "id": "e1", "name": "Hundred",
                          "category": "supine", "duration_minutes": "5"}]
        with open(data_dir / "plans.jsonl", "a") as f:
            f.write(json.dumps({"saved_at": "", "plan": plan}) + "\n")

        result = _run(data_dir, "plans")

        assert result.exit_code == 1
        assert "line 2" in result.output

    def test_custom_callouts(self, data_dir):
        """Custom callouts can be saved, used for sections and removed."""
        result = _run(data_dir, "prefs", "--add-callout", "Core Block", "--color", "purple")
        assert result.exit_code == 0
        assert (data_dir / "preferences.json").exists()

        assert _run(data_dir, "add-section", "--callout", "core block").exit_code == 0
        marker = _show(data_dir)["items"][0]
        assert marker["label"] == "Core Block"
        assert marker["color"] == "purple"

        assert _run(data_dir, "prefs", "--add-callout", "Core Block").exit_code == 1
        assert _run(data_dir, "prefs", "--remove-callout", "Core Block").exit_code == 0
        assert _run(data_dir, "add-section", "--callout", "Core Block").exit_code == 1

    def test_prefs_show(self, data_dir):
        """'prefs' with no options shows the current preferences."""
        result = _run(data_dir, "prefs")
        assert result.exit_code == 0
        assert "Pregnancy-safe only" in result.output
