"""Class building commands: new, show, add, add-section, remove, move, shift, rename, edit, undo, redo."""

import json
from typing import Annotated, Optional

import typer

from ...core.aggregates import remaining_minutes
from ...core.config import CALLOUT_COLORS, DEFAULT_CALLOUT_COLOR, DEFAULT_TARGET_DURATION_MINUTES
from ...core.catalog import get_catalog_exercise
from ...core.history import EditHistory
from ...core.models import ClassSequence, entry_from_catalog, make_marker, marker_from_callout
from ...core.reorder import EditResult, index_of, insert, move, remove, rename_marker, shift, update_entry
from ...io.serializers import ValidationError, sequence_to_dict
from .. import views
from ..app import DataDirOption, app, commit, get_store, load_draft


def _position_to_index(position: int | None) -> int | None:
    """Convert a 1-based CLI position to a 0-based index (None stays None)."""
    return None if position is None else position - 1


def _apply(store, history, result: EditResult, missing: str) -> None:
    """Commit an edit, or report a miss and exit."""
    if not result.found:
        views.print_error(missing)
        raise typer.Exit(1)
    commit(store, history, history.present.with_items(result.items))


@app.command()
def new(
    data_dir: DataDirOption = None,
    name: Annotated[
        str,
        typer.Option("--name", "-n", help="Class name"),
    ] = "New Class Plan",
    target_minutes: Annotated[
        int,
        typer.Option("--target-minutes", "-t", help="Target class length in minutes"),
    ] = DEFAULT_TARGET_DURATION_MINUTES,
    notes: Annotated[
        str,
        typer.Option("--notes", help="Free-text notes for the class"),
    ] = "",
    image: Annotated[
        str,
        typer.Option("--image", help="Image reference for the class"),
    ] = "",
) -> None:
    """
    Start a new, empty class (the previous draft can be restored with 'undo').
    """
    if target_minutes <= 0:
        views.print_error("Target minutes must be positive")
        raise typer.Exit(1)

    store = get_store(data_dir)
    try:
        history = store.load_draft()
    except ValidationError as e:
        views.print_warning(f"Replacing unreadable draft: {e}")
        history = EditHistory(ClassSequence())
    sequence = ClassSequence(
        name=name,
        target_duration_minutes=target_minutes,
        notes=notes,
        image_ref=image,
    )
    commit(store, history, sequence)
    views.print_success(f"Started '{name}' ({target_minutes} min)")


@app.command()
def show(
    data_dir: DataDirOption = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Show the class being built, grouped by section.
    """
    store = get_store(data_dir)
    history = load_draft(store)

    if json_out:
        print(json.dumps(sequence_to_dict(history.present), indent=2))
        return

    views.print_class(history.present)


@app.command()
def add(
    exercise_id: Annotated[str, typer.Argument(help="Catalog exercise ID (see 'catalog')")],
    data_dir: DataDirOption = None,
    at: Annotated[
        Optional[int],
        typer.Option("--at", help="1-based position to insert at (default: end)"),
    ] = None,
) -> None:
    """
    Add a catalog exercise to the class.

    The same exercise can be added more than once; each copy gets its own ID.
    """
    try:
        exercise = get_catalog_exercise(exercise_id)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store = get_store(data_dir)
    history = load_draft(store)
    entry = entry_from_catalog(exercise)
    items = insert(history.present.items, entry, _position_to_index(at))
    commit(store, history, history.present.with_items(items))
    views.print_success(f"Added {entry.name} ({entry.duration_minutes} min) as {entry.id}")

    remaining = remaining_minutes(items, history.present.target_duration_minutes)
    if remaining < 0:
        views.print_warning(f"Class is now {-remaining} min over its target")


@app.command("add-section")
def add_section(
    label: Annotated[str, typer.Argument(help="Section label, e.g. 'Warm-up'")] = "",
    data_dir: DataDirOption = None,
    color: Annotated[
        str,
        typer.Option("--color", "-c", help=f"Colour: {', '.join(CALLOUT_COLORS)}"),
    ] = DEFAULT_CALLOUT_COLOR,
    callout: Annotated[
        Optional[str],
        typer.Option("--callout", help="Use a saved custom callout (see 'prefs')"),
    ] = None,
    at: Annotated[
        Optional[int],
        typer.Option("--at", help="1-based position to insert at (default: end)"),
    ] = None,
) -> None:
    """
    Add a section divider. Exercises after it (up to the next divider) form its section.
    """
    store = get_store(data_dir)

    if callout is not None:
        preset = store.load_preferences().callout(callout)
        if preset is None:
            views.print_error(f"No custom callout named '{callout}'")
            raise typer.Exit(1)
        marker = marker_from_callout(preset)
    else:
        if color not in CALLOUT_COLORS:
            views.print_error(f"Colour must be one of: {', '.join(CALLOUT_COLORS)}")
            raise typer.Exit(1)
        marker = make_marker(label, color)

    history = load_draft(store)
    items = insert(history.present.items, marker, _position_to_index(at))
    commit(store, history, history.present.with_items(items))
    views.print_success(f"Added section '{marker.label}' as {marker.id}")


@app.command("remove")
def remove_item(
    item_id: Annotated[str, typer.Argument(help="Item ID (see 'show')")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Remove an exercise or section divider from the class.

    Removing a divider merges its exercises into the section above.
    """
    store = get_store(data_dir)
    history = load_draft(store)
    _apply(store, history, remove(history.present.items, item_id), f"No item with ID '{item_id}'")
    views.print_success(f"Removed {item_id}")


@app.command("move")
def move_item(
    from_position: Annotated[int, typer.Argument(help="Current 1-based position")],
    to_position: Annotated[int, typer.Argument(help="New 1-based position")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Move the item at one position to another (positions as shown by 'show').
    """
    store = get_store(data_dir)
    history = load_draft(store)
    size = len(history.present.items)
    result = move(history.present.items, from_position - 1, to_position - 1)
    _apply(store, history, result, f"Positions must be between 1 and {size}")
    views.print_success(f"Moved item {from_position} to {to_position}")


@app.command("shift")
def shift_item(
    item_id: Annotated[str, typer.Argument(help="Item ID (see 'show')")],
    offset: Annotated[int, typer.Argument(help="Positions to move: negative is up, positive is down")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Nudge an item up or down; it stops at the top or bottom of the class.
    """
    store = get_store(data_dir)
    history = load_draft(store)
    _apply(store, history, shift(history.present.items, item_id, offset), f"No item with ID '{item_id}'")
    new_index = index_of(history.present.items, item_id)
    views.print_success(f"{item_id} is now at position {(new_index or 0) + 1}")


@app.command()
def rename(
    item_id: Annotated[str, typer.Argument(help="Section divider ID (see 'show')")],
    label: Annotated[str, typer.Argument(help="New label")],
    data_dir: DataDirOption = None,
    color: Annotated[
        Optional[str],
        typer.Option("--color", "-c", help=f"New colour: {', '.join(CALLOUT_COLORS)}"),
    ] = None,
) -> None:
    """
    Rename a section divider (and optionally change its colour).
    """
    if color is not None and color not in CALLOUT_COLORS:
        views.print_error(f"Colour must be one of: {', '.join(CALLOUT_COLORS)}")
        raise typer.Exit(1)

    store = get_store(data_dir)
    history = load_draft(store)
    result = rename_marker(history.present.items, item_id, label, color)
    _apply(store, history, result, f"No section divider with ID '{item_id}'")
    views.print_success(f"Renamed {item_id}")


@app.command()
def edit(
    item_id: Annotated[str, typer.Argument(help="Exercise ID in the class (see 'show')")],
    data_dir: DataDirOption = None,
    minutes: Annotated[
        Optional[int],
        typer.Option("--minutes", "-m", help="Duration in minutes"),
    ] = None,
    springs: Annotated[
        Optional[str],
        typer.Option("--springs", "-s", help="Spring setting, e.g. 'light' or '2 red + 1 blue'"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", help="Notes for this exercise in this class"),
    ] = None,
) -> None:
    """
    Edit an exercise's copy in this class (the catalog is not changed).
    """
    changes: dict = {}
    if minutes is not None:
        changes["duration_minutes"] = minutes
    if springs is not None:
        changes["springs"] = springs
    if notes is not None:
        changes["notes"] = notes
    if not changes:
        views.print_info("Nothing to change. Use --minutes, --springs or --notes.")
        raise typer.Exit(0)

    store = get_store(data_dir)
    history = load_draft(store)
    try:
        result = update_entry(history.present.items, item_id, **changes)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    _apply(store, history, result, f"No exercise with ID '{item_id}'")
    views.print_success(f"Updated {item_id}")


@app.command()
def undo(data_dir: DataDirOption = None) -> None:
    """
    Undo the last change to the class.
    """
    store = get_store(data_dir)
    history = load_draft(store)
    if not history.undo():
        views.print_info("Nothing to undo.")
        return
    store.save_draft(history)
    views.print_success("Undone.")


@app.command()
def redo(data_dir: DataDirOption = None) -> None:
    """
    Redo the last undone change.
    """
    store = get_store(data_dir)
    history = load_draft(store)
    if not history.redo():
        views.print_info("Nothing to redo.")
        return
    store.save_draft(history)
    views.print_success("Redone.")
