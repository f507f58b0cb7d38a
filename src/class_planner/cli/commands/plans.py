"""Saved plan commands: save, plans, load, delete-plan."""

import json
from typing import Annotated

import typer

from ...core.models import ClassSequence
from ...io.serializers import ValidationError, sequence_to_dict
from .. import views
from ..app import DataDirOption, app, commit, get_store, load_draft


def _load_saved(store):
    try:
        return store.load_plans()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def _check_plan_number(number: int, count: int) -> None:
    if count == 0:
        views.print_error("No saved class plans.")
        raise typer.Exit(1)
    if number < 1 or number > count:
        views.print_error(f"Plan number must be between 1 and {count}")
        raise typer.Exit(1)


@app.command()
def save(data_dir: DataDirOption = None) -> None:
    """
    Save the current class to the list of saved plans and start a fresh draft.
    """
    store = get_store(data_dir)
    history = load_draft(store)
    sequence = history.present

    if not sequence.entries:
        views.print_error("Class has no exercises; nothing to save.")
        raise typer.Exit(1)

    if not store.save_plan(sequence):
        views.print_error(f"Could not write {store.plans_path}")
        raise typer.Exit(1)

    history.reset(ClassSequence(target_duration_minutes=sequence.target_duration_minutes))
    store.save_draft(history)
    views.print_success(f"Saved '{sequence.name}'. Draft cleared; reload it with 'load'.")


@app.command()
def plans(
    data_dir: DataDirOption = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    List saved class plans.
    """
    store = get_store(data_dir)
    saved = _load_saved(store)

    if json_out:
        print(json.dumps(
            [{"saved_at": p.saved_at, "plan": sequence_to_dict(p.sequence)} for p in saved],
            indent=2,
        ))
        return

    if not saved:
        views.print_info("No saved class plans yet. Build one and run 'save'.")
        return
    views.print_saved_plans(saved)


@app.command()
def load(
    number: Annotated[int, typer.Argument(help="Plan number as shown by 'plans'")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Load a saved plan as the current class (undo brings back the previous one).
    """
    store = get_store(data_dir)
    saved = _load_saved(store)
    _check_plan_number(number, len(saved))

    history = load_draft(store)
    plan = saved[number - 1]
    commit(store, history, plan.sequence)
    views.print_success(f"Loaded '{plan.sequence.name}'")


@app.command("delete-plan")
def delete_plan(
    number: Annotated[int, typer.Argument(help="Plan number as shown by 'plans'")],
    data_dir: DataDirOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """
    Delete a saved class plan.
    """
    store = get_store(data_dir)
    saved = _load_saved(store)
    _check_plan_number(number, len(saved))

    target = saved[number - 1]
    views.console.print(f"Plan to delete: [bold]{target.sequence.name}[/bold] ({target.saved_at})")

    if not force and not views.confirm_action("Delete this plan?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        store.delete_plan_at(number - 1)
    except (IndexError, OSError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Deleted plan #{number}: {target.sequence.name}")
