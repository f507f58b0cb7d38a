"""Shared Typer app object, shared option types, and draft utilities."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.history import EditHistory
from ..core.models import ClassSequence
from ..io.plan_store import PlanStore, get_default_data_dir
from ..io.serializers import ValidationError
from . import views

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Directory for draft, plans and preferences"),
]

app = typer.Typer(
    name="class-planner",
    help="Build timed reformer class plans from an exercise catalog.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_store(data_dir: Path | None) -> PlanStore:
    """Get plan store from path or default location."""
    if data_dir is None:
        data_dir = get_default_data_dir()
    return PlanStore(data_dir)


def load_draft(store: PlanStore) -> EditHistory[ClassSequence]:
    """Load the draft class, exiting with an error if it is unreadable."""
    try:
        return store.load_draft()
    except ValidationError as e:
        views.print_error(str(e))
        views.print_info("Run 'new' to start a fresh class.")
        raise typer.Exit(1)


def commit(store: PlanStore, history: EditHistory[ClassSequence], sequence: ClassSequence) -> None:
    """Record a new draft state (undoable) and persist it."""
    history.push(sequence)
    store.save_draft(history)
