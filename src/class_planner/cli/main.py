"""
CLI entry point using Typer.

Provides commands for building reformer class plans:
- new, show, add, add-section, remove, move, shift, rename, edit: build the class
- undo, redo: step through edit history
- catalog, suggest: browse exercises and get next-exercise suggestions
- save, plans, load, delete-plan: manage saved class plans
- prefs: pregnancy-safe filter and custom section callouts
"""

from typing import Annotated

import typer

from . import views
from .app import DataDirOption, app

# Importing the command modules registers their commands on the shared app.
from .commands import building, library, plans, preferences  # noqa: F401


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Reformer class planner. Run without a command to show the current class
    (from --data-dir when given).
    """
    views.configure_logging(verbose)
    if ctx.invoked_subcommand is not None:
        return

    ctx.invoke(building.show, data_dir=data_dir)


if __name__ == "__main__":
    app()
