"""Preference commands: prefs."""

from dataclasses import replace
from typing import Annotated, Optional

import typer

from ...core.config import CALLOUT_COLORS, DEFAULT_CALLOUT_COLOR
from ...core.models import CustomCallout
from .. import views
from ..app import DataDirOption, app, get_store


@app.command()
def prefs(
    data_dir: DataDirOption = None,
    pregnancy_safe: Annotated[
        Optional[bool],
        typer.Option(
            "--pregnancy-safe/--no-pregnancy-safe",
            help="Only suggest pregnancy-safe exercises",
        ),
    ] = None,
    add_callout: Annotated[
        Optional[str],
        typer.Option("--add-callout", help="Save a custom section callout with this label"),
    ] = None,
    color: Annotated[
        str,
        typer.Option("--color", "-c", help=f"Colour for --add-callout: {', '.join(CALLOUT_COLORS)}"),
    ] = DEFAULT_CALLOUT_COLOR,
    remove_callout: Annotated[
        Optional[str],
        typer.Option("--remove-callout", help="Delete the custom callout with this label"),
    ] = None,
) -> None:
    """
    Show or change preferences (pregnancy-safe filter, custom section callouts).
    """
    store = get_store(data_dir)
    current = store.load_preferences()
    updated = current

    if pregnancy_safe is not None:
        updated = replace(updated, pregnancy_safe_only=pregnancy_safe)

    if add_callout is not None:
        if color not in CALLOUT_COLORS:
            views.print_error(f"Colour must be one of: {', '.join(CALLOUT_COLORS)}")
            raise typer.Exit(1)
        if updated.callout(add_callout) is not None:
            views.print_error(f"A callout named '{add_callout}' already exists")
            raise typer.Exit(1)
        try:
            callout = CustomCallout(label=add_callout.strip(), color=color)
        except ValueError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        updated = replace(updated, custom_callouts=updated.custom_callouts + (callout,))

    if remove_callout is not None:
        existing = updated.callout(remove_callout)
        if existing is None:
            views.print_error(f"No custom callout named '{remove_callout}'")
            raise typer.Exit(1)
        updated = replace(
            updated,
            custom_callouts=tuple(c for c in updated.custom_callouts if c != existing),
        )

    if updated != current:
        store.save_preferences(updated)
        views.print_success("Preferences updated.")

    views.console.print(
        f"Pregnancy-safe only: [bold]{'yes' if updated.pregnancy_safe_only else 'no'}[/bold]"
    )
    if updated.custom_callouts:
        views.console.print("Custom callouts:")
        for c in updated.custom_callouts:
            views.console.print(f"  {c.label} [dim]({c.color})[/dim]")
    else:
        views.console.print("[dim]No custom callouts.[/dim]")
