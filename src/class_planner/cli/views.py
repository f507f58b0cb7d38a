"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of class plans, suggestions and the catalog.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..core.aggregates import aggregate_items, summarize_groups
from ..core.models import CatalogExercise, ClassSequence, ExerciseEntry
from ..core.reorder import index_of
from ..core.suggestions import Suggestion
from ..io.plan_store import SavedPlan

console = Console()

_COLOR_STYLE: dict[str, str] = {
    "amber": "yellow",
    "blue": "blue",
    "green": "green",
    "purple": "magenta",
    "red": "red",
}
_LEVEL_ABBR: dict[str, str] = {"beginner": "Beg", "intermediate": "Int", "advanced": "Adv"}


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fmt_muscles(groups: tuple[str, ...]) -> str:
    return ", ".join(groups) if groups else "-"


def _entry_row(position: int, entry: ExerciseEntry) -> list[str]:
    return [
        str(position),
        entry.name,
        entry.category,
        str(entry.duration_minutes),
        entry.springs,
        _LEVEL_ABBR.get(entry.difficulty, entry.difficulty),
        _fmt_muscles(entry.muscle_groups),
        f"[dim]{entry.id}[/dim]",
    ]


def format_class_table(sequence: ClassSequence) -> Table:
    """
    Create a Rich table of the class, one block per section.

    Section rows show the number of exercises and minutes in that section.
    Positions in the # column are 1-based indexes into the item list.
    """
    table = Table(title=sequence.name, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Exercise")
    table.add_column("Category")
    table.add_column("Min", justify="right")
    table.add_column("Springs")
    table.add_column("Level")
    table.add_column("Muscles")
    table.add_column("ID", overflow="fold")

    for group, agg in summarize_groups(sequence.items):
        if group.marker is not None:
            style = _COLOR_STYLE.get(group.marker.color, "yellow")
            table.add_row(
                str(group.start_index + 1),
                f"[bold {style}]▌ {group.label}[/bold {style}]",
                f"[{style}]{agg.real_exercise_count} exercises[/{style}]",
                f"[{style}]{agg.total_duration_minutes}[/{style}]",
                "", "", "",
                f"[dim]{group.marker.id}[/dim]",
            )
        for entry in group.entries:
            position = index_of(sequence.items, entry.id)
            table.add_row(*_entry_row((position or 0) + 1, entry))

    return table


def print_summary(sequence: ClassSequence) -> None:
    """Print exercise count, duration against target, and muscle coverage."""
    agg = aggregate_items(sequence.items)
    remaining = sequence.target_duration_minutes - agg.total_duration_minutes
    if remaining >= 0:
        time_str = f"{agg.total_duration_minutes}/{sequence.target_duration_minutes} min ({remaining} left)"
    else:
        time_str = (
            f"[red]{agg.total_duration_minutes}/{sequence.target_duration_minutes} min "
            f"({-remaining} over)[/red]"
        )
    console.print(
        f"Exercises: [bold]{agg.real_exercise_count}[/bold]   "
        f"Sections: {agg.section_count}   Time: {time_str}"
    )
    coverage = ", ".join(sorted(agg.muscle_group_coverage)) or "-"
    console.print(f"[dim]Muscle groups: {coverage}[/dim]")
    if sequence.notes:
        console.print(f"[dim]Notes: {sequence.notes}[/dim]")


def print_class(sequence: ClassSequence) -> None:
    """Print the whole class: grouped table plus summary."""
    if sequence.is_empty():
        console.print(f"[bold]{sequence.name}[/bold]")
        print_info("Class is empty. Add exercises with 'add' or see 'suggest'.")
        return
    console.print(format_class_table(sequence))
    print_summary(sequence)


def print_suggestions(suggestions: list[Suggestion], explain: bool = False) -> None:
    """Print ranked suggestions (with score reasons when explain=True)."""
    table = Table(title="Suggested next exercises")
    table.add_column("Rank", justify="right", style="dim")
    table.add_column("Catalog ID")
    table.add_column("Exercise")
    table.add_column("Category")
    table.add_column("Min", justify="right")
    table.add_column("Springs")
    table.add_column("Score", justify="right")
    if explain:
        table.add_column("Why")

    for rank, s in enumerate(suggestions, 1):
        row = [
            str(rank),
            s.exercise.id,
            s.exercise.name,
            s.exercise.category,
            str(s.exercise.duration_minutes),
            s.exercise.springs,
            str(s.score),
        ]
        if explain:
            row.append("; ".join(s.reasons))
        table.add_row(*row)

    console.print(table)


def print_catalog(exercises: list[CatalogExercise]) -> None:
    """Print catalog exercises as a table."""
    table = Table(title="Exercise catalog")
    table.add_column("ID")
    table.add_column("Exercise")
    table.add_column("Category")
    table.add_column("Min", justify="right")
    table.add_column("Springs")
    table.add_column("Level")
    table.add_column("Muscles")
    table.add_column("Preg.", justify="center")

    for ex in exercises:
        table.add_row(
            ex.id,
            ex.name,
            ex.category,
            str(ex.duration_minutes),
            ex.springs,
            _LEVEL_ABBR.get(ex.difficulty, ex.difficulty),
            _fmt_muscles(ex.muscle_groups),
            "✓" if ex.pregnancy_safe else "",
        )

    console.print(table)


def print_saved_plans(plans: list[SavedPlan]) -> None:
    """Print saved class plans with 1-based numbers for load/delete."""
    table = Table(title="Saved class plans")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name")
    table.add_column("Saved")
    table.add_column("Exercises", justify="right")
    table.add_column("Min", justify="right")
    table.add_column("Target", justify="right")

    for i, p in enumerate(plans, 1):
        agg = aggregate_items(p.sequence.items)
        table.add_row(
            str(i),
            p.sequence.name,
            p.saved_at.replace("T", " "),
            str(agg.real_exercise_count),
            str(agg.total_duration_minutes),
            str(p.sequence.target_duration_minutes),
        )

    console.print(table)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
