"""Catalog commands: catalog, suggest."""

import json
from typing import Annotated, Optional

import typer

from ...core.catalog import filter_catalog, get_catalog
from ...core.config import CATEGORIES, MUSCLE_GROUPS
from ...core.engine.config_loader import load_scoring_weights
from ...core.suggestions import rank_candidates
from .. import views
from ..app import DataDirOption, app, get_store, load_draft


@app.command()
def catalog(
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help=f"Only this category: {', '.join(CATEGORIES)}"),
    ] = None,
    muscle: Annotated[
        Optional[str],
        typer.Option("--muscle", "-m", help="Only exercises working this muscle group"),
    ] = None,
    pregnancy_safe: Annotated[
        bool,
        typer.Option("--pregnancy-safe", help="Only pregnancy-safe exercises"),
    ] = False,
    search: Annotated[
        Optional[str],
        typer.Option("--search", "-s", help="Text to find in the name or description"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Browse the exercise catalog.
    """
    if category is not None and category not in CATEGORIES:
        views.print_error(f"Category must be one of: {', '.join(CATEGORIES)}")
        raise typer.Exit(1)
    if muscle is not None and muscle not in MUSCLE_GROUPS:
        views.print_error(f"Muscle group must be one of: {', '.join(MUSCLE_GROUPS)}")
        raise typer.Exit(1)

    exercises = filter_catalog(
        get_catalog(),
        category=category,
        muscle_group=muscle,
        pregnancy_safe_only=pregnancy_safe,
        query=search,
    )

    if json_out:
        print(json.dumps([
            {
                "id": ex.id,
                "name": ex.name,
                "category": ex.category,
                "duration_minutes": ex.duration_minutes,
                "springs": ex.springs,
                "difficulty": ex.difficulty,
                "muscle_groups": list(ex.muscle_groups),
                "pregnancy_safe": ex.pregnancy_safe,
            }
            for ex in exercises
        ], indent=2))
        return

    if not exercises:
        views.print_info("No catalog exercises match.")
        return
    views.print_catalog(exercises)


@app.command()
def suggest(
    data_dir: DataDirOption = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Maximum number of suggestions"),
    ] = None,
    explain: Annotated[
        bool,
        typer.Option("--explain", "-x", help="Show why each exercise scored as it did"),
    ] = False,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Suggest exercises to add next, based on the class so far.

    Respects the pregnancy-safe preference (see 'prefs').
    """
    if limit is not None and limit <= 0:
        views.print_error("Limit must be positive")
        raise typer.Exit(1)

    store = get_store(data_dir)
    sequence = load_draft(store).present
    preferences = store.load_preferences()

    suggestions = rank_candidates(
        sequence.items,
        get_catalog(),
        sequence.target_duration_minutes,
        preferences=preferences,
        weights=load_scoring_weights(),
        limit=limit,
    )

    if json_out:
        print(json.dumps([
            {
                "id": s.exercise.id,
                "name": s.exercise.name,
                "category": s.exercise.category,
                "score": s.score,
                "reasons": list(s.reasons),
            }
            for s in suggestions
        ], indent=2))
        return

    if not suggestions:
        views.print_info("No suggestions: every eligible catalog exercise is already in the class.")
        return

    views.print_suggestions(suggestions, explain=explain)
    if preferences.pregnancy_safe_only:
        views.print_info("Showing pregnancy-safe exercises only.")
    views.console.print("[dim]Add one with: add <Catalog ID>[/dim]")
