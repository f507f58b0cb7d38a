"""
Exercise catalog registry.

The catalog is loaded from YAML at import time (see loader.py).  If no
exercise can be loaded, a RuntimeError is raised: the planner cannot
suggest or add exercises without a catalog.

User overrides: place a catalog.yaml in ``~/.class-planner/``.
"""

from typing import Sequence

from ..models import CatalogExercise


def _build_registry() -> dict[str, CatalogExercise]:
    from .loader import load_catalog_from_yaml

    loaded = load_catalog_from_yaml()
    if not loaded:
        raise RuntimeError(
            "class-planner: no catalog exercises could be loaded from YAML. "
            "Check that src/class_planner/catalog.yaml is present and valid."
        )
    return {ex.id: ex for ex in loaded}


CATALOG_REGISTRY: dict[str, CatalogExercise] = _build_registry()


def get_catalog() -> tuple[CatalogExercise, ...]:
    """Return every catalog exercise in catalog order."""
    return tuple(CATALOG_REGISTRY.values())


def get_catalog_exercise(exercise_id: str) -> CatalogExercise:
    """
    Return the catalog exercise with the given id.

    Raises:
        ValueError: If exercise_id is not in the catalog
    """
    if exercise_id not in CATALOG_REGISTRY:
        valid = ", ".join(CATALOG_REGISTRY)
        raise ValueError(f"Unknown exercise '{exercise_id}'. Valid IDs: {valid}")
    return CATALOG_REGISTRY[exercise_id]


def filter_catalog(
    catalog: Sequence[CatalogExercise],
    category: str | None = None,
    muscle_group: str | None = None,
    pregnancy_safe_only: bool = False,
    query: str | None = None,
) -> list[CatalogExercise]:
    """
    Filter catalog exercises for library views, keeping catalog order.

    Args:
        catalog: Exercises to filter
        category: Keep only this category
        muscle_group: Keep only exercises working this muscle group
        pregnancy_safe_only: Keep only pregnancy-safe exercises
        query: Case-insensitive substring of the name or description

    Returns:
        Matching exercises
    """
    needle = query.strip().lower() if query else ""
    result = []
    for ex in catalog:
        if category is not None and ex.category != category:
            continue
        if muscle_group is not None and muscle_group not in ex.muscle_groups:
            continue
        if pregnancy_safe_only and not ex.pregnancy_safe:
            continue
        if needle and needle not in ex.name.lower() and needle not in ex.description.lower():
            continue
        result.append(ex)
    return result
