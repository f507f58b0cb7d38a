"""
Exercise catalog for class-planner.

The catalog is the read-only library of exercises that can be copied
into a class and that the suggestion engine ranks.
"""

from .registry import CATALOG_REGISTRY, filter_catalog, get_catalog, get_catalog_exercise

__all__ = [
    "CATALOG_REGISTRY",
    "filter_catalog",
    "get_catalog",
    "get_catalog_exercise",
]
