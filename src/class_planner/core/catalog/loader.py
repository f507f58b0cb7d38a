"""
YAML → CatalogExercise loader.

Loads the exercise catalog from the bundled ``src/class_planner/catalog.yaml``
(a list of exercises under the ``exercises:`` key, in catalog order).

User overrides: ``~/.class-planner/catalog.yaml`` has the same shape.  An
entry whose ``id`` matches a bundled exercise is deep-merged over it, so
only changed keys need to be listed.  Entries with new ids are appended
after the bundled exercises.

Usage (internal, called by registry.py):
    from .loader import load_catalog_from_yaml
    exercises = load_catalog_from_yaml()   # list or None on failure
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..models import CatalogExercise

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset(
    {
        "id",
        "name",
        "category",
        "duration_minutes",
        "springs",
        "difficulty",
        "intensity_level",
        "muscle_groups",
    }
)


def _str_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def exercise_from_dict(d: dict) -> CatalogExercise:
    """Convert a raw dict (from YAML or JSON) to a CatalogExercise.

    Raises ValueError if any required field is absent or a value is invalid.
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"CatalogExercise missing fields: {sorted(missing)}")

    return CatalogExercise(
        id=str(d["id"]),
        name=str(d["name"]),
        category=str(d["category"]),
        duration_minutes=int(d["duration_minutes"]),
        springs=str(d["springs"]),
        difficulty=str(d["difficulty"]),
        intensity_level=str(d["intensity_level"]),
        muscle_groups=_str_list(d["muscle_groups"]),
        equipment=_str_list(d.get("equipment")),
        pregnancy_safe=bool(d.get("pregnancy_safe", False)),
        description=str(d.get("description", "") or ""),
        cues=_str_list(d.get("cues")),
        setup=str(d.get("setup", "") or ""),
        notes=str(d.get("notes", "") or ""),
        safety_notes=_str_list(d.get("safety_notes")),
        image=str(d.get("image", "") or ""),
    )


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; return {} (with a warning) when it cannot be read or parsed."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"class-planner: cannot read {path} ({exc}); ignoring it", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_bundled_catalog_path() -> Path | None:
    """Return the path to the bundled catalog.yaml, or None if not found."""
    ref = importlib.resources.files("class_planner").joinpath("catalog.yaml")
    candidate = Path(str(ref))
    return candidate if candidate.is_file() else None


def get_user_catalog_path() -> Path | None:
    """Return ~/.class-planner/catalog.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".class-planner" / "catalog.yaml"
    return p if p.exists() else None


def _raw_entries(path: Path) -> list[dict]:
    raw = _load_yaml_file(path).get("exercises") or []
    return [e for e in raw if isinstance(e, dict)]


def merge_catalog_entries(bundled: list[dict], user: list[dict]) -> list[dict]:
    """Merge user entries over bundled ones by id; unknown ids are appended in user order."""
    merged: dict[str, dict] = {}
    for entry in bundled:
        merged[str(entry.get("id"))] = entry
    for entry in user:
        key = str(entry.get("id"))
        merged[key] = _deep_merge(merged[key], entry) if key in merged else entry
    return list(merged.values())


def load_catalog_from_yaml(
    bundled_path: Path | None = None,
    user_path: Path | None = None,
) -> list[CatalogExercise] | None:
    """Return the catalog loaded from the bundled and user YAML files.

    Paths default to the bundled catalog.yaml and ~/.class-planner/catalog.yaml.
    Entries that fail validation are skipped with a warning.

    Returns None (rather than raising) when no exercise could be loaded,
    so the registry can report the problem.
    """
    bundled_path = bundled_path or get_bundled_catalog_path()
    user_path = user_path or get_user_catalog_path()

    bundled = _raw_entries(bundled_path) if bundled_path is not None else []
    user = _raw_entries(user_path) if user_path is not None else []

    result: list[CatalogExercise] = []
    seen_names: set[str] = set()
    for raw in merge_catalog_entries(bundled, user):
        try:
            ex = exercise_from_dict(raw)
        except (ValueError, TypeError) as exc:
            warnings.warn(
                f"class-planner: skipping catalog exercise {raw.get('id')!r}: {exc}",
                stacklevel=2,
            )
            continue
        if ex.name in seen_names:
            warnings.warn(
                f"class-planner: duplicate catalog name {ex.name!r} (id {ex.id!r})",
                stacklevel=2,
            )
        seen_names.add(ex.name)
        result.append(ex)

    return result if result else None
