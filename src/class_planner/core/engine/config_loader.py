"""
YAML → scoring config loader.

Loads suggestion weights from scoring.yaml (bundled with the package) and
optionally merges user overrides from ~/.class-planner/scoring.yaml.

Usage:
    from class_planner.core.engine.config_loader import load_scoring_weights
    weights = load_scoring_weights()
    suggest_next(items, catalog, 45, prefs, weights=weights)

If a YAML file cannot be read or parsed, a warning is issued and the file is
ignored; every missing key falls back to the defaults in config.py.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..suggestions import ScoringWeights

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; return {} (with a warning) on any read or parse error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"class-planner: ignoring {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled scoring.yaml, or None if not found."""
    ref = importlib.resources.files("class_planner").joinpath("scoring.yaml")
    candidate = Path(str(ref))
    return candidate if candidate.is_file() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.class-planner/scoring.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".class-planner" / "scoring.yaml"
    return p if p.exists() else None


def load_scoring_config() -> dict[str, Any]:
    """
    Load and merge scoring configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/class_planner/scoring.yaml
    2. User override at ~/.class-planner/scoring.yaml

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = get_user_yaml_path()
    if user is not None:
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            config = _deep_merge(config, user_cfg)

    return config


def load_scoring_weights() -> ScoringWeights:
    """
    Return ScoringWeights built from the merged YAML configuration.

    Values that are not numbers, or that break the ranking rules checked by
    ScoringWeights, are rejected as a whole with a warning; the defaults
    from config.py are used instead.
    """
    try:
        return ScoringWeights.from_config(load_scoring_config())
    except (TypeError, ValueError) as exc:
        warnings.warn(f"class-planner: ignoring scoring overrides ({exc})", stacklevel=2)
        return ScoringWeights()
