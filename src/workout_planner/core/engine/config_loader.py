"""
YAML → planner config loader.

Merges optional user overrides from ``<app dir>/planner.yaml`` over the
Python defaults in config.py.  Only the selection tables are overridable:

    exercise_counts:
      beginner: {full: 5}
    rep_ranges:
      strength: "3-5"
    rest_seconds:
      fat_loss: 45

Usage:
    from workout_planner.core.engine.config_loader import load_planner_config
    cfg = load_planner_config()
    count = cfg["exercise_counts"]["advanced"]["upper"]

If the user file has parse errors, a warning is issued and the file is
ignored (defaults are returned).
"""

from __future__ import annotations

import copy
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import EXERCISE_COUNTS, REP_RANGES, REST_SECONDS

APP_DIR_ENV = "WORKOUT_PLANNER_HOME"

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; warn and return {} when it cannot be used."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"workout-planner: ignoring {path} ({exc})", stacklevel=2)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        warnings.warn(f"workout-planner: ignoring {path} (not a mapping)", stacklevel=2)
        return {}
    return data


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


def get_app_dir() -> Path:
    """Return the per-user data directory (``$WORKOUT_PLANNER_HOME`` or ~/.workout-planner)."""
    override = os.environ.get(APP_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".workout-planner"


def get_user_config_path() -> Path | None:
    """Return <app dir>/planner.yaml if it exists, else None."""
    p = get_app_dir() / "planner.yaml"
    return p if p.exists() else None


def default_planner_config() -> dict[str, Any]:
    """Return a fresh copy of the built-in selection tables."""
    return {
        "exercise_counts": copy.deepcopy(EXERCISE_COUNTS),
        "rep_ranges": dict(REP_RANGES),
        "rest_seconds": dict(REST_SECONDS),
    }


def load_planner_config(path: str | Path | None = None) -> dict[str, Any]:
    """
    Load planner configuration.

    Load order (later overrides earlier):
    1. Built-in defaults from config.py
    2. ``path`` if given, else the user file at <app dir>/planner.yaml

    Returns:
        Merged dict with ``exercise_counts``, ``rep_ranges`` and ``rest_seconds``.
    """
    config = default_planner_config()

    user = Path(path) if path is not None else get_user_config_path()
    if user is not None and user.exists():
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            config = _deep_merge(config, user_cfg)

    return config
