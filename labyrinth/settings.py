"""Maze configuration resolution for the host.

Precedence (lowest to highest):
    1. MazeConfig dataclass defaults
    2. Environment variables (MAZE_WIDTH, MAZE_HEIGHT, ...)
    3. Flask app.config keys of the same names
    4. GameConfig row ``maze_defaults`` (JSON object keyed by MazeConfig field)
    5. Explicit per-room overrides

Malformed or out-of-range values from layers 2-4 are skipped key by key (each
field is validated on its own) so one bad entry does not take the whole layer
down. Overrides are not coerced; the resulting config
is validated and raises MazeConfigError for bad explicit input.
"""

from __future__ import annotations

import json
import os
from typing import Any, Callable, Dict, Mapping, Optional

from flask import current_app, has_app_context
from sqlalchemy.exc import SQLAlchemyError

from .logging_utils import get_logger
from .maze.config import MazeConfig

MAZE_DEFAULTS_KEY = "maze_defaults"
MAX_DIMENSION = 200

_log = get_logger("settings")


def _to_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {v!r}")


def _to_pattern(v: Any) -> str:
    return str(v).strip().lower()


# field -> (setting name, coercion)
FIELDS: Dict[str, tuple] = {
    "width": ("MAZE_WIDTH", int),
    "height": ("MAZE_HEIGHT", int),
    "cell_size": ("MAZE_CELL_SIZE", float),
    "shift_interval": ("MAZE_SHIFT_INTERVAL", float),
    "shift_chance": ("MAZE_SHIFT_CHANCE", float),
    "pattern": ("MAZE_PATTERN", _to_pattern),
    "enable_shifting": ("MAZE_ENABLE_SHIFTING", _to_bool),
}


def _coerce_layer(source: Mapping[str, Any], key_for: Callable[[str, str], str], layer: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field, (setting, conv) in FIELDS.items():
        key = key_for(field, setting)
        if key not in source or source[key] in (None, ""):
            continue
        try:
            value = conv(source[key])
            # MazeConfigError is a ValueError: out-of-range values drop like unparsable ones
            MazeConfig().replace(**{field: value}).validate()
            out[field] = value
        except (TypeError, ValueError):
            _log.warn(event="config_value_ignored", layer=layer, key=key, value=source[key])
    return out


def _env_layer() -> Dict[str, Any]:
    return _coerce_layer(os.environ, lambda f, s: s, "env")


def _app_layer() -> Dict[str, Any]:
    if not has_app_context():
        return {}
    return _coerce_layer(current_app.config, lambda f, s: s, "app_config")


def _db_layer() -> Dict[str, Any]:
    if not has_app_context():
        return {}
    from .models import GameConfig

    try:
        raw = GameConfig.get(MAZE_DEFAULTS_KEY)
    except SQLAlchemyError as exc:
        # Table may not exist yet on a fresh database
        _log.warn(event="config_db_unavailable", error=type(exc).__name__)
        return {}
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        _log.warn(event="config_value_ignored", layer="db", key=MAZE_DEFAULTS_KEY)
        return {}
    if not isinstance(data, dict):
        return {}
    return _coerce_layer(data, lambda f, s: f, "db")


def resolve_maze_config(overrides: Optional[Mapping[str, Any]] = None) -> MazeConfig:
    """Merge all configuration layers into a validated MazeConfig."""
    merged: Dict[str, Any] = {}
    for layer in (_env_layer(), _app_layer(), _db_layer()):
        merged.update(layer)
    config = MazeConfig().replace(**merged)
    if overrides:
        config = config.replace(**overrides)
    return config.validate()


__all__ = ["resolve_maze_config", "MAZE_DEFAULTS_KEY", "MAX_DIMENSION", "FIELDS"]
