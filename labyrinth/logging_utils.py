"""Minimal structured event logging.

Emits one line per event as key=value pairs (or a compact JSON object when
``LABYRINTH_LOG_JSON`` is enabled) with a timestamp, level and logger name.
The maze engine and the room host both log through this helper so tick loop
output stays greppable.

Usage:
    from labyrinth.logging_utils import get_logger
    log = get_logger("maze")
    log.info(event="maze_shifted", room="ABCD", cells=12)

Non-numeric values are str()'d with spaces replaced by underscores. Reserved
keys: level, ts, logger.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}


def _current_level() -> int:
    return LEVELS.get(os.getenv("LABYRINTH_LOG_LEVEL", "info").lower(), 20)


def _json_mode() -> bool:
    return os.getenv("LABYRINTH_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")


def _format(level: str, **fields) -> str:
    if _json_mode():
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        try:
            return json.dumps(rec, separators=(",", ":"), default=str)
        except (TypeError, ValueError):
            return json.dumps({"level": level, "ts": int(time.time()), "error": "json_encode_failed"})
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            parts.append(f"{k}={str(v).replace(' ', '_')}")
    return " ".join(parts)


class EventLogger:
    def __init__(self, name: str | None = None):
        self.name = name or "labyrinth"

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < _current_level():
            return
        fields.setdefault("logger", self.name)
        print(_format(lvl, **fields), file=sys.stderr if lvl == "error" else sys.stdout)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE: dict[str, EventLogger] = {}


def get_logger(name: str) -> EventLogger:
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = EventLogger(name)
    return _LOGGER_CACHE[name]


log = get_logger("labyrinth")
