from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


class MazeConfigError(ValueError):
    """Raised for invalid maze parameters; no partial maze is produced."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


PATTERN_NAMES = ("spanning_tree", "geometric", "concentric", "symmetric")


@dataclass
class MazeConfig:
    width: int = 20
    height: int = 20
    cell_size: float = 2.0
    shift_interval: float = 60.0  # seconds of simulated time between shifts
    shift_chance: float = 0.2
    exit_clearance: float = 3.0  # exclusion zone radius around the exit
    pattern: Optional[str] = None  # None => uniform random per maze
    seed: Optional[int] = None
    enable_shifting: bool = True

    def validate(self) -> "MazeConfig":
        if not isinstance(self.width, int) or isinstance(self.width, bool) or self.width <= 0:
            raise MazeConfigError("width", "must be a positive integer")
        if not isinstance(self.height, int) or isinstance(self.height, bool) or self.height <= 0:
            raise MazeConfigError("height", "must be a positive integer")
        if self.cell_size <= 0:
            raise MazeConfigError("cell_size", "must be positive")
        if self.shift_interval <= 0:
            raise MazeConfigError("shift_interval", "must be positive")
        if not 0.0 <= self.shift_chance <= 1.0:
            raise MazeConfigError("shift_chance", "must be within [0, 1]")
        if self.exit_clearance < 0:
            raise MazeConfigError("exit_clearance", "must not be negative")
        if self.pattern is not None and self.pattern not in PATTERN_NAMES:
            raise MazeConfigError("pattern", f"unknown pattern {self.pattern!r}")
        return self

    def replace(self, **overrides: Any) -> "MazeConfig":
        """Return a copy with known keys overridden; None values are ignored."""
        known = {f.name for f in fields(self)}
        data = self.to_dict()
        for k, v in overrides.items():
            if k in known and v is not None:
                data[k] = v
        return MazeConfig(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


__all__ = ["MazeConfig", "MazeConfigError", "PATTERN_NAMES"]
