"""Maze aggregate: generation pipeline, runtime shifting, and the wire value.

Generation phases (``Maze.generate``):
    * Reset the grid to all walls (dimensions are fixed for the instance).
    * Fill the base structure with the chosen pattern (spanning tree by
      randomized Prim, or the geometric / concentric / symmetric builders).
    * Place the exit on a random boundary cell and open its inward neighbour.
    * Run the four refinement steps (chambers, features, corridors, noise).
    * Validate solvability, carving repair corridors where needed.

Runtime (``Maze.update``): the owning room calls ``update(delta_ms)`` every
tick; when the shift interval elapses the scheduler mutates a batch of cells
and re-validates. ``update`` returns True when any cell changed, which is the
room's cue to broadcast the new maze.

Invariants enforced by code & tests:
    * Every PATH cell reaches the exit through 4-connected PATH cells.
    * The exit is a boundary cell and is PATH after every generation and shift.
    * Width and height never change for the lifetime of the instance.
    * Cells closer than ``exit_clearance`` to the exit are never touched by
      refinement or by a shift batch. Only the solvability repair may open
      them, since its corridor always ends at the exit.

Each Maze belongs to exactly one room. It is not thread-safe by itself; the
host must only touch it from the task processing that room's tick.

Public contract consumed elsewhere:
    Maze(MazeConfig(...)) or Maze(width=.., height=.., seed=..)
    Attributes: grid (GridModel), width, height, cell_size, exit_position,
    pattern, seed, state, metrics, last_changes
    to_json() -> {width, height, cellSize, grid[x][y] (True = wall),
                  exitPosition {x, y}, pattern, seed}
"""

from __future__ import annotations

import math
import random
import secrets
import time
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..logging_utils import get_logger
from .config import MazeConfig
from .grid import Coord, ExclusionZone, GridModel
from .metrics import init_metrics
from .patterns import PatternType, choose_pattern, pattern_for
from .refinement import REFINEMENT_STEPS, run_step
from .shifting import Change, ShiftScheduler
from .solvability import ValidationReport, ensure_solvable
from .tiles import PATH

_log = get_logger("maze")


class MazeState(str, Enum):
    UNINITIALIZED = "uninitialized"
    GENERATED = "generated"
    SHIFTING = "shifting"
    DISCARDED = "discarded"


class MazeStateError(RuntimeError):
    """Operation not allowed in the maze's current lifecycle state."""


class Maze:
    def __init__(self, config: MazeConfig | None = None, *, rng: random.Random | None = None, **overrides):
        # Accept a config object, keyword overrides, or both (overrides win)
        config = (config or MazeConfig()).replace(**overrides).validate()
        self._owns_rng = rng is None
        if rng is None:
            if config.seed is None:
                config.seed = secrets.randbelow(2**31)
            # Local RNG so other randomness in the process never perturbs generation
            rng = random.Random(config.seed)
        self.config = config
        self.seed = config.seed
        self._rng = rng
        # Spawns draw from their own stream so joins never perturb wall shifts
        self._spawn_rng = random.Random(self.seed)
        self.width = config.width
        self.height = config.height
        self.cell_size = float(config.cell_size)
        self.grid = GridModel(self.width, self.height)
        self.exit_position: Optional[Coord] = None
        self.zone: Optional[ExclusionZone] = None
        self.pattern: Optional[PatternType] = None
        self.scheduler: Optional[ShiftScheduler] = None
        self.state = MazeState.UNINITIALIZED
        self.metrics: Dict[str, Any] = init_metrics()
        self.last_report: Optional[ValidationReport] = None
        self.last_changes: List[Change] = []

    # ------------------------------------------------------------------
    # Generation Pipeline
    # ------------------------------------------------------------------
    def generate(self) -> Dict[str, Any]:
        if self.state is MazeState.DISCARDED:
            raise MazeStateError("cannot generate a discarded maze")
        start = time.perf_counter()
        phase_times: Dict[str, int] = {}

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter()
            r = fn(*a, **k)
            phase_times[label] = int((time.perf_counter() - ps) * 1000)
            return r

        self.metrics = init_metrics()
        self.grid.initialize(self.width, self.height)
        self.pattern = choose_pattern(self._rng, self.config.pattern)
        _phase("pattern", pattern_for(self.pattern).fill, self.grid, self._rng)
        _phase("exit", self._place_exit)
        self.zone = ExclusionZone(self.exit_position, self.config.exit_clearance)
        for name, step in REFINEMENT_STEPS:
            _phase(name, run_step, name, step, self.grid, self.zone, self._rng, self.metrics)
        report = _phase("validate", ensure_solvable, self.grid, self.exit_position)
        self._record_report(report)
        self.scheduler = ShiftScheduler(
            self.zone,
            self._rng,
            interval=self.config.shift_interval,
            chance=self.config.shift_chance,
            enabled=self.config.enable_shifting,
        )
        self.last_changes = []
        self.state = MazeState.GENERATED
        self.metrics["runtime_ms"] = int((time.perf_counter() - start) * 1000)
        self.metrics["phase_ms"] = phase_times
        _log.info(
            event="maze_generated",
            seed=self.seed,
            width=self.width,
            height=self.height,
            pattern=self.pattern.value,
            repairs=report.repairs,
            runtime_ms=self.metrics["runtime_ms"],
        )
        return self.to_json()

    def regenerate(self) -> Dict[str, Any]:
        """Replace the grid wholesale with a fresh generation (same dimensions).

        A maze that owns its RNG draws a new seed, so the reported ``seed``
        always reproduces the current grid. An injected RNG just continues.
        """
        if self._owns_rng:
            self.seed = self.config.seed = secrets.randbelow(2**31)
            self._rng = random.Random(self.seed)
            self._spawn_rng = random.Random(self.seed)
        return self.generate()

    def _place_exit(self) -> None:
        w, h = self.width, self.height
        side = self._rng.randrange(4)
        if side == 0:  # top
            ex, ey = self._rng.randrange(w), h - 1
        elif side == 1:  # right
            ex, ey = w - 1, self._rng.randrange(h)
        elif side == 2:  # bottom
            ex, ey = self._rng.randrange(w), 0
        else:  # left
            ex, ey = 0, self._rng.randrange(h)
        self.exit_position = (ex, ey)
        self.grid.set(ex, ey, PATH)
        # Open the first step inward so the exit is never a sealed pocket
        ix, iy = ex, ey
        if ex == 0:
            ix += 1
        elif ex == w - 1:
            ix -= 1
        elif ey == 0:
            iy += 1
        elif ey == h - 1:
            iy -= 1
        self.grid.set(ix, iy, PATH)

    def _record_report(self, report: ValidationReport) -> None:
        self.last_report = report
        self.metrics["repairs_performed"] += report.repairs
        self.metrics["cells_carved"] += len(report.carved)
        if report.degenerate:
            self.metrics["degenerate_validations"] += 1

    # ------------------------------------------------------------------
    # Runtime shifting
    # ------------------------------------------------------------------
    def update(self, delta_ms: float) -> bool:
        """Advance the shift countdown; True when a firing changed the grid."""
        if self.state is not MazeState.GENERATED:
            return False
        if not self.scheduler.tick(delta_ms):
            return False
        return bool(self._shift())

    def shift_now(self) -> List[Change]:
        if self.state is not MazeState.GENERATED:
            raise MazeStateError(f"cannot shift a maze in state {self.state.value}")
        self.scheduler.reset()
        return self._shift()

    def _shift(self) -> List[Change]:
        before = self.grid.snapshot()
        self.state = MazeState.SHIFTING
        try:
            result = self.scheduler.fire(self.grid, self.exit_position)
        finally:
            self.state = MazeState.GENERATED
        self._record_report(result.report)
        self.last_changes = self.grid.diff(before)
        self.metrics["shifts_fired"] += 1
        self.metrics["cells_shifted"] += len(result.changes)
        _log.info(
            event="maze_shifted",
            seed=self.seed,
            batch=len(result.changes),
            repairs=result.report.repairs,
            changed=len(self.last_changes),
        )
        return self.last_changes

    def discard(self) -> None:
        self.state = MazeState.DISCARDED
        if self.scheduler is not None:
            self.scheduler.enabled = False

    # ------------------------------------------------------------------
    # World / grid helpers used by movement, spawning and escape checks
    # ------------------------------------------------------------------
    def world_to_cell(self, wx: float, wz: float) -> Tuple[int, int]:
        return (int(math.floor(wx / self.cell_size)), int(math.floor(wz / self.cell_size)))

    def is_blocked_at(self, wx: float, wz: float) -> bool:
        """Collision query; anything outside the grid is blocked."""
        x, y = self.world_to_cell(wx, wz)
        return not self.grid.is_path(x, y)

    def spawn_position(self, rng: random.Random | None = None) -> Dict[str, float]:
        """Random non-exit PATH cell in world coordinates (y is ground level)."""
        rng = rng or self._spawn_rng
        cells = [
            (x, y) for x, y in self.grid.iter_cells() if not self.grid.cells[x][y] and (x, y) != self.exit_position
        ]
        if not cells:
            return {"x": 0.0, "y": 0.0, "z": 0.0}
        x, y = rng.choice(cells)
        return {"x": x * self.cell_size, "y": 0.0, "z": y * self.cell_size}

    def is_near_exit(self, wx: float, wz: float, radius: float = 3.0) -> bool:
        if self.exit_position is None:
            return False
        ex, ey = self.exit_position
        return math.hypot(wx - ex * self.cell_size, wz - ey * self.cell_size) < radius

    # Convenience outputs
    def to_json(self) -> Dict[str, Any]:
        ex, ey = self.exit_position if self.exit_position is not None else (0, 0)
        return {
            "width": self.width,
            "height": self.height,
            "cellSize": self.cell_size,
            "grid": self.grid.snapshot(),
            "exitPosition": {"x": ex, "y": ey},
            "pattern": self.pattern.value if self.pattern else None,
            "seed": self.seed,
        }

    def to_ascii(self) -> str:
        rows = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                if (x, y) == self.exit_position:
                    row.append("E")
                else:
                    row.append("#" if self.grid.cells[x][y] else ".")
            rows.append("".join(row))
        return "\n".join(rows)


__all__ = ["Maze", "MazeState", "MazeStateError"]

if __name__ == "__main__":  # manual quick smoke
    m = Maze(seed=1234, width=30, height=20)
    m.generate()
    print(m.to_ascii())
    print(m.metrics)
