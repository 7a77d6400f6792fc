"""Runtime wall shifting.

A countdown (seconds of simulated time) is driven by the owning room's tick.
When it runs out the scheduler fires once: every interior cell outside the exit
exclusion zone gets a ``chance`` draw, and a drawn cell becomes a conversion
candidate when

    * WALL with <= 2 open neighbours  -> PATH   (no large open voids)
    * PATH with >= 3 open neighbours  -> WALL   (no severed narrow corridors)

Candidates are collected against the pre-shift grid and applied as one batch,
then the solvability validator repairs whatever the batch disconnected. Only
the batch honours the exclusion zone; a repair corridor may open cells in it.
"""
from __future__ import annotations

import random
from typing import List, NamedTuple, Optional, Tuple

from .grid import ExclusionZone, GridModel
from .solvability import ValidationReport, ensure_solvable
from .tiles import PATH, WALL

Change = Tuple[int, int, bool]  # (x, y, is_wall_now)


class ShiftResult(NamedTuple):
    changes: List[Change]
    report: ValidationReport

    @property
    def changed(self) -> bool:
        return bool(self.changes) or self.report.changed


class ShiftScheduler:
    def __init__(
        self,
        zone: ExclusionZone,
        rng: random.Random,
        *,
        interval: float = 60.0,
        chance: float = 0.2,
        enabled: bool = True,
    ):
        self.zone = zone
        self.rng = rng
        self.interval = interval
        self.chance = chance
        self.enabled = enabled
        self.remaining = interval

    def reset(self) -> None:
        self.remaining = self.interval

    def tick(self, delta_ms: float) -> bool:
        """Advance the countdown; True when a firing is due (and re-arms)."""
        if not self.enabled:
            return False
        self.remaining -= delta_ms / 1000.0
        if self.remaining <= 0:
            self.remaining = self.interval
            return True
        return False

    def collect(self, grid: GridModel) -> List[Change]:
        batch: List[Change] = []
        for x, y in grid.iter_interior():
            if self.zone.contains(x, y):
                continue
            if self.rng.random() >= self.chance:
                continue
            open_count = grid.count_open_neighbors(x, y)
            if grid.cells[x][y]:
                if open_count <= 2:
                    batch.append((x, y, PATH))
            elif open_count >= 3:
                batch.append((x, y, WALL))
        return batch

    def fire(self, grid: GridModel, exit_pos: Optional[Tuple[int, int]] = None) -> ShiftResult:
        exit_pos = exit_pos or self.zone.center
        batch = self.collect(grid)
        for x, y, state in batch:
            grid.set(x, y, state)
        report = ensure_solvable(grid, exit_pos)
        return ShiftResult(batch, report)


__all__ = ["ShiftScheduler", "ShiftResult", "Change"]
