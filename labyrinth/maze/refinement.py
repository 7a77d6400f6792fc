"""Rule-based embellishment layered onto the base structure.

Four ordered, independent local passes:
    * chambers     - clear a few rectangular rooms, drop pillars into big ones
    * features     - standalone pillars in open junctions, 1-wide archways
    * corridors    - extend short straight runs and widen them sideways
    * noise        - local neighbour-count rules that open cramped walls and
                     thin isolated path stubs

None of the passes touches a cell inside the exit exclusion zone. Connectivity
is not a concern here; the solvability validator runs right afterwards.
Each pass bumps its operation counters in the supplied metrics dict;
``run_step`` also records the cells a pass changed under ``cells_refined``.
"""
from __future__ import annotations

import random
from typing import Any, Dict, Optional

from .grid import ExclusionZone, GridModel
from .tiles import DIRECTIONS, PATH, WALL

CHAMBER_EXIT_CLEARANCE = 5.0
WIDEN_CHANCE = 0.7
THIN_CHANCE = 0.3


def _randint(rng: random.Random, lo: int, hi: int) -> Optional[int]:
    """rng.randint that yields None for an empty range (tiny grids)."""
    if hi < lo:
        return None
    return rng.randint(lo, hi)


def _put(grid: GridModel, zone: ExclusionZone, x: int, y: int, state: bool) -> bool:
    if zone.contains(x, y):
        return False
    return grid.set(x, y, state)


def build_chambers(grid: GridModel, zone: ExclusionZone, rng: random.Random, metrics: Dict[str, Any]) -> None:
    count = rng.randint(2, 4)
    for _ in range(count):
        cx = _randint(rng, 2, grid.width - 3)
        cy = _randint(rng, 2, grid.height - 3)
        if cx is None or cy is None:
            return
        cw = rng.randint(3, 5)
        ch = rng.randint(3, 5)
        if zone.distance(cx, cy) < CHAMBER_EXIT_CLEARANCE:
            continue
        for x in range(cx - cw // 2, cx + cw // 2 + 1):
            for y in range(cy - ch // 2, cy + ch // 2 + 1):
                _put(grid, zone, x, y, PATH)
        metrics["chambers_built"] += 1
        if cw >= 4 and ch >= 4:
            for _ in range(rng.randint(1, 2)):
                px = cx + rng.randint(-1, 1)
                py = cy + rng.randint(-1, 1)
                if _put(grid, zone, px, py, WALL):
                    metrics["pillars_placed"] += 1


def add_architectural_features(grid: GridModel, zone: ExclusionZone, rng: random.Random, metrics: Dict[str, Any]) -> None:
    w, h = grid.width, grid.height
    for _ in range(w * h // 40):
        x = _randint(rng, 1, w - 2)
        y = _randint(rng, 1, h - 2)
        if x is None or y is None:
            break
        # only in open junctions so no neighbour loses its last opening
        if grid.is_path(x, y) and grid.count_open_neighbors(x, y) >= 3:
            if _put(grid, zone, x, y, WALL):
                metrics["pillars_placed"] += 1
    for _ in range(w * h // 60):
        x = _randint(rng, 2, w - 3)
        y = _randint(rng, 2, h - 3)
        if x is None or y is None:
            break
        dx, dy = (1, 0) if rng.random() < 0.5 else (0, 1)
        run = [(x, y), (x + dx, y + dy), (x + 2 * dx, y + 2 * dy)]
        if any(zone.contains(cx, cy) for cx, cy in run):
            continue
        (ax, ay), (mx, my), (bx, by) = run
        if grid.is_path(ax, ay) and grid.is_path(bx, by):
            grid.set(ax, ay, WALL)
            grid.set(bx, by, WALL)
            grid.set(mx, my, PATH)
            metrics["archways_built"] += 1


def widen_corridors(grid: GridModel, zone: ExclusionZone, rng: random.Random, metrics: Dict[str, Any]) -> None:
    w, h = grid.width, grid.height
    for _ in range(w * h // 30):
        sx = _randint(rng, 1, w - 2)
        sy = _randint(rng, 1, h - 2)
        if sx is None or sy is None:
            break
        if not grid.is_path(sx, sy):
            continue
        dx, dy = rng.choice(DIRECTIONS)
        length = rng.randint(2, 5)
        for j in range(length):
            x, y = sx + dx * j, sy + dy * j
            if not grid.in_bounds(x, y):
                continue
            _put(grid, zone, x, y, PATH)
            # perpendicular widening
            for px, py in ((x + dy, y + dx), (x - dy, y - dx)):
                if grid.in_bounds(px, py) and rng.random() < WIDEN_CHANCE:
                    _put(grid, zone, px, py, PATH)
        metrics["corridors_widened"] += 1


def _thinning_strands_neighbor(grid: GridModel, x: int, y: int) -> bool:
    """True if walling (x, y) would leave an open neighbour with no other opening."""
    for nx, ny in grid.open_neighbors(x, y):
        others = sum(1 for ax, ay in grid.open_neighbors(nx, ny) if (ax, ay) != (x, y))
        if others < 1:
            return True
    return False


def apply_noise(grid: GridModel, zone: ExclusionZone, rng: random.Random, metrics: Dict[str, Any]) -> None:
    w, h = grid.width, grid.height
    for _ in range(w * h // 10):
        x = _randint(rng, 1, w - 2)
        y = _randint(rng, 1, h - 2)
        if x is None or y is None:
            break
        if zone.contains(x, y):
            continue
        open_count = grid.count_open_neighbors(x, y)
        if grid.is_wall(x, y) and open_count >= 3:
            grid.set(x, y, PATH)
            metrics["noise_flips"] += 1
        elif grid.is_path(x, y) and open_count <= 1:
            if not _thinning_strands_neighbor(grid, x, y) and rng.random() < THIN_CHANCE:
                grid.set(x, y, WALL)
                metrics["noise_flips"] += 1


REFINEMENT_STEPS = (
    ("chambers", build_chambers),
    ("features", add_architectural_features),
    ("corridors", widen_corridors),
    ("noise", apply_noise),
)


def run_step(name: str, step, grid: GridModel, zone: ExclusionZone, rng: random.Random, metrics: Dict[str, Any]) -> int:
    before = grid.snapshot()
    step(grid, zone, rng, metrics)
    changed = len(grid.diff(before))
    metrics["cells_refined"][name] = changed
    return changed


def refine(grid: GridModel, zone: ExclusionZone, rng: random.Random, metrics: Dict[str, Any]) -> GridModel:
    for name, step in REFINEMENT_STEPS:
        run_step(name, step, grid, zone, rng, metrics)
    return grid


__all__ = [
    "build_chambers",
    "add_architectural_features",
    "widen_corridors",
    "apply_noise",
    "refine",
    "run_step",
    "REFINEMENT_STEPS",
]
