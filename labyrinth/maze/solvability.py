"""Reachability check and deterministic repair.

The guarantee: every PATH cell reaches the exit through 4-connected PATH cells.

Procedure (``ensure_solvable``):
    1. Re-open the exit if anything sealed it.
    2. Scan the grid in fixed order (x outer, y inner) for the first PATH cell
       that is not the exit; that cell is the probe.
    3. BFS from the probe. If the exit is dequeued the probe is fine, otherwise
       carve an L-shaped corridor from the probe to the exit: horizontally
       along the probe's row to the exit's column, then vertically along the
       exit's column to the exit's row. Every traversed cell becomes PATH.
    4. Continue the scan; any later PATH cell still cut off from the exit gets
       the same repair. The exit-side reachable set is grown incrementally so
       the whole procedure stays O(width * height) plus corridor lengths.

The corridor is not a shortest route and is not meant to look good; it only
restores the invariant. A grid that is already solvable is left untouched.
A grid with no non-exit PATH cell is degenerate: repair is skipped and the
condition is reported instead of raised, since a live room must never crash
on a validation pass.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, List, NamedTuple, Optional, Set

from ..logging_utils import get_logger
from .grid import Coord, GridModel
from .tiles import DIRECTIONS, PATH

_log = get_logger("maze")


class ValidationReport(NamedTuple):
    probe: Optional[Coord]
    solvable_before: bool
    carved: List[Coord]
    repairs: int
    degenerate: bool

    @property
    def changed(self) -> bool:
        return bool(self.carved)


def find_probe(grid: GridModel, exit_pos: Coord) -> Optional[Coord]:
    for x, y in grid.iter_cells():
        if not grid.cells[x][y] and (x, y) != exit_pos:
            return (x, y)
    return None


def bfs_reaches(grid: GridModel, start: Coord, goal: Coord) -> bool:
    """Breadth-first search over PATH cells; True once ``goal`` is dequeued."""
    if not grid.is_path(*start):
        return False
    q: Deque[Coord] = deque([start])
    seen = {start}
    while q:
        cur = q.popleft()
        if cur == goal:
            return True
        x, y = cur
        for dx, dy in DIRECTIONS:
            nxt = (x + dx, y + dy)
            if nxt not in seen and grid.is_path(*nxt):
                seen.add(nxt)
                q.append(nxt)
    return False


def _flood(grid: GridModel, seeds: List[Coord], seen: Set[Coord]) -> None:
    q: Deque[Coord] = deque()
    for s in seeds:
        if s not in seen and grid.is_path(*s):
            seen.add(s)
            q.append(s)
    while q:
        x, y = q.popleft()
        for dx, dy in DIRECTIONS:
            nxt = (x + dx, y + dy)
            if nxt not in seen and grid.is_path(*nxt):
                seen.add(nxt)
                q.append(nxt)


def reachable_from(grid: GridModel, origin: Coord) -> Set[Coord]:
    seen: Set[Coord] = set()
    _flood(grid, [origin], seen)
    return seen


def carve_l_corridor(grid: GridModel, start: Coord, goal: Coord) -> List[Coord]:
    """Open an L-shaped corridor start -> goal; returns the cells that changed."""
    carved: List[Coord] = []
    sx, sy = start
    gx, gy = goal
    x = sx
    step = 1 if gx > sx else -1
    while x != gx:
        x += step
        if grid.set(x, sy, PATH):
            carved.append((x, sy))
    y = sy
    step = 1 if gy > sy else -1
    while y != gy:
        y += step
        if grid.set(gx, y, PATH):
            carved.append((gx, y))
    return carved


def ensure_solvable(grid: GridModel, exit_pos: Coord) -> ValidationReport:
    carved: List[Coord] = []
    if grid.set(exit_pos[0], exit_pos[1], PATH):
        carved.append(exit_pos)
    probe = find_probe(grid, exit_pos)
    if probe is None:
        _log.warn(event="degenerate_grid", width=grid.width, height=grid.height, exit=f"{exit_pos[0]},{exit_pos[1]}")
        return ValidationReport(None, False, carved, 0, True)

    solvable_before = bfs_reaches(grid, probe, exit_pos)
    reachable = reachable_from(grid, exit_pos)
    repairs = 0
    for x, y in grid.iter_cells():
        if grid.cells[x][y] or (x, y) in reachable:
            continue
        # (x, y) is an open cell cut off from the exit
        corridor = carve_l_corridor(grid, (x, y), exit_pos)
        carved.extend(corridor)
        repairs += 1
        _flood(grid, [(x, y)] + corridor, reachable)
    if repairs:
        _log.debug(event="solvability_repair", repairs=repairs, carved=len(carved))
    return ValidationReport(probe, solvable_before, carved, repairs, False)


__all__ = [
    "ValidationReport",
    "find_probe",
    "bfs_reaches",
    "reachable_from",
    "carve_l_corridor",
    "ensure_solvable",
]
