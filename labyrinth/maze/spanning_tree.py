"""Randomized Prim growth on the two-step lattice.

Carved cells sit two steps apart so there is always a carvable wall between
them; connecting a frontier cell also opens that midpoint. The result is a
cycle-free spanning tree over every lattice cell sharing the start's parity.
"""
from __future__ import annotations

import random
from typing import List, Optional, Set, Tuple

from .grid import Coord, GridModel
from .tiles import DIRECTIONS, PATH


def _add_frontiers(grid: GridModel, cell: Coord, frontier: List[Coord], listed: Set[Coord]) -> None:
    x, y = cell
    for dx, dy in DIRECTIONS:
        fx, fy = x + dx * 2, y + dy * 2
        if grid.is_wall(fx, fy) and (fx, fy) not in listed:
            frontier.append((fx, fy))
            listed.add((fx, fy))


def _carved_lattice_neighbors(grid: GridModel, cell: Coord) -> List[Coord]:
    x, y = cell
    return [(x + dx * 2, y + dy * 2) for dx, dy in DIRECTIONS if grid.is_path(x + dx * 2, y + dy * 2)]


class SpanningTreeGenerator:
    def __init__(self, start: Optional[Coord] = None):
        self.start = start

    def fill(self, grid: GridModel, rng: random.Random) -> GridModel:
        start = self.start
        if start is None:
            start = (rng.randrange(grid.width), rng.randrange(grid.height))
        grid.set(start[0], start[1], PATH)
        frontier: List[Coord] = []
        listed: Set[Coord] = set()
        _add_frontiers(grid, start, frontier, listed)
        while frontier:
            # swap-remove keeps the pick uniform and O(1)
            idx = rng.randrange(len(frontier))
            frontier[idx], frontier[-1] = frontier[-1], frontier[idx]
            cell = frontier.pop()
            neighbors = _carved_lattice_neighbors(grid, cell)
            if not neighbors:
                continue
            nx, ny = rng.choice(neighbors)
            cx, cy = cell
            grid.set(cx, cy, PATH)
            grid.set((cx + nx) // 2, (cy + ny) // 2, PATH)
            _add_frontiers(grid, cell, frontier, listed)
        return grid


def lattice_cells(grid: GridModel, start: Coord) -> List[Tuple[int, int]]:
    """All cells sharing the start cell's parity on both axes."""
    sx, sy = start
    return [(x, y) for x in range(sx % 2, grid.width, 2) for y in range(sy % 2, grid.height, 2)]


__all__ = ["SpanningTreeGenerator", "lattice_cells"]
