"""Authoritative wall/path grid.

Cells are stored column-major (``cells[x][y]``) as booleans, ``True`` meaning
wall, which is also the wire shape clients receive. Every accessor branches on
bounds instead of raising: neighbour enumeration near the edges hits
out-of-range coordinates constantly and must stay cheap.
"""

from __future__ import annotations

import math
from typing import Iterator, List, Optional, Tuple

from .tiles import DIRECTIONS, WALL

Coord = Tuple[int, int]


class GridModel:
    __slots__ = ("width", "height", "cells")

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.cells: List[List[bool]] = []
        self.initialize()

    def initialize(self, width: Optional[int] = None, height: Optional[int] = None) -> None:
        """Reset every cell to WALL, optionally resizing first."""
        if width is not None:
            self.width = width
        if height is not None:
            self.height = height
        self.cells = [[WALL for _ in range(self.height)] for _ in range(self.width)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Optional[bool]:
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.cells[x][y]
        return None

    def set(self, x: int, y: int, state: bool) -> bool:
        """Set a cell; returns True only when the stored state changed."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return False
        state = bool(state)
        if self.cells[x][y] == state:
            return False
        self.cells[x][y] = state
        return True

    def is_wall(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height and bool(self.cells[x][y])

    def is_path(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height and not self.cells[x][y]

    def orthogonal_neighbors(self, x: int, y: int) -> List[Coord]:
        return [(x + dx, y + dy) for dx, dy in DIRECTIONS if self.in_bounds(x + dx, y + dy)]

    def open_neighbors(self, x: int, y: int) -> List[Coord]:
        return [(nx, ny) for nx, ny in self.orthogonal_neighbors(x, y) if not self.cells[nx][ny]]

    def count_open_neighbors(self, x: int, y: int) -> int:
        count = 0
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height and not self.cells[nx][ny]:
                count += 1
        return count

    def iter_cells(self) -> Iterator[Coord]:
        """Fixed scan order: x outer, y inner."""
        for x in range(self.width):
            for y in range(self.height):
                yield x, y

    def iter_interior(self) -> Iterator[Coord]:
        for x in range(1, self.width - 1):
            for y in range(1, self.height - 1):
                yield x, y

    def path_count(self) -> int:
        return sum(1 for column in self.cells for cell in column if not cell)

    def snapshot(self) -> List[List[bool]]:
        return [list(column) for column in self.cells]

    def copy(self) -> "GridModel":
        clone = GridModel.__new__(GridModel)
        clone.width = self.width
        clone.height = self.height
        clone.cells = self.snapshot()
        return clone

    def diff(self, before: List[List[bool]]) -> List[Tuple[int, int, bool]]:
        """Cells that differ from an earlier snapshot as (x, y, is_wall_now)."""
        changes = []
        for x, y in self.iter_cells():
            if before[x][y] != self.cells[x][y]:
                changes.append((x, y, self.cells[x][y]))
        return changes


class ExclusionZone:
    """Cells strictly closer than ``radius`` to ``center`` (Euclidean)."""

    __slots__ = ("center", "radius")

    def __init__(self, center: Coord, radius: float = 3.0):
        self.center = center
        self.radius = radius

    def contains(self, x: int, y: int) -> bool:
        cx, cy = self.center
        return (x - cx) ** 2 + (y - cy) ** 2 < self.radius * self.radius

    def distance(self, x: int, y: int) -> float:
        cx, cy = self.center
        return math.hypot(x - cx, y - cy)


__all__ = ["GridModel", "ExclusionZone", "Coord"]
