"""Base-structure generators, one per ``PatternType``.

Every generator exposes ``fill(grid, rng) -> grid`` and starts from the all-wall
grid produced by ``GridModel.initialize``. Only the spanning tree is connected
by construction; the others are visual variety and rely on the solvability
validator for connectivity.
"""
from __future__ import annotations

import math
import random
from enum import Enum
from typing import Dict, Optional

from .grid import GridModel
from .spanning_tree import SpanningTreeGenerator
from .tiles import PATH


class PatternType(str, Enum):
    SPANNING_TREE = "spanning_tree"
    GEOMETRIC = "geometric"
    CONCENTRIC = "concentric"
    SYMMETRIC = "symmetric"


def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


class GeometricPattern:
    spacing = 3

    def fill(self, grid: GridModel, rng: random.Random) -> GridModel:
        s = self.spacing
        w, h = grid.width, grid.height
        for y in range(s, h, s):
            for x in range(w):
                grid.set(x, y, PATH)
        for x in range(s, w, s):
            for y in range(h):
                grid.set(x, y, PATH)
        # Diagonal connectors
        for i in range(math.ceil(w / 3)):
            sx = s + (i * s * 2) % w
            sy = s + (i * s) % h
            if sx < w - s and sy < h - s:
                for j in range(s):
                    grid.set(sx + j, sy + j, PATH)
        # Zigzags: across, down, back
        for i in range(math.ceil(w / 4)):
            sx = s * 2 + (i * s * 3) % w
            sy = s * 2 + (i * s * 2) % h
            if sx < w - s * 2 and sy < h - s * 2:
                for j in range(s):
                    grid.set(sx + j, sy, PATH)
                    grid.set(sx + s, sy + j, PATH)
                    grid.set(sx + s - j, sy + s, PATH)
        # Junctions: cleared centre plus 0-4 independently chosen arms
        for y in range(s, h, s * 2):
            for x in range(s, w, s * 2):
                grid.set(x, y, PATH)
                for dx, dy in ((0, 1), (1, 0), (0, -1), (-1, 0)):
                    if rng.random() < 0.5:
                        for step in range(1, s + 1):
                            grid.set(x + dx * step, y + dy * step, PATH)
        return grid


class ConcentricPattern:
    ring_step = 3
    radials = 8

    def fill(self, grid: GridModel, rng: random.Random) -> GridModel:
        cx, cy = grid.width // 2, grid.height // 2
        max_radius = min(cx, cy) - 1
        for radius in range(2, max_radius + 1, self.ring_step):
            self._ring(grid, cx, cy, radius)
        for i in range(self.radials):
            angle = i * 2 * math.pi / self.radials
            self._ray(grid, cx, cy, 0, max_radius, angle)
        for radius in range(3, max_radius, self.ring_step):
            connections = rng.randint(4, 7)
            for i in range(connections):
                angle = i * 2 * math.pi / connections + rng.random() * math.pi / 4
                self._ray(grid, cx, cy, radius, radius + self.ring_step, angle)
        return grid

    @staticmethod
    def _ring(grid: GridModel, cx: int, cy: int, radius: int) -> None:
        steps = int(math.ceil(2 * math.pi / 0.1))
        for k in range(steps):
            angle = k * 0.1
            grid.set(_round_half_up(cx + radius * math.cos(angle)), _round_half_up(cy + radius * math.sin(angle)), PATH)

    @staticmethod
    def _ray(grid: GridModel, cx: int, cy: int, r_from: int, r_to: int, angle: float) -> None:
        for r in range(r_from, r_to + 1):
            grid.set(_round_half_up(cx + r * math.cos(angle)), _round_half_up(cy + r * math.sin(angle)), PATH)


class SymmetricPattern:
    connectors = 10

    @staticmethod
    def _open(x: int, y: int) -> bool:
        return (x % 3 == 0 and y % 2 == 0) or (x % 4 == 0 and y % 3 == 0) or x == y or x == y + 2

    def fill(self, grid: GridModel, rng: random.Random) -> GridModel:
        w, h = grid.width, grid.height
        for x in range(w // 2):
            for y in range(h // 2):
                if self._open(x, y):
                    mx, my = w - 1 - x, h - 1 - y
                    grid.set(x, y, PATH)
                    grid.set(mx, y, PATH)
                    grid.set(x, my, PATH)
                    grid.set(mx, my, PATH)
        # Full-span lines so quadrants do not end up isolated
        for _ in range(self.connectors):
            x = int(rng.random() * (w / 2))
            y = int(rng.random() * (h / 2))
            if rng.random() < 0.5:
                for j in range(w):
                    grid.set(j, y, PATH)
            else:
                for j in range(h):
                    grid.set(x, j, PATH)
        return grid


_REGISTRY: Dict[PatternType, type] = {
    PatternType.SPANNING_TREE: SpanningTreeGenerator,
    PatternType.GEOMETRIC: GeometricPattern,
    PatternType.CONCENTRIC: ConcentricPattern,
    PatternType.SYMMETRIC: SymmetricPattern,
}


def pattern_for(pattern: PatternType | str):
    """Return a fresh generator for the given pattern (enum or name)."""
    return _REGISTRY[PatternType(pattern)]()


def choose_pattern(rng: random.Random, requested: Optional[str] = None) -> PatternType:
    if requested is not None:
        return PatternType(requested)
    return rng.choice(list(PatternType))


__all__ = [
    "PatternType",
    "GeometricPattern",
    "ConcentricPattern",
    "SymmetricPattern",
    "pattern_for",
    "choose_pattern",
]
