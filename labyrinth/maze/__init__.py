"""Public maze package interface.

Pure in-memory engine with no web or database imports, so the same code serves
the authoritative server and any other host that needs the maze value.
"""

from .config import MazeConfig, MazeConfigError, PATTERN_NAMES
from .grid import ExclusionZone, GridModel
from .maze import Maze, MazeState, MazeStateError
from .patterns import PatternType, choose_pattern, pattern_for
from .shifting import ShiftResult, ShiftScheduler
from .solvability import ValidationReport, bfs_reaches, carve_l_corridor, ensure_solvable
from .spanning_tree import SpanningTreeGenerator
from .tiles import PATH, WALL  # noqa: F401

__all__ = [
    "Maze",
    "MazeConfig",
    "MazeConfigError",
    "MazeState",
    "MazeStateError",
    "GridModel",
    "ExclusionZone",
    "PatternType",
    "PATTERN_NAMES",
    "choose_pattern",
    "pattern_for",
    "SpanningTreeGenerator",
    "ShiftScheduler",
    "ShiftResult",
    "ValidationReport",
    "bfs_reaches",
    "carve_l_corridor",
    "ensure_solvable",
    "WALL",
    "PATH",
]
