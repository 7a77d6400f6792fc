import random

import pytest

from labyrinth.maze import GridModel, PatternType, choose_pattern, pattern_for
from labyrinth.maze.patterns import ConcentricPattern, GeometricPattern, SymmetricPattern
from labyrinth.maze.spanning_tree import SpanningTreeGenerator


def test_pattern_for_accepts_enum_and_name():
    assert isinstance(pattern_for(PatternType.GEOMETRIC), GeometricPattern)
    assert isinstance(pattern_for("concentric"), ConcentricPattern)
    assert isinstance(pattern_for("symmetric"), SymmetricPattern)
    assert isinstance(pattern_for("spanning_tree"), SpanningTreeGenerator)
    with pytest.raises(ValueError):
        pattern_for("spiral")


def test_choose_pattern_honours_request_and_covers_all_variants():
    assert choose_pattern(random.Random(1), "symmetric") is PatternType.SYMMETRIC
    rng = random.Random(5)
    seen = {choose_pattern(rng) for _ in range(200)}
    assert seen == set(PatternType)


@pytest.mark.parametrize("pattern", list(PatternType))
def test_every_pattern_opens_cells(pattern):
    g = GridModel(20, 20)
    pattern_for(pattern).fill(g, random.Random(11))
    assert 0 < g.path_count() < 400


def test_geometric_lines_every_third_row_and_column():
    g = GridModel(20, 14)
    GeometricPattern().fill(g, random.Random(2))
    for y in (3, 6, 9, 12):
        assert all(g.is_path(x, y) for x in range(20))
    for x in (3, 6, 9, 12, 15, 18):
        assert all(g.is_path(x, y) for y in range(14))


def test_geometric_draws_the_last_zigzag_when_width_is_not_a_multiple_of_four():
    # 21 wide: the sixth zigzag starts at (9, 11) and must still be drawn
    g = GridModel(21, 25)
    GeometricPattern().fill(g, random.Random(0))
    for cell in ((10, 11), (11, 11), (11, 14), (10, 14)):
        assert g.is_path(*cell), cell


def test_concentric_opens_centre_and_first_ring():
    g = GridModel(20, 20)
    ConcentricPattern().fill(g, random.Random(4))
    assert g.is_path(10, 10)
    assert g.is_path(12, 10)
    assert g.is_path(10, 8)


def test_symmetric_rule_is_mirrored_into_all_quadrants():
    p = SymmetricPattern()
    p.connectors = 0
    g = GridModel(20, 16)
    p.fill(g, random.Random(0))
    for x in range(20):
        for y in range(16):
            assert g.cells[x][y] == g.cells[19 - x][y] == g.cells[x][15 - y]
    assert g.is_path(0, 0)  # x % 3 == 0 and y % 2 == 0


def test_symmetric_connectors_span_the_grid():
    g = GridModel(20, 20)
    SymmetricPattern().fill(g, random.Random(8))
    full_rows = [y for y in range(20) if all(g.is_path(x, y) for x in range(20))]
    full_cols = [x for x in range(20) if all(g.is_path(x, y) for y in range(20))]
    assert full_rows or full_cols


def test_patterns_are_deterministic_per_seed():
    for pattern in PatternType:
        a, b = GridModel(17, 23), GridModel(17, 23)
        pattern_for(pattern).fill(a, random.Random(77))
        pattern_for(pattern).fill(b, random.Random(77))
        assert a.cells == b.cells
