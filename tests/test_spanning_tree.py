import random

from labyrinth.maze import GridModel, SpanningTreeGenerator
from labyrinth.maze.spanning_tree import lattice_cells

from maze_test_utils import adjacency_edges, path_cells, reachable


def test_small_grid_from_origin_is_a_tree():
    g = GridModel(5, 5)
    SpanningTreeGenerator(start=(0, 0)).fill(g, random.Random(7))
    cells = path_cells(g.cells)
    lattice = set(lattice_cells(g, (0, 0)))
    assert lattice <= cells
    # 9 lattice cells joined by 8 connector cells
    assert len(cells) == 17
    assert reachable(g.cells, (0, 0)) == cells
    # connected with |E| == |V| - 1 means no cycles
    assert adjacency_edges(cells) == len(cells) - 1


def test_tree_property_holds_for_many_seeds_and_sizes():
    for seed in range(20):
        for w, h in [(5, 5), (11, 7), (20, 20)]:
            g = GridModel(w, h)
            SpanningTreeGenerator(start=(0, 0)).fill(g, random.Random(seed))
            cells = path_cells(g.cells)
            assert set(lattice_cells(g, (0, 0))) <= cells
            assert reachable(g.cells, (0, 0)) == cells
            assert adjacency_edges(cells) == len(cells) - 1, f"cycle for seed={seed} size={w}x{h}"


def test_connectors_are_lattice_midpoints():
    g = GridModel(9, 9)
    SpanningTreeGenerator(start=(0, 0)).fill(g, random.Random(3))
    for x, y in path_cells(g.cells):
        # odd/odd cells are never carved on the even lattice
        assert not (x % 2 == 1 and y % 2 == 1)


def test_random_start_follows_its_parity():
    g = GridModel(15, 15)
    SpanningTreeGenerator().fill(g, random.Random(99))
    cells = path_cells(g.cells)
    assert cells
    assert len(reachable(g.cells, next(iter(cells)))) == len(cells)


def test_same_seed_same_tree():
    a, b = GridModel(21, 13), GridModel(21, 13)
    SpanningTreeGenerator(start=(1, 1)).fill(a, random.Random(42))
    SpanningTreeGenerator(start=(1, 1)).fill(b, random.Random(42))
    assert a.cells == b.cells
