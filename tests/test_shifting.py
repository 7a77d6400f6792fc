import random

import pytest

from labyrinth.maze import ExclusionZone, GridModel, Maze, PatternType, ShiftScheduler
from labyrinth.maze.tiles import PATH, WALL

from maze_test_utils import assert_solvable


def _scheduler(**kw):
    return ShiftScheduler(ExclusionZone((0, 0), 0.0), random.Random(1), **kw)


def test_countdown_fires_and_rearms():
    s = _scheduler(interval=1.0)
    assert s.tick(400) is False
    assert s.tick(400) is False
    assert s.tick(200) is True
    assert s.remaining == pytest.approx(1.0)
    assert s.tick(999) is False


def test_disabled_scheduler_never_fires():
    s = _scheduler(interval=0.5, enabled=False)
    assert s.tick(10_000) is False
    assert s.remaining == 0.5


def test_isolated_walls_become_paths():
    g = GridModel(5, 5)
    batch = _scheduler(chance=1.0).collect(g)
    assert sorted((x, y) for x, y, _ in batch) == sorted(g.iter_interior())
    assert all(state is PATH for _, _, state in batch)


def test_crowded_paths_become_walls():
    g = GridModel(5, 5)
    for x, y in g.iter_cells():
        g.set(x, y, PATH)
    batch = _scheduler(chance=1.0).collect(g)
    assert len(batch) == 9
    assert all(state is WALL for _, _, state in batch)


def test_zero_chance_changes_nothing():
    g = GridModel(8, 8)
    assert _scheduler(chance=0.0).collect(g) == []


def test_border_cells_are_never_candidates():
    g = GridModel(6, 6)
    batch = _scheduler(chance=1.0).collect(g)
    for x, y, _ in batch:
        assert 0 < x < 5 and 0 < y < 5


def test_candidates_are_judged_against_the_pre_shift_grid():
    # two adjacent walls each with 2 open neighbours; applying one first
    # would not disqualify the other
    g = GridModel(5, 3)
    for x in range(5):
        g.set(x, 0, PATH)
        g.set(x, 2, PATH)
    batch = _scheduler(chance=1.0).collect(g)
    assert {(x, y) for x, y, _ in batch} == {(1, 1), (2, 1), (3, 1)}


@pytest.mark.parametrize("pattern", list(PatternType))
def test_hundred_firings_stay_solvable(pattern):
    for seed in range(4):
        m = Maze(seed=seed, width=20, height=20, pattern=pattern.value)
        m.generate()
        exit_pos = m.exit_position
        for i in range(100):
            m.shift_now()
            assert m.exit_position == exit_pos
            assert (m.width, m.height) == (20, 20)
            assert_solvable(m.grid.cells, exit_pos, label=f"{pattern.value} seed={seed} firing={i}")


def test_shift_batch_never_touches_cells_near_the_exit():
    for seed in range(40):
        m = Maze(seed=seed, width=20, height=20, shift_chance=1.0)
        m.generate()
        ex, ey = m.exit_position
        for _ in range(10):
            result = m.scheduler.fire(m.grid, m.exit_position)
            for x, y, _ in result.changes:
                assert (x - ex) ** 2 + (y - ey) ** 2 >= 9, f"seed {seed} shifted {(x, y)} near exit {(ex, ey)}"


def test_only_repair_corridors_open_cells_near_the_exit():
    for seed in range(40):
        m = Maze(seed=seed, width=20, height=20, shift_chance=0.5)
        m.generate()
        for _ in range(10):
            before = m.grid.snapshot()
            m.shift_now()
            carved = set(m.last_report.carved)
            for x, y in m.grid.iter_cells():
                if not m.zone.contains(x, y) or before[x][y] == m.grid.cells[x][y]:
                    continue
                assert before[x][y] is WALL and m.grid.cells[x][y] is PATH, f"seed {seed} walled {(x, y)}"
                assert (x, y) in carved, f"seed {seed} changed {(x, y)} outside the repair"
