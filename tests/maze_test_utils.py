from collections import deque


def reachable(grid, start):
    """Return the set of (x,y) path cells reachable from start (4-connected)."""
    w = len(grid)
    h = len(grid[0])
    sx, sy = start
    if not (0 <= sx < w and 0 <= sy < h) or grid[sx][sy]:
        return set()
    q = deque([start])
    vis = {start}
    while q:
        x, y = q.popleft()
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, ny = x + dx, y + dy
            if 0 <= nx < w and 0 <= ny < h and (nx, ny) not in vis and not grid[nx][ny]:
                vis.add((nx, ny))
                q.append((nx, ny))
    return vis


def path_cells(grid):
    return {(x, y) for x in range(len(grid)) for y in range(len(grid[0])) if not grid[x][y]}


def assert_solvable(grid, exit_pos, label=""):
    """Every path cell reaches the exit."""
    missing = path_cells(grid) - reachable(grid, exit_pos)
    assert not missing, f"{label} unreachable path cells: {sorted(missing)[:5]} (showing up to 5)"


def adjacency_edges(cells):
    edges = 0
    for x, y in cells:
        if (x + 1, y) in cells:
            edges += 1
        if (x, y + 1) in cells:
            edges += 1
    return edges
