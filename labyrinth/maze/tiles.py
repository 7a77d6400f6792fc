# Cell states. Grids are bool[width][height] with True = wall so the maze can
# be handed to clients unchanged.
WALL = True
PATH = False

# Orthogonal steps in N/E/S/W order; N is +y to match the client's z axis.
DIRECTIONS = ((0, 1), (1, 0), (0, -1), (-1, 0))

__all__ = ["WALL", "PATH", "DIRECTIONS"]
