"""
Flood-fill reachability over the lattice.

The map generator uses is_fully_connected() as its correctness oracle:
an obstacle placement is kept only if every open cell stays reachable
from the origin.
"""

import logging
from collections import deque

import numpy as np

from .grid import Grid
from .models import Position

logger = logging.getLogger(__name__)


def flood_fill(grid: Grid, origin: Position) -> set[Position]:
    """
    Breadth-first flood fill from origin over non-obstacle cells.

    Args:
        grid: Grid to traverse (not modified)
        origin: Starting cell; included in the result even if it is an obstacle

    Returns:
        Set of every position reachable from origin with 4-directional moves
    """
    visited = {origin}
    queue = deque([origin])

    while queue:
        current = queue.popleft()
        for neighbor in current.adjacent():
            if neighbor in visited or not grid.is_walkable(neighbor):
                continue
            visited.add(neighbor)
            queue.append(neighbor)

    return visited


def is_fully_connected(grid: Grid, origin: Position) -> bool:
    """
    Check that every non-obstacle cell is reachable from origin.

    Returns:
        False if any open cell other than origin was left unvisited by
        the flood fill, True otherwise
    """
    reached = np.zeros((grid.size, grid.size), dtype=bool)
    for pos in flood_fill(grid, origin):
        reached[pos.y, pos.x] = True
    reached[origin.y, origin.x] = True

    enclosed = grid.walkable_mask() & ~reached
    if enclosed.any():
        logger.debug(f"{int(enclosed.sum())} open cells cut off from {origin}")
        return False
    return True
