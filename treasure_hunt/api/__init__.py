"""Grid, connectivity checking and shortest-path search."""

from .connectivity import flood_fill, is_fully_connected
from .grid import Grid, GridSnapshot
from .models import (
    CARDINAL_DIRECTIONS,
    ORIGIN,
    CellType,
    Direction,
    PlayerStats,
    Position,
)
from .pathfinding import (
    PathResult,
    PathStopReason,
    SearchAlgorithm,
    find_path,
    is_reachable,
    path_distance,
    shortest_path_astar,
    shortest_path_bfs,
)

__all__ = [
    # Models
    "CARDINAL_DIRECTIONS",
    "ORIGIN",
    "CellType",
    "Direction",
    "PlayerStats",
    "Position",
    # Grid
    "Grid",
    "GridSnapshot",
    # Connectivity
    "flood_fill",
    "is_fully_connected",
    # Search
    "PathResult",
    "PathStopReason",
    "SearchAlgorithm",
    "find_path",
    "is_reachable",
    "path_distance",
    "shortest_path_astar",
    "shortest_path_bfs",
]
