"""
Shortest-path search over the lattice.

Implements breadth-first search and A* search from a start cell to the
nearest of several targets. Movement is 4-directional with a uniform
step cost of 1; obstacles and out-of-bounds cells are never entered.

Both searches:
- never mutate the grid
- keep all per-search state (frontier, predecessor map) local to the call
- return the path excluding the start, ending at the target reached
"""

import heapq
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .grid import Grid
from .models import Position

logger = logging.getLogger(__name__)


class SearchAlgorithm(Enum):
    """Search strategies available for hints."""

    BFS = "BFS"
    ASTAR = "AStar"

    @classmethod
    def parse(cls, name: "str | SearchAlgorithm | None") -> "SearchAlgorithm":
        """
        Resolve an algorithm name as chosen in the UI.

        Accepts the enum itself, "BFS"/"Breadth First Search" and
        "AStar"/"A*"/"A* Search" (case-insensitive). Anything else,
        including None, falls back to A*.
        """
        if isinstance(name, SearchAlgorithm):
            return name
        if name is None:
            return cls.ASTAR

        key = name.strip().lower()
        aliases = {
            "bfs": cls.BFS,
            "bfs search": cls.BFS,
            "breadth first search": cls.BFS,
            "astar": cls.ASTAR,
            "a*": cls.ASTAR,
            "a* search": cls.ASTAR,
        }
        if key not in aliases:
            logger.warning(f"Unknown search algorithm '{name}', defaulting to A*")
            return cls.ASTAR
        return aliases[key]


class PathStopReason(Enum):
    """Reasons why a search stopped or couldn't start."""
    SUCCESS = "success"
    NO_TARGETS = "no_targets"
    ALREADY_AT_TARGET = "already_at_target"
    START_OUT_OF_BOUNDS = "start_out_of_bounds"
    NO_PATH_EXISTS = "no_path_exists"


@dataclass
class PathResult:
    """Result of a pathfinding operation."""
    path: list[Position]
    reason: PathStopReason
    algorithm: SearchAlgorithm = SearchAlgorithm.ASTAR
    message: str = ""

    @property
    def success(self) -> bool:
        """Whether pathfinding succeeded."""
        return self.reason == PathStopReason.SUCCESS

    @property
    def next_step(self) -> "Position | None":
        """First position after the start, or None without a path."""
        return self.path[0] if self.path else None

    @property
    def target(self) -> "Position | None":
        """The target the path ends on."""
        return self.path[-1] if self.path else None

    def __bool__(self) -> bool:
        """Allow `if result:` to check for success."""
        return self.success and len(self.path) > 0

    def __iter__(self):
        """Allow `for pos in result:` to iterate the path."""
        return iter(self.path)

    def __len__(self) -> int:
        """Return path length."""
        return len(self.path)

    def __repr__(self) -> str:
        if self.success:
            return f"PathResult(path=[{len(self.path)} steps], reason=SUCCESS, algorithm={self.algorithm.value})"
        return f"PathResult(path=[], reason={self.reason.value}, message='{self.message}')"


def shortest_path_bfs(grid: Grid, start: Position, targets: Iterable[Position]) -> list[Position]:
    """
    Breadth-first search to the nearest target.

    Explores the grid in uniform-cost layers with a FIFO frontier and stops
    as soon as a dequeued cell is one of the targets.

    Args:
        grid: Grid to search (not modified)
        start: Starting position
        targets: Candidate goal positions

    Returns:
        List of positions from start to the nearest target (excluding start),
        or empty if there are no targets, none is reachable or start is
        off the grid
    """
    target_set = frozenset(targets)
    if not target_set or not grid.in_bounds(start):
        return []

    came_from: dict[Position, Position] = {}
    visited = {start}
    queue = deque([start])

    while queue:
        current = queue.popleft()

        if current in target_set:
            return _reconstruct_path(came_from, current)

        for neighbor in current.adjacent():
            if neighbor in visited or not grid.is_walkable(neighbor):
                continue
            visited.add(neighbor)
            came_from[neighbor] = current
            queue.append(neighbor)

    return []  # No path found


def shortest_path_astar(grid: Grid, start: Position, targets: Iterable[Position]) -> list[Position]:
    """
    A* search to the nearest target.

    The frontier is ordered by f = g + h where g is the number of steps
    taken and h is the Manhattan distance to the nearest target. The search
    ends the first time a popped cell is a target; with unit step costs and
    an admissible heuristic that target is at minimum distance.

    Args:
        grid: Grid to search (not modified)
        start: Starting position
        targets: Candidate goal positions

    Returns:
        List of positions from start to the nearest target (excluding start),
        or empty if there are no targets, none is reachable or start is
        off the grid
    """
    target_set = frozenset(targets)
    if not target_set or not grid.in_bounds(start):
        return []

    # Priority queue: (f_score, counter, position)
    # Counter keeps heap entries comparable when f_scores are equal
    counter = 0
    open_set = [(_heuristic(start, target_set), counter, start)]
    came_from: dict[Position, Position] = {}
    g_score: dict[Position, int] = {start: 0}

    while open_set:
        f, _, current = heapq.heappop(open_set)

        if current in target_set:
            return _reconstruct_path(came_from, current)

        # Skip stale entries superseded by a cheaper route
        if f - _heuristic(current, target_set) > g_score[current]:
            continue

        tentative_g = g_score[current] + 1  # Uniform step cost

        for neighbor in current.adjacent():
            if not grid.is_walkable(neighbor):
                continue

            if neighbor not in g_score or tentative_g < g_score[neighbor]:
                came_from[neighbor] = current
                g_score[neighbor] = tentative_g
                counter += 1
                heapq.heappush(
                    open_set,
                    (tentative_g + _heuristic(neighbor, target_set), counter, neighbor),
                )

    return []  # No path found


def _heuristic(pos: Position, targets: frozenset[Position]) -> int:
    """
    Manhattan distance to the nearest target.

    Admissible for 4-directional movement with unit step cost.
    """
    return min(pos.manhattan_distance(target) for target in targets)


def _reconstruct_path(came_from: dict[Position, Position], end: Position) -> list[Position]:
    """Walk predecessor links back from end, then reverse into forward order."""
    path = []
    current = end
    while current in came_from:
        path.append(current)
        current = came_from[current]
    path.reverse()
    return path


_SEARCHES = {
    SearchAlgorithm.BFS: shortest_path_bfs,
    SearchAlgorithm.ASTAR: shortest_path_astar,
}


def find_path(
    grid: Grid,
    start: Position,
    targets: Iterable[Position],
    algorithm: "str | SearchAlgorithm | None" = SearchAlgorithm.ASTAR,
) -> PathResult:
    """
    Find the shortest path from start to the nearest target.

    Args:
        grid: Grid to search (not modified)
        start: Starting position
        targets: Candidate goal positions
        algorithm: Search strategy (name or enum), A* by default

    Returns:
        PathResult with the path and the reason for success/failure
    """
    algorithm = SearchAlgorithm.parse(algorithm)
    target_set = frozenset(targets)

    if not target_set:
        return PathResult([], PathStopReason.NO_TARGETS, algorithm, "No targets to search for")

    if not grid.in_bounds(start):
        return PathResult([], PathStopReason.START_OUT_OF_BOUNDS, algorithm, f"Start {start} is out of bounds")

    if start in target_set:
        return PathResult([], PathStopReason.ALREADY_AT_TARGET, algorithm, "Already at a target position")

    path = _SEARCHES[algorithm](grid, start, target_set)
    if not path:
        logger.debug(f"find_path: {algorithm.value} found no path from {start} to {len(target_set)} targets")
        return PathResult([], PathStopReason.NO_PATH_EXISTS, algorithm, f"No path from {start} to any target")

    return PathResult(path, PathStopReason.SUCCESS, algorithm)


def is_reachable(grid: Grid, start: Position, target: Position) -> bool:
    """Whether target can be reached from start (uses A*)."""
    return bool(shortest_path_astar(grid, start, [target]))


def path_distance(
    grid: Grid,
    start: Position,
    target: Position,
    algorithm: "str | SearchAlgorithm | None" = SearchAlgorithm.ASTAR,
) -> int:
    """
    Calculate path distance to target (or -1 if unreachable).

    Returns:
        Number of steps in path, 0 when already at target, or -1 if unreachable
    """
    if start == target:
        return 0

    result = find_path(grid, start, [target], algorithm)
    return len(result.path) if result.success else -1
