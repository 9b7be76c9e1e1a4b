"""
Data models for the treasure hunt core.

These dataclasses and enums describe the lattice, positions on it and
player statistics in a structured, type-safe way that both the game
session and the UI layer can work with.
"""

from dataclasses import dataclass
from enum import Enum


class CellType(Enum):
    """Contents of a single lattice cell."""

    EMPTY = 0
    OBSTACLE = 1
    TREASURE = 2

    @property
    def is_walkable(self) -> bool:
        """Whether the player (and the search engine) may enter this cell."""
        return self is not CellType.OBSTACLE


class Direction(Enum):
    """The four movement directions. Diagonal movement is not allowed."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        """Get (dx, dy) for this direction."""
        deltas = {
            Direction.UP: (0, -1),
            Direction.DOWN: (0, 1),
            Direction.LEFT: (-1, 0),
            Direction.RIGHT: (1, 0),
        }
        return deltas[self]

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> "Direction":
        """
        Convert a unit (dx, dy) step into a Direction.

        Raises:
            ValueError: If the delta is not exactly one cardinal unit step
        """
        for direction in cls:
            if direction.delta == (dx, dy):
                return direction
        raise ValueError(f"Invalid move delta ({dx}, {dy}): expected one cardinal unit step")


# Expansion order used by every search over the lattice
CARDINAL_DIRECTIONS = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


@dataclass(frozen=True, order=True)
class Position:
    """A position on the lattice."""

    x: int
    y: int

    def manhattan_distance(self, other: "Position") -> int:
        """Manhattan distance - number of moves with 4-directional movement."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def adjacent(self) -> list["Position"]:
        """Get the 4 orthogonally adjacent positions (may be out of bounds)."""
        return [self.move(direction) for direction in CARDINAL_DIRECTIONS]

    def move(self, direction: Direction) -> "Position":
        """Get position after moving in a direction."""
        dx, dy = direction.delta
        return Position(self.x + dx, self.y + dy)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


ORIGIN = Position(0, 0)


@dataclass(frozen=True)
class PlayerStats:
    """Read-only snapshot of the player's statistics."""

    position: Position
    score: int
    moves: int
    hints_used: int
    obstacles_hit: int
    treasures_found: int
    treasure_count: int

    @property
    def treasures_remaining(self) -> int:
        return self.treasure_count - self.treasures_found
