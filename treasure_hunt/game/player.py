"""Player state: position, score and per-game counters."""

from dataclasses import dataclass, field

from ..api.models import ORIGIN, Position


@dataclass
class Player:
    """
    Mutable player state owned by a game session.

    Only the session mutates a Player; everything else reads it through
    PlayerStats snapshots.
    """

    position: Position = ORIGIN
    score: int = 0
    moves: int = 0
    hints_used: int = 0
    obstacles_hit: int = 0
    visited: set[Position] = field(default_factory=set)

    def reset(self, start: Position, score: int) -> None:
        """Return to the start cell with a fresh score and zeroed counters."""
        self.position = start
        self.score = score
        self.moves = 0
        self.hints_used = 0
        self.obstacles_hit = 0
        self.visited = {start}

    def move_to(self, pos: Position) -> None:
        self.position = pos
        self.moves += 1
        self.visited.add(pos)

    def spend(self, points: int) -> None:
        """Deduct points, clamping the score at zero."""
        self.score = max(0, self.score - points)

    def is_visited(self, pos: Position) -> bool:
        return pos in self.visited
