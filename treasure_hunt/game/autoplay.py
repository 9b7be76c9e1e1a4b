"""
Hint-following auto-player.

Plays a session by requesting a hint every turn and stepping onto the
suggested cell. Used by the `simulate` CLI command to compare search
strategies over many generated maps.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..api.models import Direction
from ..api.pathfinding import SearchAlgorithm
from .session import GameOutcome, GameSession, NotificationKind

logger = logging.getLogger(__name__)


@dataclass
class GameSummary:
    """Final statistics of one played game."""

    outcome: Optional[GameOutcome]
    score: int
    moves: int
    hints_used: int
    obstacles_hit: int
    treasures_found: int
    treasure_count: int
    turns: int
    messages: list[str] = field(default_factory=list)

    @property
    def won(self) -> bool:
        return self.outcome is GameOutcome.VICTORY


def play_with_hints(
    session: GameSession,
    algorithm: "str | SearchAlgorithm | None" = None,
    max_turns: int = 1000,
) -> GameSummary:
    """
    Play until game over (or max_turns) following hints.

    Args:
        session: Session already started with init() or from_grid()
        algorithm: Search strategy for hints; session default if omitted
        max_turns: Safety bound on hint+move turns

    Returns:
        GameSummary of the finished (or abandoned) game
    """
    messages: list[str] = []
    turns = 0

    while not session.game_over and turns < max_turns:
        turns += 1
        hint = session.request_hint(algorithm)
        messages.append(hint.message)

        if hint.kind is not NotificationKind.HINT:
            # No more hints possible; stop unless the hint ended the game
            logger.debug(f"Auto-play stopped on {hint.kind.value}")
            break

        position = session.player_position
        direction = Direction.from_delta(hint.hint.x - position.x, hint.hint.y - position.y)
        result = session.move_direction(direction)
        messages.append(result.message)

    stats = session.stats
    return GameSummary(
        outcome=session.outcome,
        score=stats.score,
        moves=stats.moves,
        hints_used=stats.hints_used,
        obstacles_hit=stats.obstacles_hit,
        treasures_found=stats.treasures_found,
        treasure_count=stats.treasure_count,
        turns=turns,
        messages=messages,
    )
