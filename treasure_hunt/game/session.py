"""
Gameplay state machine.

A GameSession owns the grid, the player and the treasure sets, and
resolves one player intent at a time: move, request a hint, toggle
transparent mode, or reset. Every intent returns a Notification
describing what happened so the UI layer decides how to show it.

States:
- PLAYING: intents are resolved
- GAME_OVER: terminal; every intent except init() is a no-op
"""

import dataclasses
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..api.grid import Grid, GridSnapshot
from ..api.models import ORIGIN, CellType, Direction, PlayerStats, Position
from ..api.pathfinding import SearchAlgorithm, find_path
from ..config import GameConfig, ObstacleDensity
from ..generation import GenerationExhausted, generate_map
from .player import Player

logger = logging.getLogger(__name__)

# Scoring rules
MOVE_COST = 1
OBSTACLE_PENALTY = 10
HINT_COST = 3


class GameState(Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"


class GameOutcome(Enum):
    """Why a game ended."""

    VICTORY = "victory"
    OUT_OF_POINTS = "out_of_points"
    GENERATION_FAILED = "generation_failed"


class NotificationKind(Enum):
    """One kind per branch of intent resolution."""

    GAME_STARTED = "game_started"
    GAME_ALREADY_OVER = "game_already_over"
    OUT_OF_POINTS = "out_of_points"
    BOUNDARY = "boundary"
    OBSTACLE = "obstacle"
    MOVED = "moved"
    TREASURE_FOUND = "treasure_found"
    VICTORY = "victory"
    HINT = "hint"
    NOT_ENOUGH_POINTS = "not_enough_points"
    NO_TREASURES_LEFT = "no_treasures_left"
    NO_PATH = "no_path"
    TRANSPARENT_MODE = "transparent_mode"


@dataclass(frozen=True)
class Notification:
    """Outcome of a single intent."""

    kind: NotificationKind
    message: str
    game_over: bool = False
    # Next step toward the nearest treasure, set on successful hints
    hint: Optional[Position] = None

    def __str__(self) -> str:
        return self.message


class GameSession:
    """
    A single-player treasure hunt.

    Intents are resolved synchronously and completely before the next one
    is accepted. The session is the only writer of its grid and player.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        origin: Position = ORIGIN,
    ):
        # Private copy; init() may change the density
        self.config = dataclasses.replace(config) if config is not None else GameConfig()
        self.origin = origin
        self._rng = rng or random.Random(self.config.seed)

        self._grid = Grid(self.config.grid_size)
        self._player = Player(position=origin, score=self.config.initial_score)
        self._treasures: tuple[Position, ...] = ()
        self._remaining: set[Position] = set()
        self._treasures_found = 0
        self._transparent_mode = False
        # Nothing to play until init() generates a map
        self._state = GameState.GAME_OVER
        self._outcome: Optional[GameOutcome] = None
        self._last_notification: Optional[Notification] = None

    @classmethod
    def from_grid(
        cls,
        grid: Grid,
        treasures: Optional[list[Position]] = None,
        config: Optional[GameConfig] = None,
        origin: Position = ORIGIN,
    ) -> "GameSession":
        """
        Start a session on an existing grid instead of a generated one.

        Args:
            grid: Grid to play on (owned by the session from now on)
            treasures: Treasure positions; defaults to every TREASURE cell
            config: Base settings; grid size and treasure count follow the grid
            origin: Player start cell
        """
        if treasures is None:
            treasures = grid.positions_of(CellType.TREASURE)
        config = dataclasses.replace(
            config or GameConfig(),
            grid_size=grid.size,
            treasure_count=len(treasures),
        )
        session = cls(config, origin=origin)
        session._start(grid, list(treasures))
        return session

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def init(self, obstacle_density: "str | ObstacleDensity | None" = None) -> GridSnapshot:
        """
        (Re)start the game on a freshly generated map.

        Args:
            obstacle_density: New density tier; keeps the configured one if omitted

        Returns:
            Snapshot of the new grid

        Raises:
            GenerationExhausted: If the map cannot be generated; the session
                stays in GAME_OVER until a later init() succeeds
        """
        if obstacle_density is not None:
            self.config.obstacle_density = ObstacleDensity.parse(obstacle_density).value

        try:
            generated = generate_map(
                self.config.grid_size,
                self.config.obstacle_count,
                self.config.treasure_count,
                origin=self.origin,
                rng=self._rng,
                max_attempts=self.config.max_generation_attempts,
            )
        except GenerationExhausted as e:
            logger.error(f"Map generation failed: {e}")
            self._state = GameState.GAME_OVER
            self._outcome = GameOutcome.GENERATION_FAILED
            self._last_notification = None
            raise

        self._start(generated.grid, generated.treasures)
        return self.snapshot()

    def reset(self, obstacle_density: "str | ObstacleDensity | None" = None) -> GridSnapshot:
        """Alias for init(), used by restart buttons."""
        return self.init(obstacle_density)

    def _start(self, grid: Grid, treasures: list[Position]) -> None:
        self._grid = grid
        self._treasures = tuple(treasures)
        self._remaining = set(treasures)
        self._treasures_found = 0
        self._transparent_mode = False
        self._player.reset(self.origin, self.config.initial_score)
        self._state = GameState.PLAYING
        self._outcome = None
        self._last_notification = Notification(NotificationKind.GAME_STARTED, "Game Started!")
        logger.info(
            f"Game started: {grid.size}x{grid.size} grid, "
            f"{grid.count(CellType.OBSTACLE)} obstacles, {len(self._treasures)} treasures"
        )

    def _end(self, outcome: GameOutcome) -> None:
        self._state = GameState.GAME_OVER
        self._outcome = outcome
        logger.info(
            f"Game over ({outcome.value}): score={self._player.score}, "
            f"treasures={self._treasures_found}/{len(self._treasures)}, moves={self._player.moves}"
        )

    def _out_of_points(self) -> Notification:
        self._player.score = 0
        self._end(GameOutcome.OUT_OF_POINTS)
        return Notification(
            NotificationKind.OUT_OF_POINTS,
            "Game over! You ran out of points.",
            game_over=True,
        )

    def _already_over(self) -> Notification:
        return Notification(NotificationKind.GAME_ALREADY_OVER, "The game is over.", game_over=True)

    def _notify(self, notification: Notification) -> Notification:
        self._last_notification = notification
        return notification

    # -------------------------------------------------------------------------
    # Intents
    # -------------------------------------------------------------------------

    def move(self, dx: int, dy: int) -> Notification:
        """
        Move the player one cell.

        Raises:
            ValueError: If (dx, dy) is not one of the four unit directions
        """
        return self.move_direction(Direction.from_delta(dx, dy))

    def move_direction(self, direction: Direction) -> Notification:
        """Resolve a move intent. Exactly one notification per call."""
        return self._notify(self._resolve_move(direction))

    def _resolve_move(self, direction: Direction) -> Notification:
        if self.game_over:
            return self._already_over()

        player = self._player
        logger.debug(f"Move {direction.value} from {player.position}, score={player.score}")

        if player.score <= 0:
            return self._out_of_points()

        target = player.position.move(direction)

        if not self._grid.in_bounds(target):
            return Notification(NotificationKind.BOUNDARY, "You hit the boundary! Try another direction.")

        if self._grid.is_obstacle(target):
            return self._hit_obstacle(target)

        player.move_to(target)
        player.spend(MOVE_COST)

        if self._grid.get_cell(target) is CellType.TREASURE and not self._grid.is_revealed(target):
            return self._find_treasure(target)

        if player.score == 0:
            return self._out_of_points()

        return Notification(
            NotificationKind.MOVED,
            f"Player moved to {target}. -{MOVE_COST} point. Score: {player.score}",
        )

    def _hit_obstacle(self, pos: Position) -> Notification:
        """Penalize a collision; the player stays where they are."""
        player = self._player
        self._grid.reveal(pos)
        player.obstacles_hit += 1

        # The check runs on the score before the penalty is applied
        if player.score <= OBSTACLE_PENALTY:
            lost = player.score
            player.score = 0
            self._end(GameOutcome.OUT_OF_POINTS)
            return Notification(
                NotificationKind.OBSTACLE,
                f"You hit an obstacle! -{lost} points. Score: 0 Game over! You ran out of points.",
                game_over=True,
            )

        player.spend(OBSTACLE_PENALTY)
        return Notification(
            NotificationKind.OBSTACLE,
            f"You hit an obstacle! -{OBSTACLE_PENALTY} points. Score: {player.score}",
        )

    def _find_treasure(self, pos: Position) -> Notification:
        self._grid.reveal(pos)
        self._treasures_found += 1
        self._remaining.discard(pos)

        if self._treasures_found == len(self._treasures):
            self._end(GameOutcome.VICTORY)
            return Notification(
                NotificationKind.VICTORY,
                f"Congratulations! You found all treasures with a score of {self._player.score}!",
                game_over=True,
            )

        return Notification(
            NotificationKind.TREASURE_FOUND,
            f"You found a treasure! {len(self._remaining)} remaining.",
        )

    def request_hint(self, algorithm: "str | SearchAlgorithm | None" = None) -> Notification:
        """
        Spend points to learn the next step toward the nearest treasure.

        Args:
            algorithm: Search strategy; defaults to the configured one (A*)

        Returns:
            Notification whose `hint` holds the next step on success
        """
        return self._notify(self._resolve_hint(algorithm))

    def _resolve_hint(self, algorithm: "str | SearchAlgorithm | None") -> Notification:
        if self.game_over:
            return self._already_over()

        score = self._player.score
        if score < HINT_COST:
            return Notification(
                NotificationKind.NOT_ENOUGH_POINTS,
                f"Not enough points for a hint! You need at least {HINT_COST} points.",
            )
        if score == HINT_COST:
            return self._out_of_points()

        if not self._remaining:
            return Notification(NotificationKind.NO_TREASURES_LEFT, "No treasures left to find.")

        algorithm = SearchAlgorithm.parse(algorithm if algorithm is not None else self.config.algorithm)
        result = find_path(self._grid, self._player.position, self._remaining, algorithm)

        if not result:
            logger.debug(f"Hint search failed: {result}")
            return Notification(NotificationKind.NO_PATH, "No path found to any treasure!")

        self._player.hints_used += 1
        self._player.spend(HINT_COST)
        logger.debug(f"Hint via {algorithm.value}: next step {result.next_step}, {len(result)} steps to go")
        return Notification(
            NotificationKind.HINT,
            f"Hint: Move to the highlighted cell (-{HINT_COST} points)",
            hint=result.next_step,
        )

    def toggle_transparent_mode(self) -> Notification:
        """Flip the debug visibility flag. Never affects score or termination."""
        if self.game_over:
            return self._notify(self._already_over())

        self._transparent_mode = not self._transparent_mode
        state = "activated" if self._transparent_mode else "deactivated"
        return self._notify(Notification(NotificationKind.TRANSPARENT_MODE, f"Transparent mode {state}"))

    # -------------------------------------------------------------------------
    # Read-only accessors
    # -------------------------------------------------------------------------

    @property
    def grid(self) -> Grid:
        """The live grid. Callers must not mutate it."""
        return self._grid

    def snapshot(self) -> GridSnapshot:
        return self._grid.snapshot(
            player=self._player.position,
            visited=self._player.visited,
            transparent=self._transparent_mode,
        )

    @property
    def stats(self) -> PlayerStats:
        player = self._player
        return PlayerStats(
            position=player.position,
            score=player.score,
            moves=player.moves,
            hints_used=player.hints_used,
            obstacles_hit=player.obstacles_hit,
            treasures_found=self._treasures_found,
            treasure_count=len(self._treasures),
        )

    @property
    def player_position(self) -> Position:
        return self._player.position

    def is_visited(self, pos: Position) -> bool:
        return self._player.is_visited(pos)

    @property
    def treasures(self) -> tuple[Position, ...]:
        """Every treasure placed at generation time."""
        return self._treasures

    @property
    def remaining_treasures(self) -> frozenset[Position]:
        return frozenset(self._remaining)

    @property
    def remaining_treasure_count(self) -> int:
        return len(self._remaining)

    @property
    def treasures_found(self) -> int:
        return self._treasures_found

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def game_over(self) -> bool:
        return self._state is GameState.GAME_OVER

    @property
    def outcome(self) -> Optional[GameOutcome]:
        return self._outcome

    @property
    def transparent_mode(self) -> bool:
        return self._transparent_mode

    @property
    def last_notification(self) -> Optional[Notification]:
        """Most recent notification, starting with "Game Started!" after init()."""
        return self._last_notification
