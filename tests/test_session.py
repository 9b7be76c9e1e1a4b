"""Tests for the gameplay state machine.

Covers move resolution order, scoring, treasure discovery, hints,
transparent mode, termination and re-initialization.
"""

import random

import pytest

from treasure_hunt.api.grid import Grid
from treasure_hunt.api.models import CellType, Direction, Position
from treasure_hunt.config import GameConfig
from treasure_hunt.game import (
    GameOutcome,
    GameSession,
    GameState,
    NotificationKind,
)
from treasure_hunt.generation import GenerationExhausted

OPEN_LAYOUT = [
    ".....",
    ".....",
    ".....",
    ".....",
    "....$",
]

OBSTACLE_RIGHT_LAYOUT = [
    ".#...",
    ".....",
    ".....",
    ".....",
    "....$",
]


def make_session(rows, initial_score=100, treasures=None):
    """Create a session on a hand-drawn grid."""
    grid = Grid.from_rows(rows)
    return GameSession.from_grid(grid, treasures, GameConfig(initial_score=initial_score))


class TestMove:
    """Tests for move intents."""

    def test_plain_move(self):
        session = make_session(OPEN_LAYOUT)
        note = session.move(0, 1)

        assert note.kind is NotificationKind.MOVED
        assert session.player_position == Position(0, 1)
        assert session.stats.score == 99
        assert session.stats.moves == 1
        assert session.is_visited(Position(0, 1))
        assert session.is_visited(Position(0, 0))
        assert session.state is GameState.PLAYING

    def test_move_direction(self):
        session = make_session(OPEN_LAYOUT)
        note = session.move_direction(Direction.RIGHT)
        assert note.kind is NotificationKind.MOVED
        assert session.player_position == Position(1, 0)

    def test_boundary(self):
        session = make_session(OPEN_LAYOUT)
        note = session.move(-1, 0)

        assert note.kind is NotificationKind.BOUNDARY
        assert session.player_position == Position(0, 0)
        assert session.stats.score == 100
        assert session.stats.moves == 0
        assert not note.game_over

    @pytest.mark.parametrize("delta", [(1, 1), (0, 0), (2, 0)])
    def test_invalid_delta(self, delta):
        session = make_session(OPEN_LAYOUT)
        with pytest.raises(ValueError):
            session.move(*delta)

    def test_obstacle_collision(self):
        session = make_session(OBSTACLE_RIGHT_LAYOUT)
        note = session.move(1, 0)

        assert note.kind is NotificationKind.OBSTACLE
        assert session.player_position == Position(0, 0)
        assert session.stats.score == 90
        assert session.stats.obstacles_hit == 1
        assert session.stats.moves == 0
        assert session.grid.is_revealed(Position(1, 0))
        assert session.state is GameState.PLAYING

    def test_obstacle_at_eleven_then_game_over(self):
        """11 points survive one collision; the next one ends the game."""
        session = make_session(OBSTACLE_RIGHT_LAYOUT, initial_score=11)

        first = session.move(1, 0)
        assert first.kind is NotificationKind.OBSTACLE
        assert session.stats.score == 1
        assert session.state is GameState.PLAYING

        second = session.move(1, 0)
        assert second.kind is NotificationKind.OBSTACLE
        assert second.game_over
        assert session.stats.score == 0
        assert session.state is GameState.GAME_OVER
        assert session.outcome is GameOutcome.OUT_OF_POINTS
        assert session.stats.obstacles_hit == 2

    @pytest.mark.parametrize("score", [10, 9, 5])
    def test_obstacle_at_or_below_penalty_ends_game(self, score):
        session = make_session(OBSTACLE_RIGHT_LAYOUT, initial_score=score)
        note = session.move(1, 0)
        assert note.game_over
        assert session.stats.score == 0
        assert session.game_over

    def test_treasure_found(self):
        rows = [
            ".....",
            "$....",
            ".....",
            ".....",
            "....$",
        ]
        session = make_session(rows)
        note = session.move(0, 1)

        assert note.kind is NotificationKind.TREASURE_FOUND
        assert session.treasures_found == 1
        assert session.remaining_treasure_count == 1
        assert Position(0, 1) not in session.remaining_treasures
        assert session.grid.is_revealed(Position(0, 1))
        assert session.stats.score == 99
        assert "1 remaining" in note.message

    def test_revisiting_found_treasure_is_plain_move(self):
        rows = [
            ".....",
            "$....",
            ".....",
            ".....",
            "....$",
        ]
        session = make_session(rows)
        session.move(0, 1)
        session.move(0, 1)
        note = session.move(0, -1)

        assert note.kind is NotificationKind.MOVED
        assert session.treasures_found == 1

    def test_victory(self):
        rows = [
            ".....",
            "$....",
            ".....",
            ".....",
            ".....",
        ]
        session = make_session(rows)
        note = session.move(0, 1)

        assert note.kind is NotificationKind.VICTORY
        assert note.game_over
        assert session.outcome is GameOutcome.VICTORY
        assert session.remaining_treasure_count == 0
        assert "99" in note.message

    def test_last_point_spent_on_plain_move(self):
        session = make_session(OPEN_LAYOUT, initial_score=1)
        note = session.move(1, 0)

        assert note.kind is NotificationKind.OUT_OF_POINTS
        assert session.stats.score == 0
        assert session.game_over
        assert session.player_position == Position(1, 0)

    def test_treasure_takes_priority_over_zero_score(self):
        rows = [
            ".....",
            "$....",
            ".....",
            ".....",
            "....$",
        ]
        session = make_session(rows, initial_score=1)
        note = session.move(0, 1)
        assert note.kind is NotificationKind.TREASURE_FOUND
        assert session.stats.score == 0
        assert session.state is GameState.PLAYING

        # Out of points is detected on the next move
        follow_up = session.move(1, 0)
        assert follow_up.kind is NotificationKind.OUT_OF_POINTS
        assert session.player_position == Position(0, 1)
        assert session.game_over

    def test_zero_score_on_entry(self):
        session = make_session(OPEN_LAYOUT, initial_score=0)
        note = session.move(1, 0)
        assert note.kind is NotificationKind.OUT_OF_POINTS
        assert session.player_position == Position(0, 0)


class TestHint:
    """Tests for hint requests."""

    @pytest.mark.parametrize("algorithm", [None, "AStar", "BFS", "A* Search"])
    def test_hint_points_toward_nearest_treasure(self, algorithm):
        rows = [
            ".....",
            ".....",
            "$....",
            ".....",
            "....$",
        ]
        session = make_session(rows)
        note = session.request_hint(algorithm)

        assert note.kind is NotificationKind.HINT
        assert note.hint == Position(0, 1)
        assert session.stats.score == 97
        assert session.stats.hints_used == 1
        assert session.player_position == Position(0, 0)

    def test_not_enough_points(self):
        session = make_session(OPEN_LAYOUT, initial_score=2)
        note = session.request_hint()

        assert note.kind is NotificationKind.NOT_ENOUGH_POINTS
        assert note.hint is None
        assert session.stats.score == 2
        assert session.state is GameState.PLAYING

    def test_exactly_three_points_ends_game(self):
        session = make_session(OPEN_LAYOUT, initial_score=3)
        note = session.request_hint()

        assert note.kind is NotificationKind.OUT_OF_POINTS
        assert note.hint is None
        assert session.stats.score == 0
        assert session.stats.hints_used == 0
        assert session.game_over

    def test_no_path(self):
        rows = [
            ".....",
            ".....",
            ".....",
            "....#",
            "...#$",
        ]
        session = make_session(rows)
        note = session.request_hint()

        assert note.kind is NotificationKind.NO_PATH
        assert session.stats.score == 100
        assert session.stats.hints_used == 0

    def test_no_treasures_left(self):
        session = make_session(OPEN_LAYOUT, treasures=[])
        note = session.request_hint()
        assert note.kind is NotificationKind.NO_TREASURES_LEFT
        assert session.stats.score == 100

    def test_uses_configured_algorithm(self):
        grid = Grid.from_rows(OPEN_LAYOUT)
        session = GameSession.from_grid(grid, config=GameConfig(algorithm="BFS"))
        note = session.request_hint()
        assert note.kind is NotificationKind.HINT
        assert note.hint in (Position(1, 0), Position(0, 1))


class TestTransparentMode:
    """Tests for the debug visibility toggle."""

    def test_toggle(self):
        session = make_session(OPEN_LAYOUT)
        on = session.toggle_transparent_mode()
        off = session.toggle_transparent_mode()

        assert on.kind is NotificationKind.TRANSPARENT_MODE
        assert on.message != off.message
        assert session.transparent_mode is False
        assert session.stats.score == 100

    def test_snapshot_follows_toggle(self):
        session = make_session(OPEN_LAYOUT)
        assert session.snapshot().render()[4] == "....."
        session.toggle_transparent_mode()
        assert session.snapshot().render()[4] == "....$"


class TestGameOver:
    """Intents after game over are no-ops."""

    def make_finished_session(self):
        rows = [
            ".....",
            "$....",
            ".....",
            ".....",
            ".....",
        ]
        session = make_session(rows)
        session.move(0, 1)
        assert session.game_over
        return session

    def test_move_is_noop(self):
        session = self.make_finished_session()
        before = session.stats
        note = session.move(1, 0)

        assert note.kind is NotificationKind.GAME_ALREADY_OVER
        assert session.stats == before

    def test_hint_is_noop(self):
        session = self.make_finished_session()
        before = session.stats
        note = session.request_hint()
        assert note.kind is NotificationKind.GAME_ALREADY_OVER
        assert session.stats == before

    def test_toggle_is_noop(self):
        session = self.make_finished_session()
        note = session.toggle_transparent_mode()
        assert note.kind is NotificationKind.GAME_ALREADY_OVER
        assert session.transparent_mode is False


class TestInit:
    """Tests for generated sessions."""

    def test_session_before_init_is_over(self):
        session = GameSession(GameConfig(seed=1))
        assert session.game_over
        assert session.outcome is None

    def test_init_generates_map(self):
        session = GameSession(GameConfig(seed=1))
        snapshot = session.init()

        assert snapshot.size == 20
        assert session.state is GameState.PLAYING
        assert session.grid.count(CellType.OBSTACLE) == 80
        assert len(session.treasures) == 3
        assert session.remaining_treasure_count == 3
        assert not session.grid.is_obstacle(Position(0, 0))
        assert session.stats.score == 100

    @pytest.mark.parametrize("density,expected", [("10%", 40), ("20%", 80), ("30%", 120)])
    def test_init_with_density(self, density, expected):
        session = GameSession(GameConfig(seed=2))
        session.init(density)
        assert session.grid.count(CellType.OBSTACLE) == expected
        assert session.config.obstacle_density == density

    def test_density_change_does_not_touch_callers_config(self):
        config = GameConfig(grid_size=10, seed=2)
        session = GameSession(config)
        session.init("30%")

        assert session.config.obstacle_density == "30%"
        assert config.obstacle_density == "20%"

    def test_init_and_reset_announce_start(self):
        session = GameSession(GameConfig(seed=4))
        assert session.last_notification is None

        session.init()
        assert session.last_notification.kind is NotificationKind.GAME_STARTED
        assert session.last_notification.message == "Game Started!"

        moved = session.move(1, 0)
        assert session.last_notification is moved

        session.reset()
        assert session.last_notification.kind is NotificationKind.GAME_STARTED

    def test_reset_after_game_over(self):
        session = GameSession(GameConfig(seed=3, initial_score=1))
        session.init()
        while not session.game_over:
            for dx, dy in [(1, 0), (0, 1), (-1, 0), (0, -1)]:
                session.move(dx, dy)
                if session.game_over:
                    break

        session.reset()
        assert session.state is GameState.PLAYING
        assert session.stats.moves == 0
        assert session.stats.obstacles_hit == 0
        assert session.stats.hints_used == 0
        assert session.treasures_found == 0
        assert session.player_position == Position(0, 0)
        assert session.transparent_mode is False

    def test_generation_failure_propagates(self):
        session = GameSession(GameConfig(grid_size=2, treasure_count=5))
        with pytest.raises(GenerationExhausted):
            session.init()
        assert session.game_over
        assert session.outcome is GameOutcome.GENERATION_FAILED
        assert session.last_notification is None
        assert session.move(0, 1).kind is NotificationKind.GAME_ALREADY_OVER

    def test_single_cell_grid(self):
        session = GameSession(GameConfig(grid_size=1, treasure_count=0))
        session.init()

        assert session.state is GameState.PLAYING
        assert session.request_hint().kind is NotificationKind.NO_TREASURES_LEFT
        assert session.move(1, 0).kind is NotificationKind.BOUNDARY

    def test_same_seed_same_map(self):
        first = GameSession(GameConfig(seed=11))
        second = GameSession(GameConfig(seed=11))
        first.init()
        second.init()
        assert first.treasures == second.treasures
        assert first.grid.positions_of(CellType.OBSTACLE) == second.grid.positions_of(CellType.OBSTACLE)


class TestInvariants:
    """Score and treasure accounting hold over random play."""

    @pytest.mark.parametrize("seed", range(5))
    def test_random_play(self, seed):
        rng = random.Random(seed)
        session = GameSession(GameConfig(seed=seed))
        session.init()
        directions = [(1, 0), (-1, 0), (0, 1), (0, -1)]
        last_score = session.stats.score

        for _ in range(300):
            if rng.random() < 0.2:
                note = session.request_hint(rng.choice(["BFS", "AStar"]))
            else:
                note = session.move(*rng.choice(directions))

            stats = session.stats
            assert note.message
            assert stats.score >= 0
            assert stats.score <= last_score
            assert stats.treasures_found + session.remaining_treasure_count == 3
            assert stats.treasures_remaining == session.remaining_treasure_count
            assert not session.grid.is_obstacle(stats.position)
            last_score = stats.score

            if session.game_over:
                break
