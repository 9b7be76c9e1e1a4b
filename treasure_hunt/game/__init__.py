"""Gameplay state machine and auto-player."""

from .autoplay import GameSummary, play_with_hints
from .player import Player
from .session import (
    HINT_COST,
    MOVE_COST,
    OBSTACLE_PENALTY,
    GameOutcome,
    GameSession,
    GameState,
    Notification,
    NotificationKind,
)

__all__ = [
    # Session
    "GameSession",
    "GameState",
    "GameOutcome",
    "Notification",
    "NotificationKind",
    "MOVE_COST",
    "OBSTACLE_PENALTY",
    "HINT_COST",
    # Player
    "Player",
    # Auto-play
    "GameSummary",
    "play_with_hints",
]
