"""Configuration management for the treasure hunt game."""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


class ObstacleDensity(Enum):
    """Obstacle density tiers offered by the options menu.

    Each tier is a share of the grid area: on the default 20x20 grid they
    map to 40, 80 and 120 obstacles.
    """
    LOW = "10%"
    MEDIUM = "20%"
    HIGH = "30%"

    @property
    def fraction(self) -> float:
        return int(self.value.rstrip("%")) / 100

    def obstacle_count(self, grid_size: int) -> int:
        """Number of obstacles for a grid of the given side."""
        return round(self.fraction * grid_size * grid_size)

    @classmethod
    def parse(cls, value: "str | ObstacleDensity") -> "ObstacleDensity":
        """Resolve a tier name, defaulting to 20% for unknown values."""
        if isinstance(value, ObstacleDensity):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            logger.warning(f"Invalid obstacle density '{value}', defaulting to {cls.MEDIUM.value}")
            return cls.MEDIUM


@dataclass
class GameConfig:
    """Game session settings."""

    grid_size: int = 20
    treasure_count: int = 3
    initial_score: int = 100
    # Options: "10%", "20%", "30%"
    obstacle_density: str = "20%"
    # Options: "AStar", "BFS"
    algorithm: str = "AStar"
    # Fixed seed gives reproducible maps; None draws a fresh map every game
    seed: Optional[int] = None
    max_generation_attempts: int = 10000

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            ValueError: If a setting is out of range
        """
        if self.grid_size < 1:
            raise ValueError(f"grid_size must be at least 1, got {self.grid_size}")
        if self.treasure_count < 0:
            raise ValueError(f"treasure_count must not be negative, got {self.treasure_count}")
        if self.initial_score < 0:
            raise ValueError(f"initial_score must not be negative, got {self.initial_score}")
        if self.max_generation_attempts < 1:
            raise ValueError(f"max_generation_attempts must be positive, got {self.max_generation_attempts}")

    def get_density(self) -> ObstacleDensity:
        """Get obstacle density as enum."""
        return ObstacleDensity.parse(self.obstacle_density)

    @property
    def obstacle_count(self) -> int:
        return self.get_density().obstacle_count(self.grid_size)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class Config:
    """Main configuration container."""

    game: GameConfig = field(default_factory=GameConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to config/default.yaml

    Returns:
        Populated Config dataclass
    """
    if config_path is None:
        # Look for config in standard locations
        candidates = [
            Path("config/default.yaml"),
            Path(__file__).parent.parent / "config" / "default.yaml",
        ]
        for candidate in candidates:
            if candidate.exists():
                config_path = str(candidate)
                break

    config = Config()

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            data = yaml.safe_load(f)

        if data:
            if "game" in data:
                config.game = GameConfig(**data["game"])
            if "logging" in data:
                config.logging = LoggingConfig(**data["logging"])

    # Environment variable overrides
    if os.environ.get("TREASURE_HUNT_GRID_SIZE"):
        config.game.grid_size = int(os.environ["TREASURE_HUNT_GRID_SIZE"])
    if os.environ.get("TREASURE_HUNT_DENSITY"):
        config.game.obstacle_density = os.environ["TREASURE_HUNT_DENSITY"]
    if os.environ.get("TREASURE_HUNT_ALGORITHM"):
        config.game.algorithm = os.environ["TREASURE_HUNT_ALGORITHM"]
    if os.environ.get("TREASURE_HUNT_SEED"):
        config.game.seed = int(os.environ["TREASURE_HUNT_SEED"])
    if os.environ.get("TREASURE_HUNT_LOG_LEVEL"):
        config.logging.level = os.environ["TREASURE_HUNT_LOG_LEVEL"]

    # Env overrides are applied after construction
    config.game.validate()

    return config


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure logging based on configuration.

    Args:
        config: Logging configuration
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if config.file:
        # Ensure log directory exists
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.file))

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
        force=True,
    )

    logger.info(f"Logging configured at level {config.level}")
