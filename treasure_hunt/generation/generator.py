"""
Randomized map generation.

Obstacles are placed one at a time; each placement is checked with the
flood-fill connectivity oracle and reverted if it would cut any open cell
off from the origin. Treasures are then placed on empty cells that the
search engine confirms are reachable from the origin.

Both loops retry against the random source and are bounded by a maximum
number of attempts so an impossible request fails instead of spinning.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from ..api.connectivity import is_fully_connected
from ..api.grid import Grid
from ..api.models import ORIGIN, CellType, Position
from ..api.pathfinding import is_reachable
from .exceptions import GenerationExhausted

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10000


@dataclass
class GeneratedMap:
    """A freshly generated grid together with its treasure coordinates."""

    grid: Grid
    treasures: list[Position] = field(default_factory=list)
    origin: Position = ORIGIN
    obstacle_attempts: int = 0


def _candidates(grid: Grid, origin: Position) -> list[Position]:
    """Empty cells other than the origin."""
    return [pos for pos in grid.positions_of(CellType.EMPTY) if pos != origin]


def generate_obstacles(
    grid: Grid,
    count: int,
    origin: Position = ORIGIN,
    rng: Optional[random.Random] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> int:
    """
    Place exactly `count` obstacles without disconnecting the grid.

    Each attempt picks a uniformly random empty non-origin cell, marks it
    as an obstacle and keeps it only if every open cell is still reachable
    from origin. Accepted obstacles are never undone.

    Args:
        grid: Grid to modify in place
        count: Number of obstacles to place
        origin: Cell that must stay open and connected
        rng: Random source (a fresh unseeded one if omitted)
        max_attempts: Upper bound on placement attempts

    Returns:
        Number of attempts used

    Raises:
        GenerationExhausted: If the obstacles cannot be placed within max_attempts
    """
    rng = rng or random.Random()
    available = len(_candidates(grid, origin))
    if count > available:
        raise GenerationExhausted(
            f"Cannot place {count} obstacles: only {available} empty cells available",
            kind="obstacle", requested=count, placed=0, attempts=0,
        )

    placed = 0
    attempts = 0
    while placed < count:
        if attempts >= max_attempts:
            raise GenerationExhausted(
                f"Placed {placed}/{count} obstacles after {attempts} attempts",
                kind="obstacle", requested=count, placed=placed, attempts=attempts,
            )
        candidates = _candidates(grid, origin)
        if not candidates:
            raise GenerationExhausted(
                f"Ran out of empty cells after placing {placed}/{count} obstacles",
                kind="obstacle", requested=count, placed=placed, attempts=attempts,
            )

        attempts += 1
        pos = rng.choice(candidates)
        grid.set_cell(pos, CellType.OBSTACLE)

        if not is_fully_connected(grid, origin):
            grid.set_cell(pos, CellType.EMPTY)
            logger.debug(f"Obstacle at {pos} would enclose open cells, retrying")
            continue

        placed += 1

    logger.debug(f"Placed {placed} obstacles in {attempts} attempts")
    return attempts


def place_treasures(
    grid: Grid,
    count: int,
    origin: Position = ORIGIN,
    rng: Optional[random.Random] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> list[Position]:
    """
    Place exactly `count` treasures on cells reachable from origin.

    Args:
        grid: Grid to modify in place
        count: Number of treasures to place
        origin: Player starting cell; never holds a treasure
        rng: Random source (a fresh unseeded one if omitted)
        max_attempts: Upper bound on placement attempts

    Returns:
        Treasure positions in placement order

    Raises:
        GenerationExhausted: If the treasures cannot be placed within max_attempts
    """
    rng = rng or random.Random()
    available = len(_candidates(grid, origin))
    if count > available:
        raise GenerationExhausted(
            f"Cannot place {count} treasures: only {available} empty cells available",
            kind="treasure", requested=count, placed=0, attempts=0,
        )

    treasures: list[Position] = []
    attempts = 0
    while len(treasures) < count:
        if attempts >= max_attempts:
            raise GenerationExhausted(
                f"Placed {len(treasures)}/{count} treasures after {attempts} attempts",
                kind="treasure", requested=count, placed=len(treasures), attempts=attempts,
            )
        candidates = _candidates(grid, origin)
        if not candidates:
            raise GenerationExhausted(
                f"Ran out of empty cells after placing {len(treasures)}/{count} treasures",
                kind="treasure", requested=count, placed=len(treasures), attempts=attempts,
            )

        attempts += 1
        pos = rng.choice(candidates)
        if not is_reachable(grid, origin, pos):
            logger.debug(f"Treasure candidate {pos} unreachable from {origin}, retrying")
            continue

        grid.set_cell(pos, CellType.TREASURE)
        treasures.append(pos)

    logger.debug(f"Placed {len(treasures)} treasures in {attempts} attempts")
    return treasures


def generate_map(
    size: int,
    obstacle_count: int,
    treasure_count: int,
    origin: Position = ORIGIN,
    rng: Optional[random.Random] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> GeneratedMap:
    """
    Build a fresh grid with obstacles and treasures.

    Raises:
        GenerationExhausted: If either placement loop runs out of attempts
    """
    rng = rng or random.Random()
    grid = Grid(size)
    if not grid.in_bounds(origin):
        raise ValueError(f"Origin {origin} is outside a {size}x{size} grid")

    obstacle_attempts = generate_obstacles(grid, obstacle_count, origin, rng, max_attempts)
    treasures = place_treasures(grid, treasure_count, origin, rng, max_attempts)

    logger.info(
        f"Generated {size}x{size} map: {obstacle_count} obstacles "
        f"({obstacle_attempts} attempts), {len(treasures)} treasures"
    )
    return GeneratedMap(
        grid=grid,
        treasures=treasures,
        origin=origin,
        obstacle_attempts=obstacle_attempts,
    )
