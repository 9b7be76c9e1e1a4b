"""Connectivity-preserving map generation."""

from .exceptions import GenerationError, GenerationExhausted
from .generator import (
    DEFAULT_MAX_ATTEMPTS,
    GeneratedMap,
    generate_map,
    generate_obstacles,
    place_treasures,
)

__all__ = [
    # Generator
    "DEFAULT_MAX_ATTEMPTS",
    "GeneratedMap",
    "generate_map",
    "generate_obstacles",
    "place_treasures",
    # Errors
    "GenerationError",
    "GenerationExhausted",
]
