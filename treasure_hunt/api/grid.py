"""
The cell lattice.

A square grid of side N backed by two numpy arrays: one holding the
CellType of every cell and one holding its reveal flag. Arrays are
indexed [y, x] like the observation arrays they are modelled on.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

import numpy as np

from .models import ORIGIN, CellType, Position


class Grid:
    """
    Square lattice of cells.

    The grid is pure storage: it has no game rules. Only the map generator
    and the game session mutate it; the search engine and the connectivity
    checker only read it.
    """

    def __init__(self, size: int):
        if size < 1:
            raise ValueError(f"Grid size must be at least 1, got {size}")
        self.size = size
        self._cells = np.full((size, size), CellType.EMPTY.value, dtype=np.int8)
        self._revealed = np.zeros((size, size), dtype=bool)

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> "Grid":
        """
        Build a grid from text rows.

        '#' is an obstacle, '$' a treasure, anything else is empty.
        The rows must form a square.
        """
        rows = list(rows)
        grid = cls(len(rows))
        for y, row in enumerate(rows):
            if len(row) != grid.size:
                raise ValueError(f"Row {y} has length {len(row)}, expected {grid.size}")
            for x, char in enumerate(row):
                if char == "#":
                    grid.set_cell(Position(x, y), CellType.OBSTACLE)
                elif char == "$":
                    grid.set_cell(Position(x, y), CellType.TREASURE)
        return grid

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.size and 0 <= pos.y < self.size

    def get_cell(self, pos: Position) -> CellType:
        return CellType(int(self._cells[pos.y, pos.x]))

    def set_cell(self, pos: Position, cell_type: CellType) -> None:
        self._cells[pos.y, pos.x] = cell_type.value

    def is_obstacle(self, pos: Position) -> bool:
        return self._cells[pos.y, pos.x] == CellType.OBSTACLE.value

    def is_walkable(self, pos: Position) -> bool:
        """In bounds and not an obstacle."""
        return self.in_bounds(pos) and not self.is_obstacle(pos)

    def is_revealed(self, pos: Position) -> bool:
        return bool(self._revealed[pos.y, pos.x])

    def reveal(self, pos: Position) -> None:
        self._revealed[pos.y, pos.x] = True

    def positions(self) -> Iterator[Position]:
        """Iterate over every position, row by row."""
        for y in range(self.size):
            for x in range(self.size):
                yield Position(x, y)

    def positions_of(self, cell_type: CellType) -> list[Position]:
        ys, xs = np.nonzero(self._cells == cell_type.value)
        return [Position(int(x), int(y)) for y, x in zip(ys, xs)]

    def count(self, cell_type: CellType) -> int:
        return int(np.count_nonzero(self._cells == cell_type.value))

    def walkable_mask(self) -> np.ndarray:
        """Boolean [y, x] array, True where the cell is not an obstacle."""
        return self._cells != CellType.OBSTACLE.value

    def copy(self) -> "Grid":
        other = Grid(self.size)
        other._cells = self._cells.copy()
        other._revealed = self._revealed.copy()
        return other

    def snapshot(
        self,
        player: Optional[Position] = None,
        visited: Iterable[Position] = (),
        transparent: bool = False,
    ) -> "GridSnapshot":
        """Freeze the current state into an immutable view for display."""
        cells = self._cells.copy()
        revealed = self._revealed.copy()
        cells.flags.writeable = False
        revealed.flags.writeable = False
        return GridSnapshot(
            size=self.size,
            cells=cells,
            revealed=revealed,
            player=player if player is not None else ORIGIN,
            visited=frozenset(visited),
            transparent=transparent,
        )

    def __repr__(self) -> str:
        return (
            f"Grid(size={self.size}, obstacles={self.count(CellType.OBSTACLE)}, "
            f"treasures={self.count(CellType.TREASURE)})"
        )


@dataclass(frozen=True, eq=False)
class GridSnapshot:
    """Immutable view of the grid handed to the UI layer."""

    size: int
    cells: np.ndarray
    revealed: np.ndarray
    player: Position
    visited: frozenset[Position]
    transparent: bool = False

    def cell_at(self, pos: Position) -> CellType:
        return CellType(int(self.cells[pos.y, pos.x]))

    def is_visible(self, pos: Position) -> bool:
        """Hidden cells are shown only once revealed or in transparent mode."""
        return self.transparent or bool(self.revealed[pos.y, pos.x])

    def render(self) -> list[str]:
        """
        Render the snapshot as text rows.

        '@' player, '#' obstacle, '$' treasure, '*' visited trail,
        '.' empty. Hidden obstacles and treasures render as empty.
        """
        rows = []
        for y in range(self.size):
            chars = []
            for x in range(self.size):
                pos = Position(x, y)
                cell = self.cell_at(pos)
                if pos == self.player:
                    chars.append("@")
                elif cell is CellType.EMPTY or not self.is_visible(pos):
                    chars.append("*" if pos in self.visited else ".")
                elif cell is CellType.OBSTACLE:
                    chars.append("#")
                else:
                    chars.append("$")
            rows.append("".join(chars))
        return rows

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "size": self.size,
            "rows": self.render(),
            "player": [self.player.x, self.player.y],
            "transparent": self.transparent,
        }
