"""
Grid
====

Fixed-size cell coordinate space and the four movement directions.
"""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

from mutant_snake.snake_core.config_loader import GameConfig, get_config

Coordinate = Tuple[int, int]
Direction = Tuple[int, int]

# ----- Directions (dx, dy), y grows downward -----
UP: Direction = (0, -1)
DOWN: Direction = (0, 1)
LEFT: Direction = (-1, 0)
RIGHT: Direction = (1, 0)
NEUTRAL: Direction = (0, 0)

VALID_DIRECTIONS = (UP, DOWN, LEFT, RIGHT, NEUTRAL)


def is_opposite(a: Direction, b: Direction) -> bool:
    """True if a and b point in exactly reverse directions."""
    return a != NEUTRAL and a[0] == -b[0] and a[1] == -b[1]


def step(cell: Coordinate, direction: Direction) -> Coordinate:
    return (cell[0] + direction[0], cell[1] + direction[1])


class Grid:
    """
    Bounded (non-wrapping) grid of width x height cells.

    Stateless apart from its dimensions.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height

    @classmethod
    def from_config(cls, config: Optional[GameConfig] = None) -> "Grid":
        if config is None:
            config = get_config()
        return cls(config.board.width, config.board.height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def cell_count(self) -> int:
        return self._width * self._height

    def in_bounds(self, cell: Coordinate) -> bool:
        """True if cell lies inside the grid."""
        x, y = cell
        return 0 <= x < self._width and 0 <= y < self._height

    def cells(self) -> Iterator[Coordinate]:
        """Iterate all cells in row-major order."""
        for y in range(self._height):
            for x in range(self._width):
                yield (x, y)

    def __repr__(self) -> str:
        return f"Grid({self._width}x{self._height})"
