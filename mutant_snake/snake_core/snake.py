"""
Snake Body
==========

Ordered body segments with move/grow operations and collision tests.
The head is at index 0.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Tuple

from mutant_snake.snake_core.grid import Coordinate, Direction, Grid, step


class Snake:
    """
    Snake body as a deque of cells, head first.

    Only body mutation happens here; randomness, timing and scoring live in
    the game orchestrator.
    """

    def __init__(self, cells: Iterable[Coordinate]):
        """
        Initialize snake.

        Args:
            cells: Body cells, head first. Must contain at least one cell.
        """
        self._body: Deque[Coordinate] = deque(tuple(c) for c in cells)
        if not self._body:
            raise ValueError("Snake needs at least one segment")

    @property
    def head(self) -> Coordinate:
        return self._body[0]

    @property
    def tail(self) -> Coordinate:
        return self._body[-1]

    @property
    def cells(self) -> Tuple[Coordinate, ...]:
        """Body cells, head first (copy)."""
        return tuple(self._body)

    def __len__(self) -> int:
        return len(self._body)

    def __contains__(self, cell: Coordinate) -> bool:
        return cell in self._body

    def advance(self, direction: Direction) -> Coordinate:
        """Cell the head would enter moving in direction. Does not mutate."""
        return step(self.head, direction)

    def would_collide_with_wall(self, next_head: Coordinate, grid: Grid) -> bool:
        return not grid.in_bounds(next_head)

    def would_collide_with_self(self, next_head: Coordinate, growing: bool = False) -> bool:
        """
        Check next_head against the pre-move body.

        On a non-growth move the tail cell is vacated in the same tick, so
        entering it is not a collision. A growth move keeps the whole body.
        """
        segments = list(self._body)
        if not growing:
            segments = segments[:-1]
        return next_head in segments

    def grow(self, next_head: Coordinate) -> None:
        """Prepend next_head; length + 1."""
        self._body.appendleft(next_head)

    def move_without_growth(self, next_head: Coordinate) -> None:
        """Prepend next_head and drop the tail; length unchanged."""
        self._body.appendleft(next_head)
        self._body.pop()

    def __repr__(self) -> str:
        return f"Snake(head={self.head}, length={len(self)})"
