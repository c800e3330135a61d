"""
Tests for grid bounds and snake body operations.
"""

import pytest

from mutant_snake.snake_core.config_loader import load_config
from mutant_snake.snake_core.grid import DOWN, LEFT, NEUTRAL, RIGHT, UP, Grid, is_opposite
from mutant_snake.snake_core.snake import Snake


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def grid(config):
    return Grid.from_config(config)


class TestGrid:
    """Test bounds checking."""

    def test_dimensions_from_canvas(self, grid, config):
        """Grid extent is canvas size over cell size."""
        assert grid.width == config.board.canvas_size // config.board.cell_size
        assert (grid.width, grid.height) == (20, 20)

    def test_in_bounds_edges(self, grid):
        """Corners are inside; one step past any edge is outside."""
        assert grid.in_bounds((0, 0))
        assert grid.in_bounds((19, 19))
        assert not grid.in_bounds((-1, 0))
        assert not grid.in_bounds((0, -1))
        assert not grid.in_bounds((20, 5))
        assert not grid.in_bounds((5, 20))

    def test_cells_cover_grid(self, grid):
        """cells() enumerates every cell once."""
        cells = list(grid.cells())
        assert len(cells) == grid.cell_count == len(set(cells))

    def test_invalid_dimensions(self):
        """Empty grids are rejected."""
        with pytest.raises(ValueError):
            Grid(0, 5)

    def test_opposites(self):
        """Reversal detection pairs up/down and left/right only."""
        assert is_opposite(UP, DOWN)
        assert is_opposite(LEFT, RIGHT)
        assert not is_opposite(UP, LEFT)
        assert not is_opposite(NEUTRAL, NEUTRAL)


class TestSnake:
    """Test body mutation and collision tests."""

    def test_advance_does_not_mutate(self):
        """advance() only computes the next head."""
        snake = Snake([(5, 5), (4, 5)])
        assert snake.advance(RIGHT) == (6, 5)
        assert snake.cells == ((5, 5), (4, 5))

    def test_grow_adds_segment(self):
        """grow() prepends and keeps the tail."""
        snake = Snake([(5, 5)])
        snake.grow((6, 5))
        assert snake.cells == ((6, 5), (5, 5))
        assert len(snake) == 2

    def test_move_keeps_length(self):
        """move_without_growth() prepends and drops the tail."""
        snake = Snake([(5, 5), (4, 5), (3, 5)])
        snake.move_without_growth((5, 6))
        assert snake.cells == ((5, 6), (5, 5), (4, 5))

    def test_wall_collision(self, grid):
        """Leaving the grid is a wall collision."""
        snake = Snake([(0, 0)])
        assert snake.would_collide_with_wall(snake.advance(LEFT), grid)
        assert not snake.would_collide_with_wall(snake.advance(RIGHT), grid)

    def test_self_collision_excludes_tail_on_plain_move(self):
        """The tail cell is free on a non-growth move but not on a growth move."""
        snake = Snake([(5, 5), (6, 5), (6, 6), (5, 6)])
        assert not snake.would_collide_with_self((5, 6), growing=False)
        assert snake.would_collide_with_self((5, 6), growing=True)
        assert snake.would_collide_with_self((6, 6), growing=False)

    def test_empty_snake_rejected(self):
        """A snake needs at least one segment."""
        with pytest.raises(ValueError):
            Snake([])
