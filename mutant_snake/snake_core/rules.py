"""
Game Rules
==========

Handles direction changes, collision outcomes and tick-interval changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from mutant_snake.snake_core.config_loader import GameConfig, get_config
from mutant_snake.snake_core.grid import (
    Coordinate,
    Direction,
    Grid,
    NEUTRAL,
    VALID_DIRECTIONS,
    is_opposite,
)
from mutant_snake.snake_core.snake import Snake


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    truncated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, False, reason)

    @staticmethod
    def truncation(reason: str) -> "TerminationResult":
        return TerminationResult(False, True, reason)


class MovementRules:
    """
    Decides whether a requested direction replaces the current one.

    Reversal into the neck is ignored when block_reverse is set and the
    snake is longer than one segment.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()
        self._block_reverse = config.rules.block_reverse

    @staticmethod
    def validate(direction) -> Direction:
        """Normalize to a tuple and reject anything but a unit step or (0, 0)."""
        try:
            candidate = (int(direction[0]), int(direction[1]))
        except (TypeError, ValueError, IndexError):
            raise ValueError(f"Invalid direction: {direction!r}")
        # No silent truncation of fractional components
        if candidate != (direction[0], direction[1]):
            raise ValueError(f"Invalid direction: {direction!r}")
        if candidate not in VALID_DIRECTIONS:
            raise ValueError(f"Invalid direction: {direction!r}")
        return candidate

    def accepts(self, requested: Direction, current: Direction, snake_length: int) -> bool:
        if requested == NEUTRAL:
            return False
        if self._block_reverse and snake_length > 1 and is_opposite(requested, current):
            return False
        return True


class CollisionRules:
    """
    Wall and self collision checks for the upcoming head cell.

    Walls always end the game. Self collision is suppressed while a shield
    is active.
    """

    def check(
        self,
        snake: Snake,
        next_head: Coordinate,
        grid: Grid,
        shield_active: bool,
        growing: bool
    ) -> TerminationResult:
        """
        Check collision outcome of moving the head into next_head.

        Args:
            snake: Pre-move snake.
            next_head: Cell the head is about to enter.
            grid: Board bounds.
            shield_active: True while a shield power-up runs.
            growing: True if this move consumes the item.

        Returns:
            TerminationResult indicating game state.
        """
        if snake.would_collide_with_wall(next_head, grid):
            return TerminationResult.game_over("wall")

        if not shield_active and snake.would_collide_with_self(next_head, growing):
            return TerminationResult.game_over("self")

        return TerminationResult.none()


class SpeedRules:
    """Tick-interval arithmetic, always floored at min_tick_ms."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()
        self._initial = config.timing.initial_tick_ms
        self._min = config.timing.min_tick_ms
        self._decrement = config.timing.catch_decrement_ms

    @property
    def initial_interval_ms(self) -> int:
        return self._initial

    @property
    def min_interval_ms(self) -> int:
        return self._min

    def after_catch(self, interval_ms: int) -> int:
        """Permanent per-catch speed-up."""
        return max(self._min, interval_ms - self._decrement)

    def effective(self, interval_ms: int, boost_ms: int) -> int:
        """Interval actually used by the clock once power-up boosts apply."""
        return max(self._min, interval_ms - boost_ms)


class GameRules:
    """
    Combined interface for all game rules.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize game rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self.movement = MovementRules(config)
        self.collision = CollisionRules()
        self.speed = SpeedRules(config)
