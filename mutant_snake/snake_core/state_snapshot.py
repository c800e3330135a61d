"""
State Snapshot
==============

Immutable per-tick view of a session for renderers and agents, with
numpy packing for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

import numpy as np

from mutant_snake.snake_core.grid import Coordinate, Direction
from mutant_snake.snake_core.mutations import ActivePowerUp, MutationKind
from mutant_snake.snake_core.scoring import EvolutionTier

# Cell codes used by to_grid()
CELL_EMPTY = 0
CELL_BODY = 1
CELL_HEAD = 2
CELL_ITEM = 3


class GamePhase(str, Enum):
    RUNNING = "running"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameSnapshot:
    """
    Complete session state at one observation point.

    Renderers read snake_cells, item_cell, item_kind, score, evolution_tier,
    active_power_up and phase; the remaining fields support agents and
    session restore.
    """
    # Renderer contract
    snake_cells: Tuple[Coordinate, ...]   # Head first
    item_cell: Coordinate
    item_kind: MutationKind
    score: int
    evolution_tier: EvolutionTier
    active_power_up: Optional[ActivePowerUp]
    phase: GamePhase

    # Timing
    tick_interval_ms: int          # Score-driven interval
    effective_interval_ms: int     # After SPEED boosts
    speed_boost_ms: int

    # Extra session state
    direction: Direction
    grid_width: int
    grid_height: int
    double_points_pending: bool
    ticks: int
    termination_reason: str = ""

    @property
    def head(self) -> Coordinate:
        return self.snake_cells[0]

    @property
    def length(self) -> int:
        return len(self.snake_cells)

    @property
    def is_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER

    def to_grid(self) -> np.ndarray:
        """
        Occupancy grid of shape (grid_height, grid_width), dtype int8.

        0 empty, 1 body, 2 head, 3 item.
        """
        grid = np.zeros((self.grid_height, self.grid_width), dtype=np.int8)
        ix, iy = self.item_cell
        if 0 <= ix < self.grid_width and 0 <= iy < self.grid_height:
            grid[iy, ix] = CELL_ITEM
        for x, y in self.snake_cells[1:]:
            grid[y, x] = CELL_BODY
        hx, hy = self.head
        grid[hy, hx] = CELL_HEAD
        return grid

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        if self.active_power_up is not None:
            power_up_kind = self.active_power_up.kind.ordinal
            power_up_remaining = self.active_power_up.remaining_seconds
        else:
            power_up_kind = -1
            power_up_remaining = 0.0

        return {
            "grid": self.to_grid(),
            "head": np.array(self.head, dtype=np.int32),
            "direction": np.array(self.direction, dtype=np.int32),
            "item": np.array(self.item_cell, dtype=np.int32),
            "item_kind": np.array(self.item_kind.ordinal, dtype=np.int32),
            "length": np.array(self.length, dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "evolution_tier": np.array(self.evolution_tier.rank, dtype=np.int32),
            "power_up_kind": np.array(power_up_kind, dtype=np.int32),
            "power_up_remaining": np.array(power_up_remaining, dtype=np.float32),
            "double_points_pending": np.array(int(self.double_points_pending), dtype=np.int8),
            "tick_interval_ms": np.array(self.effective_interval_ms, dtype=np.int32),
        }
