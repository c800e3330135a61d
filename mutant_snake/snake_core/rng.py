"""
RNG - Item Spawner
==================

Places the single consumable item on a random free cell with a random
mutation kind. Seeded for reproducibility.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Collection, Optional, Tuple

from mutant_snake.snake_core.config_loader import GameConfig, get_config
from mutant_snake.snake_core.grid import Coordinate, Grid
from mutant_snake.snake_core.mutations import MutationKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Item:
    """The one active consumable."""
    cell: Coordinate
    kind: MutationKind


class ItemSpawner:
    """
    Uniform random item placement.

    Draws random cells until one is free, up to spawn_max_attempts; after
    that it picks uniformly among the remaining free cells so a crowded board
    still gets a reachable item.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)
        self._kinds: Tuple[MutationKind, ...] = tuple(
            MutationKind(k) for k in config.powerups.kinds
        )
        self._max_attempts = config.rules.spawn_max_attempts

    @property
    def kinds(self) -> Tuple[MutationKind, ...]:
        return self._kinds

    def spawn(self, grid: Grid, excluded: Collection[Coordinate] = ()) -> Item:
        """
        Create a new item.

        Args:
            grid: Board to place the item on.
            excluded: Occupied cells (the snake body).

        Returns:
            New Item.
        """
        excluded = set(excluded)
        cell = self._random_free_cell(grid, excluded)
        kind = self._rng.choice(self._kinds)
        logger.debug("Spawned %s item at %s", kind.value, cell)
        return Item(cell=cell, kind=kind)

    def _random_free_cell(self, grid: Grid, excluded: set) -> Coordinate:
        for _ in range(self._max_attempts):
            cell = (self._rng.randrange(grid.width), self._rng.randrange(grid.height))
            if cell not in excluded:
                return cell

        free = [cell for cell in grid.cells() if cell not in excluded]
        if free:
            return self._rng.choice(free)

        # Board completely covered; nothing reachable remains
        logger.warning("No free cell for item on %r; placing on an occupied cell", grid)
        return (self._rng.randrange(grid.width), self._rng.randrange(grid.height))

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the random source.

        Args:
            seed: New random seed. Keeps current stream if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
