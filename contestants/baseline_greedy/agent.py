"""
Baseline Greedy Agent - Heads straight for the item.

Reads the occupancy grid, discards moves that leave the board or enter the
body, and picks the remaining move closest (Manhattan) to the item. Ties
prefer keeping the current heading.

This serves as:
1. A working example of how to read observations and return actions
2. A baseline benchmark for agents to compare against
"""

from typing import Any, Dict, Optional

import numpy as np

# Action ids understood by SnakeEnv
KEEP, UP, DOWN, LEFT, RIGHT = 0, 1, 2, 3, 4

MOVES = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

# Grid cell codes that block movement (body, head)
BLOCKING = (1, 2)


class SnakeAgent:
    """Greedy item chaser with one-step lookahead."""

    def __init__(self, debug: bool = False, seed: int = 0):
        self.debug = debug
        self._rng = np.random.default_rng(seed)

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self._rng = np.random.default_rng(seed)

    def act(self, observation: Dict[str, Any]) -> int:
        """
        Choose the safe move closest to the item.

        Args:
            observation: Dict of numpy arrays from the environment.

        Returns:
            Action id in [0, 4].
        """
        grid = observation["grid"]
        height, width = grid.shape
        hx, hy = (int(v) for v in observation["head"])
        ix, iy = (int(v) for v in observation["item"])
        heading = tuple(int(v) for v in observation["direction"])

        best_action = KEEP
        best_key = None
        for action, (dx, dy) in MOVES.items():
            if (dx, dy) == (-heading[0], -heading[1]) and heading != (0, 0):
                continue
            nx, ny = hx + dx, hy + dy
            if not (0 <= nx < width and 0 <= ny < height):
                continue
            if grid[ny, nx] in BLOCKING:
                continue
            distance = abs(ix - nx) + abs(iy - ny)
            key = (distance, (dx, dy) != heading, self._rng.random())
            if best_key is None or key < best_key:
                best_key = key
                best_action = action

        if self.debug:
            print(f"[GREEDY] head=({hx},{hy}) item=({ix},{iy}) -> action {best_action}")

        return best_action


def act(observation: Dict[str, Any]) -> int:
    """Standalone act function (alternative to class-based agent)."""
    return SnakeAgent().act(observation)
