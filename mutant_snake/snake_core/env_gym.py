"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the snake engine.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

import gymnasium as gym
from gymnasium import spaces

from mutant_snake.snake_core.config_loader import GameConfig, load_config
from mutant_snake.snake_core.game import CoreGame
from mutant_snake.snake_core.grid import DOWN, LEFT, RIGHT, UP
from mutant_snake.snake_core.mutations import MutationKind
from mutant_snake.snake_core.notifier import GameNotifier
from mutant_snake.snake_core.scoring import EvolutionTier
from mutant_snake.snake_core.state_snapshot import CELL_ITEM

# Discrete action -> direction (0 keeps the current heading)
ACTION_DIRECTIONS = {
    1: UP,
    2: DOWN,
    3: LEFT,
    4: RIGHT,
}


class SnakeEnv(gym.Env):
    """
    Mutant snake as a Gymnasium environment.

    Action Space:
        Discrete(5): 0 keep heading, 1 up, 2 down, 3 left, 4 right.
        Reversals are ignored like any other input.

    Observation Space:
        Dict with the occupancy grid and session scalars.

    Reward:
        Always 0.0. Agents compute their own reward from the info dict.

    Each step simulates one tick and advances power-up timers by the tick
    interval, as if the game ran in real time.
    """

    metadata = {
        "render_modes": ["ansi"],
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None
    ):
        """
        Initialize snake environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            config: Already loaded configuration (takes precedence over path).
            render_mode: "ansi" for a text board, None for headless.
        """
        super().__init__()

        self._config = config if config is not None else load_config(config_path)
        self.render_mode = render_mode

        # Notifications go nowhere; evaluation reads info instead
        self._game = CoreGame(config=self._config, notifier=GameNotifier())

        self._steps = 0

        self.action_space = spaces.Discrete(5)
        self.observation_space = self._build_observation_space()

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        width, height = self._config.grid_size
        cells = width * height
        timing = self._config.timing

        return spaces.Dict({
            "grid": spaces.Box(low=0, high=CELL_ITEM, shape=(height, width), dtype=np.int8),
            "head": spaces.Box(low=0, high=max(width, height), shape=(2,), dtype=np.int32),
            "direction": spaces.Box(low=-1, high=1, shape=(2,), dtype=np.int32),
            "item": spaces.Box(low=0, high=max(width, height), shape=(2,), dtype=np.int32),
            "item_kind": spaces.Discrete(len(MutationKind)),
            "length": spaces.Box(low=1, high=cells, shape=(), dtype=np.int32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "evolution_tier": spaces.Discrete(len(EvolutionTier)),
            "power_up_kind": spaces.Box(low=-1, high=len(MutationKind) - 1, shape=(), dtype=np.int32),
            "power_up_remaining": spaces.Box(
                low=0, high=self._config.powerups.duration_seconds, shape=(), dtype=np.float32
            ),
            "double_points_pending": spaces.Discrete(2),
            "tick_interval_ms": spaces.Box(
                low=timing.min_tick_ms, high=timing.initial_tick_ms, shape=(), dtype=np.int32
            ),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._steps = 0
        snapshot = self._game.restart(seed=seed)

        obs = snapshot.to_obs_dict()
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: Discrete action in [0, 4].

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())
        action = int(action)
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action: {action}")

        direction = ACTION_DIRECTIONS.get(action)
        if direction is not None:
            self._game.set_direction(direction)

        self._game.advance_time(self._game.effective_interval_ms / 1000.0)
        result = self._game.tick()
        self._steps += 1

        obs = result.snapshot.to_obs_dict()
        truncated = (not result.terminated) and self._steps >= self._config.caps.max_ticks

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["consumed"] = result.consumed.kind.value if result.consumed is not None else None
        if truncated:
            info["terminated_reason"] = "tick_cap"

        return obs, 0.0, result.terminated, truncated, info

    def render(self) -> Optional[str]:
        """
        Render the current game state.

        Returns:
            Text board if render_mode is "ansi", None otherwise.
        """
        if self.render_mode != "ansi":
            return None

        glyphs = {0: ".", 1: "o", 2: "@", 3: "*"}
        grid = self._game.snapshot().to_grid()
        return "\n".join("".join(glyphs[int(c)] for c in row) for row in grid)

    def close(self) -> None:
        """Clean up resources."""

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
