"""
Snake Core - The simulation engine.

Main exports:
- CoreGame: Session state machine (set_direction, tick, restart, snapshot)
- GameClock: Real-time ticker driving a CoreGame
- SnakeEnv: Gymnasium environment for agents
- LeaderboardStore: Persisted high-score table
- GameConfig: Configuration loaded from game_config.yaml
"""

from mutant_snake.snake_core.config_loader import GameConfig, load_config
from mutant_snake.snake_core.grid import Grid, UP, DOWN, LEFT, RIGHT, NEUTRAL
from mutant_snake.snake_core.mutations import MutationKind, ActivePowerUp, PowerUpController
from mutant_snake.snake_core.scoring import EvolutionTier, ScoreTracker, tier_for_score
from mutant_snake.snake_core.leaderboard import LeaderboardEntry, LeaderboardStore, merge_entries
from mutant_snake.snake_core.notifier import GameNotifier, LoggingNotifier, CallbackNotifier
from mutant_snake.snake_core.state_snapshot import GamePhase, GameSnapshot
from mutant_snake.snake_core.game import CoreGame, StepResult
from mutant_snake.snake_core.clock import GameClock
from mutant_snake.snake_core.env_gym import SnakeEnv

__all__ = [
    "GameConfig",
    "load_config",
    "Grid",
    "UP",
    "DOWN",
    "LEFT",
    "RIGHT",
    "NEUTRAL",
    "MutationKind",
    "ActivePowerUp",
    "PowerUpController",
    "EvolutionTier",
    "ScoreTracker",
    "tier_for_score",
    "LeaderboardEntry",
    "LeaderboardStore",
    "merge_entries",
    "GameNotifier",
    "LoggingNotifier",
    "CallbackNotifier",
    "GamePhase",
    "GameSnapshot",
    "CoreGame",
    "StepResult",
    "GameClock",
    "SnakeEnv",
]
