"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml


# Mutation kinds the engine knows how to apply
KNOWN_MUTATION_KINDS = ("speed", "shield", "double_points", "camouflage")

# Evolution tiers in ascending order
KNOWN_TIERS = ("tiny", "agile", "armored", "legendary")


@dataclass(frozen=True)
class BoardConfig:
    """Board geometry and initial snake placement."""
    canvas_size: int   # Canvas extent in pixels (square)
    cell_size: int     # Pixels per cell
    spawn_x: int       # Initial head cell
    spawn_y: int

    @property
    def width(self) -> int:
        """Grid width in cells."""
        return self.canvas_size // self.cell_size

    @property
    def height(self) -> int:
        """Grid height in cells."""
        return self.canvas_size // self.cell_size

    @property
    def spawn(self) -> Tuple[int, int]:
        return (self.spawn_x, self.spawn_y)


@dataclass(frozen=True)
class TimingConfig:
    """Tick interval parameters (milliseconds)."""
    initial_tick_ms: int
    min_tick_ms: int
    catch_decrement_ms: int


@dataclass(frozen=True)
class PowerUpConfig:
    """Mutation power-up parameters."""
    duration_seconds: float
    speed_decrement_ms: int
    restore_speed_on_expire: bool
    kinds: Tuple[str, ...]


@dataclass(frozen=True)
class TierThreshold:
    """Minimum cumulative score for an evolution tier."""
    tier: str
    min_score: int


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring, evolution and notification thresholds."""
    base_points: int
    double_points_multiplier: int
    evolution: Tuple[TierThreshold, ...]
    milestones: Tuple[Tuple[int, str], ...]
    reward_thresholds: Tuple[int, ...]

    @property
    def milestone_labels(self) -> Dict[int, str]:
        return dict(self.milestones)


@dataclass(frozen=True)
class RulesConfig:
    """Movement and spawning rules."""
    block_reverse: bool
    spawn_max_attempts: int


@dataclass(frozen=True)
class LeaderboardConfig:
    """High-score table parameters."""
    capacity: int
    default_player: str


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits for headless play."""
    max_ticks: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    timing: TimingConfig
    powerups: PowerUpConfig
    scoring: ScoringConfig
    rules: RulesConfig
    leaderboard: LeaderboardConfig
    caps: CapsConfig

    @property
    def grid_size(self) -> Tuple[int, int]:
        """(width, height) in cells."""
        return (self.board.width, self.board.height)


def _parse_evolution(evolution_data: list) -> Tuple[TierThreshold, ...]:
    """Parse evolution tier thresholds from YAML."""
    return tuple(
        TierThreshold(tier=str(entry["tier"]), min_score=int(entry["min_score"]))
        for entry in evolution_data
    )


def _parse_milestones(milestone_data: Optional[dict]) -> Tuple[Tuple[int, str], ...]:
    """Parse {score: label} milestone mapping, sorted by score."""
    if not milestone_data:
        return ()
    return tuple(sorted((int(score), str(label)) for score, label in milestone_data.items()))


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    board = config.board
    if board.cell_size <= 0 or board.canvas_size <= 0:
        raise ValueError(
            f"canvas_size ({board.canvas_size}) and cell_size ({board.cell_size}) must be positive"
        )
    if board.canvas_size % board.cell_size != 0:
        raise ValueError(
            f"canvas_size ({board.canvas_size}) must be a multiple of cell_size ({board.cell_size})"
        )
    if not (0 <= board.spawn_x < board.width and 0 <= board.spawn_y < board.height):
        raise ValueError(f"Spawn cell {board.spawn} is outside the {board.width}x{board.height} grid")

    timing = config.timing
    if timing.min_tick_ms <= 0:
        raise ValueError(f"min_tick_ms must be positive, got {timing.min_tick_ms}")
    if timing.min_tick_ms > timing.initial_tick_ms:
        raise ValueError(
            f"min_tick_ms ({timing.min_tick_ms}) exceeds initial_tick_ms ({timing.initial_tick_ms})"
        )

    powerups = config.powerups
    if powerups.duration_seconds <= 0:
        raise ValueError(f"Power-up duration must be positive, got {powerups.duration_seconds}")
    if not powerups.kinds:
        raise ValueError("At least one mutation kind is required")
    for kind in powerups.kinds:
        if kind not in KNOWN_MUTATION_KINDS:
            raise ValueError(f"Unknown mutation kind '{kind}'")

    # Evolution ladder must start at 0 and ascend
    evolution = config.scoring.evolution
    if not evolution or evolution[0].min_score != 0:
        raise ValueError("Evolution ladder must start with a tier at min_score 0")
    for prev, cur in zip(evolution, evolution[1:]):
        if cur.min_score <= prev.min_score:
            raise ValueError(
                f"Evolution thresholds must ascend: {prev.tier}={prev.min_score}, "
                f"{cur.tier}={cur.min_score}"
            )
    for threshold in evolution:
        if threshold.tier not in KNOWN_TIERS:
            raise ValueError(f"Unknown evolution tier '{threshold.tier}'")

    thresholds = config.scoring.reward_thresholds
    for prev, cur in zip(thresholds, thresholds[1:]):
        if cur <= prev:
            raise ValueError(f"reward_thresholds must be strictly ascending, got {list(thresholds)}")

    if config.leaderboard.capacity < 1:
        raise ValueError(f"Leaderboard capacity must be >= 1, got {config.leaderboard.capacity}")

    if config.rules.spawn_max_attempts < 1:
        raise ValueError(f"spawn_max_attempts must be >= 1, got {config.rules.spawn_max_attempts}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        canvas_size=int(board_data["canvas_size"]),
        cell_size=int(board_data["cell_size"]),
        spawn_x=int(board_data["spawn_x"]),
        spawn_y=int(board_data["spawn_y"])
    )

    timing_data = raw["timing"]
    timing = TimingConfig(
        initial_tick_ms=int(timing_data["initial_tick_ms"]),
        min_tick_ms=int(timing_data["min_tick_ms"]),
        catch_decrement_ms=int(timing_data.get("catch_decrement_ms", 10))
    )

    powerup_data = raw["powerups"]
    powerups = PowerUpConfig(
        duration_seconds=float(powerup_data["duration_seconds"]),
        speed_decrement_ms=int(powerup_data.get("speed_decrement_ms", 30)),
        restore_speed_on_expire=bool(powerup_data.get("restore_speed_on_expire", False)),
        kinds=tuple(str(k) for k in powerup_data.get("kinds", KNOWN_MUTATION_KINDS))
    )

    scoring_data = raw["scoring"]
    scoring = ScoringConfig(
        base_points=int(scoring_data.get("base_points", 1)),
        double_points_multiplier=int(scoring_data.get("double_points_multiplier", 2)),
        evolution=_parse_evolution(scoring_data["evolution"]),
        milestones=_parse_milestones(scoring_data.get("milestones")),
        reward_thresholds=tuple(int(t) for t in scoring_data.get("reward_thresholds", ()))
    )

    rules_data = raw.get("rules", {})
    rules = RulesConfig(
        block_reverse=bool(rules_data.get("block_reverse", True)),
        spawn_max_attempts=int(rules_data.get("spawn_max_attempts", 100))
    )

    lb_data = raw.get("leaderboard", {})
    leaderboard = LeaderboardConfig(
        capacity=int(lb_data.get("capacity", 10)),
        default_player=str(lb_data.get("default_player", "anonymous"))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_ticks=int(caps_data.get("max_ticks", 5000))
    )

    config = GameConfig(
        board=board,
        timing=timing,
        powerups=powerups,
        scoring=scoring,
        rules=rules,
        leaderboard=leaderboard,
        caps=caps
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
