"""
Core Game
=========

Session state machine combining snake movement, collisions, item spawning,
power-ups, scoring and the leaderboard hand-off at game over.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

from mutant_snake.snake_core.config_loader import GameConfig, get_config
from mutant_snake.snake_core.grid import Direction, Grid, NEUTRAL
from mutant_snake.snake_core.leaderboard import LeaderboardStore
from mutant_snake.snake_core.mutations import MutationKind, PowerUpController
from mutant_snake.snake_core.notifier import GameNotifier, LoggingNotifier, dispatch
from mutant_snake.snake_core.rng import Item, ItemSpawner
from mutant_snake.snake_core.rules import GameRules, TerminationResult
from mutant_snake.snake_core.scoring import EvolutionTier, ScoreEvent, ScoreTracker
from mutant_snake.snake_core.snake import Snake
from mutant_snake.snake_core.state_snapshot import GamePhase, GameSnapshot

logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    """Result of a single tick."""
    snapshot: GameSnapshot
    terminated: bool
    termination_reason: str
    delta_score: int
    consumed: Optional[Item] = None
    score_event: Optional[ScoreEvent] = None


class CoreGame:
    """
    Main game simulation class.

    One tick = apply the buffered direction, move the head one cell, resolve
    collisions and consumption. Power-up countdown runs on real time through
    advance_time(). All public methods are serialized by one lock, so input
    arriving from another thread is only seen at the start of the next tick.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        notifier: Optional[GameNotifier] = None,
        leaderboard: Optional[LeaderboardStore] = None,
        player_id: Optional[str] = None,
        spawner: Optional[ItemSpawner] = None
    ):
        """
        Initialize game and start the first session.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for item placement.
            notifier: Receives milestone/threshold/game-over events.
            leaderboard: Store receiving the final score at game over.
            player_id: Identity recorded on the leaderboard.
            spawner: Item spawner. Built from config and seed if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._notifier = notifier if notifier is not None else LoggingNotifier()
        self._leaderboard = leaderboard
        self._player_id = player_id
        self._lock = threading.RLock()

        # Initialize subsystems
        self._grid = Grid.from_config(config)
        self._rules = GameRules(config)
        self._spawner = spawner if spawner is not None else ItemSpawner(config, seed)
        self._power_ups = PowerUpController(config)
        self._scorer = ScoreTracker(config)

        self._start_session()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def snake(self) -> Snake:
        return self._snake

    @property
    def item(self) -> Item:
        return self._item

    @property
    def power_ups(self) -> PowerUpController:
        return self._power_ups

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def is_over(self) -> bool:
        """True if game has ended."""
        return self._phase is GamePhase.GAME_OVER

    @property
    def termination_reason(self) -> str:
        """Reason for game end, or empty string."""
        return self._termination_reason

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def evolution_tier(self) -> EvolutionTier:
        return self._scorer.tier

    @property
    def direction(self) -> Direction:
        """Direction applied on the last tick."""
        return self._direction

    @property
    def pending_direction(self) -> Direction:
        """Direction the next tick will apply."""
        return self._pending_direction

    @property
    def tick_interval_ms(self) -> int:
        """Score-driven tick interval (permanent per-catch speed-ups only)."""
        return self._tick_interval_ms

    @property
    def effective_interval_ms(self) -> int:
        """Tick interval after SPEED power-up boosts."""
        return self._rules.speed.effective(self._tick_interval_ms, self._power_ups.speed_boost_ms)

    @property
    def ticks(self) -> int:
        """Ticks that moved the snake this session."""
        return self._ticks

    @property
    def leaderboard(self) -> Optional[LeaderboardStore]:
        return self._leaderboard

    @property
    def player_id(self) -> Optional[str]:
        return self._player_id

    @player_id.setter
    def player_id(self, value: Optional[str]) -> None:
        self._player_id = value

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_direction(self, direction) -> bool:
        """
        Buffer a direction for the next tick (latest value wins).

        Args:
            direction: Unit vector (dx, dy).

        Returns:
            True if buffered, False if ignored (game over, neutral or reversal).

        Raises:
            ValueError: If direction is not a unit step.
        """
        requested = self._rules.movement.validate(direction)
        with self._lock:
            if self.is_over:
                return False
            if not self._rules.movement.accepts(requested, self._direction, len(self._snake)):
                logger.debug("Ignored direction %s (current %s)", requested, self._direction)
                return False
            self._pending_direction = requested
            return True

    def restart(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Start a fresh session. The leaderboard is left untouched.

        Args:
            seed: New random seed. Keeps the current random stream if None.

        Returns:
            Initial game snapshot.
        """
        with self._lock:
            if seed is not None:
                self._seed = seed
                self._spawner.reset(seed)
            self._start_session()
            logger.info("Session restarted")
            return self.snapshot()

    reset = restart

    def tick(self) -> StepResult:
        """
        Execute one simulation step.

        Returns:
            StepResult with new state and metadata.
        """
        with self._lock:
            if self.is_over:
                # Game already ended, return current state
                return StepResult(
                    snapshot=self.snapshot(),
                    terminated=True,
                    termination_reason=self._termination_reason,
                    delta_score=0
                )

            self._direction = self._pending_direction
            if self._direction == NEUTRAL:
                # Waiting for the first input
                return StepResult(self.snapshot(), False, "", 0)

            self._ticks += 1
            next_head = self._snake.advance(self._direction)
            growing = next_head == self._item.cell

            collision = self._rules.collision.check(
                snake=self._snake,
                next_head=next_head,
                grid=self._grid,
                shield_active=self._power_ups.shield_active,
                growing=growing
            )
            if collision.terminated:
                self._end_session(collision)
                return StepResult(
                    snapshot=self.snapshot(),
                    terminated=True,
                    termination_reason=collision.reason,
                    delta_score=0
                )

            consumed = None
            event = None
            if growing:
                consumed = self._item
                event = self._consume(next_head)
            else:
                self._snake.move_without_growth(next_head)

            assert self._grid.in_bounds(self._snake.head)
            return StepResult(
                snapshot=self.snapshot(),
                terminated=False,
                termination_reason="",
                delta_score=event.points if event is not None else 0,
                consumed=consumed,
                score_event=event
            )

    def advance_time(self, elapsed_seconds: float) -> Optional[MutationKind]:
        """
        Advance the power-up countdown by real elapsed time.

        Returns:
            The power-up kind that expired, or None.
        """
        with self._lock:
            if self.is_over:
                return None
            return self._power_ups.tick(elapsed_seconds)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        with self._lock:
            return GameSnapshot(
                snake_cells=self._snake.cells,
                item_cell=self._item.cell,
                item_kind=self._item.kind,
                score=self._scorer.score,
                evolution_tier=self._scorer.tier,
                active_power_up=self._power_ups.active,
                phase=self._phase,
                tick_interval_ms=self._tick_interval_ms,
                effective_interval_ms=self.effective_interval_ms,
                speed_boost_ms=self._power_ups.speed_boost_ms,
                direction=self._direction,
                grid_width=self._grid.width,
                grid_height=self._grid.height,
                double_points_pending=self._power_ups.double_points_pending,
                ticks=self._ticks,
                termination_reason=self._termination_reason
            )

    def restore(self, snapshot: GameSnapshot) -> None:
        """
        Continue a session from a snapshot.

        Milestones and reward thresholds already passed by the snapshot's
        score are not fired again.

        Raises:
            ValueError: If the snapshot does not fit this game's grid.
        """
        if (snapshot.grid_width, snapshot.grid_height) != (self._grid.width, self._grid.height):
            raise ValueError(
                f"Snapshot grid {snapshot.grid_width}x{snapshot.grid_height} does not match {self._grid!r}"
            )
        if not snapshot.snake_cells:
            raise ValueError("Snapshot has an empty snake")
        if snapshot.phase is GamePhase.RUNNING:
            for cell in snapshot.snake_cells:
                if not self._grid.in_bounds(cell):
                    raise ValueError(f"Snake cell {cell} is outside {self._grid!r}")

        with self._lock:
            self._snake = Snake(snapshot.snake_cells)
            self._item = Item(snapshot.item_cell, snapshot.item_kind)
            self._direction = snapshot.direction
            self._pending_direction = snapshot.direction
            self._tick_interval_ms = snapshot.tick_interval_ms
            self._ticks = snapshot.ticks
            self._phase = snapshot.phase
            self._termination_reason = snapshot.termination_reason
            self._scorer.resume(snapshot.score, catches=len(snapshot.snake_cells) - 1)
            self._power_ups.restore(
                snapshot.active_power_up,
                snapshot.double_points_pending,
                snapshot.speed_boost_ms
            )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        with self._lock:
            active = self._power_ups.active
            return {
                "score": self._scorer.score,
                "length": len(self._snake),
                "ticks": self._ticks,
                "catches": self._scorer.catches,
                "evolution_tier": self._scorer.tier.value,
                "power_up": active.kind.value if active is not None else None,
                "tick_interval_ms": self.effective_interval_ms,
                "terminated_reason": self._termination_reason,
            }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start_session(self) -> None:
        self._snake = Snake([self._config.board.spawn])
        self._direction: Direction = NEUTRAL
        self._pending_direction: Direction = NEUTRAL
        self._tick_interval_ms = self._rules.speed.initial_interval_ms
        self._ticks = 0
        self._phase = GamePhase.RUNNING
        self._termination_reason = ""
        self._scorer.reset()
        self._power_ups.reset()
        self._item = self._spawner.spawn(self._grid, self._snake.cells)
        logger.info("Session started on %r", self._grid)

    def _consume(self, next_head) -> ScoreEvent:
        """Eat the item at next_head: score, mutate, speed up, grow, respawn."""
        # Pending double points belong to the item that set them, so they
        # are consumed before the new item's power-up replaces the old one.
        doubled = self._power_ups.consume_double_points()
        event = self._scorer.apply_consumption(doubled)
        self._power_ups.activate(self._item.kind)
        self._tick_interval_ms = self._rules.speed.after_catch(self._tick_interval_ms)
        self._snake.grow(next_head)
        self._item = self._spawner.spawn(self._grid, self._snake.cells)

        if event.tier_changed:
            logger.info("Evolved to %s at score %d", event.tier.value, event.score)
        for label in event.milestones:
            dispatch(self._notifier.on_milestone, label)
        for threshold in event.thresholds:
            dispatch(self._notifier.on_threshold_reached, threshold)
        return event

    def _end_session(self, result: TerminationResult) -> None:
        self._phase = GamePhase.GAME_OVER
        self._termination_reason = result.reason
        self._power_ups.cancel()
        score = self._scorer.score
        logger.info("Game over (%s): score=%d length=%d", result.reason, score, len(self._snake))

        if self._leaderboard is not None:
            player = self._player_id or self._config.leaderboard.default_player
            try:
                self._leaderboard.merge(player, score)
            except OSError as e:
                logger.error("Failed to save leaderboard for %s: %s", player, e)

        dispatch(self._notifier.on_game_over, score, result.reason)
