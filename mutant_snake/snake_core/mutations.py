"""
Mutation Power-ups
==================

Mutation kinds carried by items and the controller tracking the single
active power-up. The countdown is advanced explicitly by the caller with
real elapsed seconds; expiry and cancellation are plain state transitions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mutant_snake.snake_core.config_loader import GameConfig, get_config

logger = logging.getLogger(__name__)


class MutationKind(str, Enum):
    """Special effect carried by an item."""
    SPEED = "speed"
    SHIELD = "shield"
    DOUBLE_POINTS = "double_points"
    CAMOUFLAGE = "camouflage"  # Rendering only

    @property
    def ordinal(self) -> int:
        """Stable integer id (declaration order) for numeric observations."""
        return list(MutationKind).index(self)


@dataclass(frozen=True)
class ActivePowerUp:
    """The currently running power-up."""
    kind: MutationKind
    remaining_seconds: float


class PowerUpController:
    """
    Tracks at most one active power-up and its effects.

    Effects:
    - SPEED: adds speed_decrement_ms to a boost subtracted from the tick
      interval. Expiry keeps the boost unless restore_speed_on_expire is set.
    - SHIELD: self-collision is ignored while active.
    - DOUBLE_POINTS: the next consumption scores double, then the flag clears
      even if the timer is still running.
    - CAMOUFLAGE: no engine effect.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize controller.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._duration = config.powerups.duration_seconds
        self._speed_decrement = config.powerups.speed_decrement_ms
        self._restore_speed = config.powerups.restore_speed_on_expire

        self._active: Optional[ActivePowerUp] = None
        self._double_points_pending: bool = False
        self._speed_boost_ms: int = 0
        # Boost contributed by the current activation (for symmetric revert)
        self._applied_boost_ms: int = 0

    @property
    def active(self) -> Optional[ActivePowerUp]:
        return self._active

    @property
    def active_kind(self) -> Optional[MutationKind]:
        return self._active.kind if self._active is not None else None

    @property
    def shield_active(self) -> bool:
        return self.active_kind is MutationKind.SHIELD

    @property
    def double_points_pending(self) -> bool:
        return self._double_points_pending

    @property
    def speed_boost_ms(self) -> int:
        """Accumulated tick-interval reduction from SPEED power-ups."""
        return self._speed_boost_ms

    def activate(self, kind: MutationKind) -> Optional[MutationKind]:
        """
        Start a power-up, cancelling any running one first.

        Returns:
            The kind that was cancelled, or None.
        """
        cancelled = self.active_kind
        if cancelled is not None:
            self._revert()
            logger.debug("Power-up %s cancelled by %s", cancelled.value, kind.value)

        self._active = ActivePowerUp(kind=kind, remaining_seconds=self._duration)
        if kind is MutationKind.SPEED:
            self._speed_boost_ms += self._speed_decrement
            self._applied_boost_ms = self._speed_decrement
        elif kind is MutationKind.DOUBLE_POINTS:
            self._double_points_pending = True

        logger.debug("Power-up %s active for %.1fs", kind.value, self._duration)
        return cancelled

    def tick(self, elapsed_seconds: float) -> Optional[MutationKind]:
        """
        Advance the countdown.

        Args:
            elapsed_seconds: Real time since the previous call.

        Returns:
            The kind that expired during this call, or None.
        """
        if self._active is None or elapsed_seconds <= 0:
            return None

        remaining = self._active.remaining_seconds - elapsed_seconds
        if remaining > 0:
            self._active = ActivePowerUp(self._active.kind, remaining)
            return None

        expired = self._active.kind
        self._revert()
        logger.debug("Power-up %s expired", expired.value)
        return expired

    def consume_double_points(self) -> bool:
        """Return whether double points apply to this consumption and clear the flag."""
        pending = self._double_points_pending
        self._double_points_pending = False
        return pending

    def cancel(self) -> None:
        """Stop the running power-up (game over). Speed boost follows the revert rule."""
        if self._active is not None:
            self._revert()

    def reset(self) -> None:
        """Clear everything, including the accumulated speed boost."""
        self._active = None
        self._double_points_pending = False
        self._speed_boost_ms = 0
        self._applied_boost_ms = 0

    def restore(self, active: Optional[ActivePowerUp], double_points_pending: bool, speed_boost_ms: int) -> None:
        """Restore controller state from a snapshot."""
        self._active = active
        self._double_points_pending = double_points_pending
        self._speed_boost_ms = max(0, speed_boost_ms)
        if active is not None and active.kind is MutationKind.SPEED:
            self._applied_boost_ms = min(self._speed_boost_ms, self._speed_decrement)
        else:
            self._applied_boost_ms = 0

    def _revert(self) -> None:
        """Undo the active power-up's reversible effects and go inactive."""
        self._double_points_pending = False
        if self._restore_speed and self._applied_boost_ms:
            self._speed_boost_ms = max(0, self._speed_boost_ms - self._applied_boost_ms)
        self._applied_boost_ms = 0
        self._active = None
