"""
Notifier
========

Outward, fire-and-forget notifications for UI and reward collaborators
(token awards, NFT mints). The engine expects no return value.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class GameNotifier:
    """Base notifier; every hook is a no-op."""

    def on_milestone(self, label: str) -> None:
        pass

    def on_threshold_reached(self, threshold: int) -> None:
        pass

    def on_game_over(self, score: int, reason: str) -> None:
        pass


class LoggingNotifier(GameNotifier):
    """Reports every event to the log."""

    def on_milestone(self, label: str) -> None:
        logger.info("Milestone reached: %s", label)

    def on_threshold_reached(self, threshold: int) -> None:
        logger.info("Reward threshold reached: %d", threshold)

    def on_game_over(self, score: int, reason: str) -> None:
        logger.info("Game over (%s) with score %d", reason, score)


class CallbackNotifier(GameNotifier):
    """Forwards events to plain callables."""

    def __init__(
        self,
        on_milestone: Optional[Callable[[str], None]] = None,
        on_threshold_reached: Optional[Callable[[int], None]] = None,
        on_game_over: Optional[Callable[[int, str], None]] = None
    ):
        self._on_milestone = on_milestone
        self._on_threshold_reached = on_threshold_reached
        self._on_game_over = on_game_over

    def on_milestone(self, label: str) -> None:
        if self._on_milestone is not None:
            self._on_milestone(label)

    def on_threshold_reached(self, threshold: int) -> None:
        if self._on_threshold_reached is not None:
            self._on_threshold_reached(threshold)

    def on_game_over(self, score: int, reason: str) -> None:
        if self._on_game_over is not None:
            self._on_game_over(score, reason)


def dispatch(hook: Callable, *args) -> None:
    """
    Call a notifier hook without letting collaborator failures reach the tick.
    """
    try:
        hook(*args)
    except Exception:
        logger.exception("Notifier hook %s failed", getattr(hook, "__name__", hook))
