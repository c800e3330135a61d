"""
Game Clock
==========

Turns real elapsed time into simulation ticks at the game's current
(variable) tick interval, and feeds the same elapsed time to the power-up
countdown.

Usage:
    game = CoreGame()
    clock = GameClock(game)
    clock.start()           # Background thread
    game.set_direction(RIGHT)
    ...
    clock.stop()

Or drive it manually (tests, frame-locked frontends):
    ticks_run = clock.advance(1 / 60)
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from mutant_snake.snake_core.game import CoreGame, StepResult


class GameClock:
    """
    Fixed-interval ticker with a millisecond accumulator.

    The interval is re-read after every tick, so speed-ups take effect
    immediately. Nothing accumulates while the game is over; restart()
    on the game followed by reset() here starts a clean cadence.
    """

    def __init__(
        self,
        game: CoreGame,
        on_tick: Optional[Callable[[StepResult], None]] = None,
        poll_seconds: float = 0.005
    ):
        """
        Initialize clock.

        Args:
            game: Game to drive.
            on_tick: Optional callback receiving every StepResult.
            poll_seconds: Sleep between polls of the background thread.
        """
        self._game = game
        self._on_tick = on_tick
        self._poll_seconds = poll_seconds
        self._accumulated_ms: float = 0.0

        # Thread control
        self._running = False
        self._thread: Optional[threading.Thread] = None

    @property
    def accumulated_ms(self) -> float:
        return self._accumulated_ms

    @property
    def running(self) -> bool:
        return self._running

    def reset(self) -> None:
        """Drop any partially accumulated interval."""
        self._accumulated_ms = 0.0

    def advance(self, elapsed_seconds: float) -> int:
        """
        Account for elapsed real time.

        Args:
            elapsed_seconds: Time since the previous call.

        Returns:
            Number of ticks run.
        """
        if elapsed_seconds < 0:
            raise ValueError(f"elapsed_seconds must be >= 0, got {elapsed_seconds}")

        if self._game.is_over:
            self._accumulated_ms = 0.0
            return 0

        self._game.advance_time(elapsed_seconds)
        self._accumulated_ms += elapsed_seconds * 1000.0

        ticks = 0
        while not self._game.is_over:
            interval = self._game.effective_interval_ms
            if self._accumulated_ms < interval:
                break
            self._accumulated_ms -= interval
            result = self._game.tick()
            ticks += 1
            if self._on_tick is not None:
                self._on_tick(result)

        if self._game.is_over:
            self._accumulated_ms = 0.0
        return ticks

    def start(self) -> None:
        """Start ticking in a background thread (non-blocking)."""
        if self._thread is not None:
            return

        self._running = True
        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the background thread."""
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None

    def _run_loop(self) -> None:
        last = time.monotonic()
        while self._running:
            time.sleep(self._poll_seconds)
            now = time.monotonic()
            self.advance(now - last)
            last = now
