"""
Tests for the real-time game clock.
"""

import dataclasses
import time

import pytest

from mutant_snake.snake_core.clock import GameClock
from mutant_snake.snake_core.config_loader import load_config
from mutant_snake.snake_core.game import CoreGame
from mutant_snake.snake_core.grid import NEUTRAL, RIGHT, UP
from mutant_snake.snake_core.mutations import ActivePowerUp, MutationKind
from mutant_snake.snake_core.notifier import GameNotifier


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    game = CoreGame(config=config, seed=3, notifier=GameNotifier())
    # Keep the item out of the way of the test paths
    game.restore(dataclasses.replace(game.snapshot(), item_cell=(0, 19)))
    return game


class TestAccumulation:
    """Test conversion of elapsed time into ticks."""

    def test_one_interval_one_tick(self, game):
        clock = GameClock(game)
        game.set_direction(RIGHT)
        assert clock.advance(0.2) == 1
        assert game.snake.head == (11, 10)

    def test_partial_intervals_accumulate(self, game):
        clock = GameClock(game)
        game.set_direction(RIGHT)
        assert clock.advance(0.1) == 0
        assert clock.accumulated_ms == pytest.approx(100.0)
        assert clock.advance(0.1) == 1
        assert clock.accumulated_ms == pytest.approx(0.0, abs=1e-6)

    def test_long_gap_runs_several_ticks(self, game):
        clock = GameClock(game)
        game.set_direction(UP)
        assert clock.advance(0.65) == 3
        assert game.snake.head == (10, 7)
        assert clock.accumulated_ms == pytest.approx(50.0)

    def test_follows_effective_interval(self, game):
        """A speed boost shortens the cadence immediately."""
        game.restore(dataclasses.replace(game.snapshot(), speed_boost_ms=100))
        clock = GameClock(game)
        game.set_direction(UP)
        assert clock.advance(0.2) == 2

    def test_callback_receives_results(self, game):
        seen = []
        clock = GameClock(game, on_tick=seen.append)
        game.set_direction(RIGHT)
        clock.advance(0.4)
        assert [r.snapshot.head for r in seen] == [(11, 10), (12, 10)]

    def test_negative_elapsed_rejected(self, game):
        with pytest.raises(ValueError):
            GameClock(game).advance(-0.1)

    def test_reset_drops_partial_interval(self, game):
        clock = GameClock(game)
        clock.advance(0.15)
        clock.reset()
        assert clock.accumulated_ms == 0.0


class TestGameOver:
    """Test that the clock stops driving a finished game."""

    def test_stops_at_game_over(self, game):
        game.restore(dataclasses.replace(game.snapshot(), snake_cells=((19, 10),), direction=RIGHT))
        clock = GameClock(game)
        assert clock.advance(1.0) == 1
        assert game.is_over
        assert clock.accumulated_ms == 0.0
        assert clock.advance(1.0) == 0


class TestPowerUpCountdown:
    """Test that elapsed time reaches the power-up timer."""

    def test_expiry_while_idle(self, game):
        """The countdown runs even before the first input."""
        game.restore(dataclasses.replace(
            game.snapshot(),
            direction=NEUTRAL,
            active_power_up=ActivePowerUp(MutationKind.SHIELD, 0.3)
        ))
        clock = GameClock(game)
        clock.advance(0.2)
        assert game.power_ups.active_kind is MutationKind.SHIELD
        clock.advance(0.2)
        assert game.power_ups.active is None
        assert game.ticks == 0


class TestBackgroundThread:
    """Test the threaded driver."""

    def test_start_stop(self, game):
        clock = GameClock(game, poll_seconds=0.01)
        game.set_direction(UP)
        clock.start()
        assert clock.running
        time.sleep(0.5)
        clock.stop()
        assert not clock.running
        ticks = game.ticks
        assert ticks >= 1
        time.sleep(0.3)
        assert game.ticks == ticks
