"""
Tests for the mutation power-up controller.
"""

import dataclasses

import pytest

from mutant_snake.snake_core.config_loader import load_config
from mutant_snake.snake_core.mutations import ActivePowerUp, MutationKind, PowerUpController


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def controller(config):
    return PowerUpController(config)


class TestLifecycle:
    """Test activation, countdown and expiry."""

    def test_starts_inactive(self, controller):
        """No power-up before the first activation."""
        assert controller.active is None
        assert not controller.shield_active
        assert not controller.double_points_pending
        assert controller.speed_boost_ms == 0

    def test_activate_sets_full_duration(self, controller, config):
        """Activation starts the configured timer."""
        controller.activate(MutationKind.SHIELD)
        assert controller.active == ActivePowerUp(MutationKind.SHIELD, config.powerups.duration_seconds)
        assert controller.shield_active

    def test_tick_counts_down(self, controller):
        """Elapsed real time reduces the remaining duration."""
        controller.activate(MutationKind.CAMOUFLAGE)
        assert controller.tick(1.5) is None
        assert controller.active.remaining_seconds == pytest.approx(3.5)

    def test_expiry_reverts_shield(self, controller):
        """Reaching zero deactivates and reports the kind."""
        controller.activate(MutationKind.SHIELD)
        assert controller.tick(5.0) is MutationKind.SHIELD
        assert controller.active is None
        assert not controller.shield_active

    def test_tick_without_active_is_noop(self, controller):
        """Nothing to count down when inactive."""
        assert controller.tick(10.0) is None

    def test_new_activation_cancels_previous(self, controller):
        """No stacking: the old power-up is reverted first."""
        controller.activate(MutationKind.DOUBLE_POINTS)
        controller.tick(4.0)
        cancelled = controller.activate(MutationKind.SHIELD)

        assert cancelled is MutationKind.DOUBLE_POINTS
        assert not controller.double_points_pending
        assert controller.active == ActivePowerUp(MutationKind.SHIELD, 5.0)

    def test_cancel_and_reset(self, controller):
        """cancel() keeps the speed ratchet; reset() clears it."""
        controller.activate(MutationKind.SPEED)
        controller.cancel()
        assert controller.active is None
        assert controller.speed_boost_ms == 30

        controller.reset()
        assert controller.speed_boost_ms == 0


class TestEffects:
    """Test per-kind effects."""

    def test_double_points_consumed_once(self, controller):
        """The flag applies to a single consumption."""
        controller.activate(MutationKind.DOUBLE_POINTS)
        assert controller.consume_double_points()
        assert not controller.consume_double_points()
        assert controller.active_kind is MutationKind.DOUBLE_POINTS

    def test_speed_boost_accumulates(self, controller, config):
        """Each Speed activation adds to the ratchet."""
        controller.activate(MutationKind.SPEED)
        controller.tick(config.powerups.duration_seconds)
        controller.activate(MutationKind.SPEED)
        assert controller.speed_boost_ms == 2 * config.powerups.speed_decrement_ms

    def test_symmetric_speed_revert(self, config):
        """With restore_speed_on_expire the boost is removed on expiry."""
        config = dataclasses.replace(
            config, powerups=dataclasses.replace(config.powerups, restore_speed_on_expire=True)
        )
        controller = PowerUpController(config)
        controller.activate(MutationKind.SPEED)
        controller.activate(MutationKind.SHIELD)
        assert controller.speed_boost_ms == 0

    def test_restored_speed_reverts_on_expiry(self, config):
        """A SPEED power-up restored from a snapshot still gives its boost back."""
        config = dataclasses.replace(
            config, powerups=dataclasses.replace(config.powerups, restore_speed_on_expire=True)
        )
        controller = PowerUpController(config)
        controller.restore(ActivePowerUp(MutationKind.SPEED, 1.0), False, speed_boost_ms=60)
        assert controller.tick(1.0) is MutationKind.SPEED
        assert controller.speed_boost_ms == 30

    def test_restored_non_speed_keeps_boost(self, config):
        config = dataclasses.replace(
            config, powerups=dataclasses.replace(config.powerups, restore_speed_on_expire=True)
        )
        controller = PowerUpController(config)
        controller.restore(ActivePowerUp(MutationKind.SHIELD, 1.0), False, speed_boost_ms=60)
        controller.tick(1.0)
        assert controller.speed_boost_ms == 60

    def test_camouflage_has_no_engine_effect(self, controller):
        """Camouflage touches nothing the engine reads."""
        controller.activate(MutationKind.CAMOUFLAGE)
        assert not controller.shield_active
        assert not controller.double_points_pending
        assert controller.speed_boost_ms == 0

    def test_kind_indices_are_stable(self):
        """Numeric ids follow declaration order."""
        assert [k.ordinal for k in MutationKind] == [0, 1, 2, 3]
        assert MutationKind("double_points") is MutationKind.DOUBLE_POINTS
