"""
Tests for Gymnasium environment API.
"""

import dataclasses

import pytest
import numpy as np

from mutant_snake.snake_core.config_loader import load_config
from mutant_snake.snake_core.env_gym import SnakeEnv


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def env():
    env = SnakeEnv()
    yield env
    env.close()


class TestSnakeEnv:
    """Test single environment API."""

    def test_reset_returns_obs_and_info(self, env):
        """Reset should return (observation, info) tuple."""
        result = env.reset(seed=42)

        assert isinstance(result, tuple)
        assert len(result) == 2
        obs, info = result
        assert isinstance(obs, dict)
        assert isinstance(info, dict)

    def test_reset_observation_in_space(self, env):
        obs, _ = env.reset(seed=42)
        assert env.observation_space.contains(obs)

    def test_initial_observation(self, env):
        """A fresh session is a single cell at the spawn point, not yet moving."""
        obs, info = env.reset(seed=42)

        assert obs["grid"].shape == (20, 20)
        assert obs["grid"].dtype == np.int8
        np.testing.assert_array_equal(obs["head"], [10, 10])
        np.testing.assert_array_equal(obs["direction"], [0, 0])
        assert int(obs["length"]) == 1
        assert int(obs["score"]) == 0
        assert int(obs["power_up_kind"]) == -1
        assert int(obs["tick_interval_ms"]) == 200
        assert info["score"] == 0
        assert info["delta_score"] == 0

    def test_step_returns_5_tuple(self, env):
        """Step should return 5-tuple with zero reward."""
        env.reset(seed=42)
        obs, reward, terminated, truncated, info = env.step(1)

        assert isinstance(obs, dict)
        assert reward == 0.0
        assert terminated is False
        assert truncated is False
        assert "delta_score" in info
        assert "consumed" in info

    def test_step_moves_head(self, env):
        env.reset(seed=42)
        obs, *_ = env.step(1)
        np.testing.assert_array_equal(obs["head"], [10, 9])
        np.testing.assert_array_equal(obs["direction"], [0, -1])

    def test_keep_action_holds_heading(self, env):
        env.reset(seed=42)
        env.step(4)
        obs, *_ = env.step(0)
        np.testing.assert_array_equal(obs["head"], [12, 10])

    def test_numpy_action_accepted(self, env):
        env.reset(seed=42)
        obs, *_ = env.step(np.array(3))
        np.testing.assert_array_equal(obs["head"], [9, 10])

    def test_invalid_action(self, env):
        env.reset(seed=42)
        with pytest.raises(ValueError):
            env.step(5)

    def test_wall_terminates(self, env):
        """Heading straight up ends at the top wall."""
        env.reset(seed=42)
        terminated = False
        steps = 0
        info = {}
        while not terminated:
            _, _, terminated, truncated, info = env.step(1)
            steps += 1
            assert not truncated
        assert steps == 11
        assert info["terminated_reason"] == "wall"

    def test_determinism(self):
        """Same seed and actions give the same trajectory."""
        actions = [1, 1, 3, 3, 2, 2, 2, 4, 4, 4, 4, 1]
        trajectories = []
        for _ in range(2):
            env = SnakeEnv()
            obs, _ = env.reset(seed=7)
            frames = [obs["grid"].copy()]
            for action in actions:
                obs, _, terminated, _, _ = env.step(action)
                frames.append(obs["grid"].copy())
                if terminated:
                    break
            trajectories.append(frames)
            env.close()

        assert len(trajectories[0]) == len(trajectories[1])
        for a, b in zip(*trajectories):
            np.testing.assert_array_equal(a, b)

    def test_truncation_at_step_cap(self, config):
        """Idle steps still count toward the cap."""
        config = dataclasses.replace(config, caps=dataclasses.replace(config.caps, max_ticks=3))
        env = SnakeEnv(config=config)
        env.reset(seed=1)

        results = [env.step(0) for _ in range(3)]
        assert [r[3] for r in results] == [False, False, True]
        assert results[-1][4]["terminated_reason"] == "tick_cap"
        env.close()

    def test_reset_clears_step_count(self, config):
        config = dataclasses.replace(config, caps=dataclasses.replace(config.caps, max_ticks=2))
        env = SnakeEnv(config=config)
        env.reset(seed=1)
        env.step(0)
        env.reset(seed=1)
        _, _, _, truncated, _ = env.step(0)
        assert not truncated
        env.close()


class TestRender:
    """Test text rendering."""

    def test_ansi_board(self):
        env = SnakeEnv(render_mode="ansi")
        env.reset(seed=42)
        text = env.render()
        rows = text.split("\n")
        assert len(rows) == 20
        assert all(len(row) == 20 for row in rows)
        assert rows[10][10] == "@"
        assert text.count("*") == 1
        env.close()

    def test_headless_render_is_none(self, env):
        env.reset(seed=42)
        assert env.render() is None
