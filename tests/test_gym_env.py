import numpy as np
import pytest

from tilerise.gym_env import TileRiseGymEnv


def test_reset_returns_observation_in_space():
    env = TileRiseGymEnv()
    obs, info = env.reset(seed=0)
    assert obs.shape == env.observation_space.shape
    assert obs.dtype == np.float32
    assert env.observation_space.contains(obs)
    assert info["action_mask"][0]
    # Empty board: nothing can be swapped yet.
    assert info["action_mask"].sum() == 1


def test_action_encoding_round_trips():
    env = TileRiseGymEnv()
    assert env.action_space.n == 1 + 20 * 9
    assert env.decode_action(1) == (0, 0)
    assert env.decode_action(env.encode_action(7, 8)) == (7, 8)
    with pytest.raises(ValueError):
        env.decode_action(0)


def test_step_swaps_and_rewards_score_delta():
    env = TileRiseGymEnv()
    env.reset(seed=0)
    env.state.board.load([[1, 1, 2, 1] + [0] * 6])
    mask = env.action_mask()
    action = env.encode_action(0, 2)
    assert mask[action]

    obs, reward, terminated, truncated, info = env.step(action)

    assert reward == 300.0
    assert not terminated
    assert not truncated
    assert info["score"] == 300
    assert env.observation_space.contains(obs)


def test_episode_terminates_on_death_and_truncates_on_limit():
    env = TileRiseGymEnv(max_steps=2, death_penalty=-5.0)
    env.reset(seed=1)
    env.state.board.set_tile(env.state.height - 1, 0, 1)
    env.state.progress = 0.999
    _, reward, terminated, truncated, _ = env.step(0)
    assert terminated
    assert reward == -5.0
    assert not truncated
    _, reward, terminated, _, _ = env.step(0)
    assert terminated and reward == 0.0


def test_render_returns_ascii():
    env = TileRiseGymEnv()
    env.reset(seed=0)
    text = env.render()
    assert len(text.splitlines()) == 20 + 2
