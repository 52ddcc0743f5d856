import numpy as np
import pytest
from gymnasium import spaces

from crystals.gym import CrystalEnv
from crystals.gym.env import SLOTS


def test_gym_env_reset_shapes_and_mask():
  env = CrystalEnv(seed=123)
  try:
    obs, info = env.reset()
    assert isinstance(env.observation_space, spaces.Dict)
    assert set(obs.keys()) == set(env.observation_space.spaces.keys())
    for key, space in env.observation_space.spaces.items():
      value = obs[key]
      assert isinstance(value, np.ndarray)
      assert value.shape == space.shape
      assert value.dtype == np.int32
    assert env.observation_space.contains(obs)
    assert obs['score'][0] == 0
    assert 19 <= obs['target'][0] <= 120
    assert not obs['known_values'].any()

    mask = info['action_mask']
    assert mask.dtype == np.int8
    assert mask.tolist() == [1, 1, 1, 1]
    assert info['tally'] == {'wins': 0, 'losses': 0}
  finally:
    env.close()


def test_gym_env_episode_until_terminated():
  env = CrystalEnv(seed=7)
  try:
    obs, info = env.reset()
    terminated = False
    total_reward = 0.0
    steps = 0
    while not terminated:
      obs, reward, terminated, truncated, info = env.step(steps % 4)
      assert not truncated
      total_reward += reward
      steps += 1
    assert info['outcome'] in ('won', 'lost')
    assert total_reward == (1.0 if info['outcome'] == 'won' else -1.0)
    assert not info['action_mask'].any()
    assert info['tally']['wins'] + info['tally']['losses'] == 1
    with pytest.raises(RuntimeError):
      env.step(0)
  finally:
    env.close()


def test_gym_env_reveals_clicked_values():
  env = CrystalEnv(seed=11)
  try:
    env.reset()
    values = env.engine.get_state().values
    obs, reward, terminated, truncated, info = env.step(2)
    assert obs['known_values'][2] == values[2]
    assert obs['known_values'][[0, 1, 3]].tolist() == [0, 0, 0]
    assert obs['score'][0] == values[2]
    assert info['chosen_slot'] == SLOTS[2].value
  finally:
    env.close()


def test_gym_env_tally_spans_episodes():
  env = CrystalEnv(seed=3)
  try:
    for _ in range(5):
      env.reset()
      terminated = False
      while not terminated:
        _, _, terminated, _, info = env.step(0)
    assert info['tally']['wins'] + info['tally']['losses'] == 5
  finally:
    env.close()


def test_gym_env_deterministic_with_seed():
  env1, env2 = CrystalEnv(seed=777), CrystalEnv(seed=777)
  try:
    obs1, _ = env1.reset()
    obs2, _ = env2.reset()
    for key in obs1:
      assert np.array_equal(obs1[key], obs2[key])
  finally:
    env1.close()
    env2.close()


def test_gym_env_step_before_reset_and_invalid_action():
  env = CrystalEnv(seed=1)
  with pytest.raises(RuntimeError):
    env.step(0)
  env.reset()
  with pytest.raises(ValueError):
    env.step(4)
  env.close()
