"""Gymnasium environment wrapping one Crystal Collector round per episode.

Actions index the gem slots in `GemSlot` order. The observation only shows
what a player sees: the target, the score, and the value of each gem once it
has been clicked (0 while unknown).
"""
from __future__ import annotations

from typing import TypedDict

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from ..consts import GEM_COUNT, GameConfig
from ..engine import Engine
from ..state import RoundSnapshot
from ..typings import GemSlot, Outcome

from ._common import NDArray1D


SLOTS: tuple[GemSlot, ...] = tuple(GemSlot)
SlotIndex = {s: i for i, s in enumerate(SLOTS)}


class ObsDict(TypedDict):
  target: NDArray1D[np.int32]  # shape (1,)
  score: NDArray1D[np.int32]  # shape (1,)
  known_values: NDArray1D[np.int32]  # shape (GEM_COUNT,)


def outcome_reward(outcome: Outcome) -> float:
  if outcome == Outcome.WON:
    return 1.0
  if outcome == Outcome.LOST:
    return -1.0
  return 0.0


class CrystalEnv(gym.Env):
  metadata = {"render_modes": ["human"], "render_fps": 4}

  def __init__(self, config: GameConfig | None = None, seed: int | None = None):
    super().__init__()
    self.config = config or GameConfig()
    self._base_seed = seed
    self._engine: Engine | None = None
    self._known = np.zeros(GEM_COUNT, dtype=np.int32)
    max_score = self.config.target_max + self.config.gem_value_max
    self.observation_space = spaces.Dict({
        'target': spaces.Box(0, self.config.target_max, shape=(1,), dtype=np.int32),
        'score': spaces.Box(0, max_score, shape=(1,), dtype=np.int32),
        'known_values': spaces.Box(0, self.config.gem_value_max, shape=(GEM_COUNT,), dtype=np.int32),
    }, seed=seed)
    self.action_space = spaces.Discrete(GEM_COUNT, seed=seed)

  @property
  def engine(self) -> Engine | None:
    return self._engine

  # Gymnasium API -------------------------------------------------
  def reset(self, *, seed: int | None = None, options: dict | None = None):
    super().reset(seed=seed)
    # the engine (and its tally) lives across episodes unless reseeded
    if seed is not None:
      self._base_seed = seed
    if self._engine is None or seed is not None:
      self._engine = Engine.new(config=self.config, seed=self._base_seed)
    snapshot = self._engine.start_round()
    self._known[:] = 0
    return self._obs(snapshot), self._info(snapshot)

  def step(self, action: int | np.integer):
    if self._engine is None:
      raise RuntimeError("Environment not reset")
    snapshot = self._engine.snapshot()
    if snapshot is None or snapshot.outcome.is_terminal():
      raise RuntimeError("Episode is over; call reset()")
    if not self.action_space.contains(np.int64(action)):
      raise ValueError(f"Invalid action {action!r} for {GEM_COUNT} gem slots")
    idx = int(action)
    previous = snapshot.score
    chosen = self._engine.choose(SLOTS[idx])
    assert chosen is not None
    self._known[idx] = chosen.score - previous
    reward = outcome_reward(chosen.outcome)
    terminated = chosen.outcome.is_terminal()
    info = self._info(chosen)
    info['chosen_slot'] = SLOTS[idx].value
    return self._obs(chosen), reward, terminated, False, info

  def render(self):  # pragma: no cover - printing side-effect
    if self._engine is None:
      return
    self._engine.print_summary()

  def close(self):
    if self._engine is not None:
      self._engine.close()
    self._engine = None

  # Internal helpers ----------------------------------------------
  def _obs(self, snapshot: RoundSnapshot) -> ObsDict:
    return {
        'target': np.array([snapshot.target], dtype=np.int32),
        'score': np.array([snapshot.score], dtype=np.int32),
        'known_values': self._known.copy(),
    }

  def _info(self, snapshot: RoundSnapshot) -> dict:
    mask = np.zeros(GEM_COUNT, dtype=np.int8)
    for slot in snapshot.legal_slots:
      mask[SlotIndex[slot]] = 1
    return {
        'round_id': snapshot.round_id,
        'outcome': snapshot.outcome.value,
        'tally': snapshot.tally.to_dict(),
        'action_mask': mask,
    }


__all__ = ["CrystalEnv", "ObsDict", "SLOTS", "outcome_reward"]
