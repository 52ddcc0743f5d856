"""Core agent base class for automated players.

An agent stands in for the person clicking gems: it is shown the current
snapshot and the legal gem slots and returns one of them. After each choice
it is told how many points the click earned.
"""
from pydantic import BaseModel, field_validator
import random
from collections.abc import Sequence
from typing import ClassVar, TypeVar

from ..state import RoundSnapshot
from ..typings import GemSlot

def AGENT_SEED_GENERATOR(): return random.Random().randint(0, 2**31 - 1)


class Agent:
  seat_id: int
  name: str

  agent_name_to_cls: ClassVar[dict[str, type["Agent"]]] = {}

  def __init__(self, seat_id: int = 0, *, seed: int | None = None, name: str | None = None) -> None:
    self.seat_id = seat_id
    self.name = name if name is not None else self.__class__.__name__
    # Use a local RNG instance to guarantee reproducible behavior
    if seed is None:
      seed = AGENT_SEED_GENERATOR()
    self._seed = seed
    self.rng = random.Random(seed)

  def __init_subclass__(cls, **kwargs):
    cls.agent_name_to_cls[cls.__name__] = cls
    super().__init_subclass__(**kwargs)

  def reset(self, seed: int | None = None) -> None:
    if seed is None:
      seed = AGENT_SEED_GENERATOR()
    self._seed = seed
    self.rng.seed(seed)
    self._reset()

  def _reset(self) -> None:
    """Internal reset hook; subclasses clear per-round memory here."""
    pass

  def observe(self, slot: GemSlot, gained: int, snapshot: RoundSnapshot) -> None:
    """Optional hook: clicking `slot` earned `gained` points."""
    pass

  def act(self, snapshot: RoundSnapshot, legal_slots: Sequence[GemSlot]) -> GemSlot:
    """Return one element of `legal_slots`."""
    raise NotImplementedError()

  def metadata(self) -> dict:
    metadata = {
        "type": self.__class__.__name__,
        "seat_id": self.seat_id,
        "seed": self._seed,
    }
    if (extra := self._metadata()):
      metadata.update(extra)
    return metadata

  def _metadata(self) -> dict:
    return {}


BaseAgent = TypeVar('BaseAgent', bound=Agent)


class AgentBuilder(BaseModel):
  """Factory for constructing registered agents by class name."""

  cls_name: str
  seat_id: int = 0
  name: str | None = None
  seed: int | None = None
  kwargs: dict = {}

  @field_validator('cls_name')
  @classmethod
  def known_agent(cls, v: str) -> str:
    if v not in Agent.agent_name_to_cls:
      raise ValueError(f"Unknown agent class name: {v}")
    return v

  def build(self) -> Agent:
    agent_cls = Agent.agent_name_to_cls[self.cls_name]
    return agent_cls(seat_id=self.seat_id, seed=self.seed, name=self.name, **self.kwargs)


__all__ = ["Agent", "AgentBuilder", "BaseAgent"]
