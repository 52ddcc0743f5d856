"""RandomAgent: picks uniformly from the legal gem slots using its RNG."""
from collections.abc import Sequence

from .core import Agent
from ..state import RoundSnapshot
from ..typings import GemSlot


class RandomAgent(Agent):
  def act(self, snapshot: RoundSnapshot, legal_slots: Sequence[GemSlot]) -> GemSlot:
    if not legal_slots:
      raise ValueError("No legal gem slots available")
    return self.rng.choice(list(legal_slots))


__all__ = ["RandomAgent"]
