"""GreedyAgent: closes in on the target with the gem values it has seen.

The agent does not peek at the values carried by the snapshot. It learns a
gem's value from the points a click on it earns, as a person would.
"""
from collections.abc import Sequence

from .core import Agent
from ..state import RoundSnapshot
from ..typings import GemSlot


class GreedyAgent(Agent):
  known_values: dict[GemSlot, int]

  def __init__(self, seat_id: int = 0, *, seed: int | None = None, name: str | None = None) -> None:
    super().__init__(seat_id, seed=seed, name=name)
    self.known_values = {}
    self._round_id: int | None = None

  def _reset(self) -> None:
    self.known_values = {}
    self._round_id = None

  def observe(self, slot: GemSlot, gained: int, snapshot: RoundSnapshot) -> None:
    self._sync_round(snapshot)
    self.known_values[slot] = gained

  def act(self, snapshot: RoundSnapshot, legal_slots: Sequence[GemSlot]) -> GemSlot:
    if not legal_slots:
      raise ValueError("No legal gem slots available")
    self._sync_round(snapshot)
    remaining = snapshot.target - snapshot.score

    known = [(s, self.known_values[s]) for s in legal_slots if s in self.known_values]
    fitting = [(s, v) for s, v in known if v <= remaining]
    if fitting:
      # largest value that still fits; an exact hit is always the largest fit
      return max(fitting, key=lambda sv: sv[1])[0]
    unknown = [s for s in legal_slots if s not in self.known_values]
    if unknown:
      return self.rng.choice(unknown)
    return min(known, key=lambda sv: sv[1])[0]

  def _sync_round(self, snapshot: RoundSnapshot) -> None:
    # gem values are redrawn every round
    if snapshot.round_id != self._round_id:
      self.known_values = {}
      self._round_id = snapshot.round_id

  def _metadata(self) -> dict:
    return {"known_values": {s.value: v for s, v in self.known_values.items()}}


__all__ = ["GreedyAgent"]
