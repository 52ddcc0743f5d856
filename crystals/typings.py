from enum import Enum
from pydantic import Field
from pydantic.dataclasses import dataclass as pydantic_dataclass


class GemSlot(Enum):
  """The four fixed gem slots of every round.

  Values are the lowercase names a front end uses as element ids.
  """
  EMERALD = "emerald"
  RUBY = "ruby"
  SAPPHIRE = "sapphire"
  TOPAZ = "topaz"

  def __str__(self) -> str:
    return self.value

  @classmethod
  def parse(cls, gem_id: 'GemSlot | str') -> 'GemSlot | None':
    """Return the slot named by `gem_id`, or None when it names no slot."""
    if isinstance(gem_id, GemSlot):
      return gem_id
    try:
      return cls(str(gem_id).lower())
    except ValueError:
      return None

  def color_circle(self) -> str:  # pragma: no cover - tiny convenience
    if self == GemSlot.EMERALD:
      return "🟢"
    if self == GemSlot.RUBY:
      return "🔴"
    if self == GemSlot.SAPPHIRE:
      return "🔵"
    return "🟡"


class Outcome(Enum):
  IN_PROGRESS = "in_progress"
  WON = "won"
  LOST = "lost"

  def __str__(self) -> str:
    return self.value

  def is_terminal(self) -> bool:
    return self is not Outcome.IN_PROGRESS


@pydantic_dataclass(frozen=True)
class Gem:
  """A gem button of the current round and its hidden point value."""
  slot: GemSlot
  value: int = Field(ge=1)

  def to_dict(self) -> dict:
    return {'id': self.slot.value, 'value': self.value}

  def __str__(self) -> str:  # pragma: no cover - convenience
    return f"{self.slot.color_circle()}{self.value}"


@pydantic_dataclass(frozen=True)
class Tally:
  """Win/loss counters of one session."""
  wins: int = Field(default=0, ge=0)
  losses: int = Field(default=0, ge=0)

  @property
  def played(self) -> int:
    return self.wins + self.losses

  def record(self, outcome: Outcome) -> 'Tally':
    """Return a new Tally with `outcome` counted. IN_PROGRESS counts nothing."""
    if outcome == Outcome.WON:
      return Tally(wins=self.wins + 1, losses=self.losses)
    if outcome == Outcome.LOST:
      return Tally(wins=self.wins, losses=self.losses + 1)
    return self

  def to_dict(self) -> dict:
    return {'wins': self.wins, 'losses': self.losses}

  def __str__(self) -> str:  # pragma: no cover - convenience
    return f"W{self.wins}/L{self.losses}"
