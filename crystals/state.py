import random
from collections.abc import Iterable, Sequence
from dataclasses import InitVar, dataclass, field

from .consts import GEM_COUNT, GameConfig
from .typings import Gem, GemSlot, Outcome, Tally


def draw_gem_values(rng: random.Random, config: GameConfig) -> list[int]:
  """Draw GEM_COUNT distinct values from the configured gem value range.

  Rejection sampling: keep drawing and discard values already taken. The
  range is validated to hold enough values, so this always terminates.
  """
  values: list[int] = []
  while len(values) < GEM_COUNT:
    value = rng.randint(config.gem_value_min, config.gem_value_max)
    if value not in values:
      values.append(value)
  return values


def draw_target(rng: random.Random, config: GameConfig) -> int:
  return rng.randint(config.target_min, config.target_max)


def _check_round_values(target: int, values: Sequence[int], config: GameConfig) -> None:
  if len(values) != GEM_COUNT:
    raise ValueError(f"expected {GEM_COUNT} gem values, got {len(values)}")
  if len(set(values)) != len(values):
    raise ValueError(f"gem values must be distinct, got {list(values)}")
  for v in values:
    if v not in config.gem_values:
      raise ValueError(f"gem value {v} outside [{config.gem_value_min}, {config.gem_value_max}]")
  if target not in config.targets:
    raise ValueError(f"target {target} outside [{config.target_min}, {config.target_max}]")


@dataclass(frozen=True)
class RoundState:
  """Immutable state of a single round.

  `choose` never mutates; it returns the next RoundState. Gems are stored in
  GemSlot order, one per slot.
  """
  round_id: int
  target: int
  gems_in: InitVar[Iterable[Gem] | None] = None
  gems: tuple[Gem, ...] = field(default_factory=tuple)
  score: int = 0
  outcome: Outcome = Outcome.IN_PROGRESS
  choices: tuple[GemSlot, ...] = field(default_factory=tuple)

  def __post_init__(self, gems_in):
    if gems_in is not None:
      object.__setattr__(self, 'gems', tuple(gems_in))
    object.__setattr__(self, 'choices', tuple(self.choices))

  @classmethod
  def new(
      cls,
      round_id: int,
      rng: random.Random,
      config: GameConfig,
      *,
      target: int | None = None,
      values: Sequence[int] | None = None,
  ) -> 'RoundState':
    """Create a fresh round, drawing whatever was not given explicitly.

    Gem values are drawn before the target so a seeded RNG produces the
    same round whether or not a target is supplied.
    """
    values = list(values) if values is not None else draw_gem_values(rng, config)
    target = target if target is not None else draw_target(rng, config)
    _check_round_values(target, values, config)
    gems = [Gem(slot=slot, value=v) for slot, v in zip(GemSlot, values)]
    return cls(round_id=round_id, target=target, gems_in=gems)

  def gem(self, slot: GemSlot) -> Gem | None:
    for g in self.gems:
      if g.slot == slot:
        return g
    return None

  @property
  def values(self) -> tuple[int, ...]:
    return tuple(g.value for g in self.gems)

  @property
  def remaining(self) -> int:
    """Distance left to the target (negative once the round is lost)."""
    return self.target - self.score

  def legal_slots(self) -> list[GemSlot]:
    if self.outcome.is_terminal():
      return []
    return [g.slot for g in self.gems]

  def choose(self, slot: GemSlot) -> 'RoundState':
    """Add the value of `slot` to the score and evaluate the outcome.

    Returns `self` unchanged if the round is decided or the slot is not part
    of this round.
    """
    if self.outcome.is_terminal():
      return self
    gem = self.gem(slot)
    if gem is None:
      return self
    score = self.score + gem.value
    if score == self.target:
      outcome = Outcome.WON
    elif score > self.target:
      outcome = Outcome.LOST
    else:
      outcome = Outcome.IN_PROGRESS
    return RoundState(round_id=self.round_id, target=self.target, gems=self.gems,
                      score=score, outcome=outcome, choices=self.choices + (slot,))

  def __str__(self) -> str:  # pragma: no cover - convenience
    gems = " ".join(str(g) for g in self.gems)
    return f"Round{self.round_id}(target={self.target} score={self.score} {self.outcome} [{gems}])"


@dataclass(frozen=True)
class RoundSnapshot:
  """What a front end needs to render the game at one point in time."""
  round_id: int
  target: int
  gems: tuple[Gem, ...]
  score: int
  outcome: Outcome
  tally: Tally
  time_left: int | None = None

  @classmethod
  def of(cls, state: RoundState, tally: Tally, time_left: int | None = None) -> 'RoundSnapshot':
    return cls(round_id=state.round_id, target=state.target, gems=state.gems,
               score=state.score, outcome=state.outcome, tally=tally, time_left=time_left)

  @property
  def gem_ids(self) -> list[str]:
    return [g.slot.value for g in self.gems]

  @property
  def legal_slots(self) -> list[GemSlot]:
    if self.outcome.is_terminal():
      return []
    return [g.slot for g in self.gems]

  def to_dict(self) -> dict:
    return {
        'round_id': self.round_id,
        'target': self.target,
        'gems': [g.to_dict() for g in self.gems],
        'score': self.score,
        'outcome': self.outcome.value,
        'tally': self.tally.to_dict(),
        'time_left': self.time_left,
    }
