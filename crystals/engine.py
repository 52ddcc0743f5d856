"""Round manager for the Crystal Collector game.

`Engine` owns everything that changes while the game runs: the current
`RoundState`, the session `Tally`, the post-round `Countdown` and the timer
handle driving it. A front end renders from the snapshots it gets back from
`start_round` / `choose` and from the engine's signals:

- `round_started(snapshot)`
- `outcome_decided(outcome, tally)`
- `countdown_ticked(remaining_seconds)`

When a round is decided the countdown begins. It is stepped either by the
front end calling `tick()` once per second or by the configured `Scheduler`,
and when it runs out the engine starts the next round itself.
"""
import logging
import random
import threading
from collections import deque
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel

from .agents.core import Agent
from .consts import GameConfig
from .countdown import Countdown, Scheduler, TimerHandle, format_time_left
from .signals import Signal
from .state import RoundSnapshot, RoundState
from .typings import GemSlot, Outcome, Tally

logger = logging.getLogger(__name__)


class Engine:
  """A stateful round manager; one instance per game session.

  All mutations run under a re-entrant lock so ticks from a timer thread
  interleave with `choose` calls one at a time. Signals are emitted while the
  lock is held, after the state they describe is in place.
  """

  config: GameConfig
  _rng: random.Random
  _state: RoundState | None
  _tally: Tally
  _countdown: Countdown
  _scheduler: Scheduler | None
  _timer: TimerHandle | None
  _history: deque['RoundRecord']

  def __init__(
      self,
      *,
      config: GameConfig,
      rng: random.Random,
      seed: int | None = None,
      scheduler: Scheduler | None = None,
  ) -> None:
    self.config = config
    self._rng = rng
    # kept so exported sessions record how they were generated
    self._seed = seed
    self._scheduler = scheduler
    self._lock = threading.RLock()
    self._state = None
    self._tally = Tally()
    self._rounds_started = 0
    self._countdown = Countdown(config.countdown_seconds)
    self._timer = None
    self._timer_generation = 0
    self._history = deque(maxlen=config.history_limit)

    self.round_started = Signal("round_started")
    self.outcome_decided = Signal("outcome_decided")
    self.countdown_ticked = Signal("countdown_ticked")

  @staticmethod
  def new(
      config: GameConfig | None = None,
      seed: int | None = None,
      scheduler: Scheduler | None = None,
  ) -> "Engine":
    return Engine(config=config or GameConfig(), rng=random.Random(seed), seed=seed, scheduler=scheduler)

  # Subscriptions -------------------------------------------------
  def on_round_start(self, callback: Callable[[RoundSnapshot], Any]) -> Callable[[], None]:
    return self.round_started.connect(callback)

  def on_outcome(self, callback: Callable[[Outcome, Tally], Any]) -> Callable[[], None]:
    return self.outcome_decided.connect(callback)

  def on_tick(self, callback: Callable[[int], Any]) -> Callable[[], None]:
    return self.countdown_ticked.connect(callback)

  # Accessors -----------------------------------------------------
  def get_state(self) -> RoundState | None:
    """Return the current RoundState, or None before the first round."""
    return self._state

  @property
  def tally(self) -> Tally:
    return self._tally

  @property
  def countdown(self) -> Countdown:
    return self._countdown

  @property
  def history(self) -> list['RoundRecord']:
    """Decided rounds, oldest first, capped at `config.history_limit`."""
    with self._lock:
      return list(self._history)

  def snapshot(self) -> RoundSnapshot | None:
    with self._lock:
      if self._state is None:
        return None
      time_left = self._countdown.remaining if self._countdown.active else None
      return RoundSnapshot.of(self._state, self._tally, time_left)

  def time_left_text(self) -> str:
    """Countdown display text, empty while no countdown runs."""
    with self._lock:
      if not self._countdown.active:
        return ""
      return format_time_left(self._countdown.remaining, self.config.countdown_show_minutes)

  # Round flow ----------------------------------------------------
  def start_round(self, target: int | None = None, values: Sequence[int] | None = None) -> RoundSnapshot:
    """Start a new round, cancelling any pending countdown.

    `target` and `values` fix the round instead of drawing it; they must
    satisfy the config ranges (ValueError otherwise). The tally carries
    over.
    """
    with self._lock:
      state = RoundState.new(self._rounds_started + 1, self._rng, self.config, target=target, values=values)
      self._cancel_countdown()
      self._rounds_started += 1
      self._state = state
      logger.info("round %d started: target=%d gems=%s", state.round_id, state.target, list(state.values))
      snapshot = RoundSnapshot.of(state, self._tally)
      self.round_started.emit(snapshot)
      return snapshot

  def choose(self, gem_id: GemSlot | str) -> RoundSnapshot | None:
    """Register a click on the gem `gem_id` (a GemSlot or its string id).

    Ignored when no round is in progress or `gem_id` names no gem of the
    current round; the current snapshot is returned unchanged (None before
    the first round).
    """
    with self._lock:
      state = self._state
      slot = GemSlot.parse(gem_id)
      if state is None or slot is None or state.outcome.is_terminal() or state.gem(slot) is None:
        logger.debug("ignored choice %r", gem_id)
        return self.snapshot()

      state = state.choose(slot)
      self._state = state
      if state.outcome.is_terminal():
        self._tally = self._tally.record(state.outcome)
        self._history.append(RoundRecord.of(state))
        logger.info("round %d %s: score=%d target=%d tally=%s",
                    state.round_id, state.outcome, state.score, state.target, self._tally)
        try:
          self.outcome_decided.emit(state.outcome, self._tally)
        finally:
          # a subscriber may already have started the next round
          if self._state is state:
            self._begin_countdown()
      return self.snapshot()

  def tick(self) -> int | None:
    """Advance the countdown by one second.

    Returns the remaining seconds. Returns None when no countdown is running
    and when this tick ran it out, in which case the next round has already
    been started.
    """
    with self._lock:
      if not self._countdown.active:
        return None
      remaining = self._countdown.step()
      if remaining is None:
        logger.debug("countdown finished, starting next round")
        self.start_round()
        return None
      self.countdown_ticked.emit(remaining)
      return remaining

  def close(self) -> None:
    """Drop any pending timer; call on application unload."""
    with self._lock:
      self._cancel_countdown()

  def _begin_countdown(self) -> None:
    self._cancel_countdown()
    remaining = self._countdown.start()
    if self._scheduler is not None:
      self._timer_generation += 1
      generation = self._timer_generation
      self._timer = self._scheduler.call_every(self.config.tick_interval, lambda: self._on_timer(generation))
    self.countdown_ticked.emit(remaining)

  def _on_timer(self, generation: int) -> None:
    with self._lock:
      # a callback already in flight when its timer was cancelled
      if generation != self._timer_generation or self._timer is None:
        return
      self.tick()

  def _cancel_countdown(self) -> None:
    self._countdown.stop()
    if self._timer is not None:
      logger.debug("cancelling countdown timer")
      self._timer.cancel()
      self._timer = None
    self._timer_generation += 1

  # Development helpers -------------------------------------------
  def play_round(self, agent: Agent, debug: bool = False) -> RoundSnapshot:
    """Let `agent` choose gems until the current round is decided.

    Starts a new round first when none is in progress. Returns the terminal
    snapshot; the countdown is left running as after any decided round.
    """
    snapshot = self.snapshot()
    if snapshot is None or snapshot.outcome.is_terminal():
      snapshot = self.start_round()
    while not snapshot.outcome.is_terminal():
      legal = snapshot.legal_slots
      slot = agent.act(snapshot, legal)
      if slot not in legal:
        raise ValueError(f"Agent {agent.name} chose {slot!r}, not one of {legal}")
      previous = snapshot.score
      chosen = self.choose(slot)
      assert chosen is not None
      snapshot = chosen
      agent.observe(slot, snapshot.score - previous, snapshot)
      if debug:
        print(f"Round {snapshot.round_id}: {agent.name} chooses {slot}: score {snapshot.score}/{snapshot.target}")
    if debug:
      self.print_summary()
    return snapshot

  def print_summary(self) -> None:
    """Print a short, human-readable summary of the session."""
    with self._lock:
      state = self._state
      if state is None:
        print(f"No round started. Tally: {self._tally}")
        return
      print(f"Round {state.round_id}: target={state.target} score={state.score} outcome={state.outcome}")
      print("Gems: " + " ".join(f"{g.slot}={g.value}" for g in state.gems))
      print(f"Tally: wins={self._tally.wins} losses={self._tally.losses}")
      if self._countdown.active:
        print(f"Next round in {self.time_left_text()}")

  def export(self) -> "SessionLog":
    """Export the decided rounds of this session as a SessionLog."""
    with self._lock:
      return SessionLog(
          config=self.config,
          tally=self._tally,
          rounds=list(self._history),
          metadata={'seed': self._seed},
      )


class RoundRecord(BaseModel):
  round_id: int
  target: int
  gem_values: list[int]
  choices: list[GemSlot]
  score: int
  outcome: Outcome

  @classmethod
  def of(cls, state: RoundState) -> "RoundRecord":
    return cls(
        round_id=state.round_id,
        target=state.target,
        gem_values=list(state.values),
        choices=list(state.choices),
        score=state.score,
        outcome=state.outcome,
    )


class SessionLog(BaseModel):
  config: GameConfig
  tally: Tally
  rounds: list[RoundRecord]
  metadata: dict[str, Any]  # seed and others

  def replay(self) -> tuple[list[RoundSnapshot], Engine]:
    """Replay every recorded round on a fresh engine.

    Returns the terminal snapshot of each round and the engine. Its tally
    matches the recorded one unless `history_limit` dropped early rounds.
    """
    engine = Engine.new(config=self.config)
    snapshots: list[RoundSnapshot] = []
    for record in self.rounds:
      snapshot = engine.start_round(target=record.target, values=record.gem_values)
      for slot in record.choices:
        chosen = engine.choose(slot)
        assert chosen is not None
        snapshot = chosen
      snapshots.append(snapshot)
    engine.close()
    return snapshots, engine


__all__ = ["Engine", "RoundRecord", "SessionLog"]
