"""Countdown state and the schedulers that drive it.

The engine owns a `Countdown` (pure bookkeeping: remaining seconds and an
active flag) and asks a `Scheduler` for a repeating callback that steps it.
Every scheduler hands back a `TimerHandle`; cancelling it guarantees the
callback will not run again, and cancelling twice is harmless.

- `ManualScheduler` runs on a virtual clock advanced by the caller. Tests and
  frame-driven front ends use it.
- `ThreadScheduler` re-arms a `threading.Timer` after each firing.
- `AsyncioScheduler` re-arms `loop.call_later` on a running event loop.
"""
import asyncio
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

_EPSILON = 1e-9


def format_time_left(seconds: int, with_minutes: bool = False) -> str:
  """Render the remaining countdown time for display.

  Without minutes only the seconds part is shown; with minutes the result
  reads `M:SS`.
  """
  minutes, remainder = divmod(max(seconds, 0), 60)
  if with_minutes:
    return f"{minutes}:{remainder:02d}"
  return str(remainder)


class Countdown:
  """Whole-second countdown between two rounds."""

  def __init__(self, duration: int) -> None:
    if duration < 0:
      raise ValueError(f"duration must be >= 0, got {duration}")
    self.duration = duration
    self.remaining = 0
    self.active = False

  def start(self) -> int:
    self.remaining = self.duration
    self.active = True
    return self.remaining

  def step(self) -> int | None:
    """Count one second down.

    Returns the remaining seconds, or None once the countdown runs past
    zero (it is then stopped) or when it was not running.
    """
    if not self.active:
      return None
    if self.remaining == 0:
      self.stop()
      return None
    self.remaining -= 1
    return self.remaining

  def stop(self) -> None:
    self.active = False
    self.remaining = 0

  def __repr__(self) -> str:  # pragma: no cover - convenience
    return f"Countdown(duration={self.duration}, remaining={self.remaining}, active={self.active})"


class TimerHandle:
  """Handle of a repeating scheduled callback."""

  def __init__(self) -> None:
    self._cancelled = False

  @property
  def active(self) -> bool:
    return not self._cancelled

  def cancel(self) -> None:
    if self._cancelled:
      return
    self._cancelled = True
    self._stop()

  def _stop(self) -> None:
    """Hook for subclasses to release the underlying timer."""
    pass


class Scheduler(ABC):

  @abstractmethod
  def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
    """Run `callback` every `interval` seconds until the handle is cancelled.

    The first call happens one interval after scheduling.
    """


@dataclass
class _Entry:
  next_at: float
  interval: float
  callback: Callable[[], None]
  handle: TimerHandle


class ManualScheduler(Scheduler):
  """Deterministic scheduler on a virtual clock."""

  def __init__(self) -> None:
    self.now = 0.0
    self._entries: list[_Entry] = []

  def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
    if interval <= 0:
      raise ValueError(f"interval must be positive, got {interval}")
    handle = TimerHandle()
    self._entries.append(_Entry(self.now + interval, interval, callback, handle))
    return handle

  @property
  def pending(self) -> int:
    """Number of callbacks still scheduled."""
    return sum(1 for e in self._entries if e.handle.active)

  def advance(self, seconds: float) -> int:
    """Move the clock forward, firing every callback that falls due.

    Callbacks fire in time order; a callback may cancel handles or schedule
    new ones, and those take effect within the same advance. Returns the
    number of callbacks fired.
    """
    end = self.now + seconds
    fired = 0
    while True:
      due = [e for e in self._entries if e.handle.active and e.next_at <= end + _EPSILON]
      if not due:
        break
      entry = min(due, key=lambda e: e.next_at)
      self.now = entry.next_at
      entry.next_at += entry.interval
      entry.callback()
      fired += 1
    self.now = end
    self._entries = [e for e in self._entries if e.handle.active]
    return fired


class _ThreadTimer(TimerHandle):

  def __init__(self, interval: float, callback: Callable[[], None]) -> None:
    super().__init__()
    self._interval = interval
    self._callback = callback
    self._lock = threading.Lock()
    self._timer: threading.Timer | None = None
    self._arm()

  def _arm(self) -> None:
    with self._lock:
      if self._cancelled:
        return
      self._timer = threading.Timer(self._interval, self._fire)
      self._timer.daemon = True
      self._timer.start()

  def _fire(self) -> None:
    if self._cancelled:
      return
    self._arm()
    self._callback()

  def _stop(self) -> None:
    with self._lock:
      if self._timer is not None:
        self._timer.cancel()
        self._timer = None


class ThreadScheduler(Scheduler):
  """Scheduler backed by daemon `threading.Timer` threads.

  Callbacks run on timer threads; the engine serializes them with its own
  lock.
  """

  def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
    if interval <= 0:
      raise ValueError(f"interval must be positive, got {interval}")
    return _ThreadTimer(interval, callback)


class _AsyncioTimer(TimerHandle):

  def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callable[[], None]) -> None:
    super().__init__()
    self._loop = loop
    self._interval = interval
    self._callback = callback
    self._pending: asyncio.TimerHandle | None = self._loop.call_later(interval, self._fire)

  def _fire(self) -> None:
    if self._cancelled:
      return
    self._pending = self._loop.call_later(self._interval, self._fire)
    self._callback()

  def _stop(self) -> None:
    if self._pending is not None:
      self._pending.cancel()
      self._pending = None


class AsyncioScheduler(Scheduler):
  """Scheduler for cooperative asyncio event loops.

  Without an explicit loop, `call_every` must be called from a coroutine or
  callback running on the loop.
  """

  def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
    self._loop = loop

  def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
    if interval <= 0:
      raise ValueError(f"interval must be positive, got {interval}")
    loop = self._loop or asyncio.get_running_loop()
    return _AsyncioTimer(loop, interval, callback)


__all__ = [
    "AsyncioScheduler", "Countdown", "ManualScheduler", "Scheduler",
    "ThreadScheduler", "TimerHandle", "format_time_left",
]
