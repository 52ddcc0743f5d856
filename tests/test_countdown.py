import asyncio
import time

import pytest

from crystals.countdown import (
    AsyncioScheduler, Countdown, ManualScheduler, ThreadScheduler, format_time_left,
)


def test_countdown_steps_down_then_runs_out():
  c = Countdown(3)
  assert not c.active
  assert c.start() == 3
  assert [c.step(), c.step(), c.step()] == [2, 1, 0]
  assert c.active
  assert c.step() is None
  assert not c.active
  # stepping a stopped countdown is a no-op
  assert c.step() is None


def test_countdown_zero_duration():
  c = Countdown(0)
  assert c.start() == 0
  assert c.step() is None
  assert not c.active


def test_countdown_rejects_negative_duration():
  with pytest.raises(ValueError):
    Countdown(-1)


def test_format_time_left():
  assert format_time_left(5) == "5"
  assert format_time_left(0) == "0"
  assert format_time_left(5, with_minutes=True) == "0:05"
  assert format_time_left(75, with_minutes=True) == "1:15"
  assert format_time_left(-1) == "0"


def test_manual_scheduler_fires_in_order():
  s = ManualScheduler()
  calls = []
  s.call_every(1.0, lambda: calls.append(("a", s.now)))
  s.call_every(2.0, lambda: calls.append(("b", s.now)))
  assert s.advance(4) == 6
  assert calls == [("a", 1.0), ("a", 2.0), ("b", 2.0), ("a", 3.0), ("a", 4.0), ("b", 4.0)]
  assert s.now == 4


def test_manual_scheduler_cancel_is_idempotent():
  s = ManualScheduler()
  calls = []
  h = s.call_every(1.0, lambda: calls.append(s.now))
  s.advance(2)
  h.cancel()
  h.cancel()
  assert not h.active
  s.advance(5)
  assert calls == [1.0, 2.0]
  assert s.pending == 0


def test_manual_scheduler_callback_can_cancel_and_reschedule():
  s = ManualScheduler()
  calls = []
  handles = {}

  def first():
    calls.append(("first", s.now))
    handles["first"].cancel()
    handles["second"] = s.call_every(1.0, lambda: calls.append(("second", s.now)))

  handles["first"] = s.call_every(1.0, first)
  s.advance(3)
  assert calls == [("first", 1.0), ("second", 2.0), ("second", 3.0)]


def test_manual_scheduler_rejects_non_positive_interval():
  with pytest.raises(ValueError):
    ManualScheduler().call_every(0, lambda: None)


def test_thread_scheduler_cancel_stops_callbacks():
  s = ThreadScheduler()
  calls = []
  h = s.call_every(0.01, lambda: calls.append(1))
  time.sleep(0.1)
  h.cancel()
  time.sleep(0.03)
  count = len(calls)
  time.sleep(0.1)
  assert count >= 1
  assert len(calls) == count


def test_asyncio_scheduler_repeats_until_cancelled():
  async def main():
    calls = []
    h = AsyncioScheduler().call_every(0.01, lambda: calls.append(1))
    await asyncio.sleep(0.1)
    h.cancel()
    count = len(calls)
    await asyncio.sleep(0.05)
    return count, len(calls)

  count, after = asyncio.run(main())
  assert count >= 2
  assert after == count
