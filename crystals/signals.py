"""Minimal observer primitive for engine events.

Shaped after Qt signals: `connect` a slot, `emit` calls every connected slot
in connection order. Slots connected or disconnected during an emission take
effect from the next emission.
"""
from collections.abc import Callable
from typing import Any


class Signal:

  def __init__(self, name: str = "") -> None:
    self.name = name
    self._slots: list[Callable[..., Any]] = []

  def connect(self, slot: Callable[..., Any]) -> Callable[[], None]:
    """Connect `slot` and return a function that disconnects it again."""
    self._slots.append(slot)
    return lambda: self.disconnect(slot)

  def disconnect(self, slot: Callable[..., Any]) -> None:
    # disconnecting an unknown slot is a no-op
    if slot in self._slots:
      self._slots.remove(slot)

  def emit(self, *args: Any) -> None:
    for slot in list(self._slots):
      slot(*args)

  def __len__(self) -> int:
    return len(self._slots)

  def __repr__(self) -> str:  # pragma: no cover - convenience
    return f"Signal({self.name!r}, slots={len(self._slots)})"


__all__ = ["Signal"]
