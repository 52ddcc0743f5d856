"""Top-level package exports for the crystals project.

Expose a small, stable API so callers can `from crystals import Engine, GameConfig`.
"""

from .consts import GameConfig
from .countdown import AsyncioScheduler, ManualScheduler, ThreadScheduler
from .engine import Engine, RoundRecord, SessionLog
from .state import RoundSnapshot, RoundState
from .typings import Gem, GemSlot, Outcome, Tally

__all__ = [
    "AsyncioScheduler", "Engine", "GameConfig", "Gem", "GemSlot", "ManualScheduler",
    "Outcome", "RoundRecord", "RoundSnapshot", "RoundState", "SessionLog", "Tally",
    "ThreadScheduler",
]
