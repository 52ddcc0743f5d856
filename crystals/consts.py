from dataclasses import asdict
from pathlib import Path
from pydantic.dataclasses import dataclass as pydantic_dataclass

GEM_COUNT = 4

DEFAULT_CONFIG_PATH = Path(__file__).parent / "assets" / "config.yaml"


@pydantic_dataclass(frozen=True)
class GameConfig:
  """Validated immutable configuration for a session.

  Uses pydantic's dataclass wrapper for runtime type validation; the domain
  rules (non-empty ranges, enough distinct gem values) are checked in
  `__post_init__`.
  """
  gem_value_min: int = 1
  gem_value_max: int = 12
  target_min: int = 19
  target_max: int = 120
  countdown_seconds: int = 5
  # M:SS instead of bare seconds; only matters for countdowns over a minute
  countdown_show_minutes: bool = False
  tick_interval: float = 1.0
  # decided rounds kept by the engine; None keeps every round
  history_limit: int | None = 1000

  def __post_init__(self):
    if self.gem_value_min < 1:
      raise ValueError(f'gem_value_min must be positive, got {self.gem_value_min}')
    if self.gem_value_max - self.gem_value_min + 1 < GEM_COUNT:
      raise ValueError(
          f'gem value range [{self.gem_value_min}, {self.gem_value_max}] '
          f'must hold at least {GEM_COUNT} distinct values')
    if self.target_min < 1 or self.target_min > self.target_max:
      raise ValueError(f'invalid target range [{self.target_min}, {self.target_max}]')
    if self.countdown_seconds < 0:
      raise ValueError(f'countdown_seconds must be >= 0, got {self.countdown_seconds}')
    if self.tick_interval <= 0:
      raise ValueError(f'tick_interval must be positive, got {self.tick_interval}')
    if self.history_limit is not None and self.history_limit < 1:
      raise ValueError(f'history_limit must be positive or None, got {self.history_limit}')

  @property
  def gem_values(self) -> range:
    return range(self.gem_value_min, self.gem_value_max + 1)

  @property
  def targets(self) -> range:
    return range(self.target_min, self.target_max + 1)

  def serialize(self) -> dict:
    return asdict(self)

  @classmethod
  def deserialize(cls, data: dict) -> 'GameConfig':
    return cls(**data)

  @classmethod
  def load(cls, path: str | Path | None = None) -> 'GameConfig':
    """Load a config from a YAML file.

    The file holds a top-level `game` mapping whose keys are GameConfig
    fields; missing keys keep their defaults. Without `path` the packaged
    `assets/config.yaml` is read.
    """
    import yaml
    p = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    with p.open('r', encoding='utf8') as fh:
      j = yaml.safe_load(fh) or {}
    return cls.deserialize(j.get('game', {}))


DEFAULT_CONFIG = GameConfig()
