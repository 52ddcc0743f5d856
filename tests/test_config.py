import pytest

from crystals.consts import DEFAULT_CONFIG, GameConfig


def test_default_config_matches_game_rules():
  c = GameConfig()
  assert (c.gem_value_min, c.gem_value_max) == (1, 12)
  assert (c.target_min, c.target_max) == (19, 120)
  assert c.countdown_seconds == 5
  assert c.countdown_show_minutes is False
  assert list(c.gem_values) == list(range(1, 13))
  assert c.targets[0] == 19 and c.targets[-1] == 120


def test_config_rejects_too_narrow_gem_range():
  with pytest.raises(ValueError):
    GameConfig(gem_value_min=1, gem_value_max=3)


def test_config_rejects_bad_ranges_and_durations():
  with pytest.raises(ValueError):
    GameConfig(target_min=50, target_max=40)
  with pytest.raises(ValueError):
    GameConfig(gem_value_min=0)
  with pytest.raises(ValueError):
    GameConfig(countdown_seconds=-1)
  with pytest.raises(ValueError):
    GameConfig(tick_interval=0)


def test_config_serialize_roundtrip():
  c = GameConfig(countdown_seconds=90, countdown_show_minutes=True)
  assert GameConfig.deserialize(c.serialize()) == c


def test_config_load_packaged_yaml():
  assert GameConfig.load() == DEFAULT_CONFIG


def test_config_load_partial_yaml(tmp_path):
  p = tmp_path / "config.yaml"
  p.write_text("game:\n  countdown_seconds: 10\n  target_max: 60\n", encoding="utf8")
  c = GameConfig.load(p)
  assert c.countdown_seconds == 10
  assert c.target_max == 60
  assert c.gem_value_max == 12


def test_config_load_empty_yaml_gives_defaults(tmp_path):
  p = tmp_path / "empty.yaml"
  p.write_text("", encoding="utf8")
  assert GameConfig.load(p) == GameConfig()


def test_config_history_limit():
  assert GameConfig().history_limit == 1000
  assert GameConfig(history_limit=None).history_limit is None
  with pytest.raises(ValueError):
    GameConfig(history_limit=0)
