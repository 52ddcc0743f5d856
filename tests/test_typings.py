import pytest

from crystals.typings import Gem, GemSlot, Outcome, Tally


def test_gem_slot_parse():
  assert GemSlot.parse("ruby") is GemSlot.RUBY
  assert GemSlot.parse("TOPAZ") is GemSlot.TOPAZ
  assert GemSlot.parse(GemSlot.EMERALD) is GemSlot.EMERALD
  assert GemSlot.parse("diamond") is None
  assert GemSlot.parse("") is None
  assert [str(s) for s in GemSlot] == ["emerald", "ruby", "sapphire", "topaz"]


def test_outcome_is_terminal():
  assert not Outcome.IN_PROGRESS.is_terminal()
  assert Outcome.WON.is_terminal()
  assert Outcome.LOST.is_terminal()


def test_tally_record_returns_new_tally():
  t = Tally()
  t2 = t.record(Outcome.WON).record(Outcome.LOST).record(Outcome.WON)
  assert (t.wins, t.losses) == (0, 0)
  assert (t2.wins, t2.losses) == (2, 1)
  assert t2.played == 3
  assert t2.record(Outcome.IN_PROGRESS) == t2
  assert t2.to_dict() == {'wins': 2, 'losses': 1}


def test_tally_rejects_negative_counts():
  with pytest.raises(ValueError):
    Tally(wins=-1)


def test_gem_validation_and_dict():
  g = Gem(slot=GemSlot.SAPPHIRE, value=7)
  assert g.to_dict() == {'id': 'sapphire', 'value': 7}
  with pytest.raises(ValueError):
    Gem(slot=GemSlot.RUBY, value=0)
