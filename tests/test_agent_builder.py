import pytest

from crystals.agents.core import Agent, AgentBuilder
from crystals.agents.greedy import GreedyAgent
from crystals.agents.random import RandomAgent


def test_agent_registry_knows_builtin_agents():
  assert Agent.agent_name_to_cls["RandomAgent"] is RandomAgent
  assert Agent.agent_name_to_cls["GreedyAgent"] is GreedyAgent


def test_agent_builder_build_greedy():
  builder = AgentBuilder(cls_name="GreedyAgent", seat_id=2, name="G1", seed=7)
  agent = builder.build()
  assert isinstance(agent, GreedyAgent)
  assert agent.seat_id == 2
  assert agent.name == "G1"
  assert agent.metadata()["seed"] == 7


def test_agent_builder_unknown_class_raises():
  with pytest.raises(ValueError):
    AgentBuilder(cls_name="NotExistAgent")


def test_agent_builder_json_roundtrip():
  builder = AgentBuilder(cls_name="RandomAgent", seat_id=1, seed=3)
  builder2 = AgentBuilder.model_validate_json(builder.model_dump_json())
  assert builder2 == builder
  assert isinstance(builder2.build(), RandomAgent)
