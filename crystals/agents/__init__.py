"""Automated players for the engine."""
from .core import Agent, AgentBuilder, BaseAgent
from .random import RandomAgent
from .greedy import GreedyAgent

__all__ = ["Agent", "AgentBuilder", "BaseAgent", "RandomAgent", "GreedyAgent"]
