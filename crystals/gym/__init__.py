"""Gymnasium environment for training players on the engine."""
from .env import CrystalEnv

__all__ = ["CrystalEnv"]
