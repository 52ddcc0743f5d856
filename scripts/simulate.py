"""Batch simulations: let agents play many rounds and save the sessions.

Run from the repository root:

  python scripts/simulate.py [simulation_config.toml]

Each session is one engine (one tally) playing `rounds` rounds with one agent.
Sessions are appended to a JSONL file, one `SessionLog` per line.
"""
import json
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias

from tqdm import tqdm

from crystals.agents.core import Agent, AgentBuilder
from crystals.consts import GameConfig
from crystals.engine import Engine, SessionLog

PathLike: TypeAlias = str | Path

DEFAULT_CONFIG_FILE = Path(__file__).parent / "simulation_config.toml"


@dataclass(frozen=True)
class RunConfig:
  agents: list[str]
  sessions: int
  rounds: int
  output_dir: str
  seed: int = 1234


def load_run_config(filename: PathLike = DEFAULT_CONFIG_FILE) -> tuple[RunConfig, GameConfig]:
  with open(filename, "rb") as f:
    data = tomllib.load(f)
  return RunConfig(**data["run"]), GameConfig.deserialize(data.get("game", {}))


def run_sessions(agent: Agent, game_config: GameConfig, *, sessions: int, rounds: int, seed: int = 1234) -> list[SessionLog]:
  """Play `sessions` independent sessions of `rounds` rounds each."""
  result: list[SessionLog] = []
  for i in tqdm(range(sessions), desc=f"Simulating {agent.name}"):
    agent.reset(seed=seed + i)
    engine = Engine.new(config=game_config, seed=seed + i)
    for _ in range(rounds):
      engine.play_round(agent)
    engine.close()
    log = engine.export()
    log.metadata["agent"] = agent.metadata()
    result.append(log)
  return result


def save_sessions(logs: list[SessionLog], output_file: PathLike, mode="a") -> None:
  output_file = Path(output_file)
  output_file.parent.mkdir(parents=True, exist_ok=True)
  with open(output_file, mode, encoding="utf-8") as f:
    for log in logs:
      f.write(f"{log.model_dump_json()}\n")


def load_sessions(input_file: PathLike) -> list[SessionLog]:
  with open(input_file, "r", encoding="utf-8") as f:
    return [SessionLog.model_validate_json(line) for line in f if line.strip()]


def win_rate(logs: list[SessionLog]) -> float:
  wins = sum(log.tally.wins for log in logs)
  played = sum(log.tally.played for log in logs)
  return wins / played if played else 0.0


if __name__ == "__main__":
  logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
  config_file = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CONFIG_FILE
  run_config, game_config = load_run_config(config_file)
  summary = {}
  for cls_name in run_config.agents:
    agent = AgentBuilder(cls_name=cls_name).build()
    logs = run_sessions(agent, game_config, sessions=run_config.sessions,
                        rounds=run_config.rounds, seed=run_config.seed)
    save_sessions(logs, Path(run_config.output_dir) / f"{cls_name}.jsonl")
    summary[cls_name] = round(win_rate(logs), 4)
  print(json.dumps(summary, indent=2))
