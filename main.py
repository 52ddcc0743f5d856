"""Small runner to exercise the engine during development.

Plays a few rounds with a GreedyAgent, printing every event the engine
emits. The countdown runs on a ManualScheduler so the demo does not wait
for real seconds.
"""
import logging

from crystals.agents.greedy import GreedyAgent
from crystals.countdown import ManualScheduler
from crystals.engine import Engine


if __name__ == "__main__":
  logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
  scheduler = ManualScheduler()
  engine = Engine.new(seed=0, scheduler=scheduler)
  engine.on_round_start(lambda s: print(f"New round: target={s.target} gems={s.gem_ids}"))
  engine.on_outcome(lambda outcome, tally: print(f"Outcome: {outcome} (wins={tally.wins} losses={tally.losses})"))
  engine.on_tick(lambda remaining: print(f"  next round in {remaining}"))

  agent = GreedyAgent(seed=100)
  engine.start_round()
  for _ in range(5):
    engine.play_round(agent, debug=True)
    # let the countdown run out; the engine starts the next round itself
    scheduler.advance(engine.config.countdown_seconds + 1)

  engine.close()
  print(f"Final tally: {engine.tally.wins} won, {engine.tally.losses} lost")
