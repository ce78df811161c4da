"""Headless playthrough — drives a GameSession on a manual clock and prints the result.

Picks the first executable action each second, puts every free villager
to work, then sleeps.

Run:
    python -m cinder_game
    python -m cinder_game --seed 7 --steps 600 --sleep-hours 4 --verbose
"""
from __future__ import annotations

import argparse
import dataclasses
import logging

from cinder import CinderConfig, ManualClock
from cinder.logger_config import setup_logging

from cinder_game.session import GameSession

logger = logging.getLogger(__name__)

STEP_MS = 1_000.0
MS_PER_HOUR = 3_600_000.0


def play(game: GameSession, clock: ManualClock, steps: int) -> int:
    """Run *steps* one-second turns. Returns the number of actions executed."""
    taken = 0
    for _ in range(steps):
        for action_id in game.visible_actions():
            if game.can_execute(action_id):
                game.execute(action_id)
                taken += 1
                break
        clock.advance(STEP_MS)
    return taken


def staff(game: GameSession) -> int:
    """Assign every free villager to the first open role. Returns how many were placed."""
    roles = game.available_roles()
    if not roles:
        return 0
    placed = 0
    while game.assign_villager(roles[0]):
        placed += 1
    return placed


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="cinder_game", description="Headless cinder playthrough")
    parser.add_argument("--seed", type=int, default=1)
    parser.add_argument("--steps", type=int, default=300, help="one-second turns to play")
    parser.add_argument("--sleep-hours", type=float, default=1.0)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    clock = ManualClock()
    game = GameSession(config=CinderConfig(strict=True), clock=clock, seed=args.seed)

    taken = play(game, clock, args.steps)
    placed = staff(game)
    logger.info("played %d turns: %d actions, %d villagers placed", args.steps, taken, placed)

    if args.sleep_hours > 0:
        game.start_idle()
        clock.advance(args.sleep_hours * MS_PER_HOUR)
        game.end_idle()

    print(f"Actions taken: {taken}")
    for entry in game.log.query():
        print(f"  {entry.message}")
    held = {k: v for k, v in dataclasses.asdict(game.state.resources).items() if v}
    print("Resources: " + (", ".join(f"{k}={v}" for k, v in held.items()) or "none"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
