"""Headless ASCII demo for the tile engine.

Run with: `python -m tilerise`

Plays random swaps for a number of ticks and prints the final board together
with the session counters.  Useful as a smoke test of the whole simulation
without a display.
"""

from __future__ import annotations

import argparse
import logging
import random

from .config import GameConfig
from .game_state import GameState
from .utils import render_ascii


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--ticks", type=int, default=3600, help="Number of ticks to simulate.")
    parser.add_argument("--seed", type=int, default=0, help="Seed for tiles and swaps.")
    parser.add_argument(
        "--swap-every",
        type=int,
        default=15,
        help="Attempt a random swap every N ticks (0 disables swapping).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args()


def play(state: GameState, ticks: int, swap_every: int, rng: random.Random) -> int:
    """Run ``state`` for up to ``ticks`` ticks and return how many ran."""

    for tick in range(ticks):
        if state.dead:
            return tick
        if swap_every > 0 and tick % swap_every == 0:
            state.request_swap(rng.randrange(state.height), rng.randrange(state.width - 1))
        state.tick()
    return ticks


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING), format="%(message)s")
    state = GameState(GameConfig(seed=args.seed))
    ran = play(state, args.ticks, args.swap_every, random.Random(args.seed))
    print(render_ascii(state))
    print(
        f"ticks={ran} score={state.score} level={state.level} "
        f"norma={state.norma} combo={state.combo} dead={state.dead}"
    )


if __name__ == "__main__":
    main()
