"""Score, difficulty and level progression formulas."""

from __future__ import annotations

import math


# Value of a cleared run of length 3..10.
MATCH_VALUES = (300, 450, 650, 950, 1500, 2500, 4500, 7000)

MIN_COLORS = 4
MAX_COLORS = 6

# Rows risen per tick at level 0 and the cap on the level multiplier.
BASE_RISE_PER_TICK = 1 / 120
MAX_RISE_MULTIPLIER = 4.0


def match_value(length: int) -> int:
    """Return the base value of a run of ``length`` tiles.

    Runs longer than ten grow by 3000 per extra tile.  Runs shorter than three
    never resolve but are given a token value.
    """

    if length < 3:
        return 10
    if length > 10:
        return MATCH_VALUES[-1] + 3000 * (length - 10)
    return MATCH_VALUES[length - 3]


def match_score(length: int, combo: int, level: int) -> int:
    """Return the points for clearing a run at the given combo and level."""

    return math.floor((1 + 0.1 * combo) * (1 + 0.1 * level) * match_value(length))


def wipe_bonus(row: int, level: int) -> int:
    """Return the per-tile bonus of a level-up wipe starting at ``row``.

    Starting higher up the stack is riskier and pays more.
    """

    return 100 + 10 * row + 10 * level


def norma_increment(level: int) -> int:
    """Return the clear budget added when reaching ``level``."""

    return 100 + 20 * level


def color_count(level: int) -> int:
    """Return how many tile colors are in play at ``level``."""

    return min(MAX_COLORS, MIN_COLORS + level // 2)


def rise_rate(level: int) -> float:
    """Return how many rows the stack rises per tick at ``level``."""

    return min(MAX_RISE_MULTIPLIER, 1 + 0.15 * level) * BASE_RISE_PER_TICK
