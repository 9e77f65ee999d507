"""Score notifications emitted by the simulation for front-ends."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ScoreKind(str, Enum):
    MATCH = "match"
    WIPE = "wipe"


@dataclass(frozen=True)
class ScoreEvent:
    """Points awarded at a board location during one tick.

    ``row`` and ``col`` are logical and may be fractional: a match reports
    the midpoint of its run.  ``length`` is the run length for matches and
    ``1`` for tiles removed by a level-up wipe.
    """

    amount: int
    row: float
    col: float
    kind: ScoreKind = ScoreKind.MATCH
    length: int = 1
