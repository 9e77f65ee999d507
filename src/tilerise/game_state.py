"""Session state and the per-frame tick orchestrator."""

from __future__ import annotations

import logging
import random
from typing import List, Optional

import numpy as np

from .board import EMPTY, Board, Grid
from .config import DEFAULT_CONFIG, GameConfig
from .events import ScoreEvent, ScoreKind
from .gravity import check_falls, descend
from .matches import clear_match, find_matches
from .scoring import color_count, match_score, norma_increment, rise_rate, wipe_bonus
from .swap import SwapState, can_swap, exchange


LOGGER = logging.getLogger(__name__)


class GameState:
    """Mutable state for one play session.

    The session is advanced one frame at a time with :meth:`tick`; the only
    other entry point that mutates it is :meth:`request_swap`.  Once
    :attr:`dead` is set every further call is a no-op.
    """

    def __init__(
        self,
        config: GameConfig = DEFAULT_CONFIG,
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config.validate()
        self._rng = rng or random.Random(config.seed)
        self.board = Board(config.height, config.width)
        self.score = 0
        self.level = 0
        self.norma = config.initial_norma
        self.progress = 0.0
        self.combo = 0
        self.fall_count = 0
        self.fall_tick = 0
        self.swap = SwapState()
        self.dead = False
        self.ticks = 0
        self._events: List[ScoreEvent] = []
        self.board.roll_incoming(self._rng, color_count(self.level))

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def height(self) -> int:
        return self.board.height

    @property
    def width(self) -> int:
        return self.board.width

    def tile(self, row: int, col: int) -> int:
        return self.board.get_tile(row, col)

    def is_falling(self, row: int, col: int) -> bool:
        return self.board.is_falling(row, col)

    @property
    def falling(self) -> bool:
        return self.fall_count > 0

    @property
    def fall_fraction(self) -> float:
        """Return how far airborne tiles are through their current row drop."""

        if self.fall_count == 0 or self.fall_tick == 0:
            return 0.0
        fall_time = self.config.fall_time
        return ((self.fall_tick - 1) % fall_time) / fall_time

    @property
    def swapping(self) -> bool:
        return self.swap.active

    @property
    def swap_row(self) -> int:
        return self.swap.row

    @property
    def swap_col(self) -> int:
        return self.swap.col

    @property
    def swap_fraction(self) -> float:
        return self.swap.fraction(self.config.swap_time)

    @property
    def incoming(self) -> List[int]:
        return [int(v) for v in self.board.incoming]

    def snapshot(self) -> Grid:
        """Return a copy of the tiles in logical order, bottom row first."""

        return self.board.grid()

    def drain_events(self) -> List[ScoreEvent]:
        """Return and forget the score events produced by the last tick."""

        events, self._events = self._events, []
        return events

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def request_swap(self, row: int, col: int) -> bool:
        """Start swapping ``(row, col)`` with its right neighbour.

        Requests that cannot be honoured are dropped without side effects.

        Returns:
            ``True`` if the swap started.
        """

        if self.dead or self.swap.active:
            return False
        if not can_swap(self.board, row, col):
            return False
        self.swap.begin(row, col)
        if self.fall_count == 0:
            self.combo = 0
        LOGGER.debug("Swap started at (%d, %d)", row, col)
        return True

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------
    def tick(self) -> None:
        """Advance the simulation by one frame."""

        self._events = []
        if self.dead:
            return
        self.ticks += 1

        if self.fall_count > 0 and not self.swap.active:
            self._step_falls()

        if self.swap.active and self.swap.advance(self.config.swap_time):
            self._finish_swap()

        if not self.swap.active and self.fall_count == 0:
            self.progress += rise_rate(self.level)
            if self.progress >= 1:
                self.progress -= 1
                self.advance_row()
                if self.dead:
                    return
            if self.process_matches():
                self.combo += 1

        if self.norma < 0:
            self.level_up()

    def _step_falls(self) -> None:
        if self.fall_tick != 0 and self.fall_tick % self.config.fall_time == 0:
            result = descend(self.board, strict=self.config.strict_falls)
            self.fall_count -= result.removed
        self.fall_tick += 1

    def _finish_swap(self) -> None:
        row, col = self.swap.row, self.swap.col
        self.fall_count -= exchange(self.board, row, col)
        LOGGER.debug("Swap resolved at (%d, %d)", row, col)

    def check_falls(self) -> None:
        """Rebuild the falling mask and restart the fall timer."""

        self.fall_count = check_falls(self.board)
        self.fall_tick = 0

    def advance_row(self) -> None:
        """Bring the incoming row onto the board or end the session."""

        if not self.board.advance_row():
            self.dead = True
            LOGGER.info("Game over at level %d with score %d", self.level, self.score)
            return
        self.board.roll_incoming(self._rng, color_count(self.level))
        self.combo = 0
        LOGGER.debug("Row advanced")

    def process_matches(self) -> bool:
        """Score and clear every run on the board.

        Scores are computed from the complete match list before any cell is
        cleared, so a tile shared by a horizontal and a vertical run counts
        for both.

        Returns:
            ``True`` if at least one run was cleared.
        """

        matches = find_matches(self.board)
        for match in matches:
            amount = match_score(match.length, self.combo, self.level)
            self.score += amount
            self.norma -= match.length
            row, col = match.center()
            self._events.append(
                ScoreEvent(amount, row, col, kind=ScoreKind.MATCH, length=match.length)
            )
        for match in matches:
            clear_match(self.board, match)
        if matches:
            LOGGER.debug("Cleared %d run(s), score %d", len(matches), self.score)
        self.check_falls()
        return bool(matches)

    def level_up(self) -> None:
        """Wipe everything from the lowest row with a gap upward and raise the level."""

        lowest = self.board.lowest_open_row()
        bonus = wipe_bonus(lowest, self.level)
        for row in range(lowest, self.board.height):
            for col in range(self.board.width):
                if self.board.get_tile(row, col) == EMPTY:
                    continue
                self.board.set_tile(row, col, EMPTY)
                self.score += bonus
                self._events.append(
                    ScoreEvent(bonus, float(row), float(col), kind=ScoreKind.WIPE)
                )
        self.level += 1
        self.norma += norma_increment(self.level)
        self.check_falls()
        LOGGER.info("Level up to %d (wiped from row %d)", self.level, lowest)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def falls_consistent(self) -> bool:
        """Return ``True`` if ``fall_count`` and the mask agree with the tiles."""

        if self.fall_count != self.board.falling_count():
            return False
        grid = self.board.grid()
        return not bool(np.any(self.board.falling & (grid[1:] == EMPTY)))
