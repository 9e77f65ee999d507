"""Fall physics for suspended tiles.

Falling is tracked per cell in :attr:`Board.falling`.  :func:`check_falls`
rebuilds the mask from scratch whenever the shape of the stack changes and
:func:`descend` moves every airborne tile down by exactly one row.  The
orchestrator calls the latter once per ``fall_time`` ticks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .board import EMPTY, Board


LOGGER = logging.getLogger(__name__)


class FallStateError(RuntimeError):
    """Raised in strict mode when the falling mask disagrees with the tiles."""


@dataclass(frozen=True)
class Descent:
    """Outcome of a single :func:`descend` step."""

    moved: int = 0
    landed: int = 0
    stale: int = 0

    @property
    def removed(self) -> int:
        """Number of falling flags that were cleared during the step."""

        return self.landed + self.stale


def check_falls(board: Board) -> int:
    """Recompute the falling mask and return how many tiles are airborne.

    Rows are visited bottom-up so a flag set on a lower tile propagates to
    the whole floating stack above it.
    """

    count = 0
    for row in range(1, board.height):
        for col in range(board.width):
            if board.get_tile(row, col) == EMPTY:
                board.set_falling(row, col, False)
                continue
            suspended = board.get_tile(row - 1, col) == EMPTY or board.is_falling(row - 1, col)
            board.set_falling(row, col, suspended)
            if suspended:
                count += 1
    return count


def _report(message: str, strict: bool) -> None:
    if strict:
        raise FallStateError(message)
    LOGGER.warning(message)


def descend(board: Board, *, strict: bool = False) -> Descent:
    """Move every falling tile one row down.

    A tile has landed once it reaches row ``0`` or rests on an occupied cell
    that is not itself falling; landed tiles lose their flag, the rest carry
    it down with them.

    Args:
        board: Board to update in place.
        strict: Raise :class:`FallStateError` on an inconsistent mask instead
            of logging a warning and clearing the bad flag.
    """

    moved = landed = stale = 0
    for row in range(1, board.height):
        for col in range(board.width):
            if not board.is_falling(row, col):
                continue
            tile = board.get_tile(row, col)
            if tile == EMPTY:
                _report(f"({row}, {col}) is empty but registered as falling", strict)
                board.set_falling(row, col, False)
                stale += 1
                continue
            dest = row - 1
            if board.get_tile(dest, col) != EMPTY:
                _report(f"({row}, {col}) is falling onto occupied ({dest}, {col})", strict)
                board.set_falling(row, col, False)
                landed += 1
                continue
            board.set_tile(dest, col, tile)
            board.set_tile(row, col, EMPTY)
            board.set_falling(row, col, False)
            moved += 1
            on_ground = dest == 0 or (
                board.get_tile(dest - 1, col) != EMPTY and not board.is_falling(dest - 1, col)
            )
            if on_ground:
                landed += 1
            else:
                board.set_falling(dest, col, True)
    return Descent(moved=moved, landed=landed, stale=stale)
