"""Horizontal two-tile swap mechanic."""

from __future__ import annotations

from dataclasses import dataclass

from .board import EMPTY, Board


def can_swap(board: Board, row: int, col: int) -> bool:
    """Return ``True`` if the pair ``(row, col)``/``(row, col + 1)`` may swap.

    The pair must lie on the board, hold at least one tile and must not have a
    falling tile directly above either cell; swapping beneath a descending
    block would leave the falling mask pointing at the wrong tiles.
    """

    if not (board.in_bounds(row, col) and board.in_bounds(row, col + 1)):
        return False
    if board.get_tile(row, col) == EMPTY and board.get_tile(row, col + 1) == EMPTY:
        return False
    if board.is_above_falling(row, col) or board.is_above_falling(row, col + 1):
        return False
    return True


def exchange(board: Board, row: int, col: int) -> int:
    """Swap the two tiles and return how many falling flags were dropped.

    Any cell of the pair left empty by the exchange loses its falling flag.
    """

    left = board.get_tile(row, col)
    right = board.get_tile(row, col + 1)
    board.set_tile(row, col, right)
    board.set_tile(row, col + 1, left)
    dropped = 0
    for target in (col, col + 1):
        if board.get_tile(row, target) == EMPTY and board.is_falling(row, target):
            board.set_falling(row, target, False)
            dropped += 1
    return dropped


@dataclass
class SwapState:
    """Progress of the swap animation, if one is running."""

    active: bool = False
    tick: int = 0
    row: int = 0
    col: int = 0

    def begin(self, row: int, col: int) -> None:
        self.active = True
        self.tick = 0
        self.row = row
        self.col = col

    def advance(self, duration: int) -> bool:
        """Step the animation and return ``True`` when it has just finished."""

        if not self.active:
            return False
        self.tick += 1
        if self.tick >= duration:
            self.active = False
            return True
        return False

    def fraction(self, duration: int) -> float:
        """Return animation progress in ``[0, 1]``; ``0`` while idle."""

        if not self.active:
            return 0.0
        return min(1.0, self.tick / duration)
