"""Detection of same-colored runs on the board."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from .board import EMPTY, Board


MIN_RUN = 3


class Orientation(str, Enum):
    """Direction a run extends in from its starting cell."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class Match:
    """A run of at least three equal tiles.

    ``(row, col)`` is the leftmost cell of a horizontal run or the lowest cell
    of a vertical one.
    """

    row: int
    col: int
    orientation: Orientation
    length: int

    def cells(self) -> List[Tuple[int, int]]:
        """Return the ``(row, col)`` coordinates covered by the run."""

        if self.orientation is Orientation.HORIZONTAL:
            return [(self.row, self.col + i) for i in range(self.length)]
        return [(self.row + i, self.col) for i in range(self.length)]

    def center(self) -> Tuple[float, float]:
        """Return the fractional ``(row, col)`` midpoint of the run."""

        half = (self.length - 1) / 2
        if self.orientation is Orientation.HORIZONTAL:
            return float(self.row), self.col + half
        return self.row + half, float(self.col)


def _settled(board: Board, row: int, col: int, code: int) -> bool:
    return board.get_tile(row, col) == code and not board.is_falling(row, col)


def horizontal_run(board: Board, row: int, col: int) -> int:
    """Return the length of the run starting at ``(row, col)`` going right.

    Empty and falling cells form runs of length one so a scan can step over
    them.
    """

    first = board.get_tile(row, col)
    if first == EMPTY or board.is_falling(row, col):
        return 1
    end = col + 1
    while end < board.width and _settled(board, row, end, first):
        end += 1
    return end - col


def vertical_run(board: Board, row: int, col: int) -> int:
    """Return the length of the run starting at ``(row, col)`` going up."""

    first = board.get_tile(row, col)
    if first == EMPTY or board.is_falling(row, col):
        return 1
    end = row + 1
    while end < board.height and _settled(board, end, col, first):
        end += 1
    return end - row


def find_matches(board: Board) -> List[Match]:
    """Return every horizontal and vertical run of three or more tiles.

    A tile can belong to one horizontal and one vertical run at the same
    time; both are reported so that cross shapes score twice.  The board is
    not modified.
    """

    matches: List[Match] = []
    for row in range(board.height):
        col = 0
        while col < board.width:
            length = horizontal_run(board, row, col)
            if length >= MIN_RUN:
                matches.append(Match(row, col, Orientation.HORIZONTAL, length))
            col += length
    for col in range(board.width):
        row = 0
        while row < board.height:
            length = vertical_run(board, row, col)
            if length >= MIN_RUN:
                matches.append(Match(row, col, Orientation.VERTICAL, length))
            row += length
    return matches


def clear_match(board: Board, match: Match) -> None:
    """Empty every cell covered by ``match``."""

    for row, col in match.cells():
        board.set_tile(row, col, EMPTY)
