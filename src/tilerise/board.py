"""Tile storage for the playfield.

Rows are addressed logically from the bottom: row ``0`` is always the lowest
visible row.  The tiles themselves live in a flat ring buffer and
``bottom_row`` names the physical row that currently plays the role of
logical row ``0``.  A new row entering at the bottom therefore only moves the
pointer instead of shifting every tile up by one.
"""

from __future__ import annotations

import random
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from .config import HEIGHT, WIDTH


EMPTY = 0

Grid = NDArray[np.uint8]


class Board:
    """Ring-buffered tile grid with its falling mask and incoming row."""

    def __init__(self, height: int = HEIGHT, width: int = WIDTH) -> None:
        self.height = height
        self.width = width
        self.bottom_row = 0
        self.tiles: Grid = np.zeros(height * width, dtype=np.uint8)
        # Entry ``[r - 1, c]`` describes the tile at logical row ``r``.
        self.falling: NDArray[np.bool_] = np.zeros((height - 1, width), dtype=bool)
        self.incoming: Grid = np.zeros(width, dtype=np.uint8)

    # ------------------------------------------------------------------
    # Addressing
    # ------------------------------------------------------------------
    def physical_row(self, row: int) -> int:
        """Return the storage row backing logical ``row``."""

        return (row + self.bottom_row) % self.height

    def _index(self, row: int, col: int) -> int:
        if 0 <= row < self.height and 0 <= col < self.width:
            return self.physical_row(row) * self.width + col
        raise IndexError("Cell out of bounds")

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def get_tile(self, row: int, col: int) -> int:
        """Return the tile code at logical ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """

        return int(self.tiles[self._index(row, col)])

    def set_tile(self, row: int, col: int, value: int) -> None:
        """Store ``value`` at logical ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """

        self.tiles[self._index(row, col)] = np.uint8(value)

    def is_empty(self, row: int, col: int) -> bool:
        return self.get_tile(row, col) == EMPTY

    # ------------------------------------------------------------------
    # Falling mask
    # ------------------------------------------------------------------
    def is_falling(self, row: int, col: int) -> bool:
        """Return ``True`` if the tile at ``(row, col)`` is airborne.

        The bottom row rests on the floor and is never falling.
        """

        if row <= 0 or row >= self.height:
            return False
        return bool(self.falling[row - 1, col])

    def set_falling(self, row: int, col: int, flag: bool) -> None:
        if not 1 <= row < self.height:
            raise IndexError("Falling mask covers rows 1..height-1 only")
        self.falling[row - 1, col] = flag

    def is_above_falling(self, row: int, col: int) -> bool:
        """Return ``True`` if the tile directly above ``(row, col)`` is falling."""

        if row >= self.height - 1:
            return False
        return bool(self.falling[row, col])

    def falling_count(self) -> int:
        """Count the set entries of the falling mask by scanning it."""

        return int(np.count_nonzero(self.falling))

    def clear_falling(self) -> None:
        self.falling[:] = False

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------
    def row_tiles(self, row: int) -> Grid:
        """Return a copy of logical ``row``."""

        start = self._index(row, 0)
        return self.tiles[start:start + self.width].copy()

    def row_is_full(self, row: int) -> bool:
        return bool(np.all(self.row_tiles(row) != EMPTY))

    def row_is_empty(self, row: int) -> bool:
        return bool(np.all(self.row_tiles(row) == EMPTY))

    def lowest_open_row(self) -> int:
        """Return the lowest logical row with at least one empty cell.

        ``height`` is returned when every row is full.
        """

        for row in range(self.height):
            if not self.row_is_full(row):
                return row
        return self.height

    def roll_incoming(self, rng: random.Random, colors: int) -> None:
        """Fill the incoming row with random codes from ``1..colors``."""

        for col in range(self.width):
            self.incoming[col] = rng.randint(1, colors)

    def advance_row(self) -> bool:
        """Push the incoming row in as the new logical row ``0``.

        The pointer moves back by one so every existing row gains one logical
        index without any tile being copied.  The physical row that wraps
        around to become the new bottom is the current top row; if it still
        holds a tile the board is topped out and nothing changes.

        Returns:
            ``False`` if the top row is occupied, ``True`` otherwise.
        """

        if not self.row_is_empty(self.height - 1):
            return False
        self.bottom_row = (self.bottom_row - 1) % self.height
        start = self.bottom_row * self.width
        self.tiles[start:start + self.width] = self.incoming
        return True

    # ------------------------------------------------------------------
    # Bulk helpers
    # ------------------------------------------------------------------
    def grid(self) -> Grid:
        """Return a ``(height, width)`` copy in logical order, row 0 first."""

        rows = np.roll(self.tiles.reshape(self.height, self.width), -self.bottom_row, axis=0)
        return rows.copy()

    def load(self, rows: Sequence[Sequence[int]]) -> None:
        """Replace the tiles with ``rows`` given bottom row first.

        Missing rows are left empty.  This helper exists for tests and tools
        that need to craft specific positions; the falling mask is cleared.
        """

        if len(rows) > self.height:
            raise ValueError("Too many rows")
        self.tiles[:] = EMPTY
        for row, values in enumerate(rows):
            if len(values) != self.width:
                raise ValueError("Row width mismatch")
            for col, value in enumerate(values):
                self.set_tile(row, col, value)
        self.clear_falling()
