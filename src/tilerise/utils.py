"""Rendering helpers shared by the front-ends."""

from __future__ import annotations

from typing import List

from .game_state import GameState


TILE_CHARS = ".RGBPYC"


def render_grid(state: GameState, *, include_incoming: bool = False) -> List[List[int]]:
    """Return the tile codes as nested lists ordered top row first.

    Renderers draw from the top of the screen down, which is the reverse of
    the logical row order used by the simulation.  With
    ``include_incoming`` the incoming row is appended below the bottom row.
    """

    grid = [[int(v) for v in row] for row in state.snapshot()[::-1]]
    if include_incoming:
        grid.append(state.incoming)
    return grid


def render_ascii(state: GameState, *, include_incoming: bool = True) -> str:
    """Return a text picture of the board with falling tiles in lower case."""

    lines: List[str] = []
    for row in range(state.height - 1, -1, -1):
        chars = []
        for col in range(state.width):
            char = TILE_CHARS[state.tile(row, col) % len(TILE_CHARS)]
            if state.is_falling(row, col):
                char = char.lower()
            chars.append(char)
        lines.append("".join(chars))
    if include_incoming:
        lines.append("-" * state.width)
        lines.append("".join(TILE_CHARS[v % len(TILE_CHARS)].lower() for v in state.incoming))
    return "\n".join(lines)
