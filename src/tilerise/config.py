"""Tunable parameters for a game session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


# Dimensions of the standard playfield.
HEIGHT = 20
WIDTH = 10

# Ticks needed for a tile to drop one row.
FALL_TIME = 10
# Ticks for the swap animation to complete.
SWAP_TIME = 8

INITIAL_NORMA = 100


@dataclass(frozen=True)
class GameConfig:
    """Settings fixed for the lifetime of a :class:`~tilerise.GameState`."""

    height: int = HEIGHT
    width: int = WIDTH
    fall_time: int = FALL_TIME
    swap_time: int = SWAP_TIME
    initial_norma: int = INITIAL_NORMA
    # Raise instead of self-healing when the falling mask goes out of sync.
    strict_falls: bool = False
    seed: Optional[int] = None

    def validate(self) -> "GameConfig":
        """Return ``self`` after checking the values are usable.

        Raises:
            ValueError: If the board is too small to hold a match or a timing
                value is not positive.
        """

        if self.height < 3 or self.width < 3:
            raise ValueError("Board must be at least 3x3")
        if self.fall_time < 1:
            raise ValueError("fall_time must be positive")
        if self.swap_time < 1:
            raise ValueError("swap_time must be positive")
        return self


DEFAULT_CONFIG = GameConfig()
