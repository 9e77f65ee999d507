"""Rising-stack match-three puzzle engine."""

from .board import Board, EMPTY
from .config import GameConfig
from .events import ScoreEvent, ScoreKind
from .game_state import GameState
from .gym_env import TileRiseGymEnv
from .gravity import Descent, FallStateError, check_falls, descend
from .matches import Match, Orientation, find_matches
from .scoring import match_score, match_value
from .swap import SwapState, can_swap
from .utils import render_ascii, render_grid

__all__ = [
    "Board",
    "EMPTY",
    "GameConfig",
    "GameState",
    "TileRiseGymEnv",
    "ScoreEvent",
    "ScoreKind",
    "Descent",
    "FallStateError",
    "check_falls",
    "descend",
    "Match",
    "Orientation",
    "find_matches",
    "match_score",
    "match_value",
    "SwapState",
    "can_swap",
    "render_ascii",
    "render_grid",
]
