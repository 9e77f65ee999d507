"""Gymnasium-compatible wrapper around :class:`~tilerise.GameState`.

Each action either does nothing (``0``) or requests a swap; the environment
then runs a fixed number of ticks so the swap has time to resolve.

Observation is a flat ``float32`` vector:
  - tile codes scaled to ``[0, 1]`` (height x width)
  - falling mask (height x width, bottom row always 0)
  - incoming row scaled to ``[0, 1]`` (width)

Action space is ``Discrete(1 + height * (width - 1))``.  Action ``k >= 1``
swaps the pair whose left cell is row ``(k - 1) // (width - 1)``, column
``(k - 1) % (width - 1)``.  Swaps the game would reject are legal actions
that simply have no effect; ``info['action_mask']`` marks the ones that would
be accepted right now.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Optional, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .config import DEFAULT_CONFIG, GameConfig
from .game_state import GameState
from .scoring import MAX_COLORS
from .swap import can_swap
from .utils import render_ascii


class TileRiseGymEnv(gym.Env):
    metadata = {
        "render_modes": ["ansi"],
        "render_fps": 60,
    }

    def __init__(
        self,
        *,
        config: GameConfig = DEFAULT_CONFIG,
        ticks_per_step: Optional[int] = None,
        death_penalty: float = 0.0,
        max_steps: Optional[int] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.config = config.validate()
        self.ticks_per_step = ticks_per_step or config.swap_time + 1
        self.death_penalty = death_penalty
        self.render_mode = render_mode
        self._pairs = config.width - 1
        self.action_space = spaces.Discrete(1 + config.height * self._pairs)
        cells = config.height * config.width
        self._obs_size = 2 * cells + config.width
        self.observation_space = spaces.Box(
            low=0.0, high=1.0, shape=(self._obs_size,), dtype=np.float32
        )
        self._state: Optional[GameState] = None
        self._steps = 0
        self._max_steps = max_steps

    @property
    def state(self) -> GameState:
        if self._state is None:
            self._state = GameState(self.config)
        return self._state

    # ----------------------- Env API -----------------------
    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        config = self.config if seed is None else replace(self.config, seed=seed)
        self._state = GameState(config)
        self._steps = 0
        return self._observe(), self._info()

    def step(self, action: int):
        state = self.state
        if state.dead:
            return self._observe(), 0.0, True, False, self._info()

        if action != 0:
            row, col = self.decode_action(action)
            state.request_swap(row, col)

        score_before = state.score
        for _ in range(self.ticks_per_step):
            state.tick()
            if state.dead:
                break
        reward = float(state.score - score_before)
        terminated = state.dead
        if terminated:
            reward += self.death_penalty

        self._steps += 1
        truncated = self._max_steps is not None and self._steps >= self._max_steps
        return self._observe(), reward, terminated, truncated, self._info()

    def render(self):
        return render_ascii(self.state)

    def close(self):
        return None

    # -------------------- Helpers -------------------------
    def decode_action(self, action: int) -> Tuple[int, int]:
        """Return the ``(row, col)`` swap target of a non-zero ``action``."""

        if not 1 <= action < self.action_space.n:
            raise ValueError(f"Action {action} does not name a swap")
        index = action - 1
        return index // self._pairs, index % self._pairs

    def encode_action(self, row: int, col: int) -> int:
        return 1 + row * self._pairs + col

    def action_mask(self) -> np.ndarray:
        state = self.state
        mask = np.zeros((self.action_space.n,), dtype=bool)
        mask[0] = True
        if state.dead or state.swapping:
            return mask
        for row in range(state.height):
            for col in range(self._pairs):
                if can_swap(state.board, row, col):
                    mask[self.encode_action(row, col)] = True
        return mask

    def _observe(self) -> np.ndarray:
        state = self.state
        tiles = state.snapshot().astype(np.float32).reshape(-1) / MAX_COLORS
        falling = np.zeros((state.height, state.width), dtype=np.float32)
        falling[1:] = state.board.falling
        incoming = np.array(state.incoming, dtype=np.float32) / MAX_COLORS
        return np.concatenate([tiles, falling.reshape(-1), incoming], dtype=np.float32)

    def _info(self) -> Dict:
        state = self.state
        return {
            "action_mask": self.action_mask(),
            "score": state.score,
            "level": state.level,
            "combo": state.combo,
        }
