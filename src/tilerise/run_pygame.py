"""Simple pygame front-end for the tile engine.

Click between two tiles to swap them.  ``P`` pauses, ``R`` starts a new game
and ``Esc`` quits.  The simulation advances exactly one tick per frame; this
module only reads the state, turns mouse clicks into swap requests and draws
floating score popups from the events each tick produces.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import math
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pygame

from .config import GameConfig
from .events import ScoreEvent
from .game_state import GameState

LOGGER = logging.getLogger(__name__)

# Size of a single board cell in pixels
CELL_SIZE = 32
# Top-left corner of the playfield on screen
BOARD_X = 50
BOARD_Y = 30
HUD_X = 460
HUD_Y = 96
# Frames per second to run the game loop at; one simulation tick per frame
FPS = 60

# Colours for each tile code; index 0 is the background
TILE_COLORS = [
    (0, 0, 0),
    (220, 50, 50),
    (60, 190, 80),
    (60, 110, 230),
    (160, 80, 200),
    (230, 200, 50),
    (60, 200, 210),
]
GRID_COLOR = (50, 50, 50)
TEXT_COLOR = (255, 255, 255)

POPUP_FADE = 0.015
POPUP_RISE = 1


def tile_to_screen(state: GameState, row: float, col: float) -> Tuple[float, float]:
    """Return the top-left pixel of logical ``(row, col)``.

    The whole stack is shifted up by the rise progress so new rows slide in
    smoothly from below.
    """

    x = BOARD_X + CELL_SIZE * col
    y = BOARD_Y + (state.height - row - state.progress - 1) * CELL_SIZE
    return x, y


def screen_to_tile(state: GameState, x: float, y: float) -> Tuple[int, int]:
    """Return ``(row, col)`` of the swap pair under the pixel ``(x, y)``.

    ``col`` is the left cell of the pair centred nearest to the cursor and is
    clamped so the pair stays on the board; it is ``-1`` outside the board.
    """

    tx = (x - BOARD_X) / CELL_SIZE
    ty = state.height - (y - BOARD_Y) / CELL_SIZE - state.progress - 1
    if tx < 0 or tx >= state.width:
        col = -1
    elif tx < 0.5:
        col = 0
    elif tx >= state.width - 0.5:
        col = state.width - 2
    else:
        col = math.floor(tx - 0.5)
    return math.ceil(ty), col


@dataclass
class ScorePopup:
    """Floating number that rises and fades after points are awarded."""

    text: str
    x: float
    y: float
    alpha: float = 1.0

    @classmethod
    def from_event(cls, state: GameState, event: ScoreEvent) -> "ScorePopup":
        x, y = tile_to_screen(state, event.row, event.col)
        return cls(str(event.amount), x + CELL_SIZE / 2, y + CELL_SIZE / 2)

    def update(self) -> bool:
        """Advance one frame and return ``False`` once fully faded."""

        self.alpha -= POPUP_FADE
        self.y -= POPUP_RISE
        return self.alpha > 0


def tile_offset(state: GameState, row: int, col: int) -> Tuple[float, float]:
    """Return the animation offset in pixels for the tile at ``(row, col)``."""

    dx = dy = 0.0
    if state.is_falling(row, col):
        dy += CELL_SIZE * state.fall_fraction
    if state.swapping and row == state.swap_row:
        angle = math.pi * state.swap_fraction
        half = CELL_SIZE / 2
        if col == state.swap_col:
            dx += half - half * math.cos(angle)
            dy -= half * math.sin(angle)
        elif col == state.swap_col + 1:
            dx += -half + half * math.cos(angle)
            dy += half * math.sin(angle)
    return dx, dy


def draw_board(screen: pygame.Surface, state: GameState) -> None:
    """Render the tiles, including falling and swapping animation."""

    board_rect = pygame.Rect(BOARD_X, BOARD_Y, state.width * CELL_SIZE, state.height * CELL_SIZE)
    previous_clip = screen.get_clip()
    screen.set_clip(board_rect)
    for row in range(state.height):
        for col in range(state.width):
            value = state.tile(row, col)
            if not value:
                continue
            x, y = tile_to_screen(state, row, col)
            dx, dy = tile_offset(state, row, col)
            rect = pygame.Rect(round(x + dx), round(y + dy), CELL_SIZE, CELL_SIZE)
            pygame.draw.rect(screen, TILE_COLORS[value], rect)
            pygame.draw.rect(screen, GRID_COLOR, rect, 1)
    # Incoming row peeks in from below, dimmed
    for col, value in enumerate(state.incoming):
        if not value:
            continue
        x, y = tile_to_screen(state, -1, col)
        rect = pygame.Rect(round(x), round(y), CELL_SIZE, CELL_SIZE)
        color = tuple(c // 3 for c in TILE_COLORS[value])
        pygame.draw.rect(screen, color, rect)
        pygame.draw.rect(screen, GRID_COLOR, rect, 1)
    screen.set_clip(previous_clip)
    pygame.draw.rect(screen, TEXT_COLOR, board_rect, 1)


def draw_selector(screen: pygame.Surface, state: GameState, pos: Tuple[int, int]) -> None:
    row, col = screen_to_tile(state, *pos)
    if col < 0 or not 0 <= row < state.height:
        return
    x, y = tile_to_screen(state, row, col)
    rect = pygame.Rect(round(x), round(y), CELL_SIZE * 2, CELL_SIZE)
    pygame.draw.rect(screen, TEXT_COLOR, rect, 2)


def draw_hud(screen: pygame.Surface, font: pygame.font.Font, state: GameState) -> None:
    lines = [
        f"Score: {state.score}",
        f"Level: {state.level}",
        f"(to next) {state.norma}",
        f"x{state.combo}",
    ]
    if state.dead:
        lines.append("GAME OVER - R to retry")
    for i, text in enumerate(lines):
        surface = font.render(text, True, TEXT_COLOR)
        screen.blit(surface, (HUD_X, HUD_Y + i * font.get_linesize()))


def draw_popups(screen: pygame.Surface, font: pygame.font.Font, popups: List[ScorePopup]) -> None:
    for popup in popups:
        surface = font.render(popup.text, True, TEXT_COLOR)
        surface.set_alpha(max(0, int(255 * popup.alpha)))
        rect = surface.get_rect(center=(popup.x, popup.y))
        screen.blit(surface, rect)


def update_popups(popups: List[ScorePopup]) -> List[ScorePopup]:
    return [popup for popup in popups if popup.update()]


class GameRunner:
    """Manage the game loop with start/pause/resume/stop controls."""

    def __init__(self, config: Optional[GameConfig] = None) -> None:
        self._config = config or GameConfig()
        self._running = False
        self._paused = False
        self._task: asyncio.Task | None = None
        self._screen: pygame.Surface | None = None
        self._state: GameState | None = None
        self._clock: pygame.time.Clock | None = None
        self._popups: List[ScorePopup] = []

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def state(self) -> GameState | None:
        return self._state

    def new_game(self) -> None:
        self._state = GameState(self._config)
        self._popups = []
        LOGGER.info("Game started")

    def handle_event(self, event: pygame.event.Event) -> None:
        """Process one pygame event."""

        if event.type == pygame.QUIT:
            self._running = False
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self._running = False
            elif event.key == pygame.K_p:
                if self._paused:
                    self.resume()
                else:
                    self.pause()
            elif event.key == pygame.K_r:
                self.new_game()
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self._state and not self._paused:
                row, col = screen_to_tile(self._state, *event.pos)
                self._state.request_swap(row, col)

    def step(self) -> None:
        """Advance the simulation one tick and collect its score popups."""

        if self._state is None or self._paused:
            return
        try:
            self._state.tick()
            for event in self._state.drain_events():
                self._popups.append(ScorePopup.from_event(self._state, event))
        except Exception:
            LOGGER.exception("Crash detected, resetting")
            self.new_game()
        self._popups = update_popups(self._popups)

    def _draw(self, font: pygame.font.Font) -> None:
        if not self._screen or not self._state:
            return
        self._screen.fill((0, 0, 0))
        draw_board(self._screen, self._state)
        if not self._paused and not self._state.dead:
            draw_selector(self._screen, self._state, pygame.mouse.get_pos())
        draw_popups(self._screen, font, self._popups)
        draw_hud(self._screen, font, self._state)
        pygame.display.set_caption(
            f"Tile Rise - {'Paused - ' if self._paused else ''}Score: {self._state.score}"
        )
        pygame.display.flip()

    async def _run_loop(self) -> None:
        # Ensure SDL/pygame binds to the visible canvas in the page when running on Web.
        os.environ.setdefault("SDL_HINT_EMSCRIPTEN_CANVAS_ELEMENT_ID", "#canvas")
        os.environ.setdefault("SDL_HINT_EMSCRIPTEN_KEYBOARD_ELEMENT", "#canvas")
        pygame.init()
        self._screen = pygame.display.set_mode((1024, 768))
        pygame.display.set_caption("Tile Rise")
        self._clock = pygame.time.Clock()
        font = pygame.font.Font(None, 32)

        self.new_game()
        self._running = True
        while self._running:
            if self._clock:
                self._clock.tick(FPS)
            for event in pygame.event.get():
                self.handle_event(event)
            self.step()
            self._draw(font)
            # Yield to the host event loop to keep the UI responsive
            await asyncio.sleep(0)

        pygame.quit()
        LOGGER.info("Game stopped")

    def start(self) -> None:
        if self._task and not self._task.done():
            LOGGER.info("Game already running")
            return
        self._paused = False
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop (plain Python); run synchronously
            asyncio.run(self._run_loop())
        else:
            self._task = loop.create_task(self._run_loop())

    def pause(self) -> None:
        if not self._running:
            LOGGER.info("Pause ignored: game not running")
            return
        self._paused = True
        LOGGER.info("Paused")

    def resume(self) -> None:
        if not self._running:
            LOGGER.info("Resume ignored: game not running")
            return
        self._paused = False
        LOGGER.info("Resumed")

    def stop(self) -> None:
        if not self._running:
            LOGGER.info("Stop ignored: game not running")
            return
        self._running = False


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--seed", type=int, default=None, help="Seed for the tile generator.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")
    GameRunner(GameConfig(seed=args.seed)).start()


if __name__ == "__main__":  # pragma: no cover - manual execution only
    main()
