"""
Grid snake.

Two clocks drive the game. The frame loop runs at the display cadence and
only renders; the logic tick advances the snake once more than
snake_tick_seconds have passed since the previous tick, so movement speed does
not depend on the frame rate. Direction changes are buffered and applied at
the next tick, so two quick turns cannot fold the head back into the neck.

A collision ends the run, not the session: the board resets after a short
pause and the session best carries over.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict

from minigame.logic.enums import Direction, GameId
from minigame.logic.games.base import GameModule
from minigame.logic.input import KeyPress
from minigame.logic.results import SnakeResult

if TYPE_CHECKING:
    from minigame.logic.input import InputEvent

logger = structlog.get_logger()

Cell = tuple[int, int]

_BOARD = "snake-board"
_SCORE = "snake-score"
_HIGH = "snake-high"
_OVERLAY = "snake-overlay"

_KEY_DIRECTIONS: dict[str, Direction] = {
    "arrowup": Direction.UP,
    "arrowdown": Direction.DOWN,
    "arrowleft": Direction.LEFT,
    "arrowright": Direction.RIGHT,
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
}


class SnakeBoard(BaseModel):
    """Immutable snapshot of the logic state, independent of rendering."""

    model_config = ConfigDict(frozen=True)

    cols: int
    rows: int
    cells: tuple[Cell, ...]  # head first
    food: Cell | None
    direction: Direction
    score: int
    best_score: int
    dead: bool


class SnakeGame(GameModule):
    game_id = GameId.SNAKE
    label = "Snake"

    def _reset(self) -> None:
        self._best_score = 0
        self._frame_timer: int | None = None
        self._restart_timer: int | None = None
        self._reset_board()

    def _on_start(self) -> None:
        self._last_tick = self._scheduler.now()
        self._display.toggle_class(_OVERLAY, "visible", enabled=False)
        self._update_hud()
        self._request_frame()

    def _reset_board(self) -> None:
        mid_x = self._settings.snake_cols // 2
        mid_y = self._settings.snake_rows // 2
        self._cells: list[Cell] = [(mid_x - i, mid_y) for i in range(self._settings.snake_initial_length)]
        self._direction = Direction.RIGHT
        self._pending_direction = Direction.RIGHT
        self._score = 0
        self._dead = False
        self._food: Cell | None = None
        self._last_tick = self._scheduler.now()
        self._place_food()

    @property
    def board(self) -> SnakeBoard:
        return SnakeBoard(
            cols=self._settings.snake_cols,
            rows=self._settings.snake_rows,
            cells=tuple(self._cells),
            food=self._food,
            direction=self._direction,
            score=self._score,
            best_score=self._best_score,
            dead=self._dead,
        )

    @property
    def score(self) -> int:
        return self._score

    @property
    def best_score(self) -> int:
        return self._best_score

    @property
    def dead(self) -> bool:
        return self._dead

    def handle_input(self, event: InputEvent) -> None:
        if isinstance(event, KeyPress):
            direction = _KEY_DIRECTIONS.get(event.key.lower())
            if direction is not None:
                self.request_direction(direction)

    def request_direction(self, direction: Direction) -> bool:
        """Buffer a heading change for the next tick. Exact reversals are rejected."""
        if not self._active or direction.is_opposite(self._direction):
            return False
        self._pending_direction = direction
        return True

    def advance(self, now: float) -> bool:
        """Run one logic tick once more than a tick interval has elapsed. Returns True if it ticked."""
        if now - self._last_tick <= self._settings.snake_tick_seconds:
            return False
        self._last_tick = now
        self.tick()
        return True

    def tick(self) -> None:
        """Move the snake one cell along the pending heading."""
        if not self._active or self._dead:
            return
        self._direction = self._pending_direction
        head_x, head_y = self._cells[0]
        new_head = (head_x + self._direction.dx, head_y + self._direction.dy)

        if not self._in_bounds(new_head) or new_head in self._cells:
            self._die()
            return

        self._cells.insert(0, new_head)
        if new_head == self._food:
            self._score += 1
            self._place_food()
        else:
            self._cells.pop()
        self._update_hud()

    def _in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self._settings.snake_cols and 0 <= y < self._settings.snake_rows

    def _place_food(self) -> None:
        occupied = set(self._cells)
        if len(occupied) >= self._settings.snake_cols * self._settings.snake_rows:
            self._food = None
            return
        while True:
            cell = (
                self._rng.randrange(self._settings.snake_cols),
                self._rng.randrange(self._settings.snake_rows),
            )
            if cell not in occupied:
                self._food = cell
                return

    def _die(self) -> None:
        self._dead = True
        self._best_score = max(self._best_score, self._score)
        self._update_hud()
        self._display.toggle_class(_OVERLAY, "visible", enabled=True)
        logger.debug("snake run ended", score=self._score, best_score=self._best_score)
        self._restart_timer = self._timers.schedule(self._settings.snake_restart_delay_seconds, self._restart)

    def _restart(self) -> None:
        self._restart_timer = None
        self._display.toggle_class(_OVERLAY, "visible", enabled=False)
        self._reset_board()
        self._update_hud()

    def _request_frame(self) -> None:
        self._frame_timer = self._timers.schedule(self._settings.frame_interval_seconds, self._on_frame)

    def _on_frame(self) -> None:
        self._frame_timer = None
        self.advance(self._scheduler.now())
        self._display.draw_board(_BOARD, self.board)
        self._request_frame()

    def _update_hud(self) -> None:
        self._display.set_text(_SCORE, f"Score: {self._score}")
        self._display.set_text(_HIGH, f"Best: {self._best_score}")

    def _result(self) -> SnakeResult:
        return SnakeResult(score=self._score, best_score=max(self._best_score, self._score))
