from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from minigame.logic.input import ESCAPE_KEY, KeyPress
from minigame.logic.selection import next_game_id

if TYPE_CHECKING:
    import random
    from collections.abc import Callable, Sequence

    from minigame.logic.display import DisplaySurface
    from minigame.logic.enums import GameId
    from minigame.logic.games.base import GameModule
    from minigame.logic.input import InputBus, InputEvent
    from minigame.logic.results import SessionResult
    from minigame.session.focus import FocusRestorer
    from minigame.stats.aggregator import StatisticsAggregator

logger = structlog.get_logger()

DONE_BANNER = "done-banner"
_VISIBLE = "visible"


@dataclass
class SessionContext:
    active_game_id: GameId | None = None
    last_game_id: GameId | None = None


class SessionController:
    """
    Ties overlay visibility to game sessions.

    Show and hide requests may arrive from several sources and in any number;
    the controller converges them: at most one game runs, each started game is
    stopped exactly once, and every hide returns the surface to idle and asks
    for focus restoration exactly once.
    """

    def __init__(
        self,
        games: dict[GameId, GameModule],
        stats: StatisticsAggregator,
        display: DisplaySurface,
        focus: FocusRestorer,
        input_bus: InputBus,
        rng: random.Random | None = None,
        select: Callable[[GameId | None, Sequence[GameId], random.Random | None], GameId] = next_game_id,
    ) -> None:
        self._games = games
        self._stats = stats
        self._display = display
        self._focus = focus
        self._input_bus = input_bus
        self._rng = rng
        self._select = select
        self._context = SessionContext()
        self._show_pending = False
        self._save_tasks: set[asyncio.Task[bool]] = set()

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def active_game_id(self) -> GameId | None:
        return self._context.active_game_id

    @property
    def last_game_id(self) -> GameId | None:
        return self._context.last_game_id

    @property
    def pending_saves(self) -> int:
        return len(self._save_tasks)

    def get_game(self, game_id: GameId) -> GameModule:
        return self._games[game_id]

    async def on_show(self) -> GameId | None:
        """Start a freshly selected game. Returns its id, or None when nothing started."""
        if self._context.active_game_id is not None or self._show_pending:
            logger.debug("show ignored", active_game_id=self._context.active_game_id)
            return None

        self._show_pending = True
        try:
            await self._stats.load()
        finally:
            abandoned = not self._show_pending
            self._show_pending = False
        if abandoned:
            logger.debug("show abandoned, hidden while loading stats")
            return None

        game_id = self._select(self._context.last_game_id, list(self._games), self._rng)
        module = self._games[game_id]
        self._context.active_game_id = game_id
        self._context.last_game_id = game_id

        self._display.toggle_class(DONE_BANNER, _VISIBLE, enabled=False)
        self._display.show_game(game_id, module.label, self._stats.summary(game_id))
        module.start()
        logger.info("session started", game_id=game_id)
        return game_id

    def on_hide(self) -> SessionResult | None:
        """Stop the active game, if any, and return the overlay to idle."""
        self._show_pending = False
        result = None
        game_id = self._context.active_game_id
        if game_id is not None:
            self._context.active_game_id = None
            result = self._games[game_id].stop()
            if result is not None:
                self._stats.record(game_id, result)
                self._schedule_save()
            logger.info("session ended", game_id=game_id)

        self._display.show_idle()
        self._focus.restore()
        return result

    def handle_input(self, event: InputEvent) -> None:
        if isinstance(event, KeyPress) and event.key == ESCAPE_KEY:
            self.on_hide()
            return
        self._input_bus.dispatch(event)

    def notify_task_done(self) -> None:
        """Tell the player the background task has finished."""
        self._display.toggle_class(DONE_BANNER, _VISIBLE, enabled=True)
        logger.info("task done notification", active_game_id=self._context.active_game_id)

    async def drain(self) -> None:
        """Wait for every outstanding stats save."""
        while self._save_tasks:
            await asyncio.gather(*self._save_tasks)

    def _schedule_save(self) -> None:
        task = asyncio.create_task(self._stats.save())
        self._save_tasks.add(task)
        task.add_done_callback(self._save_tasks.discard)
