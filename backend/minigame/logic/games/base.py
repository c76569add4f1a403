from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

import structlog

from minigame.logic.settings import GameSettings
from minigame.logic.timer import PendingTimers

if TYPE_CHECKING:
    from minigame.logic.display import DisplaySurface
    from minigame.logic.enums import GameId
    from minigame.logic.input import InputBus, InputEvent
    from minigame.logic.results import SessionResult
    from minigame.logic.timer import Scheduler

logger = structlog.get_logger()


class GameModule(ABC):
    """
    Lifecycle contract shared by every game.

    A module is constructed once and reused across sessions. start() resets
    all counters, produces the first challenge and attaches the input
    listener; stop() detaches it, cancels every pending timer and returns a
    result snapshot. Duplicate start() and stop() without start() are no-ops
    because several trigger sources can race.

    Subclasses implement _reset (state only, also run at construction),
    _on_start (first challenge and display), _result and handle_input, and
    must route every delayed transition through self._timers.
    """

    game_id: ClassVar[GameId]
    label: ClassVar[str]

    def __init__(
        self,
        scheduler: Scheduler,
        display: DisplaySurface,
        input_bus: InputBus,
        settings: GameSettings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._display = display
        self._input_bus = input_bus
        self._settings = settings or GameSettings()
        self._rng = rng or random.Random()  # noqa: S311
        self._timers = PendingTimers(scheduler)
        self._active = False
        self._reset()

    @property
    def active(self) -> bool:
        return self._active

    @property
    def pending_timer_count(self) -> int:
        return len(self._timers)

    def start(self) -> None:
        if self._active:
            logger.debug("start ignored, session already running", game_id=self.game_id)
            return
        self._timers.cancel_all()
        self._active = True
        self._reset()
        self._on_start()
        self._input_bus.attach(self.handle_input)
        logger.debug("game started", game_id=self.game_id)

    def stop(self) -> SessionResult | None:
        if not self._active:
            logger.debug("stop ignored, no session running", game_id=self.game_id)
            return None
        self._input_bus.detach(self.handle_input)
        self._timers.cancel_all()
        self._active = False
        result = self._result()
        logger.info("game stopped", game_id=self.game_id, result=result.model_dump(exclude={"game_id"}))
        return result

    @abstractmethod
    def handle_input(self, event: InputEvent) -> None:
        """React to one player input event while the session runs."""
        ...

    @abstractmethod
    def _reset(self) -> None:
        """Reset per-session state to session-zero. Must not touch the display."""
        ...

    def _on_start(self) -> None:  # noqa: B027
        """Present the first challenge once state has been reset."""

    @abstractmethod
    def _result(self) -> SessionResult:
        """Snapshot of the session at this moment."""
        ...
