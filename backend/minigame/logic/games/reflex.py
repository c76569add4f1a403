"""
Reflex timing game.

The player presses Space to arm the round, waits for the go signal that
arrives after a random delay, then presses Space again as fast as possible.
Pressing during the wait is a false start: the round is voided without a
latency sample.

    idle / result / too_early --Space--> waiting --delay--> ready --Space--> result
                                         waiting --Space--> too_early
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from minigame.logic.enums import GameId, ReflexPhase
from minigame.logic.games.base import GameModule
from minigame.logic.input import SPACE_KEY, KeyPress
from minigame.logic.results import ReflexResult
from minigame.logic.utils import mean, round_half_up

if TYPE_CHECKING:
    from minigame.logic.input import InputEvent

logger = structlog.get_logger()

_ZONE = "reflex-zone"
_TEXT = "reflex-text"
_HINT = "reflex-hint"
_TIME = "reflex-time"
_BEST = "reflex-best"
_AVG = "reflex-avg"

_ZONE_CLASSES = {phase: phase.value.replace("_", "-") for phase in ReflexPhase}


class ReflexGame(GameModule):
    game_id = GameId.REFLEX
    label = "Reaction"

    def _reset(self) -> None:
        self._phase = ReflexPhase.IDLE
        self._samples: list[int] = []
        self._best_ms: int | None = None
        self._false_starts = 0
        self._ready_at: float | None = None
        self._delay_timer: int | None = None

    def _on_start(self) -> None:
        self._set_zone(ReflexPhase.IDLE)
        self._display.set_text(_TEXT, "Press Space to start")
        self._display.set_text(_HINT, "Press Space as fast as you can!")
        self._display.set_text(_TIME, "")
        self._display.set_text(_BEST, "Best: --")
        self._display.set_text(_AVG, "Avg: --")

    @property
    def phase(self) -> ReflexPhase:
        return self._phase

    @property
    def samples(self) -> tuple[int, ...]:
        return tuple(self._samples)

    @property
    def best_ms(self) -> int | None:
        return self._best_ms

    @property
    def average_ms(self) -> float:
        return mean(self._samples)

    @property
    def false_starts(self) -> int:
        return self._false_starts

    def handle_input(self, event: InputEvent) -> None:
        if isinstance(event, KeyPress) and event.key == SPACE_KEY:
            self.trigger()

    def trigger(self) -> None:
        """The single player action: arm, react, or jump the gun depending on phase."""
        if not self._active:
            return
        if self._phase is ReflexPhase.WAITING:
            self._too_early()
        elif self._phase is ReflexPhase.READY:
            self._record_latency()
        else:
            self._start_waiting()

    def _start_waiting(self) -> None:
        self._phase = ReflexPhase.WAITING
        self._ready_at = None
        self._set_zone(ReflexPhase.WAITING)
        self._display.set_text(_TEXT, "Wait for green...")
        self._display.set_text(_HINT, "")
        self._display.set_text(_TIME, "")

        low = self._settings.reflex_min_delay_seconds
        high = self._settings.reflex_max_delay_seconds
        delay = low + self._rng.random() * (high - low)
        self._delay_timer = self._timers.schedule(delay, self._go_ready)

    def _go_ready(self) -> None:
        self._delay_timer = None
        self._phase = ReflexPhase.READY
        self._ready_at = self._scheduler.now()
        self._set_zone(ReflexPhase.READY)
        self._display.set_text(_TEXT, "SPACE!")

    def _too_early(self) -> None:
        self._timers.cancel(self._delay_timer)
        self._delay_timer = None
        self._phase = ReflexPhase.TOO_EARLY
        self._false_starts += 1
        self._set_zone(ReflexPhase.TOO_EARLY)
        self._display.set_text(_TEXT, "Too early!")
        self._display.set_text(_HINT, "Press Space to retry")

    def _record_latency(self) -> None:
        ready_at = self._ready_at if self._ready_at is not None else self._scheduler.now()
        latency_ms = max(0, round_half_up((self._scheduler.now() - ready_at) * 1000))
        self._samples.append(latency_ms)
        if self._best_ms is None or latency_ms < self._best_ms:
            self._best_ms = latency_ms
        self._phase = ReflexPhase.RESULT
        self._ready_at = None

        self._set_zone(ReflexPhase.RESULT)
        self._display.set_text(_TEXT, "")
        self._display.set_text(_HINT, "Press Space for next round")
        self._display.set_text(_TIME, f"{latency_ms}ms")
        self._display.set_text(_BEST, f"Best: {self._best_ms}ms")
        self._display.set_text(_AVG, f"Avg: {round_half_up(self.average_ms)}ms")
        logger.debug("reflex sample", latency_ms=latency_ms, attempts=len(self._samples))

    def _set_zone(self, phase: ReflexPhase) -> None:
        for other, class_name in _ZONE_CLASSES.items():
            self._display.toggle_class(_ZONE, class_name, enabled=other is phase)

    def _result(self) -> ReflexResult:
        return ReflexResult(
            best_latency_ms=self._best_ms or 0,
            avg_latency_ms=round_half_up(self.average_ms),
            attempts=len(self._samples),
            false_starts=self._false_starts,
        )
