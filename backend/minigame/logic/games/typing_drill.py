"""
Typing speed test over a short random sentence.

Each submitted token is graded against the word at the current position
(exact match only) and the position advances either way. Throughput uses the
conventional five-characters-per-word measure over correctly typed words,
each counted with its trailing space.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from minigame.logic.enums import GameId
from minigame.logic.exceptions import InvalidInputError
from minigame.logic.games.base import GameModule
from minigame.logic.input import ENTER_KEY, SPACE_KEY, KeyPress, TextSubmit, parse_word
from minigame.logic.results import TypingResult
from minigame.logic.utils import round_half_up
from minigame.logic.words import WORDS

if TYPE_CHECKING:
    import random
    from collections.abc import Sequence

    from minigame.logic.display import DisplaySurface
    from minigame.logic.input import InputBus, InputEvent
    from minigame.logic.settings import GameSettings
    from minigame.logic.timer import Scheduler

logger = structlog.get_logger()

CHARS_PER_WORD = 5
# Elapsed time below this is too short for a meaningful rate.
_MIN_WPM_MINUTES = 0.01

_WORDS = "typing-words"
_INPUT = "typing-input"
_WPM = "typing-wpm"
_ACCURACY = "typing-accuracy"


class TypingGame(GameModule):
    game_id = GameId.TYPING
    label = "Typing Test"

    def __init__(
        self,
        scheduler: Scheduler,
        display: DisplaySurface,
        input_bus: InputBus,
        settings: GameSettings | None = None,
        rng: random.Random | None = None,
        corpus: Sequence[str] = WORDS,
    ) -> None:
        self._corpus = tuple(corpus)
        super().__init__(scheduler, display, input_bus, settings, rng)

    def _reset(self) -> None:
        self._words: list[str] = []
        self._results: list[bool] = []
        self._position = 0
        self._correct_words = 0
        self._attempted = 0
        self._correct_chars = 0
        self._started_at: float | None = None
        self._finished_at: float | None = None
        self._done = False
        self._refresh_timer: int | None = None

    def _on_start(self) -> None:
        self.new_sentence()
        self._schedule_refresh()

    @property
    def words(self) -> tuple[str, ...]:
        return tuple(self._words)

    @property
    def position(self) -> int:
        return self._position

    @property
    def current_word(self) -> str | None:
        if self._position < len(self._words):
            return self._words[self._position]
        return None

    @property
    def correct_words(self) -> int:
        return self._correct_words

    @property
    def attempted(self) -> int:
        return self._attempted

    @property
    def correct_chars(self) -> int:
        return self._correct_chars

    @property
    def done(self) -> bool:
        return self._done

    def words_per_minute(self, now: float | None = None) -> float:
        """Live rate: first submission to completion, or to now while in progress."""
        if self._started_at is None or self._correct_chars == 0:
            return 0.0
        if self._finished_at is not None:
            end = self._finished_at
        else:
            end = now if now is not None else self._scheduler.now()
        minutes = (end - self._started_at) / 60
        if minutes < _MIN_WPM_MINUTES:
            return 0.0
        return (self._correct_chars / CHARS_PER_WORD) / minutes

    @property
    def accuracy_percent(self) -> float:
        if self._attempted == 0:
            return 100.0
        return self._correct_words / self._attempted * 100

    def handle_input(self, event: InputEvent) -> None:
        if isinstance(event, TextSubmit):
            self.submit_word(event.text)
        elif isinstance(event, KeyPress) and event.key in (SPACE_KEY, ENTER_KEY):
            self.advance()

    def new_sentence(self) -> None:
        """Draw a fresh sentence and reset the per-sentence counters."""
        count = self._rng.randint(self._settings.typing_min_words, self._settings.typing_max_words)
        self._words = self._rng.sample(self._corpus, min(count, len(self._corpus)))
        self._results = []
        self._position = 0
        self._correct_words = 0
        self._attempted = 0
        self._correct_chars = 0
        self._started_at = None
        self._finished_at = None
        self._done = False

        self._display.set_text(_INPUT, "")
        self._display.toggle_class(_INPUT, "disabled", enabled=False)
        self._display.set_text(_WPM, "0 WPM")
        self._display.set_text(_ACCURACY, "100%")
        self._render_words()

    def submit_word(self, text: str) -> bool:
        """Grade one typed token. Returns False, with no state change, if it was rejected."""
        if not self._active or self._done:
            return False
        try:
            typed = parse_word(text)
        except InvalidInputError:
            return False

        now = self._scheduler.now()
        if self._started_at is None:
            self._started_at = now

        expected = self._words[self._position]
        self._attempted += 1
        matched = typed == expected
        if matched:
            self._correct_words += 1
            self._correct_chars += len(expected) + 1
        self._results.append(matched)
        self._position += 1
        self._display.set_text(_INPUT, "")

        if self._position >= len(self._words):
            self._done = True
            self._finished_at = now
            self._display.toggle_class(_INPUT, "disabled", enabled=True)
            logger.debug(
                "sentence finished",
                wpm=round_half_up(self.words_per_minute()),
                accuracy=round_half_up(self.accuracy_percent),
            )
        else:
            self._update_live_stats()
        self._render_words()
        return True

    def advance(self) -> bool:
        """
        Move on to a new sentence from the done screen.

        The key that submitted the last word can arrive a second time as an
        advance request; anything inside the cooldown after completion is
        ignored so the result stays on screen.
        """
        if not self._active or not self._done or self._finished_at is None:
            return False
        if self._scheduler.now() - self._finished_at < self._settings.typing_done_cooldown_seconds:
            return False
        self.new_sentence()
        return True

    def _schedule_refresh(self) -> None:
        self._refresh_timer = self._timers.schedule(self._settings.typing_wpm_refresh_seconds, self._refresh)

    def _refresh(self) -> None:
        if not self._done:
            self._display.set_text(_WPM, f"{round_half_up(self.words_per_minute())} WPM")
        self._schedule_refresh()

    def _update_live_stats(self) -> None:
        self._display.set_text(_WPM, f"{round_half_up(self.words_per_minute())} WPM")
        self._display.set_text(_ACCURACY, f"{round_half_up(self.accuracy_percent)}%")

    def _render_words(self) -> None:
        if self._done:
            self._display.set_text(
                _WORDS,
                f"{round_half_up(self.words_per_minute())} WPM | "
                f"{round_half_up(self.accuracy_percent)}% accuracy | Space or Enter for next sentence",
            )
            return
        marked = []
        for index, word in enumerate(self._words):
            if index < len(self._results):
                marked.append(word if self._results[index] else f"~{word}~")
            elif index == self._position:
                marked.append(f"[{word}]")
            else:
                marked.append(word)
        self._display.set_text(_WORDS, " ".join(marked))

    def _result(self) -> TypingResult:
        return TypingResult(
            words_per_minute=round_half_up(self.words_per_minute()),
            accuracy_percent=round_half_up(self.accuracy_percent),
        )
