"""
Mental arithmetic drill.

Every challenge has an exact integer answer: subtraction never goes below
zero and division is built backwards from quotient and divisor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict

from minigame.logic.enums import GameId, Operator
from minigame.logic.exceptions import InvalidInputError
from minigame.logic.games.base import GameModule
from minigame.logic.input import TextSubmit, parse_answer
from minigame.logic.results import ArithmeticResult

if TYPE_CHECKING:
    import random

    from minigame.logic.input import InputEvent
    from minigame.logic.settings import GameSettings

logger = structlog.get_logger()

_PROBLEM = "arithmetic-problem"
_INPUT = "arithmetic-input"
_FEEDBACK = "arithmetic-feedback"
_STREAK = "arithmetic-streak"
_CORRECT = "arithmetic-correct"
_BEST_STREAK = "arithmetic-best-streak"


class Challenge(BaseModel):
    """One displayed problem with its stored answer."""

    model_config = ConfigDict(frozen=True)

    left: int
    operator: Operator
    right: int
    answer: int

    @property
    def text(self) -> str:
        return f"{self.left} {self.operator.symbol} {self.right}"


def generate_challenge(rng: random.Random, settings: GameSettings) -> Challenge:
    """Build a random challenge whose answer is an exact non-negative integer."""
    operator = rng.choice(list(Operator))
    if operator is Operator.ADD:
        left = rng.randint(settings.sum_operand_min, settings.sum_operand_max)
        right = rng.randint(settings.sum_operand_min, settings.sum_operand_max)
    elif operator is Operator.SUBTRACT:
        left = rng.randint(settings.sum_operand_min, settings.sum_operand_max)
        right = rng.randint(settings.sum_operand_min, left)
    elif operator is Operator.MULTIPLY:
        left = rng.randint(settings.factor_min, settings.factor_max)
        right = rng.randint(settings.factor_min, settings.factor_max)
    else:
        quotient = rng.randint(settings.quotient_min, settings.quotient_max)
        right = rng.randint(settings.divisor_min, settings.divisor_max)
        left = quotient * right
    return Challenge(left=left, operator=operator, right=right, answer=operator.apply(left, right))


class ArithmeticGame(GameModule):
    game_id = GameId.ARITHMETIC
    label = "Math"

    def _reset(self) -> None:
        self._correct = 0
        self._total = 0
        self._streak = 0
        self._best_streak = 0
        self._challenge: Challenge | None = None
        self._feedback = ""
        self._feedback_timer: int | None = None

    def _on_start(self) -> None:
        self._show_feedback("", css=None)
        self._update_counters()
        self.next_challenge()

    @property
    def challenge(self) -> Challenge | None:
        return self._challenge

    @property
    def correct(self) -> int:
        return self._correct

    @property
    def total(self) -> int:
        return self._total

    @property
    def streak(self) -> int:
        return self._streak

    @property
    def best_streak(self) -> int:
        return self._best_streak

    @property
    def feedback(self) -> str:
        return self._feedback

    def handle_input(self, event: InputEvent) -> None:
        if isinstance(event, TextSubmit):
            self.submit(event.text)

    def next_challenge(self) -> Challenge:
        self._challenge = generate_challenge(self._rng, self._settings)
        self._display.set_text(_PROBLEM, self._challenge.text)
        self._display.set_text(_INPUT, "")
        return self._challenge

    def submit(self, text: str) -> bool:
        """
        Grade an answer and advance to the next challenge.

        Returns True when the answer was graded. Returns False, with no state
        change, when the session is not running or the text is not an integer.
        """
        if not self._active or self._challenge is None:
            return False
        try:
            value = parse_answer(text)
        except InvalidInputError as e:
            logger.debug("answer rejected", reason=str(e))
            return False

        self._total += 1
        expected = self._challenge.answer
        if value == expected:
            self._correct += 1
            self._streak += 1
            self._best_streak = max(self._best_streak, self._streak)
            self._show_feedback("Correct!", css="correct")
        else:
            self._streak = 0
            self._show_feedback(f"Wrong: {expected}", css="incorrect")
        self._update_counters()

        self._timers.cancel(self._feedback_timer)
        self._feedback_timer = self._timers.schedule(self._settings.feedback_seconds, self._clear_feedback)
        self.next_challenge()
        return True

    def _clear_feedback(self) -> None:
        self._feedback_timer = None
        self._show_feedback("", css=None)

    def _show_feedback(self, text: str, *, css: str | None) -> None:
        self._feedback = text
        self._display.set_text(_FEEDBACK, text)
        self._display.toggle_class(_FEEDBACK, "correct", enabled=css == "correct")
        self._display.toggle_class(_FEEDBACK, "incorrect", enabled=css == "incorrect")

    def _update_counters(self) -> None:
        self._display.set_text(_STREAK, f"Streak: {self._streak}")
        self._display.set_text(_CORRECT, f"{self._correct}/{self._total}")
        self._display.set_text(_BEST_STREAK, f"Best: {self._best_streak}")

    def _result(self) -> ArithmeticResult:
        return ArithmeticResult(correct=self._correct, total=self._total, best_streak=self._best_streak)
