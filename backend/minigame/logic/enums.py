"""
String enum definitions for minigame concepts.
"""

from __future__ import annotations

from enum import Enum, StrEnum


class GameId(StrEnum):
    """Stable identifiers for the registered games."""

    REFLEX = "reflex"
    ARITHMETIC = "arithmetic"
    SNAKE = "snake"
    TYPING = "typing"


class ReflexPhase(StrEnum):
    """Phases of the reflex game state machine."""

    IDLE = "idle"
    WAITING = "waiting"
    READY = "ready"
    RESULT = "result"
    TOO_EARLY = "too_early"


class Operator(StrEnum):
    """Arithmetic operators used in drill challenges."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"

    @property
    def symbol(self) -> str:
        return _OPERATOR_SYMBOLS[self]

    def apply(self, left: int, right: int) -> int:
        """Evaluate the operator on integer operands (division is exact by construction)."""
        if self is Operator.ADD:
            return left + right
        if self is Operator.SUBTRACT:
            return left - right
        if self is Operator.MULTIPLY:
            return left * right
        return left // right


_OPERATOR_SYMBOLS: dict[Operator, str] = {
    Operator.ADD: "+",
    Operator.SUBTRACT: "−",
    Operator.MULTIPLY: "×",
    Operator.DIVIDE: "÷",
}


class Direction(Enum):
    """Grid headings as (dx, dy) unit vectors; y grows downwards."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def is_opposite(self, other: Direction) -> bool:
        return self.dx + other.dx == 0 and self.dy + other.dy == 0


class HostSignal(StrEnum):
    """Signals delivered by the host trigger channel."""

    SHOW = "show"
    HIDE = "hide"
    NOTIFY = "notify"
    SLEEP = "sleep"
    WAKE = "wake"
