"""
Player input events and the listener bus that game modules attach to.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import structlog
from pydantic import BaseModel, ConfigDict, Field

from minigame.logic.exceptions import InvalidInputError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = structlog.get_logger()

ESCAPE_KEY = "Escape"
SPACE_KEY = " "
ENTER_KEY = "Enter"


class KeyPress(BaseModel):
    """A single key press, named the way browsers report KeyboardEvent.key."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["key"] = "key"
    key: str = Field(min_length=1, max_length=32)


class TextSubmit(BaseModel):
    """Text committed from an input field (an arithmetic answer or a typed word)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["submit"] = "submit"
    text: str = Field(max_length=200)


InputEvent = KeyPress | TextSubmit


class InputBus:
    """Fan-out of input events to whichever listeners are currently attached."""

    def __init__(self) -> None:
        self._listeners: list[Callable[[InputEvent], None]] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def attach(self, listener: Callable[[InputEvent], None]) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def detach(self, listener: Callable[[InputEvent], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispatch(self, event: InputEvent) -> bool:
        """Deliver event to every attached listener. Returns False if nobody listened."""
        if not self._listeners:
            logger.debug("input dropped, no listeners", event=event.model_dump())
            return False
        for listener in list(self._listeners):
            listener(event)
        return True


def parse_answer(text: str) -> int:
    """Parse an arithmetic answer. Raises InvalidInputError for anything but an integer."""
    stripped = text.strip()
    if not stripped:
        raise InvalidInputError("empty answer")
    try:
        return int(stripped)
    except ValueError:
        raise InvalidInputError(f"not an integer: {stripped!r}") from None


def parse_word(text: str) -> str:
    """Normalize a typed token. Raises InvalidInputError when nothing was typed."""
    stripped = text.strip()
    if not stripped:
        raise InvalidInputError("empty word")
    return stripped
