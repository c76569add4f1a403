from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from minigame.messaging.types import (
    ErrorCode,
    ErrorMessage,
    HideSignal,
    KeyMessage,
    NotifySignal,
    ShowSignal,
    SleepSignal,
    SubmitMessage,
    WakeSignal,
    parse_client_message,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from minigame.messaging.protocol import ConnectionProtocol
    from minigame.messaging.types import HostSignalMessage
    from minigame.session.controller import SessionController
    from minigame.session.focus import FocusRestorer

logger = logging.getLogger(__name__)


class SignalRouter:
    """
    Routes host signals and overlay input to the session controller.

    Owns the snooze window: while sleeping, show signals are dropped before
    any focus capture happens. Every other signal is honoured while sleeping.
    """

    def __init__(
        self,
        controller: SessionController,
        focus: FocusRestorer,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._controller = controller
        self._focus = focus
        self._clock = clock
        self._sleep_until: float | None = None

    @property
    def sleeping(self) -> bool:
        return self._sleep_until is not None and self._clock() < self._sleep_until

    @property
    def sleep_remaining_seconds(self) -> float:
        if not self.sleeping or self._sleep_until is None:
            return 0.0
        return self._sleep_until - self._clock()

    async def dispatch(self, signal: HostSignalMessage) -> bool:
        """Apply one host signal. Returns False when the signal was ignored."""
        if isinstance(signal, ShowSignal):
            if self.sleeping:
                logger.info("show ignored while sleeping (%.0fs left)", self.sleep_remaining_seconds)
                return False
            if self._controller.active_game_id is None:
                await self._focus.capture()
            await self._controller.on_show()
        elif isinstance(signal, HideSignal):
            self._controller.on_hide()
        elif isinstance(signal, NotifySignal):
            self._controller.notify_task_done()
        elif isinstance(signal, SleepSignal):
            self._sleep_until = self._clock() + signal.minutes * 60
            logger.info("sleeping for %d minutes", signal.minutes)
        elif isinstance(signal, WakeSignal):
            self._sleep_until = None
            logger.info("woken up")
        return True

    async def handle_message(self, connection: ConnectionProtocol, raw_message: dict[str, Any]) -> None:
        try:
            message = parse_client_message(raw_message)
        except (ValidationError, KeyError, TypeError, ValueError) as e:
            logger.warning("invalid message from %s: %s", connection.connection_id, e)
            await connection.send_message(
                ErrorMessage(code=ErrorCode.INVALID_MESSAGE, message=str(e)).model_dump(mode="json"),
            )
            return

        if isinstance(message, (KeyMessage, SubmitMessage)):
            self._controller.handle_input(message.to_event())
            return

        if not await self.dispatch(message):
            await connection.send_message(
                ErrorMessage(
                    code=ErrorCode.SIGNAL_IGNORED,
                    message=f"{message.signal.value} ignored while sleeping",
                ).model_dump(mode="json"),
            )
