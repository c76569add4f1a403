from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter

from minigame.logic.enums import GameId, HostSignal
from minigame.logic.games.snake import SnakeBoard
from minigame.logic.input import InputEvent, KeyPress, TextSubmit

# Longest snooze accepted from a host: one day.
MAX_SLEEP_MINUTES = 24 * 60


class ClientMessageType(StrEnum):
    KEY = "key"
    SUBMIT = "submit"
    SIGNAL = "signal"


class ServerMessageType(StrEnum):
    SHOW_GAME = "show_game"
    SHOW_IDLE = "show_idle"
    SET_TEXT = "set_text"
    TOGGLE_CLASS = "toggle_class"
    DRAW_BOARD = "draw_board"
    ERROR = "error"


class ErrorCode(StrEnum):
    INVALID_MESSAGE = "invalid_message"
    SIGNAL_IGNORED = "signal_ignored"


# Host signals. They arrive either as a POST body ({"signal": "show"}) or as a
# websocket message carrying type="signal" as well.


class ShowSignal(BaseModel):
    type: Literal[ClientMessageType.SIGNAL] = ClientMessageType.SIGNAL
    signal: Literal[HostSignal.SHOW] = HostSignal.SHOW


class HideSignal(BaseModel):
    type: Literal[ClientMessageType.SIGNAL] = ClientMessageType.SIGNAL
    signal: Literal[HostSignal.HIDE] = HostSignal.HIDE


class NotifySignal(BaseModel):
    type: Literal[ClientMessageType.SIGNAL] = ClientMessageType.SIGNAL
    signal: Literal[HostSignal.NOTIFY] = HostSignal.NOTIFY


class SleepSignal(BaseModel):
    type: Literal[ClientMessageType.SIGNAL] = ClientMessageType.SIGNAL
    signal: Literal[HostSignal.SLEEP] = HostSignal.SLEEP
    minutes: int = Field(ge=1, le=MAX_SLEEP_MINUTES)


class WakeSignal(BaseModel):
    type: Literal[ClientMessageType.SIGNAL] = ClientMessageType.SIGNAL
    signal: Literal[HostSignal.WAKE] = HostSignal.WAKE


HostSignalMessage = Annotated[
    ShowSignal | HideSignal | NotifySignal | SleepSignal | WakeSignal,
    Field(discriminator="signal"),
]

_host_signal_adapter = TypeAdapter(HostSignalMessage)


def parse_host_signal(data: dict[str, Any]) -> HostSignalMessage:
    return _host_signal_adapter.validate_python(data)


# Player input from the overlay front end.


class KeyMessage(BaseModel):
    type: Literal[ClientMessageType.KEY] = ClientMessageType.KEY
    key: str = Field(min_length=1, max_length=32)

    def to_event(self) -> InputEvent:
        return KeyPress(key=self.key)


class SubmitMessage(BaseModel):
    type: Literal[ClientMessageType.SUBMIT] = ClientMessageType.SUBMIT
    text: str = Field(max_length=200)

    def to_event(self) -> InputEvent:
        return TextSubmit(text=self.text)


InputMessage = Annotated[KeyMessage | SubmitMessage, Field(discriminator="type")]
ClientMessage = KeyMessage | SubmitMessage | HostSignalMessage

_input_adapter = TypeAdapter(InputMessage)


def parse_client_message(data: dict[str, Any]) -> ClientMessage:
    """
    Parse a websocket message from the overlay.

    Signal messages use a two-level discriminator (type then signal), so they
    are routed to the host signal adapter before validation.
    """
    if data.get("type") == ClientMessageType.SIGNAL:
        return parse_host_signal(data)
    return _input_adapter.validate_python(data)


# Display commands pushed to the overlay.


class ShowGameMessage(BaseModel):
    type: Literal[ServerMessageType.SHOW_GAME] = ServerMessageType.SHOW_GAME
    game_id: GameId
    label: str
    summary: str


class ShowIdleMessage(BaseModel):
    type: Literal[ServerMessageType.SHOW_IDLE] = ServerMessageType.SHOW_IDLE


class SetTextMessage(BaseModel):
    type: Literal[ServerMessageType.SET_TEXT] = ServerMessageType.SET_TEXT
    element: str
    text: str


class ToggleClassMessage(BaseModel):
    type: Literal[ServerMessageType.TOGGLE_CLASS] = ServerMessageType.TOGGLE_CLASS
    element: str
    class_name: str
    enabled: bool


class DrawBoardMessage(BaseModel):
    type: Literal[ServerMessageType.DRAW_BOARD] = ServerMessageType.DRAW_BOARD
    element: str
    board: SnakeBoard


class ErrorMessage(BaseModel):
    type: Literal[ServerMessageType.ERROR] = ServerMessageType.ERROR
    code: ErrorCode
    message: str


DisplayMessage = ShowGameMessage | ShowIdleMessage | SetTextMessage | ToggleClassMessage | DrawBoardMessage
