"""
Session result snapshots returned by GameModule.stop().

One frozen model per game, discriminated by game_id so results can be
validated straight from JSON.
"""

from typing import Annotated, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from minigame.logic.enums import GameId

_COUNT = Field(default=0, ge=0)


class ReflexResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    game_id: Literal[GameId.REFLEX] = GameId.REFLEX
    best_latency_ms: int = _COUNT
    avg_latency_ms: int = _COUNT
    attempts: int = _COUNT
    false_starts: int = _COUNT  # premature presses, never part of attempts


class ArithmeticResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    game_id: Literal[GameId.ARITHMETIC] = GameId.ARITHMETIC
    correct: int = _COUNT
    total: int = _COUNT
    best_streak: int = _COUNT

    @model_validator(mode="after")
    def _validate_counts(self) -> Self:
        if self.correct > self.total:
            raise ValueError(f"correct ({self.correct}) exceeds total ({self.total})")
        if self.best_streak > self.correct:
            raise ValueError(f"best_streak ({self.best_streak}) exceeds correct ({self.correct})")
        return self


class SnakeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    game_id: Literal[GameId.SNAKE] = GameId.SNAKE
    score: int = _COUNT  # score of the run in progress when the session stopped
    best_score: int = _COUNT  # best finished or current run within the session


class TypingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    game_id: Literal[GameId.TYPING] = GameId.TYPING
    words_per_minute: int = _COUNT
    accuracy_percent: int = Field(default=100, ge=0, le=100)


SessionResult = Annotated[
    ReflexResult | ArithmeticResult | SnakeResult | TypingResult,
    Field(discriminator="game_id"),
]

session_result_adapter: TypeAdapter[SessionResult] = TypeAdapter(SessionResult)
