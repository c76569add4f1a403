"""
Persisted per-game aggregates.

Aggregates are frozen; reducers in minigame.stats.reducers return new
instances. The serialized form is a JSON object keyed by GameId value.
"""

from pydantic import BaseModel, ConfigDict, Field

from minigame.logic.enums import GameId

_COUNT = Field(default=0, ge=0)


class _Aggregate(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class ReflexAggregate(_Aggregate):
    attempts: int = _COUNT
    best_ms: int | None = Field(default=None, ge=0)
    avg_ms: int | None = Field(default=None, ge=0)
    false_starts: int = _COUNT


class ArithmeticAggregate(_Aggregate):
    total_problems: int = _COUNT
    correct: int = _COUNT
    best_streak: int = _COUNT


class SnakeAggregate(_Aggregate):
    games_played: int = _COUNT
    high_score: int = _COUNT


class TypingAggregate(_Aggregate):
    total_tests: int = _COUNT
    best_wpm: int = _COUNT
    avg_wpm: int = _COUNT


GameAggregate = ReflexAggregate | ArithmeticAggregate | SnakeAggregate | TypingAggregate

AGGREGATE_TYPES: dict[GameId, type[_Aggregate]] = {
    GameId.REFLEX: ReflexAggregate,
    GameId.ARITHMETIC: ArithmeticAggregate,
    GameId.SNAKE: SnakeAggregate,
    GameId.TYPING: TypingAggregate,
}


def default_aggregates() -> dict[GameId, GameAggregate]:
    return {game_id: aggregate_type() for game_id, aggregate_type in AGGREGATE_TYPES.items()}  # type: ignore[misc]
