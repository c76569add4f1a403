"""
Pure reduction rules folding one session result into a running aggregate.

Each reducer takes the current aggregate and a result of the matching game
and returns the new aggregate; inputs are never mutated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from minigame.logic.enums import GameId
from minigame.logic.utils import round_half_up
from minigame.stats.models import ArithmeticAggregate, ReflexAggregate, SnakeAggregate, TypingAggregate

if TYPE_CHECKING:
    from collections.abc import Callable

    from minigame.logic.results import ArithmeticResult, ReflexResult, SnakeResult, TypingResult


def fold_reflex(aggregate: ReflexAggregate, result: ReflexResult) -> ReflexAggregate:
    """
    Merge latency samples. Sessions without a sample only add false starts.

    attempts counts individual samples and avg_ms is weighted by them, rather
    than counting one attempt per session and averaging session means.
    """
    false_starts = aggregate.false_starts + result.false_starts
    if result.attempts == 0:
        return aggregate.model_copy(update={"false_starts": false_starts})

    attempts = aggregate.attempts + result.attempts
    best = result.best_latency_ms if aggregate.best_ms is None else min(aggregate.best_ms, result.best_latency_ms)
    if aggregate.avg_ms is None or aggregate.attempts == 0:
        avg = result.avg_latency_ms
    else:
        avg = round_half_up((aggregate.avg_ms * aggregate.attempts + result.avg_latency_ms * result.attempts) / attempts)
    return ReflexAggregate(attempts=attempts, best_ms=best, avg_ms=avg, false_starts=false_starts)


def fold_arithmetic(aggregate: ArithmeticAggregate, result: ArithmeticResult) -> ArithmeticAggregate:
    return ArithmeticAggregate(
        total_problems=aggregate.total_problems + result.total,
        correct=aggregate.correct + result.correct,
        best_streak=max(aggregate.best_streak, result.best_streak),
    )


def fold_snake(aggregate: SnakeAggregate, result: SnakeResult) -> SnakeAggregate:
    return SnakeAggregate(
        games_played=aggregate.games_played + 1,
        high_score=max(aggregate.high_score, result.best_score, result.score),
    )


def fold_typing(aggregate: TypingAggregate, result: TypingResult) -> TypingAggregate:
    total_tests = aggregate.total_tests + 1
    return TypingAggregate(
        total_tests=total_tests,
        best_wpm=max(aggregate.best_wpm, result.words_per_minute),
        avg_wpm=round_half_up((aggregate.avg_wpm * aggregate.total_tests + result.words_per_minute) / total_tests),
    )


REDUCERS: dict[GameId, Callable[[Any, Any], Any]] = {
    GameId.REFLEX: fold_reflex,
    GameId.ARITHMETIC: fold_arithmetic,
    GameId.SNAKE: fold_snake,
    GameId.TYPING: fold_typing,
}


def _dash(value: int | None) -> str:
    return "--" if value is None else str(value)


SUMMARIES: dict[GameId, Callable[[Any], str]] = {
    GameId.REFLEX: lambda s: f"Best: {_dash(s.best_ms)}ms | Avg: {_dash(s.avg_ms)}ms | Tries: {s.attempts}",
    GameId.ARITHMETIC: lambda s: f"Correct: {s.correct}/{s.total_problems} | Best streak: {s.best_streak}",
    GameId.SNAKE: lambda s: f"High score: {s.high_score} | Games: {s.games_played}",
    GameId.TYPING: lambda s: f"Best: {s.best_wpm} WPM | Avg: {s.avg_wpm} WPM | Tests: {s.total_tests}",
}
