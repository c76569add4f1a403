"""Mapping from GameId to the module class that implements it."""

from __future__ import annotations

from typing import TYPE_CHECKING

from minigame.logic.enums import GameId
from minigame.logic.games.arithmetic import ArithmeticGame
from minigame.logic.games.reflex import ReflexGame
from minigame.logic.games.snake import SnakeGame
from minigame.logic.games.typing_drill import TypingGame

if TYPE_CHECKING:
    import random

    from minigame.logic.display import DisplaySurface
    from minigame.logic.games.base import GameModule
    from minigame.logic.input import InputBus
    from minigame.logic.settings import GameSettings
    from minigame.logic.timer import Scheduler

GAME_TYPES: dict[GameId, type[GameModule]] = {
    GameId.REFLEX: ReflexGame,
    GameId.ARITHMETIC: ArithmeticGame,
    GameId.SNAKE: SnakeGame,
    GameId.TYPING: TypingGame,
}


def build_games(
    scheduler: Scheduler,
    display: DisplaySurface,
    input_bus: InputBus,
    settings: GameSettings | None = None,
    rng: random.Random | None = None,
    enabled: list[GameId] | None = None,
) -> dict[GameId, GameModule]:
    """Construct one long-lived instance per enabled game (all games by default)."""
    game_ids = enabled if enabled is not None else list(GAME_TYPES)
    return {
        game_id: GAME_TYPES[game_id](scheduler, display, input_bus, settings=settings, rng=rng)
        for game_id in game_ids
    }
