"""Choice of the next game to present."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from minigame.logic.enums import GameId


def next_game_id(
    last_game_id: GameId | None,
    game_ids: Sequence[GameId],
    rng: random.Random | None = None,
) -> GameId:
    """
    Pick uniformly among game_ids, excluding the game shown last.

    When excluding last_game_id leaves nothing (a single registered game),
    the full set is used instead so the overlay never ends up empty.
    """
    if not game_ids:
        raise ValueError("no games registered")
    choices = [game_id for game_id in game_ids if game_id != last_game_id] or list(game_ids)
    return (rng or random).choice(choices)
