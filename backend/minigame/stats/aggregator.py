from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from minigame.logic.exceptions import StatsFormatError
from minigame.stats.models import AGGREGATE_TYPES, default_aggregates
from minigame.stats.reducers import REDUCERS, SUMMARIES

if TYPE_CHECKING:
    from minigame.logic.enums import GameId
    from minigame.logic.results import SessionResult
    from minigame.stats.models import GameAggregate
    from shared.storage import StatsStorage

logger = structlog.get_logger()


def parse_aggregates(raw: str) -> dict[GameId, GameAggregate]:
    """
    Parse a serialized blob into per-game aggregates.

    Unknown top-level keys are ignored. Missing or malformed game sections
    fall back to zero aggregates independently of each other. Raises
    StatsFormatError when the blob is not a JSON object at all, including
    blobs nested too deeply to decode.
    """
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise StatsFormatError("stats blob is not valid JSON") from exc
    if not isinstance(data, dict):
        raise StatsFormatError(f"expected JSON object at root, got {type(data).__name__}")

    aggregates = default_aggregates()
    for game_id, aggregate_type in AGGREGATE_TYPES.items():
        section = data.get(game_id.value)
        if section is None:
            continue
        try:
            aggregates[game_id] = aggregate_type.model_validate(section)  # type: ignore[assignment]
        except ValidationError:
            logger.warning("malformed stats section, using defaults", game_id=game_id)
    return aggregates


def serialize_aggregates(aggregates: dict[GameId, GameAggregate]) -> str:
    data: dict[str, Any] = {game_id.value: aggregate.model_dump(mode="json") for game_id, aggregate in aggregates.items()}
    return json.dumps(data, sort_keys=True)


class StatisticsAggregator:
    """
    Owner of the cumulative per-game statistics.

    The in-memory aggregate is authoritative: it is loaded from storage at most
    once per process (a failed load keeps the defaults for good), mutated only
    through record(), and written back best-effort by save().
    """

    def __init__(self, storage: StatsStorage) -> None:
        self._storage = storage
        self._aggregates = default_aggregates()
        self._loaded = False
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    def get(self, game_id: GameId) -> GameAggregate:
        return self._aggregates[game_id]

    def snapshot(self) -> dict[GameId, GameAggregate]:
        return dict(self._aggregates)

    async def load(self) -> None:
        """Load persisted aggregates on first call; later calls return immediately."""
        if self._loaded:
            return
        async with self._lock:
            if self._loaded:
                return
            try:
                raw = await self._storage.load()
                if raw is not None:
                    self._aggregates = parse_aggregates(raw)
            except StatsFormatError as e:
                logger.warning("stats blob unreadable, using defaults", error=str(e))
            except Exception:
                logger.exception("failed to load stats, using defaults")
            self._loaded = True

    def record(self, game_id: GameId, result: SessionResult) -> None:
        """Fold one finished session into the aggregate of game_id."""
        if result.game_id != game_id:
            logger.warning("result does not match game, ignored", game_id=game_id, result_game_id=result.game_id)
            return
        reducer = REDUCERS[game_id]
        self._aggregates[game_id] = reducer(self._aggregates[game_id], result)
        logger.info("session recorded", game_id=game_id, aggregate=self._aggregates[game_id].model_dump())

    async def save(self) -> bool:
        """Best-effort persist. Failures are logged and reported as False."""
        content = serialize_aggregates(self._aggregates)
        try:
            await self._storage.save(content)
        except Exception:
            logger.exception("failed to persist stats")
            return False
        return True

    def summary(self, game_id: GameId) -> str:
        return SUMMARIES[game_id](self._aggregates[game_id])
