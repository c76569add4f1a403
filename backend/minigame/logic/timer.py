"""
Cancellable timers for game modules.

Every scheduled state transition (reflex go-signal, arithmetic feedback
window, snake restart pause, render frames) is an entry in the owning module's
PendingTimers. stop() drains that set synchronously, so no stale callback can
touch a module after its session ended, even if the underlying asyncio task
was already past its sleep when cancelled.
"""

from __future__ import annotations

import asyncio
import itertools
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

import structlog

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import Callable


class TimerHandle(Protocol):
    def cancel(self) -> object: ...


class Scheduler(ABC):
    """Monotonic clock plus one-shot delayed callbacks."""

    @abstractmethod
    def now(self) -> float:
        """Monotonic time in seconds."""
        ...

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay seconds. The returned handle cancels it."""
        ...


class AsyncioScheduler(Scheduler):
    """Scheduler backed by asyncio tasks on the running event loop."""

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.create_task(self._run_timer(delay, callback))

    async def _run_timer(self, seconds: float, callback: Callable[[], None]) -> None:
        try:
            await asyncio.sleep(seconds)
            callback()
        except asyncio.CancelledError:
            pass
        except (RuntimeError, ValueError, KeyError, IndexError):  # fmt: skip
            logger.exception("timer callback failed")


class PendingTimers:
    """
    Per-module registry of outstanding timers.

    A callback only runs if its entry is still registered when it fires;
    cancel() and cancel_all() remove entries before cancelling the handle.
    """

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._handles: dict[int, TimerHandle] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, timer_id: object) -> bool:
        return timer_id in self._handles

    def schedule(self, delay: float, callback: Callable[[], None]) -> int:
        """Schedule callback after delay seconds and return its timer id."""
        timer_id = next(self._ids)

        def fire() -> None:
            if self._handles.pop(timer_id, None) is None:
                return
            callback()

        self._handles[timer_id] = self._scheduler.call_later(delay, fire)
        return timer_id

    def cancel(self, timer_id: int | None) -> None:
        """Cancel one timer. Unknown or already-fired ids are ignored."""
        if timer_id is None:
            return
        handle = self._handles.pop(timer_id, None)
        if handle is not None:
            handle.cancel()

    def cancel_all(self) -> None:
        """Cancel every outstanding timer."""
        handles = list(self._handles.values())
        self._handles.clear()
        for handle in handles:
            handle.cancel()
