"""
Returning keyboard focus to the application that was frontmost before the
overlay appeared.
"""

from __future__ import annotations

import asyncio
import sys
from abc import ABC, abstractmethod

import structlog

logger = structlog.get_logger()

_FRONTMOST_BUNDLE_SCRIPT = (
    'tell application "System Events" to get bundle identifier of first application process whose frontmost is true'
)
_OSASCRIPT_TIMEOUT_SECONDS = 2.0


class FocusRestorer(ABC):
    @abstractmethod
    async def capture(self) -> None:
        """Remember the currently focused application. Called before the overlay shows."""
        ...

    @abstractmethod
    def restore(self) -> None:
        """Hand focus back to the remembered application. Must not block."""
        ...


class NullFocusRestorer(FocusRestorer):
    async def capture(self) -> None:
        pass

    def restore(self) -> None:
        pass


class AppleScriptFocusRestorer(FocusRestorer):
    """
    macOS focus restoration through osascript.

    capture() asks System Events for the frontmost bundle identifier;
    restore() activates it again in a background task and forgets it, so a
    second hide does not steal focus back. Failures are logged
    and otherwise ignored: losing focus is an annoyance, not an error.
    """

    def __init__(self, own_bundle_id: str | None = None) -> None:
        self._own_bundle_id = own_bundle_id
        self._previous_bundle_id: str | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def previous_bundle_id(self) -> str | None:
        return self._previous_bundle_id

    @staticmethod
    def is_supported() -> bool:
        return sys.platform == "darwin"

    async def capture(self) -> None:
        try:
            output = await self._run_osascript(_FRONTMOST_BUNDLE_SCRIPT)
        except (OSError, TimeoutError) as e:
            logger.warning("could not capture frontmost app", error=str(e))
            return
        bundle_id = output.strip()
        if bundle_id and bundle_id != self._own_bundle_id:
            self._previous_bundle_id = bundle_id

    def restore(self) -> None:
        bundle_id, self._previous_bundle_id = self._previous_bundle_id, None
        if bundle_id is None:
            return
        task = asyncio.create_task(self._activate(bundle_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _activate(self, bundle_id: str) -> None:
        try:
            await self._run_osascript(f'tell application id "{bundle_id}" to activate')
        except (OSError, TimeoutError) as e:
            logger.warning("could not restore focus", bundle_id=bundle_id, error=str(e))

    async def _run_osascript(self, script: str) -> str:
        process = await asyncio.create_subprocess_exec(
            "osascript",
            "-e",
            script,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=_OSASCRIPT_TIMEOUT_SECONDS)
        except TimeoutError:
            process.kill()
            await process.wait()
            raise
        if process.returncode != 0:
            raise OSError(f"osascript exited with {process.returncode}")
        return stdout.decode("utf-8", errors="replace")
