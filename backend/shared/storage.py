"""Storage abstraction for the statistics blob.

The aggregator hands over a serialized JSON string and asks for it back on
startup; this module only moves opaque text to and from durable storage.
The file is written with owner-only permissions (0o600) inside an
owner-only directory (0o700).
"""

import asyncio
import contextlib
import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

_STATS_DIR_MODE = 0o700
_STATS_FILE_MODE = 0o600


class StatsStorage(Protocol):
    """Protocol for persisting the statistics blob."""

    async def load(self) -> str | None: ...

    async def save(self, content: str) -> None: ...


class LocalStatsStorage:
    """Keeps the statistics blob in a single JSON file on the local filesystem.

    Blocking file I/O runs in a worker thread so the event loop never stalls
    on disk. Writes are atomic via temp-file-then-rename.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser().resolve()

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> str | None:
        """Return the stored blob, or None when nothing was saved yet."""
        return await asyncio.to_thread(self._read)

    async def save(self, content: str) -> None:
        await asyncio.to_thread(self._write, content)

    def _read(self) -> str | None:
        try:
            return self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def _write(self, content: str) -> None:
        directory = self._path.parent
        directory.mkdir(mode=_STATS_DIR_MODE, parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=str(directory), suffix=".tmp", prefix=".stats_")
        fd_owned = True
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _STATS_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(self._path)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        logger.debug("saved stats", path=str(self._path))
