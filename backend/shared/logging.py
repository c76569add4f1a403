"""Structured logging for the overlay server and its tools.

structlog renders through stdlib logging so third-party loggers (uvicorn,
httpx) end up in the same handlers. Environment variables:
- LOG_FORMAT: "json" for one JSON object per line, "console" or unset for
  human-readable output.
- LOG_LEVEL: "DEBUG", "INFO" (default), "WARNING", "ERROR", or "CRITICAL".
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
DEFAULT_LOG_RETENTION = 10

_LOG_FORMATS = ("json", "console", "")
_LOG_LEVELS = ("CRITICAL", "DEBUG", "ERROR", "INFO", "WARNING")
_QUIET_LOGGERS = ("httpx", "httpcore")


def _plain(value: object) -> object:
    return value.value if isinstance(value, Enum) else value


def _serialize_enums(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Replace Enum values (top level and one dict level down) with their .value."""
    for key, value in event_dict.items():
        if isinstance(value, dict):
            event_dict[key] = {k: _plain(v) for k, v in value.items()}
        else:
            event_dict[key] = _plain(value)
    return event_dict


def _is_test() -> bool:
    return "pytest" in sys.modules


def _env_choice(name: str, default: str, allowed: tuple[str, ...]) -> str:
    value = os.environ.get(name, default)
    value = value.upper() if name == "LOG_LEVEL" else value.lower()
    if value not in allowed:
        choices = ", ".join(repr(choice) for choice in allowed if choice)
        raise ValueError(f"Invalid {name}={value!r}. Must be one of {choices}, or unset.")
    return value


def configure_structlog(*, timestamps: bool = True) -> None:
    """Install the structlog pipeline that hands events to stdlib handlers.

    Exceptions are formatted by the handler formatter, not here, so each
    handler renders a traceback exactly once.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]
    if timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        _serialize_enums,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def _formatter(*, json_mode: bool, colors: bool) -> logging.Formatter:
    renderer: Any = structlog.processors.JSONRenderer() if json_mode else structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def prune_log_files(log_dir: Path, keep: int) -> list[Path]:
    """Delete all but the newest `keep` *.log files in log_dir and return what was removed.

    Log file names start with a sortable timestamp, so name order is age order.
    """
    if keep < 1:
        raise ValueError(f"keep must be >= 1, got {keep}")
    stale = sorted(log_dir.glob("*.log"), key=lambda path: path.name)[:-keep]
    removed = []
    for path in stale:
        try:
            path.unlink()
        except FileNotFoundError:
            continue
        removed.append(path)
    return removed


def _open_log_file(log_dir: Path, *, json_mode: bool) -> tuple[Path, logging.FileHandler]:
    log_dir.mkdir(parents=True, exist_ok=True)
    path = log_dir / f"{datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)}.log"
    handler = logging.FileHandler(path)
    handler.setFormatter(_formatter(json_mode=json_mode, colors=False))
    return path, handler


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | None = None,
    retention: int = DEFAULT_LOG_RETENTION,
) -> Path | None:
    """Route structlog to stdout and, when log_dir is given, to a new timestamped file.

    Older files in log_dir beyond `retention` are deleted. No file is opened
    while running under pytest. Returns the path of the new log file, if any.
    """
    json_mode = _env_choice("LOG_FORMAT", "", _LOG_FORMATS) == "json"
    if level is None:
        level = getattr(logging, _env_choice("LOG_LEVEL", "INFO", _LOG_LEVELS))

    configure_structlog()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    stdout = logging.StreamHandler(sys.stdout)
    stdout.setFormatter(_formatter(json_mode=json_mode, colors=sys.stdout.isatty()))
    root.addHandler(stdout)

    if log_dir is None or _is_test():
        return None

    dir_path = Path(log_dir)
    path, handler = _open_log_file(dir_path, json_mode=json_mode)
    root.addHandler(handler)
    prune_log_files(dir_path, retention)
    return path
