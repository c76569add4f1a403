"""Overlay server configuration via environment variables."""

import json
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

from shared.logging import DEFAULT_LOG_RETENTION


def parse_origins(value: str | list[str]) -> list[str]:
    """Accept a list, a JSON array string or a comma-separated string. Empty input is rejected."""
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.startswith("["):
            try:
                value = json.loads(stripped)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON array: {e}") from e
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise ValueError("JSON value must be an array of strings")
        else:
            value = [origin.strip() for origin in stripped.split(",") if origin.strip()]
    if not value:
        raise ValueError("origin list must not be empty")
    return value


class ServerSettings(BaseSettings):
    model_config = {"env_prefix": "MINIGAME_"}

    stats_file: str = Field(default=str(Path("~/.minigame/stats.json")), min_length=1)
    log_dir: str | None = "backend/logs"
    log_retention: int = Field(default=DEFAULT_LOG_RETENTION, ge=1)
    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:1420"]
    restore_focus: bool = False
    own_bundle_id: str | None = None
    host: str = "127.0.0.1"
    port: int = Field(default=8765, ge=1, le=65535)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_origins(v)
