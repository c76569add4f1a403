"""Centralized game settings - all timing constants and challenge ranges."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from minigame.logic.exceptions import UnsupportedSettingsError


class GameSettings(BaseModel):
    """
    Centralized configuration for every game module.

    All durations are in seconds. Defaults match the shipped gameplay.
    """

    model_config = ConfigDict(frozen=True)

    # --- Reflex ---
    reflex_min_delay_seconds: float = Field(default=1.5, gt=0)
    reflex_max_delay_seconds: float = Field(default=5.0, gt=0)

    # --- Arithmetic ---
    sum_operand_min: int = Field(default=1, ge=0)
    sum_operand_max: int = 50
    factor_min: int = Field(default=2, ge=1)
    factor_max: int = 12
    quotient_min: int = Field(default=1, ge=1)
    quotient_max: int = 12
    divisor_min: int = Field(default=2, ge=1)
    divisor_max: int = 12
    feedback_seconds: float = Field(default=0.8, gt=0)

    # --- Snake ---
    snake_cols: int = Field(default=24, ge=4)
    snake_rows: int = Field(default=13, ge=1)
    snake_initial_length: int = Field(default=3, ge=1)
    snake_tick_seconds: float = Field(default=0.125, gt=0)
    snake_restart_delay_seconds: float = Field(default=1.5, ge=0)

    # --- Typing ---
    typing_min_words: int = Field(default=5, ge=1)
    typing_max_words: int = Field(default=12, ge=1)
    typing_done_cooldown_seconds: float = Field(default=0.1, ge=0)
    typing_wpm_refresh_seconds: float = Field(default=0.5, gt=0)

    # --- Rendering cadence ---
    frame_interval_seconds: float = Field(default=1 / 60, gt=0)

    @model_validator(mode="after")
    def _validate_ranges(self) -> Self:
        pairs = (
            ("reflex delay", self.reflex_min_delay_seconds, self.reflex_max_delay_seconds),
            ("sum operand", self.sum_operand_min, self.sum_operand_max),
            ("factor", self.factor_min, self.factor_max),
            ("quotient", self.quotient_min, self.quotient_max),
            ("divisor", self.divisor_min, self.divisor_max),
            ("typing word count", self.typing_min_words, self.typing_max_words),
        )
        for name, low, high in pairs:
            if low > high:
                raise UnsupportedSettingsError(f"{name} range is empty: {low} > {high}")
        # the starting body is laid out leftwards from the centre column
        if self.snake_initial_length > self.snake_cols // 2 + 1:
            raise UnsupportedSettingsError(
                f"snake_initial_length {self.snake_initial_length} does not fit a {self.snake_cols}-column grid",
            )
        return self
