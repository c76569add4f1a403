"""Typed domain exceptions for the minigame engine.

Nothing here is fatal to the process: every exception is caught at the
boundary that can recover from it (the game module for player input, the
statistics aggregator for persisted data).
"""


class MinigameError(Exception):
    """Base exception for minigame domain errors."""


class InvalidInputError(MinigameError):
    """Player input cannot be interpreted (non-numeric answer, empty word).

    Raised by input parsers and caught inside the game module, which rejects
    the submission without mutating state or counting an attempt.
    """


class StatsFormatError(MinigameError):
    """Persisted statistics blob cannot be parsed or has the wrong shape."""


class UnsupportedSettingsError(MinigameError):
    """Game settings contain values the engine cannot run with."""
