"""Abstract display surface consumed by the session engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from minigame.logic.enums import GameId
    from minigame.logic.games.snake import SnakeBoard


class DisplaySurface(ABC):
    """
    Write-only sink for everything the engine wants on screen.

    The engine never reads state back. Element names are stable identifiers
    shared with the front end (e.g. "reflex-text", "arithmetic-problem").
    """

    @abstractmethod
    def show_game(self, game_id: GameId, label: str, summary: str) -> None:
        """Show the container of game_id, hide all others, set the title and stats line."""
        ...

    @abstractmethod
    def show_idle(self) -> None:
        """Hide every game container and show the idle screen."""
        ...

    @abstractmethod
    def set_text(self, element: str, text: str) -> None: ...

    @abstractmethod
    def toggle_class(self, element: str, class_name: str, *, enabled: bool) -> None: ...

    @abstractmethod
    def draw_board(self, element: str, board: SnakeBoard) -> None:
        """Render one frame of a grid game."""
        ...


class NullDisplay(DisplaySurface):
    """Display that discards everything (headless runs)."""

    def show_game(self, game_id: GameId, label: str, summary: str) -> None:
        pass

    def show_idle(self) -> None:
        pass

    def set_text(self, element: str, text: str) -> None:
        pass

    def toggle_class(self, element: str, class_name: str, *, enabled: bool) -> None:
        pass

    def draw_board(self, element: str, board: SnakeBoard) -> None:
        pass
