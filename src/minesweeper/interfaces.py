"""
Interfaces the game core calls into.

Presentation, audio and persistence are collaborators. The base view
classes do nothing, so an implementation overrides only what it shows.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Dict, Optional

from .cell import Cell
from .config import Difficulty

if TYPE_CHECKING:
    from .guided_play import DemoStep
    from .session import GameSession


# ============================================================================
# Event Payloads
# ============================================================================

class SoundEvent(Enum):
    """Sounds the core asks for."""

    REVEAL = auto()
    FLAG = auto()
    WIN = auto()
    LOSS = auto()


class HighlightKind(Enum):
    """Emphasis the guided demo puts on a cell."""

    TARGET = auto()
    NUMBER = auto()
    FLAG = auto()


@dataclass(frozen=True)
class GameResult:
    """Announcement sent once a game has been won or lost."""

    won: bool
    elapsed_seconds: int
    is_new_record: bool
    difficulty: Difficulty
    is_demo: bool = False


# ============================================================================
# Presentation
# ============================================================================

class GameView:
    """Receives board and game level updates."""

    def render_board(self, session: "GameSession") -> None:
        """Draw the whole board."""

    def update_cell(self, row: int, col: int, cell: Cell) -> None:
        """Redraw one cell. `cell` is a copy."""

    def update_mine_counter(self, remaining: int) -> None:
        """Show mines minus flags; may be negative."""

    def update_timer(self, elapsed_seconds: int) -> None:
        """Show the elapsed time."""

    def show_game_over(self, result: GameResult) -> None:
        """Show the win/loss announcement."""

    def show_pause_overlay(self) -> None:
        pass

    def hide_pause_overlay(self) -> None:
        pass

    def show_main_menu(self) -> None:
        pass


class DemoView:
    """Receives guided play updates."""

    def show_caption(self, step_index: int, step: "DemoStep") -> None:
        """Point at the step's cell and show its caption."""

    def clear_highlights(self) -> None:
        pass

    def highlight_cell(self, row: int, col: int, kind: HighlightKind) -> None:
        pass

    def on_demo_paused(self) -> None:
        pass

    def on_demo_resumed(self) -> None:
        pass

    def on_demo_finished(self) -> None:
        """Script ran out; the final board stays on screen."""

    def on_demo_stopped(self) -> None:
        """Demo cancelled; the caller returns to the menu."""


# ============================================================================
# Audio
# ============================================================================

class SoundPlayer(ABC):
    """Fire-and-forget sound output."""

    @abstractmethod
    def play(self, event: SoundEvent) -> None:
        """Play the sound for an event."""
        pass


class NullSoundPlayer(SoundPlayer):
    """Plays nothing."""

    def play(self, event: SoundEvent) -> None:
        pass


# ============================================================================
# Persistence
# ============================================================================

class BestTimeStore(ABC):
    """Source of best times per difficulty."""

    @abstractmethod
    def get_best_time(self, difficulty: Difficulty) -> Optional[int]:
        """Best time in seconds, or None if never won."""
        pass

    @abstractmethod
    def save_best_time_if_better(
        self, difficulty: Difficulty, seconds: int
    ) -> bool:
        """
        Record a time if it beats the stored one.

        Returns:
            True if the time is a new record.
        """
        pass


class MemoryBestTimeStore(BestTimeStore):
    """Best times kept in a dict for the lifetime of the process."""

    def __init__(self) -> None:
        self._times: Dict[Difficulty, int] = {}

    def get_best_time(self, difficulty: Difficulty) -> Optional[int]:
        return self._times.get(difficulty)

    def save_best_time_if_better(
        self, difficulty: Difficulty, seconds: int
    ) -> bool:
        current = self._times.get(difficulty)
        if current is None or seconds < current:
            self._times[difficulty] = seconds
            return True
        return False
