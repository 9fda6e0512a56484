"""
Configuration for Minesweeper games.

Difficulty presets, board configuration validation, user settings
and the timing constants shared by the game and the guided demo.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


# ============================================================================
# Timing Constants (milliseconds)
# ============================================================================

TICK_INTERVAL_MS = 1000
GAME_OVER_DELAY_MS = 1500
READING_DELAY_MS = 2500


# ============================================================================
# Difficulty
# ============================================================================

class Difficulty(Enum):
    """The three fixed board presets."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        rows: Number of rows.
        cols: Number of columns.
        mines: Total mines to place.
    """

    rows: int = 9
    cols: int = 9
    mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.rows < 1 or self.cols < 1:
            raise ValueError("Board dimensions must be positive")
        if self.mines < 0:
            raise ValueError("Number of mines cannot be negative")
        max_mines = self.total_cells - 1
        if self.mines > max_mines:
            raise ValueError(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        """Number of cells on the board."""
        return self.rows * self.cols


# Preset difficulty levels
EASY = BoardConfig(9, 9, 10)
MEDIUM = BoardConfig(16, 16, 40)
HARD = BoardConfig(16, 30, 99)

PRESETS: Dict[Difficulty, BoardConfig] = {
    Difficulty.EASY: EASY,
    Difficulty.MEDIUM: MEDIUM,
    Difficulty.HARD: HARD,
}


# ============================================================================
# User Settings
# ============================================================================

@dataclass
class GameSettings:
    """Persisted user preferences."""

    theme: str = "classic"
    difficulty: Difficulty = Difficulty.EASY
    sound_enabled: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Flatten settings into a JSON friendly dict."""
        return {
            "theme": self.theme,
            "difficulty": self.difficulty.value,
            "soundEnabled": self.sound_enabled,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameSettings":
        """
        Build settings from a stored dict, falling back to defaults.

        Unknown keys are ignored and an unknown difficulty falls back to easy.
        """
        defaults = cls()
        try:
            difficulty = Difficulty(data.get("difficulty", defaults.difficulty.value))
        except ValueError:
            difficulty = defaults.difficulty
        return cls(
            theme=str(data.get("theme", defaults.theme)),
            difficulty=difficulty,
            sound_enabled=bool(data.get("soundEnabled", defaults.sound_enabled)),
        )
