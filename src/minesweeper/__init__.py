"""
Minesweeper game module.

Provides the board model, the game session state machine, the guided
play demo and the collaborators used by the terminal front end.
"""
from .cell import Cell, CellState
from .config import (
    BoardConfig,
    Difficulty,
    GameSettings,
    EASY,
    MEDIUM,
    HARD,
    PRESETS,
)
from .board import Board, MinePlacementError
from .scheduler import Clock, RealtimeDriver, ScheduledTask, TaskGroup
from .interfaces import (
    BestTimeStore,
    DemoView,
    GameResult,
    GameView,
    HighlightKind,
    MemoryBestTimeStore,
    NullSoundPlayer,
    SoundEvent,
    SoundPlayer,
)
from .session import GameSession, GameStatus
from .guided_play import (
    DEMO_REVEAL_PATTERN,
    DEMO_SCRIPT,
    FIXED_MINES,
    CaptionPosition,
    DemoAction,
    DemoStatus,
    DemoStep,
    GuidedPlay,
)
from .controller import GameController, Mode
from .storage import JsonStorage, format_time

__all__ = [
    "Cell",
    "CellState",
    "BoardConfig",
    "Difficulty",
    "GameSettings",
    "EASY",
    "MEDIUM",
    "HARD",
    "PRESETS",
    "Board",
    "MinePlacementError",
    "Clock",
    "RealtimeDriver",
    "ScheduledTask",
    "TaskGroup",
    "BestTimeStore",
    "DemoView",
    "GameResult",
    "GameView",
    "HighlightKind",
    "MemoryBestTimeStore",
    "NullSoundPlayer",
    "SoundEvent",
    "SoundPlayer",
    "GameSession",
    "GameStatus",
    "DEMO_REVEAL_PATTERN",
    "DEMO_SCRIPT",
    "FIXED_MINES",
    "CaptionPosition",
    "DemoAction",
    "DemoStatus",
    "DemoStep",
    "GuidedPlay",
    "GameController",
    "Mode",
    "JsonStorage",
    "format_time",
]
