"""
Pytest configuration and shared fixtures.
"""
import random
import pytest
import sys
from pathlib import Path
from typing import Any, List, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import (
    Board,
    BoardConfig,
    Cell,
    Clock,
    DemoView,
    Difficulty,
    GameController,
    GameSession,
    GameView,
    MemoryBestTimeStore,
    SoundPlayer,
)


# ============================================================================
# Recording Collaborators
# ============================================================================

class RecordingView(GameView, DemoView):
    """Records every callback as (time_ms, name, args)."""

    def __init__(self, clock: Clock) -> None:
        self.clock = clock
        self.events: List[Tuple[int, str, Tuple[Any, ...]]] = []

    def _record(self, name: str, *args: Any) -> None:
        self.events.append((self.clock.now_ms, name, args))

    def named(self, name: str) -> List[Tuple[int, str, Tuple[Any, ...]]]:
        return [event for event in self.events if event[1] == name]

    def render_board(self, session):
        self._record("render_board")

    def update_cell(self, row, col, cell):
        self._record("update_cell", row, col, cell)

    def update_mine_counter(self, remaining):
        self._record("update_mine_counter", remaining)

    def update_timer(self, elapsed_seconds):
        self._record("update_timer", elapsed_seconds)

    def show_game_over(self, result):
        self._record("show_game_over", result)

    def show_pause_overlay(self):
        self._record("show_pause_overlay")

    def hide_pause_overlay(self):
        self._record("hide_pause_overlay")

    def show_main_menu(self):
        self._record("show_main_menu")

    def show_caption(self, step_index, step):
        self._record("show_caption", step_index, step)

    def clear_highlights(self):
        self._record("clear_highlights")

    def highlight_cell(self, row, col, kind):
        self._record("highlight_cell", row, col, kind)

    def on_demo_paused(self):
        self._record("on_demo_paused")

    def on_demo_resumed(self):
        self._record("on_demo_resumed")

    def on_demo_finished(self):
        self._record("on_demo_finished")

    def on_demo_stopped(self):
        self._record("on_demo_stopped")


class RecordingSoundPlayer(SoundPlayer):
    """Remembers every sound requested."""

    def __init__(self) -> None:
        self.played = []

    def play(self, event) -> None:
        self.played.append(event)


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board()


@pytest.fixture
def small_board() -> Board:
    """Create a small 3x3 board with 1 mine for testing."""
    return Board(BoardConfig(3, 3, 1))


@pytest.fixture
def empty_board() -> Board:
    """Create a board with no mines for cascade testing."""
    return Board(BoardConfig(5, 5, 0))


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def clock() -> Clock:
    """Virtual clock starting at t=0."""
    return Clock()


@pytest.fixture
def view(clock: Clock) -> RecordingView:
    return RecordingView(clock)


@pytest.fixture
def sound() -> RecordingSoundPlayer:
    return RecordingSoundPlayer()


@pytest.fixture
def store() -> MemoryBestTimeStore:
    return MemoryBestTimeStore()


@pytest.fixture
def session(
    clock: Clock,
    view: RecordingView,
    sound: RecordingSoundPlayer,
    store: MemoryBestTimeStore,
) -> GameSession:
    """Easy game with seeded mine placement."""
    game = GameSession(
        clock, view=view, sound=sound, store=store, rng=random.Random(1234)
    )
    game.initialize(Difficulty.EASY)
    return game


@pytest.fixture
def controller(
    clock: Clock,
    view: RecordingView,
    sound: RecordingSoundPlayer,
    store: MemoryBestTimeStore,
) -> GameController:
    return GameController(
        clock,
        view=view,
        demo_view=view,
        sound=sound,
        store=store,
        rng=random.Random(99),
    )


# ============================================================================
# Layouts
# ============================================================================

# Ten mines packed into the top-left corner of an easy board; revealing
# (8, 8) flood fills every safe cell.
CORNER_MINES = [
    (0, 0), (0, 1), (0, 2), (0, 3), (0, 4),
    (1, 0), (1, 1), (1, 2), (1, 3), (1, 4),
]


@pytest.fixture
def corner_mines() -> List[Tuple[int, int]]:
    return list(CORNER_MINES)
