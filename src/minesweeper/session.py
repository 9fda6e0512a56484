"""
Game session for Minesweeper.

Owns one board and enacts reveal, flag, pause and timer transitions,
with win/loss detection. Invalid actions are ignored rather than raised
so that the calling UI can forward every click as is.
"""
import copy
import logging
import random
from enum import Enum, auto
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .board import Board, Position
from .cell import Cell
from .config import (
    GAME_OVER_DELAY_MS,
    PRESETS,
    TICK_INTERVAL_MS,
    Difficulty,
)
from .interfaces import (
    BestTimeStore,
    GameResult,
    GameView,
    NullSoundPlayer,
    SoundEvent,
    SoundPlayer,
)
from .scheduler import Clock, ScheduledTask, TaskGroup

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GameStatus(Enum):
    """Lifecycle of a game. Pause is tracked separately."""

    NOT_STARTED = auto()
    PLAYING = auto()
    WON = auto()
    LOST = auto()


# ============================================================================
# Game Session
# ============================================================================

class GameSession:
    """
    One live Minesweeper game.

    Mines are placed on the first reveal or flag, around the acted-on
    cell. The timer only runs while the game has started, is not paused
    and is not over. All scheduled work (timer ticks, the delayed result
    announcement) belongs to the session's task group and is cancelled by
    dispose() or a new initialize().
    """

    def __init__(
        self,
        clock: Clock,
        view: Optional[GameView] = None,
        sound: Optional[SoundPlayer] = None,
        store: Optional[BestTimeStore] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.clock = clock
        self.view = view or GameView()
        self.sound = sound or NullSoundPlayer()
        self.store = store
        self.rng = rng or random.Random()

        self._tasks = TaskGroup(clock)
        self._tick_task: Optional[ScheduledTask] = None
        self._reset(Difficulty.EASY)

    def _reset(self, difficulty: Difficulty) -> None:
        self.difficulty = difficulty
        self.board = Board(PRESETS[difficulty])
        self.flags_placed = 0
        self.revealed_count = 0
        self.elapsed_seconds = 0
        self.is_paused = False
        self.is_first_action = True
        self.is_demo_game_over = False
        self._outcome: Optional[GameStatus] = None
        self._is_new_record = False

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def initialize(self, difficulty: Difficulty) -> None:
        """Start a fresh game; mines are placed on the first action."""
        self.dispose()
        self._reset(difficulty)
        logger.info(
            "New %s game (%dx%d, %d mines)",
            difficulty.value, self.board.rows, self.board.cols,
            self.board.total_mines,
        )
        self.view.render_board(self)
        self.view.update_mine_counter(self.remaining_mines)
        self.view.update_timer(self.elapsed_seconds)
        self.view.hide_pause_overlay()

    def dispose(self) -> None:
        """Cancel the timer and any pending announcement."""
        self._tasks.cancel_all()
        self._tick_task = None

    def load_layout(self, positions: Iterable[Position]) -> None:
        """
        Use a fixed mine layout instead of random placement.

        The first action still starts the timer but places no mines.
        """
        self.board.place_fixed_mines(positions)
        logger.debug("Loaded fixed layout with %d mines", self.board.total_mines)
        self.view.render_board(self)
        self.view.update_mine_counter(self.remaining_mines)

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def status(self) -> GameStatus:
        if self._outcome is not None:
            return self._outcome
        if self.is_first_action:
            return GameStatus.NOT_STARTED
        return GameStatus.PLAYING

    @property
    def is_game_over(self) -> bool:
        return self._outcome is not None

    @property
    def is_won(self) -> bool:
        return self._outcome == GameStatus.WON

    @property
    def is_lost(self) -> bool:
        return self._outcome == GameStatus.LOST

    @property
    def total_mines(self) -> int:
        return self.board.total_mines

    @property
    def remaining_mines(self) -> int:
        """Mines minus flags. Goes negative when over-flagged."""
        return self.board.total_mines - self.flags_placed

    @property
    def is_timer_running(self) -> bool:
        return self._tick_task is not None and self._tick_task.pending

    def cell_snapshot(self, row: int, col: int) -> Optional[Cell]:
        """Copy of the cell at a position, or None if invalid."""
        cell = self.board.get_cell(row, col)
        return copy.copy(cell) if cell is not None else None

    def get_observation(self) -> np.ndarray:
        """Numpy snapshot of the board (see Board.get_observation)."""
        return self.board.get_observation()

    # ========================================================================
    # Player Actions
    # ========================================================================

    def reveal(self, row: int, col: int) -> bool:
        """
        Reveal a cell.

        A mine loses the game; a cell with no adjacent mines flood fills
        its neighbors. The win check runs after the flood fill completes.

        Returns:
            True if the action was applied, False if it was ignored.
        """
        if not self._accepts_input(row, col):
            return False
        cell = self.board.get_cell(row, col)
        if cell.is_revealed or cell.is_flagged:
            return False

        self._consume_first_action(row, col)
        self._mark_revealed(row, col, cell)

        if cell.is_mine:
            logger.info("Mine hit at (%d, %d)", row, col)
            self._end_game(won=False)
            return True

        self.sound.play(SoundEvent.REVEAL)
        if cell.adjacent_mines == 0:
            self._flood_fill(row, col)

        if not self.is_game_over:
            self._check_win()
        return True

    def toggle_flag(self, row: int, col: int) -> bool:
        """
        Place or remove a flag. Flags are not capped by the mine count.

        Returns:
            True if the flag was toggled, False if the action was ignored.
        """
        if not self._accepts_input(row, col):
            return False
        cell = self.board.get_cell(row, col)
        if cell.is_revealed:
            return False

        self._consume_first_action(row, col)
        cell.toggle_flag()
        self.flags_placed += 1 if cell.is_flagged else -1

        self.view.update_cell(row, col, copy.copy(cell))
        self.view.update_mine_counter(self.remaining_mines)
        self.sound.play(SoundEvent.FLAG)
        return True

    def toggle_pause(self) -> bool:
        """
        Pause or resume. Ignored once the game is over.

        Returns:
            True if the pause state changed.
        """
        if self.is_game_over:
            return False

        self.is_paused = not self.is_paused
        if self.is_paused:
            self._stop_timer()
            self.view.show_pause_overlay()
        else:
            if not self.is_first_action:
                self._start_timer()
            self.view.hide_pause_overlay()
        logger.debug("Paused" if self.is_paused else "Resumed")
        return True

    def reveal_pattern(self, cells: Iterable[Tuple[int, int, int]]) -> int:
        """
        Reveal fixed cells showing forced numbers.

        Used by guided play so the demo always looks the same; it does not
        flood fill and does not check for a win.

        Args:
            cells: (row, col, displayed_number) triples.

        Returns:
            Number of cells revealed.
        """
        if self.is_game_over or self.is_paused:
            return 0
        cells = list(cells)
        if not cells:
            return 0

        revealed = 0
        for row, col, number in cells:
            cell = self.board.get_cell(row, col)
            if cell is None or cell.is_mine or not cell.is_hidden:
                continue
            self._consume_first_action(row, col)
            cell.adjacent_mines = number
            self._mark_revealed(row, col, cell)
            revealed += 1
        if revealed:
            self.sound.play(SoundEvent.REVEAL)
        return revealed

    def mark_demo_game_over(self) -> None:
        """Flag the ending as a demo ending so the UI offers a replay."""
        self.is_demo_game_over = True

    # ========================================================================
    # Reveal Internals
    # ========================================================================

    def _accepts_input(self, row: int, col: int) -> bool:
        if self.is_game_over or self.is_paused:
            return False
        return self.board.is_valid_position(row, col)

    def _consume_first_action(self, row: int, col: int) -> None:
        """On the first action place mines around (row, col) and start the timer."""
        if not self.is_first_action:
            return
        self.is_first_action = False
        if not self.board.mines_placed:
            self.board.place_mines(row, col, rng=self.rng)
            logger.debug("Placed %d mines around (%d, %d)",
                         self.board.total_mines, row, col)
        self._start_timer()

    def _mark_revealed(self, row: int, col: int, cell: Cell) -> None:
        cell.reveal()
        self.revealed_count += 1
        self.view.update_cell(row, col, copy.copy(cell))

    def _flood_fill(self, row: int, col: int) -> None:
        """
        Reveal the connected zero region around (row, col) and its border.

        Cells are marked revealed before they are pushed, so each cell
        enters the stack at most once.
        """
        stack: List[Position] = [(row, col)]
        while stack:
            current_row, current_col = stack.pop()
            for neighbor_row, neighbor_col in self.board.neighbors(
                current_row, current_col
            ):
                neighbor = self.board.get_cell(neighbor_row, neighbor_col)
                if not neighbor.is_hidden:
                    continue
                self._mark_revealed(neighbor_row, neighbor_col, neighbor)

                if neighbor.is_mine:
                    logger.error(
                        "Flood fill reached mine at (%d, %d)",
                        neighbor_row, neighbor_col,
                    )
                    self._end_game(won=False)
                    return

                if neighbor.adjacent_mines == 0:
                    stack.append((neighbor_row, neighbor_col))

    def _check_win(self) -> None:
        """Win once every non-mine cell is revealed."""
        if self.revealed_count == self.board.safe_cells:
            self._end_game(won=True)

    # ========================================================================
    # Game End
    # ========================================================================

    def _end_game(self, won: bool) -> None:
        """
        Finish the game now; only the result announcement is delayed.

        The best time is saved here so that starting another game before
        the announcement cannot lose it.
        """
        self._outcome = GameStatus.WON if won else GameStatus.LOST
        self._stop_timer()
        self._reveal_all_mines()
        self.sound.play(SoundEvent.WIN if won else SoundEvent.LOSS)
        logger.info(
            "Game %s after %ds", "won" if won else "lost", self.elapsed_seconds
        )
        if won and self.store is not None:
            self._is_new_record = self.store.save_best_time_if_better(
                self.difficulty, self.elapsed_seconds
            )
        self._tasks.call_later(GAME_OVER_DELAY_MS, self._announce_result)

    def _reveal_all_mines(self) -> None:
        """Show unflagged mines and mark flags that sit on safe cells."""
        for row, col, cell in self.board.cells():
            if cell.is_mine and cell.is_hidden:
                cell.reveal()
                self.view.update_cell(row, col, copy.copy(cell))
            elif cell.is_flagged and not cell.is_mine:
                cell.is_misflagged = True
                self.view.update_cell(row, col, copy.copy(cell))

    def _announce_result(self) -> None:
        self.view.show_game_over(
            GameResult(
                won=self.is_won,
                elapsed_seconds=self.elapsed_seconds,
                is_new_record=self._is_new_record,
                difficulty=self.difficulty,
                is_demo=self.is_demo_game_over,
            )
        )

    # ========================================================================
    # Timer
    # ========================================================================

    def _start_timer(self) -> None:
        self._stop_timer()
        self._tick_task = self._tasks.call_later(TICK_INTERVAL_MS, self._tick)

    def _stop_timer(self) -> None:
        self._tasks.cancel(self._tick_task)
        self._tick_task = None

    def _tick(self) -> None:
        self.elapsed_seconds += 1
        self.view.update_timer(self.elapsed_seconds)
        self._tick_task = self._tasks.call_later(TICK_INTERVAL_MS, self._tick)
