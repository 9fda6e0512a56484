"""
Terminal front end collaborators.

A text renderer for the board, captions and results, and a sound
player that rings the terminal bell.
"""
import sys
from typing import TYPE_CHECKING, Optional, Set, TextIO, Tuple

import numpy as np

from .cell import FLAGGED_VALUE, HIDDEN_VALUE, MINE_VALUE, MISFLAGGED_VALUE, Cell
from .interfaces import (
    DemoView,
    GameResult,
    GameView,
    HighlightKind,
    SoundEvent,
    SoundPlayer,
)
from .storage import format_time

if TYPE_CHECKING:
    from .guided_play import DemoStep
    from .session import GameSession


def render_observation(
    obs: np.ndarray, highlights: Optional[Set[Tuple[int, int]]] = None
) -> str:
    """
    Render a board snapshot as text.

    Highlighted cells are wrapped in brackets.
    """
    highlights = highlights or set()
    rows, cols = obs.shape
    lines = ["    " + "".join(f"{col:>3}" for col in range(cols))]
    for row in range(rows):
        row_str = f"{row:>3} "
        for col in range(cols):
            symbol = _cell_symbol(int(obs[row, col]))
            if (row, col) in highlights:
                row_str += f"[{symbol}]"
            else:
                row_str += f" {symbol} "
        lines.append(row_str.rstrip())
    return "\n".join(lines)


def _cell_symbol(value: int) -> str:
    if value == HIDDEN_VALUE:
        return "."
    if value == FLAGGED_VALUE:
        return "F"
    if value == MISFLAGGED_VALUE:
        return "X"
    if value == MINE_VALUE:
        return "*"
    if value == 0:
        return " "
    return str(value)


class ConsoleView(GameView, DemoView):
    """Prints game and demo updates to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdout
        self.remaining_mines = 0
        self.elapsed_seconds = 0
        self.last_result: Optional[GameResult] = None
        self._session: Optional["GameSession"] = None
        self._highlights: Set[Tuple[int, int]] = set()

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream)

    def render(self) -> str:
        """Status line plus the board, or an empty string with no game."""
        if self._session is None:
            return ""
        status = (
            f"Mines: {self.remaining_mines:>3}   "
            f"Time: {format_time(self.elapsed_seconds)}"
        )
        if self._session.is_paused:
            status += "   [PAUSED]"
        board = render_observation(self._session.get_observation(), self._highlights)
        return f"{status}\n{board}"

    def show(self) -> None:
        self._print(self.render())

    # ========================================================================
    # GameView
    # ========================================================================

    def render_board(self, session: "GameSession") -> None:
        self._session = session
        self.last_result = None
        self._highlights.clear()

    def update_cell(self, row: int, col: int, cell: Cell) -> None:
        # Drawn with the next full render
        pass

    def update_mine_counter(self, remaining: int) -> None:
        self.remaining_mines = remaining

    def update_timer(self, elapsed_seconds: int) -> None:
        self.elapsed_seconds = elapsed_seconds

    def show_game_over(self, result: GameResult) -> None:
        self.last_result = result
        self.show()
        if result.won:
            self._print(f"You won in {format_time(result.elapsed_seconds)}!")
            if result.is_new_record:
                self._print("New best time!")
        else:
            self._print("Game over!")
        if result.is_demo:
            self._print("Run the demo again to watch it again.")

    def show_pause_overlay(self) -> None:
        self._print("Paused. Enter 'p' to resume.")

    def show_main_menu(self) -> None:
        self._session = None
        self._highlights.clear()

    # ========================================================================
    # DemoView
    # ========================================================================

    def show_caption(self, step_index: int, step: "DemoStep") -> None:
        self._highlights = {step.cell}
        self._print()
        self.show()
        self._print(f"  >> {step.text}")

    def clear_highlights(self) -> None:
        self._highlights.clear()

    def highlight_cell(self, row: int, col: int, kind: HighlightKind) -> None:
        self._highlights.add((row, col))
        if kind != HighlightKind.TARGET:
            self.show()

    def on_demo_paused(self) -> None:
        self._print("Demo paused.")

    def on_demo_resumed(self) -> None:
        self._print("Demo resumed.")

    def on_demo_finished(self) -> None:
        self._print("Demo finished.")

    def on_demo_stopped(self) -> None:
        self._print("Demo stopped.")


class ConsoleSoundPlayer(SoundPlayer):
    """Rings the terminal bell when a game ends."""

    def __init__(self, enabled: bool = True, stream: Optional[TextIO] = None) -> None:
        self.enabled = enabled
        self.stream = stream or sys.stdout

    def play(self, event: SoundEvent) -> None:
        if not self.enabled:
            return
        if event in (SoundEvent.WIN, SoundEvent.LOSS):
            self.stream.write("\a")
            self.stream.flush()
