"""
Single grid square.

A cell knows whether it hides a mine, how many of its neighbors do, and
whether the player has uncovered or flagged it. Boards and views read it
through the integer codes returned by to_observation().
"""
from enum import Enum, auto
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """What the player currently sees on a square."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# Snapshot codes; revealed safe cells use their count 0-8
HIDDEN_VALUE = -1
FLAGGED_VALUE = -2
MISFLAGGED_VALUE = -3
MINE_VALUE = 9


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    One square of the board.

    Attributes:
        is_mine: The square hides a mine.
        adjacent_mines: Mines among the up to eight surrounding squares.
        state: Hidden, revealed or flagged.
        is_misflagged: Set when a lost or won game exposes a flag that
            was placed on a safe square.
    """

    is_mine: bool = False
    adjacent_mines: int = 0
    state: CellState = CellState.HIDDEN
    is_misflagged: bool = False

    def reveal(self) -> bool:
        """
        Uncover the square.

        Returns:
            False when it was already uncovered or carries a flag.
        """
        if self.state is not CellState.HIDDEN:
            return False
        self.state = CellState.REVEALED
        return True

    def toggle_flag(self) -> bool:
        """
        Put a flag on a hidden square or take it off again.

        Returns:
            False for an uncovered square, which cannot be flagged.
        """
        if self.state is CellState.REVEALED:
            return False
        self.state = (
            CellState.FLAGGED if self.state is CellState.HIDDEN
            else CellState.HIDDEN
        )
        return True

    @property
    def is_hidden(self) -> bool:
        return self.state is CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        return self.state is CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        return self.state is CellState.FLAGGED

    def to_observation(self) -> int:
        """
        Snapshot code shown to views and stored in board arrays.

        Returns:
            HIDDEN_VALUE, FLAGGED_VALUE or MISFLAGGED_VALUE for covered
            squares, MINE_VALUE for an uncovered mine, otherwise the
            adjacent mine count.
        """
        if self.is_hidden:
            return HIDDEN_VALUE
        if self.is_flagged:
            return MISFLAGGED_VALUE if self.is_misflagged else FLAGGED_VALUE
        return MINE_VALUE if self.is_mine else self.adjacent_mines
