"""
Board module for Minesweeper game.

Implements the grid of cells, mine placement around a safe zone
and adjacency counting. Game rules live in the session module.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Set, Tuple

import numpy as np

from .cell import Cell
from .config import BoardConfig

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class MinePlacementError(ValueError):
    """Raised when mines cannot be placed on a board."""


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper game board.

    Manages the grid of cells, mine placement and neighbor counts.
    Mines are placed at most once per board.
    """

    config: BoardConfig = field(default_factory=lambda: BoardConfig())
    total_mines: int = field(init=False)
    _grid: List[List[Cell]] = field(default_factory=list, repr=False)
    _mines_placed: bool = False

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        self.total_mines = self.config.mines
        self._init_grid()

    @classmethod
    def create_empty(cls, rows: int, cols: int, mines: int = 0) -> "Board":
        """Create a blank board with no mines placed yet."""
        return cls(BoardConfig(rows, cols, mines))

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of cells."""
        self._grid = [
            [Cell() for _ in range(self.cols)]
            for _ in range(self.rows)
        ]

    @property
    def rows(self) -> int:
        """Number of rows."""
        return self.config.rows

    @property
    def cols(self) -> int:
        """Number of columns."""
        return self.config.cols

    @property
    def safe_cells(self) -> int:
        """Cells that must be revealed to win."""
        return self.rows * self.cols - self.total_mines

    @property
    def mines_placed(self) -> bool:
        """Whether mines have been laid on this board."""
        return self._mines_placed

    # ========================================================================
    # Mine Placement
    # ========================================================================

    def place_mines(
        self,
        exclude_row: int,
        exclude_col: int,
        mine_count: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> List[Position]:
        """
        Place mines randomly, keeping a safe zone around one cell.

        The safe zone is the excluded cell plus its neighbors. When that
        leaves too few candidates, only the excluded cell stays safe.

        Args:
            exclude_row: Row of the first action.
            exclude_col: Column of the first action.
            mine_count: Mines to place (default: the board's total).
            rng: Random source (default: the module level generator).

        Returns:
            Positions of the placed mines.

        Raises:
            MinePlacementError: If mines are already placed, the excluded
                cell is off the board, or the mines cannot fit.
        """
        if self._mines_placed:
            raise MinePlacementError("Mines already placed")
        if not self.is_valid_position(exclude_row, exclude_col):
            raise MinePlacementError(
                f"Excluded cell ({exclude_row}, {exclude_col}) is off the board"
            )
        if mine_count is None:
            mine_count = self.total_mines

        safe_zone = self.safe_zone(exclude_row, exclude_col)
        if mine_count > self.rows * self.cols - len(safe_zone):
            logger.warning(
                "Safe zone around (%d, %d) leaves room for fewer than %d mines, "
                "keeping only the clicked cell safe",
                exclude_row, exclude_col, mine_count,
            )
            safe_zone = {(exclude_row, exclude_col)}
        candidates = self._get_valid_mine_positions(safe_zone)
        if mine_count > len(candidates):
            raise MinePlacementError(
                f"Cannot place {mine_count} mines in {len(candidates)} cells"
            )

        # random.shuffle is a Fisher-Yates shuffle
        (rng or random).shuffle(candidates)
        mine_positions = candidates[:mine_count]
        for row, col in mine_positions:
            self._grid[row][col].is_mine = True

        self.total_mines = mine_count
        self._mines_placed = True
        self._calculate_adjacent_mines()
        return mine_positions

    def place_fixed_mines(self, positions: Iterable[Position]) -> None:
        """
        Lay mines at exact positions instead of random ones.

        Raises:
            MinePlacementError: If mines are already placed or a position
                is off the board.
        """
        if self._mines_placed:
            raise MinePlacementError("Mines already placed")
        unique = set(positions)
        for row, col in unique:
            if not self.is_valid_position(row, col):
                raise MinePlacementError(f"Mine ({row}, {col}) is off the board")
        if len(unique) >= self.rows * self.cols:
            raise MinePlacementError("Layout leaves no safe cell")
        for row, col in unique:
            self._grid[row][col].is_mine = True
        self.total_mines = len(unique)
        self._mines_placed = True
        self._calculate_adjacent_mines()

    def safe_zone(self, row: int, col: int) -> Set[Position]:
        """Return the cell and its in-bounds neighbors."""
        zone = set(self.neighbors(row, col))
        zone.add((row, col))
        return zone

    def _get_valid_mine_positions(
        self, safe_zone: Set[Position]
    ) -> List[Position]:
        """Get all positions outside the safe zone."""
        positions = []
        for row in range(self.rows):
            for col in range(self.cols):
                if (row, col) not in safe_zone:
                    positions.append((row, col))
        return positions

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all cells."""
        for row in range(self.rows):
            for col in range(self.cols):
                if not self._grid[row][col].is_mine:
                    count = self.count_adjacent_mines(row, col)
                    self._grid[row][col].adjacent_mines = count

    def count_adjacent_mines(self, row: int, col: int) -> int:
        """Count mines adjacent to a specific cell."""
        count = 0
        for neighbor_row, neighbor_col in self.neighbors(row, col):
            if self._grid[neighbor_row][neighbor_col].is_mine:
                count += 1
        return count

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def neighbors(self, row: int, col: int) -> List[Position]:
        """
        Get valid neighboring cell positions.

        Args:
            row: Row index of center cell.
            col: Column index of center cell.

        Returns:
            List of (row, col) tuples for valid neighbors.
        """
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = col + delta_col
                if self.is_valid_position(new_row, new_col):
                    neighbors.append((new_row, new_col))
        return neighbors

    def is_valid_position(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    # ========================================================================
    # State Accessors
    # ========================================================================

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self.is_valid_position(row, col):
            return None
        return self._grid[row][col]

    def cells(self) -> Iterator[Tuple[int, int, Cell]]:
        """Iterate over (row, col, cell) in row-major order."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield row, col, self._grid[row][col]

    def mine_positions(self) -> List[Position]:
        """Positions of every mine on the board."""
        return [(row, col) for row, col, cell in self.cells() if cell.is_mine]

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy array.

        Returns:
            2D int8 array where:
                -1 = hidden
                -2 = flagged
                -3 = flag on a safe cell (after game end)
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        obs = np.zeros((self.rows, self.cols), dtype=np.int8)
        for row, col, cell in self.cells():
            obs[row, col] = cell.to_observation()
        return obs
