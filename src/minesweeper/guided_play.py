"""
Guided play: a scripted, reproducible Minesweeper demonstration.

A fixed mine layout and a fixed script of steps drive a real game
session. Each step shows a caption, waits READING_DELAY_MS, performs its
action, then waits its own delay before the next step. Pausing cancels
every pending callback; resuming replays the current step from its start.
"""
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Sequence, Tuple

from .board import Position
from .config import READING_DELAY_MS, Difficulty
from .interfaces import DemoView, HighlightKind
from .scheduler import Clock, TaskGroup
from .session import GameSession

logger = logging.getLogger(__name__)


# ============================================================================
# Script Types
# ============================================================================

class DemoAction(Enum):
    """What a step does once its caption has been read."""

    REVEAL = "reveal"
    FLAG = "flag"
    POINT_TO_NUMBER = "pointToNumber"
    HIGHLIGHT_FLAG = "highlightFlag"
    TRIGGER_GAME_OVER = "triggerGameOver"


class CaptionPosition(Enum):
    TOP = "top"
    SIDE = "side"


class DemoStatus(Enum):
    IDLE = auto()
    RUNNING = auto()
    PAUSED = auto()
    FINISHED = auto()
    STOPPED = auto()


@dataclass(frozen=True)
class DemoStep:
    """
    One scripted step.

    Attributes:
        text: Caption shown while the step runs.
        cell: Target (row, col).
        delay_ms: Wait after the action before the next step.
        action: Action performed after the reading delay.
        caption_position: Where the caption sits relative to the cell.
    """

    text: str
    cell: Position
    delay_ms: int
    action: DemoAction
    caption_position: CaptionPosition = CaptionPosition.TOP


# ============================================================================
# Fixed Demo Content
# ============================================================================

FIXED_MINES: Tuple[Position, ...] = (
    (0, 0),
    (0, 4),
    (1, 1),
    (2, 6),
    (3, 2),
    (5, 7),
    (6, 5),
    (7, 8),
    (8, 7),
)

# (row, col, displayed number) shown when the first step reveals (4, 4)
DEMO_REVEAL_PATTERN: Tuple[Tuple[int, int, int], ...] = (
    (3, 3, 1),
    (3, 4, 2),
    (4, 2, 1),
    (4, 3, 1),
    (4, 4, 1),
    (4, 5, 2),
    (5, 2, 1),
    (5, 3, 1),
    (5, 4, 3),
)

DEMO_SCRIPT: Tuple[DemoStep, ...] = (
    DemoStep(
        text="Click here to start revealing safe cells",
        cell=(4, 4),
        delay_ms=2500,
        action=DemoAction.REVEAL,
        caption_position=CaptionPosition.TOP,
    ),
    DemoStep(
        text="Numbers show nearby mines (this '1' means 1 mine adjacent)",
        cell=(4, 3),
        delay_ms=3000,
        action=DemoAction.POINT_TO_NUMBER,
        caption_position=CaptionPosition.SIDE,
    ),
    DemoStep(
        text="This cell MUST be a mine (numbers around it add up correctly)",
        cell=(3, 2),
        delay_ms=3000,
        action=DemoAction.FLAG,
        caption_position=CaptionPosition.TOP,
    ),
    DemoStep(
        text="Flagged! Always use logic to find mines",
        cell=(3, 2),
        delay_ms=2000,
        action=DemoAction.HIGHLIGHT_FLAG,
        caption_position=CaptionPosition.SIDE,
    ),
    DemoStep(
        text="If you click a mine... GAME OVER!",
        cell=(0, 0),
        delay_ms=3000,
        action=DemoAction.TRIGGER_GAME_OVER,
        caption_position=CaptionPosition.SIDE,
    ),
)


# ============================================================================
# Guided Play
# ============================================================================

class GuidedPlay:
    """Runs the demo script against a game session."""

    def __init__(
        self,
        session: GameSession,
        clock: Clock,
        view: Optional[DemoView] = None,
        script: Sequence[DemoStep] = DEMO_SCRIPT,
        mines: Sequence[Position] = FIXED_MINES,
        reveal_pattern: Sequence[Tuple[int, int, int]] = DEMO_REVEAL_PATTERN,
        reading_delay_ms: int = READING_DELAY_MS,
    ) -> None:
        self.session = session
        self.clock = clock
        self.view = view or DemoView()
        self.script = tuple(script)
        self.mines = tuple(mines)
        self.reveal_pattern = tuple(reveal_pattern)
        self.reading_delay_ms = reading_delay_ms

        self.status = DemoStatus.IDLE
        self.current_step_index = 0
        self._tasks = TaskGroup(clock)
        self._paused_session = False

    @property
    def is_active(self) -> bool:
        """True while the script controls the session (running or paused)."""
        return self.status in (DemoStatus.RUNNING, DemoStatus.PAUSED)

    @property
    def is_paused(self) -> bool:
        return self.status == DemoStatus.PAUSED

    @property
    def pending_count(self) -> int:
        """Outstanding scheduled callbacks."""
        return len(self._tasks)

    # ========================================================================
    # Control
    # ========================================================================

    def start(self) -> None:
        """Set up the fixed board and run the first step now."""
        if self.is_active:
            return
        self._tasks.cancel_all()
        self.status = DemoStatus.RUNNING
        self.current_step_index = 0
        self._paused_session = False

        self.session.initialize(Difficulty.EASY)
        self.session.load_layout(self.mines)
        logger.info("Guided play started")
        self.run_step(0)

    def stop(self) -> None:
        """Cancel the demo. No scripted action runs after this returns."""
        if not self.is_active:
            return
        cancelled = self._tasks.cancel_all()
        self.status = DemoStatus.STOPPED
        logger.info("Guided play stopped (%d callbacks cancelled)", cancelled)
        self.view.clear_highlights()
        self.view.on_demo_stopped()

    def pause(self) -> None:
        """Cancel pending callbacks; resume() replays the current step."""
        if self.status != DemoStatus.RUNNING:
            return
        self._tasks.cancel_all()
        self.status = DemoStatus.PAUSED
        if not self.session.is_game_over and not self.session.is_paused:
            self._paused_session = self.session.toggle_pause()
        logger.debug("Guided play paused at step %d", self.current_step_index)
        self.view.on_demo_paused()

    def resume(self) -> None:
        if self.status != DemoStatus.PAUSED:
            return
        self.status = DemoStatus.RUNNING
        if self._paused_session:
            self._paused_session = False
            if self.session.is_paused:
                self.session.toggle_pause()
        logger.debug("Guided play resumed at step %d", self.current_step_index)
        self.view.on_demo_resumed()
        self.run_step(self.current_step_index)

    def toggle_pause(self) -> None:
        if self.is_paused:
            self.resume()
        else:
            self.pause()

    # ========================================================================
    # Steps
    # ========================================================================

    def run_step(self, step_index: int) -> None:
        """Show a step's caption and schedule its action."""
        if self.status != DemoStatus.RUNNING:
            return
        if step_index >= len(self.script):
            self._finish()
            return

        self.current_step_index = step_index
        step = self.script[step_index]
        logger.debug("Step %d: %s", step_index, step.action.value)
        self.view.clear_highlights()
        self.view.show_caption(step_index, step)
        self._tasks.call_later(
            self.reading_delay_ms, lambda: self._perform(step_index)
        )

    def _perform(self, step_index: int) -> None:
        if self.status != DemoStatus.RUNNING:
            return
        step = self.script[step_index]
        row, col = step.cell

        if step.action == DemoAction.REVEAL:
            self.view.highlight_cell(row, col, HighlightKind.TARGET)
            self.session.reveal_pattern(self.reveal_pattern)
        elif step.action == DemoAction.FLAG:
            self.view.highlight_cell(row, col, HighlightKind.TARGET)
            # A step replayed after resume must not take the flag off again
            cell = self.session.cell_snapshot(row, col)
            if cell is not None and not cell.is_flagged:
                self.session.toggle_flag(row, col)
        elif step.action == DemoAction.POINT_TO_NUMBER:
            cell = self.session.cell_snapshot(row, col)
            if cell is not None and cell.is_revealed and cell.adjacent_mines > 0:
                self.view.highlight_cell(row, col, HighlightKind.NUMBER)
        elif step.action == DemoAction.HIGHLIGHT_FLAG:
            self.view.highlight_cell(row, col, HighlightKind.FLAG)
        elif step.action == DemoAction.TRIGGER_GAME_OVER:
            self.view.highlight_cell(row, col, HighlightKind.TARGET)
            self.session.reveal(row, col)
            self.session.mark_demo_game_over()

        self._tasks.call_later(
            step.delay_ms, lambda: self.run_step(step_index + 1)
        )

    def _finish(self) -> None:
        """Detach from the session but leave the final board showing."""
        self._tasks.cancel_all()
        self.status = DemoStatus.FINISHED
        logger.info("Guided play finished")
        self.view.clear_highlights()
        self.view.on_demo_finished()
