"""
Single owner of the live game session.

Normal play and guided play must never drive the same session at the
same time. The controller tears one mode down completely (demo
callbacks, timer, pending announcement) before it starts the other.
"""
import logging
import random
from enum import Enum, auto
from typing import Optional

from .config import Difficulty
from .guided_play import DemoStatus, GuidedPlay
from .interfaces import BestTimeStore, DemoView, GameView, SoundPlayer
from .scheduler import Clock
from .session import GameSession

logger = logging.getLogger(__name__)


class Mode(Enum):
    """Which mode currently owns the session."""

    MENU = auto()
    GAME = auto()
    DEMO = auto()


class GameController:
    """
    Entry point for a front end.

    Player actions are forwarded to the session only in GAME mode; while a
    demo owns the board they are ignored.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        view: Optional[GameView] = None,
        demo_view: Optional[DemoView] = None,
        sound: Optional[SoundPlayer] = None,
        store: Optional[BestTimeStore] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.clock = clock or Clock()
        self.view = view or GameView()
        self.demo_view = demo_view
        self.sound = sound
        self.store = store
        self.rng = rng

        self.mode = Mode.MENU
        self.session: Optional[GameSession] = None
        self.demo: Optional[GuidedPlay] = None

    # ========================================================================
    # Mode Switching
    # ========================================================================

    def new_game(self, difficulty: Difficulty) -> GameSession:
        """Tear down whatever is running and start a normal game."""
        self._teardown()
        self.session = self._create_session()
        self.session.initialize(difficulty)
        self.mode = Mode.GAME
        return self.session

    def start_guided_demo(self) -> GuidedPlay:
        """Tear down whatever is running and start the guided demo."""
        if self.demo is not None and self.demo.is_active:
            return self.demo
        self._teardown()
        self.session = self._create_session()
        self.demo = GuidedPlay(self.session, self.clock, self.demo_view)
        self.mode = Mode.DEMO
        self.demo.start()
        return self.demo

    def stop_guided_demo(self) -> None:
        """Cancel the demo and return to the main menu."""
        if self.mode != Mode.DEMO:
            return
        self.quit_to_menu()

    def pause_guided_demo(self) -> None:
        if self.mode == Mode.DEMO and self.demo is not None:
            self.demo.pause()

    def resume_guided_demo(self) -> None:
        if self.mode == Mode.DEMO and self.demo is not None:
            self.demo.resume()

    def quit_to_menu(self) -> None:
        """Tear down the active mode and show the main menu."""
        self._teardown()
        self.mode = Mode.MENU
        self.view.show_main_menu()

    def _create_session(self) -> GameSession:
        return GameSession(
            self.clock,
            view=self.view,
            sound=self.sound,
            store=self.store,
            rng=self.rng,
        )

    def _teardown(self) -> None:
        """Stop the demo (if any) before disposing of the session."""
        if self.demo is not None:
            self.demo.stop()
            self.demo = None
        if self.session is not None:
            self.session.dispose()
            self.session = None
        logger.debug("Torn down %s mode", self.mode.name)

    # ========================================================================
    # Player Input
    # ========================================================================

    def reveal(self, row: int, col: int) -> bool:
        if self.mode != Mode.GAME:
            return False
        return self.session.reveal(row, col)

    def toggle_flag(self, row: int, col: int) -> bool:
        if self.mode != Mode.GAME:
            return False
        return self.session.toggle_flag(row, col)

    def toggle_pause(self) -> bool:
        """Pause the game, or the demo while one is running."""
        if self.mode == Mode.GAME:
            return self.session.toggle_pause()
        if self.mode == Mode.DEMO and self.demo is not None:
            if not self.demo.is_active:
                return False
            self.demo.toggle_pause()
            return True
        return False

    @property
    def is_demo_finished(self) -> bool:
        return self.demo is not None and self.demo.status == DemoStatus.FINISHED
