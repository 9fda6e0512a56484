"""
Unit tests for guided play.

Timings follow the script: every step shows its caption at local t=0,
acts at t=2500 and hands over to the next step step.delay_ms later.
"""
import pytest
from minesweeper import (
    DEMO_REVEAL_PATTERN,
    DEMO_SCRIPT,
    FIXED_MINES,
    Clock,
    DemoAction,
    DemoStatus,
    GameSession,
    GameStatus,
    GuidedPlay,
    HighlightKind,
)

# Absolute start time of each step when the demo runs uninterrupted
STEP_STARTS = [0, 5000, 10500, 16000, 20500]
FINISH_MS = 26000


@pytest.fixture
def demo(clock: Clock, view) -> GuidedPlay:
    session = GameSession(clock, view=view)
    return GuidedPlay(session, clock, view)


def caption_times(view):
    return [(time_ms, args[0]) for time_ms, _, args in view.named("show_caption")]


# ============================================================================
# Script Content Tests
# ============================================================================

class TestScript:
    """Test the fixed demo content."""

    def test_script_actions_in_order(self) -> None:
        assert [step.action for step in DEMO_SCRIPT] == [
            DemoAction.REVEAL,
            DemoAction.POINT_TO_NUMBER,
            DemoAction.FLAG,
            DemoAction.HIGHLIGHT_FLAG,
            DemoAction.TRIGGER_GAME_OVER,
        ]

    def test_scripted_targets_match_layout(self) -> None:
        mines = set(FIXED_MINES)
        flag_step = DEMO_SCRIPT[2]
        game_over_step = DEMO_SCRIPT[4]
        assert flag_step.cell in mines
        assert game_over_step.cell in mines
        for row, col, _ in DEMO_REVEAL_PATTERN:
            assert (row, col) not in mines


# ============================================================================
# Timing Tests
# ============================================================================

class TestTiming:
    """Test the step schedule."""

    def test_step_zero_runs_immediately(self, demo: GuidedPlay, view) -> None:
        demo.start()
        assert caption_times(view) == [(0, 0)]
        assert demo.is_active is True
        assert demo.current_step_index == 0

    def test_action_at_reading_delay_then_next_step(
        self, demo: GuidedPlay, clock: Clock, view
    ) -> None:
        demo.start()
        clock.advance(2499)
        assert demo.session.board.get_cell(4, 4).is_hidden
        clock.advance(1)
        assert demo.session.board.get_cell(4, 4).is_revealed

        clock.advance(2499)
        assert caption_times(view) == [(0, 0)]
        clock.advance(1)
        assert caption_times(view) == [(0, 0), (5000, 1)]

    def test_full_run_timeline(self, demo: GuidedPlay, clock: Clock, view) -> None:
        demo.start()
        clock.advance(FINISH_MS)
        assert [time_ms for time_ms, _ in caption_times(view)] == STEP_STARTS
        assert demo.status == DemoStatus.FINISHED
        assert view.named("on_demo_finished")[0][0] == FINISH_MS
        assert demo.pending_count == 0


# ============================================================================
# Action Tests
# ============================================================================

class TestActions:
    """Test what each step does to the session."""

    def test_reveal_uses_fixed_pattern(self, demo: GuidedPlay, clock: Clock) -> None:
        demo.start()
        clock.advance(2500)
        session = demo.session
        for row, col, number in DEMO_REVEAL_PATTERN:
            cell = session.board.get_cell(row, col)
            assert cell.is_revealed
            assert cell.adjacent_mines == number
        assert session.revealed_count == len(DEMO_REVEAL_PATTERN)
        # No flood fill beyond the pattern
        assert session.board.get_cell(8, 0).is_hidden
        assert session.status == GameStatus.PLAYING

    def test_layout_is_fixed(self, demo: GuidedPlay) -> None:
        demo.start()
        assert demo.session.board.mine_positions() == sorted(FIXED_MINES)
        assert demo.session.total_mines == len(FIXED_MINES)

    def test_point_to_number_highlights(
        self, demo: GuidedPlay, clock: Clock, view
    ) -> None:
        demo.start()
        clock.advance(STEP_STARTS[1] + 2500)
        assert (4, 3, HighlightKind.NUMBER) in [
            args for _, _, args in view.named("highlight_cell")
        ]

    def test_flag_step_flags_the_mine(self, demo: GuidedPlay, clock: Clock) -> None:
        demo.start()
        clock.advance(STEP_STARTS[2] + 2500)
        assert demo.session.board.get_cell(3, 2).is_flagged
        assert demo.session.flags_placed == 1

    def test_game_over_step_loses_with_demo_marker(
        self, demo: GuidedPlay, clock: Clock, view
    ) -> None:
        demo.start()
        clock.advance(STEP_STARTS[4] + 2500)
        session = demo.session
        assert session.is_lost is True
        assert session.is_demo_game_over is True
        # The flagged mine stays flagged
        assert session.board.get_cell(3, 2).is_flagged

        clock.advance(1500)
        result = view.named("show_game_over")[0][2][0]
        assert result.won is False
        assert result.is_demo is True

    def test_runs_are_identical(self, clock: Clock, view) -> None:
        observations = []
        for _ in range(2):
            session = GameSession(clock, view=view)
            demo = GuidedPlay(session, clock, view)
            demo.start()
            clock.advance(FINISH_MS)
            observations.append(session.get_observation().tolist())
        assert observations[0] == observations[1]


# ============================================================================
# Pause / Stop Tests
# ============================================================================

class TestPauseResume:
    """Test cancellation and replay of the current step."""

    def test_pause_cancels_pending_callbacks(
        self, demo: GuidedPlay, clock: Clock, view
    ) -> None:
        demo.start()
        clock.advance(1000)
        demo.pause()
        assert demo.is_paused is True
        assert demo.pending_count == 0
        clock.advance(20_000)
        assert demo.session.board.get_cell(4, 4).is_hidden
        assert caption_times(view) == [(0, 0)]

    def test_resume_replays_current_step_from_start(
        self, demo: GuidedPlay, clock: Clock, view
    ) -> None:
        demo.start()
        clock.advance(1000)
        demo.pause()
        clock.advance(10_000)
        demo.resume()
        assert caption_times(view) == [(0, 0), (11_000, 0)]

        clock.advance(2499)
        assert demo.session.board.get_cell(4, 4).is_hidden
        clock.advance(1)
        assert demo.session.board.get_cell(4, 4).is_revealed

    def test_pause_mid_step_restarts_that_step(
        self, demo: GuidedPlay, clock: Clock, view
    ) -> None:
        demo.start()
        clock.advance(STEP_STARTS[1] + 3000)
        demo.toggle_pause()
        clock.advance(500)
        demo.toggle_pause()
        assert caption_times(view)[-1] == (STEP_STARTS[1] + 3500, 1)
        assert demo.current_step_index == 1

    def test_replayed_flag_step_keeps_flag(
        self, demo: GuidedPlay, clock: Clock
    ) -> None:
        """Resuming after the flag was placed leaves exactly one flag."""
        demo.start()
        clock.advance(STEP_STARTS[2] + 2600)
        assert demo.session.board.get_cell(3, 2).is_flagged
        demo.pause()
        demo.resume()
        assert demo.current_step_index == 2
        clock.advance(2500)
        assert demo.session.board.get_cell(3, 2).is_flagged
        assert demo.session.flags_placed == 1
        assert demo.session.remaining_mines == len(FIXED_MINES) - 1

    def test_pause_also_pauses_session_timer(
        self, demo: GuidedPlay, clock: Clock
    ) -> None:
        demo.start()
        clock.advance(3500)
        elapsed = demo.session.elapsed_seconds
        demo.pause()
        assert demo.session.is_paused is True
        clock.advance(5000)
        assert demo.session.elapsed_seconds == elapsed
        demo.resume()
        assert demo.session.is_paused is False

    def test_pause_when_not_running_is_noop(self, demo: GuidedPlay, view) -> None:
        demo.pause()
        assert demo.status == DemoStatus.IDLE
        assert view.named("on_demo_paused") == []


class TestStop:
    """Test cancellation and finishing."""

    def test_stop_cancels_everything(
        self, demo: GuidedPlay, clock: Clock, view
    ) -> None:
        demo.start()
        clock.advance(2000)
        demo.stop()
        assert demo.status == DemoStatus.STOPPED
        assert demo.is_active is False
        assert demo.pending_count == 0
        clock.advance(30_000)
        assert demo.session.board.get_cell(4, 4).is_hidden
        assert len(view.named("on_demo_stopped")) == 1

    def test_start_while_active_is_noop(self, demo: GuidedPlay, view) -> None:
        demo.start()
        demo.start()
        assert caption_times(view) == [(0, 0)]

    def test_finish_leaves_game_over_board(
        self, demo: GuidedPlay, clock: Clock
    ) -> None:
        demo.start()
        clock.advance(FINISH_MS)
        assert demo.is_active is False
        assert demo.session.is_game_over is True
        assert demo.session.board.get_cell(0, 0).is_revealed

    def test_stop_after_finish_is_noop(
        self, demo: GuidedPlay, clock: Clock, view
    ) -> None:
        demo.start()
        clock.advance(FINISH_MS)
        demo.stop()
        assert demo.status == DemoStatus.FINISHED
        assert view.named("on_demo_stopped") == []
