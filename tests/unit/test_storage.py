"""
Unit tests for JSON persistence.
"""
import json
from pathlib import Path

import pytest
from minesweeper import Difficulty, GameSettings, JsonStorage, format_time


@pytest.fixture
def storage(tmp_path: Path) -> JsonStorage:
    return JsonStorage(tmp_path / "data" / "minesweeper.json")


# ============================================================================
# Formatting Tests
# ============================================================================

class TestFormatTime:
    @pytest.mark.parametrize(
        "seconds,expected",
        [(0, "00:00"), (7, "00:07"), (65, "01:05"), (3599, "59:59"), (None, "--:--")],
    )
    def test_format_time(self, seconds, expected: str) -> None:
        assert format_time(seconds) == expected


# ============================================================================
# Best Time Tests
# ============================================================================

class TestBestTimes:
    """Test best time records."""

    def test_no_times_initially(self, storage: JsonStorage) -> None:
        assert storage.get_best_times() == {d: None for d in Difficulty}

    def test_first_time_is_record(self, storage: JsonStorage) -> None:
        assert storage.save_best_time_if_better(Difficulty.EASY, 42) is True
        assert storage.get_best_time(Difficulty.EASY) == 42
        assert storage.get_best_time(Difficulty.HARD) is None

    def test_only_faster_time_replaces(self, storage: JsonStorage) -> None:
        storage.save_best_time_if_better(Difficulty.MEDIUM, 100)
        assert storage.save_best_time_if_better(Difficulty.MEDIUM, 100) is False
        assert storage.save_best_time_if_better(Difficulty.MEDIUM, 120) is False
        assert storage.save_best_time_if_better(Difficulty.MEDIUM, 90) is True
        assert storage.get_best_time(Difficulty.MEDIUM) == 90

    def test_times_persist_across_instances(
        self, storage: JsonStorage
    ) -> None:
        storage.save_best_time_if_better(Difficulty.HARD, 300)
        reopened = JsonStorage(storage.path)
        assert reopened.get_best_time(Difficulty.HARD) == 300

    def test_file_layout(self, storage: JsonStorage) -> None:
        storage.save_best_time_if_better(Difficulty.EASY, 12)
        data = json.loads(storage.path.read_text())
        assert data["best_times"] == {"easy": 12, "medium": None, "hard": None}


# ============================================================================
# Settings And Tutorial Tests
# ============================================================================

class TestSettings:
    """Test settings and tutorial flag persistence."""

    def test_default_settings(self, storage: JsonStorage) -> None:
        assert storage.get_settings() == GameSettings()

    def test_settings_round_trip(self, storage: JsonStorage) -> None:
        settings = GameSettings(
            theme="dark", difficulty=Difficulty.HARD, sound_enabled=False
        )
        assert storage.save_settings(settings) is True
        assert storage.get_settings() == settings

    def test_unknown_difficulty_falls_back(self) -> None:
        settings = GameSettings.from_dict({"difficulty": "insane"})
        assert settings.difficulty == Difficulty.EASY

    def test_keys_do_not_clobber_each_other(self, storage: JsonStorage) -> None:
        storage.save_best_time_if_better(Difficulty.EASY, 30)
        storage.save_settings(GameSettings(theme="dark"))
        storage.mark_tutorial_completed()
        assert storage.get_best_time(Difficulty.EASY) == 30
        assert storage.get_settings().theme == "dark"
        assert storage.has_completed_tutorial() is True

    def test_tutorial_not_completed_initially(self, storage: JsonStorage) -> None:
        assert storage.has_completed_tutorial() is False


# ============================================================================
# Failure Handling Tests
# ============================================================================

class TestFailures:
    """Storage problems fall back to defaults."""

    def test_corrupt_file_gives_defaults(self, storage: JsonStorage) -> None:
        storage.path.parent.mkdir(parents=True)
        storage.path.write_text("{not json")
        assert storage.get_best_time(Difficulty.EASY) is None
        assert storage.get_settings() == GameSettings()

    def test_corrupt_file_is_replaced_on_write(
        self, storage: JsonStorage
    ) -> None:
        storage.path.parent.mkdir(parents=True)
        storage.path.write_text("[1, 2, 3]")
        assert storage.save_best_time_if_better(Difficulty.EASY, 50) is True
        assert storage.get_best_time(Difficulty.EASY) == 50

    def test_non_integer_time_ignored(self, storage: JsonStorage) -> None:
        storage.path.parent.mkdir(parents=True)
        storage.path.write_text(json.dumps({"best_times": {"easy": "fast"}}))
        assert storage.get_best_time(Difficulty.EASY) is None

    def test_unwritable_location_returns_false(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        storage = JsonStorage(blocker / "data.json")
        assert storage.save_settings(GameSettings()) is False
