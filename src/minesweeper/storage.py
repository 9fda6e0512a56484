"""
JSON file persistence for best times, settings and tutorial progress.

Storage problems never reach the game: failures are logged and the
caller gets defaults (or False for writes).
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .config import Difficulty, GameSettings
from .interfaces import BestTimeStore

logger = logging.getLogger(__name__)

DEFAULT_PATH = Path.home() / ".minesweeper" / "data.json"

BEST_TIMES_KEY = "best_times"
SETTINGS_KEY = "settings"
TUTORIAL_COMPLETED_KEY = "tutorial_completed"


def format_time(seconds: Optional[int]) -> str:
    """Format seconds as mm:ss, or --:-- when there is no time."""
    if seconds is None:
        return "--:--"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


class JsonStorage(BestTimeStore):
    """Key-value store backed by a single JSON file."""

    def __init__(self, path: Union[str, Path, None] = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_PATH

    # ========================================================================
    # File Access (Low-level)
    # ========================================================================

    def _load(self) -> Dict[str, Any]:
        """Read the whole file; empty dict if missing or unreadable."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Ignoring malformed data in {self.path}")
            return {}
        return data

    def _update(self, key: str, value: Any) -> bool:
        """
        Set one top-level key and write the file atomically.

        Returns:
            True if the write succeeded.
        """
        data = self._load()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                suffix=".tmp", prefix="minesweeper_", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w") as f:
                    json.dump(data, f, indent=2)
                os.replace(temp_path, self.path)
            except BaseException:
                os.unlink(temp_path)
                raise
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")
            return False
        logger.debug(f"Saved {key} to {self.path}")
        return True

    # ========================================================================
    # Best Times
    # ========================================================================

    def get_best_times(self) -> Dict[Difficulty, Optional[int]]:
        """Best time for every difficulty, None where there is none."""
        stored = self._load().get(BEST_TIMES_KEY)
        if not isinstance(stored, dict):
            stored = {}
        times: Dict[Difficulty, Optional[int]] = {}
        for difficulty in Difficulty:
            value = stored.get(difficulty.value)
            times[difficulty] = value if isinstance(value, int) else None
        return times

    def get_best_time(self, difficulty: Difficulty) -> Optional[int]:
        return self.get_best_times()[difficulty]

    def save_best_time_if_better(
        self, difficulty: Difficulty, seconds: int
    ) -> bool:
        """Store the time if it is the first or a strictly faster one."""
        times = self.get_best_times()
        current = times[difficulty]
        if current is not None and seconds >= current:
            return False
        times[difficulty] = seconds
        saved = self._update(
            BEST_TIMES_KEY, {d.value: t for d, t in times.items()}
        )
        if saved:
            logger.info(f"New best time for {difficulty.value}: {format_time(seconds)}")
        return saved

    # ========================================================================
    # Settings
    # ========================================================================

    def get_settings(self) -> GameSettings:
        stored = self._load().get(SETTINGS_KEY)
        if not isinstance(stored, dict):
            return GameSettings()
        return GameSettings.from_dict(stored)

    def save_settings(self, settings: GameSettings) -> bool:
        return self._update(SETTINGS_KEY, settings.to_dict())

    # ========================================================================
    # Tutorial
    # ========================================================================

    def has_completed_tutorial(self) -> bool:
        return self._load().get(TUTORIAL_COMPLETED_KEY) is True

    def mark_tutorial_completed(self) -> bool:
        return self._update(TUTORIAL_COMPLETED_KEY, True)
