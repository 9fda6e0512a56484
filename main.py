#!/usr/bin/env python3
"""
Minesweeper - Main entry point.

Usage:
    python main.py play [--difficulty {easy,medium,hard}] [--seed N]
    python main.py demo [--speed X]
    python main.py best-times
    python main.py settings [--difficulty D] [--sound | --no-sound] [--theme T]
"""
import argparse
import logging
import random
from pathlib import Path
from typing import Optional, Tuple

from demo import watch_demo
from src.minesweeper.config import GAME_OVER_DELAY_MS, Difficulty
from src.minesweeper.console import ConsoleSoundPlayer, ConsoleView
from src.minesweeper.controller import GameController
from src.minesweeper.scheduler import Clock, RealtimeDriver
from src.minesweeper.storage import JsonStorage, format_time

HELP_TEXT = """Commands:
  r ROW COL   reveal a cell
  f ROW COL   flag or unflag a cell
  p           pause / resume
  n           new game
  h           show this help
  q           quit"""

INTRO_TEXT = """Welcome to Minesweeper!
Reveal every cell that is not a mine. Numbers tell you how many of the
eight surrounding cells hide a mine. Flag the cells you think are mines.
Your first move is always safe. Try `python main.py demo` for a tour.
"""


def parse_command(line: str) -> Optional[Tuple[str, int, int]]:
    """
    Parse one line of player input.

    Returns:
        (command, row, col) or None if the line is not a command.
        Row and col are -1 for commands without a cell.
    """
    parts = line.strip().lower().split()
    if not parts:
        return None
    command = parts[0]
    if command in ("p", "n", "q", "h"):
        return command, -1, -1
    if command in ("r", "f") and len(parts) == 3:
        try:
            return command, int(parts[1]), int(parts[2])
        except ValueError:
            return None
    return None


def play(args: argparse.Namespace) -> None:
    """Play an interactive game in the terminal."""
    storage = JsonStorage(args.data_file)
    settings = storage.get_settings()
    difficulty = Difficulty(args.difficulty) if args.difficulty else settings.difficulty

    if not storage.has_completed_tutorial():
        print(INTRO_TEXT)
        storage.mark_tutorial_completed()

    clock = Clock()
    driver = RealtimeDriver(clock)
    view = ConsoleView()
    controller = GameController(
        clock,
        view=view,
        sound=ConsoleSoundPlayer(settings.sound_enabled),
        store=storage,
        rng=random.Random(args.seed),
    )
    controller.new_game(difficulty)
    print(HELP_TEXT)

    while True:
        driver.sync()
        view.show()
        try:
            line = input("> ")
        except (EOFError, KeyboardInterrupt):
            break
        driver.sync()

        parsed = parse_command(line)
        if parsed is None:
            print("Unknown command. Enter 'h' for help.")
            continue
        command, row, col = parsed
        if command == "q":
            break
        if command == "h":
            print(HELP_TEXT)
        elif command == "n":
            controller.new_game(difficulty)
        elif command == "p":
            controller.toggle_pause()
        elif command == "r":
            controller.reveal(row, col)
        elif command == "f":
            controller.toggle_flag(row, col)

        if controller.session.is_game_over and view.last_result is None:
            driver.run_for(GAME_OVER_DELAY_MS)
            print("Enter 'n' for a new game or 'q' to quit.")

    controller.quit_to_menu()


def demo(args: argparse.Namespace) -> None:
    """Watch the guided play demo."""
    watch_demo(speed=args.speed)


def best_times(args: argparse.Namespace) -> None:
    """Print best times for every difficulty."""
    storage = JsonStorage(args.data_file)
    print(f"{'Difficulty':<12} {'Best':>6}")
    print("-" * 19)
    for difficulty, seconds in storage.get_best_times().items():
        print(f"{difficulty.value:<12} {format_time(seconds):>6}")


def settings(args: argparse.Namespace) -> None:
    """Show or change stored settings."""
    storage = JsonStorage(args.data_file)
    current = storage.get_settings()
    changed = False

    if args.difficulty:
        current.difficulty = Difficulty(args.difficulty)
        changed = True
    if args.sound is not None:
        current.sound_enabled = args.sound
        changed = True
    if args.theme:
        current.theme = args.theme
        changed = True

    if changed and not storage.save_settings(current):
        print("Could not save settings.")

    print(f"Difficulty: {current.difficulty.value}")
    print(f"Sound:      {'on' if current.sound_enabled else 'off'}")
    print(f"Theme:      {current.theme}")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minesweeper - play in the terminal or watch the guided demo"
    )
    parser.add_argument(
        "--data-file", type=Path, default=None,
        help="JSON file for best times and settings",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    difficulties = [d.value for d in Difficulty]

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game")
    play_parser.add_argument(
        "--difficulty", choices=difficulties, default=None,
        help="Board preset (default: from settings)",
    )
    play_parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for mine placement"
    )

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Watch the guided demo")
    demo_parser.add_argument(
        "--speed", type=float, default=1.0, help="Playback speed factor"
    )

    # Best times command
    subparsers.add_parser("best-times", help="Show best times")

    # Settings command
    settings_parser = subparsers.add_parser("settings", help="Show or change settings")
    settings_parser.add_argument("--difficulty", choices=difficulties, default=None)
    settings_parser.add_argument("--theme", default=None)
    sound_group = settings_parser.add_mutually_exclusive_group()
    sound_group.add_argument("--sound", dest="sound", action="store_true", default=None)
    sound_group.add_argument("--no-sound", dest="sound", action="store_false")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.command == "play":
        play(args)
    elif args.command == "demo":
        demo(args)
    elif args.command == "best-times":
        best_times(args)
    elif args.command == "settings":
        settings(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
