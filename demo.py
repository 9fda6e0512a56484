#!/usr/bin/env python3
"""Watch the guided play demo in the terminal."""
import logging

from src.minesweeper.console import ConsoleView
from src.minesweeper.controller import GameController
from src.minesweeper.scheduler import Clock, RealtimeDriver


def watch_demo(speed: float = 1.0, repeats: int = 1) -> None:
    """Run the scripted demo in real time (scaled by speed)."""
    clock = Clock()
    driver = RealtimeDriver(clock, speed=speed)
    view = ConsoleView()
    controller = GameController(clock, view=view, demo_view=view)

    for run in range(repeats):
        if repeats > 1:
            print(f"=== Demo {run + 1}/{repeats} ===")
        controller.start_guided_demo()
        try:
            driver.run_while(
                lambda: not controller.is_demo_finished or view.last_result is None
            )
        except KeyboardInterrupt:
            controller.stop_guided_demo()
            return

    controller.quit_to_menu()


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--speed", type=float, default=1.0, help="Playback speed factor")
    parser.add_argument("--repeats", type=int, default=1, help="Times to play the demo")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    watch_demo(speed=args.speed, repeats=args.repeats)
