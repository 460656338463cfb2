"""Command line entry point.

Run with: `python -m termtris`

Shows the text menu, asks for a speed (unless ``--speed`` is given) and then
hands the terminal to the curses front-end until the game ends.
"""

from __future__ import annotations

import argparse
import logging
from enum import Enum
from typing import Callable, List, Optional

from .board import Board
from .run_terminal import play
from .session import GameSession, Speed


LOGGER = logging.getLogger(__name__)

RULE = "~" * 28

MAIN_MENU = (
    RULE,
    "    ****** Tetris ******",
    RULE,
    "\t   *Menu*",
    "\t  1: Start",
    "\t  2: Quit",
    "",
    RULE,
)

SPEED_MENU = (
    RULE,
    "\t*Select Speed*",
    "\t 1: Doable",
    "\t 2: Fast",
    "\t 3: Super Fast",
    RULE,
)

EXIT_OK = 0
EXIT_INVALID_CHOICE = 1


class MenuChoice(Enum):
    START = "1"
    QUIT = "2"


def read_menu(read: Callable[[str], str], write: Callable[[str], None]) -> Optional[MenuChoice]:
    """Show the main menu and return the choice, or ``None`` if unrecognised."""

    for line in MAIN_MENU:
        write(line)
    try:
        answer = read("Choice >> ").strip()
    except EOFError:
        return None
    try:
        return MenuChoice(answer)
    except ValueError:
        return None


def read_speed(read: Callable[[str], str], write: Callable[[str], None]) -> Speed:
    """Show the speed menu and return the chosen preset.

    Anything other than a listed option falls back to the slowest preset.
    """

    for line in SPEED_MENU:
        write(line)
    try:
        answer = read("Choice>> ")
    except EOFError:
        answer = ""
    try:
        return Speed.from_choice(answer)
    except ValueError:
        LOGGER.warning("Unknown speed %r; using %s", answer, Speed.DOABLE.label)
        write(f"Unknown speed, playing {Speed.DOABLE.label}.")
        return Speed.DOABLE


def configure_logging(log_file: Optional[str], level: str) -> None:
    """Send log records to ``log_file``; without one they are discarded.

    curses owns the terminal while a game runs, so records are never written
    to the console.
    """

    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=getattr(logging, level.upper()),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="termtris", description="Falling-block puzzle game for the terminal.")
    parser.add_argument(
        "--speed",
        choices=["1", "2", "3"],
        default=None,
        help="Speed preset (1: Doable, 2: Fast, 3: Super Fast); skips the speed menu.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the piece generator.")
    parser.add_argument("--log-file", default=None, help="Write log records to this file.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level used with --log-file (default: INFO).",
    )
    return parser.parse_args(argv)


def main(
    argv: Optional[List[str]] = None,
    *,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> int:
    args = parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    choice = read_menu(read, write)
    if choice is None:
        LOGGER.error("Invalid menu choice")
        return EXIT_INVALID_CHOICE
    if choice is MenuChoice.QUIT:
        return EXIT_OK

    speed = Speed.from_choice(args.speed) if args.speed else read_speed(read, write)
    session = GameSession(Board(seed=args.seed), speed=speed)
    score = play(session)
    write(f"Score : {score}")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
