"""curses front-end for the game.

A thin adapter: it maps key presses to :class:`~termtris.session.Command`
values, draws the text frame from :mod:`termtris.utils` with colour, and shows
the game-over banner.  All game rules live in the board and the session.
"""

from __future__ import annotations

import curses
import logging
import time
from typing import Dict, Optional

from .board import EMPTY, WALL, Board
from .session import Command, GameSession
from .utils import (
    GAME_OVER_LINES,
    LEGEND,
    TEXT_COLOR,
    WALL_COLOR,
    ConsoleColor,
    cell_glyph,
    piece_color,
    render_grid,
)


LOGGER = logging.getLogger(__name__)

# Seconds to sleep between polls so the loop does not spin a whole core.
POLL_INTERVAL = 0.001

KEY_COMMANDS: Dict[int, Command] = {
    curses.KEY_LEFT: Command.LEFT,
    curses.KEY_RIGHT: Command.RIGHT,
    curses.KEY_DOWN: Command.DOWN,
    curses.KEY_UP: Command.ROTATE,
    ord("q"): Command.QUIT,
}

ENTER_KEYS = (curses.KEY_ENTER, 10, 13)

# Console palette entries mapped onto the eight curses colours.
_CURSES_COLORS: Dict[ConsoleColor, int] = {
    ConsoleColor.BLUE: curses.COLOR_BLUE,
    ConsoleColor.GREEN: curses.COLOR_GREEN,
    ConsoleColor.CYAN: curses.COLOR_CYAN,
    ConsoleColor.RED: curses.COLOR_RED,
    ConsoleColor.MAGENTA: curses.COLOR_MAGENTA,
    ConsoleColor.BROWN: curses.COLOR_YELLOW,
    ConsoleColor.GREY: curses.COLOR_WHITE,
    ConsoleColor.WHITE: curses.COLOR_WHITE,
}


def command_for_key(key: int) -> Optional[Command]:
    """Return the command bound to ``key`` or ``None``."""

    return KEY_COMMANDS.get(key)


class TerminalRunner:
    """Drive a :class:`GameSession` inside a curses screen."""

    def __init__(self, stdscr, session: GameSession) -> None:
        self._screen = stdscr
        self.session = session
        self._pairs: Dict[ConsoleColor, int] = {}

    def _init_curses(self) -> None:
        curses.curs_set(0)
        self._screen.nodelay(True)
        self._screen.keypad(True)
        if curses.has_colors():
            curses.start_color()
            curses.use_default_colors()
            for pair, (console, color) in enumerate(_CURSES_COLORS.items(), start=1):
                curses.init_pair(pair, color, -1)
                self._pairs[console] = pair
        else:
            LOGGER.info("Terminal has no colour support; drawing monochrome")

    def _attr(self, color: ConsoleColor) -> int:
        pair = self._pairs.get(color)
        if pair is None:
            return curses.A_NORMAL
        attr = curses.color_pair(pair)
        if color is ConsoleColor.WHITE:
            attr |= curses.A_BOLD
        return attr

    def _put(self, row: int, col: int, text: str, attr: int = curses.A_NORMAL) -> None:
        try:
            self._screen.addstr(row, col, text, attr)
        except curses.error:
            # Terminal smaller than the frame; the clipped part is not drawn.
            pass

    def poll(self) -> Optional[Command]:
        key = self._screen.getch()
        if key == -1:
            return None
        return command_for_key(key)

    def draw(self, board: Board) -> None:
        self._screen.erase()
        block_attr = self._attr(piece_color(board.active.index if board.active else 0))
        wall_attr = self._attr(WALL_COLOR)
        for r, row in enumerate(render_grid(board)):
            for c, value in enumerate(row):
                if value == EMPTY:
                    continue
                self._put(r, c, cell_glyph(value), wall_attr if value == WALL else block_attr)
        text_attr = self._attr(TEXT_COLOR)
        line = board.height
        self._put(line, 0, f"Score : {board.score}", text_attr)
        for offset, legend in enumerate(LEGEND, start=2):
            self._put(line + offset, 0, legend, text_attr)
        self._screen.refresh()

    def game_over_screen(self) -> None:
        """Show the game-over banner and block until Enter is pressed."""

        self._screen.erase()
        attr = self._attr(ConsoleColor.RED)
        for offset, text in enumerate(GAME_OVER_LINES):
            self._put(10 + offset, 10, text, attr)
        self._screen.refresh()
        self._screen.nodelay(False)
        while self._screen.getch() not in ENTER_KEYS:
            pass

    def run(self) -> int:
        self._init_curses()
        score = self.session.run(self.poll, self.draw, idle=lambda: time.sleep(POLL_INTERVAL))
        if self.session.game_over:
            self.game_over_screen()
        return score


def play(session: GameSession) -> int:
    """Run ``session`` in a curses screen and return the final score."""

    return curses.wrapper(lambda stdscr: TerminalRunner(stdscr, session).run())
