"""Rendering helpers shared by the front ends."""

from __future__ import annotations

from enum import IntEnum
from typing import List

from .board import EMPTY, WALL, Board


WALL_GLYPH = "X"
BLOCK_GLYPH = "O"
EMPTY_GLYPH = " "

LEGEND = (
    "arrow keys",
    "left: [←]",
    "down:[↓]",
    "right:[→]",
    "Rotation:[↑]",
)

GAME_OVER_LINES = (
    " ~ Game Over. It's ok, you'll live.~",
    "",
    "Press enter to exit",
)


class ConsoleColor(IntEnum):
    """Classic 16-colour console palette, in console attribute order."""

    BLACK = 0
    BLUE = 1
    GREEN = 2
    CYAN = 3
    RED = 4
    MAGENTA = 5
    BROWN = 6
    GREY = 7
    DARKGREY = 8
    LIGHTBLUE = 9
    LIGHTGREEN = 10
    LIGHTCYAN = 11
    LIGHTRED = 12
    LIGHTMAGENTA = 13
    YELLOW = 14
    WHITE = 15


WALL_COLOR = ConsoleColor.WHITE
TEXT_COLOR = ConsoleColor.GREY


def piece_color(index: int) -> ConsoleColor:
    """Return the colour hint for catalog entry ``index``.

    Index ``0`` would be black on black, so it is drawn green instead.
    """

    if index == 0:
        return ConsoleColor.GREEN
    return ConsoleColor(index)


def cell_glyph(value: int) -> str:
    """Return the character drawn for a grid value."""

    if value == EMPTY:
        return EMPTY_GLYPH
    if value == WALL:
        return WALL_GLYPH
    return BLOCK_GLYPH


def render_grid(board: Board) -> List[List[int]]:
    """Return a copy of the live grid as nested lists.

    The live grid already carries the active piece, so renderers need no
    overlay step and cannot disturb the board.
    """

    return board.snapshot().tolist()


def format_frame(board: Board) -> List[str]:
    """Return the full text frame: grid rows, score line and key legend."""

    lines = ["".join(cell_glyph(value) for value in row) for row in render_grid(board)]
    lines.append(f"Score : {board.score}")
    lines.append("")
    lines.extend(LEGEND)
    return lines
