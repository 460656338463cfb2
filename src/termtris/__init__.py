"""Terminal falling-block puzzle game."""

import logging

from .board import Board, LINE_BONUS, WALL
from .tetromino import ActivePiece, PieceShape, ShapeTag, all_shapes, rotate_clockwise
from .session import Command, GameSession, Speed
from .utils import format_frame, render_grid

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Board",
    "LINE_BONUS",
    "WALL",
    "ActivePiece",
    "PieceShape",
    "ShapeTag",
    "all_shapes",
    "rotate_clockwise",
    "Command",
    "GameSession",
    "Speed",
    "format_frame",
    "render_grid",
]
