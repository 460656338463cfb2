"""Board representation for the playfield.

The board keeps two grids of the same shape:

``grid``
    The live playfield.  Walls and locked cells hold ``WALL``; the active
    piece's footprint is added on top, so a cell reads ``1`` while the piece
    covers it and anything above ``1`` means two things overlap.
``stage``
    The settled playfield.  It is rewritten from ``grid`` at the start of each
    clear pass and copied back at its end, so between passes it holds only
    walls and locked cells.  Collision tests read this grid, which is why the
    active piece never collides with itself.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .tetromino import PIECE_SIZE, SHAPE_COUNT, ActivePiece, Matrix, ShapeTag, shape_index


LOGGER = logging.getLogger(__name__)

# Dimensions of the grid array, boundary included.
WIDTH = 12
HEIGHT = 21

EMPTY = 0
WALL = 9

# Score awarded for every completed row found in a clear pass.
LINE_BONUS = 10
# Rows moved down when a line clears.  Matches the piece height rather than
# the number of cleared rows, so only clears inside this window compact fully.
SHIFT_WINDOW = PIECE_SIZE

# Top-left anchor of every freshly spawned piece.
SPAWN_X = PIECE_SIZE
SPAWN_Y = 0

Grid = NDArray[np.int16]
ShapeRef = Union[int, ShapeTag]


def create_walled_grid() -> Grid:
    """Return a new grid with the boundary walls drawn in.

    Column ``0``, column ``WIDTH - 2`` and row ``HEIGHT - 2`` are walls.  The
    last row and column of the array lie outside the play area and stay empty.
    """

    grid = np.full((HEIGHT, WIDTH), EMPTY, dtype=np.int16)
    grid[: HEIGHT - 1, 0] = WALL
    grid[: HEIGHT - 1, WIDTH - 2] = WALL
    grid[HEIGHT - 2, : WIDTH - 1] = WALL
    return grid


class Board:
    """Playfield grids, the active piece and the score."""

    width: int = WIDTH
    height: int = HEIGHT

    def __init__(
        self,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        first: Optional[ShapeRef] = None,
    ) -> None:
        self.rng = rng if rng is not None else random.Random(seed)
        self.grid: Grid
        self.stage: Grid
        self.score: int
        self.active: Optional[ActivePiece]
        self.initialize(first)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------
    def initialize(self, first: Optional[ShapeRef] = None) -> None:
        """Reset walls and score and spawn the first piece."""

        self.grid = create_walled_grid()
        self.stage = self.grid.copy()
        self.score = 0
        self.active = None
        self.spawn(first)

    def spawn(self, shape: Optional[ShapeRef] = None) -> ActivePiece:
        """Spawn a new active piece at the spawn anchor.

        ``shape`` may be a catalog index or a :class:`ShapeTag`; when omitted
        the shape is drawn uniformly from the catalog.  The footprint is added
        without a collision check: overlapping locked cells is exactly what
        :meth:`is_full` looks for.
        """

        if shape is None:
            index = self.rng.randrange(SHAPE_COUNT)
        elif isinstance(shape, ShapeTag):
            index = shape_index(shape)
        else:
            index = int(shape)
        self.active = ActivePiece.spawn(index, (SPAWN_X, SPAWN_Y))
        self._add_footprint(self.active.matrix, SPAWN_X, SPAWN_Y, 1)
        LOGGER.debug("Spawned %s", self.active.tag.value)
        return self.active

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    def _in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def set_cell(self, row: int, col: int, value: int = WALL) -> None:
        """Write a settled cell into both grids.

        Raises:
            IndexError: If the coordinates are outside the grid.
        """
        if self._in_bounds(row, col):
            self.grid[row, col] = value
            self.stage[row, col] = value
        else:
            raise IndexError("Cell out of bounds")

    def snapshot(self) -> Grid:
        """Return a copy of the live grid for renderers."""

        return self.grid.copy()

    @property
    def position(self) -> Tuple[int, int]:
        """Anchor ``(x, y)`` of the active piece."""

        return self._piece().position

    # ------------------------------------------------------------------
    # Footprint bookkeeping
    # ------------------------------------------------------------------
    def _piece(self) -> ActivePiece:
        if self.active is None:
            raise RuntimeError("No active piece")
        return self.active

    @staticmethod
    def _occupied(matrix: Matrix, x: int, y: int) -> Tuple[np.ndarray, np.ndarray]:
        rows, cols = np.nonzero(matrix)
        return rows + y, cols + x

    def _occupied_in_bounds(self, matrix: Matrix, x: int, y: int) -> Tuple[np.ndarray, np.ndarray]:
        rows, cols = self._occupied(matrix, x, y)
        if (
            np.any(rows < 0)
            or np.any(rows >= self.height)
            or np.any(cols < 0)
            or np.any(cols >= self.width)
        ):
            raise IndexError(f"Piece anchored at ({x}, {y}) leaves the grid")
        return rows, cols

    def _add_footprint(self, matrix: Matrix, x: int, y: int, sign: int) -> None:
        rows, cols = self._occupied_in_bounds(matrix, x, y)
        self.grid[rows, cols] += sign

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------
    def is_colliding(self, x: int, y: int) -> bool:
        """Return ``True`` if the active piece anchored at ``(x, y)`` hits anything.

        Only occupied cells of the piece matrix are tested, against the
        settled grid.  Cells outside the array count as occupied, which keeps
        off-board probes from ever being accepted.
        """

        for row, col in self._piece().cells(x, y):
            if not self._in_bounds(row, col):
                return True
            if self.stage[row, col] != EMPTY:
                return True
        return False

    def move(self, x: int, y: int) -> None:
        """Move the active piece to anchor ``(x, y)`` without any collision check.

        Callers that need validation test :meth:`is_colliding` first.

        Raises:
            IndexError: If the footprint would leave the grid.
        """

        piece = self._piece()
        self._occupied_in_bounds(piece.matrix, x, y)
        self._add_footprint(piece.matrix, piece.x, piece.y, -1)
        piece.position = (x, y)
        self._add_footprint(piece.matrix, x, y, 1)

    def rotate(self) -> bool:
        """Rotate the active piece clockwise.

        Returns ``True`` when the rotation was rejected because the rotated
        piece would collide; the piece and the grid are then left untouched.
        Returns ``False`` once the rotation has been applied.
        """

        piece = self._piece()
        previous = piece.matrix.copy()
        piece.rotate()
        if self.is_colliding(piece.x, piece.y):
            piece.matrix[...] = previous
            return True
        self._add_footprint(previous, piece.x, piece.y, -1)
        self._add_footprint(piece.matrix, piece.x, piece.y, 1)
        return False

    # ------------------------------------------------------------------
    # Locking and line clears
    # ------------------------------------------------------------------
    def lock_if_grounded(self) -> bool:
        """Advance the active piece by one gravity step.

        If the row below is blocked the piece is locked, completed lines are
        cleared and the next piece is spawned; ``True`` is returned.  Otherwise
        the piece moves down one row and ``False`` is returned.
        """

        piece = self._piece()
        if not self.is_colliding(piece.x, piece.y + 1):
            self.move(piece.x, piece.y + 1)
            return False
        self.lock()
        self.clear_completed_lines()
        self.spawn()
        return True

    def lock(self) -> None:
        """Turn every occupied cell of the active piece into ``WALL``."""

        piece = self._piece()
        for row, col in piece.cells():
            self.grid[row, col] = WALL
        LOGGER.debug("Locked %s at %s", piece.tag.value, piece.position)

    def clear_completed_lines(self) -> int:
        """Score and compact completed rows; return how many were found.

        Rows between the top row and the bottom wall are scanned top to bottom
        on the staging grid.  A row is complete when every cell between the
        side walls is nonzero.  Each completed row scores ``LINE_BONUS`` and
        the ``SHIFT_WINDOW`` rows ending at it are pulled down by one row; rows
        higher up are not cascaded.  A window reaching above the top row stops
        at row ``0``.
        """

        self.stage[...] = self.grid
        cleared = 0
        for row in range(1, self.height - 2):
            if not np.all(self.stage[row, 1 : self.width - 1] != EMPTY):
                continue
            cleared += 1
            self.score += LINE_BONUS
            for k in range(SHIFT_WINDOW):
                source = row - 1 - k
                if source < 0:
                    break
                self.stage[row - k] = self.stage[source]
        self.grid[...] = self.stage
        if cleared:
            LOGGER.debug("Cleared %d row(s). Score: %d", cleared, self.score)
        return cleared

    def is_full(self) -> bool:
        """Return ``True`` if any spawn-region cell holds a value above one."""

        region = self.grid[SPAWN_Y : SPAWN_Y + PIECE_SIZE, SPAWN_X : SPAWN_X + PIECE_SIZE]
        return bool(np.any(region > 1))
