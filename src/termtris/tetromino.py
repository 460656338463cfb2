"""Tetromino catalog and the active falling piece.

Every piece lives in a 4x4 occupancy matrix.  The catalog holds one immutable
template per shape; the piece on the board owns a private copy of the matrix
which is the only thing rotation ever touches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

Matrix = NDArray[np.int8]

# Edge length of the square piece matrix.
PIECE_SIZE = 4


class ShapeTag(str, Enum):
    """Enumeration of the seven piece shapes."""

    O = "O"
    L = "L"
    M = "M"
    N = "N"
    T = "T"
    I = "I"
    Z = "Z"


@dataclass(frozen=True, eq=False)
class PieceShape:
    """Catalog entry: a shape tag and its read-only 4x4 template."""

    tag: ShapeTag
    matrix: Matrix

    @classmethod
    def from_rows(cls, tag: ShapeTag, rows: Tuple[str, ...]) -> "PieceShape":
        """Build a template from ``"0110"``-style row strings."""

        matrix = np.array([[int(ch) for ch in row] for row in rows], dtype=np.int8)
        if matrix.shape != (PIECE_SIZE, PIECE_SIZE):
            raise ValueError(f"{tag.value} template must be {PIECE_SIZE}x{PIECE_SIZE}")
        matrix.setflags(write=False)
        return cls(tag, matrix)


# Catalog order is fixed: the index doubles as the colour hint for renderers.
_CATALOG: Tuple[PieceShape, ...] = (
    PieceShape.from_rows(ShapeTag.T, ("0000", "0100", "1110", "0000")),
    PieceShape.from_rows(ShapeTag.M, ("0100", "0110", "0010", "0000")),
    PieceShape.from_rows(ShapeTag.N, ("0010", "0110", "0100", "0000")),
    PieceShape.from_rows(ShapeTag.I, ("0100", "0100", "0100", "0100")),
    PieceShape.from_rows(ShapeTag.O, ("0000", "0110", "0110", "0000")),
    PieceShape.from_rows(ShapeTag.L, ("0000", "0110", "0010", "0010")),
    PieceShape.from_rows(ShapeTag.Z, ("0000", "0110", "0100", "0100")),
)

SHAPE_COUNT = len(_CATALOG)


def all_shapes() -> Tuple[PieceShape, ...]:
    """Return the seven piece templates in catalog order."""

    return _CATALOG


def shape_index(tag: ShapeTag) -> int:
    """Return the catalog index of ``tag``."""

    for index, shape in enumerate(_CATALOG):
        if shape.tag is tag:
            return index
    raise ValueError(f"Unknown shape: {tag!r}")


def rotate_clockwise(matrix: Matrix) -> Matrix:
    """Return ``matrix`` rotated 90 degrees clockwise.

    The square matrix is transposed and each row is then reversed.  The input
    is left untouched.
    """

    return np.ascontiguousarray(np.asarray(matrix).T[:, ::-1])


@dataclass(eq=False)
class ActivePiece:
    """The piece currently falling on the board."""

    index: int
    matrix: Matrix
    position: Tuple[int, int] = (0, 0)  # (x, y): column, row of the top-left corner
    tag: Optional[ShapeTag] = field(default=None)

    def __post_init__(self) -> None:
        if not 0 <= self.index < SHAPE_COUNT:
            raise ValueError(f"Shape index out of range: {self.index}")
        if self.tag is None:
            self.tag = _CATALOG[self.index].tag

    @classmethod
    def spawn(cls, index: int, position: Tuple[int, int] = (0, 0)) -> "ActivePiece":
        """Create a piece from catalog entry ``index`` with its own matrix copy."""

        if not 0 <= index < SHAPE_COUNT:
            raise ValueError(f"Shape index out of range: {index}")
        return cls(index, _CATALOG[index].matrix.copy(), position)

    @property
    def x(self) -> int:
        return self.position[0]

    @property
    def y(self) -> int:
        return self.position[1]

    def rotate(self) -> None:
        """Rotate the piece's own matrix clockwise in place."""

        self.matrix[...] = rotate_clockwise(self.matrix)

    def cells(self, x: Optional[int] = None, y: Optional[int] = None) -> List[Tuple[int, int]]:
        """Return ``(row, col)`` grid coordinates of the occupied cells.

        The anchor defaults to the piece's current position; pass ``x`` and
        ``y`` to probe a hypothetical one.
        """

        if x is None:
            x = self.x
        if y is None:
            y = self.y
        rows, cols = np.nonzero(self.matrix)
        return [(y + int(r), x + int(c)) for r, c in zip(rows, cols)]
