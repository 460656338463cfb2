import numpy as np

from termtris.board import EMPTY, HEIGHT, LINE_BONUS, WALL, WIDTH, Board
from termtris.tetromino import ShapeTag


BOTTOM = HEIGHT - 3  # lowest playable row


def _fill_row(board: Board, row: int, skip: tuple[int, ...] = ()):
    for col in range(1, WIDTH - 2):
        if col not in skip:
            board.set_cell(row, col)


def _interior(board: Board, row: int) -> list[int]:
    return board.grid[row, 1 : WIDTH - 2].tolist()


def test_single_line_scores_bonus_and_shifts_window():
    board = Board(first=ShapeTag.O)
    _fill_row(board, BOTTOM)
    board.set_cell(BOTTOM - 1, 1)  # marker directly above the full row
    board.set_cell(BOTTOM - 4, 2)  # marker just above the shift window
    before = board.grid.copy()

    assert board.clear_completed_lines() == 1
    assert board.score == LINE_BONUS

    for k in range(4):
        assert np.array_equal(board.grid[BOTTOM - k], before[BOTTOM - 1 - k])
    # Rows above the window are not cascaded, so the top of the window is
    # duplicated rather than emptied.
    assert np.array_equal(board.grid[BOTTOM - 4], before[BOTTOM - 4])
    assert _interior(board, BOTTOM)[0] == WALL
    assert _interior(board, BOTTOM - 3)[1] == WALL


def test_incomplete_rows_are_left_alone():
    board = Board(first=ShapeTag.O)
    _fill_row(board, BOTTOM, skip=(4,))
    before = board.grid.copy()
    assert board.clear_completed_lines() == 0
    assert board.score == 0
    assert np.array_equal(board.grid, before)


def test_each_completed_row_scores_independently():
    board = Board(first=ShapeTag.O)
    _fill_row(board, BOTTOM - 1)
    _fill_row(board, BOTTOM)
    assert board.clear_completed_lines() == 2
    assert board.score == 2 * LINE_BONUS
    assert _interior(board, BOTTOM) == [EMPTY] * (WIDTH - 3)
    assert _interior(board, BOTTOM - 1) == [EMPTY] * (WIDTH - 3)


def test_window_stops_at_top_row():
    board = Board(first=ShapeTag.O)
    board.set_cell(0, 1)
    _fill_row(board, 2)
    before = board.grid.copy()
    assert board.clear_completed_lines() == 1
    assert np.array_equal(board.grid[2], before[1])
    assert np.array_equal(board.grid[1], before[0])
    assert np.array_equal(board.grid[0], before[0])


def test_locking_piece_completes_line():
    board = Board(first=ShapeTag.I, seed=5)
    _fill_row(board, BOTTOM, skip=(5,))

    falls = 0
    while not board.lock_if_grounded():
        falls += 1
    assert falls == 15
    assert board.score == LINE_BONUS
    # The locked I column was pulled down one row; the row from above the
    # window refilled the top of it.
    assert np.all(board.grid[BOTTOM - 2 : BOTTOM + 1, 5] == WALL)
    assert _interior(board, BOTTOM - 3) == [EMPTY] * (WIDTH - 3)
    assert _interior(board, BOTTOM) == [EMPTY] * 4 + [WALL] + [EMPTY] * 4
