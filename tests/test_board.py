from __future__ import annotations

import pytest

from connectron import Board, EMPTY


def test_drop_settles_from_the_bottom():
    board = Board(7, 6)
    assert board.drop(3, 0) == (5, True)
    assert board.drop(3, 1) == (4, True)
    assert board.cell(5, 3) == 0
    assert board.cell(4, 3) == 1


@pytest.mark.parametrize("column", [-1, 7, 100])
def test_drop_out_of_range_fails(column):
    board = Board(7, 6)
    assert board.drop(column, 0) == (-1, False)
    assert board == Board(7, 6)


def test_drop_into_full_column_fails_and_leaves_board_unchanged():
    board = Board(7, 6)
    for i in range(6):
        board.drop(2, i % 2)
    before = board.snapshot()
    assert board.drop(2, 0) == (-1, False)
    assert board == before


def test_full_board_rejects_every_column():
    board = Board(6, 6)
    for column in range(6):
        for i in range(6):
            assert board.drop(column, (column + i) % 3)[1]
    assert board.is_full()
    assert all(board.drop(column, 0) == (-1, False) for column in range(6))
    assert board.legal_columns() == []


def test_remove_clears_and_ignores_out_of_bounds():
    board = Board(6, 6)
    board.drop(0, 1)
    board.remove(5, 0)
    board.remove(6, 0)
    board.remove(0, -1)
    assert board.cell(5, 0) == EMPTY


def test_collapse_shifts_column_down():
    board = Board.from_rows([
        [-1] * 6,
        [-1] * 6,
        [-1] * 6,
        [2, -1, -1, -1, -1, -1],
        [1, -1, -1, -1, -1, -1],
        [0, -1, -1, -1, -1, -1],
    ])
    board.collapse(5, 0)
    assert [board.cell(r, 0) for r in range(6)] == [-1, -1, -1, -1, 2, 1]


def test_snapshot_is_independent():
    board = Board(6, 6)
    board.drop(1, 0)
    copy = board.snapshot()
    board.drop(1, 1)
    assert copy.cell(4, 1) == EMPTY
    assert board.cell(4, 1) == 1


def test_corners_are_only_the_four_extremes():
    board = Board(7, 6)
    corners = {(r, c) for r in range(6) for c in range(7) if board.is_corner(r, c)}
    assert corners == {(0, 0), (0, 6), (5, 0), (5, 6)}


@pytest.mark.parametrize("width,height", [(5, 6), (6, 5), (101, 6)])
def test_size_bounds(width, height):
    with pytest.raises(ValueError):
        Board(width, height)


def test_landing_row():
    board = Board(6, 6)
    assert board.landing_row(0) == 5
    for _ in range(6):
        board.drop(0, 0)
    assert board.landing_row(0) is None


def test_column_with_a_hole_under_counters_is_playable():
    board = Board(6, 6)
    for column in range(6):
        board.cells[0][column] = 0
    assert board.legal_columns() == list(range(6))
    assert not any(board.column_full(c) for c in range(6))
    assert not board.is_full()
    assert board.drop(2, 1) == (5, True)
