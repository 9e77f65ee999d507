import logging

import pytest

from tilerise.board import Board
from tilerise.gravity import FallStateError, check_falls, descend


def test_floating_stack_is_marked_falling():
    board = Board()
    board.set_tile(0, 0, 1)
    board.set_tile(2, 0, 2)
    board.set_tile(3, 0, 3)
    board.set_tile(4, 0, 4)
    assert check_falls(board) == 3
    assert not board.is_falling(0, 0)
    assert board.is_falling(2, 0)
    assert board.is_falling(3, 0)
    assert board.is_falling(4, 0)


def test_supported_tiles_do_not_fall():
    board = Board()
    board.load([[1, 2, 3] + [0] * 7, [2, 3, 1] + [0] * 7])
    assert check_falls(board) == 0
    assert board.falling_count() == 0


def test_check_falls_is_idempotent():
    board = Board()
    board.set_tile(0, 1, 1)
    board.set_tile(3, 1, 2)
    board.set_tile(5, 4, 3)
    first = check_falls(board)
    mask = board.falling.copy()
    second = check_falls(board)
    assert first == second == 2
    assert (board.falling == mask).all()


def test_descend_moves_one_row_until_landing():
    board = Board()
    board.set_tile(0, 0, 1)
    board.set_tile(3, 0, 2)
    assert check_falls(board) == 1

    result = descend(board)
    assert board.get_tile(2, 0) == 2
    assert board.get_tile(3, 0) == 0
    assert result.moved == 1
    assert result.landed == 0
    assert board.is_falling(2, 0)
    assert not board.is_falling(3, 0)

    result = descend(board)
    assert board.get_tile(1, 0) == 2
    assert result.landed == 1
    assert board.falling_count() == 0


def test_stack_falls_together():
    board = Board()
    for row, code in zip(range(2, 5), (1, 2, 3)):
        board.set_tile(row, 0, code)
    count = check_falls(board)
    assert count == 3
    removed = 0
    for _ in range(2):
        removed += descend(board).removed
    assert [board.get_tile(r, 0) for r in range(4)] == [1, 2, 3, 0]
    assert removed == 3
    assert board.falling_count() == 0


def test_tile_reaching_bottom_lands():
    board = Board()
    board.set_tile(1, 5, 4)
    check_falls(board)
    result = descend(board)
    assert board.get_tile(0, 5) == 4
    assert result.landed == 1


def test_stale_flag_is_logged_and_healed(caplog):
    board = Board()
    board.set_falling(4, 2, True)
    with caplog.at_level(logging.WARNING, logger="tilerise.gravity"):
        result = descend(board)
    assert result.stale == 1
    assert result.removed == 1
    assert board.falling_count() == 0
    assert "empty but registered as falling" in "".join(caplog.messages)


def test_stale_flag_raises_in_strict_mode():
    board = Board()
    board.set_falling(4, 2, True)
    with pytest.raises(FallStateError):
        descend(board, strict=True)
