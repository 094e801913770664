"""Tests for per-move timeouts and referee enforcement."""

import time
import pytest

from Gobang_AI.Board import Board
from Gobang_AI.engine import referee
from Gobang_AI.utils import timer


def test_timeout_rejected():
    b = Board(size=15)
    deadline = time.time() - 0.1
    with pytest.raises(TimeoutError):
        referee.check_move((7, 7), b, -1, deadline)


def test_valid_move_passes():
    b = Board(size=15)
    deadline = time.time() + 1
    assert referee.check_move((7, 7), b, -1, deadline) is True
    assert referee.check_move((0, 0), b, 1) is True


@pytest.mark.parametrize("move", [(15, 0), (-1, 3), None, (1,), "a"])
def test_bad_moves_rejected(move):
    b = Board(size=15)
    with pytest.raises(ValueError):
        referee.check_move(move, b, -1)


def test_occupied_and_finished_rejected():
    b = Board(size=15)
    b.place(7, 7, -1)
    with pytest.raises(ValueError):
        referee.check_move((7, 7), b, 1)
    with pytest.raises(ValueError):
        referee.check_move((0, 0), b, 1, game_over=True)
    with pytest.raises(ValueError):
        referee.check_move((0, 0), b, 2)


def test_deadline_helpers():
    assert timer.deadline_after(None) is None
    assert timer.deadline_after(0) is None
    assert timer.time_remaining(None) is None
    deadline = timer.deadline_after(10)
    assert 0 < timer.time_remaining(deadline) <= 10
    assert not timer.expired(deadline)
    assert not timer.expired(None)
    assert timer.expired(time.time() - 1)
