"""Win, draw, and outcome checks for both five-in-a-row rule variants."""

import pytest

from Gobang_AI.Board import Board
from Gobang_AI.engine import rules
from Gobang_AI.engine.rules import GameOutcome


def test_outcome_after_winning_move():
    b = Board(size=15)
    for c in range(5):
        b.place(7, c, 1)
    assert rules.is_win_after_move(b, 7, 4, 1)
    assert rules.outcome_after_move(b, 7, 4, 1) is GameOutcome.WHITE_WINS
    assert GameOutcome.WHITE_WINS.winner == 1
    assert GameOutcome.WHITE_WINS.is_over


def test_overline_wins_only_when_allowed():
    b = Board(size=15)
    for c in (0, 1, 2, 4, 5):
        b.place(7, c, -1)
    assert rules.wins_if_placed(b, 7, 3, -1, allow_overline=True)
    assert not rules.wins_if_placed(b, 7, 3, -1, allow_overline=False)
    # Probing never leaves a stone behind.
    assert b.is_empty(7, 3)
    assert b.move_count == 5


def test_wins_if_placed_ignores_occupied_cells():
    b = Board(size=9)
    for c in range(4):
        b.place(0, c, -1)
    b.place(0, 4, 1)
    assert not rules.wins_if_placed(b, 0, 4, -1)


def test_simulate_restores_board_on_error():
    b = Board(size=9)
    h = b.hash
    with pytest.raises(RuntimeError):
        with rules.simulate(b, 4, 4, -1):
            assert b.cells[4][4] == -1
            raise RuntimeError("boom")
    assert b.is_empty(4, 4)
    assert b.hash == h


def test_draw_on_full_board_without_five():
    cells = [[-1 if ((c // 2) + r) % 2 == 0 else 1 for c in range(15)] for r in range(15)]
    b = Board.from_cells(cells)
    assert rules.is_draw(b)
    assert rules.outcome_of(b) is GameOutcome.DRAW
    assert GameOutcome.DRAW.winner == 0


def test_in_progress_outcome():
    b = Board(size=9)
    assert rules.outcome_of(b) is GameOutcome.IN_PROGRESS
    b.place(4, 4, -1)
    assert rules.outcome_after_move(b, 4, 4, -1) is GameOutcome.IN_PROGRESS
    assert not GameOutcome.IN_PROGRESS.is_over
    assert GameOutcome.IN_PROGRESS.winner is None
    assert not rules.is_draw(b)


def test_outcome_of_classic_rule_ignores_overline():
    b = Board(size=9)
    for r in range(6):
        b.place(r, 0, -1)
    assert rules.outcome_of(b) is GameOutcome.BLACK_WINS
    assert rules.outcome_of(b, allow_overline=False) is GameOutcome.IN_PROGRESS
