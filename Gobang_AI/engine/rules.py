"""Five-in-a-row rule checks: win after move, draw, and game outcome."""

import enum
from contextlib import contextmanager

try:
    from Board import Board
except ImportError:
    from Gobang_AI.Board import Board


class GameOutcome(enum.Enum):
    IN_PROGRESS = "in-progress"
    BLACK_WINS = "black-wins"
    WHITE_WINS = "white-wins"
    DRAW = "draw"

    @property
    def is_over(self):
        return self is not GameOutcome.IN_PROGRESS

    @property
    def winner(self):
        """Winning color (-1/1), 0 for a draw, None while in progress."""
        return {
            GameOutcome.BLACK_WINS: -1,
            GameOutcome.WHITE_WINS: 1,
            GameOutcome.DRAW: 0,
        }.get(self)


def outcome_for_winner(color):
    return GameOutcome.BLACK_WINS if color == -1 else GameOutcome.WHITE_WINS


@contextmanager
def simulate(board: Board, row: int, col: int, color: int):
    """Temporarily place a stone; always removed on exit."""
    board._push_stone(row, col, color)
    try:
        yield
    finally:
        board._pop_stone(row, col)


def is_win_after_move(board: Board, row: int, col: int, color: int, allow_overline: bool = True) -> bool:
    """Assumes stone is already placed."""
    return board.is_five_in_a_row(row, col, color, allow_overline=allow_overline)


def wins_if_placed(board: Board, row: int, col: int, color: int, allow_overline: bool = True) -> bool:
    """Would a stone of `color` at the empty cell (row, col) complete a winning line?"""
    if not board.is_empty(row, col):
        return False
    with simulate(board, row, col, color):
        return is_win_after_move(board, row, col, color, allow_overline)


def is_draw(board: Board, allow_overline: bool = True) -> bool:
    """Board full and no winning line for either side."""
    return board.is_full() and board.find_winner(allow_overline) == 0


def outcome_after_move(board: Board, row: int, col: int, color: int, allow_overline: bool = True) -> GameOutcome:
    if is_win_after_move(board, row, col, color, allow_overline):
        return outcome_for_winner(color)
    if board.is_full():
        return GameOutcome.DRAW
    return GameOutcome.IN_PROGRESS


def outcome_of(board: Board, allow_overline: bool = True) -> GameOutcome:
    """Outcome of an arbitrary snapshot (no last-move context)."""
    winner = board.find_winner(allow_overline)
    if winner:
        return outcome_for_winner(winner)
    if board.is_full():
        return GameOutcome.DRAW
    return GameOutcome.IN_PROGRESS
