"""Move validation, time control, and disqualification handling."""

try:
    from utils import timer
except ImportError:
    from Gobang_AI.utils import timer


def check_move(move, board, color, deadline=None, game_over=False):
    """
    Validate a move against time, game state, bounds, and occupancy.
    Raises ValueError/TimeoutError on invalid moves.
    """
    if timer.expired(deadline):
        raise TimeoutError("Move exceeded allotted time")
    if game_over:
        raise ValueError("Game is already over")
    if color not in (-1, 1):
        raise ValueError("color must be -1 (black) or 1 (white)")

    try:
        row, col = move
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Malformed move: {move!r}") from exc
    if not board.in_bounds(row, col):
        raise ValueError("Move out of bounds")
    if not board.is_empty(row, col):
        raise ValueError("Cell already occupied")

    return True
