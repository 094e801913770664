"""Abstract player interface for human or AI controllers."""

try:
    from utils import timer
except ImportError:
    from Gobang_AI.utils import timer


class Player:
    def __init__(self, color):
        self.color = color

    def next_move(self, board, deadline=None):
        """Return (row, col) for next move within time limit."""
        raise NotImplementedError

    def reset(self):
        """Called when the session starts a new game."""


class HumanPlayer(Player):
    def __init__(self, color, read_line=None):
        super().__init__(color)
        self._read_line = read_line or input

    def next_move(self, board, deadline=None):
        """Text-input player with deadline guard (raises TimeoutError on timeout)."""
        prompt = "Enter move as 'row col' (0-indexed): "
        raw = self._read_line(prompt).strip()
        if timer.expired(deadline):
            raise TimeoutError("Move exceeded allotted time")

        try:
            row_str, col_str = raw.replace(",", " ").split()
            return int(row_str), int(col_str)
        except ValueError as exc:
            raise ValueError("Invalid input format; expected two integers") from exc
