"""Game session: board ownership, turn order, outcome, and the play loop."""

import time
try:
    from Board import Board
    from ai.zobrist import ZobristTable
    from engine import referee, rules
    from engine.rules import GameOutcome
    from utils import timer
except ImportError:
    from Gobang_AI.Board import Board
    from Gobang_AI.ai.zobrist import ZobristTable
    from Gobang_AI.engine import referee, rules
    from Gobang_AI.engine.rules import GameOutcome
    from Gobang_AI.utils import timer


COLOR_NAMES = {-1: "Black", 1: "White"}


class GobangGame:
    """
    One game at a fixed board size. Changing the size means creating a new
    session; reset() only clears the board for a rematch.
    """

    def __init__(self, board_size=15, black_player=None, white_player=None, move_timeout=None,
                 logger=print, allow_overline=True, renderer=None, result_pause=0.0, seed=None):
        self.zobrist = ZobristTable(board_size, seed=seed)
        self.board = Board(size=board_size, zobrist=self.zobrist)
        self.move_timeout = move_timeout
        self.players = {-1: black_player, 1: white_player}
        self.logger = logger
        self.allow_overline = allow_overline
        self.renderer = renderer
        self.result_pause = result_pause
        self.current_color = -1  # black starts
        self.outcome = GameOutcome.IN_PROGRESS

    @property
    def game_over(self):
        return self.outcome.is_over

    @property
    def last_move(self):
        return self.board.last_move

    def reset(self):
        self.board = Board(size=self.board.size, zobrist=self.zobrist)
        self.current_color = -1
        self.outcome = GameOutcome.IN_PROGRESS
        for player in self.players.values():
            if player is not None:
                player.reset()

    def is_draw(self):
        return rules.is_draw(self.board, self.allow_overline)

    def place(self, row, col, color=None):
        """
        Place a stone for the side to move (or `color`, which must be the side to move).
        Returns False for occupied/off-board cells, wrong turn, or a finished game.
        """
        color = self.current_color if color is None else color
        if color != self.current_color:
            return False
        try:
            referee.check_move((row, col), self.board, color, game_over=self.game_over)
        except ValueError:
            return False
        self.board.place(row, col, color)
        self.outcome = rules.outcome_after_move(self.board, row, col, color, self.allow_overline)
        if not self.game_over:
            self.current_color = -color
        return True

    def play(self):
        """Run a single game. Returns -1 (black win), 1 (white win), or 0 (draw)."""
        while not self.game_over:
            color = self.current_color
            if self.renderer:
                self.renderer(self.board, self.last_move, color, self.outcome)

            player = self.players[color]
            deadline = timer.deadline_after(self.move_timeout)

            try:
                move = player.next_move(self.board, deadline=deadline)
                referee.check_move(move, self.board, color, deadline)
            except (TimeoutError, ValueError) as exc:
                self.logger(f"Disqualification: {COLOR_NAMES[color]} - {exc}")
                self.outcome = rules.outcome_for_winner(-color)  # opponent wins
                break

            self.place(*move, color)
            self.logger(f"Move {self.board.move_count}: {COLOR_NAMES[color][0]} {move}")

            if self.outcome is GameOutcome.DRAW:
                self.logger("Result: Draw (board full)")
            elif self.game_over:
                self.logger(f"Winner: {COLOR_NAMES[color]}")

        if self.renderer:
            self.renderer(self.board, self.last_move, self.current_color, self.outcome)
            if self.result_pause:
                time.sleep(self.result_pause)
        return self.outcome.winner
