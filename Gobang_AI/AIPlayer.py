"""Computer player backed by the GobangAI engine."""

try:
    from Player import Player
    from ai.engine import GobangAI
except ImportError:
    from Gobang_AI.Player import Player
    from Gobang_AI.ai.engine import GobangAI


class AIPlayer(Player):
    def __init__(self, color=1, config=None, engine=None):
        super().__init__(color)
        self.engine = engine if engine is not None else GobangAI(color, config)

    def next_move(self, board, deadline=None):
        """Answer before `deadline`: the engine's budget and watchdog are both capped by it."""
        move = self.engine.choose_move_sync(board, self.color, deadline=deadline)
        if move is None:
            raise ValueError("No legal moves left for AI")
        return move

    def reset(self):
        self.engine.reset()
