"""Tests for GobangGame turn handling and end-of-game state."""

import time

import pytest

from Gobang_AI.AIPlayer import AIPlayer
from Gobang_AI.GobangGame import GobangGame
from Gobang_AI.Player import HumanPlayer, Player
from Gobang_AI.engine.rules import GameOutcome
from Gobang_AI.utils.settings import EngineConfig


class SeqPlayer(Player):
    """Deterministic player that plays a fixed move sequence."""

    def __init__(self, color, moves, delay=0.0):
        super().__init__(color)
        self._moves = list(moves)
        self._idx = 0
        self.delay = delay
        self.resets = 0

    def next_move(self, board, deadline=None):
        if self._idx >= len(self._moves):
            raise ValueError("No more scripted moves")
        if self.delay:
            time.sleep(self.delay)
        mv = self._moves[self._idx]
        self._idx += 1
        return mv

    def reset(self):
        self.resets += 1
        self._idx = 0


def test_final_render_shows_winner():
    black_moves = [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)]
    white_moves = [(0, 1), (1, 1), (2, 1), (3, 1)]

    black = SeqPlayer(-1, black_moves)
    white = SeqPlayer(1, white_moves)

    final = []

    def renderer(board, last_move, current_color, outcome):
        if outcome.is_over:
            final.append((current_color, last_move))

    logs = []
    game = GobangGame(
        board_size=5,
        move_timeout=5.0,
        black_player=black,
        white_player=white,
        renderer=renderer,
        logger=logs.append,
    )
    result = game.play()

    assert result == -1
    assert game.outcome is GameOutcome.BLACK_WINS
    assert final == [(-1, (4, 0))]
    assert logs[-1] == "Winner: Black"


def test_place_enforces_turn_and_occupancy():
    game = GobangGame(board_size=9)
    assert game.place(4, 4)
    assert not game.place(4, 4)  # occupied
    assert not game.place(0, 0, color=-1)  # white to move
    assert not game.place(9, 0)  # off board
    assert game.place(0, 0, color=1)
    assert game.current_color == -1
    assert game.last_move == (0, 0)


def test_no_moves_after_game_over():
    game = GobangGame(board_size=9)
    for r in range(4):
        game.place(r, 0)
        game.place(r, 8)
    assert game.place(4, 0)
    assert game.game_over
    assert game.outcome.winner == -1
    assert not game.place(5, 5)


def test_classic_rule_overline_keeps_game_going():
    game = GobangGame(board_size=9, allow_overline=False)
    for c in (0, 1, 2, 4, 5):
        game.place(0, c)
        game.place(8, c)
    assert game.place(0, 3)  # six in a row
    assert not game.game_over


def test_illegal_move_disqualifies():
    black = SeqPlayer(-1, [(2, 2), (2, 3)])
    white = SeqPlayer(1, [(2, 2)])
    logs = []
    game = GobangGame(board_size=5, black_player=black, white_player=white, logger=logs.append)
    assert game.play() == -1
    assert any("Disqualification: White" in line for line in logs)


def test_slow_player_times_out():
    black = SeqPlayer(-1, [(2, 2)], delay=0.05)
    white = SeqPlayer(1, [(0, 0)])
    game = GobangGame(board_size=5, black_player=black, white_player=white, move_timeout=0.01, logger=lambda _: None)
    assert game.play() == 1


def test_reset_clears_board_and_players():
    black = SeqPlayer(-1, [(0, 0)])
    white = SeqPlayer(1, [(1, 1)])
    game = GobangGame(board_size=5, black_player=black, white_player=white)
    game.place(2, 2)
    h = game.board.hash
    game.reset()
    assert game.board.move_count == 0
    assert game.board.hash == 0 != h
    assert game.current_color == -1
    assert (black.resets, white.resets) == (1, 1)


def test_draw_detected():
    cells = [[-1 if ((c // 2) + r) % 2 == 0 else 1 for c in range(6)] for r in range(6)]
    game = GobangGame(board_size=6)
    blacks = [(r, c) for r in range(6) for c in range(6) if cells[r][c] == -1]
    whites = [(r, c) for r in range(6) for c in range(6) if cells[r][c] == 1]
    assert len(blacks) == len(whites)
    for b_move, w_move in zip(blacks, whites):
        assert game.place(*b_move)
        assert game.place(*w_move)
    assert game.is_draw()
    assert game.outcome is GameOutcome.DRAW
    assert game.outcome.winner == 0


def test_human_player_parses_input():
    player = HumanPlayer(-1, read_line=lambda prompt: " 3, 4 ")
    assert player.next_move(None) == (3, 4)
    bad = HumanPlayer(-1, read_line=lambda prompt: "x y")
    with pytest.raises(ValueError):
        bad.next_move(None)
    late = HumanPlayer(-1, read_line=lambda prompt: "1 1")
    with pytest.raises(TimeoutError):
        late.next_move(None, deadline=time.time() - 1)


def test_ai_vs_ai_game_finishes():
    config = EngineConfig(board_size=7, time_budget=0.1, hard_timeout=2.0, max_depth=1, candidate_limit=6, seed=0)
    game = GobangGame(
        board_size=7,
        black_player=AIPlayer(-1, config),
        white_player=AIPlayer(1, config),
        logger=lambda _: None,
    )
    assert game.play() in (-1, 0, 1)
    assert game.game_over


def test_ai_answers_within_move_timeout():
    # Far-apart scripted moves; black runs out of script after four moves.
    black = SeqPlayer(-1, [(0, 0), (0, 14), (14, 0), (14, 14)])
    config = EngineConfig(time_budget=1.0, hard_timeout=5.0, max_depth=6)
    logs = []
    game = GobangGame(
        board_size=15,
        black_player=black,
        white_player=AIPlayer(1, config),
        move_timeout=0.3,
        logger=logs.append,
    )
    assert game.play() == 1
    assert not any("Disqualification: White" in line for line in logs)
    assert any("Disqualification: Black" in line for line in logs)
