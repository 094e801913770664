"""Line shapes, incremental evaluation, and the win short-circuit."""

import pytest

from Gobang_AI.Board import Board
from Gobang_AI.ai import heuristic, patterns
from Gobang_AI.ai.patterns import Shape


def test_incremental_matches_full():
    b = Board(size=9)
    eval_color = -1
    tally = heuristic.tally_board(b)
    assert heuristic.score_tally(tally, eval_color) == heuristic.score_board(b, eval_color)

    moves = [(4, 4), (4, 5), (3, 3), (5, 5), (2, 2), (3, 4), (5, 4)]
    for i, (r, c) in enumerate(moves):
        b.place(r, c, -1 if i % 2 == 0 else 1)
        tally = heuristic.update_tally(b, r, c, tally)
        assert tally == heuristic.tally_board(b)
        assert heuristic.score_tally(tally, eval_color) == heuristic.score_board(b, eval_color)


def test_five_short_circuits_evaluation():
    b = Board(size=9)
    for c in range(5):
        b.place(0, c, -1)
    for c in range(4):
        b.place(8, c, 1)
    assert heuristic.score_board(b, -1) == heuristic.WIN_SCORE
    assert heuristic.score_board(b, 1) == -heuristic.WIN_SCORE


def test_overline_does_not_win_under_exact_rule():
    b = Board(size=9)
    for c in range(6):
        b.place(0, c, -1)
    assert heuristic.score_board(b, -1) == heuristic.WIN_SCORE
    assert heuristic.score_board(b, -1, allow_overline=False) < heuristic.WIN_THRESHOLD


def test_opponent_shapes_are_amplified():
    b = Board(size=9)
    b.place(4, 4, -1)
    b.place(4, 5, 1)
    # Symmetric material: the evaluator leans toward defense for both sides.
    assert heuristic.score_board(b, -1) < 0 or heuristic.score_board(b, 1) < 0


def test_center_bonus_falls_off():
    assert heuristic.position_bonus(15, 7, 7) == 7
    assert heuristic.position_bonus(15, 7, 0) == 0
    assert heuristic.position_bonus(15, 5, 8) == 5


@pytest.mark.parametrize(
    "line, expected",
    [
        ([0, 1, 1, 1, 0, 0], [Shape.OPEN_THREE]),
        ([0, 1, 0, 1, 1, 0], [Shape.OPEN_THREE]),
        ([1, 0, 1, 1, 1], [Shape.FOUR]),
        ([-1, 1, 1, 1, 1, 0], [Shape.FOUR]),
        ([0, 1, 1, 1, 1, 0], [Shape.OPEN_FOUR]),
        ([-1, 1, 1, 1, -1, 0], []),
        ([0, 1, 1, 1, 1, 1, 0], [Shape.FIVE]),
    ],
)
def test_classify_line(line, expected):
    assert patterns.classify_line(line, 1) == expected


def test_classify_line_overline_rule():
    line = [0, 1, 1, 1, 1, 1, 1, 0]
    assert patterns.classify_line(line, 1, allow_overline=True) == [Shape.FIVE]
    assert patterns.classify_line(line, 1, allow_overline=False) == [Shape.LONG_CONNECT]


def test_window_shapes_at_candidate_cell():
    b = Board(size=15)
    for c in (4, 5, 6):
        b.place(7, c, -1)
    assert patterns.best_shape_at(b, 7, 7, -1) is Shape.OPEN_FOUR
    assert patterns.best_shape_at(b, 7, 8, -1) is Shape.FOUR  # split: X X X _ X
    b.place(7, 3, 1)
    assert patterns.best_shape_at(b, 7, 7, -1) is Shape.FOUR
    assert patterns.best_shape_at(b, 0, 0, -1) is None


def test_window_broken_three():
    b = Board(size=15)
    b.place(7, 5, 1)
    b.place(7, 7, 1)
    assert patterns.best_shape_at(b, 7, 6, 1) is Shape.OPEN_THREE
    assert patterns.best_shape_at(b, 7, 8, 1) is Shape.OPEN_THREE  # X _ X X


def test_weights_from_yaml(tmp_path):
    path = tmp_path / "weights.yaml"
    path.write_text("shapes:\n  open_four: 5000\ndefense_factor: 1.5\n", encoding="utf-8")
    weights = heuristic.load_weights(str(path))
    assert weights.weight(Shape.OPEN_FOUR) == 5000
    assert weights.weight(Shape.FIVE) == heuristic.DEFAULT_SHAPE_WEIGHTS[Shape.FIVE]
    assert weights.defense_factor == 1.5


def test_weights_validation(tmp_path):
    with pytest.raises(ValueError):
        heuristic.weights_from_dict({"shapes": {"six": 1}})
    with pytest.raises(ValueError):
        heuristic.weights_from_dict({"defense_factor": 0.9})
    assert heuristic.load_weights(str(tmp_path / "missing.yaml")) is heuristic.DEFAULT_WEIGHTS


def test_packaged_weights_load():
    weights = heuristic.load_weights()
    assert weights.weight(Shape.FIVE) == 100000
    assert weights.defense_factor > 1
