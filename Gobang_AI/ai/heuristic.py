"""Static evaluation: weighted line shapes, center bonus, defense amplification."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .patterns import Shape, classify_line

LOGGER = logging.getLogger(__name__)

WIN_SCORE = 100_000_000
WIN_THRESHOLD = WIN_SCORE // 2

DEFAULT_SHAPE_WEIGHTS = {
    Shape.FIVE: 100000,
    Shape.LONG_CONNECT: 0,
    Shape.OPEN_FOUR: 10000,
    Shape.FOUR: 1000,
    Shape.OPEN_THREE: 1000,
    Shape.THREE: 100,
    Shape.OPEN_TWO: 100,
    Shape.TWO: 10,
    Shape.OPEN_ONE: 10,
    Shape.ONE: 1,
}
DEFAULT_DEFENSE_FACTOR = 1.2
DEFAULT_POSITION_WEIGHT = 1


@dataclass(frozen=True)
class ScoreTable:
    shapes: dict = field(default_factory=lambda: dict(DEFAULT_SHAPE_WEIGHTS))
    defense_factor: float = DEFAULT_DEFENSE_FACTOR
    position_weight: int = DEFAULT_POSITION_WEIGHT

    def __post_init__(self):
        if self.defense_factor <= 1:
            raise ValueError("defense_factor must be greater than 1")
        if self.position_weight < 0:
            raise ValueError("position_weight must be non-negative")

    def weight(self, shape):
        return self.shapes.get(shape, 0)


DEFAULT_WEIGHTS = ScoreTable()


def weights_from_dict(data):
    """Build a ScoreTable from a mapping like the one in config/weights.yaml."""
    shapes = dict(DEFAULT_SHAPE_WEIGHTS)
    for name, value in (data.get("shapes") or {}).items():
        try:
            shape = Shape(name)
        except ValueError as exc:
            raise ValueError(f"Unknown shape in weights: {name!r}") from exc
        shapes[shape] = int(value)
    return ScoreTable(
        shapes=shapes,
        defense_factor=float(data.get("defense_factor", DEFAULT_DEFENSE_FACTOR)),
        position_weight=int(data.get("position_weight", DEFAULT_POSITION_WEIGHT)),
    )


def load_weights(path="config/weights.yaml"):
    """Load shape weights from YAML; fallback to defaults when the file is missing."""
    path = Path(path)
    if not path.is_absolute() and not path.exists():
        # Allow running from repo root (e.g., `python -m Gobang_AI.main`).
        candidate = Path(__file__).resolve().parents[1] / path
        if candidate.exists():
            path = candidate

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        LOGGER.debug("No weights file at %s; using defaults", path)
        return DEFAULT_WEIGHTS
    return weights_from_dict(data)


@dataclass
class Tally:
    """Per-color running totals; keys are -1 (black) and 1 (white)."""

    pattern: dict = field(default_factory=lambda: {-1: 0, 1: 0})
    fives: dict = field(default_factory=lambda: {-1: 0, 1: 0})
    position: dict = field(default_factory=lambda: {-1: 0, 1: 0})

    def copy(self):
        return Tally(dict(self.pattern), dict(self.fives), dict(self.position))


def position_bonus(size, row, col, weights=DEFAULT_WEIGHTS):
    """Larger for cells nearer the center (Chebyshev falloff)."""
    center = size // 2
    return max(0, center - max(abs(row - center), abs(col - center))) * weights.position_weight


def all_lines(board):
    """Yield all rows, columns, and diagonals (length >= 5) as lists of cell values."""
    size = board.size
    cells = board.cells

    for r in range(size):
        yield cells[r]
    for c in range(size):
        yield [cells[r][c] for r in range(size)]

    # Diagonals (top-left to bottom-right): col - row == offset
    for offset in range(-size + 5, size - 4):
        yield [cells[r][r + offset] for r in range(size) if 0 <= r + offset < size]

    # Anti-diagonals (top-right to bottom-left): row + col == total
    for total in range(4, 2 * size - 5):
        yield [cells[r][total - r] for r in range(size) if 0 <= total - r < size]


def lines_through(board, row, col, override=None):
    """Return the four full lines passing through (row, col); optionally override that cell."""
    lines = []
    for dr, dc in ((0, 1), (1, 0), (1, 1), (1, -1)):
        r, c = row, col
        while board.in_bounds(r - dr, c - dc):
            r -= dr
            c -= dc
        line = []
        while board.in_bounds(r, c):
            if r == row and c == col and override is not None:
                line.append(override)
            else:
                line.append(board.cells[r][c])
            r += dr
            c += dc
        if len(line) >= 5:
            lines.append(line)
    return lines


def _add_lines(tally, lines, weights, allow_overline, sign):
    for line in lines:
        for color in (-1, 1):
            for shape in classify_line(line, color, allow_overline):
                if shape is Shape.FIVE:
                    tally.fives[color] += sign
                tally.pattern[color] += sign * weights.weight(shape)


def tally_board(board, weights=DEFAULT_WEIGHTS, allow_overline=True):
    tally = Tally()
    _add_lines(tally, all_lines(board), weights, allow_overline, 1)
    for row, col in board.history:
        tally.position[board.cells[row][col]] += position_bonus(board.size, row, col, weights)
    return tally


def update_tally(board, row, col, tally, weights=DEFAULT_WEIGHTS, allow_overline=True):
    """
    Incrementally update a tally after placing a stone at (row, col).
    board is assumed to already contain the stone.
    """
    color = board.cells[row][col]
    updated = tally.copy()
    _add_lines(updated, lines_through(board, row, col, override=0), weights, allow_overline, -1)
    _add_lines(updated, lines_through(board, row, col), weights, allow_overline, 1)
    updated.position[color] += position_bonus(board.size, row, col, weights)
    return updated


def score_tally(tally, color, weights=DEFAULT_WEIGHTS):
    """Positive favors `color`; opponent patterns are amplified by defense_factor."""
    opp = -color
    if tally.fives[color] > 0:
        return WIN_SCORE
    if tally.fives[opp] > 0:
        return -WIN_SCORE
    own = tally.pattern[color] + tally.position[color]
    theirs = tally.pattern[opp] * weights.defense_factor + tally.position[opp]
    return own - theirs


def score_board(board, color, weights=DEFAULT_WEIGHTS, allow_overline=True):
    """
    Pattern-based evaluation. Positive favors `color`, negative favors opponent.
    board: Board instance
    color: -1 (black) or 1 (white)
    """
    return score_tally(tally_board(board, weights, allow_overline), color, weights)


def score_line(line, color, weights=DEFAULT_WEIGHTS, allow_overline=True):
    """Weighted shape total of one line for `color` alone."""
    return sum(weights.weight(shape) for shape in classify_line(line, color, allow_overline))


def placement_gain(board, row, col, color, weights=DEFAULT_WEIGHTS, allow_overline=True):
    """Cheap single-cell value: how much `color` gains on the four lines by playing (row, col)."""
    gain = 0
    before = lines_through(board, row, col, override=0)
    after = lines_through(board, row, col, override=color)
    for line_before, line_after in zip(before, after):
        gain += score_line(line_after, color, weights, allow_overline)
        gain -= score_line(line_before, color, weights, allow_overline)
    return gain + position_bonus(board.size, row, col, weights)
