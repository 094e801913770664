"""Tactical short-circuit run before full search.

Checks run in a fixed priority order and the first hit is played at once:

1. WIN                mover completes five
2. BLOCK_WIN          opponent would complete five here
3. OPEN_FOUR          mover makes an open four
4. BLOCK_OPEN_FOUR    opponent would make an open four here
5. BLOCK_FORCED_FOUR  opponent stone here wins on the real board (simulated)
6. BLOCK_OPEN_THREE   opponent would make an open three here
7. DOUBLE_THREAT      mover makes two threats at once (4-4, 4-3, 3-3)
8. VCF                mover has a continuous-four forced win (opt-in)

Only empty cells within `radius` of a stone are examined.
"""

import enum
import logging
import threading
from typing import NamedTuple, Optional, Tuple

from . import heuristic, move_selector
from .patterns import SHAPE_RANK, Shape, shapes_at

try:
    from engine import rules
    from utils import timer
except ImportError:
    from Gobang_AI.engine import rules
    from Gobang_AI.utils import timer

LOGGER = logging.getLogger(__name__)

VCF_RADIUS = 2


class Tactic(enum.Enum):
    WIN = 1
    BLOCK_WIN = 2
    OPEN_FOUR = 3
    BLOCK_OPEN_FOUR = 4
    BLOCK_FORCED_FOUR = 5
    BLOCK_OPEN_THREE = 6
    DOUBLE_THREAT = 7
    VCF = 8


class TacticalMove(NamedTuple):
    move: Tuple[int, int]
    tactic: Tactic


def _pick(board, moves, color, weights, allow_overline):
    """Among equally urgent cells, prefer the one most useful to both sides."""
    if len(moves) == 1:
        return moves[0]

    def key(mv):
        r, c = mv
        return (
            heuristic.placement_gain(board, r, c, color, weights, allow_overline)
            + heuristic.placement_gain(board, r, c, -color, weights, allow_overline)
        )

    return max(moves, key=key)


def _threat_strength(shapes):
    """0 unless the shapes form a double threat; higher is stronger."""
    fours = sum(1 for s in shapes if s in (Shape.FOUR, Shape.OPEN_FOUR))
    threes = sum(1 for s in shapes if s is Shape.OPEN_THREE)
    if fours >= 2:
        return 3
    if fours and threes:
        return 2
    if threes >= 2:
        return 1
    return 0


def find_double_threat(board, color, radius=1, allow_overline=True, weights=heuristic.DEFAULT_WEIGHTS):
    best, best_strength = [], 0
    for mv in move_selector.neighbor_cells(board, radius):
        strength = _threat_strength(shapes_at(board, mv[0], mv[1], color, allow_overline))
        if strength > best_strength:
            best, best_strength = [mv], strength
        elif strength and strength == best_strength:
            best.append(mv)
    if not best:
        return None
    return _pick(board, best, color, weights, allow_overline)


def winning_cells(board, color, allow_overline=True):
    """Empty cells where `color` would complete five right now."""
    return [
        mv
        for mv in move_selector.neighbor_cells(board, 1)
        if Shape.FIVE in shapes_at(board, mv[0], mv[1], color, allow_overline)
    ]


class _VCFSolver:
    """Depth-limited search over sequences of fours, each answered by a forced block."""

    def __init__(self, allow_overline, deadline, abort):
        self.allow_overline = allow_overline
        self.deadline = deadline
        self.abort = abort

    def _time_guard(self):
        if self.abort is not None and self.abort.is_set():
            raise TimeoutError("VCF aborted")
        if timer.expired(self.deadline):
            raise TimeoutError("VCF timed out")

    def _four_moves(self, board, attacker):
        moves = []
        for mv in move_selector.neighbor_cells(board, VCF_RADIUS):
            shapes = shapes_at(board, mv[0], mv[1], attacker, self.allow_overline)
            if Shape.FIVE in shapes:
                return [mv], True
            if Shape.OPEN_FOUR in shapes or Shape.FOUR in shapes:
                moves.append((mv, max(SHAPE_RANK[s] for s in shapes)))
        moves.sort(key=lambda item: item[1], reverse=True)
        return [mv for mv, _ in moves], False

    def solve(self, board, attacker, depth_left, defender_threatens=False):
        self._time_guard()
        moves, is_five = self._four_moves(board, attacker)
        if is_five:
            return moves[0]
        if defender_threatens or depth_left <= 0:
            # Defender wins next unless we finish now; or out of plies.
            return None

        defender = -attacker
        for mv in moves:
            self._time_guard()
            with rules.simulate(board, mv[0], mv[1], attacker):
                points = winning_cells(board, attacker, self.allow_overline)
                if len(points) >= 2:
                    return mv
                if not points:
                    continue
                block = points[0]
                with rules.simulate(board, block[0], block[1], defender):
                    if rules.is_win_after_move(board, block[0], block[1], defender, self.allow_overline):
                        continue
                    threatens = bool(winning_cells(board, defender, self.allow_overline))
                    if self.solve(board, attacker, depth_left - 1, threatens) is not None:
                        return mv
        return None


def find_vcf(board, color, depth=4, allow_overline=True, deadline=None, abort=None):
    """Return the first move of a continuous-four win for `color`, or None."""
    solver = _VCFSolver(allow_overline, deadline, abort)
    try:
        return solver.solve(board, color, depth)
    except TimeoutError:
        LOGGER.debug("VCF probe stopped early")
        return None


def find_tactical_move(
    board,
    color,
    radius=1,
    allow_overline=True,
    weights=heuristic.DEFAULT_WEIGHTS,
    enable_vct=False,
    vct_depth=4,
    deadline=None,
    abort: Optional[threading.Event] = None,
) -> Optional[TacticalMove]:
    """Return the most urgent tactical move for `color`, or None to fall through to search."""
    if not board.history:
        return None
    opp = -color
    cands = move_selector.neighbor_cells(board, radius)
    if not cands:
        return None

    own = {mv: shapes_at(board, mv[0], mv[1], color, allow_overline) for mv in cands}
    theirs = {mv: shapes_at(board, mv[0], mv[1], opp, allow_overline) for mv in cands}

    def first_with(table, shape, tactic):
        hits = [mv for mv in cands if shape in table[mv]]
        if hits:
            return TacticalMove(_pick(board, hits, color, weights, allow_overline), tactic)
        return None

    for table, shape, tactic in (
        (own, Shape.FIVE, Tactic.WIN),
        (theirs, Shape.FIVE, Tactic.BLOCK_WIN),
        (own, Shape.OPEN_FOUR, Tactic.OPEN_FOUR),
        (theirs, Shape.OPEN_FOUR, Tactic.BLOCK_OPEN_FOUR),
    ):
        found = first_with(table, shape, tactic)
        if found is not None:
            return found

    forced = [mv for mv in cands if rules.wins_if_placed(board, mv[0], mv[1], opp, allow_overline)]
    if forced:
        return TacticalMove(_pick(board, forced, color, weights, allow_overline), Tactic.BLOCK_FORCED_FOUR)

    found = first_with(theirs, Shape.OPEN_THREE, Tactic.BLOCK_OPEN_THREE)
    if found is not None:
        return found

    double = find_double_threat(board, color, radius, allow_overline, weights)
    if double is not None:
        return TacticalMove(double, Tactic.DOUBLE_THREAT)

    if enable_vct:
        vcf = find_vcf(board, color, vct_depth, allow_overline, deadline=deadline, abort=abort)
        if vcf is not None:
            return TacticalMove(vcf, Tactic.VCF)
    return None
