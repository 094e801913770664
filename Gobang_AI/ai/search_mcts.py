"""UCT Monte Carlo tree search with pattern-biased (heavy) playouts.

Key design:
- Each node stores results from the perspective of the player who moved into it.
- Playouts play an immediate five or an immediate block when one exists, and
  otherwise sample neighbor cells weighted by the shapes they create.
- All simulated stones are pushed onto the caller's board and popped again.
"""

from __future__ import annotations

import math
import random
import threading
import time
from typing import List, Optional, Tuple

from . import heuristic, move_selector
from .patterns import SHAPE_RANK, Shape, shapes_at

try:
    from engine import rules
except ImportError:
    from Gobang_AI.engine import rules


class _Node:
    __slots__ = ("move", "player", "parent", "children", "untried", "visits", "value_sum", "terminal")

    def __init__(self, move=None, player=0, parent=None):
        self.move: Optional[Tuple[int, int]] = move
        self.player = player  # color that played `move`
        self.parent: Optional[_Node] = parent
        self.children: List[_Node] = []
        self.untried: Optional[List[Tuple[int, int]]] = None
        self.visits = 0
        self.value_sum = 0.0
        self.terminal = False

    def uct(self, parent_visits: int, explore: float) -> float:
        if self.visits == 0:
            return math.inf
        exploit = self.value_sum / self.visits
        return exploit + explore * math.sqrt(math.log(parent_visits) / self.visits)


def _playout_move(board, to_move, rng, allow_overline):
    """Pick one playout move for `to_move`; returns (move, wins)."""
    cells = move_selector.neighbor_cells(board, 1)
    if not cells:
        return None, False
    weights = []
    block = None
    for r, c in cells:
        own = shapes_at(board, r, c, to_move, allow_overline)
        if Shape.FIVE in own:
            return (r, c), True
        theirs = shapes_at(board, r, c, -to_move, allow_overline)
        if Shape.FIVE in theirs:
            block = (r, c)
        own_rank = max((SHAPE_RANK[s] for s in own), default=0)
        opp_rank = max((SHAPE_RANK[s] for s in theirs), default=0)
        weights.append(1 + 2 * own_rank * own_rank + opp_rank * opp_rank)
    if block is not None:
        return block, False
    return rng.choices(cells, weights=weights, k=1)[0], False


def _playout(board, to_move, depth, rng, allow_overline, applied):
    """Play up to `depth` moves; return winning color or 0."""
    for _ in range(depth):
        move, wins = _playout_move(board, to_move, rng, allow_overline)
        if move is None:
            return 0
        board._push_stone(move[0], move[1], to_move)
        applied.append(move)
        if wins:
            return to_move
        to_move = -to_move
    return 0


def choose_move(
    board,
    color: int,
    deadline=None,
    rollout_limit: int = 256,
    candidate_limit: int = 12,
    explore: float = 1.4,
    playout_depth: int = 20,
    allow_overline: bool = True,
    weights=heuristic.DEFAULT_WEIGHTS,
    rng: Optional[random.Random] = None,
    abort: Optional[threading.Event] = None,
):
    """
    Return a move using UCT MCTS.
    - color: player to move (-1 or 1)
    - deadline: epoch seconds to stop (None: rollout_limit only)
    """
    rng = rng or random.Random()

    def candidates_for(b, c):
        return move_selector.generate_candidates(
            b, c, limit=candidate_limit, radius=1, weights=weights, allow_overline=allow_overline
        )

    candidates = candidates_for(board, color)
    if not candidates:
        move = board.first_empty()
        if move is None:
            raise ValueError("No legal moves available for MCTS")
        return move

    # Fast path: if there is an immediate winning move, play it directly.
    for mv in candidates:
        if rules.wins_if_placed(board, mv[0], mv[1], color, allow_overline):
            return mv
    if len(candidates) == 1:
        return candidates[0]

    root = _Node(player=-color)
    root.untried = list(candidates)

    def time_ok():
        if abort is not None and abort.is_set():
            raise TimeoutError("MCTS aborted")
        if deadline is not None and time.time() > deadline:
            raise TimeoutError("MCTS timed out")

    def backprop(node: _Node, winner: int):
        cur = node
        while cur is not None:
            cur.visits += 1
            if winner == 0:
                cur.value_sum += 0.5
            elif winner == cur.player:
                cur.value_sum += 1.0
            cur = cur.parent

    rollout_count = 0
    try:
        while rollout_count < rollout_limit:
            time_ok()
            node = root
            applied: List[Tuple[int, int]] = []
            try:
                # Selection
                while not node.terminal and not node.untried and node.children:
                    node = max(node.children, key=lambda n: n.uct(node.visits, explore))
                    board._push_stone(node.move[0], node.move[1], node.player)
                    applied.append(node.move)

                if node.terminal:
                    backprop(node, node.player)
                    rollout_count += 1
                    continue

                # Expansion
                to_move = -node.player
                if node.untried is None:
                    node.untried = candidates_for(board, to_move)
                if node.untried:
                    mv = node.untried.pop(0)
                    board._push_stone(mv[0], mv[1], to_move)
                    applied.append(mv)
                    child = _Node(move=mv, player=to_move, parent=node)
                    node.children.append(child)
                    node = child
                    if rules.is_win_after_move(board, mv[0], mv[1], to_move, allow_overline):
                        child.terminal = True
                        backprop(child, to_move)
                        rollout_count += 1
                        continue
                    to_move = -to_move

                # Simulation
                winner = _playout(board, to_move, playout_depth, rng, allow_overline, applied)
                backprop(node, winner)
                rollout_count += 1
            finally:
                # Undo simulation moves to restore the caller's board.
                for r, c in reversed(applied):
                    board._pop_stone(r, c)
    except TimeoutError:
        # Budget spent; decide from the statistics gathered so far.
        pass

    if not root.children:
        return candidates[0]
    best = max(root.children, key=lambda n: (n.visits, n.value_sum))
    return best.move
