"""Iterative-deepening minimax with alpha-beta pruning and a transposition table."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from . import heuristic
from . import move_selector
from .transposition import TranspositionTable, bound_for, probe_window

try:
    from engine import rules
except ImportError:
    from Gobang_AI.engine import rules

LOGGER = logging.getLogger(__name__)

INF = float("inf")
TIME_CHECK_MASK = 255  # check every 256 nodes


@dataclass
class SearchResult:
    move: Optional[Tuple[int, int]]
    score: float
    depth: int  # deepest fully completed iteration
    nodes: int
    elapsed: float
    completed: bool  # False when the deadline/abort cut an iteration short


class MinimaxSearcher:
    """Encapsulates the state and logic for a minimax search."""

    def __init__(
        self,
        color,
        *,
        max_depth=4,
        candidate_limit=20,
        radius=1,
        weights=heuristic.DEFAULT_WEIGHTS,
        allow_overline=True,
        ttable=None,
        use_tt=True,
        iterative=True,
        abort: Optional[threading.Event] = None,
        stats=None,
    ):
        if color not in (-1, 1):
            raise ValueError("color must be -1 (black) or 1 (white)")
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.color = color
        self.max_depth = max_depth
        self.candidate_limit = candidate_limit
        self.radius = radius
        self.weights = weights
        self.allow_overline = allow_overline
        if use_tt:
            self.ttable = TranspositionTable() if ttable is None else ttable
        else:
            self.ttable = None
        self.iterative = iterative
        self.abort = abort
        self.stats_list = stats

        # Internal state
        self.node_counter = 0
        self.deadline = None
        self.start_time = None
        self.pv_move = None

    def search(self, board, deadline=None) -> SearchResult:
        """
        Search `board` for self.color. The board is mutated during search and
        restored before returning, including when the deadline interrupts.
        """
        self.start_time = time.time()
        self.node_counter = 0
        self.pv_move = None
        root_tally = heuristic.tally_board(board, self.weights, self.allow_overline)

        best_move, best_score, best_depth = None, -INF, 0
        completed = True
        depths = range(1, self.max_depth + 1) if self.iterative else (self.max_depth,)
        for current_depth in depths:
            if best_move is not None and deadline is not None and time.time() > deadline:
                completed = False
                break
            # The first iteration always finishes so there is a move to fall back on.
            self.deadline = deadline if best_move is not None else None
            try:
                score, move = self._minimax(board, self.color, current_depth, -INF, INF, root_tally)
            except TimeoutError:
                LOGGER.debug("Search interrupted at depth %d after %d nodes", current_depth, self.node_counter)
                completed = False
                break
            if move is not None:
                best_move, best_score, best_depth = move, score, current_depth
                self.pv_move = move  # Principal variation move for next iteration
            LOGGER.debug("depth=%d move=%s score=%s nodes=%d", current_depth, move, score, self.node_counter)
            if score >= heuristic.WIN_THRESHOLD:
                # A forced win does not get better with more depth.
                break

        result = SearchResult(
            move=best_move,
            score=best_score,
            depth=best_depth,
            nodes=self.node_counter,
            elapsed=time.time() - self.start_time,
            completed=completed,
        )
        if self.stats_list is not None:
            self._record_stats(result)
        return result

    def choose_move(self, board, deadline=None):
        return self.search(board, deadline).move

    def _time_ok(self):
        self.node_counter += 1
        if (self.node_counter & TIME_CHECK_MASK) == 0:
            if self.abort is not None and self.abort.is_set():
                raise TimeoutError("Search aborted")
            if self.deadline is not None and time.time() > self.deadline:
                raise TimeoutError("Search timed out")

    def _minimax(self, board, node_color, depth, alpha, beta, tally, ply=0):
        self._time_ok()

        # Terminal state check
        if depth == 0 or board.is_full():
            return heuristic.score_tally(tally, self.color, self.weights), None

        # Transposition table lookup
        key = board.hash
        tt_move = None
        if self.ttable is not None:
            entry = self.ttable.lookup(key)
            if entry is not None:
                tt_move = entry.move
                cutoff, alpha, beta = probe_window(entry, depth, alpha, beta)
                if cutoff is not None:
                    return cutoff, entry.move

        first = [tt_move]
        if ply == 0:
            first.append(self.pv_move)
        candidates = move_selector.generate_candidates(
            board,
            node_color,
            limit=self.candidate_limit,
            radius=self.radius,
            weights=self.weights,
            allow_overline=self.allow_overline,
            first=first,
        )
        if not candidates:
            return heuristic.score_tally(tally, self.color, self.weights), None

        alpha_orig, beta_orig = alpha, beta
        best_score, best_local_move = self._search_moves(board, node_color, depth, alpha, beta, candidates, tally, ply)

        # Store result in transposition table
        if self.ttable is not None:
            self.ttable.store(key, depth, best_score, bound_for(best_score, alpha_orig, beta_orig), best_local_move)

        return best_score, best_local_move

    def _search_moves(self, board, node_color, depth, alpha, beta, candidates, tally, ply):
        maximizing = node_color == self.color
        best_score = -INF if maximizing else INF
        best_local_move = None

        for move in candidates:
            row, col = move
            board._push_stone(row, col, node_color)
            try:
                if rules.is_win_after_move(board, row, col, node_color, self.allow_overline):
                    win = heuristic.WIN_SCORE - board.move_count
                    return (win if maximizing else -win), move
                child_tally = heuristic.update_tally(board, row, col, tally, self.weights, self.allow_overline)
                score, _ = self._minimax(board, -node_color, depth - 1, alpha, beta, child_tally, ply + 1)
            finally:
                board._pop_stone(row, col)

            if maximizing:
                if score > best_score:
                    best_score = score
                    best_local_move = move
                alpha = max(alpha, best_score)
            else:
                if score < best_score:
                    best_score = score
                    best_local_move = move
                beta = min(beta, best_score)

            if beta <= alpha:
                break

        return best_score, best_local_move

    def _record_stats(self, result):
        total_time = max(result.elapsed, 1e-9)
        self.stats_list.append({
            "color": self.color,
            "depth": result.depth,
            "nodes": result.nodes,
            "time": total_time,
            "nps": result.nodes / total_time,
        })


def choose_move(board, color, depth, deadline=None, ttable=None, candidate_limit=20, radius=1,
                weights=None, allow_overline=True, use_tt=True, stats=None):
    """
    Public function to start a search. Instantiates and uses MinimaxSearcher.
    """
    searcher = MinimaxSearcher(
        color,
        max_depth=depth,
        candidate_limit=candidate_limit,
        radius=radius,
        weights=weights or heuristic.DEFAULT_WEIGHTS,
        allow_overline=allow_overline,
        ttable=ttable,
        use_tt=use_tt,
        stats=stats,
    )
    return searcher.choose_move(board, deadline)
