"""AI engine facade: tactical scan, then search, then a guaranteed fallback move.

The caller's board is never touched: every computation runs on a private
board rebuilt with the engine's own Zobrist table, so transposition entries
stay comparable across calls.

Both entry points run the computation on the engine's own worker thread
under a hard watchdog. A search that overruns is told to abort and left
behind; the caller gets the fallback move right away.
"""

import asyncio
import concurrent.futures
import logging
import random
import threading

from . import search_mcts, tactics
from .search_minimax import MinimaxSearcher
from .transposition import TranspositionTable
from .zobrist import ZobristTable

try:
    from Board import Board, first_empty_cell
    from utils import timer
    from utils.settings import EngineConfig
except ImportError:
    from Gobang_AI.Board import Board, first_empty_cell
    from Gobang_AI.utils import timer
    from Gobang_AI.utils.settings import EngineConfig

LOGGER = logging.getLogger(__name__)

# Time kept in hand before a caller's deadline: the soft budget stops two
# margins early, the watchdog one margin early.
DEADLINE_MARGIN = 0.05


def board_cells(board):
    """Accept a Board or a square 2D list of cell values."""
    return getattr(board, "cells", board)


def fallback_move(board):
    """Center if free, else the first empty cell in row-major order; None on a full board."""
    return first_empty_cell(board_cells(board), prefer_center=True)


class GobangAI:
    def __init__(self, color, config=None, zobrist=None):
        if color not in (-1, 1):
            raise ValueError("color must be -1 (black) or 1 (white)")
        self.color = color
        self.config = config or EngineConfig()
        self.is_thinking = False
        self.last_search = None
        self.last_tactic = None
        self._zobrist = {} if zobrist is None else {zobrist.size: zobrist}
        self._ttables = {}
        self._rng = random.Random(self.config.seed)
        self._executor = None

    def zobrist_for(self, size):
        table = self._zobrist.get(size)
        if table is None:
            table = ZobristTable(size, seed=self.config.seed)
            self._zobrist[size] = table
        return table

    def ttable_for(self, size, color):
        key = (size, color)
        table = self._ttables.get(key)
        if table is None:
            table = TranspositionTable(replace=self.config.tt_replace, max_entries=self.config.tt_max_entries)
            self._ttables[key] = table
        return table

    def reset(self):
        """Drop transposition tables and thinking state (new game or emergency)."""
        self._ttables = {}
        self.is_thinking = False
        self.last_search = None
        self.last_tactic = None

    def private_board(self, board):
        cells = board_cells(board)
        return Board.from_cells(cells, zobrist=self.zobrist_for(len(cells)))

    def search_deadline(self, deadline=None):
        """Soft deadline: the configured budget, cut short by the caller's deadline."""
        own = timer.deadline_after(self.config.time_budget)
        if deadline is None:
            return own
        latest = deadline - 2 * DEADLINE_MARGIN
        return latest if own is None else min(own, latest)

    def watchdog_limit(self, deadline=None):
        """Seconds the caller is willing to wait for the worker."""
        limit = self.config.hard_timeout
        if deadline is not None:
            limit = min(limit, timer.time_remaining(deadline) - DEADLINE_MARGIN)
        return max(limit, 0.0)

    def compute_move(self, work, color, abort=None, deadline=None):
        """Blocking pipeline on a private board; may raise."""
        if work.is_full():
            return None
        cfg = self.config
        deadline = self.search_deadline(deadline)

        self.last_tactic = None
        self.last_search = None
        tactical = tactics.find_tactical_move(
            work,
            color,
            radius=cfg.neighbor_radius,
            allow_overline=cfg.allow_overline,
            weights=cfg.weights,
            enable_vct=cfg.enable_vct,
            vct_depth=cfg.vct_depth,
            deadline=deadline,
            abort=abort,
        )
        if tactical is not None:
            self.last_tactic = tactical.tactic
            LOGGER.info("Tactical move %s (%s)", tactical.move, tactical.tactic.name)
            return tactical.move

        move = self._run_strategy(work, color, deadline, abort)
        if move is None or not work.is_empty(*move):
            LOGGER.warning("Search produced no usable move (%s); falling back", move)
            move = fallback_move(work)
        return move

    def _run_strategy(self, work, color, deadline, abort):
        cfg = self.config
        if cfg.search_backend == "mcts":
            return search_mcts.choose_move(
                work,
                color,
                deadline=deadline,
                rollout_limit=cfg.rollout_limit,
                candidate_limit=cfg.candidate_limit,
                explore=cfg.explore,
                playout_depth=cfg.playout_depth,
                allow_overline=cfg.allow_overline,
                weights=cfg.weights,
                rng=self._rng,
                abort=abort,
            )

        full_engine = cfg.search_backend == "alphabeta"
        use_tt = full_engine and cfg.use_tt
        searcher = MinimaxSearcher(
            color,
            max_depth=cfg.max_depth,
            candidate_limit=cfg.candidate_limit,
            radius=cfg.search_radius,
            weights=cfg.weights,
            allow_overline=cfg.allow_overline,
            ttable=self.ttable_for(work.size, color) if use_tt else None,
            use_tt=use_tt,
            iterative=full_engine,
            abort=abort,
        )
        try:
            result = searcher.search(work, deadline)
        except Exception:
            # Best move of the last completed depth, if any.
            LOGGER.exception("Search failed; using last completed depth")
            return searcher.pv_move
        self.last_search = result
        LOGGER.info(
            "Search move %s score=%s depth=%d nodes=%d %.3fs%s",
            result.move, result.score, result.depth, result.nodes, result.elapsed,
            "" if result.completed else " (cut short)",
        )
        return result.move

    def _worker(self):
        if self._executor is None:
            self._executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="gobang-ai")
        return self._executor

    def _abandon_worker(self, abort):
        """Watchdog expiry: stop the runaway search and never wait for it."""
        abort.set()
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
        self.emergency_reset()

    def choose_move_sync(self, board, color=None, deadline=None):
        """
        Blocking variant of choose_move(): same pipeline and the same watchdog.
        `deadline` (epoch seconds) caps both the search budget and the wait.
        """
        color = self.color if color is None else color
        work = self.private_board(board)
        if work.is_full():
            return None
        fallback_source = work.clone()

        abort = threading.Event()
        self.is_thinking = True
        try:
            future = self._worker().submit(self._compute_guarded, work, color, abort, deadline)
            try:
                return future.result(timeout=self.watchdog_limit(deadline))
            except concurrent.futures.TimeoutError:
                self._abandon_worker(abort)
                return fallback_move(fallback_source)
        finally:
            self.is_thinking = False

    async def choose_move(self, board, color=None, on_thinking=None, deadline=None):
        """
        Return (row, col) for `color` (default: the engine's color), or None on a full board.

        Yields once before searching so callers can show a thinking state. The
        computation runs on the engine's worker thread under a hard watchdog;
        when it fires, the search is told to abort and a fallback move is returned.
        """
        color = self.color if color is None else color
        work = self.private_board(board)
        if work.is_full():
            return None
        fallback_source = work.clone()

        abort = threading.Event()
        self.is_thinking = True
        if on_thinking is not None:
            on_thinking(True)
        try:
            await asyncio.sleep(0)
            loop = asyncio.get_running_loop()
            future = loop.run_in_executor(self._worker(), self._compute_guarded, work, color, abort, deadline)
            try:
                return await asyncio.wait_for(future, timeout=self.watchdog_limit(deadline))
            except asyncio.TimeoutError:
                self._abandon_worker(abort)
                return fallback_move(fallback_source)
        finally:
            self.is_thinking = False
            if on_thinking is not None:
                on_thinking(False)

    def _compute_guarded(self, work, color, abort, deadline=None):
        fallback_source = work.clone()
        try:
            return self.compute_move(work, color, abort, deadline)
        except Exception:
            LOGGER.exception("AI move computation failed; using fallback move")
            return fallback_move(fallback_source)

    def emergency_reset(self):
        LOGGER.warning("AI watchdog fired; emergency reset and fallback move")
        self.reset()
