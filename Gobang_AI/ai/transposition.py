"""Transposition table keyed by Zobrist position hash."""

import enum
import logging
from typing import NamedTuple, Optional, Tuple

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 1_000_000
REPLACE_POLICIES = ("always", "depth")


class Bound(enum.Enum):
    EXACT = 0
    LOWER = 1  # fail-high: true score >= stored score
    UPPER = 2  # fail-low: true score <= stored score


class TTEntry(NamedTuple):
    depth: int
    score: float
    bound: Bound
    move: Optional[Tuple[int, int]]


class TranspositionTable:
    """
    Maps a position hash to the best score/move found at some depth.

    Hash collisions between distinct positions are not detected; a colliding
    entry simply feeds a slightly wrong bound into the search.
    """

    def __init__(self, replace="always", max_entries=DEFAULT_MAX_ENTRIES):
        if replace not in REPLACE_POLICIES:
            raise ValueError(f"replace must be one of {REPLACE_POLICIES}, got {replace!r}")
        self.replace = replace
        self.max_entries = max_entries
        self._entries = {}

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return key in self._entries

    def clear(self):
        self._entries.clear()

    def lookup(self, key):
        return self._entries.get(key)

    def store(self, key, depth, score, bound, move):
        if self.replace == "depth":
            existing = self._entries.get(key)
            if existing is not None and existing.depth > depth:
                return
        if key not in self._entries and len(self._entries) >= self.max_entries:
            LOGGER.debug("Transposition table full (%d entries); clearing", len(self._entries))
            self._entries.clear()
        self._entries[key] = TTEntry(depth, score, bound, move)


def bound_for(score, alpha_orig, beta):
    """Classify a search result relative to the window it was searched with."""
    if score <= alpha_orig:
        return Bound.UPPER
    if score >= beta:
        return Bound.LOWER
    return Bound.EXACT


def probe_window(entry, depth, alpha, beta):
    """
    Apply a stored entry to the current window.

    Returns (cutoff_score, alpha, beta); cutoff_score is None unless the entry
    settles the node outright. Entries searched shallower than `depth` are ignored.
    """
    if entry is None or entry.depth < depth:
        return None, alpha, beta
    if entry.bound is Bound.EXACT:
        return entry.score, alpha, beta
    if entry.bound is Bound.LOWER:
        alpha = max(alpha, entry.score)
    elif entry.bound is Bound.UPPER:
        beta = min(beta, entry.score)
    if alpha >= beta:
        return entry.score, alpha, beta
    return None, alpha, beta
