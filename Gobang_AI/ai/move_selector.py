"""Candidate move generation (neighborhood-based, ordered, top-N filtering)."""

from collections import defaultdict

from . import heuristic


NEIGHBORS_8 = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)

# Blocking the opponent's best line counts slightly less than extending our own.
DEFENSE_ORDER_WEIGHT = 0.9


def neighbor_cells(board, radius=1):
    """Empty cells within `radius` (Chebyshev) of any stone, in board order; center if the board is empty."""
    if not board.history:
        center = board.size // 2
        return [(center, center)] if board.is_empty(center, center) else []

    size = board.size
    cells = board.cells
    seen = set()
    for orow, ocol in board.history:
        for dr in range(-radius, radius + 1):
            for dc in range(-radius, radius + 1):
                r, c = orow + dr, ocol + dc
                if r < 0 or r >= size or c < 0 or c >= size:
                    continue
                if cells[r][c] != 0:
                    continue
                seen.add((r, c))
    return sorted(seen)


def generate_candidates(
    board,
    color,
    limit=20,
    radius=1,
    *,
    weights=heuristic.DEFAULT_WEIGHTS,
    allow_overline: bool = True,
    first=None,
):
    """
    Generate candidate empty cells near existing stones, strongest first.
    - If board empty: return center only.
    - Score = own placement gain + weighted opponent gain at the same cell + adjacency.
    - Moves listed in `first` (e.g. a transposition-table move) are put in front.
    """
    neighbors = neighbor_cells(board, radius)
    if len(neighbors) <= 1:
        return neighbors

    size = board.size
    cells = board.cells
    scores = defaultdict(float)
    opp = -color
    for r, c in neighbors:
        adj_count = 0
        for dr, dc in NEIGHBORS_8:
            ar, ac = r + dr, c + dc
            if 0 <= ar < size and 0 <= ac < size and cells[ar][ac] != 0:
                adj_count += 1
        attack = heuristic.placement_gain(board, r, c, color, weights, allow_overline)
        defense = heuristic.placement_gain(board, r, c, opp, weights, allow_overline)
        scores[(r, c)] = attack + DEFENSE_ORDER_WEIGHT * defense + adj_count

    # Stable on ties: board order breaks them, never randomness.
    ranked = sorted(neighbors, key=lambda mv: scores[mv], reverse=True)
    if first:
        front = list(dict.fromkeys(mv for mv in first if mv is not None and mv in scores))
        ranked = front + [mv for mv in ranked if mv not in front]
    if limit is not None:
        ranked = ranked[:limit]
    return ranked
