"""Line shapes (five, open four, four, open three, ...) and window matching.

Two views of the same vocabulary:
- classify_line() walks a whole board line and reports every shape of one
  color; the static evaluator weights these.
- window_shape() looks at a fixed-width window centered on one candidate cell
  (as if a stone were placed there) and reports the strongest shape the
  placement creates; the tactical scanner uses it.
"""

import enum
from functools import lru_cache

DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))

# Window codes, from the perspective of the color being tested.
EMPTY = 0
OWN = 1
BLOCKED = 2  # opponent stone or off-board

WINDOW_REACH = 5
WINDOW_CENTER = WINDOW_REACH


class Shape(enum.Enum):
    FIVE = "five"
    LONG_CONNECT = "long_connect"  # overline when overlines do not win
    OPEN_FOUR = "open_four"
    FOUR = "four"  # one winning point left (blocked or split four)
    OPEN_THREE = "open_three"
    THREE = "three"
    OPEN_TWO = "open_two"
    TWO = "two"
    OPEN_ONE = "open_one"
    ONE = "one"


# Strength order used when a window shows several shapes at once.
SHAPE_RANK = {
    Shape.FIVE: 9,
    Shape.OPEN_FOUR: 8,
    Shape.FOUR: 7,
    Shape.OPEN_THREE: 6,
    Shape.THREE: 5,
    Shape.OPEN_TWO: 4,
    Shape.TWO: 3,
    Shape.OPEN_ONE: 2,
    Shape.ONE: 1,
    Shape.LONG_CONNECT: 0,
}

THREAT_SHAPES = frozenset((Shape.FIVE, Shape.OPEN_FOUR, Shape.FOUR, Shape.OPEN_THREE))


def _run_shape(length, open_ends, room, allow_overline):
    if length >= 5:
        if length == 5 or allow_overline:
            return Shape.FIVE
        return Shape.LONG_CONNECT
    if open_ends == 0:
        return None
    if length == 4:
        return Shape.OPEN_FOUR if open_ends == 2 else Shape.FOUR
    if length == 3:
        return Shape.OPEN_THREE if open_ends == 2 and room else Shape.THREE
    if length == 2:
        return Shape.OPEN_TWO if open_ends == 2 and room else Shape.TWO
    return Shape.OPEN_ONE if open_ends == 2 else Shape.ONE


def _split_shape(combined, left_open, right_open, allow_overline):
    """Shape of two runs separated by a single empty cell."""
    if combined >= 4:
        if combined > 4 and not allow_overline:
            return None
        return Shape.FOUR
    if combined == 3:
        if left_open and right_open:
            return Shape.OPEN_THREE
        if left_open or right_open:
            return Shape.THREE
    return None


def classify_line(line, color, allow_overline=True):
    """
    Return the shapes formed by `color` along one line of cell values.

    Contiguous runs are classified by length and open ends. A run of up to
    three stones followed by one gap and another short run is scored once as a
    split shape (e.g. 1 0 1 1 1 is a four, 0 1 0 1 1 0 an open three).
    """
    shapes = []
    n = len(line)
    i = 0
    while i < n:
        if line[i] != color:
            i += 1
            continue
        start = i
        while i < n and line[i] == color:
            i += 1
        end = i
        length = end - start
        left_open = start > 0 and line[start - 1] == 0
        right_open = end < n and line[end] == 0

        if right_open and length <= 3 and end + 1 < n and line[end + 1] == color:
            j = end + 1
            while j < n and line[j] == color:
                j += 1
            second = j - (end + 1)
            if second <= 3:
                far_right_open = j < n and line[j] == 0
                split = _split_shape(length + second, left_open, far_right_open, allow_overline)
                if split is not None:
                    shapes.append(split)
                    i = j
                    continue

        room = (start > 1 and line[start - 2] == 0) or (end + 1 < n and line[end + 1] == 0)
        shape = _run_shape(length, left_open + right_open, room, allow_overline)
        if shape is not None:
            shapes.append(shape)
    return shapes


def extract_window(board, row, col, dr, dc, color, reach=WINDOW_REACH):
    """
    Cells from (row, col) - reach*(dr, dc) to (row, col) + reach*(dr, dc), coded
    for `color`: OWN, EMPTY, or BLOCKED (opponent / off-board). The center is
    always coded OWN: the window describes a hypothetical placement there.
    """
    size = board.size
    cells = board.cells
    window = []
    for k in range(-reach, reach + 1):
        r, c = row + k * dr, col + k * dc
        if k == 0:
            window.append(OWN)
        elif 0 <= r < size and 0 <= c < size:
            v = cells[r][c]
            window.append(EMPTY if v == 0 else (OWN if v == color else BLOCKED))
        else:
            window.append(BLOCKED)
    return tuple(window)


def _run_through(window, center):
    left = center
    while left - 1 >= 0 and window[left - 1] == OWN:
        left -= 1
    right = center
    while right + 1 < len(window) and window[right + 1] == OWN:
        right += 1
    return left, right


def _is_five(window, allow_overline):
    left, right = _run_through(window, WINDOW_CENTER)
    length = right - left + 1
    return length == 5 or (allow_overline and length > 5)


def _winning_points(window, allow_overline):
    """Empty window cells that would complete a five through the center."""
    points = []
    for j, v in enumerate(window):
        if v != EMPTY:
            continue
        filled = window[:j] + (OWN,) + window[j + 1:]
        left, right = _run_through(filled, WINDOW_CENTER)
        if left <= j <= right and _is_five(filled, allow_overline):
            points.append(j)
    return points


def _is_open_four(window, allow_overline):
    left, right = _run_through(window, WINDOW_CENTER)
    if right - left + 1 != 4:
        return False
    points = _winning_points(window, allow_overline)
    return (left - 1) in points and (right + 1) in points


@lru_cache(maxsize=65536)
def window_shape(window, allow_overline=True):
    """Strongest shape created by the (hypothetical) center stone of a window."""
    if _is_five(window, allow_overline):
        return Shape.FIVE
    left, right = _run_through(window, WINDOW_CENTER)
    if right - left + 1 > 5:
        return Shape.LONG_CONNECT
    if _is_open_four(window, allow_overline):
        return Shape.OPEN_FOUR
    if _winning_points(window, allow_overline):
        return Shape.FOUR
    # Open three: one more stone (anywhere in the window) yields an open four
    # that still contains the center stone.
    for j, v in enumerate(window):
        if v != EMPTY:
            continue
        filled = window[:j] + (OWN,) + window[j + 1:]
        lo, hi = _run_through(filled, WINDOW_CENTER)
        if lo <= j <= hi and _is_open_four(filled, allow_overline):
            return Shape.OPEN_THREE
    return None


def shapes_at(board, row, col, color, allow_overline=True):
    """Shape per direction for a hypothetical `color` stone at empty (row, col)."""
    found = []
    for dr, dc in DIRECTIONS:
        shape = window_shape(extract_window(board, row, col, dr, dc, color), allow_overline)
        if shape is not None:
            found.append(shape)
    return found


def best_shape_at(board, row, col, color, allow_overline=True):
    shapes = shapes_at(board, row, col, color, allow_overline)
    if not shapes:
        return None
    return max(shapes, key=SHAPE_RANK.__getitem__)
