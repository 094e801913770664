"""Board state container, running Zobrist hash, and five-in-a-row checks."""

try:
    from ai.zobrist import ZobristTable
except ImportError:
    from Gobang_AI.ai.zobrist import ZobristTable


DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))
STONE_CHARS = {-1: "X", 0: ".", 1: "O"}


def first_empty_cell(cells, prefer_center=False):
    """Return the first empty cell in row-major order (center first if asked), or None."""
    size = len(cells)
    if prefer_center:
        center = size // 2
        if cells[center][center] == 0:
            return (center, center)
    for r in range(size):
        for c in range(size):
            if cells[r][c] == 0:
                return (r, c)
    return None


class Board:
    def __init__(self, size=15, zobrist=None):
        # Store cells as -1 (black), 0 (empty), 1 (white); indexed cells[row][col]
        if size < 5:
            raise ValueError("board size must be at least 5")
        if zobrist is not None and zobrist.size != size:
            raise ValueError(f"Zobrist table size {zobrist.size} does not match board size {size}")
        self.size = size
        self.cells = [[0] * size for _ in range(size)]
        self.move_count = 0
        self.history = []
        self.zobrist = zobrist if zobrist is not None else ZobristTable(size)
        self.hash = 0

    @classmethod
    def from_cells(cls, cells, zobrist=None):
        """Build a board from a square 2D snapshot of cell values."""
        size = len(cells)
        if any(len(row) != size for row in cells):
            raise ValueError("board snapshot must be square")
        board = cls(size, zobrist=zobrist)
        for row in range(size):
            for col in range(size):
                v = cells[row][col]
                if v == 0:
                    continue
                board.place(row, col, v)
        return board

    @property
    def last_move(self):
        return self.history[-1] if self.history else None

    def in_bounds(self, row, col):
        return 0 <= row < self.size and 0 <= col < self.size

    def is_empty(self, row, col):
        return self.in_bounds(row, col) and self.cells[row][col] == 0

    def is_full(self):
        return self.move_count >= self.size * self.size

    def place(self, row, col, color):
        """Place a stone; raise if out of bounds or occupied."""
        if color not in (-1, 1):
            raise ValueError("color must be -1 (black) or 1 (white)")
        if not self.in_bounds(row, col):
            raise ValueError("move out of bounds")
        if self.cells[row][col] != 0:
            raise ValueError("cell already occupied")
        self._push_stone(row, col, color)

    def undo(self, row, col):
        """Remove a stone placed earlier (search backtracking)."""
        if not self.in_bounds(row, col):
            raise ValueError("move out of bounds")
        if self.cells[row][col] == 0:
            raise ValueError("cell is already empty")
        self._pop_stone(row, col)

    def _push_stone(self, row, col, color):
        self.cells[row][col] = color
        self.move_count += 1
        self.history.append((row, col))
        self.hash = self.zobrist.toggle(self.hash, row, col, color)

    def _pop_stone(self, row, col):
        color = self.cells[row][col]
        self.cells[row][col] = 0
        self.move_count -= 1
        if self.history and self.history[-1] == (row, col):
            self.history.pop()
        else:
            self.history.remove((row, col))
        self.hash = self.zobrist.toggle(self.hash, row, col, color)

    def clone(self):
        new_board = Board(self.size, zobrist=self.zobrist)
        new_board.cells = [r[:] for r in self.cells]
        new_board.move_count = self.move_count
        new_board.history = self.history[:]
        new_board.hash = self.hash
        return new_board

    def empty_cells(self):
        return [(r, c) for r in range(self.size) for c in range(self.size) if self.cells[r][c] == 0]

    def first_empty(self, prefer_center=False):
        return first_empty_cell(self.cells, prefer_center)

    def is_five_in_a_row(self, row, col, color=None, allow_overline=True):
        """
        Check the line through an occupied (row, col) for a winning run.
        With allow_overline a run of 5+ wins; otherwise the run must be exactly 5.
        """
        if color is None:
            color = self.cells[row][col]
        if color not in (-1, 1) or self.cells[row][col] != color:
            return False
        for dr, dc in DIRECTIONS:
            total = 1 + self._count_dir(row, col, dr, dc, color) + self._count_dir(row, col, -dr, -dc, color)
            if total == 5 or (allow_overline and total > 5):
                return True
        return False

    def has_exact_five(self, row, col):
        """Check for an exact five-in-a-row through (row, col); overlines do not win."""
        return self.is_five_in_a_row(row, col, allow_overline=False)

    def has_five_or_more(self, row, col):
        """Check for 5+ in any direction through (row, col)."""
        return self.is_five_in_a_row(row, col, allow_overline=True)

    def max_line_length(self, row, col):
        """Return the maximum contiguous line length through (row, col)."""
        color = self.cells[row][col]
        if color not in (-1, 1):
            return 0
        best = 0
        for dr, dc in DIRECTIONS:
            forward = self._count_dir(row, col, dr, dc, color)
            backward = self._count_dir(row, col, -dr, -dc, color)
            best = max(best, 1 + forward + backward)
        return best

    def find_winner(self, allow_overline=True):
        """Scan every stone; return the winning color or 0."""
        for row, col in self.history:
            if self.is_five_in_a_row(row, col, allow_overline=allow_overline):
                return self.cells[row][col]
        return 0

    def _count_dir(self, row, col, dr, dc, color):
        """Count contiguous stones of color from (row, col) (exclusive) in (dr, dc)."""
        count = 0
        r, c = row + dr, col + dc
        while 0 <= r < self.size and 0 <= c < self.size and self.cells[r][c] == color:
            count += 1
            r += dr
            c += dc
        return count

    def to_text(self, last_move=None):
        header = "   " + " ".join(f"{c % 10}" for c in range(self.size))
        lines = [header]
        for r in range(self.size):
            marks = []
            for c in range(self.size):
                ch = STONE_CHARS[self.cells[r][c]]
                if last_move == (r, c):
                    ch = ch.lower() if ch != "." else ch
                marks.append(ch)
            lines.append(f"{r:2d} " + " ".join(marks))
        return "\n".join(lines)
