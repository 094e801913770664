"""Zobrist signatures and incremental position hashing."""

import random


class ZobristTable:
    """Random 64-bit signature per (cell, stone color); fixed for a session."""

    def __init__(self, size=15, seed=None):
        self.size = size
        self.seed = seed
        rng = random.Random(seed)
        # index 0 -> black (-1), index 1 -> white (1)
        self._table = [[rng.getrandbits(64) for _ in range(2)] for _ in range(size * size)]

    def signature(self, row, col, color):
        if color not in (-1, 1):
            raise ValueError("color must be -1 (black) or 1 (white)")
        return self._table[row * self.size + col][0 if color == -1 else 1]

    def toggle(self, h, row, col, color):
        """XOR the (row, col, color) signature in or out; toggling twice is a no-op."""
        return h ^ self.signature(row, col, color)

    def hash_cells(self, cells):
        h = 0
        for row in range(self.size):
            for col in range(self.size):
                v = cells[row][col]
                if v == 0:
                    continue
                h ^= self.signature(row, col, v)
        return h

    def hash_board(self, board):
        """Full recomputation; search relies on Board's running hash instead."""
        if board.size != self.size:
            raise ValueError(f"board size {board.size} does not match Zobrist table size {self.size}")
        return self.hash_cells(board.cells)
