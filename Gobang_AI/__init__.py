"""Gobang_AI package exports."""

from .Board import Board
from .GobangGame import GobangGame
from .Player import Player, HumanPlayer
from .AIPlayer import AIPlayer

# Subpackages for rules, AI search, and helpers
from . import ai, engine, utils

__all__ = [
    "Board",
    "GobangGame",
    "Player",
    "HumanPlayer",
    "AIPlayer",
    "ai",
    "engine",
    "utils",
]
