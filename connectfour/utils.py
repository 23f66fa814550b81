"""
utils.py - Constants, enumerations and helpers for the Connect Four engine

This module provides the board dimensions, the cell/player enumeration,
game status values and small helpers shared by the board, the rules and
the search.
"""

from enum import Enum, auto
from typing import Iterable, Optional, Tuple

import numpy as np

# Game constants
ROWS = 6
COLS = 7
CONNECT_N = 4  # Number of pieces in a row to win

Coord = Tuple[int, int]  # (row, col), row 0 is the top


class Player(Enum):
    """Enumeration representing players and cell states."""
    EMPTY = 0
    ONE = 1    # Yellow, always moves first
    TWO = 2    # Red, the AI side in AI mode

    def other(self) -> 'Player':
        """Get the other player."""
        if self == Player.ONE:
            return Player.TWO
        elif self == Player.TWO:
            return Player.ONE
        return Player.EMPTY

    @property
    def label(self) -> str:
        """Colour name shown to players."""
        if self == Player.ONE:
            return "Yellow"
        elif self == Player.TWO:
            return "Red"
        return "Empty"

    def __str__(self):
        if self == Player.EMPTY:
            return " "
        elif self == Player.ONE:
            return "X"
        else:
            return "O"


class GameStatus(Enum):
    """Enumeration representing the state of a session."""
    IN_PROGRESS = auto()
    WON = auto()
    DRAWN = auto()

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self != GameStatus.IN_PROGRESS


class GameMode(Enum):
    """Who controls player TWO."""
    TWO_PLAYER = "two-player"
    AI = "ai"

    @classmethod
    def from_flag(cls, ai_mode: bool) -> 'GameMode':
        return cls.AI if ai_mode else cls.TWO_PLAYER

    @property
    def ai_enabled(self) -> bool:
        return self == GameMode.AI


class Direction(Enum):
    """Enumeration representing the four axes checked for a win."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_UP = auto()  # Diagonal from bottom-left to top-right
    DIAGONAL_DOWN = auto()  # Diagonal from top-left to bottom-right


# Direction vectors (row, col) for each axis. Vertical points upwards so a
# column run is reported bottom to top.
DIRECTION_VECTORS = {
    Direction.HORIZONTAL: (0, 1),
    Direction.VERTICAL: (-1, 0),
    Direction.DIAGONAL_UP: (-1, 1),
    Direction.DIAGONAL_DOWN: (1, 1)
}


def is_valid_position(row: int, col: int) -> bool:
    """
    Check if a position is within the board boundaries.

    Args:
        row: Row index
        col: Column index

    Returns:
        True if position is valid, False otherwise
    """
    return 0 <= row < ROWS and 0 <= col < COLS


def is_valid_column(col: int) -> bool:
    return 0 <= col < COLS


def render_board_ascii(grid: np.ndarray, highlight: Optional[Iterable[Coord]] = None) -> str:
    """
    Render the board as ASCII art.

    Pieces in ``highlight`` (usually the winning chain) are drawn as ``*``.

    Args:
        grid: The game board
        highlight: Optional cells to mark

    Returns:
        ASCII representation of the board
    """
    marked = set(highlight or ())
    result = []
    result.append("|" + "-" * (COLS * 2 - 1) + "|")

    for row in range(ROWS):
        cells = []
        for col in range(COLS):
            symbol = str(Player(int(grid[row, col])))
            if (row, col) in marked:
                symbol = "*"
            cells.append(symbol)
        result.append("|" + " ".join(cells) + "|")

    result.append("|" + "-" * (COLS * 2 - 1) + "|")
    result.append("|" + " ".join(str(i) for i in range(COLS)) + "|")

    return "\n".join(result)
