"""
board.py - Board representation for Connect Four

This module implements the Board class: a 6x7 grid of cell states with
column-drop placement, bounds-checked queries and the copy/lift helpers the
search uses to explore hypothetical moves. Row 0 is the top of the board.
"""

from typing import List, Optional, Sequence

import numpy as np

from connectfour.debug import debug
from connectfour.errors import ColumnFullError, IllegalMoveError, OutOfBoundsError
from connectfour.utils import (ROWS, COLS, Coord, Player, is_valid_column,
                               is_valid_position, render_board_ascii)


class Board:
    """
    Represents a Connect Four game board.

    The board only stores pieces; whose turn it is and whether the game is
    over are tracked by the session. Every mutation keeps the gravity
    invariant: a cell is occupied only if all cells below it are.
    """

    def __init__(self):
        """Initialize an empty Connect Four board."""
        self.grid = np.zeros((ROWS, COLS), dtype=int)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> 'Board':
        """
        Build a board from a top-to-bottom list of rows of cell values.

        Args:
            rows: ROWS sequences of COLS values in {0, 1, 2}

        Returns:
            A new Board holding that position

        Raises:
            ValueError: If the shape or values are wrong or a piece floats
        """
        grid = np.array(rows, dtype=int)
        if grid.shape != (ROWS, COLS):
            raise ValueError(f"Position must be {ROWS}x{COLS}, got {grid.shape}")
        if not np.isin(grid, [p.value for p in Player]).all():
            raise ValueError("Position contains values other than 0, 1 and 2")

        board = cls()
        board.grid = grid
        if not board.satisfies_gravity():
            raise ValueError("Position has a piece above an empty cell")
        return board

    def reset(self) -> None:
        """Reset the board to an empty state."""
        debug.debug("Resetting board", "board")
        self.grid.fill(Player.EMPTY.value)

    def clone(self) -> 'Board':
        """
        Create a deep copy of the current board.

        Returns:
            A new Board instance with the same pieces
        """
        debug.trace("Creating board copy", "board")
        new_board = Board()
        new_board.grid = self.grid.copy()
        return new_board

    def _check_position(self, row: int, col: int) -> None:
        if not is_valid_position(row, col):
            raise OutOfBoundsError(row, col)

    def _check_column(self, col: int) -> None:
        if not is_valid_column(col):
            raise OutOfBoundsError(None, col)

    def get(self, row: int, col: int) -> Player:
        """Return the state of one cell."""
        self._check_position(row, col)
        return Player(int(self.grid[row, col]))

    def is_empty(self, row: int, col: int) -> bool:
        self._check_position(row, col)
        return self.grid[row, col] == Player.EMPTY.value

    def is_column_full(self, column: int) -> bool:
        self._check_column(column)
        return self.grid[0, column] != Player.EMPTY.value

    def next_open_row(self, column: int) -> Optional[int]:
        """
        Find the row a piece dropped in ``column`` would land in.

        Returns:
            The lowest empty row index, or None if the column is full
        """
        self._check_column(column)
        for row in range(ROWS - 1, -1, -1):
            if self.grid[row, column] == Player.EMPTY.value:
                return row
        return None

    def valid_moves(self) -> List[int]:
        """
        Get the columns that still have an empty cell.

        Returns:
            Ascending list of playable column indices
        """
        return [col for col in range(COLS) if self.grid[0, col] == Player.EMPTY.value]

    def is_full(self) -> bool:
        return bool(np.all(self.grid[0] != Player.EMPTY.value))

    def count(self, player: Player) -> int:
        """Number of cells holding ``player``."""
        return int(np.count_nonzero(self.grid == player.value))

    @property
    def move_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def drop_at(self, column: int, player: Player) -> int:
        """
        Drop a piece for ``player`` into ``column``.

        Args:
            column: The column to place a piece (0-indexed)
            player: The side whose piece is placed

        Returns:
            The row the piece landed in

        Raises:
            OutOfBoundsError: If the column is outside the board
            ColumnFullError: If the column has no empty cell
        """
        if player == Player.EMPTY:
            raise ValueError("Cannot drop an empty piece")

        row = self.next_open_row(column)
        if row is None:
            debug.debug(f"Rejected drop: column {column} is full", "board")
            raise ColumnFullError(column)

        debug.trace(f"Placing {player.name} at ({row}, {column})", "board")
        self.grid[row, column] = player.value
        return row

    def lift(self, column: int) -> int:
        """
        Remove the top-most piece from a column.

        Used by the search to take back hypothetical moves.

        Returns:
            The row the piece was removed from

        Raises:
            IllegalMoveError: If the column is empty
        """
        self._check_column(column)
        for row in range(ROWS):
            if self.grid[row, column] != Player.EMPTY.value:
                self.grid[row, column] = Player.EMPTY.value
                return row
        raise IllegalMoveError("column is empty", column)

    def satisfies_gravity(self) -> bool:
        """Check that no piece sits above an empty cell."""
        occupied = self.grid != Player.EMPTY.value
        # Below an occupied cell (rows 0..ROWS-2) every cell must be occupied.
        return not np.any(occupied[:-1] & ~occupied[1:])

    def get_state(self) -> np.ndarray:
        """
        Get a read-only copy of the grid.

        Returns:
            2D numpy array representing the board
        """
        state = self.grid.copy()
        state.setflags(write=False)
        return state

    def render(self, highlight: Optional[Sequence[Coord]] = None) -> str:
        """
        Render the board as a string.

        Args:
            highlight: Cells to mark, e.g. the winning chain

        Returns:
            String representation of the board
        """
        return render_board_ascii(self.grid, highlight)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.grid, other.grid))

    __hash__ = None

    def __str__(self) -> str:
        return self.render()
