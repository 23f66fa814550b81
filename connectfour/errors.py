"""
errors.py - Exceptions raised by the Connect Four engine

All of these are local, recoverable conditions reported to the caller.
Wins and draws are never signalled through exceptions.
"""

from typing import Optional


class ConnectFourError(Exception):
    """Base class for every engine error."""


class ColumnFullError(ConnectFourError):
    """A piece was dropped into a column with no empty cell."""

    def __init__(self, column: int):
        self.column = column
        super().__init__(f"Column {column} is full")


class IllegalMoveError(ConnectFourError):
    """A move was attempted when it is not allowed."""

    def __init__(self, reason: str, column: Optional[int] = None):
        self.reason = reason
        self.column = column
        if column is None:
            super().__init__(reason)
        else:
            super().__init__(f"Illegal move in column {column}: {reason}")


class OutOfBoundsError(ConnectFourError, IndexError):
    """A row/column outside the 6x7 grid was addressed."""

    def __init__(self, row: Optional[int], col: int):
        self.row = row
        self.col = col
        if row is None:
            super().__init__(f"Column {col} is out of bounds")
        else:
            super().__init__(f"Position ({row}, {col}) is out of bounds")
