"""
rules.py - Win and draw detection for Connect Four

check_win looks only at the lines through the piece that was just placed,
which is all that can change after a single move.
"""

from typing import List, Optional, Tuple

from connectfour.debug import debug
from connectfour.game.board import Board
from connectfour.utils import (ROWS, COLS, CONNECT_N, DIRECTION_VECTORS, Coord,
                               Player, is_valid_position)

WinChain = Tuple[Coord, ...]


def _walk(board: Board, row: int, col: int, dr: int, dc: int, player_value: int) -> List[Coord]:
    """Collect consecutive ``player_value`` cells from (row, col) stepping by (dr, dc)."""
    cells = []
    r, c = row + dr, col + dc
    while is_valid_position(r, c) and board.grid[r, c] == player_value:
        cells.append((r, c))
        r += dr
        c += dc
    return cells


def check_win(board: Board, row: int, col: int, player: Player) -> Optional[WinChain]:
    """
    Check whether the piece at (row, col) completes a line for ``player``.

    Each of the four axes is walked in both directions until the first
    mismatch or the edge of the board. The first axis with a run of at
    least CONNECT_N pieces is reported.

    Args:
        board: The board to inspect (not modified)
        row: Row of the piece just placed
        col: Column of the piece just placed
        player: The side that placed it

    Returns:
        The full run along that axis, ordered from the backward end through
        the origin to the forward end, or None if there is no win
    """
    board.get(row, col)  # bounds check
    if player == Player.EMPTY or board.grid[row, col] != player.value:
        return None

    for direction, (dr, dc) in DIRECTION_VECTORS.items():
        backward = _walk(board, row, col, -dr, -dc, player.value)
        forward = _walk(board, row, col, dr, dc, player.value)

        if len(backward) + 1 + len(forward) >= CONNECT_N:
            chain = tuple(reversed(backward)) + ((row, col),) + tuple(forward)
            debug.trace(f"{player.name} connects {len(chain)} along {direction.name}: {chain}", "rules")
            return chain

    return None


def has_any_win(board: Board) -> bool:
    """Check every occupied cell for a completed line."""
    for row in range(ROWS):
        for col in range(COLS):
            value = int(board.grid[row, col])
            if value != Player.EMPTY.value and check_win(board, row, col, Player(value)):
                return True
    return False


def is_draw(board: Board) -> bool:
    """A full board on which nobody has connected four."""
    return board.is_full() and not has_any_win(board)
