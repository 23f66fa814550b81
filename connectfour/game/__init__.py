"""
connectfour.game - Core game mechanics for Connect Four

This package contains the board representation, win detection, the
session state machine and the scheduler used for deferred AI moves.
"""

from connectfour.game.board import Board
from connectfour.game.rules import check_win, is_draw
from connectfour.game.state import GameState

__all__ = ['Board', 'check_win', 'is_draw', 'GameState']
