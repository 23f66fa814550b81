"""
connectfour - Connect Four game engine with a minimax opponent

This package provides the board model, win detection, a fixed-depth
minimax search and a session object that drives turn order and notifies
presentation layers about every state change.
"""

# Version number
__version__ = '0.1.0'

from connectfour.errors import (ConnectFourError, ColumnFullError,
                                IllegalMoveError, OutOfBoundsError)
from connectfour.game.session import GameSession, start_session
from connectfour.utils import GameMode, GameStatus, Player

__all__ = ['start_session', 'GameSession', 'GameMode', 'GameStatus', 'Player',
           'ConnectFourError', 'ColumnFullError', 'IllegalMoveError', 'OutOfBoundsError']
