"""
state.py - Read-only snapshot of a game session
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from connectfour.game.rules import WinChain
from connectfour.utils import Coord, GameMode, GameStatus, Player


@dataclass(frozen=True, eq=False)
class GameState:
    """
    Externally observable state of a GameSession after a transition.

    ``board`` is a non-writeable copy of the grid; mutating the session
    later does not change a snapshot already handed out.
    """
    status: GameStatus
    current_player: Player
    mode: GameMode
    board: np.ndarray
    winner: Optional[Player] = None
    winning_chain: WinChain = ()
    last_move: Optional[Coord] = None
    move_count: int = 0
    ai_pending: bool = False
    epoch: int = 0

    @property
    def is_over(self) -> bool:
        return self.status.is_game_over()

    @property
    def is_draw(self) -> bool:
        return self.status == GameStatus.DRAWN

    def is_ai_turn(self, ai_player: Player) -> bool:
        return (self.mode.ai_enabled and not self.is_over
                and self.current_player == ai_player)
