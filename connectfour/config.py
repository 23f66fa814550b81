"""
config.py - Tunables for the search opponent and the session
"""

from dataclasses import dataclass, replace

from connectfour.utils import COLS, ROWS, Player

DEFAULT_SEARCH_DEPTH = 4  # plies, counting the root placement
DEFAULT_AI_DELAY = 0.3    # seconds between a human move and the AI reply
WIN_SCORE = 1000
AI_CELL_WEIGHT = 3
OPPONENT_CELL_WEIGHT = 2
FALLBACK_COLUMN = 3


@dataclass(frozen=True)
class EngineConfig:
    """
    Settings shared by a GameSession and its SearchEngine.

    Attributes:
        search_depth: Fixed number of plies the AI looks ahead (>= 1)
        ai_delay: Pause in seconds before the AI answers a human move
        win_score: Score of a position where a side has just connected four
        ai_cell_weight: Material value of each AI piece
        opponent_cell_weight: Material value of each opponent piece
        fallback_column: Column reported when no column is playable
        ai_player: Side controlled by the AI in AI mode
    """
    search_depth: int = DEFAULT_SEARCH_DEPTH
    ai_delay: float = DEFAULT_AI_DELAY
    win_score: int = WIN_SCORE
    ai_cell_weight: int = AI_CELL_WEIGHT
    opponent_cell_weight: int = OPPONENT_CELL_WEIGHT
    fallback_column: int = FALLBACK_COLUMN
    ai_player: Player = Player.TWO

    def __post_init__(self):
        if self.search_depth < 1:
            raise ValueError(f"search_depth must be at least 1, got {self.search_depth}")
        if self.ai_delay < 0:
            raise ValueError(f"ai_delay must not be negative, got {self.ai_delay}")
        if self.ai_cell_weight < 0 or self.opponent_cell_weight < 0:
            raise ValueError("cell weights must not be negative")
        # A win has to outrank any material count on a full board.
        if self.win_score <= ROWS * COLS * max(self.ai_cell_weight, self.opponent_cell_weight):
            raise ValueError(f"win_score {self.win_score} does not dominate material scores")
        if not 0 <= self.fallback_column < COLS:
            raise ValueError(f"fallback_column must be in [0, {COLS}), got {self.fallback_column}")
        if self.ai_player == Player.EMPTY:
            raise ValueError("ai_player must be Player.ONE or Player.TWO")

    @property
    def human_player(self) -> Player:
        return self.ai_player.other()

    def with_overrides(self, **overrides) -> 'EngineConfig':
        """Return a copy with the given fields replaced (None values are ignored)."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
