"""
minimax.py - Fixed-depth minimax opponent for Connect Four

The SearchEngine looks a fixed number of plies ahead without pruning.
Leaves are scored by a plain material count; a move that connects four is
scored by a fixed win constant as soon as it is played, so an immediate win
always outranks any material count.
"""

import math
from dataclasses import dataclass
from typing import Optional

from connectfour.config import EngineConfig
from connectfour.debug import debug
from connectfour.game.board import Board
from connectfour.game.rules import check_win
from connectfour.utils import Player


@dataclass(frozen=True)
class SearchResult:
    """
    Outcome of a root search.

    ``column`` is None when no column was playable, which is distinct from
    a legal move in column 0.
    """
    column: Optional[int]
    score: float
    nodes: int = 0

    @property
    def has_move(self) -> bool:
        return self.column is not None


class SearchEngine:
    """
    A Connect Four player that searches the game tree to a fixed depth.

    The engine never touches the board it is asked about: every search
    runs on a clone, and hypothetical pieces are dropped and lifted there.
    Columns are always tried left to right and ties keep the first column
    seen, so the result is fully deterministic.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize the search engine.

        Args:
            config: Depth, scores and weights; defaults to EngineConfig()
        """
        self.config = config or EngineConfig()
        self.nodes_evaluated = 0  # For performance tracking
        self._ai = Player.TWO
        self._opponent = Player.ONE

    @property
    def depth(self) -> int:
        return self.config.search_depth

    def set_players(self, ai_player: Player, opponent_player: Player) -> None:
        """Choose the sides minimax() and evaluate() score for."""
        self._ai = ai_player
        self._opponent = opponent_player

    def search(self, board: Board, ai_player: Player, opponent_player: Player,
               depth: Optional[int] = None) -> SearchResult:
        """
        Score every playable column for ``ai_player``.

        Args:
            board: The current game board (left unchanged)
            ai_player: The side to move
            opponent_player: The other side
            depth: Plies to search including the root move; defaults to
                the configured search depth

        Returns:
            The best column and its score, or a result without a column
            if the board has no playable column
        """
        depth = self.depth if depth is None else depth
        if depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {depth}")
        if ai_player == opponent_player or Player.EMPTY in (ai_player, opponent_player):
            raise ValueError("ai_player and opponent_player must be the two different sides")

        self.nodes_evaluated = 0
        self.set_players(ai_player, opponent_player)
        scratch = board.clone()

        best_column = None
        best_score = -math.inf

        with debug.timed("search", "search"):
            for column in scratch.valid_moves():
                row = scratch.drop_at(column, ai_player)
                self.nodes_evaluated += 1
                if check_win(scratch, row, column, ai_player):
                    score = float(self.config.win_score)
                else:
                    score = self.minimax(scratch, depth - 1, False)
                scratch.lift(column)

                debug.trace(f"Column {column} scores {score}", "search")
                # Strict comparison keeps the first (lowest) column on ties.
                if best_column is None or score > best_score:
                    best_score = score
                    best_column = column

        if best_column is None:
            debug.warning("No playable column left to search", "search")
            return SearchResult(None, 0.0, self.nodes_evaluated)

        debug.debug(
            f"{ai_player.name} picks column {best_column} (score {best_score}, "
            f"{self.nodes_evaluated} nodes, depth {depth})",
            "search",
        )
        return SearchResult(best_column, best_score, self.nodes_evaluated)

    def choose_column(self, board: Board, ai_player: Player, opponent_player: Player,
                      depth: Optional[int] = None) -> int:
        """
        Get the best column for ``ai_player``.

        Returns:
            The chosen column, or the configured fallback column when the
            board has no playable column
        """
        result = self.search(board, ai_player, opponent_player, depth)
        if not result.has_move:
            return self.config.fallback_column
        return result.column

    def minimax(self, board: Board, depth: int, maximizing: bool) -> float:
        """
        Plain minimax without pruning.

        Scores from the side given to set_players() (or the most recent
        search() call). ``board`` is modified during the call and restored
        before it returns.

        Args:
            board: Board to explore
            depth: Remaining plies
            maximizing: True if the AI is to move

        Returns:
            The evaluation score for this position from the AI's side
        """
        if depth == 0:
            return self.evaluate(board)

        moves = board.valid_moves()
        if not moves:
            # Full board: a drawn position carries no more search information.
            return self.evaluate(board)

        if maximizing:
            player, win_score, best = self._ai, float(self.config.win_score), -math.inf
        else:
            player, win_score, best = self._opponent, -float(self.config.win_score), math.inf

        for column in moves:
            row = board.drop_at(column, player)
            self.nodes_evaluated += 1
            if check_win(board, row, column, player):
                board.lift(column)
                return win_score
            score = self.minimax(board, depth - 1, not maximizing)
            board.lift(column)

            best = max(best, score) if maximizing else min(best, score)

        return best

    def evaluate(self, board: Board) -> float:
        """
        Static material count.

        Returns:
            AI pieces times their weight minus opponent pieces times theirs
        """
        return float(self.config.ai_cell_weight * board.count(self._ai)
                     - self.config.opponent_cell_weight * board.count(self._opponent))
