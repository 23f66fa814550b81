"""
session.py - Game session state machine for Connect Four

A GameSession owns one Board, decides whose turn it is, detects wins and
draws after every move and, in AI mode, schedules the AI's reply. The
presentation layer drives it through apply_human_move() and learns about
every transition through on_state_change() subscriptions.
"""

import threading
from collections import deque
from typing import Callable, Deque, List, Optional, Union

from connectfour.ai.minimax import SearchEngine
from connectfour.config import EngineConfig
from connectfour.debug import debug
from connectfour.errors import ColumnFullError, IllegalMoveError, OutOfBoundsError
from connectfour.game.board import Board
from connectfour.game.rules import WinChain, check_win
from connectfour.game.scheduler import ManualScheduler, ScheduledTask, Scheduler
from connectfour.game.state import GameState
from connectfour.utils import Coord, GameMode, GameStatus, Player, is_valid_column

StateCallback = Callable[[GameState], None]


class GameSession:
    """
    One game of Connect Four between two humans or a human and the AI.

    Player ONE always moves first. In AI mode the configured ai_player
    (TWO by default) is answered by the SearchEngine after ``ai_delay``
    seconds. Every reset or mode switch starts a new epoch; an AI reply
    scheduled in an earlier epoch is cancelled and, should it still fire,
    ignored.
    """

    def __init__(self, mode: GameMode = GameMode.TWO_PLAYER,
                 config: Optional[EngineConfig] = None,
                 scheduler: Optional[Scheduler] = None,
                 engine: Optional[SearchEngine] = None):
        self.config = config or EngineConfig()
        self.scheduler = scheduler or ManualScheduler()
        self.engine = engine or SearchEngine(self.config)
        self.board = Board()
        self.mode = mode

        self.current_player = Player.ONE
        self.status = GameStatus.IN_PROGRESS
        self.winner: Optional[Player] = None
        self.winning_chain: WinChain = ()
        self.last_move: Optional[Coord] = None
        self.epoch = 0

        self._pending_ai: Optional[ScheduledTask] = None
        self._subscribers: List[StateCallback] = []
        self._outbox: Deque[GameState] = deque()
        self._delivering = False
        self._lock = threading.RLock()

        debug.debug(f"New session in {mode.value} mode", "session")
        if self.is_ai_turn():
            self._schedule_ai_move()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def ai_player(self) -> Player:
        return self.config.ai_player

    @property
    def ai_enabled(self) -> bool:
        return self.mode.ai_enabled

    def is_ai_turn(self) -> bool:
        return (self.ai_enabled and self.status == GameStatus.IN_PROGRESS
                and self.current_player == self.ai_player)

    def current_state(self) -> GameState:
        """Read-only snapshot of the session."""
        with self._lock:
            return GameState(
                status=self.status,
                current_player=self.current_player,
                mode=self.mode,
                board=self.board.get_state(),
                winner=self.winner,
                winning_chain=self.winning_chain,
                last_move=self.last_move,
                move_count=self.board.move_count,
                ai_pending=self._pending_ai is not None and self._pending_ai.pending,
                epoch=self.epoch,
            )

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def on_state_change(self, callback: StateCallback) -> Callable[[], None]:
        """
        Subscribe to state transitions.

        Args:
            callback: Called with the new GameState after every transition

        Returns:
            A function that removes the subscription
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self) -> None:
        """
        Queue a snapshot and deliver queued snapshots in order.

        A callback that triggers another transition only queues it; the
        outer delivery loop hands it out after the current one finishes.
        A failing callback is logged and skipped; the transition it was
        told about has already happened.
        """
        self._outbox.append(self.current_state())
        if self._delivering:
            return
        self._delivering = True
        try:
            while self._outbox:
                state = self._outbox.popleft()
                for callback in list(self._subscribers):
                    try:
                        callback(state)
                    except Exception as e:
                        debug.error(f"State subscriber {callback!r} failed: {e}", "session")
        finally:
            self._delivering = False

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def apply_human_move(self, column: int) -> GameState:
        """
        Play ``column`` for the side whose turn it is.

        Raises:
            IllegalMoveError: If the game is over or the AI is to move
            OutOfBoundsError: If the column is not on the board
            ColumnFullError: If the column is full
        """
        with self._lock:
            if self.is_ai_turn():
                debug.debug(f"Rejected human move in column {column}: AI to move", "session")
                raise IllegalMoveError("it is the AI's turn", column)
            return self.apply_move(column)

    def apply_move(self, column: int) -> GameState:
        """
        Play ``column`` for the current player and advance the game.

        This is the single mutation path shared by human and AI moves.
        """
        with self._lock:
            if self.status.is_game_over():
                debug.debug(f"Rejected move in column {column}: game is over", "session")
                raise IllegalMoveError("the game is over", column)
            if not is_valid_column(column):
                raise OutOfBoundsError(None, column)

            player = self.current_player
            try:
                row = self.board.drop_at(column, player)
            except ColumnFullError:
                debug.debug(f"Rejected move: column {column} is full", "session")
                raise

            self.last_move = (row, column)
            chain = check_win(self.board, row, column, player)

            if chain:
                self.status = GameStatus.WON
                self.winner = player
                self.winning_chain = chain
                debug.info(f"{player.label} wins with {list(chain)}", "session")
            elif self.board.is_full():
                self.status = GameStatus.DRAWN
                debug.info("Board is full: draw", "session")
            else:
                self.current_player = player.other()
                debug.debug(f"{player.label} played ({row}, {column}); "
                            f"{self.current_player.label} to move", "session")
                if self.is_ai_turn():
                    self._schedule_ai_move()

            state = self.current_state()
            self._publish()
            return state

    def _schedule_ai_move(self) -> None:
        self._cancel_pending_ai()
        epoch = self.epoch
        self._pending_ai = self.scheduler.call_later(
            self.config.ai_delay,
            lambda: self.run_ai_move(epoch),
            name=f"ai-move-epoch-{epoch}",
        )

    def _cancel_pending_ai(self) -> None:
        if self._pending_ai is not None:
            self._pending_ai.cancel()
            self._pending_ai = None

    def run_ai_move(self, epoch: int) -> Optional[GameState]:
        """
        Let the AI play, unless the request belongs to an earlier epoch.

        Returns:
            The new state, or None if the request was discarded
        """
        with self._lock:
            if epoch != self.epoch:
                debug.debug(f"Discarding stale AI move from epoch {epoch} (now {self.epoch})", "session")
                return None
            if not self.is_ai_turn():
                debug.debug("Discarding AI move: not the AI's turn", "session")
                return None

            self._pending_ai = None
            result = self.engine.search(self.board, self.ai_player, self.ai_player.other())
            if not result.has_move:
                # Unreachable while the draw check runs after every move.
                debug.error("AI has no playable column", "session")
                return None
            debug.info(f"AI plays column {result.column}", "session")
            return self.apply_move(result.column)

    def reset(self) -> GameState:
        """Start a new game with an empty board, keeping the current mode."""
        with self._lock:
            self._cancel_pending_ai()
            self.epoch += 1
            self.board.reset()
            self.current_player = Player.ONE
            self.status = GameStatus.IN_PROGRESS
            self.winner = None
            self.winning_chain = ()
            self.last_move = None
            debug.debug(f"Session reset (epoch {self.epoch}, {self.mode.value} mode)", "session")

            if self.is_ai_turn():
                self._schedule_ai_move()

            state = self.current_state()
            self._publish()
            return state

    def set_mode(self, ai_mode: Union[bool, GameMode]) -> GameState:
        """
        Switch between two-player and AI mode.

        The game restarts whenever the mode actually changes.
        """
        with self._lock:
            mode = ai_mode if isinstance(ai_mode, GameMode) else GameMode.from_flag(ai_mode)
            if mode == self.mode:
                return self.current_state()
            debug.info(f"Switching to {mode.value} mode", "session")
            self.mode = mode
            return self.reset()

    def toggle_mode(self) -> GameState:
        """Flip between the two modes and restart."""
        with self._lock:
            return self.set_mode(not self.ai_enabled)

    def close(self) -> None:
        """Drop any pending AI reply."""
        with self._lock:
            self._cancel_pending_ai()
            self.epoch += 1


def start_session(mode: Union[GameMode, bool, str] = GameMode.TWO_PLAYER,
                  config: Optional[EngineConfig] = None,
                  scheduler: Optional[Scheduler] = None) -> GameSession:
    """
    Create an independent game session.

    Args:
        mode: A GameMode, True/False for AI mode, or "ai"/"two-player"
        config: Engine settings
        scheduler: Where deferred AI moves run; a ManualScheduler by default

    Returns:
        A new GameSession with an empty board and player ONE to move
    """
    if isinstance(mode, bool):
        mode = GameMode.from_flag(mode)
    elif isinstance(mode, str):
        mode = GameMode(mode)
    return GameSession(mode, config=config, scheduler=scheduler)
