"""
cli.py - Terminal front-end for a Connect Four session

The terminal plays the part of the presentation layer: it subscribes to a
GameSession, redraws the board after every transition and turns typed
commands into session calls. Deferred AI replies run on a ManualScheduler
that this loop drives, so the AI's pause happens between prompts.
"""

import argparse
from typing import Callable, List, Optional

from connectfour.config import EngineConfig
from connectfour.debug import debug, DebugLevel
from connectfour.errors import ConnectFourError
from connectfour.game.scheduler import ManualScheduler
from connectfour.game.session import GameSession
from connectfour.game.state import GameState
from connectfour.utils import COLS, GameMode, GameStatus, Player, render_board_ascii

QUIT = "quit"
RESTART = "restart"
TOGGLE_MODE = "mode"


def turn_text(state: GameState, ai_player: Player = Player.TWO) -> str:
    """Status line shown above the board."""
    if state.status == GameStatus.WON:
        return f"GAME OVER - {state.winner.label} wins!"
    if state.status == GameStatus.DRAWN:
        return "GAME OVER - DRAW"
    if state.is_ai_turn(ai_player):
        return "AI Thinking..."
    return f"{state.current_player.label}'s Turn"


def render_state(state: GameState, ai_player: Player = Player.TWO) -> str:
    """Board with the winning chain highlighted, followed by the status line."""
    return "\n".join([
        render_board_ascii(state.board, state.winning_chain),
        turn_text(state, ai_player),
    ])


def parse_command(raw: str):
    """
    Turn a line of input into a column index or a command name.

    Returns:
        An int column, one of QUIT/RESTART/TOGGLE_MODE, or None if the
        input is not understood
    """
    text = raw.strip().lower()
    if text in ("q", "quit", "exit"):
        return QUIT
    if text in ("r", "restart"):
        return RESTART
    if text in ("m", "mode"):
        return TOGGLE_MODE
    try:
        return int(text)
    except ValueError:
        return None


class TerminalInterface:
    """Interactive terminal game bound to one GameSession."""

    def __init__(self, mode: GameMode = GameMode.AI,
                 config: Optional[EngineConfig] = None,
                 input_func: Callable[[str], str] = input,
                 output_func: Callable[[str], None] = print,
                 sleep: Optional[Callable[[float], None]] = None):
        self.config = config or EngineConfig()
        self.scheduler = ManualScheduler(sleep=sleep) if sleep else ManualScheduler()
        self.session = GameSession(mode, config=self.config, scheduler=self.scheduler)
        self._input = input_func
        self._output = output_func
        self.frames: List[str] = []
        self._unsubscribe = self.session.on_state_change(self._redraw)

    def _redraw(self, state: GameState) -> None:
        frame = render_state(state, self.config.ai_player)
        self.frames.append(frame)
        self._output(frame)

    def _mode_line(self) -> str:
        if self.session.ai_enabled:
            return "Mode: AI (m to switch to 2-Player Mode)"
        return "Mode: 2-Player (m to switch to AI Mode)"

    def play(self) -> GameState:
        """
        Run the game loop until the player quits or input ends.

        Returns:
            The final session state
        """
        self._output(f"Enter a column number (0-{COLS - 1}). Commands: r restart, m switch mode, q quit.")
        self._output(self._mode_line())
        self._output(render_state(self.session.current_state(), self.config.ai_player))

        while True:
            state = self.session.current_state()
            if state.ai_pending:
                self.scheduler.run_next(wait=True)
                continue

            prompt = "Game over (r/m/q): " if state.is_over else f"{state.current_player.label} move: "
            try:
                raw = self._input(prompt)
            except EOFError:
                break

            command = parse_command(raw)
            if command == QUIT:
                break
            elif command == RESTART:
                self.session.reset()
            elif command == TOGGLE_MODE:
                self.session.toggle_mode()
                self._output(self._mode_line())
            elif command is None:
                self._output(f"Invalid input. Enter a column between 0 and {COLS - 1} or a command.")
            else:
                try:
                    self.session.apply_human_move(command)
                except ConnectFourError as e:
                    self._output(str(e))

        self.session.close()
        self._unsubscribe()
        return self.session.current_state()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Play Connect Four in the terminal')
    parser.add_argument('--mode',
                        choices=[m.value for m in GameMode],
                        default=GameMode.AI.value,
                        help='ai (play Yellow against the computer) or two-player')
    parser.add_argument('--depth',
                        type=int,
                        help='Search depth in plies, counting the AI move itself (default: 4)')
    parser.add_argument('--delay',
                        type=float,
                        help='Seconds the AI waits before answering (default: 0.3)')
    parser.add_argument('--debug',
                        action='store_true',
                        help='Enable debug mode (equivalent to --debug_level debug)')
    parser.add_argument('--debug_level',
                        choices=[level.name.lower() for level in DebugLevel],
                        default='warning',
                        help='Logging verbosity')
    parser.add_argument('--log_file',
                        type=str,
                        help='Also write log messages to this file')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.debug:
        debug.configure(level=DebugLevel.DEBUG)
    else:
        debug.set_from_string(args.debug_level)
    if args.log_file:
        debug.configure(log_file=args.log_file)

    try:
        config = EngineConfig().with_overrides(search_depth=args.depth, ai_delay=args.delay)
    except ValueError as e:
        print(f"Error: {e}")
        return 2

    debug.info(f"Starting terminal game: mode={args.mode}, depth={config.search_depth}", "cli")
    TerminalInterface(GameMode(args.mode), config=config).play()
    return 0
