"""Tests for the terminal front-end."""

import pytest

from connectfour.config import EngineConfig
from connectfour.game.board import Board
from connectfour.interfaces.cli import (QUIT, RESTART, TOGGLE_MODE, TerminalInterface,
                                        main, parse_command, turn_text)
from connectfour.game.state import GameState
from connectfour.utils import GameMode, GameStatus, Player


def scripted(lines):
    """input() replacement that raises EOFError when the script runs out."""
    remaining = list(lines)

    def fake_input(prompt):
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return fake_input


def make_state(**kwargs):
    defaults = dict(status=GameStatus.IN_PROGRESS, current_player=Player.ONE,
                    mode=GameMode.TWO_PLAYER, board=Board().get_state())
    defaults.update(kwargs)
    return GameState(**defaults)


@pytest.mark.parametrize("raw, expected", [
    ("3", 3), (" 0 ", 0), ("q", QUIT), ("QUIT", QUIT),
    ("r", RESTART), ("m", TOGGLE_MODE), ("abc", None), ("", None),
])
def test_parse_command(raw, expected):
    assert parse_command(raw) == expected


def test_turn_text():
    assert turn_text(make_state()) == "Yellow's Turn"
    assert turn_text(make_state(current_player=Player.TWO)) == "Red's Turn"
    assert turn_text(make_state(current_player=Player.TWO, mode=GameMode.AI)) == "AI Thinking..."
    assert turn_text(make_state(status=GameStatus.WON, winner=Player.TWO)) == "GAME OVER - Red wins!"
    assert turn_text(make_state(status=GameStatus.DRAWN)) == "GAME OVER - DRAW"


def test_two_player_game_to_a_win():
    output = []
    ui = TerminalInterface(GameMode.TWO_PLAYER,
                           input_func=scripted(["0", "6", "1", "6", "2", "6", "3"]),
                           output_func=output.append)
    state = ui.play()

    assert state.status == GameStatus.WON
    assert state.winner == Player.ONE
    assert "GAME OVER - Yellow wins!" in ui.frames[-1]
    assert ui.frames[-1].count("*") == 4


def test_bad_input_is_reported():
    output = []
    ui = TerminalInterface(GameMode.TWO_PLAYER,
                           input_func=scripted(["x", "9", "q"]),
                           output_func=output.append)
    state = ui.play()

    assert state.move_count == 0
    assert any("Invalid input" in line for line in output)
    assert any("out of bounds" in line for line in output)


def test_ai_answers_between_prompts():
    output = []
    slept = []
    ui = TerminalInterface(GameMode.AI,
                           config=EngineConfig(search_depth=2),
                           input_func=scripted(["3", "q"]),
                           output_func=output.append,
                           sleep=slept.append)
    state = ui.play()

    assert state.move_count == 2
    assert slept == [pytest.approx(0.3)]
    assert "AI Thinking..." in ui.frames[0]


def test_restart_and_mode_toggle():
    output = []
    ui = TerminalInterface(GameMode.TWO_PLAYER,
                           input_func=scripted(["0", "r", "m"]),
                           output_func=output.append)
    state = ui.play()

    assert state.move_count == 0
    assert state.mode == GameMode.AI
    assert any("Mode: AI" in line for line in output)


def test_main_rejects_bad_depth(capsys):
    assert main(["--mode", "two-player", "--depth", "0"]) == 2
    assert "search_depth" in capsys.readouterr().out
