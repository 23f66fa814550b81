"""Tests for the minimax SearchEngine."""

import logging
import math

import numpy as np
import pytest

from connectfour.ai.minimax import SearchEngine, SearchResult
from connectfour.config import EngineConfig, WIN_SCORE
from connectfour.debug import DebugLevel, LOGGER_NAME, debug
from connectfour.game.board import Board
from connectfour.utils import COLS, Player
from tests.positions import DRAW_ROWS, rows_with_hole


@pytest.fixture
def engine():
    return SearchEngine()


def ai_one_move_from_win():
    """TWO has three stacked in column 6; ONE has nothing threatening."""
    board = Board()
    for _ in range(3):
        board.drop_at(6, Player.TWO)
    board.drop_at(0, Player.ONE)
    board.drop_at(2, Player.ONE)
    board.drop_at(4, Player.ONE)
    return board


def test_takes_immediate_win(engine):
    board = ai_one_move_from_win()
    result = engine.search(board, Player.TWO, Player.ONE)
    assert result.column == 6
    assert result.score == WIN_SCORE


@pytest.mark.parametrize("depth", [1, 2, 3, 4])
def test_immediate_win_scores_win_constant_at_any_depth(engine, depth):
    board = ai_one_move_from_win()
    result = engine.search(board, Player.TWO, Player.ONE, depth=depth)
    assert result == SearchResult(6, float(WIN_SCORE), result.nodes)


def test_maximizing_node_one_move_from_win_scores_win_constant(engine):
    board = ai_one_move_from_win()
    engine.set_players(Player.TWO, Player.ONE)
    assert engine.minimax(board, 1, True) == WIN_SCORE
    assert engine.minimax(board, 3, True) == WIN_SCORE


def test_minimizing_node_with_opponent_win_scores_negative_constant(engine):
    board = Board()
    for _ in range(3):
        board.drop_at(0, Player.ONE)
    engine.set_players(Player.TWO, Player.ONE)
    assert engine.minimax(board, 1, False) == -WIN_SCORE


def test_blocks_opponent_three_in_a_column(engine):
    board = Board()
    for _ in range(3):
        board.drop_at(0, Player.ONE)
    board.drop_at(6, Player.TWO)
    board.drop_at(6, Player.TWO)
    assert engine.choose_column(board, Player.TWO, Player.ONE) == 0


def test_ties_keep_lowest_column(engine):
    # One ply on an empty board: every column scores one AI piece.
    result = engine.search(Board(), Player.TWO, Player.ONE, depth=1)
    assert result.column == 0
    assert result.score == 3.0


def test_skips_full_columns(engine):
    board = Board()
    for i in range(6):
        board.drop_at(0, Player.ONE if i % 2 else Player.TWO)
    result = engine.search(board, Player.TWO, Player.ONE, depth=1)
    assert result.column == 1


def test_search_is_deterministic_and_leaves_board_untouched(engine):
    board = Board()
    for col in (3, 3, 2, 4, 1):
        board.drop_at(col, Player.ONE if board.move_count % 2 == 0 else Player.TWO)
    before = board.grid.copy()

    first = engine.choose_column(board, Player.TWO, Player.ONE)
    second = engine.choose_column(board, Player.TWO, Player.ONE)
    third = SearchEngine().choose_column(board, Player.TWO, Player.ONE)

    assert first == second == third
    assert 0 <= first < COLS
    assert np.array_equal(board.grid, before)


def test_full_board_has_no_move(engine):
    board = Board.from_rows(DRAW_ROWS)
    result = engine.search(board, Player.TWO, Player.ONE)
    assert not result.has_move
    assert result.column is None
    assert engine.choose_column(board, Player.TWO, Player.ONE) == 3


def test_no_move_is_distinct_from_column_zero():
    assert SearchResult(0, 1.0).has_move
    assert not SearchResult(None, 0.0).has_move


def test_fallback_column_comes_from_config():
    engine = SearchEngine(EngineConfig(fallback_column=5))
    assert engine.choose_column(Board.from_rows(DRAW_ROWS), Player.TWO, Player.ONE) == 5


def test_last_empty_cell_is_chosen(engine):
    board = Board.from_rows(rows_with_hole(0, 0))
    result = engine.search(board, Player.TWO, Player.ONE)
    assert result.column == 0
    assert math.isfinite(result.score)


def test_minimax_on_full_board_is_finite(engine):
    engine.set_players(Player.TWO, Player.ONE)
    board = Board.from_rows(DRAW_ROWS)
    assert engine.minimax(board, 3, True) == engine.evaluate(board)
    assert engine.minimax(board, 3, False) == engine.evaluate(board)


def test_evaluate_is_material_count(engine):
    board = Board()
    board.drop_at(0, Player.TWO)
    board.drop_at(1, Player.TWO)
    board.drop_at(2, Player.ONE)
    engine.set_players(Player.TWO, Player.ONE)
    assert engine.evaluate(board) == 2 * 3 - 1 * 2
    engine.set_players(Player.ONE, Player.TWO)
    assert engine.evaluate(board) == 1 * 3 - 2 * 2


def test_depth_zero_returns_static_evaluation(engine):
    # No win check at depth 0, even on a board where ONE has connected four.
    board = Board()
    for _ in range(4):
        board.drop_at(0, Player.ONE)
    engine.set_players(Player.TWO, Player.ONE)
    assert engine.minimax(board, 0, True) == -8.0


def test_counts_nodes(engine):
    result = engine.search(Board(), Player.TWO, Player.ONE, depth=2)
    assert result.nodes == COLS + COLS * COLS
    assert engine.nodes_evaluated == result.nodes


def test_rejects_bad_arguments(engine):
    with pytest.raises(ValueError):
        engine.search(Board(), Player.TWO, Player.ONE, depth=0)
    with pytest.raises(ValueError):
        engine.search(Board(), Player.TWO, Player.TWO)


def test_search_logs_its_duration(engine, caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    debug.configure(level=DebugLevel.DEBUG, components=["search"])

    engine.search(Board(), Player.TWO, Player.ONE, depth=1)

    logged = [r.getMessage() for r in caplog.records if r.name == LOGGER_NAME]
    assert any(m.startswith("[search] Performance [search]:") for m in logged)
    assert any("picks column" in m for m in logged)
