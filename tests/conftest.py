"""Shared fixtures for the Connect Four tests."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from connectfour.debug import debug, DebugLevel
from connectfour.game.board import Board
from connectfour.game.scheduler import ManualScheduler


@pytest.fixture(autouse=True)
def quiet_debug():
    """Keep the shared debug manager at its default settings between tests."""
    debug.configure(level=DebugLevel.WARNING, enabled=True, components=[])
    yield
    debug.configure(level=DebugLevel.WARNING, enabled=True, components=[], log_file="")


@pytest.fixture
def board():
    return Board()


@pytest.fixture
def scheduler():
    return ManualScheduler(sleep=lambda seconds: None)
