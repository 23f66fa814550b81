"""Tests for the deferred task schedulers."""

import threading

import pytest

from connectfour import start_session
from connectfour.config import EngineConfig
from connectfour.game.scheduler import ManualScheduler, ScheduledTask, ThreadedScheduler
from connectfour.utils import GameMode, Player


def test_manual_scheduler_runs_in_due_order(scheduler):
    calls = []
    scheduler.call_later(0.5, lambda: calls.append("late"))
    scheduler.call_later(0.1, lambda: calls.append("early"))
    scheduler.call_later(0.1, lambda: calls.append("early-second"))

    assert scheduler.advance(0.2) == 2
    assert calls == ["early", "early-second"]
    assert scheduler.now == pytest.approx(0.2)
    assert scheduler.run_all() == 1
    assert calls == ["early", "early-second", "late"]


def test_run_due_only_runs_tasks_due_now(scheduler):
    calls = []
    scheduler.call_later(0.0, lambda: calls.append(1))
    scheduler.call_later(1.0, lambda: calls.append(2))
    assert scheduler.run_due() == 1
    assert calls == [1]
    assert len(scheduler.pending) == 1


def test_cancelled_task_never_runs(scheduler):
    calls = []
    task = scheduler.call_later(0.1, lambda: calls.append(1))
    assert task.cancel()
    assert not task.cancel()
    assert scheduler.advance(1.0) == 0
    assert calls == []
    assert scheduler.pending == []


def test_task_runs_once():
    calls = []
    task = ScheduledTask(lambda: calls.append(1), due=0.0)
    assert task.run()
    assert not task.run()
    assert not task.cancel()
    assert calls == [1]


def test_run_next_waits_for_due_time():
    slept = []
    scheduler = ManualScheduler(sleep=slept.append)
    scheduler.call_later(0.3, lambda: None)
    assert scheduler.run_next(wait=True)
    assert slept == [pytest.approx(0.3)]
    assert not scheduler.run_next()


def test_advance_rejects_negative_time(scheduler):
    with pytest.raises(ValueError):
        scheduler.advance(-1)


def test_shutdown_cancels_everything(scheduler):
    task = scheduler.call_later(0.1, lambda: None)
    scheduler.shutdown()
    assert task.cancelled
    assert scheduler.run_all() == 0


def test_threaded_scheduler_fires_and_cancels():
    scheduler = ThreadedScheduler()
    fired = threading.Event()
    cancelled_fired = threading.Event()

    scheduler.call_later(0.01, fired.set)
    task = scheduler.call_later(0.2, cancelled_fired.set)
    task.cancel()

    assert fired.wait(timeout=5)
    assert not cancelled_fired.wait(timeout=0.4)
    scheduler.shutdown()


def test_threaded_session_delivers_ai_move():
    scheduler = ThreadedScheduler()
    session = start_session(GameMode.AI, config=EngineConfig(ai_delay=0.01, search_depth=2),
                            scheduler=scheduler)
    replied = threading.Event()
    session.on_state_change(lambda s: replied.set() if s.move_count == 2 else None)

    session.apply_human_move(3)

    assert replied.wait(timeout=10)
    state = session.current_state()
    assert state.current_player == Player.ONE
    assert state.move_count == 2
    session.close()
    scheduler.shutdown()


def test_reading_pending_has_no_side_effects(scheduler):
    kept = scheduler.call_later(0.2, lambda: None, name="kept")
    dropped = scheduler.call_later(0.1, lambda: None, name="dropped")
    dropped.cancel()

    assert scheduler.pending == [kept]
    assert scheduler.pending == [kept]
    assert len(scheduler._tasks) == 2

    scheduler.call_later(0.3, lambda: None)
    assert dropped not in scheduler._tasks
    assert scheduler.run_all() == 2
