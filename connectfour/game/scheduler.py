"""
scheduler.py - Deferred, cancellable tasks for the session's AI replies

A GameSession never sleeps itself: it asks a scheduler to call it back
later. ManualScheduler keeps a virtual clock and runs tasks when told to,
which makes it deterministic for tests and easy to drive from a terminal
loop. ThreadedScheduler fires tasks from threading.Timer threads.
"""

import itertools
import threading
import time
from typing import Callable, List, Optional

from connectfour.debug import debug


class ScheduledTask:
    """A callback that runs at most once and can be cancelled before it does."""

    def __init__(self, callback: Callable[[], None], due: float, name: str = "task", seq: int = 0):
        self.callback = callback
        self.due = due
        self.seq = seq
        self.name = name
        self.cancelled = False
        self.done = False
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    def cancel(self) -> bool:
        """
        Cancel the task.

        Returns:
            True if the task had not run yet
        """
        with self._lock:
            if self.done or self.cancelled:
                return False
            self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        debug.debug(f"Cancelled {self.name}", "scheduler")
        return True

    def run(self) -> bool:
        """Run the callback unless the task was cancelled or already ran."""
        with self._lock:
            if self.done or self.cancelled:
                return False
            self.done = True
        debug.trace(f"Running {self.name}", "scheduler")
        self.callback()
        return True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "done" if self.done else "pending"
        return f"ScheduledTask({self.name!r}, due={self.due:.3f}, {state})"


class Scheduler:
    """Interface used by GameSession."""

    def call_later(self, delay: float, callback: Callable[[], None], name: str = "task") -> ScheduledTask:
        raise NotImplementedError

    def shutdown(self) -> None:
        """Cancel everything still pending."""
        raise NotImplementedError


class ManualScheduler(Scheduler):
    """
    Scheduler driven explicitly by its owner.

    Time is virtual: it only moves through advance() or run_next(). Tasks
    due at the same moment run in the order they were scheduled.
    """

    def __init__(self, sleep: Callable[[float], None] = time.sleep):
        self.now = 0.0
        self._sleep = sleep
        self._tasks: List[ScheduledTask] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None], name: str = "task") -> ScheduledTask:
        task = ScheduledTask(callback, self.now + max(0.0, delay), name, next(self._counter))
        self._prune()
        self._tasks.append(task)
        debug.trace(f"Scheduled {name} at t={task.due:.3f}", "scheduler")
        return task

    @property
    def pending(self) -> List[ScheduledTask]:
        """Tasks still waiting to run, earliest first."""
        return sorted((t for t in self._tasks if t.pending), key=lambda t: (t.due, t.seq))

    def _prune(self) -> None:
        self._tasks = [t for t in self._tasks if t.pending]

    def _pop_next(self, until: Optional[float] = None) -> Optional[ScheduledTask]:
        self._prune()
        pending = self.pending
        if not pending:
            return None
        task = pending[0]
        if until is not None and task.due > until:
            return None
        self._tasks.remove(task)
        return task

    def run_due(self) -> int:
        """
        Run every task due at the current virtual time.

        Returns:
            Number of callbacks executed
        """
        ran = 0
        while True:
            task = self._pop_next(until=self.now)
            if task is None:
                return ran
            if task.run():
                ran += 1

    def advance(self, seconds: float) -> int:
        """Move the virtual clock forward and run what became due."""
        if seconds < 0:
            raise ValueError("Cannot move the clock backwards")
        target = self.now + seconds
        ran = 0
        while True:
            task = self._pop_next(until=target)
            if task is None:
                break
            self.now = max(self.now, task.due)
            if task.run():
                ran += 1
        self.now = target
        return ran

    def run_next(self, wait: bool = True) -> bool:
        """
        Run the earliest pending task.

        Args:
            wait: Sleep for real until the task is due before running it

        Returns:
            True if a task ran
        """
        task = self._pop_next()
        if task is None:
            return False
        delay = task.due - self.now
        if wait and delay > 0:
            self._sleep(delay)
        self.now = max(self.now, task.due)
        return task.run()

    def run_all(self, limit: int = 1000) -> int:
        """Run pending tasks (and any they schedule) without waiting."""
        ran = 0
        while ran < limit and self.run_next(wait=False):
            ran += 1
        return ran

    def shutdown(self) -> None:
        for task in self.pending:
            task.cancel()
        self._tasks.clear()


class ThreadedScheduler(Scheduler):
    """Runs each task on a daemon threading.Timer thread."""

    def __init__(self):
        self._tasks: List[ScheduledTask] = []
        self._lock = threading.Lock()

    def call_later(self, delay: float, callback: Callable[[], None], name: str = "task") -> ScheduledTask:
        task = ScheduledTask(callback, time.monotonic() + max(0.0, delay), name)
        timer = threading.Timer(max(0.0, delay), self._fire, args=(task,))
        timer.daemon = True
        task._timer = timer
        with self._lock:
            self._tasks = [t for t in self._tasks if t.pending]
            self._tasks.append(task)
        timer.start()
        return task

    def _fire(self, task: ScheduledTask) -> None:
        try:
            task.run()
        except Exception as e:
            debug.error(f"{task.name} failed: {e}", "scheduler")
            raise

    def shutdown(self) -> None:
        with self._lock:
            tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
