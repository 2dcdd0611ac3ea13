"""Single-threaded cooperative scheduler.

Pairing retries and poll ticks are continuations queued here rather than
threads. The queue is a sched.scheduler, so tests can pass a manual clock
as timefunc/delayfunc and step through 30 seconds of polling instantly.
"""

import sched
import time
from typing import Callable


class ScheduledTask:
    """Handle for one queued continuation."""

    def __init__(self, scheduler: 'Scheduler', action: Callable, args: tuple):
        self._scheduler = scheduler
        self._action = action
        self._args = args
        self._event = None
        self.fired = False
        self.cancelled = False

    @property
    def pending(self) -> bool:
        return not (self.fired or self.cancelled)

    def _fire(self):
        self.fired = True
        self._action(*self._args)

    def cancel(self):
        """Remove the task from the queue if it hasn't run yet."""
        if not self.pending:
            return
        self.cancelled = True
        self._scheduler._queue.cancel(self._event)


class Scheduler:
    """Timer queue driven by run() / run_pending()."""

    def __init__(self, timefunc: Callable[[], float] = time.monotonic,
                 delayfunc: Callable[[float], None] = time.sleep):
        self._queue = sched.scheduler(timefunc, delayfunc)

    def call_later(self, delay: float, action: Callable, *args) -> ScheduledTask:
        """Queue action(*args) to run after delay seconds."""
        task = ScheduledTask(self, action, args)
        task._event = self._queue.enter(max(delay, 0), 0, task._fire)
        return task

    @property
    def pending(self) -> int:
        """Number of queued tasks."""
        return len(self._queue.queue)

    def run(self):
        """Run tasks, waiting between them, until the queue is empty."""
        self._queue.run()

    def run_pending(self):
        """Run the tasks that are already due without waiting."""
        self._queue.run(blocking=False)
