"""Deferred callbacks with cancellation handles.

The session uses these for its two feedback delays. Nothing runs on its own:
the owner calls ``run_pending()`` when it is ready to let due tasks fire,
which keeps every state change on the caller's thread.
"""

import heapq
import itertools
import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)


class ScheduledTask:
    """Handle for a callback registered with a TaskScheduler."""

    def __init__(self, deadline: float, callback: Callable[[], None], label: str = ""):
        self.deadline = deadline
        self.callback = callback
        self.label = label
        self.cancelled = False
        self.done = False

    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.done)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "done" if self.done else "pending"
        return f"<ScheduledTask {self.label or self.callback!r} at {self.deadline:.3f} {state}>"


class TaskScheduler:
    """Runs callbacks once their delay has passed on the given clock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._queue: list[tuple[float, int, ScheduledTask]] = []
        self._counter = itertools.count()

    def call_later(
        self, delay: float, callback: Callable[[], None], label: str = ""
    ) -> ScheduledTask:
        """Schedule callback to run ``delay`` seconds from now.

        Raises:
            ValueError: If delay is negative.
        """
        if delay < 0:
            raise ValueError(f"Delay must be non-negative, got {delay}")

        task = ScheduledTask(self.clock() + delay, callback, label)
        heapq.heappush(self._queue, (task.deadline, next(self._counter), task))
        logger.debug("Scheduled %r", task)
        return task

    def run_pending(self, now: float | None = None) -> int:
        """Run every due task in deadline order.

        Args:
            now: Treat this as the current time instead of reading the clock.

        Returns:
            Number of callbacks that ran.
        """
        if now is None:
            now = self.clock()
        ran = 0
        while self._queue and self._queue[0][0] <= now:
            _, _, task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            task.done = True
            task.callback()
            ran += 1
        return ran

    def next_deadline(self) -> float | None:
        """Deadline of the earliest live task, or None if nothing is pending."""
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)
        if not self._queue:
            return None
        return self._queue[0][0]

    def time_until_next(self) -> float | None:
        """Seconds until the next task is due (0 if overdue)."""
        deadline = self.next_deadline()
        if deadline is None:
            return None
        return max(0.0, deadline - self.clock())

    @property
    def pending(self) -> int:
        return sum(1 for _, _, task in self._queue if task.active)

    def cancel_all(self) -> None:
        for _, _, task in self._queue:
            task.cancel()
        self._queue.clear()
