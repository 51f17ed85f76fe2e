"""
Scheduler — the single cooperative execution context.

Coordinator state (install batches, subscriptions, queue state) is only
ever touched from the thread that owns the scheduler.  Worker threads
that finish an install never call back into that state directly: they
``schedule()`` a callback, and the owner runs it the next time it drains
the queue (``run_pending()``, ``wait()`` or ``run_until()``).

This mirrors an editor event loop: "schedule for later on this same
context" plus a blocking ``wait()`` that keeps running scheduled
callbacks while it waits.
"""

from __future__ import annotations

import logging
import queue
import time
from typing import Callable

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class Scheduler:
    """Thread-safe FIFO of deferred callbacks, drained by its owner."""

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[Callback] = queue.SimpleQueue()

    def schedule(self, callback: Callback) -> None:
        """Queue ``callback`` to run on the owning context.  Safe from any thread."""
        self._queue.put(callback)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def run_pending(self) -> int:
        """Run every callback queued so far, including ones they queue.

        Returns the number of callbacks that ran.  Exceptions raised by a
        callback propagate to the caller; ``SystemExit`` is how a deferred
        process exit is delivered.
        """
        ran = 0
        while True:
            try:
                callback = self._queue.get_nowait()
            except queue.Empty:
                return ran
            callback()
            ran += 1

    def wait(
        self,
        timeout: float,
        predicate: Callable[[], bool],
        interval: float = 0.1,
    ) -> bool:
        """Block until ``predicate()`` holds or ``timeout`` seconds elapse.

        Scheduled callbacks keep running while waiting; that is how the
        state the predicate inspects gets updated.  The predicate is
        re-checked after every callback and at least every ``interval``
        seconds.

        Returns:
            True if the predicate held, False on timeout.
        """
        deadline = time.monotonic() + timeout
        while True:
            self.run_pending()
            if predicate():
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            try:
                callback = self._queue.get(timeout=min(interval, remaining))
            except queue.Empty:
                continue
            callback()

    def run_until(
        self,
        predicate: Callable[[], bool],
        timeout: float | None = None,
        interval: float = 0.1,
    ) -> bool:
        """Drain callbacks until ``predicate()`` holds (no deadline by default)."""
        if timeout is None:
            while not self.wait(interval, predicate, interval):
                pass
            return True
        return self.wait(timeout, predicate, interval)
