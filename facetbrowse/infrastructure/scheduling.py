"""Cancelable delayed-call schedulers.

A scheduler runs a callback once after a delay and hands back a function
that cancels it. The listing controller uses one to debounce pipeline
runs; which scheduler is injected decides what "time" means.
"""

import asyncio
import heapq
import itertools
from typing import Callable, Protocol

import structlog

logger = structlog.get_logger()

Cancel = Callable[[], None]


class Scheduler(Protocol):
    """Interface of a cancelable delayed-call scheduler."""

    def schedule(self, delay: float, fn: Callable[[], None]) -> Cancel:
        """Run fn once after delay seconds.

        Returns:
            Function that cancels the call if it has not run yet.
        """
        ...


# ============================================================================
# Event Loop Scheduler
# ============================================================================


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Initialize scheduler.

        Args:
            loop: Event loop to schedule on. Defaults to the running loop
                at the time of each schedule() call.
        """
        self._loop = loop

    def schedule(self, delay: float, fn: Callable[[], None]) -> Cancel:
        """Run fn on the event loop after delay seconds."""
        loop = self._loop or asyncio.get_running_loop()
        handle = loop.call_later(max(0.0, delay), fn)
        return handle.cancel


# ============================================================================
# Manual Scheduler
# ============================================================================


class ManualScheduler:
    """Scheduler driven by a virtual clock.

    Nothing runs until advance() moves the clock past a call's due time.
    Calls due at the same instant run in scheduling order.

    Example usage:
        scheduler = ManualScheduler()
        scheduler.schedule(0.3, run)
        scheduler.advance(0.3)  # run() executes here
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, Callable[[], None]]] = []
        self._cancelled: set[int] = set()
        self._sequence = itertools.count()

    def schedule(self, delay: float, fn: Callable[[], None]) -> Cancel:
        """Queue fn to run once the clock reaches now + delay."""
        token = next(self._sequence)
        heapq.heappush(self._queue, (self.now + max(0.0, delay), token, fn))

        def cancel() -> None:
            if any(queued == token for _, queued, _ in self._queue):
                self._cancelled.add(token)

        return cancel

    @property
    def pending(self) -> int:
        """Count calls that are queued and not cancelled."""
        return sum(1 for _, token, _ in self._queue if token not in self._cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every call that falls due.

        Args:
            seconds: Amount of virtual time to elapse.

        Returns:
            Number of calls executed.
        """
        target = self.now + seconds
        executed = 0
        while self._queue and self._queue[0][0] <= target:
            due, token, fn = heapq.heappop(self._queue)
            if token in self._cancelled:
                self._cancelled.discard(token)
                continue
            self.now = due
            fn()
            executed += 1
        self.now = target
        if executed:
            logger.debug("Scheduled calls executed", count=executed, now=self.now)
        return executed

    def run_all(self) -> int:
        """Advance to the last queued call and run everything pending."""
        if not self._queue:
            return 0
        latest = max(due for due, _, _ in self._queue)
        return self.advance(max(0.0, latest - self.now))
