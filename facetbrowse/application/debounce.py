"""Trailing-edge debounce over a cancelable scheduler."""

from typing import Callable

import structlog

from facetbrowse.infrastructure.scheduling import Cancel, Scheduler

logger = structlog.get_logger()


class Debouncer:
    """Collapses bursts of triggers into one trailing call.

    Every trigger() cancels the pending call, if any, and schedules the
    new callback a full window later. Only the last trigger in a burst
    runs.

    Example usage:
        debouncer = Debouncer(ManualScheduler(), delay=0.3)
        debouncer.trigger(run)
        debouncer.trigger(run)  # first call cancelled
    """

    def __init__(self, scheduler: Scheduler, delay: float = 0.3) -> None:
        """Initialize debouncer.

        Args:
            scheduler: Scheduler that owns the timer.
            delay: Debounce window in seconds.
        """
        self.scheduler = scheduler
        self.delay = delay
        self._cancel: Cancel | None = None
        self._fn: Callable[[], None] | None = None

    @property
    def pending(self) -> bool:
        """Check if a call is scheduled and has not run yet."""
        return self._cancel is not None

    def trigger(self, fn: Callable[[], None]) -> None:
        """Schedule fn, replacing any pending call."""
        superseded = self.pending
        self.cancel()
        self._fn = fn
        self._cancel = self.scheduler.schedule(self.delay, self._fire)
        logger.debug("Debounced call scheduled", delay=self.delay, superseded=superseded)

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self._cancel is not None:
            self._cancel()
        self._cancel = None
        self._fn = None

    def flush(self) -> bool:
        """Run the pending call now instead of waiting for the window.

        Returns:
            True if a call was pending and ran.
        """
        fn = self._fn
        if fn is None:
            return False
        self.cancel()
        fn()
        return True

    def _fire(self) -> None:
        fn = self._fn
        self._cancel = None
        self._fn = None
        if fn is not None:
            fn()
