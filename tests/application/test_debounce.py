"""Tests for the trailing-edge debouncer."""

import pytest

from facetbrowse.application.debounce import Debouncer
from facetbrowse.infrastructure.scheduling import ManualScheduler


@pytest.fixture
def debouncer(scheduler: ManualScheduler) -> Debouncer:
    """Create a debouncer with a 300ms window."""
    return Debouncer(scheduler, delay=0.3)


class TestDebouncer:
    """Tests for Debouncer."""

    def test_burst_runs_once_with_last_callback(
        self, debouncer: Debouncer, scheduler: ManualScheduler
    ) -> None:
        """N triggers inside the window produce one call, the last one."""
        calls: list[int] = []
        for n in range(5):
            debouncer.trigger(lambda n=n: calls.append(n))
        scheduler.advance(0.2)
        assert calls == []
        scheduler.advance(0.2)
        assert calls == [4]
        assert not debouncer.pending

    def test_retrigger_restarts_window(
        self, debouncer: Debouncer, scheduler: ManualScheduler
    ) -> None:
        """A trigger late in the window pushes the call back a full window."""
        calls: list[str] = []
        debouncer.trigger(lambda: calls.append("first"))
        scheduler.advance(0.2)
        debouncer.trigger(lambda: calls.append("second"))
        scheduler.advance(0.2)
        assert calls == []
        scheduler.advance(0.2)
        assert calls == ["second"]

    def test_separate_bursts_run_separately(
        self, debouncer: Debouncer, scheduler: ManualScheduler
    ) -> None:
        """Triggers further apart than the window each run."""
        calls: list[int] = []
        debouncer.trigger(lambda: calls.append(1))
        scheduler.advance(0.5)
        debouncer.trigger(lambda: calls.append(2))
        scheduler.advance(0.5)
        assert calls == [1, 2]

    def test_cancel(self, debouncer: Debouncer, scheduler: ManualScheduler) -> None:
        """A cancelled call never runs."""
        calls: list[int] = []
        debouncer.trigger(lambda: calls.append(1))
        debouncer.cancel()
        scheduler.run_all()
        assert calls == []
        assert not debouncer.pending

    def test_flush(self, debouncer: Debouncer, scheduler: ManualScheduler) -> None:
        """Flush runs the pending call now and only once."""
        calls: list[int] = []
        debouncer.trigger(lambda: calls.append(1))
        assert debouncer.flush()
        scheduler.run_all()
        assert calls == [1]
        assert not debouncer.flush()
