"""Infrastructure layer for facetbrowse.

Settings, schedulers for the debounced pipeline trigger and the
in-memory address port.
"""

from facetbrowse.infrastructure.address import MemoryAddress
from facetbrowse.infrastructure.config import Settings, settings
from facetbrowse.infrastructure.scheduling import (
    AsyncioScheduler,
    ManualScheduler,
    Scheduler,
)

__all__ = [
    "AsyncioScheduler",
    "ManualScheduler",
    "MemoryAddress",
    "Scheduler",
    "Settings",
    "settings",
]
