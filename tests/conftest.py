"""Shared test fixtures.

ManualScheduler replaces the asyncio interval timer so polling tests fire
ticks explicitly instead of waiting on the wall clock.
"""

from collections.abc import Callable

import pytest


class ManualHandle:
    """Cancellation handle returned by ManualScheduler."""

    def __init__(self, callback: Callable[[], None], interval_ms: int) -> None:
        self.callback = callback
        self.interval_ms = interval_ms
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """IntervalScheduler test double that fires only when tick() is called."""

    def __init__(self) -> None:
        self.handles: list[ManualHandle] = []

    def schedule(self, callback: Callable[[], None], interval_ms: int) -> ManualHandle:
        handle = ManualHandle(callback, interval_ms)
        self.handles.append(handle)
        return handle

    @property
    def active(self) -> list[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def tick(self, times: int = 1) -> None:
        """Fire every active interval, `times` times over."""
        for _ in range(times):
            for handle in self.active:
                handle.callback()


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Deterministic scheduler for polling tests."""
    return ManualScheduler()
