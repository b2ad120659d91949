"""Interval scheduling for the polling loop.

The paginator never talks to the event loop's timers directly. It asks an
IntervalScheduler for a repeating callback and keeps the returned handle, so
tests can substitute a scheduler that fires ticks on demand.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class IntervalHandle(Protocol):
    """Cancellation handle for a scheduled interval."""

    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class IntervalScheduler(Protocol):
    """Fires a callback repeatedly until the returned handle is cancelled."""

    def schedule(
        self, callback: Callable[[], None], interval_ms: int
    ) -> IntervalHandle: ...


class _AsyncioInterval:
    """Fixed-rate repeating timer on an asyncio event loop.

    Deadlines are computed from the first scheduling time
    (start + n * interval), so a slow callback delays one tick but does not
    shift every tick after it. Ticks missed while the loop was blocked are
    skipped rather than fired back to back.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        callback: Callable[[], None],
        interval_ms: int,
    ) -> None:
        self._loop = loop
        self._callback = callback
        self._interval = interval_ms / 1000
        self._started_at = loop.time()
        self._fired = 0
        self._cancelled = False
        self._timer: asyncio.TimerHandle | None = None
        self._arm()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm(self) -> None:
        elapsed = int((self._loop.time() - self._started_at) // self._interval)
        if elapsed > self._fired:
            logger.debug("Interval skipped %d missed ticks", elapsed - self._fired)
            self._fired = elapsed
        deadline = self._started_at + (self._fired + 1) * self._interval
        self._timer = self._loop.call_at(deadline, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._fired += 1
        try:
            self._callback()
        except Exception:  # noqa: BLE001
            logger.exception("Interval callback raised")
        # Callback may have cancelled us
        if not self._cancelled:
            self._arm()


class AsyncioIntervalScheduler:
    """IntervalScheduler backed by the running asyncio event loop.

    Args:
        loop: Event loop to schedule on. Defaults to the loop running at
            the time schedule() is called.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(
        self, callback: Callable[[], None], interval_ms: int
    ) -> IntervalHandle:
        """Fire callback every interval_ms milliseconds.

        The first firing happens one full interval after this call.

        Raises:
            ValueError: If interval_ms is not positive.
            RuntimeError: If no loop was given and none is running.
        """
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioInterval(loop, callback, interval_ms)
