"""Polling paginator.

Keeps one page of a remote paged collection fresh by re-fetching it on a
fixed interval, and publishes each fresh page to a single subscriber.

Lifecycle:
- start() fetches the current page immediately, then every interval.
- next_page()/prev_page()/set_page() only move the page; the next tick
  fetches it.
- stop() cancels the interval. Fetches already in flight are left to finish
  and their results are dropped.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from review_feed.core.errors import PaginatorConfigError
from review_feed.core.pagination import FIRST_PAGE, PageRequest, clamp_page
from review_feed.services.scheduler import (
    AsyncioIntervalScheduler,
    IntervalHandle,
    IntervalScheduler,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

FetchPage = Callable[[int, int], Awaitable[Sequence[RecordT]]]
OnUpdate = Callable[[list[RecordT]], None]
OnError = Callable[[Exception], None]

DEFAULT_INTERVAL_MS = 1000

# A fetch still pending this many ticks after dispatch is cancelled.
DEFAULT_STALE_AFTER_TICKS = 2


@dataclass(frozen=True)
class FetchTicket:
    """Identity of one dispatched fetch.

    Attributes:
        seq: Dispatch sequence number, strictly increasing per paginator.
        generation: start() count at dispatch; changes on every restart.
        tick: Tick number the fetch was dispatched on.
        page: Page the fetch was issued for.
        offset: Record offset derived from page.
        limit: Page size requested.
    """

    seq: int
    generation: int
    tick: int
    page: int
    offset: int
    limit: int


def _require_positive_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise PaginatorConfigError(
            f"{name} must be a positive integer, got {value!r}"
        )
    return value


class PollingPaginator(Generic[RecordT]):
    """Polls one page of a paged read operation on a fixed interval.

    Args:
        fetch_page: Async callable taking (offset, limit) and returning the
            records of that window.
        page_size: Records per page. Constant for the paginator's lifetime.
        on_update: Called with the new record list after every successful,
            non-stale fetch.
        interval_ms: Polling period in milliseconds.
        scheduler: Timer source. Defaults to the asyncio event loop.
        on_error: Optional hook called with the exception of a failed fetch.
        stale_after_ticks: Ticks after which a pending fetch is cancelled.

    Raises:
        PaginatorConfigError: If a required option is missing or invalid.
    """

    def __init__(
        self,
        *,
        fetch_page: FetchPage[RecordT],
        page_size: int,
        on_update: OnUpdate[RecordT],
        interval_ms: int = DEFAULT_INTERVAL_MS,
        scheduler: IntervalScheduler | None = None,
        on_error: OnError | None = None,
        stale_after_ticks: int = DEFAULT_STALE_AFTER_TICKS,
    ) -> None:
        if not callable(fetch_page):
            raise PaginatorConfigError("fetch_page must be an async callable")
        if not callable(on_update):
            raise PaginatorConfigError("on_update must be callable")
        if on_error is not None and not callable(on_error):
            raise PaginatorConfigError("on_error must be callable when given")

        self._fetch_page = fetch_page
        self._on_update = on_update
        self._on_error = on_error
        self._page_size = _require_positive_int("page_size", page_size)
        self._interval_ms = _require_positive_int("interval_ms", interval_ms)
        self._stale_after_ticks = _require_positive_int(
            "stale_after_ticks", stale_after_ticks
        )
        self._scheduler = scheduler or AsyncioIntervalScheduler()

        self._page = FIRST_PAGE
        self._records: list[RecordT] = []
        self._handle: IntervalHandle | None = None
        self._generation = 0
        self._tick = 0
        self._seq = 0
        self._delivered_seq = 0
        self._in_flight: dict[asyncio.Task[None], FetchTicket] = {}

    @property
    def page(self) -> int:
        """Currently selected page (1-indexed)."""
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def offset(self) -> int:
        """Record offset of the current page."""
        return PageRequest(page=self._page, per_page=self._page_size).offset

    @property
    def records(self) -> list[RecordT]:
        """Records from the most recent delivered fetch."""
        return list(self._records)

    @property
    def is_running(self) -> bool:
        """Whether the polling interval is active."""
        return self._handle is not None and not self._handle.cancelled

    @property
    def in_flight(self) -> int:
        """Number of dispatched fetches that have not settled yet."""
        return len(self._in_flight)

    def start(self) -> None:
        """Fetch the current page now, then once per interval.

        No-op if already running.

        Raises:
            RuntimeError: If no event loop is running. Nothing is scheduled.
        """
        if self.is_running:
            logger.warning("Polling paginator already running")
            return

        asyncio.get_running_loop()
        self._generation += 1
        self._handle = self._scheduler.schedule(self._on_tick, self._interval_ms)
        logger.info(
            "Polling paginator started (page_size=%d, interval=%dms)",
            self._page_size,
            self._interval_ms,
        )
        self._on_tick()

    def stop(self) -> None:
        """Cancel the polling interval.

        Safe to call repeatedly or before start(). In-flight fetches are not
        aborted; their results are discarded when they arrive.
        """
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        logger.info(
            "Polling paginator stopped (%d fetches still in flight)",
            len(self._in_flight),
        )

    def next_page(self) -> None:
        """Move forward one page. Takes effect on the next tick."""
        self._set_page(self._page + 1)

    def prev_page(self) -> None:
        """Move back one page, never below the first. Takes effect on the next tick."""
        self._set_page(self._page - 1)

    def set_page(self, page: int) -> None:
        """Jump to an absolute page, clamped to the first page."""
        self._set_page(page)

    async def wait_idle(self) -> None:
        """Wait until every fetch dispatched so far has settled."""
        pending = list(self._in_flight)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def _set_page(self, page: int) -> None:
        self._page = clamp_page(page)
        logger.debug("Page set to %d", self._page)

    def _on_tick(self) -> None:
        self._tick += 1
        self._expire_overdue()

        # Setters already clamp; guard against direct attribute writes.
        request = PageRequest.clamped(self._page, self._page_size)
        self._page = request.page

        self._seq += 1
        ticket = FetchTicket(
            seq=self._seq,
            generation=self._generation,
            tick=self._tick,
            page=request.page,
            offset=request.offset,
            limit=request.limit,
        )
        task = asyncio.create_task(self._run_fetch(ticket))
        self._in_flight[task] = ticket
        task.add_done_callback(self._forget)

    def _forget(self, task: asyncio.Task[None]) -> None:
        self._in_flight.pop(task, None)

    def _expire_overdue(self) -> None:
        for task, ticket in list(self._in_flight.items()):
            if task.done():
                continue
            if self._tick - ticket.tick >= self._stale_after_ticks:
                logger.warning(
                    "Fetch for page %d (offset=%d) timed out after %d ticks",
                    ticket.page,
                    ticket.offset,
                    self._tick - ticket.tick,
                )
                task.cancel()

    async def _run_fetch(self, ticket: FetchTicket) -> None:
        try:
            records = await self._fetch_page(ticket.offset, ticket.limit)
        except Exception as exc:  # noqa: BLE001
            self._report_failure(ticket, exc)
            return
        self._deliver(ticket, records)

    def _staleness(self, ticket: FetchTicket) -> str | None:
        if ticket.generation != self._generation or not self.is_running:
            return "paginator stopped"
        if ticket.page != self._page:
            return f"page changed to {self._page}"
        if ticket.seq < self._delivered_seq:
            return "superseded by a newer fetch"
        return None

    def _deliver(self, ticket: FetchTicket, records: Sequence[RecordT]) -> None:
        reason = self._staleness(ticket)
        if reason is not None:
            logger.debug(
                "Discarding result for page %d (seq=%d): %s",
                ticket.page,
                ticket.seq,
                reason,
            )
            return

        self._records = list(records)
        self._delivered_seq = ticket.seq
        try:
            self._on_update(list(self._records))
        except Exception:  # noqa: BLE001
            logger.exception("on_update subscriber raised")

    def _report_failure(self, ticket: FetchTicket, exc: Exception) -> None:
        if ticket.generation != self._generation or not self.is_running:
            logger.debug(
                "Ignoring failure for page %d after stop: %s", ticket.page, exc
            )
            return

        logger.warning(
            "Fetch for page %d (offset=%d) failed: %s",
            ticket.page,
            ticket.offset,
            exc,
        )
        if self._on_error is None:
            return
        try:
            self._on_error(exc)
        except Exception:  # noqa: BLE001
            logger.exception("on_error hook raised")
