"""Poll one record family of the review contract and log each page.

Standalone console consumer of PollingPaginator. Page navigation is read
from stdin: "n" for next page, "p" for previous, a number to jump, "q" to
quit.

Usage:
    python -m scripts.watch_feedbacks feedbacks
    python -m scripts.watch_feedbacks by_company 3 --page-size 5
"""

import argparse
import asyncio
import logging
import sys
from typing import Any

from review_feed.adapters.sources import FAMILIES, NearRpcClient, get_record_source
from review_feed.core.config import settings
from review_feed.services.polling_paginator import PollingPaginator

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("family", choices=FAMILIES)
    parser.add_argument(
        "filter_id",
        nargs="?",
        type=int,
        default=None,
        help="user, parent feedback, or company id for the by_* families",
    )
    parser.add_argument("--page-size", type=int, default=settings.page_size)
    parser.add_argument("--interval-ms", type=int, default=settings.poll_interval_ms)
    return parser.parse_args(argv)


def _log_page(paginator: PollingPaginator[Any], records: list[Any]) -> None:
    logger.info(
        "Page %d (offset %d): %d records",
        paginator.page,
        paginator.offset,
        len(records),
    )
    for record in records:
        logger.info("  #%s %s", record.id, getattr(record, "content", record))


async def _read_commands(paginator: PollingPaginator) -> None:
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        command = line.strip().lower()
        if not line or command == "q":
            return
        if command == "n":
            paginator.next_page()
        elif command == "p":
            paginator.prev_page()
        elif command.isdigit():
            paginator.set_page(int(command))
        elif command:
            logger.info("Commands: n (next), p (previous), <number>, q (quit)")


async def main(argv: list[str] | None = None) -> None:
    """CLI entry point: watch the configured contract until stdin closes."""
    args = _parse_args(argv)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    async with NearRpcClient(
        settings.rpc_url,
        settings.contract_name,
        timeout_seconds=settings.rpc_timeout_seconds,
    ) as client:
        source = get_record_source(args.family, client, args.filter_id)
        paginator: PollingPaginator = PollingPaginator(
            fetch_page=source.fetch_page,
            page_size=args.page_size,
            interval_ms=args.interval_ms,
            stale_after_ticks=settings.stale_after_ticks,
            on_update=lambda records: _log_page(paginator, records),
        )
        logger.info(
            "Watching %s on %s via %s",
            source.source_name,
            settings.contract_name,
            settings.rpc_url,
        )
        paginator.start()
        try:
            await _read_commands(paginator)
        finally:
            paginator.stop()
            await paginator.wait_idle()


if __name__ == "__main__":
    asyncio.run(main())
