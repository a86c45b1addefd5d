"""Batch scheduler: fetch a URL list in fixed-width batches.

Requests inside a batch run concurrently and the batch is joined only once
every request has settled. Batches run strictly one after another, so at most
``batch_size`` requests are in flight at any time. A failing request never
cancels its siblings; it becomes a :class:`FetchFailure` outcome instead.

This module is transport-agnostic. Callers provide an async ``fetch(url)``
that returns the page body or raises.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import httpx

from ..models import FetchFailure, FetchOutcome, FetchSuccess

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 5

FetchFn = Callable[[str], Awaitable[str]]
# Awaited after each batch join with (urls settled so far, total urls)
BatchSettledFn = Callable[[int, int], Awaitable[None]]

# Errors a single page request may raise; anything else is a bug and propagates
FETCH_ERRORS: tuple[type[Exception], ...] = (httpx.HTTPError, httpx.InvalidURL, UnicodeDecodeError)


def create_batches(items: Sequence[T], size: int) -> list[list[T]]:
    """Split *items* into contiguous batches of *size*; the last one may be shorter."""
    if size < 1:
        raise ValueError(f"Batch size must be at least 1, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def describe_error(error: BaseException) -> str:
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code} {error.response.reason_phrase}"
    if isinstance(error, httpx.TimeoutException):
        return f"Timed out: {error}" if str(error) else "Timed out"
    return str(error) or type(error).__name__


class BatchScheduler:
    def __init__(self, fetch: FetchFn, *, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        if batch_size < 1:
            raise ValueError(f"Batch size must be at least 1, got {batch_size}")
        self._fetch = fetch
        self._batch_size = batch_size

    async def _fetch_one(self, url: str) -> FetchOutcome:
        try:
            body = await self._fetch(url)
        except FETCH_ERRORS as e:
            reason = describe_error(e)
            logger.debug(f"Fetch failed for {url}: {reason}")
            return FetchFailure(url=url, reason=f"{url}: {reason}")
        return FetchSuccess(url=url, raw_body=body)

    async def _run_batch(self, batch: list[str]) -> list[FetchOutcome]:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(self._fetch_one(url)) for url in batch]
        return [task.result() for task in tasks]

    async def fetch_all(self, urls: Sequence[str], on_batch_settled: BatchSettledFn | None = None) -> list[FetchOutcome]:
        """Fetch every URL once and return one outcome per URL, in input order."""
        if not urls:
            return []

        batches = create_batches(urls, self._batch_size)
        outcomes: list[FetchOutcome] = []
        for index, batch in enumerate(batches, start=1):
            logger.debug(f"Fetching batch {index}/{len(batches)} ({len(batch)} urls)")
            outcomes.extend(await self._run_batch(batch))
            if on_batch_settled is not None:
                await on_batch_settled(len(outcomes), len(urls))
        return outcomes
