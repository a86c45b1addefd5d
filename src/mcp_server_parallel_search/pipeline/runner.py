"""Search-then-fetch pipeline."""

import asyncio
import logging

import httpx

from ..config import FetchSettings
from ..models import FetchReport, SearchQuery
from ..search import BraveSearchResolver
from .aggregate import aggregate
from .fetcher import HttpPageFetcher
from .scheduler import BatchScheduler, BatchSettledFn

logger = logging.getLogger(__name__)


class ParallelSearchRunner:
    """Resolve a query to URLs, fetch them in batches and aggregate the pages."""

    def __init__(
        self,
        resolver: BraveSearchResolver,
        settings: FetchSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.resolver = resolver
        self.settings = settings
        self.transport = transport

    async def run(self, query: SearchQuery, on_batch_settled: BatchSettledFn | None = None) -> FetchReport:
        urls = await self.resolver.resolve(query)
        if not urls:
            logger.warning(f"Search returned no URLs for query: {query.query!r}")
            return FetchReport.empty()

        # One client per run; nothing is shared between invocations
        async with HttpPageFetcher(self.settings, transport=self.transport) as fetcher:
            scheduler = BatchScheduler(fetcher.fetch, batch_size=self.settings.batch_size)
            outcomes = await scheduler.fetch_all(urls, on_batch_settled=on_batch_settled)

        # Normalization is CPU-bound; keep it off the event loop
        return await asyncio.to_thread(aggregate, outcomes, self.settings.max_content_chars)
