"""Batched parallel fetch pipeline: schedule, normalize, aggregate."""

from .aggregate import aggregate
from .fetcher import HttpPageFetcher
from .normalize import MAX_CONTENT_CHARS, TRUNCATION_MARKER, normalize_body
from .runner import ParallelSearchRunner
from .scheduler import BatchScheduler, create_batches

__all__ = [
    "BatchScheduler",
    "HttpPageFetcher",
    "MAX_CONTENT_CHARS",
    "ParallelSearchRunner",
    "TRUNCATION_MARKER",
    "aggregate",
    "create_batches",
    "normalize_body",
]
