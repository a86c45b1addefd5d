"""MCP server with a character counter and a batched parallel web search."""

from .config import AppSettings, get_settings
from .exceptions import AllFetchesFailedError, ConfigurationError, ParallelSearchError, UpstreamError
from .models import FetchReport, SearchQuery
from .pipeline import ParallelSearchRunner
from .search import BraveSearchResolver

__all__ = [
    "AppSettings",
    "get_settings",
    "BraveSearchResolver",
    "ParallelSearchRunner",
    "FetchReport",
    "SearchQuery",
    "ParallelSearchError",
    "ConfigurationError",
    "UpstreamError",
    "AllFetchesFailedError",
]
