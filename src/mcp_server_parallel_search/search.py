"""Brave web search client that turns a query into a list of result URLs."""

import logging
from urllib.parse import urlencode

import httpx

from .config import SearchSettings
from .exceptions import ConfigurationError, UpstreamError
from .models import SearchQuery

logger = logging.getLogger(__name__)


def build_search_url(query: SearchQuery, endpoint: str) -> str:
    """Build the search request URL.

    Parameter order is fixed: ``q``, ``search_lang`` and, only when set, ``country``.
    """
    params = [("q", query.query), ("search_lang", query.language)]
    if query.country:
        params.append(("country", query.country))
    return f"{endpoint}?{urlencode(params)}"


def extract_result_urls(data: object) -> list[str]:
    """Pull ``web.results[].url`` out of a decoded response, skipping entries without a URL."""
    if not isinstance(data, dict):
        return []
    web = data.get("web")
    if not isinstance(web, dict):
        return []
    results = web.get("results")
    if not isinstance(results, list):
        return []
    return [item["url"] for item in results if isinstance(item, dict) and isinstance(item.get("url"), str) and item["url"]]


class BraveSearchResolver:
    """Resolve a :class:`SearchQuery` into result URLs with a single API call.

    The resolver is handed its configuration explicitly; it does not read the
    environment. A transport can be injected (tests use ``httpx.MockTransport``).
    """

    def __init__(self, settings: SearchSettings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport

    def build_url(self, query: SearchQuery) -> str:
        return build_search_url(query, self._settings.endpoint)

    def _headers(self) -> dict[str, str]:
        api_key = self._settings.get_api_key()
        if not api_key:
            raise ConfigurationError("Search API key is not configured. Set BRAVE_SEARCH_API_KEY (or MCP_SEARCH_API_KEY) and restart the server.")
        return {"Accept": "application/json", "X-Subscription-Token": api_key}

    async def resolve(self, query: SearchQuery) -> list[str]:
        """Return the result URLs for *query*.

        Raises:
            ConfigurationError: No API key is configured.
            UpstreamError: The provider answered with a non-success status or was unreachable.
        """
        headers = self._headers()
        url = self.build_url(query)
        logger.info(f"Search API URL: {url}")

        try:
            async with httpx.AsyncClient(timeout=self._settings.timeout, transport=self._transport) as client:
                response = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Search API request failed: {e}") from e

        if not response.is_success:
            raise UpstreamError(
                f"Search API request failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            logger.warning("Search API returned a body that is not valid JSON")
            return []

        urls = extract_result_urls(data)
        if not urls:
            logger.warning("No results found in search response")
            return []

        logger.info(f"Search API returned {len(urls)} results")
        return urls
