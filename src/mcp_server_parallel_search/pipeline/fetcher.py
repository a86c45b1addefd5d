"""HTTP page fetcher used by the batch scheduler."""

from types import TracebackType

import httpx

from ..config import FetchSettings


class HttpPageFetcher:
    """Fetch page bodies over one shared ``httpx.AsyncClient``.

    Use as an async context manager; the client is closed on exit. Each call
    is a single plain GET with the configured timeout and redirect cap.
    """

    def __init__(self, settings: FetchSettings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HttpPageFetcher":
        self._client = httpx.AsyncClient(
            timeout=self._settings.timeout,
            follow_redirects=True,
            max_redirects=self._settings.max_redirects,
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> str:
        """GET *url* and return the decoded body.

        Raises:
            httpx.HTTPStatusError: Non-2xx response.
            httpx.TooManyRedirects: More than ``max_redirects`` hops.
            httpx.TimeoutException: No response within the timeout.
        """
        if self._client is None:
            raise RuntimeError("HttpPageFetcher must be used as an async context manager")
        response = await self._client.get(url)
        response.raise_for_status()
        return response.text
