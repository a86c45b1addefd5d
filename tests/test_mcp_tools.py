"""Tests for MCP server tools using FastMCP in-memory testing."""

import json
from collections.abc import AsyncGenerator

import httpx
import pytest
from fastmcp import Client

from mcp_server_parallel_search.config import AppSettings, FetchSettings, SearchSettings, ServerSettings
from mcp_server_parallel_search.server import serve

PAGES = {
    "https://example.com/1": "<html><body>A</body></html>",
    "https://example.com/2": "<html><body><script>x()</script> B </body></html>",
}


class MockWeb:
    def __init__(self) -> None:
        self.result_urls = list(PAGES)
        self.search_status = 200
        self.failing: set[str] = set()
        self.search_requests: list[httpx.Request] = []
        self.page_requests: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "api.search.brave.com":
            self.search_requests.append(request)
            if self.search_status != 200:
                return httpx.Response(self.search_status)
            return httpx.Response(200, json={"web": {"results": [{"url": u} for u in self.result_urls]}})
        url = str(request.url)
        self.page_requests.append(url)
        if url in self.failing or url not in PAGES:
            return httpx.Response(503)
        return httpx.Response(200, text=PAGES[url])


@pytest.fixture
def web() -> MockWeb:
    return MockWeb()


@pytest.fixture
async def client(app_settings: AppSettings, web: MockWeb) -> AsyncGenerator[Client, None]:
    """Create an in-memory FastMCP client backed by the mocked network."""
    app = serve(app_settings, transport=httpx.MockTransport(web.handler))

    async with Client(app) as client:
        yield client


@pytest.fixture
async def client_without_key(web: MockWeb) -> AsyncGenerator[Client, None]:
    settings = AppSettings(search=SearchSettings(), fetch=FetchSettings(), server=ServerSettings())
    app = serve(settings, transport=httpx.MockTransport(web.handler))

    async with Client(app) as client:
        yield client


def _payload(result) -> dict:
    assert result.content is not None
    assert len(result.content) > 0
    return json.loads(result.content[0].text)


class TestListTools:
    @pytest.mark.anyio
    async def test_list_tools(self, client: Client):
        tools = await client.list_tools()
        tool_names = sorted(tool.name for tool in tools)

        assert tool_names == ["parallel-search", "str-counter"]

    @pytest.mark.anyio
    async def test_str_counter_schema(self, client: Client):
        tools = await client.list_tools()
        tool = next(t for t in tools if t.name == "str-counter")

        assert tool.description is not None
        properties = tool.inputSchema["properties"]
        assert set(properties) == {"text", "numberLimit"}
        assert set(tool.inputSchema["required"]) == {"text", "numberLimit"}

    @pytest.mark.anyio
    async def test_parallel_search_schema(self, client: Client):
        tools = await client.list_tools()
        tool = next(t for t in tools if t.name == "parallel-search")

        assert tool.description is not None
        properties = tool.inputSchema["properties"]
        assert set(properties) == {"query", "searchLang", "country"}
        assert tool.inputSchema["required"] == ["query"]
        assert "en" in str(properties["searchLang"]) and "jp" in str(properties["searchLang"])
        assert "US" in str(properties["country"]) and "JP" in str(properties["country"])


class TestStrCounter:
    @pytest.mark.anyio
    async def test_counts_characters(self, client: Client):
        result = await client.call_tool("str-counter", {"text": "hello world", "numberLimit": 12})

        data = _payload(result)
        assert data["success"] is True
        assert data["count"] == 10
        assert data["isExceeded"] is False
        assert data["isFallBelow"] is False

    @pytest.mark.anyio
    async def test_exceeded(self, client: Client):
        result = await client.call_tool("str-counter", {"text": "abcdef", "numberLimit": 3})

        data = _payload(result)
        assert data["isExceeded"] is True
        assert "exceeds the limit" in data["message"]


class TestParallelSearch:
    @pytest.mark.anyio
    async def test_returns_page_contents(self, client: Client, web: MockWeb):
        result = await client.call_tool("parallel-search", {"query": "test search", "searchLang": "en", "country": "US"})

        assert _payload(result) == {"success": True, "htmlData": ["A", "B"]}
        assert len(web.search_requests) == 1
        assert str(web.search_requests[0].url).endswith("?q=test+search&search_lang=en&country=US")

    @pytest.mark.anyio
    async def test_defaults_applied(self, client: Client, web: MockWeb):
        await client.call_tool("parallel-search", {"query": "defaults"})

        assert str(web.search_requests[0].url).endswith("?q=defaults&search_lang=en&country=US")

    @pytest.mark.anyio
    async def test_country_can_be_omitted(self, client: Client, web: MockWeb):
        await client.call_tool("parallel-search", {"query": "x", "searchLang": "jp", "country": None})

        assert str(web.search_requests[0].url).endswith("?q=x&search_lang=jp")

    @pytest.mark.anyio
    async def test_no_results(self, client: Client, web: MockWeb):
        web.result_urls = []

        result = await client.call_tool("parallel-search", {"query": "nothing"})

        assert _payload(result) == {"success": False, "htmlData": []}
        assert web.page_requests == []

    @pytest.mark.anyio
    async def test_partial_failure(self, client: Client, web: MockWeb):
        web.failing = {"https://example.com/1"}

        result = await client.call_tool("parallel-search", {"query": "partial"})

        assert _payload(result) == {"success": True, "htmlData": ["B"]}

    @pytest.mark.anyio
    async def test_all_failed_returns_error_envelope(self, client: Client, web: MockWeb):
        web.failing = set(PAGES)

        result = await client.call_tool("parallel-search", {"query": "down"})

        data = _payload(result)
        assert data["success"] is False
        assert data["htmlData"] == []
        assert "All 2 page fetches failed" in data["message"]

    @pytest.mark.anyio
    async def test_upstream_error_returns_error_envelope(self, client: Client, web: MockWeb):
        web.search_status = 500

        result = await client.call_tool("parallel-search", {"query": "broken"})

        data = _payload(result)
        assert data["success"] is False
        assert data["htmlData"] == []
        assert "500" in data["message"]
        assert web.page_requests == []

    @pytest.mark.anyio
    async def test_missing_api_key_returns_error_envelope(self, client_without_key: Client, web: MockWeb):
        result = await client_without_key.call_tool("parallel-search", {"query": "no key"})

        data = _payload(result)
        assert data["success"] is False
        assert "API key" in data["message"]
        assert web.search_requests == []
