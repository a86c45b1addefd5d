"""MCP server exposing the character counter and the parallel web search as tools."""

import logging
import uuid
from typing import Annotated, Literal

from .observability import configure_stderr_logging

# Configure logging BEFORE importing fastmcp and its transport dependencies
configure_stderr_logging()

# ruff: noqa: E402 - Intentional late imports after logging configuration
import httpx
from fastmcp import FastMCP
from fastmcp.dependencies import CurrentContext
from fastmcp.server.context import Context
from pydantic import Field

from .config import AppSettings, get_settings
from .counter import count_characters
from .exceptions import ParallelSearchError
from .models import CountResult, SearchErrorResult, SearchQuery
from .observability import bind_task_context, clear_task_context, get_task_logger, setup_structured_logging
from .pipeline import ParallelSearchRunner
from .search import BraveSearchResolver

logger = logging.getLogger("mcp_server_parallel_search")

SERVER_NAME = "parallelSearchMCP"
SERVER_VERSION = "1.0.0"


def serve(settings: AppSettings | None = None, transport: httpx.AsyncBaseTransport | None = None) -> FastMCP:
    """Create and configure the MCP server.

    Args:
        settings: Application settings; loaded from env/config file when omitted.
        transport: Optional httpx transport shared by the search call and page fetches.
    """
    setup_structured_logging()

    settings = settings or get_settings()
    logger.setLevel(getattr(logging, settings.server.logging_level.upper(), logging.INFO))

    server = FastMCP(SERVER_NAME, version=SERVER_VERSION)

    @server.tool(name="str-counter")
    async def str_counter(
        text: Annotated[str, Field(description="Text to count")],
        numberLimit: Annotated[float, Field(description="Upper limit for the character count")],  # noqa: N803
    ) -> str:
        """
        Count the characters of the given text, ignoring whitespace.

        Reports whether the count exceeds the limit and whether it falls below 80% of it.

        Returns:
            JSON object with success, message, count, isExceeded and isFallBelow
        """
        bind_task_context(str(uuid.uuid4()), "str-counter")
        try:
            return count_characters(text, numberLimit).to_json()
        except Exception as e:
            logger.exception("Error occurred while counting characters")
            return CountResult(success=False, message=f"An error occurred while counting characters: {e}").to_json()
        finally:
            clear_task_context()

    @server.tool(name="parallel-search")
    async def parallel_search(
        query: Annotated[str, Field(description="Search query")],
        searchLang: Annotated[Literal["en", "jp"], Field(description="Language of the search results")] = "en",  # noqa: N803
        country: Annotated[Literal["US", "JP"] | None, Field(description="Country to search from")] = "US",
        ctx: Context = CurrentContext(),
    ) -> str:
        """
        Search the web and fetch the result pages in parallel.

        Pages are downloaded in batches of at most five concurrent requests. The
        body text of every page that could be retrieved is returned; pages that
        failed are skipped.

        Returns:
            JSON object {"success": bool, "htmlData": [page text, ...]}, or an error
            object {"success": false, "message": str, "htmlData": []}
        """
        task_id = str(uuid.uuid4())
        bind_task_context(task_id, "parallel-search")
        task_logger = get_task_logger()
        task_logger.info("task_created", query=query[:100], search_lang=searchLang, country=country)

        resolver = BraveSearchResolver(settings.search, transport=transport)
        runner = ParallelSearchRunner(resolver, settings.fetch, transport=transport)

        async def on_batch_settled(done: int, total: int) -> None:
            await ctx.report_progress(progress=done, total=total)
            await ctx.info(f"Fetched {done}/{total} pages")

        try:
            await ctx.info(f"Searching: {query}")
            report = await runner.run(SearchQuery(query=query, language=searchLang, country=country), on_batch_settled=on_batch_settled)
            task_logger.info("task_completed", success=report.success, pages=len(report.pages))
            return report.to_json()
        except ParallelSearchError as e:
            logger.error(f"Parallel search failed: {e}")
            task_logger.info("task_failed", error=str(e), error_type=type(e).__name__)
            return SearchErrorResult(message=str(e)).to_json()
        except Exception as e:
            logger.exception("Unexpected error during parallel search")
            task_logger.info("task_failed", error=str(e), error_type=type(e).__name__)
            return SearchErrorResult(message=f"Unexpected error: {e}").to_json()
        finally:
            clear_task_context()

    return server


def main() -> None:
    """Entry point for MCP server."""
    settings = get_settings()
    configure_stderr_logging(settings.server.logging_level)
    transport = settings.server.transport
    server = serve(settings)

    if transport == "stdio":
        logger.info("Starting parallel search MCP server (transport: stdio)")
        server.run(transport="stdio")
    elif transport in ("streamable-http", "sse"):
        logger.info(f"Starting parallel search MCP server (transport: {transport})")
        logger.info(f"HTTP server at http://{settings.server.host}:{settings.server.port}/mcp")
        server.run(transport=transport, host=settings.server.host, port=settings.server.port)
    else:
        raise ValueError(f"Unknown transport: {transport}")


if __name__ == "__main__":
    main()
