"""CLI interface for the parallel search MCP server."""

import asyncio
from typing import Optional

import typer

from .config import get_settings
from .counter import count_characters
from .exceptions import ParallelSearchError
from .models import SearchErrorResult, SearchQuery

app = typer.Typer(help="Web search with parallel page fetching, and a character counter")


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    lang: str = typer.Option("en", "--lang", "-l", help="Search language: en or jp"),
    country: Optional[str] = typer.Option("US", "--country", "-c", help="Country: US or JP"),
) -> None:
    """Search the web and print the fetched page contents as JSON."""
    from .pipeline import ParallelSearchRunner
    from .search import BraveSearchResolver

    if lang not in ("en", "jp"):
        raise typer.BadParameter("must be 'en' or 'jp'", param_hint="--lang")
    if country is not None and country not in ("US", "JP"):
        raise typer.BadParameter("must be 'US' or 'JP'", param_hint="--country")

    settings = get_settings()

    async def _search() -> str:
        runner = ParallelSearchRunner(BraveSearchResolver(settings.search), settings.fetch)
        try:
            report = await runner.run(SearchQuery(query=query, language=lang, country=country))
        except ParallelSearchError as e:
            return SearchErrorResult(message=str(e)).to_json()
        return report.to_json()

    print(asyncio.run(_search()))


@app.command()
def count(
    text: str = typer.Argument(..., help="Text to count"),
    limit: float = typer.Argument(..., help="Upper limit for the character count"),
) -> None:
    """Count characters (whitespace excluded) against a limit."""
    print(count_characters(text, limit).to_json())


@app.command()
def config() -> None:
    """Show current configuration."""
    settings = get_settings()
    print(f"Search endpoint: {settings.search.endpoint}")
    print(f"Search API key: {'(set)' if settings.search.get_api_key() else '(not set)'}")
    print(f"Batch size: {settings.fetch.batch_size}")
    print(f"Fetch timeout: {settings.fetch.timeout}s")
    print(f"Max redirects: {settings.fetch.max_redirects}")
    print(f"Max content chars: {settings.fetch.max_content_chars}")
    print(f"Transport: {settings.server.transport}")


@app.command()
def server() -> None:
    """Start the MCP server on the configured transport."""
    from .server import main

    main()


if __name__ == "__main__":
    app()
