"""Pytest configuration and fixtures for parallel search server tests."""

import os

import pytest

from mcp_server_parallel_search.config import AppSettings, FetchSettings, SearchSettings, ServerSettings


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: Tests that take longer to run")


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real keys and MCP_* overrides from leaking into tests."""
    for var in list(os.environ.keys()):
        if var.startswith("MCP_") or var == "BRAVE_SEARCH_API_KEY":
            monkeypatch.delenv(var, raising=False)


@pytest.fixture
def app_settings() -> AppSettings:
    """Settings with a dummy search key and default fetch limits."""
    return AppSettings(
        search=SearchSettings(api_key="dummy_api_key_for_test"),
        fetch=FetchSettings(),
        server=ServerSettings(),
    )
