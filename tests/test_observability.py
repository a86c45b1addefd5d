"""Tests for per-invocation logging context."""

import asyncio

import pytest
import structlog

from mcp_server_parallel_search.observability.logging import bind_task_context, clear_task_context


def test_bind_and_clear():
    bind_task_context("task-1", "str-counter")
    assert structlog.contextvars.get_contextvars() == {"task_id": "task-1", "tool_name": "str-counter"}

    clear_task_context()
    assert structlog.contextvars.get_contextvars() == {}


@pytest.mark.anyio
async def test_task_logging_context_isolation():
    """Each async task should see only its own bound task_id."""

    async def worker(task_id: str) -> None:
        bind_task_context(task_id, tool_name="parallel-search")
        await asyncio.sleep(0)
        assert structlog.contextvars.get_contextvars().get("task_id") == task_id
        clear_task_context()
        await asyncio.sleep(0)
        assert "task_id" not in structlog.contextvars.get_contextvars()

    await asyncio.gather(worker("t1"), worker("t2"))
