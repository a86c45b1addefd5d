"""Observability module: stderr logging and per-invocation structured log context."""

from .logging import (
    bind_task_context,
    clear_task_context,
    configure_stderr_logging,
    get_task_logger,
    setup_structured_logging,
)

__all__ = [
    "bind_task_context",
    "clear_task_context",
    "configure_stderr_logging",
    "get_task_logger",
    "setup_structured_logging",
]
