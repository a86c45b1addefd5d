"""Structured logging with per-invocation context using structlog and contextvars."""

import logging
import sys

import structlog

# Dependency loggers that are too chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio", "mcp", "uvicorn", "sse_starlette")

_configured = False


def configure_stderr_logging(level: str = "INFO") -> None:
    """Route every stdlib log record to stderr.

    In stdio MCP mode stdout carries JSON-RPC only; anything else printed
    there corrupts the protocol stream.
    """
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    root = logging.getLogger()
    root.handlers = [stderr_handler]
    root.setLevel(logging.WARNING)

    for logger_name in NOISY_LOGGERS:
        dep_logger = logging.getLogger(logger_name)
        dep_logger.setLevel(logging.WARNING)

    logging.getLogger("mcp_server_parallel_search").setLevel(getattr(logging, level.upper(), logging.INFO))


def setup_structured_logging() -> None:
    """Configure structlog with JSON output and per-invocation context."""
    global _configured
    if _configured:
        return

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def bind_task_context(task_id: str, tool_name: str) -> None:
    """Bind invocation context for all subsequent logs in this async context.

    Args:
        task_id: Unique invocation identifier
        tool_name: Name of the tool being executed
    """
    structlog.contextvars.bind_contextvars(task_id=task_id, tool_name=tool_name)


def clear_task_context() -> None:
    """Clear invocation context after the tool returns."""
    structlog.contextvars.clear_contextvars()


def get_task_logger(name: str = "mcp_server_parallel_search") -> structlog.stdlib.BoundLogger:
    """Get a structlog logger carrying the invocation context."""
    return structlog.get_logger(name)
