"""
Structured Logging with structlog

Provides structured, contextual logging for extraction runs.
"""

import contextvars
import logging
import sys
import time
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars

from codegraph_relations.infra.config import ObservabilityConfig, get_settings

_context_var: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar("log_context", default={})


def setup_logging(
    level: str = "INFO",
    format: str = "json",  # "json" or "console"
    include_timestamp: bool = True,
) -> None:
    """
    Setup structured logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format ("json" for machines, "console" for humans)
        include_timestamp: Include ISO timestamp in logs
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )

    shared_processors = [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if include_timestamp:
        shared_processors.append(structlog.processors.TimeStamper(fmt="iso"))

    shared_processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]
    )

    if format == "json":
        output_processors = [
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(),
        ]
    else:
        output_processors = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=shared_processors + output_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(config: ObservabilityConfig | None = None) -> None:
    """Setup logging from the observability settings group."""
    config = config or get_settings().observability
    setup_logging(level=config.log_level, format=config.log_format)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__ from calling module)

    Example:
        ```python
        logger = get_logger(__name__)
        logger.info("unit_processed", file_path="A.java", relations=42)
        ```
    """
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """
    Add contextual data to all subsequent log messages in the current context.

    Uses contextvars, so worker threads each keep their own context.
    """
    current = _context_var.get()
    _context_var.set({**current, **kwargs})
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context(*keys: str) -> None:
    """
    Clear specific keys from logging context, or all of it when no keys are given.
    """
    if not keys:
        _context_var.set({})
        structlog.contextvars.clear_contextvars()
        return

    current = dict(_context_var.get())
    for key in keys:
        current.pop(key, None)
    _context_var.set(current)
    structlog.contextvars.unbind_contextvars(*keys)


def log_error(
    logger: structlog.stdlib.BoundLogger,
    message: str,
    error: Exception | None = None,
    **extra: Any,
) -> None:
    """
    Log an error with consistent structure.

    Args:
        logger: Logger instance
        message: Event name
        error: Exception object (type and message are extracted)
        **extra: Additional context
    """
    error_data = extra.copy()
    if error:
        error_data.update(
            {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }
        )
    logger.error(message, **error_data)


def log_performance(
    logger: structlog.stdlib.BoundLogger,
    operation: str,
    duration_ms: float,
    **extra: Any,
) -> None:
    """Log a timed operation; anything over one second is reported as slow."""
    perf_data = {
        "operation": operation,
        "duration_ms": round(duration_ms, 2),
        **extra,
    }

    if duration_ms > 1000:
        perf_data["slow"] = True
        logger.warning("slow_operation", **perf_data)
    else:
        logger.debug("operation_complete", **perf_data)


class LogPerformance:
    """
    Context manager for automatic performance logging.

    Example:
        ```python
        with LogPerformance(logger, "expression_pass", units=12):
            run_expression_passes()
        ```
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **extra: Any,
    ):
        self.logger = logger
        self.operation = operation
        self.extra = extra
        self.start_time = 0.0

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        duration_ms = (time.time() - self.start_time) * 1000

        if exc_type is not None:
            log_error(
                self.logger,
                f"{self.operation}_failed",
                error=exc_val,
                duration_ms=round(duration_ms, 2),
                **self.extra,
            )
        else:
            log_performance(self.logger, self.operation, duration_ms, **self.extra)

        return False
