"""
Observability: structured logging helpers.
"""

from .logging import LogPerformance, add_context, clear_context, configure_logging, get_logger, log_error, setup_logging

__all__ = [
    "setup_logging",
    "configure_logging",
    "get_logger",
    "add_context",
    "clear_context",
    "log_error",
    "LogPerformance",
]
