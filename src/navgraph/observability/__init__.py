"""Observability module for navgraph.

Provides structured logging for the engine and the CLI.
"""

from navgraph.observability.logging import (
    bind_context,
    clear_context,
    close_file_logging,
    configure_logging,
    get_log_file,
    get_logger,
)

__all__ = [
    "bind_context",
    "clear_context",
    "close_file_logging",
    "configure_logging",
    "get_log_file",
    "get_logger",
]
