"""Structured logging for navgraph.

Engine modules emit structlog events (``graph_built``,
``reachability_complete`` and so on). They are routed through stdlib
logging to two optional sinks:

- stderr, rendered by rich; ``-v`` shows INFO and ``-vv`` shows DEBUG
- a JSON lines file (``--log-file``) that receives every event

Values bound with :func:`bind_context` (for example the manifest being
analyzed) are attached to every event until :func:`clear_context`.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger, Processor

_configured = False
_file_handler: JsonLinesHandler | None = None
_log_file: Path | None = None

_VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}


class JsonLinesHandler(logging.FileHandler):
    """Append each record as one JSON object per line.

    structlog events arrive as a dict in ``record.msg``; its keys are
    flattened into the line next to ``ts``, ``level`` and ``logger``.
    Plain stdlib records only carry their formatted message.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry: dict[str, Any] = {
                "ts": datetime.now(UTC).isoformat(),
                "level": record.levelname,
                "logger": record.name,
            }
            if isinstance(record.msg, dict):
                fields = dict(record.msg)
                fields.pop("level", None)
                fields.pop("timestamp", None)
                entry["event"] = fields.pop("event", "")
                entry.update(fields)
            else:
                entry["event"] = record.getMessage()

            if self.stream:
                self.stream.write(json.dumps(entry, default=str) + "\n")
                self.stream.flush()
        except Exception:
            self.handleError(record)


def _console_handler(verbosity: int) -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True),
        level=_VERBOSITY_LEVELS.get(verbosity, logging.DEBUG),
        show_time=verbosity >= 1,
        show_path=verbosity >= 2,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
        )
    )
    return handler


def configure_logging(verbosity: int = 0, log_file: Path | None = None) -> None:
    """Configure console and optional file logging.

    Safe to call repeatedly; a previously opened log file is closed first.

    Args:
        verbosity: 0 = WARNING (default), 1 = INFO, 2+ = DEBUG on stderr.
        log_file: Append every event to this file as JSON lines.
    """
    global _configured

    close_file_logging()

    handlers: list[logging.Handler] = [_console_handler(verbosity)]
    if log_file is not None:
        handlers.append(_open_log_file(log_file))

    # The file sink wants everything, so the root only filters when it is off.
    root_level = logging.DEBUG if (verbosity > 0 or log_file is not None) else logging.WARNING
    logging.basicConfig(level=root_level, format="%(message)s", handlers=handlers, force=True)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        cache_logger_on_first_use=False,
    )
    _configured = True


def _open_log_file(log_file: Path) -> JsonLinesHandler:
    global _file_handler, _log_file

    log_file.parent.mkdir(parents=True, exist_ok=True)
    _file_handler = JsonLinesHandler(str(log_file), mode="a", encoding="utf-8")
    _file_handler.setLevel(logging.DEBUG)
    _log_file = log_file
    return _file_handler


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Return a structlog logger, configuring defaults on first use."""
    if not _configured:
        configure_logging()
    logger: FilteringBoundLogger = structlog.get_logger(name)
    return logger


def bind_context(**values: Any) -> None:
    """Attach key/value pairs to every subsequent event in this context."""
    structlog.contextvars.bind_contextvars(**values)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_log_file() -> Path | None:
    """Return the JSON lines log path, or None when file logging is off."""
    return _log_file


def close_file_logging() -> None:
    """Close the JSON lines handler if one is open."""
    global _file_handler, _log_file
    if _file_handler is not None:
        _file_handler.close()
        _file_handler = None
        _log_file = None
