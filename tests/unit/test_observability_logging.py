"""Tests for structured logging configuration."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest

import navgraph.observability.logging as log_module
from navgraph.observability import (
    bind_context,
    clear_context,
    close_file_logging,
    configure_logging,
    get_log_file,
    get_logger,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    clear_context()
    close_file_logging()
    configure_logging(verbosity=0)


def _read_events(path: Path) -> list[dict[str, object]]:
    return [json.loads(line) for line in path.read_text().splitlines()]


@pytest.mark.parametrize(
    ("verbosity", "root_level", "console_level"),
    [
        (0, logging.WARNING, logging.WARNING),
        (1, logging.DEBUG, logging.INFO),
        (2, logging.DEBUG, logging.DEBUG),
        (5, logging.DEBUG, logging.DEBUG),
    ],
)
def test_verbosity_levels(verbosity: int, root_level: int, console_level: int) -> None:
    configure_logging(verbosity=verbosity)

    root = logging.getLogger()
    assert root.level == root_level
    assert root.handlers[0].level == console_level


def test_file_logging_opens_root_to_debug(tmp_path: Path) -> None:
    configure_logging(verbosity=0, log_file=tmp_path / "nav.jsonl")

    assert logging.getLogger().level == logging.DEBUG


def test_get_logger_configures_on_first_use() -> None:
    log_module._configured = False

    logger = get_logger("navgraph.test")

    assert log_module._configured is True
    assert hasattr(logger, "info")


def test_log_file_parent_created(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "run" / "navgraph.jsonl"

    configure_logging(log_file=log_file)

    assert log_file.parent.is_dir()
    assert get_log_file() == log_file


def test_reconfigure_closes_previous_file(tmp_path: Path) -> None:
    configure_logging(log_file=tmp_path / "first.jsonl")
    first = log_module._file_handler
    assert first is not None

    configure_logging(log_file=tmp_path / "second.jsonl")

    assert first.stream is None or first.stream.closed
    assert get_log_file() == tmp_path / "second.jsonl"


def test_close_file_logging(tmp_path: Path) -> None:
    configure_logging(log_file=tmp_path / "nav.jsonl")

    close_file_logging()

    assert log_module._file_handler is None
    assert get_log_file() is None


def test_events_written_as_json_lines(tmp_path: Path) -> None:
    log_file = tmp_path / "nav.jsonl"
    configure_logging(log_file=log_file)

    get_logger("navgraph.test").info("reachability_complete", orphans=2, dead_ends=0)
    close_file_logging()

    events = [e for e in _read_events(log_file) if e["event"] == "reachability_complete"]
    assert len(events) == 1
    assert events[0]["orphans"] == 2
    assert events[0]["level"] == "INFO"
    assert events[0]["logger"] == "navgraph.test"


def test_bound_context_attached_until_cleared(tmp_path: Path) -> None:
    log_file = tmp_path / "nav.jsonl"
    configure_logging(log_file=log_file)
    logger = get_logger("navgraph.test")

    bind_context(manifest="routes.yaml")
    logger.info("with_context")
    clear_context()
    logger.info("without_context")
    close_file_logging()

    by_event = {e["event"]: e for e in _read_events(log_file)}
    assert by_event["with_context"]["manifest"] == "routes.yaml"
    assert "manifest" not in by_event["without_context"]
