"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from navgraph.graph import LinkEdge, RouteNode, build_graph
from navgraph.graph.graph import Graph


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep NAVGRAPH_* variables and a stray ./navgraph.yaml out of tests."""
    for var in ("NAVGRAPH_TIMEOUT", "NAVGRAPH_MAX_WORKERS", "NAVGRAPH_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    # Wide terminal so Rich does not wrap long tmp paths in CLI output.
    monkeypatch.setenv("COLUMNS", "1000")
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the directory holding manifest fixtures."""
    return Path(__file__).parent / "fixtures" / "navgraph"


@pytest.fixture
def shop_manifest(fixtures_dir: Path) -> Path:
    """Storefront manifest with one orphan, one dead-end and one broken journey."""
    return fixtures_dir / "shop.yaml"


@pytest.fixture
def clean_manifest(fixtures_dir: Path) -> Path:
    """Manifest with no findings."""
    return fixtures_dir / "clean.yaml"


def _make_graph(paths: list[str], links: list[tuple[str, str]]) -> Graph:
    return build_graph(
        [RouteNode(path=p) for p in paths],
        [LinkEdge(from_path=a, to_path=b) for a, b in links],
    )


@pytest.fixture
def make_graph() -> Callable[[list[str], list[tuple[str, str]]], Graph]:
    """Build a graph from bare paths and ``(from, to)`` pairs."""
    return _make_graph
