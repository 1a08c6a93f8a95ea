"""Tests for the end-to-end analysis pipeline and result assembly."""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING

import pytest

from navgraph.graph import (
    AnalysisTimeoutError,
    DanglingEdgeError,
    Deadline,
    InvariantViolationError,
    Journey,
    LinkEdge,
    ReachabilityResult,
    RouteNode,
    UnknownEntryPointError,
    analyze,
    analyze_many,
    assemble_result,
)
from navgraph.graph.analysis import check_partition

if TYPE_CHECKING:
    from collections.abc import Callable

    from navgraph.graph import Graph

    MakeGraph = Callable[[list[str], list[tuple[str, str]]], Graph]


def _nodes(*paths: str) -> list[RouteNode]:
    return [RouteNode(path=p) for p in paths]


def _edges(*pairs: tuple[str, str]) -> list[LinkEdge]:
    return [LinkEdge(from_path=a, to_path=b) for a, b in pairs]


class TestAnalyze:
    def test_clean_graph(self) -> None:
        result = analyze(
            _nodes("/", "/a", "/logout"),
            _edges(("/", "/a"), ("/a", "/logout")),
            entry_points=["/"],
            terminals=["/logout"],
        )

        assert result.reachable == {"/", "/a", "/logout"}
        assert result.orphans == frozenset()
        assert result.dead_ends == frozenset()
        assert result.health_score == 10.0
        assert result.average_journey_coverage is None
        assert result.journey_results == ()
        assert result.exit_code == 0
        assert result.node_count == 3
        assert result.edge_count == 2

    def test_orphan_scores_and_fails(self) -> None:
        result = analyze(
            _nodes("/", "/a", "/orphan"),
            _edges(("/", "/a"), ("/a", "/")),
            entry_points=["/"],
        )

        assert result.orphans == {"/orphan"}
        assert result.health_score == pytest.approx(9.5)
        assert result.exit_code == 1

    def test_dead_end_alone_exits_clean(self) -> None:
        result = analyze(
            _nodes("/", "/a", "/stuck"),
            _edges(("/", "/a"), ("/a", "/stuck")),
            entry_points=["/"],
        )

        assert result.dead_ends == {"/stuck"}
        assert result.health_score == pytest.approx(9.8)
        assert result.exit_code == 0

    def test_partial_journey(self) -> None:
        result = analyze(
            _nodes("/", "/cart", "/checkout", "/confirm"),
            _edges(("/", "/cart"), ("/cart", "/checkout"), ("/confirm", "/")),
            entry_points=["/"],
            terminals=["/checkout"],
            journeys=[Journey(name="purchase", steps=("/", "/cart", "/checkout", "/confirm"))],
        )

        journey = result.journey_results[0]
        assert journey.coverage == pytest.approx(2 / 3)
        assert not result.journeys_complete
        assert result.partial_journeys == [journey]
        assert result.average_journey_coverage == pytest.approx(2 / 3)
        # Orphan /confirm (0.5) plus 1/3 of the journey weight
        assert result.health_score == pytest.approx(10 - 0.5 - 2 / 3)
        assert result.exit_code == 1

    def test_empty_journey_list_scores_as_no_coverage(self) -> None:
        result = analyze(
            _nodes("/", "/a"),
            _edges(("/", "/a"), ("/a", "/")),
            entry_points=["/"],
            journeys=[],
        )

        assert result.journey_results == ()
        assert result.average_journey_coverage is None
        assert result.health_score == 10.0

    def test_errors_abort_without_result(self) -> None:
        with pytest.raises(DanglingEdgeError):
            analyze(_nodes("/"), _edges(("/", "/nowhere")), entry_points=["/"])

        with pytest.raises(UnknownEntryPointError):
            analyze(_nodes("/"), [], entry_points=["/home"])

    def test_deterministic_serialization(self) -> None:
        nodes = _nodes("/", "/b", "/a", "/c", "/z")
        edges = _edges(("/", "/b"), ("/", "/a"), ("/a", "/c"), ("/b", "/"))
        journeys = [Journey(name="j", steps=("/", "/a", "/c", "/z"))]

        first = analyze(nodes, edges, entry_points=["/"], journeys=journeys)
        second = analyze(
            list(reversed(nodes)), list(reversed(edges)), entry_points=["/"], journeys=journeys
        )

        assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())

    def test_to_dict_sorts_sets(self) -> None:
        result = analyze(
            _nodes("/", "/b", "/a"),
            _edges(("/", "/b"), ("/", "/a")),
            entry_points=["/"],
        )

        data = result.to_dict()
        assert data["dead_ends"] == ["/a", "/b"]
        assert data["reachable"] == ["/"]
        assert data["journeys"] == []

    def test_parallel_journeys_match_sequential(self) -> None:
        nodes = _nodes("/", "/a", "/b")
        edges = _edges(("/", "/a"), ("/a", "/b"), ("/b", "/"))
        journeys = [
            Journey(name="ok", steps=("/", "/a", "/b")),
            Journey(name="broken", steps=("/b", "/a")),
            Journey(name="loop", steps=("/a", "/b", "/", "/a")),
        ]

        sequential = analyze(nodes, edges, entry_points=["/"], journeys=journeys)
        parallel = analyze(nodes, edges, entry_points=["/"], journeys=journeys, max_workers=3)

        assert parallel.to_dict() == sequential.to_dict()


class TestAssembleResult:
    def test_overlapping_sets_raise(self, make_graph: MakeGraph) -> None:
        graph = make_graph(["/", "/a"], [("/", "/a")])
        broken = ReachabilityResult(
            reachable=frozenset({"/"}),
            orphans=frozenset({"/a"}),
            dead_ends=frozenset({"/a"}),
        )

        with pytest.raises(InvariantViolationError) as exc_info:
            assemble_result(graph, broken, None)

        assert any("overlap" in v for v in exc_info.value.violations)

    def test_unclassified_route_raises(self, make_graph: MakeGraph) -> None:
        graph = make_graph(["/", "/a"], [("/", "/a")])
        broken = ReachabilityResult(
            reachable=frozenset({"/"}),
            orphans=frozenset(),
            dead_ends=frozenset(),
        )

        with pytest.raises(InvariantViolationError) as exc_info:
            assemble_result(graph, broken, None)

        assert "Analysis invariant violated" in str(exc_info.value)

    def test_check_partition_clean(self) -> None:
        assert (
            check_partition(
                frozenset({"/", "/a", "/b"}),
                frozenset({"/"}),
                frozenset({"/a"}),
                frozenset({"/b"}),
            )
            == []
        )

    def test_check_partition_reports_unknown_routes(self) -> None:
        violations = check_partition(
            frozenset({"/"}), frozenset({"/", "/ghost"}), frozenset(), frozenset()
        )

        assert violations == ["classified routes not in graph: ['/ghost']"]


class TestAnalyzeMany:
    def test_route_sets_are_independent(self) -> None:
        results = analyze_many(
            {
                "tenant-a": (_nodes("/", "/a"), _edges(("/", "/a"), ("/a", "/"))),
                "tenant-b": (_nodes("/", "/b"), _edges(("/b", "/"))),
            },
            entry_points=["/"],
        )

        assert set(results) == {"tenant-a", "tenant-b"}
        assert results["tenant-a"].orphans == frozenset()
        assert results["tenant-b"].orphans == {"/b"}
        assert results["tenant-b"].dead_ends == {"/"}

    def test_journeys_validated_per_set(self) -> None:
        results = analyze_many(
            {
                "tenant-a": (_nodes("/", "/a"), _edges(("/", "/a"), ("/a", "/"))),
                "tenant-b": (_nodes("/", "/a"), _edges(("/a", "/"))),
            },
            entry_points=["/"],
            journeys=[Journey(name="in", steps=("/", "/a"))],
            max_workers=2,
        )

        assert results["tenant-a"].journeys_complete
        assert results["tenant-b"].journey_results[0].coverage == 0.0
        assert results["tenant-b"].average_journey_coverage == 0.0

    def test_expired_deadline_aborts(self) -> None:
        deadline = Deadline(timeout_seconds=0.5, expires_at=time.monotonic() - 1.0)

        with pytest.raises(AnalysisTimeoutError):
            analyze_many(
                {"only": (_nodes("/", "/a"), _edges(("/", "/a")))},
                entry_points=["/"],
                deadline=deadline,
            )

    def test_error_in_one_set_aborts(self) -> None:
        with pytest.raises(UnknownEntryPointError):
            analyze_many(
                {
                    "ok": (_nodes("/"), []),
                    "bad": (_nodes("/home"), []),
                },
                entry_points=["/"],
            )


class TestLoginScenarios:
    """Small login-flow graphs with hand-checked classifications."""

    NODES = ("/", "/login", "/dashboard")
    EDGES = (("/", "/login"), ("/login", "/dashboard"))

    def test_no_terminals_leaves_dashboard_dead_end(self) -> None:
        result = analyze(_nodes(*self.NODES), _edges(*self.EDGES), entry_points=["/"])

        # Visited routes; the dead-end is split out so the sets stay disjoint.
        assert result.reachable | result.dead_ends == {"/", "/login", "/dashboard"}
        assert result.reachable == {"/", "/login"}
        assert result.orphans == frozenset()
        assert result.dead_ends == {"/dashboard"}

    def test_dashboard_terminal(self) -> None:
        result = analyze(
            _nodes(*self.NODES),
            _edges(*self.EDGES),
            entry_points=["/"],
            terminals=["/dashboard"],
        )

        assert result.dead_ends == frozenset()
        assert result.reachable == {"/", "/login", "/dashboard"}

    def test_unlinked_route_is_orphan(self) -> None:
        result = analyze(
            _nodes(*self.NODES, "/legacy"),
            _edges(*self.EDGES),
            entry_points=["/"],
            terminals=["/dashboard"],
        )

        assert result.orphans == {"/legacy"}

    def test_auth_journey_half_covered(self) -> None:
        result = analyze(
            _nodes(*self.NODES, "/settings"),
            _edges(*self.EDGES),
            entry_points=["/"],
            journeys=[Journey(name="auth", steps=("/login", "/dashboard", "/settings"))],
        )

        auth = result.journey_results[0]
        assert auth.coverage == 0.5
        assert auth.status == "partial"
        assert [(m.from_path, m.to_path) for m in auth.missing_links] == [
            ("/dashboard", "/settings")
        ]

    def test_orphaned_journey_step_reported_as_missing_edge(self) -> None:
        result = analyze(
            _nodes(*self.NODES, "/settings"),
            _edges(*self.EDGES),
            entry_points=["/"],
            journeys=[Journey(name="auth", steps=("/login", "/dashboard", "/settings"))],
        )

        assert "/settings" in result.orphans
        assert str(result.journey_results[0].missing_links[0].reason) == "missing_edge"
