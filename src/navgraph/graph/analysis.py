"""Analysis pipeline and result assembly.

``analyze()`` runs the engine end to end:

    build_graph -> analyze_reachability -> validate_journeys
        -> score_health -> assemble_result

Configuration errors and invariant violations abort the whole run; no
partial result is ever returned. Data-quality findings (missing journey
links) are accumulated into the result instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from navgraph.graph.builder import build_graph
from navgraph.graph.errors import InvariantViolationError
from navgraph.graph.journeys import validate_journeys
from navgraph.graph.reachability import analyze_reachability
from navgraph.graph.scoring import average_coverage, score_health
from navgraph.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from navgraph.graph.deadline import Deadline
    from navgraph.graph.graph import Graph
    from navgraph.graph.models import Journey, JourneyResult, LinkEdge, RouteNode
    from navgraph.graph.reachability import ReachabilityResult

log = get_logger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Terminal, read-only outcome of one analysis run.

    Attributes:
        reachable: Routes reachable from an entry point (not dead-ends).
        orphans: Routes unreachable from every entry point.
        dead_ends: Reachable routes with no way forward.
        journey_results: One result per journey, in input order.
        health_score: Composite score in [0, 10].
        average_journey_coverage: Mean coverage, or None without journeys.
        entry_points: Entry points traversed from.
        terminals: Allowed terminals present in the graph.
        node_count: Number of routes.
        edge_count: Number of distinct links.
    """

    reachable: frozenset[str]
    orphans: frozenset[str]
    dead_ends: frozenset[str]
    journey_results: tuple[JourneyResult, ...]
    health_score: float
    average_journey_coverage: float | None = None
    entry_points: frozenset[str] = frozenset()
    terminals: frozenset[str] = frozenset()
    node_count: int = 0
    edge_count: int = 0

    @property
    def journeys_complete(self) -> bool:
        return all(r.is_complete for r in self.journey_results)

    @property
    def partial_journeys(self) -> list[JourneyResult]:
        return [r for r in self.journey_results if not r.is_complete]

    @property
    def exit_code(self) -> int:
        """Conventional CI exit code: 0 when clean, 1 on orphans or partial journeys."""
        if self.orphans or not self.journeys_complete:
            return 1
        return 0

    def to_dict(self) -> dict[str, Any]:
        """Deterministic JSON-ready representation. Sets become sorted lists."""
        return {
            "health_score": self.health_score,
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "entry_points": sorted(self.entry_points),
            "terminals": sorted(self.terminals),
            "reachable": sorted(self.reachable),
            "orphans": sorted(self.orphans),
            "dead_ends": sorted(self.dead_ends),
            "average_journey_coverage": self.average_journey_coverage,
            "journeys": [r.to_dict() for r in self.journey_results],
        }


def check_partition(
    all_nodes: frozenset[str],
    reachable: frozenset[str],
    orphans: frozenset[str],
    dead_ends: frozenset[str],
) -> list[str]:
    """Return every way the three sets fail to partition ``all_nodes``."""
    violations: list[str] = []
    for name_a, set_a, name_b, set_b in (
        ("reachable", reachable, "orphans", orphans),
        ("reachable", reachable, "dead_ends", dead_ends),
        ("orphans", orphans, "dead_ends", dead_ends),
    ):
        overlap = set_a & set_b
        if overlap:
            violations.append(f"{name_a} and {name_b} overlap: {sorted(overlap)[:5]}")

    covered = reachable | orphans | dead_ends
    missing = all_nodes - covered
    if missing:
        violations.append(f"routes not classified: {sorted(missing)[:5]}")
    extra = covered - all_nodes
    if extra:
        violations.append(f"classified routes not in graph: {sorted(extra)[:5]}")
    return violations


def assemble_result(
    graph: Graph,
    reachability: ReachabilityResult,
    journey_results: Sequence[JourneyResult] | None,
) -> AnalysisResult:
    """Package the stage outputs into one AnalysisResult.

    ``reachable`` is recomputed as ``nodes - orphans - dead_ends`` and the
    partition is verified. A failed check means an engine defect and is
    never corrected.

    Args:
        graph: The analyzed graph.
        reachability: Output of the reachability analyzer.
        journey_results: Output of the journey validator, or None when
            journey validation was not requested.

    Raises:
        InvariantViolationError: If the three sets do not partition the graph.
    """
    all_nodes = graph.node_paths
    reachable = all_nodes - reachability.orphans - reachability.dead_ends

    violations = check_partition(all_nodes, reachable, reachability.orphans, reachability.dead_ends)
    if reachable != reachability.reachable:
        violations.append(
            "reachable set disagrees with analyzer: "
            f"{sorted(reachable ^ reachability.reachable)[:5]}"
        )
    if violations:
        raise InvariantViolationError(violations=violations)

    results = tuple(journey_results or ())
    avg = average_coverage(results) if journey_results is not None else None
    score = score_health(len(reachability.orphans), len(reachability.dead_ends), avg)

    return AnalysisResult(
        reachable=reachable,
        orphans=reachability.orphans,
        dead_ends=reachability.dead_ends,
        journey_results=results,
        health_score=score,
        average_journey_coverage=avg,
        entry_points=reachability.entry_points,
        terminals=reachability.terminals,
        node_count=graph.node_count,
        edge_count=graph.edge_count,
    )


def analyze_graph(
    graph: Graph,
    *,
    entry_points: Iterable[str],
    terminals: Iterable[str] = (),
    journeys: Sequence[Journey] | None = None,
    deadline: Deadline | None = None,
    max_workers: int | None = None,
) -> AnalysisResult:
    """Run reachability, journey validation, scoring and assembly on a built graph."""
    reachability = analyze_reachability(graph, entry_points, terminals, deadline=deadline)
    if deadline is not None:
        deadline.check(visited=len(reachability.visited))

    journey_results = (
        validate_journeys(graph, journeys, max_workers=max_workers)
        if journeys is not None
        else None
    )
    result = assemble_result(graph, reachability, journey_results)

    log.info(
        "analysis_complete",
        nodes=result.node_count,
        edges=result.edge_count,
        orphans=len(result.orphans),
        dead_ends=len(result.dead_ends),
        journeys=len(result.journey_results),
        health_score=round(result.health_score, 2),
    )
    return result


def analyze(
    nodes: Iterable[RouteNode],
    edges: Iterable[LinkEdge],
    *,
    entry_points: Iterable[str],
    terminals: Iterable[str] = (),
    journeys: Sequence[Journey] | None = None,
    deadline: Deadline | None = None,
    max_workers: int | None = None,
) -> AnalysisResult:
    """Build the graph and analyze it in one call.

    Args:
        nodes: Declared routes.
        edges: Declared links.
        entry_points: Traversal roots (non-empty, all known).
        terminals: Routes allowed to have no outbound links.
        journeys: Journeys to validate. None disables journey validation
            and omits the journey term from the health score.
        deadline: Optional cooperative deadline for the traversal.
        max_workers: Thread pool size for journey validation.

    Returns:
        The assembled AnalysisResult.

    Raises:
        GraphConfigurationError: On duplicate routes, dangling links, or bad
            entry points.
        InvariantViolationError: If the result fails its consistency check.
        AnalysisTimeoutError: If the deadline expires.
    """
    graph = build_graph(nodes, edges)
    return analyze_graph(
        graph,
        entry_points=entry_points,
        terminals=terminals,
        journeys=journeys,
        deadline=deadline,
        max_workers=max_workers,
    )


def analyze_many(
    route_sets: Mapping[str, tuple[Sequence[RouteNode], Sequence[LinkEdge]]],
    *,
    entry_points: Iterable[str],
    terminals: Iterable[str] = (),
    journeys: Sequence[Journey] | None = None,
    deadline: Deadline | None = None,
    max_workers: int | None = None,
) -> dict[str, AnalysisResult]:
    """Analyze independent route sets (for example one per tenant).

    Each set gets its own graph; nothing is shared between runs. The same
    journeys are validated against every set and one deadline bounds the
    whole call. An error in any set aborts the whole call.
    """
    entry = frozenset(entry_points)
    terms = frozenset(terminals)
    results: dict[str, AnalysisResult] = {}
    for name, (nodes, edges) in route_sets.items():
        log.debug("analyzing_route_set", route_set=name)
        results[name] = analyze(
            nodes,
            edges,
            entry_points=entry,
            terminals=terms,
            journeys=journeys,
            deadline=deadline,
            max_workers=max_workers,
        )
    return results
