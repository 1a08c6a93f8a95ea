"""Reachability analysis from entry points.

Classifies every route into exactly one of three sets:

- reachable: visited from some entry point and either has outbound links
  or is an allowed terminal
- orphans: never visited from any entry point
- dead_ends: visited, no outbound links, and not an allowed terminal

Only set membership matters, so the traversal is an iterative DFS from all
entry points at once. The graph may contain cycles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from navgraph.graph.errors import EmptyEntryPointsError, UnknownEntryPointError
from navgraph.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from navgraph.graph.deadline import Deadline
    from navgraph.graph.graph import Graph

log = get_logger(__name__)

DEFAULT_ENTRY_POINTS: frozenset[str] = frozenset({"/"})
DEFAULT_TERMINALS: frozenset[str] = frozenset({"/logout", "/error", "/404", "/500"})


@dataclass(frozen=True)
class ReachabilityResult:
    """Partition of the graph's routes.

    Attributes:
        reachable: Routes reached from an entry point that are not dead-ends.
        orphans: Routes not reached from any entry point.
        dead_ends: Reached routes with no outbound links, excluding terminals.
        entry_points: The entry points that were traversed from.
        terminals: The allowed terminals that exist in the graph.
    """

    reachable: frozenset[str]
    orphans: frozenset[str]
    dead_ends: frozenset[str]
    entry_points: frozenset[str] = frozenset()
    terminals: frozenset[str] = frozenset()

    @property
    def visited(self) -> frozenset[str]:
        """Every route reached by the traversal (reachable plus dead-ends)."""
        return self.reachable | self.dead_ends


def find_reachable(
    graph: Graph,
    roots: Iterable[str],
    deadline: Deadline | None = None,
) -> set[str]:
    """Collect every route reachable from ``roots`` by following links forward.

    Iterative DFS with an explicit stack, so long link chains do not hit the
    recursion limit. Each route is visited at most once.

    Args:
        graph: Graph to traverse.
        roots: Starting route paths. Must exist in the graph.
        deadline: Optional cooperative deadline, checked at every visit.

    Returns:
        Set of visited route paths (includes the roots).

    Raises:
        AnalysisTimeoutError: If the deadline expires mid-traversal.
    """
    visited: set[str] = set()
    stack = list(roots)

    while stack:
        current = stack.pop()
        if current in visited:
            continue
        if deadline is not None:
            deadline.check(visited=len(visited))
        visited.add(current)
        for successor in graph.successors(current):
            if successor not in visited:
                stack.append(successor)

    return visited


def analyze_reachability(
    graph: Graph,
    entry_points: Iterable[str],
    terminals: Iterable[str] = (),
    *,
    deadline: Deadline | None = None,
) -> ReachabilityResult:
    """Classify every route as reachable, orphaned, or a dead-end.

    Args:
        graph: Built navigation graph.
        entry_points: Traversal roots. Must be non-empty and all known.
        terminals: Routes allowed to have no outbound links. Terminals that
            are not in the graph are ignored.
        deadline: Optional cooperative deadline.

    Returns:
        ReachabilityResult whose three sets partition the graph's routes.

    Raises:
        EmptyEntryPointsError: If ``entry_points`` is empty.
        UnknownEntryPointError: If any entry point is not a declared route.
        AnalysisTimeoutError: If the deadline expires.
    """
    entry = frozenset(entry_points)
    if not entry:
        raise EmptyEntryPointsError()

    unknown = sorted(p for p in entry if not graph.has_node(p))
    if unknown:
        raise UnknownEntryPointError(paths=unknown, available=sorted(graph.node_paths))

    requested_terminals = frozenset(terminals)
    known_terminals = frozenset(t for t in requested_terminals if graph.has_node(t))
    ignored = requested_terminals - known_terminals
    if ignored:
        log.info("terminals_not_in_graph", terminals=sorted(ignored))

    visited = find_reachable(graph, sorted(entry), deadline)

    orphans = graph.node_paths - visited
    dead_ends = frozenset(
        path
        for path in visited
        if graph.out_degree(path) == 0 and path not in known_terminals
    )
    reachable = frozenset(visited) - dead_ends

    log.info(
        "reachability_complete",
        reachable=len(reachable),
        orphans=len(orphans),
        dead_ends=len(dead_ends),
    )
    return ReachabilityResult(
        reachable=reachable,
        orphans=orphans,
        dead_ends=dead_ends,
        entry_points=entry,
        terminals=known_terminals,
    )
