"""Graph construction with referential integrity checks.

The builder is the only place a Graph is created. Duplicate routes and
links to undeclared routes are rejected; exact duplicate links are expected
(several extractors often report the same navigation) and are dropped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from navgraph.graph.errors import DanglingEdgeError, DuplicateNodeError
from navgraph.graph.graph import Graph
from navgraph.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from navgraph.graph.models import LinkEdge, RouteNode

log = get_logger(__name__)


def build_graph(nodes: Iterable[RouteNode], edges: Iterable[LinkEdge]) -> Graph:
    """Assemble an immutable Graph from route and link lists.

    Forward and reverse adjacency are built in the same pass that validates
    the links, so construction is O(N + E).

    Args:
        nodes: Declared routes, in any order.
        edges: Declared links, in any order. May contain exact duplicates.

    Returns:
        The constructed graph.

    Raises:
        DuplicateNodeError: If two routes share a path.
        DanglingEdgeError: If a link references an undeclared route.
    """
    node_map: dict[str, RouteNode] = {}
    for node in nodes:
        existing = node_map.get(node.path)
        if existing is not None:
            raise DuplicateNodeError(
                path=node.path,
                first_source_ref=existing.source_ref,
                duplicate_source_ref=node.source_ref,
            )
        node_map[node.path] = node

    seen_edges: set[LinkEdge] = set()
    kept_edges: list[LinkEdge] = []
    successors: dict[str, list[str]] = {}
    predecessors: dict[str, list[str]] = {}
    linked: set[tuple[str, str]] = set()
    duplicates = 0

    for edge in edges:
        from_known = edge.from_path in node_map
        to_known = edge.to_path in node_map
        if not (from_known and to_known):
            if not from_known and not to_known:
                missing = "both"
            elif not from_known:
                missing = "from"
            else:
                missing = "to"
            raise DanglingEdgeError(
                from_path=edge.from_path,
                to_path=edge.to_path,
                missing=missing,
                edge_kind=str(edge.kind),
                available=list(node_map),
            )

        if edge in seen_edges:
            duplicates += 1
            continue
        seen_edges.add(edge)
        kept_edges.append(edge)

        # Same endpoints with a different kind are distinct edges but one
        # adjacency entry.
        pair = (edge.from_path, edge.to_path)
        if pair not in linked:
            linked.add(pair)
            successors.setdefault(edge.from_path, []).append(edge.to_path)
            predecessors.setdefault(edge.to_path, []).append(edge.from_path)

    if duplicates:
        log.debug("duplicate_links_dropped", count=duplicates)

    graph = Graph(
        nodes=node_map,
        edges=tuple(kept_edges),
        successors={k: tuple(v) for k, v in successors.items()},
        predecessors={k: tuple(v) for k, v in predecessors.items()},
    )
    log.info("graph_built", nodes=graph.node_count, edges=graph.edge_count)
    return graph
