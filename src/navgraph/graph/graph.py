"""Immutable navigation graph.

The graph owns every route and link. It is produced once by
``build_graph()`` and is read-only for the rest of the pipeline: there are
no mutators, and all collections are exposed as tuples, frozensets or
read-only mapping views.

Forward and reverse adjacency are precomputed at construction so that
traversal and orphan detection are O(1) per lookup.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from navgraph.graph.models import LinkEdge, RouteNode

_EMPTY: tuple[str, ...] = ()


class Graph:
    """Directed graph of routes (nodes) and links (edges).

    Use :func:`navgraph.graph.builder.build_graph` to construct one; it
    enforces referential integrity before the graph exists.

    Attributes:
        _nodes: Route path to RouteNode, in declaration order.
        _edges: Deduplicated links, in declaration order.
        _successors: Route path to distinct target paths.
        _predecessors: Route path to distinct source paths.
    """

    __slots__ = ("_edge_pairs", "_edges", "_nodes", "_predecessors", "_successors")

    def __init__(
        self,
        nodes: dict[str, RouteNode],
        edges: tuple[LinkEdge, ...],
        successors: dict[str, tuple[str, ...]],
        predecessors: dict[str, tuple[str, ...]],
    ) -> None:
        self._nodes: Mapping[str, RouteNode] = MappingProxyType(dict(nodes))
        self._edges = edges
        self._successors: Mapping[str, tuple[str, ...]] = MappingProxyType(dict(successors))
        self._predecessors: Mapping[str, tuple[str, ...]] = MappingProxyType(dict(predecessors))
        self._edge_pairs = frozenset(
            (src, dst) for src, targets in successors.items() for dst in targets
        )

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> Mapping[str, RouteNode]:
        """Read-only view of route path to RouteNode."""
        return self._nodes

    @property
    def node_paths(self) -> frozenset[str]:
        return frozenset(self._nodes)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    def has_node(self, path: str) -> bool:
        return path in self._nodes

    def get_node(self, path: str) -> RouteNode | None:
        return self._nodes.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    # -------------------------------------------------------------------------
    # Edges
    # -------------------------------------------------------------------------

    @property
    def edges(self) -> tuple[LinkEdge, ...]:
        return self._edges

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def successors(self, path: str) -> tuple[str, ...]:
        """Distinct routes directly linked from ``path``."""
        return self._successors.get(path, _EMPTY)

    def predecessors(self, path: str) -> tuple[str, ...]:
        """Distinct routes that link directly to ``path``."""
        return self._predecessors.get(path, _EMPTY)

    def has_edge(self, from_path: str, to_path: str) -> bool:
        """Check for a directed link. A reverse link does not count."""
        return (from_path, to_path) in self._edge_pairs

    def out_degree(self, path: str) -> int:
        return len(self.successors(path))

    def in_degree(self, path: str) -> int:
        return len(self.predecessors(path))

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count}, edges={self.edge_count})"
