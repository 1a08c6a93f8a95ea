"""Pydantic models for the declarative inputs navgraph reads.

The engine itself works on the frozen records in ``navgraph.graph.models``;
these models validate manifests and journey registries and convert them.
"""

from navgraph.models.manifest import (
    JourneyRegistry,
    JourneySpec,
    LinkSpec,
    NavigationManifest,
    RouteSpec,
    infer_route_kind,
)

__all__ = [
    "JourneyRegistry",
    "JourneySpec",
    "LinkSpec",
    "NavigationManifest",
    "RouteSpec",
    "infer_route_kind",
]
