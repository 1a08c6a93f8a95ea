"""Graph package - the navigation analysis engine.

Routes and links are assembled into an immutable graph, which is then
classified for reachability, checked against declared journeys, and scored.
"""

from navgraph.graph.analysis import (
    AnalysisResult,
    analyze,
    analyze_graph,
    analyze_many,
    assemble_result,
)
from navgraph.graph.builder import build_graph
from navgraph.graph.deadline import Deadline
from navgraph.graph.errors import (
    AnalysisTimeoutError,
    DanglingEdgeError,
    DuplicateNodeError,
    EmptyEntryPointsError,
    GraphConfigurationError,
    InvariantViolationError,
    NavGraphError,
    UnknownEntryPointError,
)
from navgraph.graph.graph import Graph
from navgraph.graph.journeys import validate_journey, validate_journeys
from navgraph.graph.models import (
    Journey,
    JourneyResult,
    JourneyStatus,
    LinkEdge,
    LinkKind,
    MissingLink,
    MissingLinkReason,
    RouteKind,
    RouteNode,
)
from navgraph.graph.reachability import (
    DEFAULT_ENTRY_POINTS,
    DEFAULT_TERMINALS,
    ReachabilityResult,
    analyze_reachability,
)
from navgraph.graph.scoring import average_coverage, score_health

__all__ = [
    "DEFAULT_ENTRY_POINTS",
    "DEFAULT_TERMINALS",
    "AnalysisResult",
    "AnalysisTimeoutError",
    "DanglingEdgeError",
    "Deadline",
    "DuplicateNodeError",
    "EmptyEntryPointsError",
    "Graph",
    "GraphConfigurationError",
    "InvariantViolationError",
    "Journey",
    "JourneyResult",
    "JourneyStatus",
    "LinkEdge",
    "LinkKind",
    "MissingLink",
    "MissingLinkReason",
    "NavGraphError",
    "ReachabilityResult",
    "RouteKind",
    "RouteNode",
    "UnknownEntryPointError",
    "analyze",
    "analyze_graph",
    "analyze_many",
    "analyze_reachability",
    "assemble_result",
    "average_coverage",
    "build_graph",
    "score_health",
    "validate_journey",
    "validate_journeys",
]
