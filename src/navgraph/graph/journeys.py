"""Journey validation against the navigation graph.

A journey is navigable when every consecutive pair of steps is backed by a
directed link. Broken journeys are data-quality findings, not errors: they
are reported as missing links and a ``partial`` status so one stale journey
never prevents reporting on the rest of the graph.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from navgraph.graph.models import (
    JourneyResult,
    JourneyStatus,
    MissingLink,
    MissingLinkReason,
)
from navgraph.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from navgraph.graph.graph import Graph
    from navgraph.graph.models import Journey

log = get_logger(__name__)


def _pair_gap(graph: Graph, from_path: str, to_path: str) -> MissingLinkReason | None:
    """Return why a step pair is unsatisfied, or None if the link exists."""
    from_known = graph.has_node(from_path)
    to_known = graph.has_node(to_path)
    if not from_known and not to_known:
        return MissingLinkReason.UNKNOWN_BOTH
    if not from_known:
        return MissingLinkReason.UNKNOWN_FROM
    if not to_known:
        return MissingLinkReason.UNKNOWN_TO
    if not graph.has_edge(from_path, to_path):
        return MissingLinkReason.MISSING_EDGE
    return None


def validate_journey(graph: Graph, journey: Journey) -> JourneyResult:
    """Check that each consecutive step pair of a journey is linked.

    Direction matters: a link ``b -> a`` does not satisfy the pair ``(a, b)``.

    Args:
        graph: Built navigation graph.
        journey: Journey with at least two steps.

    Returns:
        JourneyResult with coverage and missing links in step order.
    """
    pairs = journey.pairs
    missing: list[MissingLink] = []
    for from_path, to_path in pairs:
        reason = _pair_gap(graph, from_path, to_path)
        if reason is not None:
            missing.append(MissingLink(from_path=from_path, to_path=to_path, reason=reason))

    total = len(pairs)
    satisfied = total - len(missing)
    # Single-step journeys are rejected by the registry loader; guard the
    # division anyway so a hand-built Journey cannot crash the run.
    coverage = satisfied / total if total else 0.0
    status = JourneyStatus.COMPLETE if total and satisfied == total else JourneyStatus.PARTIAL

    log.debug(
        "journey_validated",
        journey=journey.name,
        coverage=coverage,
        missing=len(missing),
    )
    return JourneyResult(
        name=journey.name,
        status=status,
        coverage=coverage,
        missing_links=tuple(missing),
        total_pairs=total,
        satisfied_pairs=satisfied,
    )


def validate_journeys(
    graph: Graph,
    journeys: Sequence[Journey],
    *,
    max_workers: int | None = None,
) -> list[JourneyResult]:
    """Validate every journey independently.

    Journeys share no state, so with ``max_workers > 1`` they are dispatched
    to a thread pool. Results are always returned in input order.

    Args:
        graph: Built navigation graph.
        journeys: Journeys to validate.
        max_workers: Thread pool size. None or 1 validates sequentially.

    Returns:
        One JourneyResult per journey, in input order.
    """
    if not journeys:
        return []

    if max_workers is None or max_workers <= 1 or len(journeys) == 1:
        results = [validate_journey(graph, j) for j in journeys]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(lambda j: validate_journey(graph, j), journeys))

    partial = sum(1 for r in results if not r.is_complete)
    log.info("journeys_validated", total=len(results), partial=partial)
    return results
