"""Composite navigation health score.

A fixed deduction formula on a 0-10 scale. Deterministic so the same
inputs always gate CI the same way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from navgraph.graph.models import JourneyResult

BASE_SCORE = 10.0
ORPHAN_PENALTY = 0.5
ORPHAN_PENALTY_CAP = 3.0
DEAD_END_PENALTY = 0.2
DEAD_END_PENALTY_CAP = 1.0
JOURNEY_PENALTY_WEIGHT = 2.0


def score_health(
    orphans: int,
    dead_ends: int,
    average_journey_coverage: float | None,
) -> float:
    """Combine orphan count, dead-end count and journey coverage into 0-10.

    Args:
        orphans: Number of orphaned routes.
        dead_ends: Number of dead-end routes.
        average_journey_coverage: Mean journey coverage in [0, 1], or None
            when no journeys were supplied (the journey term is omitted).

    Returns:
        Score clamped to a minimum of 0.0.

    Raises:
        ValueError: If a count is negative or coverage is outside [0, 1].
    """
    if orphans < 0 or dead_ends < 0:
        msg = f"counts must be non-negative, got orphans={orphans} dead_ends={dead_ends}"
        raise ValueError(msg)
    if average_journey_coverage is not None and not 0.0 <= average_journey_coverage <= 1.0:
        msg = f"average_journey_coverage must be in [0, 1], got {average_journey_coverage}"
        raise ValueError(msg)

    orphan_penalty = min(orphans * ORPHAN_PENALTY, ORPHAN_PENALTY_CAP)
    dead_end_penalty = min(dead_ends * DEAD_END_PENALTY, DEAD_END_PENALTY_CAP)
    journey_penalty = (
        (1.0 - average_journey_coverage) * JOURNEY_PENALTY_WEIGHT
        if average_journey_coverage is not None
        else 0.0
    )
    return max(0.0, BASE_SCORE - orphan_penalty - dead_end_penalty - journey_penalty)


def average_coverage(journey_results: Sequence[JourneyResult] | None) -> float | None:
    """Mean coverage across journeys, or None when there are none."""
    if not journey_results:
        return None
    return sum(r.coverage for r in journey_results) / len(journey_results)
