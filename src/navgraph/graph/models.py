"""Typed records for the navigation graph.

Routes are nodes and links are directed edges. Both are frozen so that a
built graph can hand them out without copying. Journeys and their
validation results live here too since every analysis stage shares them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class RouteKind(StrEnum):
    """How a route path was declared.

    Dynamic routes carry parameter slots (``/products/[id]``) but are treated
    as ordinary nodes by the graph.
    """

    STATIC = "static"
    DYNAMIC = "dynamic"


class LinkKind(StrEnum):
    """How a link is triggered. Informational only; all kinds traverse equally."""

    NAVIGATIONAL = "navigational"
    PROGRAMMATIC = "programmatic"


class JourneyStatus(StrEnum):
    COMPLETE = "complete"
    PARTIAL = "partial"


class MissingLinkReason(StrEnum):
    """Why a journey step pair is not satisfied.

    ``MISSING_EDGE`` means both routes exist but are not linked in the
    required direction. The ``UNKNOWN_*`` values mark steps that name routes
    absent from the graph altogether.
    """

    MISSING_EDGE = "missing_edge"
    UNKNOWN_FROM = "unknown_from"
    UNKNOWN_TO = "unknown_to"
    UNKNOWN_BOTH = "unknown_both"


@dataclass(frozen=True)
class RouteNode:
    """A declared page or endpoint.

    Attributes:
        path: Unique identifier, usually a URL path template.
        source_ref: Where the route is defined (file, line, registry key).
            Carried through for reporting and never inspected.
        kind: Static or dynamic.
    """

    path: str
    source_ref: str = ""
    kind: RouteKind = RouteKind.STATIC


@dataclass(frozen=True)
class LinkEdge:
    """A directed navigational connection between two routes."""

    from_path: str
    to_path: str
    kind: LinkKind = LinkKind.NAVIGATIONAL


@dataclass(frozen=True)
class Journey:
    """A named ordered sequence of route paths representing a user flow."""

    name: str
    steps: tuple[str, ...]

    @property
    def pairs(self) -> list[tuple[str, str]]:
        """Consecutive step pairs in walking order."""
        return list(zip(self.steps, self.steps[1:], strict=False))


@dataclass(frozen=True)
class MissingLink:
    """A journey step pair with no backing edge."""

    from_path: str
    to_path: str
    reason: MissingLinkReason = MissingLinkReason.MISSING_EDGE

    def to_dict(self) -> dict[str, str]:
        return {"from": self.from_path, "to": self.to_path, "reason": str(self.reason)}


@dataclass(frozen=True)
class JourneyResult:
    """Validation outcome for one journey.

    Attributes:
        name: Journey name.
        status: ``complete`` when every pair is linked, else ``partial``.
        coverage: Satisfied pairs divided by total pairs.
        missing_links: Unsatisfied pairs in original step order.
        total_pairs: Number of consecutive step pairs.
        satisfied_pairs: Number of pairs backed by an edge.
    """

    name: str
    status: JourneyStatus
    coverage: float
    missing_links: tuple[MissingLink, ...] = field(default_factory=tuple)
    total_pairs: int = 0
    satisfied_pairs: int = 0

    @property
    def is_complete(self) -> bool:
        return self.status is JourneyStatus.COMPLETE

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "status": str(self.status),
            "coverage": self.coverage,
            "total_pairs": self.total_pairs,
            "satisfied_pairs": self.satisfied_pairs,
            "missing_links": [m.to_dict() for m in self.missing_links],
        }
