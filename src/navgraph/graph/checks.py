"""Pass/warn/fail checklist derived from an AnalysisResult.

Orphans and partial journeys fail, matching the CI exit-code convention.
Dead-ends and a low health score only warn.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from navgraph.graph.analysis import AnalysisResult
    from navgraph.graph.models import JourneyResult

HEALTH_WARN_THRESHOLD = 7.0
_MAX_LISTED = 5


class Severity(StrEnum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True)
class Check:
    """One checklist line.

    Attributes:
        name: Check identifier, ``journey:<name>`` for journey checks.
        severity: Pass, warn or fail.
        message: Human-readable detail.
    """

    name: str
    severity: Severity
    message: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "severity": str(self.severity), "message": self.message}


@dataclass
class CheckReport:
    """All checks for one analysis result, in report order."""

    checks: list[Check] = field(default_factory=list)

    def with_severity(self, severity: Severity) -> list[Check]:
        return [c for c in self.checks if c.severity is severity]

    @property
    def has_failures(self) -> bool:
        return bool(self.with_severity(Severity.FAIL))

    @property
    def has_warnings(self) -> bool:
        return bool(self.with_severity(Severity.WARN))

    @property
    def summary(self) -> str:
        """Counts per severity, e.g. ``1 failed, 2 warnings, 3 passed``."""
        parts: list[str] = []
        for severity, label in (
            (Severity.FAIL, "failed"),
            (Severity.WARN, "warnings"),
            (Severity.PASS, "passed"),
        ):
            count = len(self.with_severity(severity))
            if count:
                parts.append(f"{count} {label}")
        return ", ".join(parts)


def _preview(paths: frozenset[str]) -> str:
    listed = sorted(paths)
    text = ", ".join(listed[:_MAX_LISTED])
    if len(listed) > _MAX_LISTED:
        text += f", ... (+{len(listed) - _MAX_LISTED})"
    return text


def check_no_orphans(result: AnalysisResult) -> Check:
    """Every route should be reachable from some entry point."""
    if not result.orphans:
        return Check(
            name="no_orphans",
            severity=Severity.PASS,
            message=f"All {result.node_count} routes reachable from entry points",
        )
    return Check(
        name="no_orphans",
        severity=Severity.FAIL,
        message=f"{len(result.orphans)} orphaned route(s): {_preview(result.orphans)}",
    )


def check_no_dead_ends(result: AnalysisResult) -> Check:
    """Reachable routes should offer a way forward unless they are terminals."""
    if not result.dead_ends:
        return Check(name="no_dead_ends", severity=Severity.PASS, message="No dead-end routes")
    return Check(
        name="no_dead_ends",
        severity=Severity.WARN,
        message=f"{len(result.dead_ends)} dead-end route(s): {_preview(result.dead_ends)}",
    )


def check_journey(journey: JourneyResult) -> Check:
    name = f"journey:{journey.name}"
    if journey.is_complete:
        return Check(
            name=name,
            severity=Severity.PASS,
            message=f"All {journey.total_pairs} step(s) linked",
        )
    if not journey.missing_links:
        # Fewer than two steps: nothing to link, but not complete either.
        return Check(name=name, severity=Severity.FAIL, message="Journey has no step pairs")
    first = journey.missing_links[0]
    return Check(
        name=name,
        severity=Severity.FAIL,
        message=(
            f"{journey.coverage:.0%} coverage, first break {first.from_path} -> "
            f"{first.to_path} ({first.reason})"
        ),
    )


def check_health_score(result: AnalysisResult) -> Check:
    healthy = result.health_score >= HEALTH_WARN_THRESHOLD
    severity = Severity.PASS if healthy else Severity.WARN
    return Check(
        name="health_score",
        severity=severity,
        message=f"{result.health_score:.1f}/10",
    )


def run_all_checks(result: AnalysisResult) -> CheckReport:
    """Run every check against an analysis result.

    Returns:
        CheckReport with orphan, dead-end, per-journey and score checks.
    """
    checks = [check_no_orphans(result), check_no_dead_ends(result)]
    checks.extend(check_journey(j) for j in result.journey_results)
    checks.append(check_health_score(result))
    return CheckReport(checks=checks)
