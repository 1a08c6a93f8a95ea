"""Navigation graph error types with actionable feedback.

Configuration errors are raised when the declared routes, links or entry
points are inconsistent with each other, similar to foreign key constraint
violations in databases. They always name the offending identifier.

Invariant violations and timeouts are raised by the engine itself; the
former indicate a bug rather than bad input.

Each error can format itself as markdown feedback for reports and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from difflib import get_close_matches

_MAX_LISTED = 10


class NavGraphError(Exception):
    """Base class for every error raised by the analysis engine."""

    def to_feedback(self) -> str:
        """Format error as actionable feedback.

        Returns:
            Human-readable message explaining what's wrong and how to fix it.
        """
        return str(self)


class GraphConfigurationError(NavGraphError):
    """Base class for errors caused by malformed or inconsistent input facts.

    Always fatal to the current analysis run and never silently repaired.
    """


def _suggest(path: str, available: list[str]) -> list[str]:
    """Find known paths that might be what a typo meant."""
    return get_close_matches(path, available, n=3, cutoff=0.6)


def _list_paths(lines: list[str], title: str, paths: list[str]) -> None:
    lines.append(title)
    for p in sorted(paths)[:_MAX_LISTED]:
        lines.append(f"  - `{p}`")
    if len(paths) > _MAX_LISTED:
        lines.append(f"  - ... and {len(paths) - _MAX_LISTED} more")


@dataclass
class DuplicateNodeError(GraphConfigurationError):
    """Raised when two routes are declared with the same path.

    Attributes:
        path: The path declared more than once.
        first_source_ref: Where the first declaration came from.
        duplicate_source_ref: Where the rejected declaration came from.
    """

    path: str
    first_source_ref: str = ""
    duplicate_source_ref: str = ""

    def __post_init__(self) -> None:
        super().__init__(f"Route '{self.path}' is declared more than once")

    def to_feedback(self) -> str:
        """Format as actionable feedback."""
        lines = [
            "## Error: Duplicate Route",
            "",
            f"**Path**: `{self.path}`",
        ]
        if self.first_source_ref or self.duplicate_source_ref:
            lines.append(f"**First declared at**: {self.first_source_ref or '(unknown)'}")
            lines.append(f"**Declared again at**: {self.duplicate_source_ref or '(unknown)'}")
        lines.extend(
            [
                "",
                "**Problem**: Route paths must be unique across the graph.",
                "",
                "**Solution**: Remove one declaration or give the routes distinct paths.",
            ]
        )
        return "\n".join(lines)


@dataclass
class DanglingEdgeError(GraphConfigurationError):
    """Raised when a link references a route that was never declared.

    Attributes:
        from_path: Source route path of the link.
        to_path: Target route path of the link.
        missing: Which endpoint is missing ("from", "to", or "both").
        edge_kind: Kind of the offending link.
        available: Known route paths, used for suggestions.
    """

    from_path: str
    to_path: str
    missing: str  # "from", "to", or "both"
    edge_kind: str = "navigational"
    available: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        edge = f"{self.from_path} -> {self.to_path}"
        if self.missing == "both":
            msg = f"Link '{edge}' references unknown routes '{self.from_path}' and '{self.to_path}'"
        elif self.missing == "from":
            msg = f"Link '{edge}' references unknown source route '{self.from_path}'"
        else:
            msg = f"Link '{edge}' references unknown target route '{self.to_path}'"
        super().__init__(msg)

    @property
    def missing_paths(self) -> list[str]:
        """The endpoint path(s) that are not declared routes."""
        if self.missing == "both":
            return [self.from_path, self.to_path]
        if self.missing == "from":
            return [self.from_path]
        return [self.to_path]

    def to_feedback(self) -> str:
        """Format as actionable feedback."""
        lines = [
            "## Error: Link Endpoint Not Found",
            "",
            f"**Link kind**: `{self.edge_kind}`",
            f"**From**: `{self.from_path}`",
            f"**To**: `{self.to_path}`",
            "",
        ]

        for path in self.missing_paths:
            lines.append(f"**Problem**: Route `{path}` is not declared.")
            suggestions = _suggest(path, self.available)
            if suggestions:
                lines.append("**Did you mean one of these?**")
                for s in suggestions:
                    lines.append(f"  - `{s}`")
            lines.append("")

        lines.append("**Solution**: Declare the route, or fix the link to use an existing path.")
        return "\n".join(lines)


@dataclass
class UnknownEntryPointError(GraphConfigurationError):
    """Raised when an entry point names a route that does not exist.

    A typo in an entry point must not silently shrink the reachable set.

    Attributes:
        paths: Every entry point path that is not a declared route.
        available: Known route paths, used for suggestions.
    """

    paths: list[str]
    available: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        joined = ", ".join(f"'{p}'" for p in self.paths)
        super().__init__(f"Unknown entry point(s): {joined}")

    def to_feedback(self) -> str:
        """Format as actionable feedback."""
        lines = ["## Error: Unknown Entry Point", ""]
        for path in self.paths:
            lines.append(f"**Entry point**: `{path}` is not a declared route.")
            suggestions = _suggest(path, self.available)
            if suggestions:
                lines.append("**Did you mean one of these?**")
                for s in suggestions:
                    lines.append(f"  - `{s}`")
            lines.append("")
        if self.available:
            _list_paths(lines, "**Valid routes**:", self.available)
        return "\n".join(lines)


@dataclass
class EmptyEntryPointsError(GraphConfigurationError):
    """Raised when analysis is requested without any entry point.

    An empty entry set is never treated as "every node is a root".
    """

    def __post_init__(self) -> None:
        super().__init__("At least one entry point is required")

    def to_feedback(self) -> str:
        """Format as actionable feedback."""
        return (
            "## Error: No Entry Points\n\n"
            "**Problem**: Reachability needs at least one traversal root.\n\n"
            "**Solution**: Declare `entry_points` (for example `[/]`) in the manifest "
            "or pass `--entry`."
        )


@dataclass
class InvariantViolationError(NavGraphError):
    """Raised when the analysis result fails its internal consistency check.

    Unlike configuration errors, this indicates a defect in the engine
    rather than bad input, and should be reported as a bug.

    Attributes:
        violations: Descriptions of each broken invariant.
    """

    violations: list[str]

    def __post_init__(self) -> None:
        msg = "Analysis invariant violated"
        if self.violations:
            msg += f": {len(self.violations)} violation(s)"
        super().__init__(msg)

    def __str__(self) -> str:
        lines = ["Analysis invariant violated:"]
        for v in self.violations[:5]:
            lines.append(f"  - {v}")
        if len(self.violations) > 5:
            lines.append(f"  - ... and {len(self.violations) - 5} more")
        return "\n".join(lines)


@dataclass
class AnalysisTimeoutError(NavGraphError):
    """Raised when analysis exceeds its deadline.

    Attributes:
        timeout_seconds: The budget that was exceeded.
        visited: Nodes visited before the traversal was aborted.
    """

    timeout_seconds: float
    visited: int = 0

    def __post_init__(self) -> None:
        super().__init__(
            f"Analysis exceeded {self.timeout_seconds:g}s deadline "
            f"after visiting {self.visited} route(s)"
        )
