"""Cooperative deadline for bounding analysis time.

The engine never blocks on I/O, so a wall-clock timeout is enforced by
checking a monotonic deadline at each node visit.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from navgraph.graph.errors import AnalysisTimeoutError


@dataclass(frozen=True)
class Deadline:
    """A point on the monotonic clock after which analysis must stop."""

    timeout_seconds: float
    expires_at: float

    @classmethod
    def after(cls, timeout_seconds: float) -> Deadline:
        """Create a deadline ``timeout_seconds`` from now.

        Raises:
            ValueError: If the timeout is not positive.
        """
        if timeout_seconds <= 0:
            msg = f"timeout_seconds must be positive, got {timeout_seconds}"
            raise ValueError(msg)
        return cls(timeout_seconds=timeout_seconds, expires_at=time.monotonic() + timeout_seconds)

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at

    def check(self, visited: int = 0) -> None:
        """Raise AnalysisTimeoutError if the deadline has passed."""
        if self.expired:
            raise AnalysisTimeoutError(timeout_seconds=self.timeout_seconds, visited=visited)
