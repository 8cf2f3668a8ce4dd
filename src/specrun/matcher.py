"""Case selection predicates."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Protocol

from specrun.location import Location


class Matcher(Protocol):
    def matches(self, description: str, location: Location) -> bool: ...


class MatchAll:
    """Selects every case."""

    def matches(self, description: str, location: Location) -> bool:
        return True


class PatternMatcher:
    """Select cases by description pattern, line number and/or exact location.

    Every configured criterion must hold. A matcher with no criteria selects
    everything.

    Args:
        pattern: Regular expression searched for in the case description.
        lines: Line numbers a case may be declared on.
        locations: ``FILE:LINE`` strings or ``Location`` objects. Files are
            compared by resolved path.
    """

    def __init__(
        self,
        pattern: str | re.Pattern[str] | None = None,
        lines: Iterable[int] = (),
        locations: Iterable[str | Location] = (),
    ):
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.lines = frozenset(lines)
        self.locations = [
            loc if isinstance(loc, Location) else Location.parse(loc)
            for loc in locations
        ]

    def __repr__(self) -> str:
        pattern = self.pattern.pattern if self.pattern else None
        return (
            f"PatternMatcher(pattern={pattern!r}, lines={sorted(self.lines)}, "
            f"locations={[str(loc) for loc in self.locations]})"
        )

    def matches(self, description: str, location: Location) -> bool:
        if self.pattern is not None and not self.pattern.search(description):
            return False
        if self.lines and location.line not in self.lines:
            return False
        if self.locations and not any(
            location.same_place(loc) for loc in self.locations
        ):
            return False
        return True
