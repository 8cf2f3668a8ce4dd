"""Classified results of running (or skipping) a single case."""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from specrun.location import Location


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    FAIL = "fail"
    ERROR = "error"
    PENDING = "pending"


@dataclass
class Outcome:
    """Result reported for one case.

    Attributes:
        kind: success, fail, error or pending.
        description: The case's own description.
        location: Where the case was declared.
        context_path: Descriptions of the enclosing contexts, outermost first.
        message: Failure detail. For ``fail`` the assertion message, for
            ``error`` the exception rendered as ``Type: message``.
        failure_location: Where an ``AssertionFailed`` was raised. Only set
            for ``fail``.
        exception: The underlying exception for ``fail`` and ``error``.
        elapsed: Wall clock seconds spent in hooks and body.
    """

    kind: OutcomeKind
    description: str
    location: Location
    context_path: list[str] = field(default_factory=list)
    message: str | None = None
    failure_location: Location | None = None
    exception: BaseException | None = None
    elapsed: float = 0.0

    @property
    def full_description(self) -> str:
        return " ".join([*self.context_path, self.description])

    @property
    def failed(self) -> bool:
        return self.kind in (OutcomeKind.FAIL, OutcomeKind.ERROR)

    @property
    def blame(self) -> Location:
        """Most precise location for this outcome."""
        return self.failure_location or self.location

    def formatted_traceback(self) -> str:
        if self.exception is None:
            return ""
        return "".join(
            traceback.format_exception(
                type(self.exception), self.exception, self.exception.__traceback__
            )
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "description": self.description,
            "full_description": self.full_description,
            "location": str(self.location),
            "message": self.message,
            "failure_location": (
                str(self.failure_location) if self.failure_location else None
            ),
            "elapsed": round(self.elapsed, 6),
        }
