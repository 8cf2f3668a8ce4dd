from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, asdict
from typing import Any

import numpy as np

from specrun.outcome import Outcome, OutcomeKind


@dataclass
class MetricStatistics:
    """Statistics for a single metric across cases."""

    avg: float | None
    min: float | None
    max: float | None
    stddev: float | None

    def to_dict(self) -> dict[str, float | None]:
        return asdict(self)


@dataclass
class RunSummary:
    """Outcome counts and timing for a whole run."""

    examples: int
    successes: int
    failures: int
    errors: int
    pending: int
    elapsed: float
    durations: MetricStatistics

    @property
    def passed(self) -> bool:
        return self.failures == 0 and self.errors == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "examples": self.examples,
            "successes": self.successes,
            "failures": self.failures,
            "errors": self.errors,
            "pending": self.pending,
            "elapsed": round(self.elapsed, 6),
            "durations": self.durations.to_dict(),
        }


def compute_stats(values: list[float | int | None]) -> MetricStatistics:
    """Compute avg, min, max, stddev for a list of numeric values."""
    nums = [v for v in values if v is not None]
    if not nums:
        return MetricStatistics(avg=None, min=None, max=None, stddev=None)

    arr = np.array(nums)
    return MetricStatistics(
        avg=round(float(np.mean(arr)), 4),
        min=round(float(np.min(arr)), 4),
        max=round(float(np.max(arr)), 4),
        stddev=round(float(np.std(arr)), 4),
    )


def summarize(outcomes: list[Outcome]) -> RunSummary:
    """Count outcomes by kind and compute duration stats over executed cases."""
    counts = Counter(o.kind for o in outcomes)
    executed = [o.elapsed for o in outcomes if o.kind != OutcomeKind.PENDING]
    return RunSummary(
        examples=len(outcomes),
        successes=counts[OutcomeKind.SUCCESS],
        failures=counts[OutcomeKind.FAIL],
        errors=counts[OutcomeKind.ERROR],
        pending=counts[OutcomeKind.PENDING],
        elapsed=sum(executed),
        durations=compute_stats(executed),
    )
