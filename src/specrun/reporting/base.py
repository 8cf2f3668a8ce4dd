"""Reporter interface."""

from __future__ import annotations

from collections.abc import Iterable

from specrun.outcome import Outcome
from specrun.state import RunState


class Reporter:
    """Receives lifecycle notifications for each selected case.

    The default implementation ignores everything; subclasses override what
    they need.
    """

    def before_example(self, description: str) -> None:
        """Called right before a selected case starts."""

    def report(self, outcome: Outcome) -> None:
        """Called once with the final outcome of a selected case."""

    def finish(self, state: RunState) -> None:
        """Called once after the last spec file has been executed."""


class CompositeReporter(Reporter):
    """Forwards every notification to each reporter in order."""

    def __init__(self, reporters: Iterable[Reporter]):
        self.reporters = list(reporters)

    def before_example(self, description: str) -> None:
        for reporter in self.reporters:
            reporter.before_example(description)

    def report(self, outcome: Outcome) -> None:
        for reporter in self.reporters:
            reporter.report(outcome)

    def finish(self, state: RunState) -> None:
        for reporter in self.reporters:
            reporter.finish(state)
