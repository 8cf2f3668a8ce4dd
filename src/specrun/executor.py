"""Registers cases and runs them through the classified execution pipeline.

A case goes ``Selected -> Starting -> HooksBefore -> Running -> HooksAfter ->
Reported``. After-hooks run on every exit path once before-hooks have been
attempted, and the case ends in exactly one of success, fail or error.
Pending cases skip straight to ``Reported``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from specrun.context import Body, Case, ContextTree
from specrun.errors import AssertionFailed
from specrun.hooks import HookRegistry
from specrun.location import Location
from specrun.matcher import MatchAll, Matcher
from specrun.outcome import Outcome, OutcomeKind
from specrun.reporting.base import Reporter
from specrun.state import RunState


@dataclass(frozen=True)
class BodyResult:
    """Tagged result of running a body or a hook chain."""

    kind: OutcomeKind
    failure: AssertionFailed | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    @property
    def exception(self) -> Exception | None:
        return self.failure or self.error


SUCCESS = BodyResult(OutcomeKind.SUCCESS)


def run_body(body: Body) -> BodyResult:
    """Call ``body`` and classify whatever it raises.

    Only ``Exception`` subclasses are classified; KeyboardInterrupt and
    SystemExit propagate.
    """
    try:
        body()
    except AssertionFailed as e:
        return BodyResult(OutcomeKind.FAIL, failure=e)
    except Exception as e:
        return BodyResult(OutcomeKind.ERROR, error=e)
    return SUCCESS


class Executor:
    """Runs cases as soon as they are declared (immediate execution model)."""

    def __init__(
        self,
        tree: ContextTree,
        state: RunState,
        reporter: Reporter,
        matcher: Matcher | None = None,
        logger: logging.Logger | None = None,
    ):
        self.tree = tree
        self.state = state
        self.reporter = reporter
        self.matcher = matcher or MatchAll()
        self.logger = logger or logging.getLogger(__name__)

    def it(self, description: str, location: Location, body: Body) -> Outcome | None:
        """Declare and immediately run a case. Returns None when skipped."""
        if self.state.is_aborted():
            return None
        case = self.tree.add_case(Case(description, location, body=body))
        if not self.matcher.matches(description, location):
            self.logger.debug(f"Skipping unmatched case '{description}' at {location}")
            return None

        self.reporter.before_example(description)
        outcome = self._execute(case)
        self.reporter.report(outcome)

        if outcome.failed and self.state.is_fail_fast():
            self.logger.debug(f"Aborting run after {outcome.kind.value} in '{description}'")
            self.state.set_aborted()
        return outcome

    def pending(self, description: str, location: Location) -> Outcome | None:
        """Declare a case that is reported as pending and never run."""
        if self.state.is_aborted():
            return None
        case = self.tree.add_case(Case(description, location, pending=True))
        if not self.matcher.matches(description, location):
            self.logger.debug(f"Skipping unmatched pending case '{description}' at {location}")
            return None

        self.reporter.before_example(description)
        outcome = Outcome(
            kind=OutcomeKind.PENDING,
            description=description,
            location=location,
            context_path=self.tree.current.path,
        )
        case.outcome = outcome
        self.reporter.report(outcome)
        return outcome

    def _execute(self, case: Case) -> Outcome:
        assert case.body is not None
        hooks = HookRegistry.chain(c.hooks for c in self.tree.lineage())
        self.logger.debug(
            f"Running '{case.description}' at {case.location} "
            f"({len(hooks.before)} before, {len(hooks.after)} after hooks)"
        )

        started = time.perf_counter()
        result = SUCCESS
        try:
            result = run_body(hooks.run_before_each)
            if result.ok:
                result = run_body(case.body)
        finally:
            cleanup = run_body(hooks.run_after_each)
        elapsed = time.perf_counter() - started

        # the first fault decides the outcome
        if result.ok and not cleanup.ok:
            result = cleanup

        outcome = self._to_outcome(case, result, elapsed)
        case.outcome = outcome
        self.logger.debug(f"Case '{case.description}' finished: {outcome.kind.value}")
        return outcome

    def _to_outcome(self, case: Case, result: BodyResult, elapsed: float) -> Outcome:
        outcome = Outcome(
            kind=result.kind,
            description=case.description,
            location=case.location,
            context_path=self.tree.current.path,
            exception=result.exception,
            elapsed=elapsed,
        )
        if result.failure is not None:
            outcome.message = result.failure.message
            outcome.failure_location = result.failure.location
        elif result.error is not None:
            outcome.message = f"{type(result.error).__name__}: {result.error}"
        return outcome
