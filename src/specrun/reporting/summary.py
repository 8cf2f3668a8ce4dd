"""End-of-run summary: failures, pending cases and counts."""

from __future__ import annotations

from typing import IO

import typer

from specrun.metrics import RunSummary, summarize
from specrun.outcome import Outcome, OutcomeKind
from specrun.reporting.base import Reporter
from specrun.state import RunState


class SummaryReporter(Reporter):
    """Collects outcomes and prints the run summary on ``finish``."""

    def __init__(self, stream: IO[str] | None = None):
        self.stream = stream
        self.outcomes: list[Outcome] = []
        self.aborted = False

    def report(self, outcome: Outcome) -> None:
        self.outcomes.append(outcome)

    @property
    def summary(self) -> RunSummary:
        return summarize(self.outcomes)

    @property
    def passed(self) -> bool:
        return self.summary.passed

    def finish(self, state: RunState) -> None:
        self.aborted = state.is_aborted()
        for line in self.render():
            typer.echo(line, file=self.stream)

    def render(self) -> list[str]:
        lines: list[str] = []
        failed = [o for o in self.outcomes if o.failed]
        pending = [o for o in self.outcomes if o.kind == OutcomeKind.PENDING]

        if pending:
            lines += ["", "Pending:"]
            for o in pending:
                lines.append(f"  {o.full_description}")
                lines.append(f"    # {o.location}")

        if failed:
            lines += ["", "Failures:"]
            for index, o in enumerate(failed, start=1):
                lines += ["", f"  {index}) {o.full_description}"]
                if o.kind == OutcomeKind.FAIL:
                    lines.append(f"     Failure: {o.message}")
                else:
                    lines.append(f"     Error: {o.message}")
                    lines += [
                        f"       {tb_line}"
                        for tb_line in o.formatted_traceback().rstrip().splitlines()
                    ]
                lines.append(f"     # {o.blame}")

        summary = self.summary
        lines += ["", f"Finished in {summary.elapsed:.4f} seconds"]
        counts = (
            f"{summary.examples} examples, {summary.failures} failures, "
            f"{summary.errors} errors, {summary.pending} pending"
        )
        color = typer.colors.GREEN if summary.passed else typer.colors.RED
        lines.append(typer.style(counts, fg=color))

        if self.aborted:
            lines.append(typer.style("Aborted (fail fast)", fg=typer.colors.RED))

        if failed:
            lines += ["", "Failed examples:", ""]
            lines += [f"  {o.location} # {o.full_description}" for o in failed]
        return lines
