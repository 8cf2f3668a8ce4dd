"""Progress output while cases run."""

from __future__ import annotations

from typing import IO

import typer

from specrun.outcome import Outcome, OutcomeKind
from specrun.reporting.base import Reporter
from specrun.state import RunState

COLORS = {
    OutcomeKind.SUCCESS: typer.colors.GREEN,
    OutcomeKind.FAIL: typer.colors.RED,
    OutcomeKind.ERROR: typer.colors.RED,
    OutcomeKind.PENDING: typer.colors.YELLOW,
}

DOTS = {
    OutcomeKind.SUCCESS: ".",
    OutcomeKind.FAIL: "F",
    OutcomeKind.ERROR: "E",
    OutcomeKind.PENDING: "*",
}


class DotsReporter(Reporter):
    """One character per case."""

    def __init__(self, stream: IO[str] | None = None):
        self.stream = stream
        self._wrote = False

    def report(self, outcome: Outcome) -> None:
        mark = typer.style(DOTS[outcome.kind], fg=COLORS[outcome.kind])
        typer.echo(mark, file=self.stream, nl=False)
        self._wrote = True

    def finish(self, state: RunState) -> None:
        if self._wrote:
            typer.echo("", file=self.stream)


class VerboseReporter(Reporter):
    """One line per case, nested under its context headings."""

    def __init__(self, stream: IO[str] | None = None, indent: str = "  "):
        self.stream = stream
        self.indent = indent
        self._printed_path: list[str] = []

    def report(self, outcome: Outcome) -> None:
        path = outcome.context_path
        common = 0
        for printed, current in zip(self._printed_path, path):
            if printed != current:
                break
            common += 1
        for depth, name in enumerate(path[common:], start=common):
            typer.echo(f"{self.indent * depth}{name}", file=self.stream)
        self._printed_path = list(path)

        line = f"{self.indent * len(path)}{outcome.description}"
        if outcome.kind == OutcomeKind.PENDING:
            line += " (pending)"
        elif outcome.failed:
            line += f" ({outcome.kind.value.upper()})"
        typer.echo(typer.style(line, fg=COLORS[outcome.kind]), file=self.stream)


def get_formatter(name: str, stream: IO[str] | None = None) -> Reporter:
    """Return the progress reporter registered under ``name``."""
    formatters: dict[str, type[DotsReporter] | type[VerboseReporter]] = {
        "dots": DotsReporter,
        "verbose": VerboseReporter,
    }
    if name not in formatters:
        raise ValueError(
            f"Unknown formatter '{name}'. Available: {', '.join(sorted(formatters))}"
        )
    return formatters[name](stream=stream)
