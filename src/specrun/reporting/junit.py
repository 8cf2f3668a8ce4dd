from __future__ import annotations

from pathlib import Path

from junitparser import Error, Failure, JUnitXml, Skipped, TestCase, TestSuite

from specrun.outcome import Outcome, OutcomeKind
from specrun.reporting.base import Reporter

ROOT_SUITE = "(root)"


class JUnitReporter(Reporter):
    """Collects outcomes for ``junit.xml``."""

    def __init__(self) -> None:
        self.outcomes: list[Outcome] = []

    def report(self, outcome: Outcome) -> None:
        self.outcomes.append(outcome)

    def write(self, path: Path) -> Path:
        return write_junit(path, self.outcomes)


def _suite_name(outcome: Outcome) -> str:
    return outcome.context_path[0] if outcome.context_path else ROOT_SUITE


def write_junit(junit_path: Path, outcomes: list[Outcome]) -> Path:
    """Write outcomes as JUnit XML, one suite per top-level context."""
    xml = JUnitXml()

    grouped: dict[str, list[Outcome]] = {}
    for outcome in outcomes:
        grouped.setdefault(_suite_name(outcome), []).append(outcome)

    for suite_name, suite_outcomes in grouped.items():
        suite = TestSuite(suite_name)
        for outcome in suite_outcomes:
            case = TestCase(" ".join([*outcome.context_path[1:], outcome.description]))
            case.classname = suite_name
            case.time = round(outcome.elapsed, 6)
            if outcome.kind == OutcomeKind.FAIL:
                result = Failure(outcome.message or "", "AssertionFailed")
                result.text = str(outcome.blame)
                case.result = result
            elif outcome.kind == OutcomeKind.ERROR:
                exc_type = type(outcome.exception).__name__ if outcome.exception else ""
                result = Error(outcome.message or "", exc_type)
                result.text = outcome.formatted_traceback()
                case.result = result
            elif outcome.kind == OutcomeKind.PENDING:
                case.result = Skipped("pending")
            suite.add_testcase(case)

        # Set time after add_testcase (add_testcase resets it via update_statistics)
        suite.time = round(sum(o.elapsed for o in suite_outcomes), 6)

        # Use append (not +=) to preserve properties and time
        xml.append(suite)

    junit_path.parent.mkdir(parents=True, exist_ok=True)
    xml.write(str(junit_path), pretty=True)
    return junit_path


def generate_report(run_dir: Path) -> Path:
    """Render junit.xml → report.html using Jinja2 template, return path."""
    import yaml
    from jinja2 import Environment, FileSystemLoader

    junit_path = run_dir / "junit.xml"
    report_path = run_dir / "report.html"

    meta: dict = {}
    meta_path = run_dir / "meta.yaml"
    if meta_path.exists():
        meta = yaml.safe_load(meta_path.read_text()) or {}

    xml = JUnitXml.fromfile(str(junit_path))

    suites = []
    for suite in xml:
        cases = []
        for case in suite:
            result = None
            if case.result:
                first = case.result[0]
                result = {
                    "status": type(first).__name__,
                    "message": first.message or "",
                    "detail": first.text or "",
                }
            cases.append(
                {
                    "name": case.name,
                    "classname": case.classname,
                    "time": case.time,
                    "result": result,
                }
            )
        suites.append(
            {
                "name": suite.name,
                "tests": suite.tests,
                "failures": suite.failures,
                "errors": suite.errors,
                "skipped": suite.skipped,
                "time": suite.time,
                "cases": cases,
            }
        )

    tmpl_dir = Path(__file__).parent / "templates"
    env = Environment(loader=FileSystemLoader(str(tmpl_dir)), autoescape=True)
    template = env.get_template("report.html.j2")

    html = template.render(
        suites=suites,
        total_tests=sum(s["tests"] for s in suites),
        total_failures=sum(s["failures"] for s in suites),
        total_errors=sum(s["errors"] for s in suites),
        total_skipped=sum(s["skipped"] for s in suites),
        run_dir=str(run_dir),
        meta=meta,
    )
    report_path.write_text(html, encoding="utf-8")
    return report_path
