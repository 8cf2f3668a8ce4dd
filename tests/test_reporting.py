from __future__ import annotations

import io

import pytest
import yaml
from junitparser import Error, Failure, JUnitXml, Skipped

from specrun.location import Location
from specrun.outcome import Outcome, OutcomeKind
from specrun.reporting import (
    CompositeReporter,
    DotsReporter,
    JUnitReporter,
    SummaryReporter,
    VerboseReporter,
    generate_report,
    get_formatter,
    write_junit,
)
from specrun.state import RunState


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


def _error() -> ZeroDivisionError:
    try:
        1 / 0
    except ZeroDivisionError as e:
        return e
    raise AssertionError("unreachable")


@pytest.fixture
def outcomes() -> list[Outcome]:
    loc = Location("spec/array_spec.py", 10)
    return [
        Outcome(
            kind=OutcomeKind.SUCCESS,
            description="is empty",
            location=loc,
            context_path=["Array", "when empty"],
            elapsed=0.01,
        ),
        Outcome(
            kind=OutcomeKind.FAIL,
            description="has length 3",
            location=Location("spec/array_spec.py", 20),
            context_path=["Array", "with 3 elements"],
            message="expected 3, got 2",
            failure_location=Location("spec/array_spec.py", 22),
            elapsed=0.02,
        ),
        Outcome(
            kind=OutcomeKind.ERROR,
            description="divides",
            location=Location("spec/math_spec.py", 5),
            context_path=["Math"],
            message="ZeroDivisionError: division by zero",
            exception=_error(),
            elapsed=0.03,
        ),
        Outcome(
            kind=OutcomeKind.PENDING,
            description="someday",
            location=Location("spec/math_spec.py", 9),
            context_path=["Math"],
        ),
    ]


# ---------------------------------------------------------------------------
# Console reporters
# ---------------------------------------------------------------------------


def test_dots_reporter(outcomes):
    stream = io.StringIO()
    reporter = DotsReporter(stream=stream)
    for outcome in outcomes:
        reporter.report(outcome)
    reporter.finish(RunState())
    assert stream.getvalue() == ".FE*\n"


def test_dots_reporter_prints_nothing_without_cases():
    stream = io.StringIO()
    DotsReporter(stream=stream).finish(RunState())
    assert stream.getvalue() == ""


def test_verbose_reporter_prints_context_headings_once(outcomes):
    stream = io.StringIO()
    reporter = VerboseReporter(stream=stream)
    for outcome in outcomes:
        reporter.report(outcome)

    assert stream.getvalue().splitlines() == [
        "Array",
        "  when empty",
        "    is empty",
        "  with 3 elements",
        "    has length 3 (FAIL)",
        "Math",
        "  divides (ERROR)",
        "  someday (pending)",
    ]


def test_get_formatter():
    assert isinstance(get_formatter("dots"), DotsReporter)
    assert isinstance(get_formatter("verbose"), VerboseReporter)
    with pytest.raises(ValueError, match="Unknown formatter"):
        get_formatter("fancy")


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


def test_summary_render(outcomes):
    reporter = SummaryReporter()
    for outcome in outcomes:
        reporter.report(outcome)
    text = "\n".join(reporter.render())

    assert "Pending:" in text
    assert "Math someday" in text
    assert "1) Array with 3 elements has length 3" in text
    assert "Failure: expected 3, got 2" in text
    assert "# spec/array_spec.py:22" in text
    assert "2) Math divides" in text
    assert "Error: ZeroDivisionError: division by zero" in text
    assert "Traceback" in text
    assert "4 examples, 1 failures, 1 errors, 1 pending" in text
    assert "spec/math_spec.py:5 # Math divides" in text
    assert "Aborted" not in text
    assert not reporter.passed


def test_summary_finish_writes_and_notes_abort(outcomes):
    stream = io.StringIO()
    reporter = SummaryReporter(stream=stream)
    reporter.report(outcomes[1])
    state = RunState(fail_fast=True)
    state.set_aborted()
    reporter.finish(state)

    output = stream.getvalue()
    assert "1 examples, 1 failures, 0 errors, 0 pending" in output
    assert "Aborted (fail fast)" in output


def test_summary_passes_with_only_success_and_pending(outcomes):
    reporter = SummaryReporter()
    reporter.report(outcomes[0])
    reporter.report(outcomes[3])
    assert reporter.passed
    assert reporter.summary.examples == 2


def test_composite_reporter_fans_out(recorder, outcomes):
    other = SummaryReporter(stream=io.StringIO())
    composite = CompositeReporter([recorder, other])
    composite.before_example("is empty")
    composite.report(outcomes[0])
    composite.finish(RunState())

    assert recorder.events == [
        ("before_example", "is empty"),
        ("report", "success", "is empty"),
    ]
    assert recorder.finished
    assert other.outcomes == [outcomes[0]]


# ---------------------------------------------------------------------------
# JUnit
# ---------------------------------------------------------------------------


def test_write_junit_groups_by_top_level_context(tmp_path, outcomes):
    path = write_junit(tmp_path / "junit.xml", outcomes)
    xml = JUnitXml.fromfile(str(path))
    suites = {s.name: s for s in xml}

    assert set(suites) == {"Array", "Math"}
    assert suites["Array"].tests == 2
    assert suites["Array"].failures == 1
    assert suites["Math"].errors == 1
    assert suites["Math"].skipped == 1

    array_cases = {c.name: c for c in suites["Array"]}
    assert set(array_cases) == {"when empty is empty", "with 3 elements has length 3"}
    failed = array_cases["with 3 elements has length 3"]
    assert isinstance(failed.result[0], Failure)
    assert failed.result[0].message == "expected 3, got 2"
    assert failed.classname == "Array"

    math_cases = {c.name: c for c in suites["Math"]}
    assert isinstance(math_cases["divides"].result[0], Error)
    assert math_cases["divides"].result[0].type == "ZeroDivisionError"
    assert isinstance(math_cases["someday"].result[0], Skipped)


def test_cases_outside_any_context_go_to_root_suite(tmp_path):
    outcome = Outcome(
        kind=OutcomeKind.SUCCESS, description="assert", location=Location("a.py", 1)
    )
    path = write_junit(tmp_path / "junit.xml", [outcome])
    xml = JUnitXml.fromfile(str(path))
    assert [s.name for s in xml] == ["(root)"]


def test_junit_reporter_collects_and_writes(tmp_path, outcomes):
    reporter = JUnitReporter()
    for outcome in outcomes:
        reporter.report(outcome)
    path = reporter.write(tmp_path / "nested" / "junit.xml")
    assert path.exists()


def test_generate_report(tmp_path, outcomes):
    write_junit(tmp_path / "junit.xml", outcomes)
    (tmp_path / "meta.yaml").write_text(
        yaml.dump({"run_id": "run-1", "aborted": True, "specrun_version": "0.1.0"})
    )

    report_path = generate_report(tmp_path)
    html = report_path.read_text()

    assert report_path.name == "report.html"
    assert "run-1" in html
    assert "aborted (fail fast)" in html
    assert "has length 3" in html
    assert "expected 3, got 2" in html
    assert "4 examples, 1 failures" in html


def test_generate_report_without_meta(tmp_path, outcomes):
    write_junit(tmp_path / "junit.xml", outcomes[:1])
    html = generate_report(tmp_path).read_text()
    assert "is empty" in html
    assert "passed" in html
