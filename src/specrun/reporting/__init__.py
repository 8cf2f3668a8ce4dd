"""Reporters receiving case notifications and outcomes."""

from specrun.reporting.base import CompositeReporter, Reporter
from specrun.reporting.console import DotsReporter, VerboseReporter, get_formatter
from specrun.reporting.junit import JUnitReporter, generate_report, write_junit
from specrun.reporting.summary import SummaryReporter

__all__ = [
    "CompositeReporter",
    "DotsReporter",
    "JUnitReporter",
    "Reporter",
    "SummaryReporter",
    "VerboseReporter",
    "generate_report",
    "get_formatter",
    "write_junit",
]
