"""Pytest configuration and fixtures."""

import logging

import pytest

from specrun.dsl import Spec, set_default_spec
from specrun.outcome import Outcome
from specrun.reporting.base import Reporter


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up specrun loggers after each test to prevent name collisions."""
    yield

    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("specrun")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


@pytest.fixture(autouse=True)
def reset_default_spec():
    """Never leak a default session between tests."""
    previous = set_default_spec(None)
    yield
    set_default_spec(previous)


class RecordingReporter(Reporter):
    """Keeps every notification in call order."""

    def __init__(self):
        self.events: list[tuple] = []
        self.outcomes: list[Outcome] = []
        self.finished = False

    def before_example(self, description):
        self.events.append(("before_example", description))

    def report(self, outcome):
        self.events.append(("report", outcome.kind.value, outcome.description))
        self.outcomes.append(outcome)

    def finish(self, state):
        self.finished = True

    @property
    def kinds(self) -> list[str]:
        return [o.kind.value for o in self.outcomes]


@pytest.fixture
def recorder():
    return RecordingReporter()


@pytest.fixture
def make_spec(recorder):
    """Build an independent session reporting to ``recorder``."""

    def _make(**kwargs) -> Spec:
        kwargs.setdefault("reporter", recorder)
        return Spec(**kwargs)

    return _make


@pytest.fixture
def spec(make_spec):
    return make_spec()


@pytest.fixture
def write_spec(tmp_path):
    """Write a spec file into the temp dir and return its path."""

    def _write(name: str, content: str):
        path = tmp_path / name
        path.write_text(content)
        return path

    return _write
