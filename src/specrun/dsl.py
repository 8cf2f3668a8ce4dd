"""The spec-writing surface: ``describe``, ``context``, ``it`` and friends.

A ``Spec`` session binds a context tree, a run state and an executor. The
module-level functions forward to a process-wide default session, which the
runner swaps out while it loads spec files::

    from specrun import describe, context, it, fail

    with describe("list"):
        with context("when empty"):

            @it("has no length")
            def _():
                if len([]) != 0:
                    fail("expected an empty list")

Cases run as soon as their decorator is applied.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Any, Callable, NoReturn, TypeVar

from specrun.context import Context, ContextTree
from specrun.errors import AssertionFailed
from specrun.executor import Executor
from specrun.hooks import Hook
from specrun.location import Location, caller_location
from specrun.matcher import MatchAll, Matcher
from specrun.reporting.base import Reporter
from specrun.state import RunState

F = TypeVar("F", bound=Callable[..., Any])

ASSERT_DESCRIPTION = "assert"


def _name(description: Any) -> str:
    if isinstance(description, type):
        return description.__qualname__
    return str(description)


class Spec:
    """One independent session: tree, run state and executor."""

    def __init__(
        self,
        reporter: Reporter | None = None,
        matcher: Matcher | None = None,
        fail_fast: bool = False,
        logger: logging.Logger | None = None,
    ):
        self.tree = ContextTree()
        self.state = RunState(fail_fast=fail_fast)
        self.reporter = reporter or Reporter()
        self.executor = Executor(
            tree=self.tree,
            state=self.state,
            reporter=self.reporter,
            matcher=matcher or MatchAll(),
            logger=logger,
        )

    @property
    def root(self) -> Context:
        return self.tree.root

    @property
    def aborted(self) -> bool:
        return self.state.is_aborted()

    def describe(
        self, description: Any, location: Location | None = None
    ) -> AbstractContextManager[Context]:
        if location is None:
            location = caller_location()
        return self.tree.describe(_name(description), location)

    def context(
        self, description: Any, location: Location | None = None
    ) -> AbstractContextManager[Context]:
        if location is None:
            location = caller_location()
        return self.describe(description, location)

    def it(self, description: Any, location: Location | None = None) -> Callable[[F], F]:
        if location is None:
            location = caller_location()
        name = _name(description)

        def run(body: F) -> F:
            self.executor.it(name, location, body)
            return body

        return run

    def assert_(self, location: Location | None = None) -> Callable[[F], F]:
        if location is None:
            location = caller_location()
        return self.it(ASSERT_DESCRIPTION, location)

    def pending(
        self, description: Any, location: Location | None = None
    ) -> Callable[[F], F]:
        """Report ``description`` as pending. The decorated block is never called."""
        if location is None:
            location = caller_location()
        self.executor.pending(_name(description), location)

        def keep(block: F) -> F:
            return block

        return keep

    def fail(self, message: str, location: Location | None = None) -> NoReturn:
        if location is None:
            location = caller_location()
        raise AssertionFailed(message, location)

    def before_each(self, hook: Hook) -> Hook:
        return self.tree.current.hooks.add_before_each(hook)

    def after_each(self, hook: Hook) -> Hook:
        return self.tree.current.hooks.add_after_each(hook)

    def finish(self) -> None:
        self.reporter.finish(self.state)


_default_spec: Spec | None = None


def default_spec() -> Spec:
    """The process-wide session, created on first use."""
    global _default_spec
    if _default_spec is None:
        _default_spec = Spec()
    return _default_spec


def set_default_spec(spec: Spec | None) -> Spec | None:
    """Install ``spec`` as the default session and return the previous one."""
    global _default_spec
    previous, _default_spec = _default_spec, spec
    return previous


@contextmanager
def use_spec(spec: Spec) -> Iterator[Spec]:
    """Route the module-level DSL functions to ``spec`` for the block."""
    previous = set_default_spec(spec)
    try:
        yield spec
    finally:
        set_default_spec(previous)


def describe(description: Any, location: Location | None = None) -> AbstractContextManager[Context]:
    return default_spec().describe(description, location or caller_location())


def context(description: Any, location: Location | None = None) -> AbstractContextManager[Context]:
    return default_spec().context(description, location or caller_location())


def it(description: Any, location: Location | None = None) -> Callable[[F], F]:
    return default_spec().it(description, location or caller_location())


def assert_(location: Location | None = None) -> Callable[[F], F]:
    return default_spec().assert_(location or caller_location())


def pending(description: Any, location: Location | None = None) -> Callable[[F], F]:
    return default_spec().pending(description, location or caller_location())


def fail(message: str, location: Location | None = None) -> NoReturn:
    """Raise ``AssertionFailed`` blaming the caller's line."""
    raise AssertionFailed(message, location or caller_location())


def before_each(hook: Hook) -> Hook:
    return default_spec().before_each(hook)


def after_each(hook: Hook) -> Hook:
    return default_spec().after_each(hook)


__all__ = [
    "Spec",
    "after_each",
    "assert_",
    "before_each",
    "context",
    "default_spec",
    "describe",
    "fail",
    "it",
    "pending",
    "set_default_spec",
    "use_spec",
]
