"""Tests for the hook registry."""

import pytest

from specrun.hooks import HookRegistry


def test_hooks_run_in_registration_order():
    calls = []
    registry = HookRegistry()
    registry.add_before_each(lambda: calls.append("b1"))
    registry.add_before_each(lambda: calls.append("b2"))
    registry.add_after_each(lambda: calls.append("a1"))
    registry.add_after_each(lambda: calls.append("a2"))

    registry.run_before_each()
    registry.run_after_each()

    assert calls == ["b1", "b2", "a1", "a2"]
    assert len(registry) == 4


def test_add_returns_hook_for_decorator_use():
    registry = HookRegistry()

    @registry.add_before_each
    def setup():
        return "ok"

    assert setup() == "ok"
    assert registry.before == [setup]


def test_before_hook_failure_stops_the_chain():
    calls = []
    registry = HookRegistry()

    def broken():
        raise ValueError("setup failed")

    registry.add_before_each(broken)
    registry.add_before_each(lambda: calls.append("never"))

    with pytest.raises(ValueError, match="setup failed"):
        registry.run_before_each()
    assert calls == []


def test_after_hooks_all_run_and_first_error_is_raised():
    calls = []
    registry = HookRegistry()

    def first():
        calls.append("first")
        raise ValueError("first")

    def second():
        calls.append("second")
        raise KeyError("second")

    registry.add_after_each(first)
    registry.add_after_each(second)
    registry.add_after_each(lambda: calls.append("third"))

    with pytest.raises(ValueError, match="first"):
        registry.run_after_each()
    assert calls == ["first", "second", "third"]


def test_chain_concatenates_registries_in_order():
    calls = []
    outer, inner = HookRegistry(), HookRegistry()
    outer.add_before_each(lambda: calls.append("outer before"))
    inner.add_before_each(lambda: calls.append("inner before"))
    outer.add_after_each(lambda: calls.append("outer after"))
    inner.add_after_each(lambda: calls.append("inner after"))

    chained = HookRegistry.chain([outer, inner])
    chained.run_before_each()
    chained.run_after_each()

    assert calls == ["outer before", "inner before", "outer after", "inner after"]
    # chaining does not mutate the sources
    assert len(outer) == 2
    assert len(inner) == 2
