"""Before-each / after-each hook storage."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Callable

Hook = Callable[[], Any]


class HookRegistry:
    """Ordered before-each and after-each callbacks.

    Every context owns one registry. The executor chains the registries of a
    case's enclosing contexts, root first, into a single registry and runs
    that around the case body.
    """

    def __init__(self) -> None:
        self.before: list[Hook] = []
        self.after: list[Hook] = []

    def __len__(self) -> int:
        return len(self.before) + len(self.after)

    def add_before_each(self, hook: Hook) -> Hook:
        self.before.append(hook)
        return hook

    def add_after_each(self, hook: Hook) -> Hook:
        self.after.append(hook)
        return hook

    def run_before_each(self) -> None:
        """Run before hooks in registration order; the first exception stops the chain."""
        for hook in self.before:
            hook()

    def run_after_each(self) -> None:
        """Run every after hook in registration order.

        A raising hook does not prevent the remaining hooks from running;
        the first exception is re-raised once all of them have been called.
        """
        first_error: Exception | None = None
        for hook in self.after:
            try:
                hook()
            except Exception as e:
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    @classmethod
    def chain(cls, registries: Iterable[HookRegistry]) -> HookRegistry:
        """Concatenate registries, preserving each one's order."""
        chained = cls()
        for registry in registries:
            chained.before.extend(registry.before)
            chained.after.extend(registry.after)
        return chained
