"""The tree of named contexts built by nested ``describe`` blocks."""

from __future__ import annotations

import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable

from specrun.hooks import HookRegistry
from specrun.location import Location
from specrun.outcome import Outcome

ROOT_LOCATION = Location(file="<root>", line=0)

Body = Callable[[], Any]


@dataclass(eq=False)
class Case:
    """A leaf unit of work.

    ``body`` is None for pending cases; ``outcome`` stays None for cases that
    were not selected.
    """

    description: str
    location: Location
    body: Body | None = None
    pending: bool = False
    outcome: Outcome | None = None
    _context: Callable[[], Context | None] | None = field(default=None, repr=False)

    @property
    def context(self) -> Context | None:
        return self._context() if self._context is not None else None


class Context:
    """A named node of the tree.

    Children keep insertion order. The parent is held through a weak
    reference: the tree owns its children, never the other way around.
    """

    def __init__(
        self,
        description: str,
        location: Location,
        parent: Context | None = None,
    ):
        self.description = description
        self.location = location
        self.children: list[Context | Case] = []
        self.hooks = HookRegistry()
        self._parent = weakref.ref(parent) if parent is not None else None

    def __repr__(self) -> str:
        return f"Context({self.description!r}, {self.location}, children={len(self.children)})"

    @property
    def parent(self) -> Context | None:
        return self._parent() if self._parent is not None else None

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def path(self) -> list[str]:
        """Descriptions from the outermost non-root context down to this one."""
        names: list[str] = []
        node: Context | None = self
        while node is not None and not node.is_root:
            names.append(node.description)
            node = node.parent
        return list(reversed(names))

    @property
    def full_description(self) -> str:
        return " ".join(self.path)

    def add_context(self, description: str, location: Location) -> Context:
        child = Context(description, location, parent=self)
        self.children.append(child)
        return child

    def add_case(self, case: Case) -> Case:
        case._context = weakref.ref(self)
        self.children.append(case)
        return case

    @property
    def contexts(self) -> list[Context]:
        return [c for c in self.children if isinstance(c, Context)]

    @property
    def cases(self) -> list[Case]:
        return [c for c in self.children if isinstance(c, Case)]

    def walk_cases(self) -> Iterator[Case]:
        """Depth-first, pre-order iteration over every case below this node."""
        for child in self.children:
            if isinstance(child, Case):
                yield child
            else:
                yield from child.walk_cases()


class ContextTree:
    """Builds the tree, tracking the current context on an explicit stack."""

    def __init__(self) -> None:
        self.root = Context("", ROOT_LOCATION)
        self._stack: list[Context] = [self.root]

    @property
    def current(self) -> Context:
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack) - 1

    def lineage(self) -> list[Context]:
        """The root and every open context, outermost first."""
        return list(self._stack)

    @contextmanager
    def describe(self, description: str, location: Location) -> Iterator[Context]:
        node = self.current.add_context(description, location)
        self._stack.append(node)
        try:
            yield node
        finally:
            self._stack.pop()

    def context(self, description: str, location: Location):
        return self.describe(description, location)

    def add_case(self, case: Case) -> Case:
        return self.current.add_case(case)
