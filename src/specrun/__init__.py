"""specrun: describe/context/it specs executed as they are declared."""

from specrun.dsl import (
    Spec,
    after_each,
    assert_,
    before_each,
    context,
    default_spec,
    describe,
    fail,
    it,
    pending,
    use_spec,
)
from specrun.errors import AssertionFailed
from specrun.location import Location
from specrun.outcome import Outcome, OutcomeKind

__all__ = [
    "AssertionFailed",
    "Location",
    "Outcome",
    "OutcomeKind",
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
    "use_spec",
]
