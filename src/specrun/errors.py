"""Exception types raised by spec code."""

from __future__ import annotations

from specrun.location import Location


class AssertionFailed(Exception):
    """An expected test failure raised from a case body or hook.

    Carries the failure message and the location where it was raised, so the
    executor can classify it as ``fail`` rather than ``error`` and blame the
    exact line.
    """

    def __init__(self, message: str, location: Location):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self) -> str:
        return self.message


class SpecLoadError(Exception):
    """A spec file raised outside of any case while being loaded."""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"{path}: {type(cause).__name__}: {cause}")
        self.path = path
        self.cause = cause
