from __future__ import annotations


class RunState:
    """Abort flag and fail-fast policy for one run.

    ``aborted`` only ever goes from False to True. ``fail_fast`` is fixed when
    the state is created.
    """

    def __init__(self, fail_fast: bool = False) -> None:
        self._fail_fast = fail_fast
        self._aborted = False

    def __repr__(self) -> str:
        return f"RunState(fail_fast={self._fail_fast}, aborted={self._aborted})"

    def is_aborted(self) -> bool:
        return self._aborted

    def set_aborted(self) -> None:
        self._aborted = True

    def is_fail_fast(self) -> bool:
        return self._fail_fast
