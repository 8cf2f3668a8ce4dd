"""Source locations for contexts, cases and assertion failures."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    file: str
    line: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"

    @classmethod
    def parse(cls, value: str) -> Location:
        """Parse a ``FILE:LINE`` string. The file part may itself contain colons."""
        file, sep, line = value.strip().rpartition(":")
        if not sep or not file or not line.isdigit():
            raise ValueError(f"Invalid location '{value}', expected FILE:LINE")
        return cls(file=file, line=int(line))

    def same_place(self, other: Location) -> bool:
        """Compare by line and by resolved file path."""
        if self.line != other.line:
            return False
        return os.path.realpath(self.file) == os.path.realpath(other.file)


def caller_location(depth: int = 1) -> Location:
    """Return the location of the code calling the function that calls this.

    ``depth=1`` is the direct caller of the function invoking
    ``caller_location``; each additional level walks one frame further out.
    """
    frame = sys._getframe(depth + 1)
    return Location(file=frame.f_code.co_filename, line=frame.f_lineno)
