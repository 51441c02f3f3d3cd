from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict


class WriteStatus(Enum):
    """Outcome of writing one rendered line to the output."""
    WRITTEN = "written"
    CLOSED = "closed"


@dataclass
class HighlightResult:
    """
    Summary of a completed highlighting run.

    Attributes:
        lines_read: Lines pulled from the input
        lines_matched: Lines that matched the pattern and were colored
        bytes_read: Bytes consumed from the input
        bytes_written: Bytes handed to the output
        duration_ms: Run duration in milliseconds
        pipe_closed: True if the reader of the output went away early
        binary_forced: True if the input looked binary but was highlighted anyway
    """
    lines_read: int = 0
    lines_matched: int = 0
    bytes_read: int = 0
    bytes_written: int = 0
    duration_ms: float = 0.0
    pipe_closed: bool = False
    binary_forced: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a dictionary"""
        return asdict(self)

    def __str__(self) -> str:
        """Human readable summary"""
        summary = (
            f"Highlighted {self.lines_matched} of {self.lines_read} lines "
            f"({self.bytes_read} bytes) in {self.duration_ms:.0f}ms"
        )
        if self.pipe_closed:
            summary += " (output closed early)"
        return summary


__all__ = ["HighlightResult", "WriteStatus"]
