"""
Error types raised by hline.

Every error carries an ErrorKind and the process exit code the CLI should
use for it. New kinds may be added over time; callers that branch on
`kind` must keep a default branch (ErrorKind.OTHER covers anything else).
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Union

EXIT_OK = 0
EXIT_OPEN_FAILED = 2
EXIT_INVALID_PATTERN = 3
EXIT_IO_ERROR = 4
EXIT_BINARY_INPUT = 5
EXIT_OTHER = 1


class ErrorKind(Enum):
    """Category of a failure."""
    INVALID_PATTERN = "invalid_pattern"
    BINARY_INPUT = "binary_input"
    IO = "io"
    OTHER = "other"


class HlineError(Exception):
    """Base class for every error hline reports to its caller."""
    kind: ErrorKind = ErrorKind.OTHER
    exit_code: int = EXIT_OTHER


class InvalidPatternError(HlineError):
    """The regular expression could not be compiled."""
    kind = ErrorKind.INVALID_PATTERN
    exit_code = EXIT_INVALID_PATTERN

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")


class BinaryInputError(HlineError):
    """The input looks binary and highlighting it was not forced."""
    kind = ErrorKind.BINARY_INPUT
    exit_code = EXIT_BINARY_INPUT

    def __init__(self) -> None:
        super().__init__(
            "Input file may be a binary file. Pass -b to ignore this and scan anyway."
        )


class InputIOError(HlineError):
    """
    Reading the input or writing the output failed.

    A closed downstream pipe is never reported with this error.
    """
    kind = ErrorKind.IO
    exit_code = EXIT_IO_ERROR

    def __init__(self, action: str, cause: Union[BaseException, str]) -> None:
        self.action = action
        self.cause = cause
        super().__init__(f"failed to {action}: {cause}")


class OpenInputError(InputIOError):
    """The input file could not be opened."""
    exit_code = EXIT_OPEN_FAILED

    def __init__(self, path: Union[str, Path], cause: Union[BaseException, str]) -> None:
        self.path = str(path)
        self.action = "open input file"
        self.cause = cause
        HlineError.__init__(self, f"Failed to open input file: {path}: {cause}")


__all__ = [
    "EXIT_BINARY_INPUT",
    "EXIT_INVALID_PATTERN",
    "EXIT_IO_ERROR",
    "EXIT_OK",
    "EXIT_OPEN_FAILED",
    "EXIT_OTHER",
    "BinaryInputError",
    "ErrorKind",
    "HlineError",
    "InputIOError",
    "InvalidPatternError",
    "OpenInputError",
]
