"""
hline - highlight lines of a stream that match a regular expression.
"""
from __future__ import annotations

__version__ = "0.1.0"

from Hline.core.config import HighlightConfig
from Hline.core.errors import (
    BinaryInputError,
    ErrorKind,
    HlineError,
    InputIOError,
    InvalidPatternError,
)
from Hline.core.pipeline import HighlightPipeline, highlight_bytes, highlight_stream
from Hline.core.result import HighlightResult

__all__ = [
    "__version__",
    "BinaryInputError",
    "ErrorKind",
    "HighlightConfig",
    "HighlightPipeline",
    "HighlightResult",
    "HlineError",
    "InputIOError",
    "InvalidPatternError",
    "highlight_bytes",
    "highlight_stream",
]
