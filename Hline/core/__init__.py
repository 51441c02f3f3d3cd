"""
Core highlighting engine for hline.

Combines the line matcher, the highlighter and the streaming pipeline.
"""
from __future__ import annotations

from Hline.core.errors import ErrorKind, HlineError
from Hline.core.config import HighlightConfig
from Hline.core.highlighter import COLOR_RESET, COLOR_START, render
from Hline.core.matcher import LineMatcher
from Hline.core.result import HighlightResult, WriteStatus
from Hline.core.pipeline import HighlightPipeline, PipelineState

__all__ = [
    "COLOR_RESET",
    "COLOR_START",
    "ErrorKind",
    "HighlightConfig",
    "HighlightPipeline",
    "HighlightResult",
    "HlineError",
    "LineMatcher",
    "PipelineState",
    "WriteStatus",
    "render",
]
