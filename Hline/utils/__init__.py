"""
hline utilities package.

Provides binary sniffing, raw line reading and input opening.
"""
from __future__ import annotations

from Hline.utils.file_utils import (
    DEFAULT_SNIFF_LIMIT,
    LineReader,
    SniffVerdict,
    looks_binary,
    open_input,
    sniff,
    split_terminator,
)

__all__ = [
    "DEFAULT_SNIFF_LIMIT",
    "LineReader",
    "SniffVerdict",
    "looks_binary",
    "open_input",
    "sniff",
    "split_terminator",
]
