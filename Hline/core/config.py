from __future__ import annotations

import re
from dataclasses import dataclass

from Hline.utils.file_utils import DEFAULT_SNIFF_LIMIT


@dataclass(frozen=True)
class HighlightConfig:
    """
    Settings for a single highlighting run.

    Attributes:
        pattern: Regular expression to search for (not anchored)
        case_sensitive: If False, the pattern is compiled case-insensitively
        force_text: Highlight the input even if it looks binary
        sniff_limit: Number of leading bytes inspected for binary content
    """
    pattern: str
    case_sensitive: bool = True
    force_text: bool = False
    sniff_limit: int = DEFAULT_SNIFF_LIMIT

    def __post_init__(self) -> None:
        if self.sniff_limit <= 0:
            raise ValueError(f"sniff_limit must be positive, got {self.sniff_limit}")

    @property
    def regex_flags(self) -> int:
        """Flags passed to re.compile for this configuration."""
        return 0 if self.case_sensitive else re.IGNORECASE

    @classmethod
    def from_options(
        cls,
        pattern: str,
        ignore_case: bool = False,
        ok_if_binary: bool = False,
        sniff_limit: int = DEFAULT_SNIFF_LIMIT,
    ) -> "HighlightConfig":
        """Build a configuration from command-line flag values."""
        return cls(
            pattern=pattern,
            case_sensitive=not ignore_case,
            force_text=ok_if_binary,
            sniff_limit=sniff_limit,
        )


__all__ = ["HighlightConfig"]
