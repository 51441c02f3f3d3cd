from __future__ import annotations

import re
from re import Pattern
from typing import TYPE_CHECKING

from Hline.core.errors import InvalidPatternError
from Hline.utils.file_utils import split_terminator

if TYPE_CHECKING:
    from Hline.core.config import HighlightConfig


class LineMatcher:
    '''
    Decides whether a raw line matches a compiled pattern.
    '''

    def __init__(self, pattern: str, flags: int = 0) -> None:
        """
        Compile `pattern` once for the lifetime of the matcher.

        Parameters:
            pattern (str): Regular expression text. It is searched for anywhere in a line; anchor it with ^ or $ if needed.
            flags (int): re flags, e.g. re.IGNORECASE for case-insensitive matching.

        Raises:
            InvalidPatternError: If the pattern is not a valid regular expression.
        """
        self.pattern = pattern
        try:
            self._regex: Pattern[str] = re.compile(pattern, flags)
        except re.error as e:
            raise InvalidPatternError(pattern, str(e)) from e

    @classmethod
    def from_config(cls, config: "HighlightConfig") -> "LineMatcher":
        return cls(config.pattern, config.regex_flags)

    @property
    def case_sensitive(self) -> bool:
        return not self._regex.flags & re.IGNORECASE

    def matches(self, line: bytes) -> bool:
        """
        Return True if the pattern is found anywhere in `line`.

        The line terminator is not part of the searched text, so `$` anchors at
        the end of the line content. Lines that are not valid UTF-8 never match.
        """
        content, _ = split_terminator(line)
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError:
            return False
        return self._regex.search(text) is not None


__all__ = ["LineMatcher"]
