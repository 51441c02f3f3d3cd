from __future__ import annotations

from Hline.utils.file_utils import split_terminator

# Light red foreground, and back to the default foreground
COLOR_START = b"\x1b[38;5;9m"
COLOR_RESET = b"\x1b[39m"


def render(line: bytes, matched: bool) -> bytes:
    """
    Produce the bytes to emit for one raw line.

    Unmatched lines come back unchanged. Matched lines have their content
    wrapped in COLOR_START/COLOR_RESET with the terminator kept after the
    reset, so color never carries over into the next line. Blank lines are
    never wrapped.

    Args:
        line (bytes): The raw line, terminator included.
        matched (bool): Whether the line matched the pattern.

    Returns:
        bytes: The rendered line.

    Examples:
        >>> render(b"an err occurred\\n", True)
        b'\\x1b[38;5;9man err occurred\\x1b[39m\\n'
        >>> render(b"fine\\n", False)
        b'fine\\n'
    """
    if not matched:
        return line

    content, terminator = split_terminator(line)
    if not content:
        return line
    return COLOR_START + content + COLOR_RESET + terminator


__all__ = ["COLOR_RESET", "COLOR_START", "render"]
