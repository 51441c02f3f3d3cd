"""
Input handling for hline.

This module:
- Sniffs a bounded prefix of the input to decide whether it is binary
- Re-feeds the sniffed prefix so no bytes are lost
- Iterates raw byte lines lazily, terminators included
- Never decodes line data (that is the matcher's job)
"""

from __future__ import annotations

import codecs
import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Tuple

from Hline.core.errors import InputIOError, OpenInputError

logger = logging.getLogger(__name__)

DEFAULT_SNIFF_LIMIT = 8 * 1024
DEFAULT_CHUNK_SIZE = 64 * 1024

# More suspicious characters than this in the prefix marks the input as binary
BINARY_CHAR_THRESHOLD = 5

# Code points that less(1) treats as binary in UTF-8 mode (inclusive ranges)
_BINARY_CODEPOINT_RANGES: Tuple[Tuple[int, int], ...] = (
    (0x0000, 0x0007),
    (0x000B, 0x000B),
    (0x000E, 0x001F),
    (0x007F, 0x009F),
    (0x2028, 0x2029),
    (0xD800, 0xD800),
    (0xDB7F, 0xDB80),
    (0xDBFF, 0xDC00),
    (0xDFFF, 0xDFFF),
    (0xE000, 0xE000),
    (0xF8FF, 0xF8FF),
    (0xF0000, 0xF0000),
    (0xFFFFD, 0xFFFFD),
    (0x100000, 0x100000),
    (0x10FFFD, 0x10FFFD),
)

_REPLACEMENT_CHAR = "\ufffd"


@dataclass(frozen=True)
class SniffVerdict:
    """
    Outcome of inspecting the start of a stream.

    Attributes:
        binary: True if the prefix looks like binary content
        prefix: Every byte consumed while sniffing, to be re-fed to the reader
        at_eof: True if the stream ended inside the prefix
        suspicious_chars: Undecodable or binary characters seen in the prefix
    """
    binary: bool
    prefix: bytes
    at_eof: bool
    suspicious_chars: int = 0


def _is_binary_char(char: str) -> bool:
    codepoint = ord(char)
    return any(low <= codepoint <= high for low, high in _BINARY_CODEPOINT_RANGES)


def count_suspicious_chars(sample: bytes, at_eof: bool = True) -> int:
    """
    Count characters in `sample` that are not plausible UTF-8 text.

    A character counts if it could not be decoded (it shows up as U+FFFD) or
    if it falls in one of the binary code point ranges. When `at_eof` is False
    an incomplete multi-byte sequence at the very end of the sample is
    assumed to be cut off by the sniff bound and is ignored.

    Args:
        sample (bytes): The bytes to inspect.
        at_eof (bool): Whether the sample ends where the stream ends.

    Returns:
        int: Number of suspicious characters.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    text = decoder.decode(sample, final=at_eof)
    return sum(1 for char in text if char == _REPLACEMENT_CHAR or _is_binary_char(char))


def looks_binary(sample: bytes, at_eof: bool = True) -> bool:
    """
    Heuristic check for binary content.

    A sample is binary if it contains a NUL byte, or if it holds more than
    BINARY_CHAR_THRESHOLD suspicious characters (see count_suspicious_chars).

    Args:
        sample (bytes): A sample of the stream content.
        at_eof (bool): Whether the sample ends where the stream ends.

    Returns:
        bool: True if the content is binary, False otherwise.
    """
    if not sample:
        return False

    if b"\x00" in sample:
        return True

    return count_suspicious_chars(sample, at_eof) > BINARY_CHAR_THRESHOLD


def sniff(stream: BinaryIO, limit: int = DEFAULT_SNIFF_LIMIT) -> SniffVerdict:
    """
    Read up to `limit` bytes from `stream` with a single read and classify them.

    Only one read is made (read1 where the stream has it), so a live pipe is
    classified on whatever it has delivered so far and its first lines are
    not held back. An empty read means the stream has ended.

    Args:
        stream (BinaryIO): The input stream, positioned at its start.
        limit (int): Maximum number of bytes to consume.

    Returns:
        SniffVerdict: The classification and the consumed bytes.

    Raises:
        InputIOError: If reading from the stream fails.
    """
    read = getattr(stream, "read1", stream.read)
    try:
        prefix = read(limit) or b""
    except OSError as e:
        raise InputIOError("peek input", e) from e

    at_eof = not prefix
    binary = looks_binary(prefix, at_eof)
    suspicious = count_suspicious_chars(prefix, at_eof)

    logger.debug(
        "Sniffed %d bytes (eof=%s, suspicious=%d): %s",
        len(prefix), at_eof, suspicious, "binary" if binary else "text",
    )
    return SniffVerdict(
        binary=binary,
        prefix=prefix,
        at_eof=at_eof,
        suspicious_chars=suspicious,
    )


def split_terminator(line: bytes) -> Tuple[bytes, bytes]:
    """
    Split a raw line into its content and its line terminator.

    The terminator is b"\\r\\n", b"\\n", or b"" for an unterminated final
    fragment. A carriage return that is not followed by a newline is content.
    """
    if line.endswith(b"\r\n"):
        return line[:-2], b"\r\n"
    if line.endswith(b"\n"):
        return line[:-1], b"\n"
    return line, b""


class LineReader:
    """
    Lazily split a byte stream into raw lines.

    The sniffed prefix is served first, then the rest of the stream. Each
    yielded line keeps its terminator; a trailing fragment without a newline
    is yielded as the last line. Bytes are never decoded.
    """

    def __init__(
        self,
        stream: BinaryIO,
        prefix: bytes = b"",
        at_eof: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._stream = stream
        self._prefix = prefix
        self._at_eof = at_eof
        self._chunk_size = chunk_size
        self._started = False
        # read1 returns whatever is available, so interactive pipes are not held back
        self._read = getattr(stream, "read1", stream.read)
        self.lines_read = 0
        self.bytes_read = len(prefix)

    @classmethod
    def from_verdict(
        cls,
        stream: BinaryIO,
        verdict: SniffVerdict,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> "LineReader":
        return cls(stream, verdict.prefix, verdict.at_eof, chunk_size)

    def _read_chunk(self) -> bytes:
        try:
            return self._read(self._chunk_size)
        except OSError as e:
            raise InputIOError("read input", e) from e

    def __iter__(self) -> Iterator[bytes]:
        if self._started:
            raise RuntimeError("LineReader can only be iterated once")
        self._started = True
        return self._lines()

    def _lines(self) -> Iterator[bytes]:
        data = self._prefix
        self._prefix = b""
        eof = self._at_eof
        # pieces of a line whose newline has not arrived yet
        parts: List[bytes] = []

        while True:
            start = 0
            newline = data.find(b"\n")
            while newline != -1:
                piece = data[start:newline + 1]
                if parts:
                    parts.append(piece)
                    piece = b"".join(parts)
                    parts = []
                self.lines_read += 1
                yield piece
                start = newline + 1
                newline = data.find(b"\n", start)

            if start < len(data):
                parts.append(data[start:])

            if eof:
                if parts:
                    self.lines_read += 1
                    yield b"".join(parts)
                return

            data = self._read_chunk() or b""
            if data:
                self.bytes_read += len(data)
            else:
                eof = True


@contextmanager
def open_input(path: Optional[str | Path]) -> Iterator[BinaryIO]:
    """
    Open the input to highlight as a binary stream.

    Standard input is used when `path` is None or "-"; it is not closed on
    exit. Any other path is opened for reading and closed afterwards.

    Raises:
        OpenInputError: If the path does not exist, is a directory, or cannot be opened.
    """
    if path is None or str(path) == "-":
        yield sys.stdin.buffer
        return

    file_path = Path(path)
    if file_path.is_dir():
        raise OpenInputError(file_path, "is a directory")

    try:
        handle = file_path.open("rb")
    except OSError as e:
        raise OpenInputError(file_path, e.strerror or str(e)) from e

    with handle:
        yield handle


__all__ = [
    "BINARY_CHAR_THRESHOLD",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_SNIFF_LIMIT",
    "LineReader",
    "SniffVerdict",
    "count_suspicious_chars",
    "looks_binary",
    "open_input",
    "sniff",
    "split_terminator",
]
