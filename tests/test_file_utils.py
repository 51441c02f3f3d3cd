"""Tests for the input handling module."""
from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest

from Hline.core.errors import ErrorKind, InputIOError, OpenInputError
from Hline.utils.file_utils import (
    LineReader,
    count_suspicious_chars,
    looks_binary,
    open_input,
    sniff,
    split_terminator,
)


class TrickleStream(io.RawIOBase):
    """Readable stream that hands out at most one byte per read."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        chunk = self._data[self._pos:self._pos + 1]
        self._pos += len(chunk)
        return chunk


class FailingStream(io.RawIOBase):
    """Stream that serves `data`, then fails the next read."""

    def __init__(self, data: bytes = b"") -> None:
        self._data = data

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        if self._data:
            chunk, self._data = self._data, b""
            return chunk
        raise OSError("device unplugged")


def test_looks_binary_plain_text() -> None:
    """Test that ordinary text is not binary."""
    assert not looks_binary(b"hello world\nsecond line\n")


def test_looks_binary_empty() -> None:
    """Test that an empty sample is text."""
    assert not looks_binary(b"")


def test_looks_binary_nul_byte() -> None:
    """Test that a single NUL byte marks the sample as binary."""
    assert looks_binary(b"hello\x00world")


def test_looks_binary_few_invalid_bytes_ok() -> None:
    """Test that a couple of undecodable bytes are tolerated."""
    assert not looks_binary(b"hello\xff\xffworld")


def test_looks_binary_many_invalid_bytes() -> None:
    """Test that too many undecodable bytes mark the sample as binary."""
    assert looks_binary(b"hello\xff\xffworld\xfa\xfb\xfc\xfd\xfe")


def test_looks_binary_elf_header() -> None:
    """Test that an ELF header is binary."""
    assert looks_binary(b"\x7f\x45\x4c\x46\x02\x01\x01\x00\x00 ")


def test_looks_binary_control_char_threshold() -> None:
    """Test the control character threshold boundary."""
    assert not looks_binary(b"a\x01\x02\x03\x04\x05b")  # 5 suspicious
    assert looks_binary(b"a\x01\x02\x03\x04\x05\x06b")  # 6 suspicious


def test_whitespace_controls_are_text() -> None:
    """Test that tabs, newlines, carriage returns and form feeds are not suspicious."""
    assert count_suspicious_chars(b"a\tb\r\nc\x0cd\n" * 10) == 0


def test_truncated_multibyte_sequence_not_counted() -> None:
    """Test that a sequence cut off by the sniff bound is not counted."""
    cut = "café".encode("utf-8")[:-1]
    assert count_suspicious_chars(cut, at_eof=False) == 0
    assert count_suspicious_chars(cut, at_eof=True) == 1


def test_sniff_short_stream() -> None:
    """Test that a stream shorter than the limit is fully consumed."""
    stream = io.BytesIO(b"abc\ndef")
    verdict = sniff(stream, limit=64)

    assert verdict.prefix == b"abc\ndef"
    assert not verdict.binary
    assert list(LineReader.from_verdict(stream, verdict)) == [b"abc\n", b"def"]


def test_sniff_stops_at_limit() -> None:
    """Test that sniffing consumes exactly `limit` bytes of a longer stream."""
    stream = io.BytesIO(b"0123456789")
    verdict = sniff(stream, limit=4)

    assert verdict.prefix == b"0123"
    assert not verdict.at_eof
    assert stream.read() == b"456789"


def test_sniff_makes_a_single_read() -> None:
    """Test that sniffing classifies whatever one read delivers."""
    stream = TrickleStream(b"abcdefgh")
    verdict = sniff(stream, limit=5)

    # A short read is not retried, and is not mistaken for end of input
    assert verdict.prefix == b"a"
    assert not verdict.at_eof
    assert b"".join(LineReader.from_verdict(stream, verdict)) == b"abcdefgh"


def test_sniff_empty_stream_is_eof() -> None:
    """Test that an empty first read means end of input."""
    verdict = sniff(io.BytesIO(b""))

    assert verdict.at_eof
    assert verdict.prefix == b""
    assert not verdict.binary


def test_sniff_verdict_matches_looks_binary() -> None:
    """Test that sniffing applies the same rule as looks_binary."""
    samples = [
        b"plain text\n",
        b"hello\x00world",
        b"a\x01\x02\x03\x04\x05b",
        b"a\x01\x02\x03\x04\x05\x06b",
    ]
    for sample in samples:
        assert sniff(io.BytesIO(sample)).binary == looks_binary(sample, at_eof=False)


def test_sniff_binary_stream() -> None:
    """Test that sniffing reports binary content."""
    verdict = sniff(io.BytesIO(b"\x00\x01\x02 payload"))

    assert verdict.binary
    assert verdict.prefix == b"\x00\x01\x02 payload"


def test_sniff_ignores_bytes_past_limit() -> None:
    """Test that only the prefix decides the verdict."""
    verdict = sniff(io.BytesIO(b"text" + b"\x00" * 8), limit=4)
    assert not verdict.binary


def test_sniff_read_error() -> None:
    """Test that a read failure is reported as an I/O error."""
    with pytest.raises(InputIOError) as exc_info:
        sniff(FailingStream())

    assert exc_info.value.kind == ErrorKind.IO
    assert "peek input" in str(exc_info.value)


def test_split_terminator() -> None:
    """Test splitting content from line terminators."""
    assert split_terminator(b"hello\n") == (b"hello", b"\n")
    assert split_terminator(b"hello\r\n") == (b"hello", b"\r\n")
    assert split_terminator(b"hello") == (b"hello", b"")
    assert split_terminator(b"\n") == (b"", b"\n")
    # A lone carriage return is not a terminator
    assert split_terminator(b"hello\rworld") == (b"hello\rworld", b"")


def test_line_reader_empty_stream() -> None:
    """Test that an empty stream yields no lines."""
    assert list(LineReader(io.BytesIO(b""))) == []


def test_line_reader_keeps_terminators() -> None:
    """Test that lines keep their own terminators."""
    lines = list(LineReader(io.BytesIO(b"hello\nworld\r\n\n")))
    assert lines == [b"hello\n", b"world\r\n", b"\n"]


def test_line_reader_unterminated_final_line() -> None:
    """Test that a trailing fragment without newline is the last line."""
    lines = list(LineReader(io.BytesIO(b"a\nbXY")))
    assert lines == [b"a\n", b"bXY"]


def test_line_reader_passes_invalid_utf8_through() -> None:
    """Test that undecodable bytes are not altered."""
    data = b"ok\n\xff\xfe broken \xc3\n"
    assert b"".join(LineReader(io.BytesIO(data))) == data


def test_line_reader_prefix_then_stream() -> None:
    """Test that the prefix is joined seamlessly with the rest of the stream."""
    reader = LineReader(io.BytesIO(b"lo\nworld"), prefix=b"hel")
    assert list(reader) == [b"hello\n", b"world"]


def test_line_reader_prefix_at_eof_does_not_read() -> None:
    """Test that the stream is not touched when the prefix holds everything."""
    reader = LineReader(FailingStream(), prefix=b"all\nof it", at_eof=True)
    assert list(reader) == [b"all\n", b"of it"]


def test_line_reader_small_chunks() -> None:
    """Test that lines spanning many chunks are reassembled."""
    data = b"a fairly long first line\nshort\n" + b"x" * 50
    reader = LineReader(io.BytesIO(data), chunk_size=3)

    lines = list(reader)

    assert lines == [b"a fairly long first line\n", b"short\n", b"x" * 50]
    assert reader.lines_read == 3
    assert reader.bytes_read == len(data)


def test_line_reader_very_long_line() -> None:
    """Test that a line spread over thousands of chunks is read in one piece."""
    long_line = b"x" * (8 * 1024 * 1024)
    data = long_line + b"\n" + long_line
    reader = LineReader(io.BytesIO(data), chunk_size=1024)

    lengths = [len(line) for line in reader]

    assert lengths == [len(long_line) + 1, len(long_line)]
    assert reader.bytes_read == len(data)


def test_line_reader_newline_at_chunk_boundary() -> None:
    """Test lines whose newline is the first or last byte of a chunk."""
    data = b"abc\ndef\n\nghij\nk"
    for chunk_size in range(1, len(data) + 1):
        reader = LineReader(io.BytesIO(data), chunk_size=chunk_size)
        assert list(reader) == [b"abc\n", b"def\n", b"\n", b"ghij\n", b"k"]


def test_line_reader_from_sniff_loses_nothing() -> None:
    """Test that sniffing then reading reproduces the stream exactly."""
    data = b"first\nsecond line\nthird\n" * 20
    stream = io.BytesIO(data)
    verdict = sniff(stream, limit=7)

    reader = LineReader.from_verdict(stream, verdict)

    assert b"".join(reader) == data


def test_line_reader_single_pass() -> None:
    """Test that a reader cannot be iterated twice."""
    reader = LineReader(io.BytesIO(b"x\n"))
    list(reader)

    with pytest.raises(RuntimeError):
        iter(reader)


def test_line_reader_read_error_after_lines() -> None:
    """Test that a read failure surfaces after the lines already read."""
    reader = LineReader(FailingStream(b"one\ntwo\npartial"))
    seen = []

    with pytest.raises(InputIOError) as exc_info:
        for line in reader:
            seen.append(line)

    assert seen == [b"one\n", b"two\n"]
    assert "read input" in str(exc_info.value)


def test_open_input_file(tmp_path: Path) -> None:
    """Test opening a regular file."""
    file_path = tmp_path / "input.log"
    file_path.write_bytes(b"line\n")

    with open_input(file_path) as stream:
        assert stream.read() == b"line\n"

    assert stream.closed


def test_open_input_missing_file(tmp_path: Path) -> None:
    """Test that a missing file cannot be opened."""
    with pytest.raises(OpenInputError) as exc_info:
        with open_input(tmp_path / "missing.log"):
            pass

    assert exc_info.value.exit_code == 2
    assert "Failed to open input file" in str(exc_info.value)


def test_open_input_directory(tmp_path: Path) -> None:
    """Test that directories are rejected."""
    with pytest.raises(OpenInputError) as exc_info:
        with open_input(tmp_path):
            pass

    assert "is a directory" in str(exc_info.value)


def test_open_input_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that stdin is used for no path and for '-'."""
    fake_stdin = io.TextIOWrapper(io.BytesIO(b"from stdin\n"))
    monkeypatch.setattr(sys, "stdin", fake_stdin)

    with open_input(None) as stream:
        assert stream is fake_stdin.buffer
    with open_input("-") as stream:
        assert stream.read() == b"from stdin\n"

    # stdin is left open for the caller
    assert not fake_stdin.buffer.closed
