"""
Highlighting pipeline for hline.

Sniffs the start of the input once, then streams it line by line: every
line is matched, rendered, and written to the output in input order.
A closed downstream pipe ends the run successfully.
"""
from __future__ import annotations

import io
import logging
import time
from enum import Enum
from typing import BinaryIO, Optional

from Hline.core.config import HighlightConfig
from Hline.core.errors import BinaryInputError, InputIOError
from Hline.core.highlighter import render
from Hline.core.matcher import LineMatcher
from Hline.core.result import HighlightResult, WriteStatus
from Hline.utils.file_utils import LineReader, sniff

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """Lifecycle of a single run."""
    SNIFFING = "sniffing"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"


def write_line(sink: BinaryIO, data: bytes) -> WriteStatus:
    """
    Write one rendered line to `sink` as a single unit.

    Returns:
        WriteStatus.CLOSED if the reading end of the output has been closed,
        WriteStatus.WRITTEN otherwise.

    Raises:
        InputIOError: For any other write failure.
    """
    view = memoryview(data)
    try:
        while view:
            written = sink.write(view)
            # A non-blocking raw sink returns None when it took nothing
            if written is None:
                raise InputIOError("write output", "output is not accepting writes")
            view = view[written:]
    except BrokenPipeError:
        return WriteStatus.CLOSED
    except OSError as e:
        raise InputIOError("write output", e) from e
    return WriteStatus.WRITTEN


def flush_sink(sink: BinaryIO) -> WriteStatus:
    """Flush `sink`, reporting a closed pipe the same way write_line does."""
    try:
        sink.flush()
    except BrokenPipeError:
        return WriteStatus.CLOSED
    except OSError as e:
        raise InputIOError("write output", e) from e
    return WriteStatus.WRITTEN


def _is_interactive(sink: BinaryIO) -> bool:
    try:
        return sink.isatty()
    except (AttributeError, ValueError):
        return False


class HighlightPipeline:
    """
    Drives one highlighting run from an input stream to an output stream.

    The pipeline owns the loop and interprets failures from its collaborators:
    a binary-looking input is refused unless forced, input and output errors
    are raised as InputIOError, and a closed output pipe stops the run without
    an error.
    """

    def __init__(
        self,
        config: HighlightConfig,
        matcher: Optional[LineMatcher] = None,
        line_buffered: bool = False,
    ) -> None:
        self.config = config
        self.matcher = matcher if matcher is not None else LineMatcher.from_config(config)
        self.line_buffered = line_buffered
        self.state = PipelineState.SNIFFING

    def _transition(self, state: PipelineState) -> None:
        logger.debug("Pipeline state %s -> %s", self.state.value, state.value)
        self.state = state

    def run(self, source: BinaryIO, sink: BinaryIO) -> HighlightResult:
        """
        Highlight `source` into `sink`.

        Args:
            source: Binary input stream, positioned at its start
            sink: Binary output stream; it is flushed but never closed

        Returns:
            HighlightResult describing the run

        Raises:
            BinaryInputError: If the input looks binary and force_text is not set
            InputIOError: If reading the input or writing the output fails
        """
        start_time = time.time()
        self.state = PipelineState.SNIFFING
        result = HighlightResult()

        try:
            verdict = sniff(source, self.config.sniff_limit)
            if verdict.binary:
                if not self.config.force_text:
                    raise BinaryInputError()
                logger.debug("Input looks binary; highlighting anyway")
                result.binary_forced = True

            self._transition(PipelineState.STREAMING)
            reader = LineReader.from_verdict(source, verdict)
            flush_each = self.line_buffered or _is_interactive(sink)

            status = WriteStatus.WRITTEN
            for line in reader:
                matched = self.matcher.matches(line)
                rendered = render(line, matched)

                status = write_line(sink, rendered)
                if status is WriteStatus.WRITTEN and flush_each:
                    status = flush_sink(sink)
                if status is WriteStatus.CLOSED:
                    break

                result.bytes_written += len(rendered)
                if matched:
                    result.lines_matched += 1

            if status is WriteStatus.WRITTEN:
                status = flush_sink(sink)

            if status is WriteStatus.CLOSED:
                logger.debug("Output closed after %d bytes; stopping", result.bytes_written)
                result.pipe_closed = True

            result.lines_read = reader.lines_read
            result.bytes_read = reader.bytes_read
        except Exception:
            self._transition(PipelineState.FAILED)
            raise

        self._transition(PipelineState.DONE)
        result.duration_ms = (time.time() - start_time) * 1000
        return result


def highlight_stream(
    source: BinaryIO,
    sink: BinaryIO,
    config: HighlightConfig,
    line_buffered: bool = False,
) -> HighlightResult:
    """
    Highlight lines of `source` matching `config.pattern` into `sink`.

    Example:
        >>> import io
        >>> out = io.BytesIO()
        >>> result = highlight_stream(io.BytesIO(b"ok\\nerror\\n"), out, HighlightConfig("err"))
        >>> result.lines_matched
        1
    """
    return HighlightPipeline(config, line_buffered=line_buffered).run(source, sink)


def highlight_bytes(data: bytes, config: HighlightConfig) -> bytes:
    """Highlight an in-memory buffer and return the rendered bytes."""
    sink = io.BytesIO()
    highlight_stream(io.BytesIO(data), sink, config)
    return sink.getvalue()


__all__ = [
    "HighlightPipeline",
    "PipelineState",
    "flush_sink",
    "highlight_bytes",
    "highlight_stream",
    "write_line",
]
