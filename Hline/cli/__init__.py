"""
Command-line interface for hline.
"""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from Hline.core.config import HighlightConfig
from Hline.core.errors import HlineError
from Hline.core.pipeline import HighlightPipeline
from Hline.utils.file_utils import DEFAULT_SNIFF_LIMIT, open_input

app = typer.Typer(
    name="hl",
    help="Highlights lines that match the given regular expression",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)
console = Console()
# stdout carries the highlighted data, so diagnostics go to stderr only
error_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        from Hline import __version__
        console.print(f"hline version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Send debug logging to stderr through rich when --verbose is given."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False)],
    )


def _silence_stdout() -> None:
    """
    Point stdout at the null device after the reader went away.

    The interpreter flushes stdout at exit; without this, the bytes still
    buffered there would raise BrokenPipeError during shutdown.
    """
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    except (OSError, ValueError):
        # stdout has no file descriptor (e.g. captured output); nothing to protect
        return


# Unknown dash-prefixed words are kept as arguments, so `hl -x file` searches for "-x"
@app.command(
    context_settings={
        "help_option_names": ["-h", "--help"],
        "ignore_unknown_options": True,
    }
)
def highlight(
    pattern: str = typer.Argument(
        ...,
        help=(
            "The regular expression to search for. Note that this is not anchored, "
            "and if anchoring is desired, should be done manually with ^ or $. "
            "A pattern starting with - may be given directly, unless it contains "
            "one of the short option letters of hl (i, b, v, h); put -- before "
            "such a pattern."
        ),
    ),
    filename: Optional[Path] = typer.Argument(
        None, help="The file to scan. If not specified, reads from stdin"
    ),
    ignore_case: bool = typer.Option(
        False, "--ignore-case", "-i",
        help="Ignore case when performing matching. If not specified, the matching is case-sensitive.",
    ),
    ok_if_binary: bool = typer.Option(
        False, "-b",
        help="Treat the given input file as text, even if it may be a binary file",
    ),
    line_buffered: bool = typer.Option(
        False, "--line-buffered",
        help="Flush output after every line, even when not writing to a terminal",
    ),
    sniff_limit: int = typer.Option(
        DEFAULT_SNIFF_LIMIT, "--sniff-limit",
        envvar="HLINE_SNIFF_LIMIT", min=1,
        help="Number of leading bytes inspected to detect binary input",
    ),
    stats: bool = typer.Option(False, "--stats", help="Print a run summary to stderr"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging on stderr"),
    version: bool = typer.Option(
        False, "--version",
        callback=_version_callback, is_eager=True,
        help="Display version information and exit",
    ),
) -> None:
    """
    Highlight lines of a file (or stdin) that match PATTERN.

    Examples:

        # Highlight errors in a log file
        hl error app.log

        # Case-insensitive, reading from a pipe
        journalctl | hl -i "warn|error"

        # Highlight a file even though it looks binary
        hl -b needle blob.dat
    """
    _configure_logging(verbose)

    config = HighlightConfig.from_options(
        pattern,
        ignore_case=ignore_case,
        ok_if_binary=ok_if_binary,
        sniff_limit=sniff_limit,
    )

    try:
        pipeline = HighlightPipeline(config, line_buffered=line_buffered)
        with open_input(filename) as source:
            result = pipeline.run(source, sys.stdout.buffer)
    except HlineError as e:
        error_console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(code=e.exit_code)

    if result.pipe_closed:
        _silence_stdout()

    if stats:
        error_console.print(f"[cyan]ℹ[/cyan] {escape(str(result))}")


def main() -> None:
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
