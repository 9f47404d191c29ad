#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Command-line interface for flatdown.

Reads Markdown from a file or standard input, flattens it and writes the
result.

Examples
--------
Flatten a file to JSON::

    $ flatdown README.md

Print only the flattened lines::

    $ flatdown README.md --format text

Read from standard input and list attributes sorted by kind::

    $ cat notes.md | flatdown - --format attrs --sort

Use a configuration file::

    $ flatdown notes.md --config .flatdown.toml

"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import IO, Optional

from flatdown import __version__
from flatdown.api import parse_markdown
from flatdown.attrs import HorizontalRuleAttr, attr_to_dict, sort_attrs
from flatdown.config import load_options
from flatdown.constants import (
    DEFAULT_OUTPUT_FORMAT,
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_INTERNAL_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    OUTPUT_FORMATS,
)
from flatdown.exceptions import FlatdownError, InternalRenderError, ValidationError
from flatdown.logging_utils import configure_logging
from flatdown.renderer import RenderResult

logger = logging.getLogger(__name__)

__all__ = [
    "main",
    "create_parser",
    "format_result",
    "get_exit_code_for_exception",
    "should_use_rich_output",
]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``flatdown`` command."""
    parser = argparse.ArgumentParser(
        prog="flatdown",
        description="Flatten Markdown into plain display lines and attribute spans.",
    )
    parser.add_argument("input", nargs="?", default="-", help="Markdown file to read, or '-' for stdin (default)")
    parser.add_argument("-o", "--out", help="Write output to this file instead of stdout")
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=DEFAULT_OUTPUT_FORMAT,
        help="Output format: full JSON result, flattened text only, or one attribute per line",
    )
    parser.add_argument("--sort", action="store_true", help="Sort attributes by kind and position")
    parser.add_argument(
        "--rich",
        action="store_true",
        help="Enable rich terminal output with formatting (automatically disabled when output is piped)",
    )
    parser.add_argument(
        "--force-rich",
        action="store_true",
        help="Force rich output even when stdout is piped or redirected",
    )
    parser.add_argument("--no-gfm", action="store_true", help="Disable GitHub-flavored Markdown extensions")
    parser.add_argument("--bullet", help="Glyph used for unordered list items")
    parser.add_argument("--config", help="Path to a configuration file (.toml, .yaml, .json or pyproject.toml)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument("--trace", action="store_true", help="Enable trace logging with timestamps and logger names")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def format_result(result: RenderResult, output_format: str, sort: bool = False) -> str:
    """Format a render result for output.

    Parameters
    ----------
    result : RenderResult
        Result to format
    output_format : {"json", "text", "attrs"}
        ``json`` writes the whole result, ``text`` the flattened lines, and
        ``attrs`` one JSON object per attribute and line
    sort : bool, default False
        Whether to sort attributes by kind and position

    Returns
    -------
    str
        Formatted output without a trailing newline

    """
    attrs = sort_attrs(result.attrs) if sort else result.attrs

    if output_format == "text":
        return "\n".join(result.text)
    if output_format == "attrs":
        return "\n".join(json.dumps(attr_to_dict(attr), ensure_ascii=False) for attr in attrs)
    return json.dumps(RenderResult(text=result.text, attrs=attrs).to_dict(), ensure_ascii=False, indent=2)


def should_use_rich_output(parsed_args: argparse.Namespace, stream: IO[str] | None = None) -> bool:
    """Determine if Rich output should be used based on TTY and args.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed command line arguments
    stream : optional, default None
        Uses sys.stdout unless otherwise specified.

    Returns
    -------
    bool
        True if Rich output should be used

    Notes
    -----
    Rich output is used when:
    - The --rich flag is set and no output file was given
    - AND either --force-rich is set OR stdout is a TTY

    """
    if not parsed_args.rich or parsed_args.out:
        return False

    if parsed_args.force_rich:
        return True

    target = stream or sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(callable(isatty) and isatty())


def _print_result_rich(result: RenderResult, sort: bool = False) -> None:
    """Print the flattened lines and attributes as Rich tables."""
    from rich.console import Console
    from rich.table import Table
    from rich.text import Text

    console = Console()

    text_table = Table(title="Flattened Text")
    text_table.add_column("Line", style="cyan", justify="right")
    text_table.add_column("Text", style="white", no_wrap=True)
    for number, line in enumerate(result.text, start=1):
        # Text() keeps Markdown brackets from being read as Rich markup
        text_table.add_row(str(number), Text(line))
    console.print(text_table)

    attr_table = Table(title="Attributes")
    attr_table.add_column("Kind", style="yellow")
    attr_table.add_column("Start", style="magenta")
    attr_table.add_column("End", style="magenta")
    attr_table.add_column("Detail", style="white")
    for attr in sort_attrs(result.attrs) if sort else result.attrs:
        if isinstance(attr, HorizontalRuleAttr):
            attr_table.add_row(attr.type, f"{attr.line}", "", "")
            continue
        data = attr_to_dict(attr)
        detail = ""
        if "lang" in data:
            detail = f"lang={data['lang']}"
        elif "depth" in data:
            detail = f"depth={data['depth']}"
        start, end = attr.range.start, attr.range.end
        attr_table.add_row(attr.type, f"{start.line}:{start.character}", f"{end.line}:{end.character}", detail)
    console.print(attr_table)


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, InternalRenderError):
        return EXIT_INTERNAL_ERROR

    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, (OSError, UnicodeDecodeError)):
        return EXIT_FILE_ERROR

    return EXIT_ERROR


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed command-line arguments

    """
    # --trace takes precedence over --log-level
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level.upper())
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _write_output(content: str, out: Optional[str]) -> None:
    if out:
        Path(out).write_text(content + "\n", encoding="utf-8")
        logger.info("Wrote output to %s", out)
    else:
        print(content)


def main(args: list[str] | None = None) -> int:
    """Execute the ``flatdown`` command.

    Parameters
    ----------
    args : list of str, optional
        Command-line arguments; ``sys.argv[1:]`` when omitted

    Returns
    -------
    int
        Process exit code

    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    _setup_logging_level(parsed_args)

    try:
        lexer_options, renderer_options = load_options(parsed_args.config)
        if parsed_args.no_gfm:
            lexer_options = lexer_options.create_updated(gfm=False)
        if parsed_args.bullet is not None:
            renderer_options = renderer_options.create_updated(bullet_char=parsed_args.bullet)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except FlatdownError as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    try:
        markdown = _read_input(parsed_args.input)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading {parsed_args.input}: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    try:
        result = parse_markdown(markdown, renderer_options, lexer_options=lexer_options)
    except FlatdownError as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    if should_use_rich_output(parsed_args):
        _print_result_rich(result, sort=parsed_args.sort)
        return EXIT_SUCCESS

    try:
        _write_output(format_result(result, parsed_args.format, sort=parsed_args.sort), parsed_args.out)
    except OSError as e:
        print(f"Error writing {parsed_args.out}: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
