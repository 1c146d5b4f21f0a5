"""
jitl - JitLang Front-End Command-Line Interface
===============================================

This module implements the command-line interface for the JitLang
front-end. It reads source text line by line, lexes and parses each line
and prints either the token sequence or the syntax tree. Problems are
rendered as diagnostics on stderr.

Usage Examples
--------------
Interactive (one line at a time from stdin):
    $ jitl

From a file:
    $ jitl program.jl

Token dump:
    $ echo 'var x = 1+2' | jitl --tokens
    [Keyword("var"), Identifier("x"), Assign, Int(1), Plus, Int(2)]

Verbose mode:
    $ jitl -v program.jl
"""

import logging
import sys
from typing import Optional, TextIO

import click

from jitlang import __version__
from jitlang.diagnostics import render_diagnostics
from jitlang.frontend import FrontendOptions, LineFrontend, format_result
from jitlang.cli.errors import ExitCode, handle_cli_exception


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def _is_named_file(stream: TextIO) -> bool:
    """Return True if the stream was opened from a path rather than stdin."""
    name = getattr(stream, "name", None)
    return isinstance(name, str) and name not in ("-", "<stdin>")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.File("r"),
    default="-",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token sequence of each line",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the syntax tree of each line (default)",
)
@click.option(
    "--filename",
    default=None,
    help="Filename shown in diagnostics (default: input path or stdin)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="jitl")
def main(
    input_file: TextIO,
    tokens: bool,
    ast: bool,
    filename: Optional[str],
    verbose: bool,
) -> None:
    """
    Lex and parse JitLang source, one line at a time.

    INPUT_FILE is the source file to read; use - (the default) for stdin.

    Each valid line prints its syntax tree (or its tokens with --tokens).
    Each invalid line prints its diagnostics to stderr.

    \b
    Examples:
        jitl program.jl              # Syntax tree per line
        jitl --tokens program.jl     # Token sequence per line
        echo 'print "hi"' | jitl     # Read from stdin

    \b
    Environment:
        JITLANG_FILENAME, JITLANG_FIRST_LINE,
        JITLANG_OUTPUT, JITLANG_MAX_ERRORS
    """
    setup_logging(verbose)

    if tokens and ast:
        raise click.UsageError("--tokens and --ast cannot be used together")

    try:
        options = FrontendOptions.from_env()
        if tokens:
            options.output = "tokens"
        elif ast:
            options.output = "ast"
        if filename is not None:
            options.filename = filename
        elif _is_named_file(input_file):
            options.filename = input_file.name

        logger.debug("reading %s (output: %s)", options.filename, options.output)

        frontend = LineFrontend(options)
        failed_lines = 0

        for result in frontend.process_lines(input_file):
            if result.ok:
                click.echo(format_result(result, options.output))
            else:
                failed_lines += 1
                click.echo(render_diagnostics(result.diagnostics), err=True)
                click.echo("", err=True)

        stats = frontend.stats
        logger.debug(
            "%d lines, %d errors, %d warnings",
            frontend.lines_processed,
            stats.error_count(),
            stats.warning_count(),
        )

    except Exception as e:
        handle_cli_exception(e, verbose)

    if failed_lines:
        sys.exit(ExitCode.SOURCE_ERROR)


if __name__ == "__main__":
    main()
