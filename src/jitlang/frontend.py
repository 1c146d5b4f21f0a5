"""
JitLang Line Front-End
======================

This module drives the lexer and parser over input one line at a time:

    line → Lexer → tokens → Parser → statement

Each line gets a 1-based, incrementing line number and is processed
independently; no state is carried from one line to the next apart from
the running diagnostic totals kept for the final summary.

Usage
-----
Command line:
    $ jitl program.jl
    $ echo 'var x = 1+2' | jitl --tokens

Programmatic:
    >>> from jitlang.frontend import LineFrontend
    >>> frontend = LineFrontend()
    >>> result = frontend.process_line("var x = 5")
    >>> result.ok
    True

Configuration
-------------
FrontendOptions holds the settings. Defaults can be overridden from the
environment (FrontendOptions.from_env) and, in the CLI, by command-line
options:

    JITLANG_FILENAME    filename shown in diagnostics (default: stdin)
    JITLANG_FIRST_LINE  number of the first line (default: 1)
    JITLANG_OUTPUT      "tokens" or "ast" (default: ast)
    JITLANG_MAX_ERRORS  stop after this many failing diagnostics (default: 100)
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional
import logging
import os

from jitlang.errors import PartialLocation
from jitlang.diagnostics import Diagnostic, DiagnosticCollector, has_errors
from jitlang.lexer import Token, lex
from jitlang.parser import parse
from jitlang.ast import ASTPrinter, NoneOrError, Statement

logger = logging.getLogger(__name__)


OUTPUT_MODES = ("tokens", "ast")


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class FrontendOptions:
    """
    Front-end configuration options.

    Attributes:
        filename: Filename reported in diagnostics
        first_line: Line number given to the first input line
        output: What to print for a valid line, "tokens" or "ast"
        max_errors: Error count after which process_lines stops
    """
    filename: str = "stdin"
    first_line: int = 1
    output: str = "ast"
    max_errors: int = 100

    def __post_init__(self):
        if self.output not in OUTPUT_MODES:
            raise ValueError(
                f"output must be one of {', '.join(OUTPUT_MODES)}, got {self.output!r}"
            )
        if self.first_line < 0:
            raise ValueError(f"first_line must not be negative, got {self.first_line}")
        if self.max_errors < 1:
            raise ValueError(f"max_errors must be at least 1, got {self.max_errors}")

    @classmethod
    def from_env(cls) -> "FrontendOptions":
        """
        Create FrontendOptions from environment variables.

        Invalid values are ignored with a warning and the default is kept.
        """
        options = cls()

        if filename := os.environ.get("JITLANG_FILENAME"):
            options.filename = filename

        if first_line := os.environ.get("JITLANG_FIRST_LINE"):
            try:
                value = int(first_line)
                if value < 0:
                    raise ValueError(first_line)
                options.first_line = value
            except ValueError:
                logger.warning("ignoring invalid JITLANG_FIRST_LINE=%r", first_line)

        if output := os.environ.get("JITLANG_OUTPUT"):
            if output in OUTPUT_MODES:
                options.output = output
            else:
                logger.warning("ignoring invalid JITLANG_OUTPUT=%r", output)

        if max_errors := os.environ.get("JITLANG_MAX_ERRORS"):
            try:
                value = int(max_errors)
                if value < 1:
                    raise ValueError(max_errors)
                options.max_errors = value
            except ValueError:
                logger.warning("ignoring invalid JITLANG_MAX_ERRORS=%r", max_errors)

        return options


# =============================================================================
# Line Result
# =============================================================================

@dataclass
class LineResult:
    """
    Outcome of processing one line.

    When lexing fails the parser is not run: tokens holds the partial
    token list and statement is NoneOrError.

    Attributes:
        line_number: Number of the line
        source: The line text without its line terminator
        tokens: Tokens of the line
        statement: Parsed statement (NoneOrError on failure)
        diagnostics: Lexical or syntactic diagnostics
    """
    line_number: int
    source: str
    tokens: List[Token] = field(default_factory=list)
    statement: Statement = field(default_factory=NoneOrError)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not has_errors(self.diagnostics)


def format_tokens(tokens: Iterable[Token]) -> str:
    """Format a token sequence as ``[Int(1), Plus, Int(2)]``."""
    return "[" + ", ".join(str(t) for t in tokens) + "]"


def format_result(result: LineResult, output: str = "ast") -> str:
    """Format the output of a valid line for display."""
    if output == "tokens":
        return format_tokens(result.tokens)
    return ASTPrinter().print(result.statement)


# =============================================================================
# Front-End Driver
# =============================================================================

class LineFrontend:
    """
    Runs the lexer and parser over successive lines.

    Example:
        frontend = LineFrontend(FrontendOptions(filename="demo.jl"))
        for result in frontend.process_lines(open("demo.jl")):
            if not result.ok:
                print(render_diagnostics(result.diagnostics))

    Attributes:
        options: Front-end configuration
        stats: Diagnostics collected across every processed line
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        self.options = options or FrontendOptions()
        self.stats = DiagnosticCollector(max_errors=self.options.max_errors)
        self.lines_processed = 0

    def process_line(self, text: str, line_number: Optional[int] = None) -> LineResult:
        """
        Lex and, if lexing succeeded, parse one line.

        Args:
            text: The line (a trailing newline is ignored)
            line_number: Line number for diagnostics (default: first_line)

        Returns:
            LineResult for the line
        """
        if line_number is None:
            line_number = self.options.first_line
        source = text.rstrip("\r\n")
        context = PartialLocation(self.options.filename, line_number)

        result = process_line(source, context)

        self.lines_processed += 1
        self.stats.extend(result.diagnostics)
        logger.debug(
            "%s: %d tokens, %d diagnostics",
            context,
            len(result.tokens),
            len(result.diagnostics),
        )
        return result

    def process_lines(self, lines: Iterable[str]) -> Iterator[LineResult]:
        """
        Process lines in order with incrementing line numbers.

        Stops early once max_errors error diagnostics have been collected.
        """
        for offset, text in enumerate(lines):
            yield self.process_line(text, self.options.first_line + offset)
            if self.stats.should_stop():
                logger.warning(
                    "too many errors (%d), stopping", self.stats.error_count()
                )
                return


def process_line(text: str, context: PartialLocation) -> LineResult:
    """
    Lex then parse one line at the given location.

    Returns:
        LineResult carrying tokens, statement and diagnostics
    """
    lexed = lex(text, context)
    if not lexed.ok:
        return LineResult(
            line_number=context.line,
            source=text,
            tokens=lexed.tokens,
            diagnostics=lexed.diagnostics,
        )

    parsed = parse(lexed.tokens, context, text)
    return LineResult(
        line_number=context.line,
        source=text,
        tokens=lexed.tokens,
        statement=parsed.statement,
        diagnostics=parsed.diagnostics,
    )
