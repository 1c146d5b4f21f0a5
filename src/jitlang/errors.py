"""
JitLang Error Hierarchy and Source Locations
=============================================

This module defines the exception hierarchy for the JitLang front-end and
the location types that every diagnostic carries.

Exception Hierarchy
-------------------
JitLangError (base)
└── FrontendError - a line produced error diagnostics (see diagnostics.py)

Lexing and parsing never raise for bad input: problems in the source are
reported as Diagnostic values. Exceptions are reserved for callers that
explicitly ask for them (``unwrap()``, ``raise_if_errors()``) and for
programming errors such as out-of-range coordinates.

Locations
---------
A line is known by its filename and line number before lexing starts
(PartialLocation). The exact character offset is only known once the lexer
or parser finds a problem, at which point the partial location is turned
into a full Location:

    >>> base = PartialLocation.stdin(3)
    >>> base.to_location().with_char_pos(7)
    Location(filename='stdin', line=3, char_pos=7)
"""

from dataclasses import dataclass, replace


# Coordinate limits: line numbers are unsigned 64-bit, offsets unsigned 32-bit
MAX_LINE = 2**64 - 1
MAX_CHAR_POS = 2**32 - 1


# =============================================================================
# Base Exception Class
# =============================================================================

class JitLangError(Exception):
    """
    Base exception for all JitLang errors.

    Callers can catch every front-end error with a single except clause:

        try:
            lex(line, context).unwrap()
        except JitLangError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

def _check_range(name: str, value: int, maximum: int) -> None:
    if not 0 <= value <= maximum:
        raise ValueError(f"{name} must be between 0 and {maximum}, got {value}")


@dataclass(frozen=True)
class Location:
    """
    Fully specified position of a diagnostic.

    Locations are immutable. Refining one field (typically the character
    offset) produces a modified copy, never an in-place change.

    Attributes:
        filename: Name of the input ("stdin" for interactive input)
        line: Line number (1-indexed by the driver)
        char_pos: Character offset within the line (0-indexed)
    """
    filename: str
    line: int
    char_pos: int = 0

    def __post_init__(self) -> None:
        _check_range("line", self.line, MAX_LINE)
        _check_range("char_pos", self.char_pos, MAX_CHAR_POS)

    def __str__(self) -> str:
        """Format as 'filename:line:char_pos' for log messages."""
        return f"{self.filename}:{self.line}:{self.char_pos}"

    @classmethod
    def from_partial(cls, partial: "PartialLocation") -> "Location":
        """Convert a PartialLocation, with the character offset set to 0."""
        return cls(partial.filename, partial.line, 0)

    def with_filename(self, filename: str) -> "Location":
        return replace(self, filename=filename)

    def with_line(self, line: int) -> "Location":
        return replace(self, line=line)

    def with_char_pos(self, char_pos: int) -> "Location":
        return replace(self, char_pos=char_pos)


@dataclass(frozen=True)
class PartialLocation:
    """
    Location of a whole line, before any character offset is known.

    The line driver creates one of these per input line and hands it to
    the lexer and parser.

    Attributes:
        filename: Name of the input
        line: Line number
    """
    filename: str
    line: int

    def __post_init__(self) -> None:
        _check_range("line", self.line, MAX_LINE)

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}"

    @classmethod
    def stdin(cls, line: int) -> "PartialLocation":
        """Location of a line read from standard input."""
        return cls("stdin", line)

    @classmethod
    def not_specified(cls, line: int) -> "PartialLocation":
        """Location of a line whose origin is unknown."""
        return cls("not specified", line)

    @classmethod
    def testing(cls, line: int) -> "PartialLocation":
        """Location used by unit tests."""
        return cls("test", line)

    def to_location(self, char_pos: int = 0) -> Location:
        """Refine into a full Location at the given character offset."""
        return Location(self.filename, self.line, char_pos)
