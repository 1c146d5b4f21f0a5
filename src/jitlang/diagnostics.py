"""
JitLang Diagnostics
===================

Diagnostics describe "what went wrong, where" in a single source line.
They are plain immutable values: the lexer and parser accumulate them in
a list instead of raising, so a single line can report every problem it
contains.

Error Kinds
-----------
| Kind                | Raised by | Meaning                                   |
|---------------------|-----------|-------------------------------------------|
| SyntaxError         | parser    | generic catch-all                         |
| StringClosingError  | lexer     | string literal without closing quote      |
| IllegalCharacter    | lexer     | character not allowed at that position    |
| ExpectedToken       | parser    | a required token is missing               |
| UnexpectedToken     | parser    | a token is not valid in context           |
| FloatingNumber      | lexer     | fractional literals are not supported     |
| IntegerOverflow     | lexer     | integer literal does not fit in 64 bits   |
| UnsupportedOperator | parser    | '-', '*' and '/' are not built into trees |

Rendered Format
---------------
    error: IllegalCharacter in test at 0:7
    |	225 13 é
    |	       ^
    An illegal character of code [233] was encountered

Successive diagnostics are separated by a blank line.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Union

from jitlang.errors import JitLangError, Location


# =============================================================================
# Severity and Kind
# =============================================================================

class Severity(Enum):
    """
    How serious a diagnostic is.

    Only ERROR makes a line's result unusable. WARNING and NOTE are
    informational; the lexer and parser do not emit them today.
    """
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"

    def __str__(self) -> str:
        return self.value


class ErrorKind(Enum):
    """
    Closed set of diagnostic kinds.

    Each member carries its human-readable name and the template used to
    build the description. Template fields are filled by the Diagnostic
    constructors.
    """

    SYNTAX_ERROR = ("SyntaxError", "Incorrect syntax")
    STRING_CLOSING_ERROR = ("StringClosingError", "A string literal was not closed")
    ILLEGAL_CHARACTER = (
        "IllegalCharacter",
        "An illegal character of code [{code}] was encountered",
    )
    EXPECTED_TOKEN = ("ExpectedToken", "Expected token [{expected}]")
    UNEXPECTED_TOKEN = ("UnexpectedToken", "Unexpected token [{found}]")
    FLOATING_NUMBER = ("FloatingNumber", "Floating numbers are not supported")
    INTEGER_OVERFLOW = (
        "IntegerOverflow",
        "Integer literal [{digits}] does not fit in 64 bits",
    )
    UNSUPPORTED_OPERATOR = (
        "UnsupportedOperator",
        "Operator [{operator}] is not supported in expressions yet",
    )

    def __init__(self, title: str, template: str):
        self.title = title
        self.template = template

    def __str__(self) -> str:
        return self.title


# =============================================================================
# Diagnostic Value
# =============================================================================

@dataclass(frozen=True)
class Diagnostic:
    """
    A single problem found in a source line.

    Use the named constructors (string_closing, illegal_character, ...)
    rather than building instances directly: they fix the severity and
    fill the description from the kind's template.

    Attributes:
        severity: ERROR, WARNING or NOTE
        location: Where the problem was found
        kind: The ErrorKind
        description: Human-readable description
        source_line: The offending line of source text
        detail: Kind-specific payload (character code, token name, ...)
    """
    severity: Severity
    location: Location
    kind: ErrorKind
    description: str
    source_line: str
    detail: Optional[Union[int, str]] = None

    @property
    def name(self) -> str:
        """Human name of the kind, e.g. 'IllegalCharacter'."""
        return self.kind.title

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def __str__(self) -> str:
        """
        Render the diagnostic with a caret under the reported offset.

        The caret line reuses the tab prefix of the source line so the
        marker stays aligned with the character it points at.
        """
        loc = self.location
        return (
            f"{self.severity}: {self.name} in {loc.filename} at {loc.line}:{loc.char_pos}\n"
            f"|\t{self.source_line}\n"
            f"|\t{' ' * loc.char_pos}^\n"
            f"{self.description}"
        )

    # =========================================================================
    # Named Constructors
    # =========================================================================

    @classmethod
    def _make(
        cls,
        kind: ErrorKind,
        location: Location,
        source_line: str,
        detail: Optional[Union[int, str]] = None,
        severity: Severity = Severity.ERROR,
        **fields,
    ) -> "Diagnostic":
        return cls(
            severity=severity,
            location=location,
            kind=kind,
            description=kind.template.format(**fields),
            source_line=source_line,
            detail=detail,
        )

    @classmethod
    def syntax_error(cls, location: Location, source_line: str) -> "Diagnostic":
        """Generic syntax error."""
        return cls._make(ErrorKind.SYNTAX_ERROR, location, source_line)

    @classmethod
    def string_closing(cls, location: Location, source_line: str) -> "Diagnostic":
        """A string literal was not closed before the end of the line."""
        return cls._make(ErrorKind.STRING_CLOSING_ERROR, location, source_line)

    @classmethod
    def illegal_character(
        cls, location: Location, source_line: str, char: str
    ) -> "Diagnostic":
        """A character that is not allowed at this position."""
        code = ord(char)
        return cls._make(
            ErrorKind.ILLEGAL_CHARACTER, location, source_line, detail=code, code=code
        )

    @classmethod
    def expected_token(
        cls, location: Location, source_line: str, expected: str
    ) -> "Diagnostic":
        """A required token class was absent."""
        return cls._make(
            ErrorKind.EXPECTED_TOKEN,
            location,
            source_line,
            detail=expected,
            expected=expected,
        )

    @classmethod
    def unexpected_token(
        cls, location: Location, source_line: str, found: str
    ) -> "Diagnostic":
        """A token is present but not valid in this context."""
        return cls._make(
            ErrorKind.UNEXPECTED_TOKEN, location, source_line, detail=found, found=found
        )

    @classmethod
    def floating_number(cls, location: Location, source_line: str) -> "Diagnostic":
        """Fractional literals are rejected."""
        return cls._make(ErrorKind.FLOATING_NUMBER, location, source_line)

    @classmethod
    def integer_overflow(
        cls, location: Location, source_line: str, digits: str
    ) -> "Diagnostic":
        """An integer literal exceeds the unsigned 64-bit range."""
        return cls._make(
            ErrorKind.INTEGER_OVERFLOW,
            location,
            source_line,
            detail=digits,
            digits=digits,
        )

    @classmethod
    def unsupported_operator(
        cls, location: Location, source_line: str, operator: str
    ) -> "Diagnostic":
        """An operator that is lexed but not yet composed into expressions."""
        return cls._make(
            ErrorKind.UNSUPPORTED_OPERATOR,
            location,
            source_line,
            detail=operator,
            operator=operator,
        )

    def as_warning(self) -> "Diagnostic":
        """Return a copy downgraded to WARNING severity."""
        return Diagnostic(
            Severity.WARNING,
            self.location,
            self.kind,
            self.description,
            self.source_line,
            self.detail,
        )

    def as_note(self) -> "Diagnostic":
        """Return a copy downgraded to NOTE severity."""
        return Diagnostic(
            Severity.NOTE,
            self.location,
            self.kind,
            self.description,
            self.source_line,
            self.detail,
        )


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    """Return True if any diagnostic has ERROR severity."""
    return any(d.is_error for d in diagnostics)


def render_diagnostics(diagnostics: Iterable[Diagnostic]) -> str:
    """Render diagnostics as text blocks separated by a blank line."""
    return "\n\n".join(str(d) for d in diagnostics)


# =============================================================================
# Exceptions
# =============================================================================

class FrontendError(JitLangError):
    """
    Raised on request when a line produced error diagnostics.

    The message is the rendered diagnostic report, so printing the
    exception shows every problem in the line.

    Attributes:
        diagnostics: The diagnostics that caused the failure
    """

    def __init__(self, diagnostics: List[Diagnostic]):
        self.diagnostics = list(diagnostics)
        super().__init__(render_diagnostics(self.diagnostics))


# =============================================================================
# Diagnostic Collection (for multi-line reporting)
# =============================================================================

class DiagnosticCollector:
    """
    Collects diagnostics across several lines for batch reporting.

    The line driver feeds every line's diagnostics in here so that a
    summary can be printed once the input is exhausted.

    Example:
        collector = DiagnosticCollector()
        for result in frontend.process_lines(lines):
            collector.extend(result.diagnostics)

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the collector.

        Args:
            max_errors: Error count at which should_stop() turns True
        """
        self.diagnostics: List[Diagnostic] = []
        self.max_errors = max_errors

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic to the collection."""
        self.diagnostics.append(diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        """Add several diagnostics, keeping their order."""
        self.diagnostics.extend(diagnostics)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]

    def has_errors(self) -> bool:
        """Return True if any ERROR diagnostic has been collected."""
        return has_errors(self.diagnostics)

    def should_stop(self) -> bool:
        """Return True if max_errors has been reached."""
        return self.error_count() >= self.max_errors

    def error_count(self) -> int:
        return len(self.errors)

    def warning_count(self) -> int:
        return len(self.warnings)

    def report(self) -> str:
        """Format all diagnostics followed by a summary line."""
        lines = []

        for diagnostic in self.diagnostics:
            lines.append(str(diagnostic))
            lines.append("")  # Blank line between diagnostics

        errors = self.error_count()
        warnings = self.warning_count()
        error_word = "error" if errors == 1 else "errors"
        warning_word = "warning" if warnings == 1 else "warnings"
        lines.append(f"{errors} {error_word}, {warnings} {warning_word}")

        return "\n".join(lines)

    def clear(self) -> None:
        self.diagnostics.clear()

    def raise_if_errors(self) -> None:
        """Raise a FrontendError if any ERROR diagnostic was collected."""
        if self.has_errors():
            raise FrontendError(self.errors)
