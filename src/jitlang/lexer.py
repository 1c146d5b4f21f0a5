"""
JitLang Lexer (Tokenizer)
=========================

This module implements the lexer for a single line of JitLang source.
It converts the characters of the line into an ordered list of tokens,
or into a list of diagnostics when the line is lexically invalid.

Token Categories
----------------
- Keywords: if, else, var, print (case-sensitive)
- Identifiers: ASCII letter followed by ASCII letters/digits
- Integers: runs of ASCII digits, unsigned, at most 2**64 - 1
- Strings: "double quoted", no escape sequences
- Operators: + - * / =
- Delimiters: ( ) ,

Literal Follow Set
------------------
The grammar gives no meaning to a literal directly followed by an
identifier or another literal (``1024better``, ``"a"b``). After an
integer or string literal only one of ``+ - * / , )``, a space or the end
of the line may follow; anything else is an IllegalCharacter at that
offset.

Error Handling
--------------
The lexer never stops at the first problem. Every diagnostic is recorded
and scanning continues, so one call reports everything wrong with the
line. An ERROR token marks the place of a literal that could not be
built.

Example Usage
-------------
>>> from jitlang.errors import PartialLocation
>>> from jitlang.lexer import lex
>>> result = lex('var total = 25+"apples"', PartialLocation.testing(0))
>>> [str(t) for t in result.tokens]
['Keyword("var")', 'Identifier("total")', 'Assign', 'Int(25)', 'Plus', 'String("apples")']
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Union
import string

from jitlang.errors import Location, PartialLocation
from jitlang.diagnostics import Diagnostic, FrontendError, has_errors


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for JitLang.

    Keywords share a single KEYWORD type and keep the keyword text as
    their value; the parser compares against that text.
    """

    # === Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # -
    MUL = auto()            # *
    DIV = auto()            # /

    # === Literals and Names ===
    INT = auto()            # 1024
    STRING = auto()         # "text"
    IDENTIFIER = auto()     # total
    KEYWORD = auto()        # var, print, if, else

    # === Delimiters ===
    COMMA = auto()          # ,
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    ASSIGN = auto()         # =

    # === Error Marker ===
    ERROR = auto()          # lexical failure, already reported

    @property
    def display_name(self) -> str:
        """Name used in token dumps and diagnostics."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    TokenType.PLUS: "Plus",
    TokenType.MINUS: "Minus",
    TokenType.MUL: "Mul",
    TokenType.DIV: "Div",
    TokenType.INT: "Int",
    TokenType.STRING: "String",
    TokenType.IDENTIFIER: "Identifier",
    TokenType.KEYWORD: "Keyword",
    TokenType.COMMA: "Comma",
    TokenType.LPAREN: "OpeningParen",
    TokenType.RPAREN: "ClosingParen",
    TokenType.ASSIGN: "Assign",
    TokenType.ERROR: "ErrorToken",
}


# =============================================================================
# Character Classes
# =============================================================================

KEYWORDS = frozenset({"if", "else", "var", "print"})

# Characters allowed right after an integer or string literal
LITERAL_FOLLOW_SET = frozenset("+-*/ ,)")

# Single-character tokens
PUNCTUATION = {
    ",": TokenType.COMMA,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MUL,
    "/": TokenType.DIV,
    "=": TokenType.ASSIGN,
}

MAX_INT = 2**64 - 1
MAX_INT_DIGITS = len(str(MAX_INT))


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from a source line.

    The column is kept for error reporting only and does not take part
    in equality, so ``Token(TokenType.INT, 5)`` equals the token lexed
    from ``"5"`` wherever it appears in the line.

    Attributes:
        type: The TokenType classification
        value: Integer value, string payload, identifier or keyword text
        column: 0-based character offset of the lexeme
    """
    type: TokenType
    value: Union[int, str, None] = None
    column: int = field(default=0, compare=False)

    def __str__(self) -> str:
        """Format like ``Int(225)``, ``Keyword("var")`` or ``Plus``."""
        name = self.type.display_name
        if self.type is TokenType.ERROR or self.value is None:
            return name
        if isinstance(self.value, int):
            return f"{name}({self.value})"
        return f'{name}("{self.value}")'

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, @{self.column})"
        return f"Token({self.type.name}, @{self.column})"

    def is_keyword(self, word: str) -> bool:
        """Return True if this is the given keyword."""
        return self.type is TokenType.KEYWORD and self.value == word

    def location(self, context: PartialLocation) -> Location:
        """Return the full Location of this token within its line."""
        return context.to_location(self.column)


# =============================================================================
# Lexer Result
# =============================================================================

@dataclass
class LexResult:
    """
    Outcome of lexing one line.

    The line is valid if and only if no ERROR diagnostic was recorded.
    On failure the token list is partial and must not be parsed.

    Attributes:
        tokens: Tokens in source order
        diagnostics: Problems found, in source order
    """
    tokens: List[Token] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not has_errors(self.diagnostics)

    def unwrap(self) -> List[Token]:
        """
        Return the tokens of a valid line.

        Raises:
            FrontendError: If the line produced error diagnostics
        """
        if not self.ok:
            raise FrontendError(self.diagnostics)
        return self.tokens


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes one line of JitLang source.

    The lexer keeps a cursor over the line with one character of
    lookahead: ``_current`` is the character under the cursor (None past
    the end) and ``_advance()`` moves to the next one. The position
    counter starts at -1 so that the first advance lands on offset 0.

    Usage:
        lexer = Lexer(line, PartialLocation.stdin(1))
        result = lexer.tokenize()

    Attributes:
        line: The source line, trailing whitespace removed
        context: Filename and line number used for diagnostics
    """

    IDENT_START = string.ascii_letters
    IDENT_CHARS = string.ascii_letters + string.digits

    def __init__(self, line: str, context: PartialLocation):
        """
        Initialize the lexer.

        Args:
            line: One line of source text (a trailing newline is ignored)
            context: Location of the line for diagnostics
        """
        self.line = line.rstrip()
        self.context = context
        self._reset()

    def _reset(self) -> None:
        self._tokens: List[Token] = []
        self._diagnostics: List[Diagnostic] = []
        self._current: Optional[str] = None
        self._pos = -1
        # Offsets already reported as IllegalCharacter
        self._reported: set[int] = set()

    def tokenize(self) -> LexResult:
        """
        Scan the whole line.

        Returns:
            LexResult with the tokens and every diagnostic found
        """
        self._reset()
        self._advance()

        while self._current is not None:
            char = self._current

            if char in string.digits:
                self._tokens.append(self._make_int())
                self._check_after_literal()
                continue

            if char in self.IDENT_START:
                self._tokens.append(self._make_identifier())
                continue

            if char == '"':
                self._tokens.append(self._make_string())
                self._check_after_literal()
                continue

            if char in PUNCTUATION:
                self._tokens.append(Token(PUNCTUATION[char], column=self._pos))
            elif char != " ":
                self._illegal_character(self._pos, char)

            self._advance()

        return LexResult(self._tokens, self._diagnostics)

    # =========================================================================
    # Character Access
    # =========================================================================

    def _advance(self) -> None:
        """Move the cursor one character forward."""
        self._pos += 1
        if self._pos < len(self.line):
            self._current = self.line[self._pos]
        else:
            self._current = None

    def _location(self, pos: int) -> Location:
        return self.context.to_location(pos)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _make_int(self) -> Token:
        """
        Scan a run of digits into an INT token.

        A '.' right after the digits starts a fractional literal, which is
        rejected as a whole. Values above 2**64 - 1 are rejected as well.
        Both cases yield an ERROR token.
        """
        start = self._pos
        digits = []
        while self._current is not None and self._current in string.digits:
            digits.append(self._current)
            self._advance()

        text = "".join(digits)

        if self._current == ".":
            self._diagnostics.append(
                Diagnostic.floating_number(self._location(self._pos), self.line)
            )
            self._advance()  # skip the '.'
            while self._current is not None and self._current in string.digits:
                self._advance()
            return Token(TokenType.ERROR, self.line[start:self._pos], column=start)

        # Significant digits are counted before conversion: int() refuses
        # very long digit strings
        significant = text.lstrip("0") or "0"
        if len(significant) > MAX_INT_DIGITS or int(significant) > MAX_INT:
            self._diagnostics.append(
                Diagnostic.integer_overflow(self._location(start), self.line, text)
            )
            return Token(TokenType.ERROR, text, column=start)

        return Token(TokenType.INT, int(significant), column=start)

    def _make_identifier(self) -> Token:
        """Scan an identifier, or a keyword if the text is in KEYWORDS."""
        start = self._pos
        chars = []
        while self._current is not None and self._current in self.IDENT_CHARS:
            chars.append(self._current)
            self._advance()

        name = "".join(chars)
        if name in KEYWORDS:
            return Token(TokenType.KEYWORD, name, column=start)
        return Token(TokenType.IDENTIFIER, name, column=start)

    def _make_string(self) -> Token:
        """
        Scan a string literal; the payload excludes the quotes.

        An unterminated string is reported at its opening quote.
        """
        start = self._pos
        self._advance()  # skip the opening "

        chars = []
        while self._current is not None:
            if self._current == '"':
                self._advance()  # skip the closing "
                return Token(TokenType.STRING, "".join(chars), column=start)
            chars.append(self._current)
            self._advance()

        self._diagnostics.append(
            Diagnostic.string_closing(self._location(start), self.line)
        )
        return Token(TokenType.ERROR, self.line[start:], column=start)

    def _check_after_literal(self) -> None:
        """
        Enforce the literal follow set on the current character.

        The cursor is not moved: the offending character is lexed
        normally afterwards.
        """
        if self._current is None or self._current in LITERAL_FOLLOW_SET:
            return
        self._illegal_character(self._pos, self._current)

    def _illegal_character(self, pos: int, char: str) -> None:
        if pos in self._reported:
            return
        self._reported.add(pos)
        self._diagnostics.append(
            Diagnostic.illegal_character(self._location(pos), self.line, char)
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def lex(line: str, context: Optional[PartialLocation] = None) -> LexResult:
    """
    Tokenize one line of source.

    Args:
        line: The source line
        context: Location of the line (defaults to an unspecified file)

    Returns:
        LexResult with tokens and diagnostics
    """
    if context is None:
        context = PartialLocation.not_specified(0)
    return Lexer(line, context).tokenize()
