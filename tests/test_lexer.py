# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the single-line JitLang lexer.
#
# Test coverage includes:
#   - Integers, strings, identifiers and keywords
#   - Punctuation and operators
#   - The literal follow set
#   - Unterminated strings, illegal characters
#   - Fractional literals and 64-bit overflow
#   - Token formatting and column tracking
# =============================================================================

import pytest

from jitlang.errors import PartialLocation
from jitlang.diagnostics import ErrorKind, FrontendError
from jitlang.lexer import Lexer, Token, TokenType, KEYWORDS, MAX_INT, lex


# =============================================================================
# Helper Function
# =============================================================================

def tokenize(source: str):
    """
    Helper to lex one line at the test location.

    Returns:
        LexResult for the line
    """
    return lex(source, PartialLocation.testing(0))


def kinds(result) -> list:
    """Names of the diagnostics in a result, in order."""
    return [d.name for d in result.diagnostics]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_line(self):
        """An empty line is valid and has no tokens."""
        result = tokenize("")
        assert result.ok
        assert result.tokens == []

    def test_spaces_only(self):
        result = tokenize("     ")
        assert result.ok
        assert result.tokens == []

    def test_integer(self):
        result = tokenize("1024")
        assert result.ok
        assert result.tokens == [Token(TokenType.INT, 1024)]

    def test_integer_leading_zeros(self):
        """Leading zeros do not change the value."""
        assert tokenize("007").tokens == [Token(TokenType.INT, 7)]

    def test_string(self):
        """The payload excludes the quotes."""
        result = tokenize('"hello world"')
        assert result.ok
        assert result.tokens == [Token(TokenType.STRING, "hello world")]

    def test_empty_string(self):
        assert tokenize('""').tokens == [Token(TokenType.STRING, "")]

    def test_string_keeps_any_character(self):
        """Characters illegal elsewhere are fine inside a string."""
        result = tokenize('"é_$."')
        assert result.ok
        assert result.tokens[0].value == "é_$."

    def test_identifier(self):
        assert tokenize("valid25name").tokens == [
            Token(TokenType.IDENTIFIER, "valid25name")
        ]

    @pytest.mark.parametrize("word", sorted(KEYWORDS))
    def test_keywords(self, word):
        assert tokenize(word).tokens == [Token(TokenType.KEYWORD, word)]

    def test_keywords_are_case_sensitive(self):
        assert tokenize("Var").tokens == [Token(TokenType.IDENTIFIER, "Var")]

    def test_keyword_prefix_is_identifier(self):
        assert tokenize("variable").tokens == [Token(TokenType.IDENTIFIER, "variable")]

    def test_punctuation(self):
        result = tokenize(",()+-*/=")
        assert [t.type for t in result.tokens] == [
            TokenType.COMMA,
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.MUL,
            TokenType.DIV,
            TokenType.ASSIGN,
        ]

    def test_trailing_whitespace_ignored(self):
        result = tokenize("print 1   \n")
        assert result.ok
        assert len(result.tokens) == 2

    def test_mixed_sequence(self):
        """The reference sequence of literals, names and punctuation."""
        result = tokenize("225 var valid25name (25+25-6*8/5,5)")
        assert result.ok
        assert result.diagnostics == []
        assert result.tokens == [
            Token(TokenType.INT, 225),
            Token(TokenType.KEYWORD, "var"),
            Token(TokenType.IDENTIFIER, "valid25name"),
            Token(TokenType.LPAREN),
            Token(TokenType.INT, 25),
            Token(TokenType.PLUS),
            Token(TokenType.INT, 25),
            Token(TokenType.MINUS),
            Token(TokenType.INT, 6),
            Token(TokenType.MUL),
            Token(TokenType.INT, 8),
            Token(TokenType.DIV),
            Token(TokenType.INT, 5),
            Token(TokenType.COMMA),
            Token(TokenType.INT, 5),
            Token(TokenType.RPAREN),
        ]

    def test_declaration(self):
        result = tokenize('var total = 25+"apples"')
        assert [str(t) for t in result.tokens] == [
            'Keyword("var")',
            'Identifier("total")',
            "Assign",
            "Int(25)",
            "Plus",
            'String("apples")',
        ]


# =============================================================================
# Integer Range Tests
# =============================================================================

class TestIntegerRange:
    """Test the unsigned 64-bit integer range."""

    @pytest.mark.parametrize("text", ["0", "1", "65535", "4294967296", str(MAX_INT)])
    def test_in_range(self, text):
        result = tokenize(text)
        assert result.ok
        assert result.tokens == [Token(TokenType.INT, int(text))]

    def test_max_value(self):
        result = tokenize("18446744073709551615")
        assert result.tokens == [Token(TokenType.INT, 18446744073709551615)]

    def test_overflow(self):
        """One past the maximum is reported, never wrapped."""
        result = tokenize("18446744073709551616")
        assert not result.ok
        assert kinds(result) == ["IntegerOverflow"]
        assert result.diagnostics[0].location.char_pos == 0
        assert all(t.type is not TokenType.INT for t in result.tokens)

    def test_overflow_position(self):
        result = tokenize("print 99999999999999999999999")
        assert kinds(result) == ["IntegerOverflow"]
        assert result.diagnostics[0].location.char_pos == 6

    def test_very_long_digit_run(self):
        """Runs beyond the int() conversion limit are still an overflow."""
        result = tokenize("9" * 5000)
        assert kinds(result) == ["IntegerOverflow"]
        assert result.diagnostics[0].location.char_pos == 0
        assert all(t.type is not TokenType.INT for t in result.tokens)

    def test_long_run_of_leading_zeros(self):
        """Only significant digits count towards the range."""
        result = tokenize("0" * 5000 + "7")
        assert result.ok
        assert result.tokens == [Token(TokenType.INT, 7)]


# =============================================================================
# Fractional Literal Tests
# =============================================================================

class TestFloatingNumbers:
    """Fractional literals are rejected."""

    def test_simple_float(self):
        result = tokenize("1.5")
        assert kinds(result) == ["FloatingNumber"]
        assert all(t.type is not TokenType.INT for t in result.tokens)

    def test_float_position(self):
        """Reported at the decimal point."""
        result = tokenize("print 12.75")
        assert result.diagnostics[0].location.char_pos == 8

    def test_float_in_expression(self):
        """Scanning continues after the literal."""
        result = tokenize("1.5+2")
        assert kinds(result) == ["FloatingNumber"]
        assert result.tokens[-2:] == [Token(TokenType.PLUS), Token(TokenType.INT, 2)]

    def test_trailing_point(self):
        """A bare point after the digits is a fractional literal too."""
        result = tokenize("print 1.")
        assert kinds(result) == ["FloatingNumber"]
        assert result.diagnostics[0].location.char_pos == 7
        assert result.tokens[-1] == Token(TokenType.ERROR, "1.")


# =============================================================================
# String Error Tests
# =============================================================================

class TestStringErrors:
    """Test unterminated strings."""

    def test_unclosed_string(self):
        """Exactly one StringClosingError and no String token."""
        result = tokenize('"unclosed')
        assert kinds(result) == ["StringClosingError"]
        assert all(t.type is not TokenType.STRING for t in result.tokens)

    def test_unclosed_string_position(self):
        """Reported at the opening quote."""
        result = tokenize('print "abc')
        assert result.diagnostics[0].location.char_pos == 6

    def test_unclosed_after_valid_string(self):
        result = tokenize('"ok" "broken')
        assert kinds(result) == ["StringClosingError"]
        assert result.tokens[0] == Token(TokenType.STRING, "ok")


# =============================================================================
# Illegal Character Tests
# =============================================================================

class TestIllegalCharacters:
    """Test illegal characters and the literal follow set."""

    def test_non_ascii_character(self):
        result = tokenize("225 13 é")
        assert kinds(result) == ["IllegalCharacter"]
        diag = result.diagnostics[0]
        assert diag.location.char_pos == 7
        assert diag.detail == 233
        assert diag.description == "An illegal character of code [233] was encountered"

    def test_underscore(self):
        result = tokenize("_x")
        assert kinds(result) == ["IllegalCharacter"]
        assert result.diagnostics[0].detail == ord("_")

    def test_scanning_continues(self):
        """Every problem in the line is reported."""
        result = tokenize('$ 1 # "open')
        assert kinds(result) == [
            "IllegalCharacter",
            "IllegalCharacter",
            "StringClosingError",
        ]
        assert [d.location.char_pos for d in result.diagnostics] == [0, 4, 6]

    def test_integer_followed_by_letter(self):
        """``1024better`` breaks the follow set at the first letter."""
        result = tokenize("1024better")
        assert kinds(result) == ["IllegalCharacter"]
        assert result.diagnostics[0].location.char_pos == 4
        assert result.diagnostics[0].detail == ord("b")

    def test_string_followed_by_letter(self):
        result = tokenize('"a"b')
        assert kinds(result) == ["IllegalCharacter"]
        assert result.diagnostics[0].location.char_pos == 3

    def test_string_followed_by_string(self):
        result = tokenize('"a""b"')
        assert kinds(result) == ["IllegalCharacter"]
        assert result.diagnostics[0].detail == ord('"')

    def test_integer_followed_by_paren(self):
        result = tokenize("5(")
        assert kinds(result) == ["IllegalCharacter"]
        assert result.diagnostics[0].location.char_pos == 1

    def test_integer_followed_by_assign(self):
        result = tokenize("5=1")
        assert kinds(result) == ["IllegalCharacter"]

    def test_illegal_follower_reported_once(self):
        """A character breaking the follow set is not reported twice."""
        result = tokenize("12é")
        assert kinds(result) == ["IllegalCharacter"]
        assert result.diagnostics[0].location.char_pos == 2

    @pytest.mark.parametrize("follower", ["+", "-", "*", "/", " ", ",", ")"])
    def test_allowed_followers(self, follower):
        assert tokenize(f"1{follower}").ok
        assert tokenize(f'"s"{follower}').ok

    def test_identifier_has_no_follow_set(self):
        assert tokenize("f(x)").ok


# =============================================================================
# Token Formatting Tests
# =============================================================================

class TestTokenFormat:
    """Test Token string forms and columns."""

    def test_str(self):
        assert str(Token(TokenType.INT, 225)) == "Int(225)"
        assert str(Token(TokenType.KEYWORD, "var")) == 'Keyword("var")'
        assert str(Token(TokenType.STRING, "hi")) == 'String("hi")'
        assert str(Token(TokenType.LPAREN)) == "OpeningParen"
        assert str(Token(TokenType.RPAREN)) == "ClosingParen"
        assert str(Token(TokenType.ERROR, "1.5")) == "ErrorToken"

    def test_repr(self):
        assert repr(Token(TokenType.INT, 5, column=3)) == "Token(INT, 5, @3)"
        assert repr(Token(TokenType.PLUS, column=1)) == "Token(PLUS, @1)"

    def test_columns(self):
        tokens = tokenize('var x = "s"').tokens
        assert [t.column for t in tokens] == [0, 4, 6, 8]

    def test_column_not_compared(self):
        assert Token(TokenType.INT, 5, column=0) == Token(TokenType.INT, 5, column=9)

    def test_token_location(self):
        token = tokenize("print x").tokens[1]
        loc = token.location(PartialLocation.stdin(4))
        assert (loc.filename, loc.line, loc.char_pos) == ("stdin", 4, 6)


# =============================================================================
# Result and Location Tests
# =============================================================================

class TestLexResult:
    """Test LexResult and diagnostic locations."""

    def test_unwrap_success(self):
        assert tokenize("1").unwrap() == [Token(TokenType.INT, 1)]

    def test_unwrap_failure(self):
        with pytest.raises(FrontendError) as exc_info:
            tokenize('"open').unwrap()
        assert exc_info.value.diagnostics[0].kind is ErrorKind.STRING_CLOSING_ERROR

    def test_diagnostic_context(self):
        """Diagnostics carry the line's filename and number."""
        result = Lexer("a $", PartialLocation("prog.jl", 42)).tokenize()
        loc = result.diagnostics[0].location
        assert (loc.filename, loc.line, loc.char_pos) == ("prog.jl", 42, 2)
        assert result.diagnostics[0].source_line == "a $"

    def test_default_context(self):
        result = lex("$")
        assert result.diagnostics[0].location.filename == "not specified"

    def test_tokenize_twice(self):
        """A lexer can be run again with the same result."""
        lexer = Lexer("1 + $", PartialLocation.testing(0))
        first = lexer.tokenize()
        second = lexer.tokenize()
        assert first.tokens == second.tokens
        assert first.diagnostics == second.diagnostics
