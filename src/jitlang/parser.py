"""
JitLang Recursive Descent Parser
================================

This module implements the parser for one line of JitLang. It takes the
token list produced by the lexer and builds a single statement whose
expressions form a tree.

Grammar (Simplified EBNF)
-------------------------
statement   ::= var_decl | print_stmt | var_edit | func_call
var_decl    ::= 'var' IDENTIFIER '=' expr
print_stmt  ::= 'print' expr
var_edit    ::= IDENTIFIER '=' expr
func_call   ::= IDENTIFIER '(' (expr (',' expr)*)? ')'

expr        ::= operand ('+' operand)*
operand     ::= INT | STRING | IDENTIFIER | '(' expr ')'

Associativity
-------------
A chain of '+' folds from the right: ``1+2+3`` is
``BinaryExpr(+, 1, BinaryExpr(+, 2, 3))``. Addition of unsigned integers
gives the same value either way, but string concatenation order is
observable, so the right-associative shape is kept deliberately.

'-', '*' and '/' are lexed but not composed into expressions yet. They
are reported as UnsupportedOperator.

Error Handling
--------------
The parser never raises for bad input. Each problem is recorded as a
diagnostic and an ErrorExpr (inside expressions) or NoneOrError (for the
statement) takes the place of the part that could not be built. After an
unexpected token the parser skips to the next ')' or ',' so one mistake
produces one diagnostic.

Example Usage
-------------
>>> from jitlang.errors import PartialLocation
>>> from jitlang.lexer import lex
>>> from jitlang.parser import parse
>>> from jitlang.ast import expr_to_source
>>> context = PartialLocation.testing(0)
>>> tokens = lex("var x = 1+2+3", context).unwrap()
>>> result = parse(tokens, context, "var x = 1+2+3")
>>> expr_to_source(result.statement.value)
'(1 + (2 + 3))'
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from jitlang.errors import Location, PartialLocation
from jitlang.diagnostics import Diagnostic, FrontendError, has_errors
from jitlang.lexer import Token, TokenType, lex
from jitlang.ast import (
    Expr,
    Statement,
    Operator,
    IntLiteral,
    StringLiteral,
    IdentifierExpr,
    BinaryExpr,
    ErrorExpr,
    VarDeclaration,
    PrintStatement,
    VarEdit,
    FuncCall,
    NoneOrError,
)


# Deepest accepted nesting of parentheses
MAX_NESTING_DEPTH = 200

# Tokens that end an expression without being part of it
_EXPRESSION_END = (TokenType.RPAREN, TokenType.COMMA)


# =============================================================================
# Parser Result
# =============================================================================

@dataclass
class ParseResult:
    """
    Outcome of parsing one line.

    Attributes:
        statement: The statement, NoneOrError when none could be built
        diagnostics: Problems found, in source order
    """
    statement: Statement = field(default_factory=NoneOrError)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not has_errors(self.diagnostics)

    def unwrap(self) -> Statement:
        """
        Return the statement of a valid line.

        Raises:
            FrontendError: If the line produced error diagnostics
        """
        if not self.ok:
            raise FrontendError(self.diagnostics)
        return self.statement


# =============================================================================
# Parser Implementation
# =============================================================================

class Parser:
    """
    Recursive descent parser for one line of JitLang.

    The parser walks the tokens strictly left to right with one token of
    lookahead: ``_current`` is the token under the cursor (None past the
    end) and ``_advance()`` moves to the next one.

    Usage:
        parser = Parser(tokens, PartialLocation.stdin(1), line)
        result = parser.build_tree()

    Attributes:
        tokens: Tokens of the line, in source order
        context: Filename and line number used for diagnostics
        source_line: Raw text of the line, shown in diagnostics
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        context: PartialLocation,
        source_line: str = "",
    ):
        self.tokens = list(tokens)
        self.context = context
        self.source_line = source_line.rstrip()
        self._reset()

    def _reset(self) -> None:
        self._pos = -1
        self._current: Optional[Token] = None
        self._diagnostics: List[Diagnostic] = []
        self._depth = 0
        self._aborted = False
        # Token indices already reported as UnexpectedToken
        self._reported: set[int] = set()

    def build_tree(self) -> ParseResult:
        """
        Parse the tokens into one statement.

        An empty token list gives NoneOrError with no diagnostics.

        Returns:
            ParseResult with the statement and every diagnostic found
        """
        self._reset()
        self._advance()

        if self._current is None:
            return ParseResult(NoneOrError(), [])

        statement = self._parse_statement()

        if self._current is not None and not self._aborted:
            self._unexpected()

        return ParseResult(statement, self._diagnostics)

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _advance(self) -> None:
        """Move the cursor one token forward."""
        self._pos += 1
        if self._pos < len(self.tokens):
            self._current = self.tokens[self._pos]
        else:
            self._current = None

    def _check(self, token_type: TokenType) -> bool:
        return self._current is not None and self._current.type is token_type

    def _match(self, token_type: TokenType) -> bool:
        """Consume the current token if it has the given type."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _here(self) -> Location:
        """Location of the current token, or the end of the line."""
        if self._current is not None:
            return self._current.location(self.context)
        return self.context.to_location(len(self.source_line))

    def _synchronize(self) -> None:
        """Skip tokens up to the next ')' or ',' or the end of the line."""
        while self._current is not None and self._current.type not in _EXPRESSION_END:
            self._advance()

    def _skip_to_end(self) -> None:
        while self._current is not None:
            self._advance()

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def _expected(self, expected: str) -> None:
        self._diagnostics.append(
            Diagnostic.expected_token(self._here(), self.source_line, expected)
        )

    def _unexpected(self) -> None:
        """Report the current token, at most once per token."""
        if self._pos in self._reported:
            return
        self._reported.add(self._pos)
        token = self._current
        self._diagnostics.append(
            Diagnostic.unexpected_token(
                token.location(self.context), self.source_line, str(token)
            )
        )

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_statement(self) -> Statement:
        token = self._current

        if token.is_keyword("var"):
            return self._parse_var_declaration()

        if token.is_keyword("print"):
            return self._parse_print_statement()

        if token.type is TokenType.IDENTIFIER:
            return self._parse_identifier_statement()

        self._unexpected()
        self._skip_to_end()
        return NoneOrError()

    def _parse_var_declaration(self) -> Statement:
        """
        Parse ``var IDENTIFIER = expr``.

        The identifier and '=' checks are independent: a missing
        identifier is reported and the parser still looks for '='.
        """
        self._advance()  # consume 'var'
        header_ok = True

        identifier = ""
        if self._check(TokenType.IDENTIFIER):
            identifier = self._current.value
            self._advance()
        else:
            self._expected("Identifier")
            header_ok = False
            # A misplaced token stands where the name should be
            if self._current is not None and not self._check(TokenType.ASSIGN):
                self._advance()

        if not self._match(TokenType.ASSIGN):
            self._expected("Assign")
            header_ok = False

        if not header_ok and self._current is None:
            return NoneOrError()

        value = self._parse_expression()

        if not header_ok:
            return NoneOrError()
        return VarDeclaration(identifier=identifier, value=value)

    def _parse_print_statement(self) -> Statement:
        """Parse ``print expr``."""
        self._advance()  # consume 'print'
        return PrintStatement(value=self._parse_expression())

    def _parse_identifier_statement(self) -> Statement:
        """Parse ``name = expr`` or ``name(args)``."""
        name = self._current.value
        self._advance()

        if self._match(TokenType.ASSIGN):
            return VarEdit(identifier=name, value=self._parse_expression())

        if self._match(TokenType.LPAREN):
            return FuncCall(identifier=name, args=tuple(self._parse_arguments()))

        if self._current is None:
            self._expected("Assign")
        else:
            self._unexpected()
            self._skip_to_end()
        return NoneOrError()

    def _parse_arguments(self) -> List[Expr]:
        """Parse call arguments after '(' up to and including ')'."""
        arguments: List[Expr] = []

        if self._match(TokenType.RPAREN):
            return arguments

        while True:
            arguments.append(self._parse_expression())
            if not self._match(TokenType.COMMA):
                break

        if self._aborted:
            return arguments

        if not self._match(TokenType.RPAREN):
            if self._current is None:
                self._expected("ClosingParen")
            else:
                self._unexpected()
                self._skip_to_end()

        return arguments

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expr:
        """
        Parse ``operand ('+' operand)*``.

        Operands are collected left to right and folded from the right,
        which gives right-associative trees without deep recursion on
        long chains.
        """
        operands = [self._parse_operand()]
        failed = False

        while self._current is not None and self._current.type not in _EXPRESSION_END:
            token = self._current

            if token.type is TokenType.PLUS:
                self._advance()
                operands.append(self._parse_operand())
                continue

            operator = Operator.from_token_type(token.type)
            if operator is not None:
                # Keep parsing the right-hand side to surface further errors
                self._diagnostics.append(
                    Diagnostic.unsupported_operator(
                        token.location(self.context), self.source_line, operator.symbol
                    )
                )
                self._advance()
                operands.append(self._parse_operand())
                failed = True
                continue

            self._unexpected()
            self._synchronize()
            failed = True
            break

        if failed:
            return ErrorExpr()

        result = operands[-1]
        for operand in reversed(operands[:-1]):
            result = BinaryExpr(operator=Operator.PLUS, left=operand, right=result)
        return result

    def _parse_operand(self) -> Expr:
        """Parse a literal, an identifier or a parenthesised expression."""
        token = self._current

        if token is None:
            self._expected("Expression")
            return ErrorExpr()

        if token.type is TokenType.INT:
            self._advance()
            return IntLiteral(value=token.value)

        if token.type is TokenType.STRING:
            self._advance()
            return StringLiteral(value=token.value)

        if token.type is TokenType.IDENTIFIER:
            self._advance()
            return IdentifierExpr(name=token.value)

        if token.type is TokenType.LPAREN:
            return self._parse_group()

        self._unexpected()
        self._synchronize()
        return ErrorExpr()

    def _parse_group(self) -> Expr:
        """
        Parse ``'(' expr ')'``; the group itself produces no node.

        An empty group ``()`` is rejected.
        """
        self._advance()  # consume '('

        if self._check(TokenType.RPAREN):
            self._unexpected()
            self._advance()
            return ErrorExpr()

        self._depth += 1
        if self._depth > MAX_NESTING_DEPTH:
            self._diagnostics.append(
                Diagnostic.syntax_error(self._here(), self.source_line)
            )
            self._aborted = True
            self._skip_to_end()
            return ErrorExpr()

        inner = self._parse_expression()
        self._depth -= 1

        if self._aborted:
            return ErrorExpr()

        if self._match(TokenType.RPAREN):
            return inner

        if self._current is None:
            self._expected("ClosingParen")
        else:
            # Only ',' can stop an expression here
            self._unexpected()
            while self._current is not None and not self._check(TokenType.RPAREN):
                self._advance()
            self._match(TokenType.RPAREN)
        return ErrorExpr()


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(
    tokens: Iterable[Token],
    context: Optional[PartialLocation] = None,
    source_line: str = "",
) -> ParseResult:
    """
    Parse a token sequence into one statement.

    Args:
        tokens: Tokens of a lexically valid line
        context: Location of the line (defaults to an unspecified file)
        source_line: Raw text of the line for diagnostics

    Returns:
        ParseResult with the statement and diagnostics
    """
    if context is None:
        context = PartialLocation.not_specified(0)
    return Parser(tokens, context, source_line).build_tree()


def parse_source(line: str, context: Optional[PartialLocation] = None) -> ParseResult:
    """
    Lex and parse one line of source.

    If lexing fails the parser is not run and the lexical diagnostics are
    returned with a NoneOrError statement.
    """
    if context is None:
        context = PartialLocation.not_specified(0)

    lexed = lex(line, context)
    if not lexed.ok:
        return ParseResult(NoneOrError(), lexed.diagnostics)
    return parse(lexed.tokens, context, line)
