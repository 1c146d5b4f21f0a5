"""
JitLang - Line-Oriented Front-End for a Small Interpreted Language
==================================================================

This package implements the front-end of JitLang: a lexer and a recursive
descent parser that turn one line of source text into either a syntax
tree or a list of located, human-readable diagnostics.

Pipeline
--------
Every input line is processed independently:

    line → Lexer → tokens → Parser → statement

A line that fails to lex is never parsed. Neither stage raises for bad
input; every problem becomes a Diagnostic with a filename, line number
and character offset.

Main Components
---------------
- **errors**: JitLangError and the Location / PartialLocation types
- **diagnostics**: Diagnostic values, ErrorKind and DiagnosticCollector
- **lexer**: Token, TokenType and the single-line Lexer
- **ast**: Statement and expression nodes, ASTVisitor, ASTPrinter
- **parser**: Parser building one statement per line
- **frontend**: LineFrontend driving both stages over many lines
- **cli**: the ``jitl`` command-line tool

Quick Start
-----------
    >>> from jitlang import lex, parse_source, PartialLocation
    >>> context = PartialLocation.stdin(1)
    >>> [str(t) for t in lex("print 1+2", context).tokens]
    ['Keyword("print")', 'Int(1)', 'Plus', 'Int(2)']
    >>> parse_source("var 12 = 5", context).ok
    False

Or use the command-line tool:
    $ jitl program.jl
    $ echo 'var x = (1+2)+3' | jitl --tokens

Language Subset
---------------
Supported:
- Statements: var declaration, print, assignment, function call
- Literals: unsigned 64-bit integers, double-quoted strings
- Operators: '+' (right-associative), parentheses for grouping

Lexed but rejected in expressions:
- '-', '*', '/'

Not supported:
- Fractional numbers, escape sequences, multi-line constructs
"""

__version__ = "1.0.0"
__author__ = "JitLang Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from jitlang.errors import (
    JitLangError,
    Location,
    PartialLocation,
)
from jitlang.diagnostics import (
    Severity,
    ErrorKind,
    Diagnostic,
    DiagnosticCollector,
    FrontendError,
    has_errors,
    render_diagnostics,
)
from jitlang.lexer import (
    TokenType,
    Token,
    Lexer,
    LexResult,
    KEYWORDS,
    lex,
)
from jitlang.ast import (
    Operator,
    Node,
    Expr,
    Statement,
    IntLiteral,
    StringLiteral,
    IdentifierExpr,
    BinaryExpr,
    BlockExpr,
    ErrorExpr,
    VarDeclaration,
    PrintStatement,
    VarEdit,
    FuncCall,
    NoneOrError,
    ASTVisitor,
    ASTPrinter,
    expr_to_source,
)
from jitlang.parser import (
    Parser,
    ParseResult,
    parse,
    parse_source,
)
from jitlang.frontend import (
    FrontendOptions,
    LineFrontend,
    LineResult,
    process_line,
)

__all__ = [
    # Version
    "__version__",
    # Errors and locations
    "JitLangError",
    "Location",
    "PartialLocation",
    # Diagnostics
    "Severity",
    "ErrorKind",
    "Diagnostic",
    "DiagnosticCollector",
    "FrontendError",
    "has_errors",
    "render_diagnostics",
    # Lexer
    "TokenType",
    "Token",
    "Lexer",
    "LexResult",
    "KEYWORDS",
    "lex",
    # AST
    "Operator",
    "Node",
    "Expr",
    "Statement",
    "IntLiteral",
    "StringLiteral",
    "IdentifierExpr",
    "BinaryExpr",
    "BlockExpr",
    "ErrorExpr",
    "VarDeclaration",
    "PrintStatement",
    "VarEdit",
    "FuncCall",
    "NoneOrError",
    "ASTVisitor",
    "ASTPrinter",
    "expr_to_source",
    # Parser
    "Parser",
    "ParseResult",
    "parse",
    "parse_source",
    # Front-end
    "FrontendOptions",
    "LineFrontend",
    "LineResult",
    "process_line",
]
