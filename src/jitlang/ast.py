"""
JitLang Abstract Syntax Tree (AST) Definitions
===============================================

This module defines the AST node types produced by the JitLang parser.
One source line parses to exactly one statement, which owns a tree of
expressions.

Node Hierarchy
--------------
Node (base)
├── Expressions (Expr)
│   ├── IntLiteral - unsigned integer constant
│   ├── StringLiteral - string constant
│   ├── IdentifierExpr - variable reference
│   ├── BinaryExpr - binary operation
│   ├── BlockExpr - sequence of statements
│   └── ErrorExpr - placeholder for an unparseable sub-expression
└── Statements (Statement)
    ├── VarDeclaration - var name = expr
    ├── PrintStatement - print expr
    ├── VarEdit - name = expr
    ├── FuncCall - name(expr, ...)
    └── NoneOrError - no statement, or statement construction failed

Design Notes
------------
- All nodes are frozen dataclasses compared structurally, which is what
  the tests rely on
- Child sequences are tuples, so every node is immutable and hashable
- Parentheses never appear in the tree
- Chained '+' is right-associative: 1+2+3 is BinaryExpr(1, BinaryExpr(2, 3))
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Optional, Tuple

from jitlang.lexer import TokenType


# =============================================================================
# Operators
# =============================================================================

class Operator(Enum):
    """Binary operators. Only PLUS is built into expressions today."""
    PLUS = "+"
    MINUS = "-"
    MUL = "*"
    DIV = "/"

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_token_type(cls, token_type: TokenType) -> Optional["Operator"]:
        """Map an operator token type to its Operator, or None."""
        return _OPERATOR_TOKENS.get(token_type)


_OPERATOR_TOKENS = {
    TokenType.PLUS: Operator.PLUS,
    TokenType.MINUS: Operator.MINUS,
    TokenType.MUL: Operator.MUL,
    TokenType.DIV: Operator.DIV,
}


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""


@dataclass(frozen=True)
class Expr(Node):
    """Base class for nodes that evaluate to a value."""


@dataclass(frozen=True)
class Statement(Node):
    """Base class for nodes that represent a whole line."""


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class IntLiteral(Expr):
    """
    Integer literal.

    Attributes:
        value: Unsigned 64-bit value
    """
    value: int = 0


@dataclass(frozen=True)
class StringLiteral(Expr):
    """
    String literal.

    Attributes:
        value: Text between the quotes
    """
    value: str = ""


@dataclass(frozen=True)
class IdentifierExpr(Expr):
    """
    Variable reference.

    Attributes:
        name: The variable name
    """
    name: str = ""


@dataclass(frozen=True)
class BinaryExpr(Expr):
    """
    Binary operation (left op right).

    Attributes:
        operator: The binary operator
        left: Left operand
        right: Right operand
    """
    operator: Operator = Operator.PLUS
    left: Expr = None
    right: Expr = None


@dataclass(frozen=True)
class BlockExpr(Expr):
    """
    Block of statements used as an expression.

    Attributes:
        statements: Statements in order
    """
    statements: Tuple[Statement, ...] = ()


@dataclass(frozen=True)
class ErrorExpr(Expr):
    """Placeholder for a sub-expression that could not be parsed."""


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class VarDeclaration(Statement):
    """
    Variable declaration: ``var name = value``.

    Attributes:
        identifier: Variable name
        value: Initial value
    """
    identifier: str = ""
    value: Expr = None


@dataclass(frozen=True)
class PrintStatement(Statement):
    """
    Print statement: ``print value``.

    Attributes:
        value: Expression to print
    """
    value: Expr = None


@dataclass(frozen=True)
class VarEdit(Statement):
    """
    Assignment to an existing variable: ``name = value``.

    Attributes:
        identifier: Variable name
        value: New value
    """
    identifier: str = ""
    value: Expr = None


@dataclass(frozen=True)
class FuncCall(Statement):
    """
    Function call statement: ``name(arg, ...)``.

    Attributes:
        identifier: Function name
        args: Argument expressions in order
    """
    identifier: str = ""
    args: Tuple[Expr, ...] = ()


@dataclass(frozen=True)
class NoneOrError(Statement):
    """No statement was produced, or building it failed."""


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Dispatches on the node class name to ``visit_<ClassName>``; nodes
    without a specific method go to generic_visit, which visits children.

    Usage:
        class LiteralCounter(ASTVisitor):
            def __init__(self):
                self.count = 0

            def visit_IntLiteral(self, node):
                self.count += 1

        counter = LiteralCounter()
        counter.visit(statement)
    """

    def visit(self, node: Node) -> Any:
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Node) -> None:
        """
        Visit all child nodes in field order.

        Nodes without a specific method are expanded on an explicit stack,
        so long chains do not hit the recursion limit.
        """
        stack = list(reversed(_child_nodes(node)))
        while stack:
            child = stack.pop()
            visitor = getattr(self, f"visit_{child.__class__.__name__}", None)
            if visitor is not None:
                visitor(child)
            else:
                stack.extend(reversed(_child_nodes(child)))


def _child_nodes(node: Node) -> list:
    """Direct child nodes of a node, in field order."""
    children = []
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, Node):
            children.append(value)
        elif isinstance(value, tuple):
            children.extend(item for item in value if isinstance(item, Node))
    return children


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Produces one line per node, children indented by two spaces.

    Usage:
        printer = ASTPrinter()
        print(printer.print(statement))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: Node) -> str:
        """Print the AST and return it as a string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _children(self, *nodes: Node) -> None:
        self.indent_level += 1
        for node in nodes:
            self.visit(node)
        self.indent_level -= 1

    # Statements

    def visit_VarDeclaration(self, node: VarDeclaration):
        self._emit(f"VarDeclaration: {node.identifier}")
        self._children(node.value)

    def visit_PrintStatement(self, node: PrintStatement):
        self._emit("Print")
        self._children(node.value)

    def visit_VarEdit(self, node: VarEdit):
        self._emit(f"VarEdit: {node.identifier}")
        self._children(node.value)

    def visit_FuncCall(self, node: FuncCall):
        self._emit(f"FuncCall: {node.identifier} ({len(node.args)} args)")
        self._children(*node.args)

    def visit_NoneOrError(self, node: NoneOrError):
        self._emit("NoneOrError")

    # Expressions

    def visit_IntLiteral(self, node: IntLiteral):
        self._emit(f"Int: {node.value}")

    def visit_StringLiteral(self, node: StringLiteral):
        self._emit(f'String: "{node.value}"')

    def visit_IdentifierExpr(self, node: IdentifierExpr):
        self._emit(f"Identifier: {node.name}")

    def visit_BinaryExpr(self, node: BinaryExpr):
        # Right-nested chains are unrolled so long '+' chains do not recurse
        depth = 0
        while isinstance(node, BinaryExpr):
            self._emit(f"BinaryExpr ({node.operator.symbol})")
            self.indent_level += 1
            self.visit(node.left)
            node = node.right
            depth += 1
        self.visit(node)
        self.indent_level -= depth

    def visit_BlockExpr(self, node: BlockExpr):
        self._emit("Block")
        self._children(*node.statements)

    def visit_ErrorExpr(self, node: ErrorExpr):
        self._emit("ErrorExpr")


def expr_to_source(expr: Expr) -> str:
    """
    Render an expression on one line, every binary node parenthesised.

    ``1+2+3`` parses to ``(1 + (2 + 3))``.
    """
    if isinstance(expr, IntLiteral):
        return str(expr.value)
    if isinstance(expr, StringLiteral):
        return f'"{expr.value}"'
    if isinstance(expr, IdentifierExpr):
        return expr.name
    if isinstance(expr, BinaryExpr):
        heads = []
        while isinstance(expr, BinaryExpr):
            heads.append(f"({expr_to_source(expr.left)} {expr.operator.symbol} ")
            expr = expr.right
        return "".join(heads) + expr_to_source(expr) + ")" * len(heads)
    if isinstance(expr, BlockExpr):
        return "{ ... }"
    return "<error>"
