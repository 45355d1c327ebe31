"""Abstract Syntax Tree (AST) definitions for WJS.

The classes defined in this module represent the syntactic structure of
parsed WJS programs. Nodes are immutable once built: the parser creates a
program once and the interpreter only reads it. Every node records the
source position it came from so that validation and runtime errors can
point back at the script.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .tokens import Position, NO_POS


class Node:
    """Base class for all AST nodes."""
    pos: Position


class Stmt(Node):
    """Marker base for statement nodes."""


class Expr(Node):
    """Marker base for expression nodes."""


class TemplatePart(Node):
    """Marker base for the pieces of a template literal."""


# Statements

@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Stmt, ...]
    pos: Position = NO_POS


@dataclass(frozen=True)
class Ident(Expr):
    name: str
    pos: Position = NO_POS


@dataclass(frozen=True)
class LetStmt(Stmt):
    name: Ident
    value: Expr
    pos: Position = NO_POS


@dataclass(frozen=True)
class AssignStmt(Stmt):
    target: Expr  # Ident, MemberExpr or IndexExpr
    value: Expr
    pos: Position = NO_POS


@dataclass(frozen=True)
class ExprStmt(Stmt):
    value: Expr
    pos: Position = NO_POS


# Literals

@dataclass(frozen=True)
class NumberLit(Expr):
    """A numeric literal; exactly one of the two values is set."""
    int_value: Optional[int] = None
    float_value: Optional[float] = None
    pos: Position = NO_POS


@dataclass(frozen=True)
class StringLit(Expr):
    value: str
    pos: Position = NO_POS


@dataclass(frozen=True)
class BooleanLit(Expr):
    value: bool
    pos: Position = NO_POS


@dataclass(frozen=True)
class NullLit(Expr):
    pos: Position = NO_POS


@dataclass(frozen=True)
class TextPart(TemplatePart):
    value: str
    pos: Position = NO_POS


@dataclass(frozen=True)
class Interpolation(TemplatePart):
    expr: Expr
    pos: Position = NO_POS


@dataclass(frozen=True)
class TemplateLit(Expr):
    parts: Tuple[TemplatePart, ...]
    pos: Position = NO_POS


# Composite expressions

@dataclass(frozen=True)
class BinaryExpr(Expr):
    left: Expr
    operator: str
    right: Expr
    pos: Position = NO_POS


@dataclass(frozen=True)
class UnaryExpr(Expr):
    operator: str  # '-' or '!'
    operand: Expr
    pos: Position = NO_POS


@dataclass(frozen=True)
class CallExpr(Expr):
    callee: Expr
    args: Tuple[Expr, ...]
    pos: Position = NO_POS


@dataclass(frozen=True)
class MemberExpr(Expr):
    object: Expr
    field: Ident
    pos: Position = NO_POS


@dataclass(frozen=True)
class IndexExpr(Expr):
    target: Expr
    index: Expr
    pos: Position = NO_POS


ASSIGNABLE = (Ident, MemberExpr, IndexExpr)
