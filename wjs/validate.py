"""Semantic validation of a parsed WJS tree.

`check_valid` is a separate pass from parsing so that tooling can check a
program without running it. It walks the tree and raises `ValidationError`
for the first defect it finds.
"""

from __future__ import annotations

from .ast import (
    Node, Program, LetStmt, AssignStmt, ExprStmt, Ident, NumberLit,
    StringLit, BooleanLit, NullLit, TemplateLit, TextPart, Interpolation,
    BinaryExpr, UnaryExpr, CallExpr, MemberExpr, IndexExpr, ASSIGNABLE,
)
from .errors import ValidationError
from .tokens import NO_POS


def check_valid(node: Node) -> None:
    """Raise ValidationError for the first semantic defect under `node`."""
    if node is None:
        raise ValidationError(NO_POS, "missing node")
    pos = getattr(node, 'pos', NO_POS)

    if isinstance(node, Program):
        for stmt in node.statements:
            check_valid(stmt)
    elif isinstance(node, LetStmt):
        if node.name is None or not node.name.name:
            raise ValidationError(pos, "invalid let statement: missing variable name")
        check_valid(node.value)
    elif isinstance(node, AssignStmt):
        if not isinstance(node.target, ASSIGNABLE):
            raise ValidationError(pos, "invalid assignment target: must be identifier, member, or index")
        check_valid(node.target)
        check_valid(node.value)
    elif isinstance(node, ExprStmt):
        check_valid(node.value)
    elif isinstance(node, BinaryExpr):
        # walk the left spine of an operator chain without recursing
        spine = []
        while isinstance(node, BinaryExpr):
            if node.left is None or node.right is None or not node.operator:
                raise ValidationError(node.pos, "incomplete binary expression")
            spine.append(node)
            node = node.left
        check_valid(node)
        for expr in reversed(spine):
            check_valid(expr.right)
    elif isinstance(node, UnaryExpr):
        if node.operand is None:
            raise ValidationError(pos, "missing operand in unary expression")
        check_valid(node.operand)
    elif isinstance(node, CallExpr):
        check_valid(node.callee)
        for arg in node.args:
            check_valid(arg)
    elif isinstance(node, MemberExpr):
        check_valid(node.object)
        if node.field is None or not node.field.name:
            raise ValidationError(pos, "invalid member field")
    elif isinstance(node, IndexExpr):
        check_valid(node.target)
        check_valid(node.index)
    elif isinstance(node, TemplateLit):
        if not node.parts:
            raise ValidationError(pos, "empty template string")
        for part in node.parts:
            check_valid(part)
    elif isinstance(node, Interpolation):
        if node.expr is None:
            raise ValidationError(pos, "missing expression in interpolation")
        check_valid(node.expr)
    elif isinstance(node, Ident):
        if not node.name:
            raise ValidationError(pos, "empty identifier")
    elif isinstance(node, NumberLit):
        if (node.int_value is None) == (node.float_value is None):
            raise ValidationError(pos, "number literal must hold exactly one value")
    elif isinstance(node, (StringLit, BooleanLit, NullLit, TextPart)):
        pass
    else:
        raise ValidationError(pos, f"unknown or unsupported AST node {type(node).__name__}")
