"""Printers for WJS syntax trees.

`dump` renders an indented tree for diagnostics (the CLI's `-v` output).
`format_source` turns a tree back into WJS source text that parses to an
equivalent tree.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import List

from .ast import (
    Node, Program, LetStmt, AssignStmt, ExprStmt, Ident, NumberLit,
    StringLit, BooleanLit, NullLit, TemplateLit, TextPart, Interpolation,
    BinaryExpr, UnaryExpr, CallExpr, MemberExpr, IndexExpr,
)


def dump(node: Node) -> str:
    lines: List[str] = []
    write_tree(lines, node, 0)
    return '\n'.join(lines) + '\n'


def write_tree(lines: List[str], node: Node, indent: int) -> None:
    pad = '  ' * indent
    if isinstance(node, Program):
        lines.append(f"{pad}Program")
        for stmt in node.statements:
            write_tree(lines, stmt, indent + 1)
    elif isinstance(node, LetStmt):
        lines.append(f"{pad}LetStmt {node.name.name} =")
        write_tree(lines, node.value, indent + 1)
    elif isinstance(node, AssignStmt):
        lines.append(f"{pad}AssignStmt")
        write_tree(lines, node.target, indent + 1)
        write_tree(lines, node.value, indent + 1)
    elif isinstance(node, ExprStmt):
        lines.append(f"{pad}ExprStmt")
        write_tree(lines, node.value, indent + 1)
    elif isinstance(node, Ident):
        lines.append(f'{pad}Ident "{node.name}"')
    elif isinstance(node, NumberLit):
        if node.int_value is not None:
            lines.append(f"{pad}Number {node.int_value}")
        elif node.float_value is not None:
            lines.append(f"{pad}Number {node.float_value!r}")
        else:
            lines.append(f"{pad}Number <invalid>")
    elif isinstance(node, StringLit):
        lines.append(f"{pad}String {quote(node.value)}")
    elif isinstance(node, BooleanLit):
        lines.append(f"{pad}Boolean {'true' if node.value else 'false'}")
    elif isinstance(node, NullLit):
        lines.append(f"{pad}Null")
    elif isinstance(node, TemplateLit):
        lines.append(f"{pad}Template")
        for part in node.parts:
            write_tree(lines, part, indent + 1)
    elif isinstance(node, TextPart):
        lines.append(f"{pad}Text {quote(node.value)}")
    elif isinstance(node, Interpolation):
        lines.append(f"{pad}Interpolation")
        write_tree(lines, node.expr, indent + 1)
    elif isinstance(node, BinaryExpr):
        lines.append(f'{pad}BinaryExpr "{node.operator}"')
        write_tree(lines, node.left, indent + 1)
        write_tree(lines, node.right, indent + 1)
    elif isinstance(node, UnaryExpr):
        lines.append(f'{pad}UnaryExpr "{node.operator}"')
        write_tree(lines, node.operand, indent + 1)
    elif isinstance(node, CallExpr):
        lines.append(f"{pad}CallExpr")
        write_tree(lines, node.callee, indent + 1)
        for arg in node.args:
            write_tree(lines, arg, indent + 2)
    elif isinstance(node, MemberExpr):
        lines.append(f"{pad}MemberExpr")
        write_tree(lines, node.object, indent + 1)
        write_tree(lines, node.field, indent + 1)
    elif isinstance(node, IndexExpr):
        lines.append(f"{pad}IndexExpr")
        write_tree(lines, node.target, indent + 1)
        write_tree(lines, node.index, indent + 1)
    else:
        lines.append(f"{pad}<unknown node type>")


def quote(value: str, delimiter: str = '"') -> str:
    out = value.replace('\\', '\\\\').replace(delimiter, '\\' + delimiter)
    out = out.replace('\n', '\\n').replace('\t', '\\t').replace('\r', '\\r').replace('\0', '\\0')
    return delimiter + out + delimiter


def format_float(value: float) -> str:
    """Positional float text that the lexer reads back as a float."""
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"float literal {value!r} has no WJS source form")
    text = format(Decimal(repr(value)), 'f')
    if '.' not in text:
        text += '.0'
    return text


def format_source(node: Node, in_template: bool = False) -> str:
    """Render a tree as WJS source; binary and unary sub-expressions are parenthesised.

    `in_template` is set below an interpolation, where a string literal must
    not contain a bare backtick.
    """
    def sub(child: Node) -> str:
        return format_source(child, in_template)

    if isinstance(node, Program):
        return ''.join(sub(stmt) + '\n' for stmt in node.statements)
    if isinstance(node, LetStmt):
        return f"let {node.name.name} = {sub(node.value)};"
    if isinstance(node, AssignStmt):
        return f"{sub(node.target)} = {sub(node.value)};"
    if isinstance(node, ExprStmt):
        return f"{sub(node.value)};"
    if isinstance(node, Ident):
        return node.name
    if isinstance(node, NumberLit):
        if node.int_value is not None:
            return str(node.int_value)
        return format_float(node.float_value)
    if isinstance(node, StringLit):
        text = quote(node.value)
        return text.replace('`', '\\`') if in_template else text
    if isinstance(node, BooleanLit):
        return 'true' if node.value else 'false'
    if isinstance(node, NullLit):
        return 'null'
    if isinstance(node, TemplateLit):
        return '`' + ''.join(format_source(part, True) for part in node.parts) + '`'
    if isinstance(node, TextPart):
        return quote(node.value, '`')[1:-1].replace('$', '\\$')
    if isinstance(node, Interpolation):
        return '${' + format_source(node.expr, True) + '}'
    if isinstance(node, BinaryExpr):
        return f"({sub(node.left)} {node.operator} {sub(node.right)})"
    if isinstance(node, UnaryExpr):
        return f"({node.operator}{sub(node.operand)})"
    if isinstance(node, CallExpr):
        args = ', '.join(sub(arg) for arg in node.args)
        return f"{sub(node.callee)}({args})"
    if isinstance(node, MemberExpr):
        return f"{sub(node.object)}.{node.field.name}"
    if isinstance(node, IndexExpr):
        return f"{sub(node.target)}[{sub(node.index)}]"
    raise TypeError(f"cannot format node {type(node).__name__}")
