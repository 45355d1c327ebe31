"""JSON serialization/deserialization for the WJS AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Every node carries its position as
`[line, column, offset, script]`, and every node type round-trips.
"""

from __future__ import annotations

from typing import Any, List

from .ast import (
    Program,
    LetStmt,
    AssignStmt,
    ExprStmt,
    Ident,
    NumberLit,
    StringLit,
    BooleanLit,
    NullLit,
    TemplateLit,
    TextPart,
    Interpolation,
    BinaryExpr,
    UnaryExpr,
    CallExpr,
    MemberExpr,
    IndexExpr,
)
from .tokens import Position


def pos_to_obj(pos: Position) -> List[Any]:
    return [pos.line, pos.column, pos.offset, pos.script]


def pos_from_obj(o: Any) -> Position:
    if not o:
        return Position()
    line, column, offset, script = o
    return Position(line, column, offset, script)


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    pos = pos_to_obj(node.pos)
    if isinstance(node, Program):
        return {"type": "Program", "pos": pos, "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, LetStmt):
        return {"type": "LetStmt", "pos": pos, "name": ast_to_obj(node.name), "value": ast_to_obj(node.value)}
    if isinstance(node, AssignStmt):
        return {"type": "AssignStmt", "pos": pos, "target": ast_to_obj(node.target), "value": ast_to_obj(node.value)}
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "pos": pos, "value": ast_to_obj(node.value)}
    if isinstance(node, Ident):
        return {"type": "Ident", "pos": pos, "name": node.name}
    if isinstance(node, NumberLit):
        return {"type": "NumberLit", "pos": pos, "int_value": node.int_value, "float_value": node.float_value}
    if isinstance(node, StringLit):
        return {"type": "StringLit", "pos": pos, "value": node.value}
    if isinstance(node, BooleanLit):
        return {"type": "BooleanLit", "pos": pos, "value": node.value}
    if isinstance(node, NullLit):
        return {"type": "NullLit", "pos": pos}
    if isinstance(node, TemplateLit):
        return {"type": "TemplateLit", "pos": pos, "parts": [ast_to_obj(p) for p in node.parts]}
    if isinstance(node, TextPart):
        return {"type": "TextPart", "pos": pos, "value": node.value}
    if isinstance(node, Interpolation):
        return {"type": "Interpolation", "pos": pos, "expr": ast_to_obj(node.expr)}
    if isinstance(node, BinaryExpr):
        return {
            "type": "BinaryExpr",
            "pos": pos,
            "operator": node.operator,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, UnaryExpr):
        return {"type": "UnaryExpr", "pos": pos, "operator": node.operator, "operand": ast_to_obj(node.operand)}
    if isinstance(node, CallExpr):
        return {"type": "CallExpr", "pos": pos, "callee": ast_to_obj(node.callee), "args": [ast_to_obj(a) for a in node.args]}
    if isinstance(node, MemberExpr):
        return {"type": "MemberExpr", "pos": pos, "object": ast_to_obj(node.object), "field": ast_to_obj(node.field)}
    if isinstance(node, IndexExpr):
        return {"type": "IndexExpr", "pos": pos, "target": ast_to_obj(node.target), "index": ast_to_obj(node.index)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    pos = pos_from_obj(obj.get("pos"))
    if t == "Program":
        return Program(tuple(ast_from_obj(s) for s in obj["statements"]), pos=pos)
    if t == "LetStmt":
        return LetStmt(ast_from_obj(obj["name"]), ast_from_obj(obj["value"]), pos=pos)
    if t == "AssignStmt":
        return AssignStmt(ast_from_obj(obj["target"]), ast_from_obj(obj["value"]), pos=pos)
    if t == "ExprStmt":
        return ExprStmt(ast_from_obj(obj["value"]), pos=pos)
    if t == "Ident":
        return Ident(obj["name"], pos=pos)
    if t == "NumberLit":
        float_value = obj.get("float_value")
        return NumberLit(
            int_value=obj.get("int_value"),
            float_value=float(float_value) if float_value is not None else None,
            pos=pos,
        )
    if t == "StringLit":
        return StringLit(obj["value"], pos=pos)
    if t == "BooleanLit":
        return BooleanLit(bool(obj["value"]), pos=pos)
    if t == "NullLit":
        return NullLit(pos=pos)
    if t == "TemplateLit":
        return TemplateLit(tuple(ast_from_obj(p) for p in obj["parts"]), pos=pos)
    if t == "TextPart":
        return TextPart(obj["value"], pos=pos)
    if t == "Interpolation":
        return Interpolation(ast_from_obj(obj.get("expr")), pos=pos)
    if t == "BinaryExpr":
        return BinaryExpr(ast_from_obj(obj.get("left")), obj["operator"], ast_from_obj(obj.get("right")), pos=pos)
    if t == "UnaryExpr":
        return UnaryExpr(obj["operator"], ast_from_obj(obj.get("operand")), pos=pos)
    if t == "CallExpr":
        return CallExpr(ast_from_obj(obj["callee"]), tuple(ast_from_obj(a) for a in obj["args"]), pos=pos)
    if t == "MemberExpr":
        return MemberExpr(ast_from_obj(obj["object"]), ast_from_obj(obj.get("field")), pos=pos)
    if t == "IndexExpr":
        return IndexExpr(ast_from_obj(obj["target"]), ast_from_obj(obj["index"]), pos=pos)

    raise ValueError(f"Unknown AST node type: {t}")
