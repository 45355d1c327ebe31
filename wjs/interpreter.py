"""Tree-walking interpreter for WJS.

An `Interpreter` owns one flat global environment, pre-seeded with the
built-ins `print`, `load` and `save`, and walks a parsed `Program`
statement by statement. Evaluation is synchronous and fails fast: the
first error aborts the whole execution and carries the source position
where it happened.

`execute` is the embedding entry point and never raises; it returns the
program's final value together with the error, if any. `run` is the same
walk but lets the error propagate, which is what the command line and the
`run_program` helper use.
"""

from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TextIO, Tuple, Union

from . import values
from .ast import (
    Node, Program, Stmt, LetStmt, AssignStmt, ExprStmt, Ident, NumberLit,
    StringLit, BooleanLit, NullLit, TemplateLit, TextPart, Interpolation,
    BinaryExpr, UnaryExpr, CallExpr, MemberExpr, IndexExpr,
)
from .builtin_function import BuiltinFunction
from .environment import Environment
from .errors import WjsError, ScriptRuntimeError, ExecutionTimeout
from .parser import parse_program
from .std import MapIO, populate_builtins
from .std.map_io import LoadMap, SaveMap
from .tokens import Position, NO_POS
from .validate import check_valid

OPERATOR_ERRORS = (TypeError, ZeroDivisionError, OverflowError)


class Interpreter:
    """Core interpreter that executes a WJS AST."""

    def __init__(
        self,
        script: str = '',
        load_map: Optional[LoadMap] = None,
        save_map: Optional[SaveMap] = None,
        output: Optional[TextIO] = None,
        debug_level: int = 0,
        debug_stream: Optional[TextIO] = None,
    ):
        self.script = script
        self.output = output
        self.debug_level = debug_level
        self.debug_stream = debug_stream
        self.global_env = Environment()
        self.current_pos: Position = NO_POS
        populate_builtins(self.global_env, self.write_line, MapIO(load_map, save_map))

    @property
    def globals(self) -> Dict[str, Any]:
        return self.global_env.values

    def debug(self, msg: str):
        if self.debug_level > 0:
            stream = self.debug_stream if self.debug_stream is not None else sys.stderr
            stream.write(msg + '\n')
            stream.flush()

    def write_line(self, text: str):
        # resolved on every call so that redirected stdout is honoured
        stream = self.output if self.output is not None else sys.stdout
        stream.write(text + '\n')

    def define(self, name: str, value: Any):
        """Bind a host value as a global before running a program."""
        values.check_value(value)
        self.global_env.declare(name, value)

    def lookup(self, name: str) -> Any:
        return self.global_env.get(name)

    # Public API
    def execute(self, program: Program) -> Tuple[Any, Optional[WjsError]]:
        """Run a program, returning (last value, None) or (None, first error)."""
        try:
            return self.run(program), None
        except WjsError as e:
            self.debug(f"error: {e}")
            return None, e
        except Exception as e:
            # nothing but positioned errors may leave an execution
            err = ScriptRuntimeError(self.current_pos, f"internal error: {type(e).__name__}: {e}")
            self.debug(f"error: {err}")
            return None, err

    def run(self, program: Program) -> Any:
        """Run a program and return the value of the last statement that produced one."""
        last_value = None
        for stmt in program.statements:
            self.current_pos = stmt.pos
            if self.debug_level >= 1:
                self.debug(f"{stmt.pos}: {type(stmt).__name__}")
            result = self.execute_stmt(stmt)
            if result is not None:
                last_value = result
        return last_value

    def execute_stmt(self, node: Stmt) -> Any:
        if isinstance(node, LetStmt):
            value = self.evaluate(node.value)
            self.global_env.declare(node.name.name, value)
            if self.debug_level >= 2:
                self.debug(f"let {node.name.name}: {values.type_name(value)} = {values.stringify(value)}")
            return None
        if isinstance(node, AssignStmt):
            value = self.evaluate(node.value)
            self.assign_lvalue(node.target, value)
            if self.debug_level >= 2:
                self.debug(f"assign {values.type_name(value)} = {values.stringify(value)}")
            return value
        if isinstance(node, ExprStmt):
            return self.evaluate(node.value)
        raise ScriptRuntimeError(node.pos, f"unknown statement type: {type(node).__name__}")

    def evaluate(self, node: Node) -> Any:
        if isinstance(node, NumberLit):
            return node.int_value if node.int_value is not None else node.float_value
        if isinstance(node, StringLit):
            return node.value
        if isinstance(node, BooleanLit):
            return node.value
        if isinstance(node, NullLit):
            return None
        if isinstance(node, Ident):
            return self.global_env.get(node.name, node.pos)
        if isinstance(node, TemplateLit):
            return self.evaluate_template(node)
        if isinstance(node, UnaryExpr):
            operand = self.evaluate(node.operand)
            try:
                return values.unary_op(node.operator, operand)
            except OPERATOR_ERRORS as e:
                raise ScriptRuntimeError(node.pos, str(e)) from e
        if isinstance(node, BinaryExpr):
            return self.evaluate_binary(node)
        if isinstance(node, CallExpr):
            func = self.evaluate(node.callee)
            if not values.is_callable(func):
                raise ScriptRuntimeError(node.pos, "value is not callable")
            args = [self.evaluate(arg) for arg in node.args]
            return self.call_function(func, args, node.pos)
        if isinstance(node, MemberExpr):
            obj = self.evaluate(node.object)
            if not values.is_object(obj):
                raise ScriptRuntimeError(node.pos, "cannot access property of non-object")
            name = node.field.name
            if name not in obj:
                raise ScriptRuntimeError(node.pos, f"property '{name}' not found")
            return obj[name]
        if isinstance(node, IndexExpr):
            target = self.evaluate(node.target)
            index = self.evaluate(node.index)
            if values.is_array(target):
                return target[self.array_index(target, index, node.pos)]
            if values.is_object(target):
                if not values.is_string(index):
                    raise ScriptRuntimeError(node.pos, "object key must be a string")
                if index not in target:
                    raise ScriptRuntimeError(node.pos, f"key '{index}' not found")
                return target[index]
            raise ScriptRuntimeError(node.pos, "cannot index non-array/non-object")
        raise ScriptRuntimeError(getattr(node, 'pos', NO_POS), f"unknown expression type: {type(node).__name__}")

    def evaluate_binary(self, node: BinaryExpr) -> Any:
        """Evaluate an operator chain; left operands are folded iteratively, not recursively."""
        spine: List[BinaryExpr] = []
        while isinstance(node, BinaryExpr):
            spine.append(node)
            node = node.left
        result = self.evaluate(node)
        for expr in reversed(spine):
            right = self.evaluate(expr.right)
            try:
                result = values.binary_op(expr.operator, result, right)
            except OPERATOR_ERRORS as e:
                raise ScriptRuntimeError(expr.pos, str(e)) from e
            if self.debug_level >= 3:
                self.debug(f"{expr.pos}: {expr.operator} -> {values.stringify(result)}")
        return result

    def evaluate_template(self, node: TemplateLit) -> str:
        pieces: List[str] = []
        for part in node.parts:
            if isinstance(part, TextPart):
                pieces.append(part.value)
            elif isinstance(part, Interpolation):
                pieces.append(values.stringify(self.evaluate(part.expr)))
            else:
                raise ScriptRuntimeError(node.pos, f"unknown template part: {type(part).__name__}")
        return ''.join(pieces)

    def array_index(self, array: List[Any], index: Any, pos: Position) -> int:
        if not values.is_number(index):
            raise ScriptRuntimeError(pos, "array index must be a number")
        try:
            i = int(index)
        except (OverflowError, ValueError):
            raise ScriptRuntimeError(pos, "array index must be a number")
        if i < 0 or i >= len(array):
            raise ScriptRuntimeError(pos, f"array index out of bounds: {i}")
        return i

    def assign_lvalue(self, target: Node, value: Any) -> Any:
        if isinstance(target, Ident):
            self.global_env.set(target.name, value, target.pos)
            return value
        if isinstance(target, MemberExpr):
            obj = self.evaluate(target.object)
            if not values.is_object(obj):
                raise ScriptRuntimeError(target.pos, "cannot assign to member of non-object")
            obj[target.field.name] = value
            return value
        if isinstance(target, IndexExpr):
            container = self.evaluate(target.target)
            index = self.evaluate(target.index)
            if values.is_array(container):
                container[self.array_index(container, index, target.pos)] = value
                return value
            if values.is_object(container):
                if not values.is_string(index):
                    raise ScriptRuntimeError(target.pos, "object key must be a string")
                container[index] = value
                return value
            raise ScriptRuntimeError(target.pos, "cannot index assign to non-array/non-object")
        raise ScriptRuntimeError(getattr(target, 'pos', NO_POS), "invalid assignment target")

    def call_function(self, func: BuiltinFunction, args: List[Any], pos: Position) -> Any:
        # None means variadic
        if func.arity is not None and len(args) != func.arity:
            raise ScriptRuntimeError(pos, f"{func.name} expects {func.arity} arguments, got {len(args)}")
        if self.debug_level >= 3:
            self.debug(f"{pos}: call {func.name} with {len(args)} arguments")
        try:
            return func.fn(pos, args)
        except WjsError:
            raise
        except Exception as e:
            raise ScriptRuntimeError(pos, f"{func.name} failed: {e}") from e


def run_program(source: str, script: str = '', **kwargs) -> Any:
    """Parse, validate and run WJS source, returning the program's final value."""
    program = parse_program(source, script)
    check_valid(program)
    interpreter = Interpreter(script, **kwargs)
    return interpreter.run(program)


def run_file(file_path: Union[str, Path], **kwargs) -> Any:
    """Run a WJS script file; its path becomes the script name in positions."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, str(file_path), **kwargs)


def run_with_timeout(fn: Callable[[], Any], timeout: float) -> Any:
    """Run a synchronous call on a worker thread, giving up after `timeout` seconds.

    Evaluation has no interruption points, so an expired worker cannot be
    stopped. It runs as a daemon thread and is abandoned, not joined.
    """
    outcome: Dict[str, Any] = {}

    def worker():
        try:
            outcome['value'] = fn()
        except BaseException as e:
            outcome['error'] = e

    thread = threading.Thread(target=worker, name='wjs-execution', daemon=True)
    thread.start()
    thread.join(timeout)
    if thread.is_alive():
        raise ExecutionTimeout(NO_POS, f"execution took longer than {timeout:g} seconds")
    if 'error' in outcome:
        raise outcome['error']
    return outcome.get('value')
