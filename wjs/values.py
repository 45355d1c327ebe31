"""Runtime values for the WJS interpreter.

WJS values are plain Python objects, and the Python type is the variant
tag:

    Null     None
    Boolean  bool
    Integer  int (signed 64-bit range)
    Float    float
    String   str
    Array    list, shared by reference
    Object   dict with str keys, shared by reference
    Callable BuiltinFunction
    Map      MapValue, an opaque handle owned by the map I/O collaborator

Since `bool` is a subclass of `int` in Python, every numeric check below
rules booleans out explicitly.

The operator helpers raise plain Python exceptions (`TypeError`,
`ZeroDivisionError`, `OverflowError`); the interpreter attaches the source
position and turns them into `ScriptRuntimeError`s.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any

from .builtin_function import BuiltinFunction

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


class MapValue:
    """Wraps the opaque map handle returned by the `load` collaborator."""
    __slots__ = ('handle',)

    def __init__(self, handle: Any):
        self.handle = handle

    def __repr__(self) -> str:
        return f"MapValue({self.handle!r})"


def is_null(value: Any) -> bool:
    return value is None


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_float(value: Any) -> bool:
    return isinstance(value, float)


def is_number(value: Any) -> bool:
    return is_integer(value) or is_float(value)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_array(value: Any) -> bool:
    return isinstance(value, list)


def is_object(value: Any) -> bool:
    return isinstance(value, dict)


def is_callable(value: Any) -> bool:
    return isinstance(value, BuiltinFunction)


def is_map(value: Any) -> bool:
    return isinstance(value, MapValue)


def type_name(value: Any) -> str:
    """Return the WJS type name of a runtime value."""
    if value is None:
        return 'null'
    if is_bool(value):
        return 'boolean'
    if is_integer(value):
        return 'integer'
    if is_float(value):
        return 'float'
    if is_string(value):
        return 'string'
    if is_array(value):
        return 'array'
    if is_object(value):
        return 'object'
    if is_callable(value):
        return 'function'
    if is_map(value):
        return 'map'
    return type(value).__name__


def check_value(value: Any) -> bool:
    """Check that a host-supplied value belongs to the WJS value model.

    Returns True, or raises TypeError naming the first offending value.
    Arrays and objects are checked recursively.
    """
    if value is None or is_bool(value) or is_float(value) or is_string(value):
        return True
    if is_callable(value) or is_map(value):
        return True
    if is_integer(value):
        if not INT64_MIN <= value <= INT64_MAX:
            raise TypeError(f"integer {value} does not fit in 64 bits")
        return True
    if is_array(value):
        for item in value:
            check_value(item)
        return True
    if is_object(value):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"object keys must be strings, got {type(key).__name__}")
            check_value(item)
        return True
    raise TypeError(f"unsupported value type {type(value).__name__}")


def check_int64(value: int) -> int:
    if not INT64_MIN <= value <= INT64_MAX:
        raise OverflowError("integer overflow")
    return value


def format_float(value: float) -> str:
    """Shortest round-trip decimal, positional, without a forced trailing `.0`."""
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return '+Inf' if value > 0 else '-Inf'
    return format(Decimal(repr(value)).normalize(), 'f')


def stringify(value: Any) -> str:
    """Convert any value into the text used by `print` and template strings."""
    if value is None:
        return 'null'
    if is_bool(value):
        return 'true' if value else 'false'
    if is_integer(value):
        return str(value)
    if is_float(value):
        return format_float(value)
    if is_string(value):
        return value
    if is_array(value):
        return '[' + ', '.join(stringify(item) for item in value) + ']'
    if is_object(value):
        entries = ', '.join(f"{k}: {stringify(value[k])}" for k in sorted(value))
        return '{' + entries + '}'
    if is_callable(value):
        return f"<builtin {value.name}>"
    if is_map(value):
        return '<map>'
    return str(value)


def equal(a: Any, b: Any) -> bool:
    """Structural equality; values of different variants are never equal."""
    if a is b:
        return True
    if type_name(a) != type_name(b):
        return False
    if is_array(a):
        return len(a) == len(b) and all(equal(x, y) for x, y in zip(a, b))
    if is_object(a):
        if a.keys() != b.keys():
            return False
        return all(equal(a[k], b[k]) for k in a)
    if is_callable(a) or is_map(a):
        return False
    return a == b


def numeric_operands(op: str, a: Any, b: Any):
    """Apply the promotion rule: two integers stay integers, otherwise both become floats."""
    if not (is_number(a) and is_number(b)):
        raise TypeError(f"{op} operator requires numbers")
    if is_integer(a) and is_integer(b):
        return a, b, True
    return float(a), float(b), False


def add(a: Any, b: Any) -> Any:
    if is_string(a) and is_string(b):
        return a + b
    if not (is_number(a) and is_number(b)):
        raise TypeError("type mismatch for + operator")
    x, y, integral = numeric_operands('+', a, b)
    return check_int64(x + y) if integral else x + y


def subtract(a: Any, b: Any) -> Any:
    x, y, integral = numeric_operands('-', a, b)
    return check_int64(x - y) if integral else x - y


def multiply(a: Any, b: Any) -> Any:
    x, y, integral = numeric_operands('*', a, b)
    return check_int64(x * y) if integral else x * y


def divide(a: Any, b: Any) -> float:
    numeric_operands('/', a, b)
    if b == 0:
        raise ZeroDivisionError("division by zero")
    return a / b if is_integer(a) and is_integer(b) else float(a) / float(b)


def modulus(a: Any, b: Any) -> Any:
    _, _, integral = numeric_operands('%', a, b)
    try:
        x, y = int(a), int(b)
    except (OverflowError, ValueError):
        raise TypeError("% operator requires finite numbers")
    if y == 0:
        raise ZeroDivisionError("modulus by zero")
    # truncated division: the result takes the sign of the dividend
    result = abs(x) % abs(y)
    if x < 0:
        result = -result
    return check_int64(result) if integral else float(result)


def compare(op: str, a: Any, b: Any) -> bool:
    a, b, _ = numeric_operands(op, a, b)
    if op == '<':
        return a < b
    if op == '>':
        return a > b
    if op == '<=':
        return a <= b
    if op == '>=':
        return a >= b
    raise TypeError(f"unknown comparison operator: {op}")


def negate(value: Any) -> Any:
    if is_integer(value):
        return check_int64(-value)
    if is_float(value):
        return -value
    raise TypeError("unary - requires a number")


def logical_not(value: Any) -> bool:
    if is_bool(value):
        return not value
    raise TypeError("unary ! requires a boolean")


ARITHMETIC = {
    '+': add,
    '-': subtract,
    '*': multiply,
    '/': divide,
    '%': modulus,
}


def binary_op(op: str, a: Any, b: Any) -> Any:
    """Evaluate a binary operator on two values."""
    if op in ARITHMETIC:
        return ARITHMETIC[op](a, b)
    if op == '==':
        return equal(a, b)
    if op == '!=':
        return not equal(a, b)
    if op in ('<', '>', '<=', '>='):
        return compare(op, a, b)
    raise TypeError(f"unknown binary operator: {op}")


def unary_op(op: str, value: Any) -> Any:
    if op == '-':
        return negate(value)
    if op == '!':
        return logical_not(value)
    raise TypeError(f"unknown unary operator: {op}")
