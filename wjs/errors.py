from typing import Optional

from wjs.tokens import Position, NO_POS


class WjsError(Exception):
    """Base exception for every error reported by the WJS toolchain.

    Each error carries the source position where it was detected and a
    bare message; `str()` renders both in the form hosts print to users.
    """
    kind = 'Error'

    def __init__(self, pos: Optional[Position], message: str):
        self.pos = pos if pos is not None else NO_POS
        self.message = message
        super().__init__(self.format())

    def format(self) -> str:
        pos = self.pos
        if pos.line == 0:
            return f"{self.kind}: {self.message}"
        if pos.script:
            return f"{self.kind} at {pos.script}:{pos.line}:{pos.column}: {self.message}"
        return f"{self.kind} at {pos.line}:{pos.column}: {self.message}"


class ParseError(WjsError):
    """Raised by the parser at the first structural error."""
    kind = 'Parse error'


class LexicalError(ParseError):
    """Raised by the parser when it meets an ILLEGAL token."""
    kind = 'Lexical error'


class ValidationError(WjsError):
    """Raised by `check_valid` for a malformed AST."""
    kind = 'Validation error'


class ScriptRuntimeError(WjsError):
    """Raised while evaluating a program; halts the execution."""
    kind = 'Runtime error'


class ExecutionTimeout(WjsError):
    """Raised by `run_with_timeout` when the deadline expires."""
    kind = 'Timeout'
