# WJS script engine package
# This package provides the lexer, parser, validator and interpreter for WJS map scripts.
from .errors import WjsError, ParseError, LexicalError, ValidationError, ScriptRuntimeError, ExecutionTimeout
from .interpreter import Interpreter, run_program, run_file, run_with_timeout
from .lexer import Lexer
from .parser import parse, parse_program
from .validate import check_valid

__all__ = [
    'Interpreter',
    'Lexer',
    'parse',
    'parse_program',
    'check_valid',
    'run_program',
    'run_file',
    'run_with_timeout',
    'WjsError',
    'ParseError',
    'LexicalError',
    'ValidationError',
    'ScriptRuntimeError',
    'ExecutionTimeout',
]
