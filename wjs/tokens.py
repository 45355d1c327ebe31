"""Source positions, token types and the keyword table for WJS."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Position:
    """A location in a script.

    `line` and `column` are 1-based, `offset` is the 0-based UTF-8 byte
    offset. `script` is empty when the source is a direct statement rather
    than a loaded file.
    """
    line: int = 0
    column: int = 0
    offset: int = 0
    script: str = ''

    def __str__(self) -> str:
        if self.script:
            return f"{self.script}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


# Used for nodes built by hand and for errors with no source location.
NO_POS = Position()


class TokenType(Enum):
    ILLEGAL = 'ILLEGAL'
    EOF = 'EOF'

    IDENT = 'IDENT'
    NUMBER = 'NUMBER'
    STRING = 'STRING'
    TEMPLATE = 'TEMPLATE'

    PLUS = '+'
    MINUS = '-'
    ASTERISK = '*'
    SLASH = '/'
    PERCENT = '%'

    EQEQ = '=='
    BANGEQ = '!='
    LT = '<'
    LTEQ = '<='
    GT = '>'
    GTEQ = '>='

    EQUAL = '='
    BANG = '!'

    COMMA = ','
    SEMICOLON = ';'
    COLON = ':'
    LPAREN = '('
    RPAREN = ')'
    LBRACK = '['
    RBRACK = ']'
    LBRACE = '{'
    RBRACE = '}'
    DOT = '.'

    LET = 'let'
    TRUE = 'true'
    FALSE = 'false'
    NULL = 'null'
    IF = 'if'
    ELSE = 'else'

    def __str__(self) -> str:
        return self.value


KEYWORDS = {
    'let': TokenType.LET,
    'true': TokenType.TRUE,
    'false': TokenType.FALSE,
    'null': TokenType.NULL,
    'if': TokenType.IF,
    'else': TokenType.ELSE,
}

TWO_CHAR_OPERATORS = {
    '==': TokenType.EQEQ,
    '!=': TokenType.BANGEQ,
    '<=': TokenType.LTEQ,
    '>=': TokenType.GTEQ,
}

SINGLE_CHAR_OPERATORS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.ASTERISK,
    '/': TokenType.SLASH,
    '%': TokenType.PERCENT,
    '<': TokenType.LT,
    '>': TokenType.GT,
    '=': TokenType.EQUAL,
    '!': TokenType.BANG,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
    ':': TokenType.COLON,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '[': TokenType.LBRACK,
    ']': TokenType.RBRACK,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    '.': TokenType.DOT,
}


def lookup_ident(name: str) -> TokenType:
    """Return the keyword type for `name`, or IDENT."""
    return KEYWORDS.get(name, TokenType.IDENT)


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    pos: Position

    def __str__(self) -> str:
        if self.type in (TokenType.IDENT, TokenType.NUMBER, TokenType.STRING,
                         TokenType.TEMPLATE, TokenType.ILLEGAL):
            return f"{self.type.name}({self.lexeme!r})"
        return str(self.type)
