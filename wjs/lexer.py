"""Lexical scanner for WJS.

The lexer turns source text into tokens one at a time. It never raises:
characters it does not recognise, and strings or templates that run off
the end of the input, come back as ILLEGAL tokens and scanning carries on.
It is up to the parser to reject them.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from .tokens import (
    Position, Token, TokenType, lookup_ident,
    SINGLE_CHAR_OPERATORS, TWO_CHAR_OPERATORS,
)

DIGITS = '0123456789'
WHITESPACE = ' \t\r\n'


def is_ident_start(c: str) -> bool:
    return c.isalpha() or c == '_'


def is_ident_char(c: str) -> bool:
    return c.isalpha() or c == '_' or c in DIGITS


class Lexer:
    """Scans WJS source text into tokens.

    `script` is the script name recorded in every position (empty for a
    direct statement). `start` lets a caller scan a fragment that sits
    somewhere inside a larger source, such as the expression inside a
    template interpolation, while still reporting absolute positions.
    """

    def __init__(self, script: str, source: str, start: Optional[Position] = None):
        self.script = script
        self.source = source
        self.i = 0
        if start is None:
            start = Position(1, 1, 0, script)
        self.line = start.line
        self.column = start.column
        self.offset = start.offset

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def position(self) -> Position:
        return Position(self.line, self.column, self.offset, self.script)

    def peek(self, ahead: int = 0) -> str:
        j = self.i + ahead
        if j < len(self.source):
            return self.source[j]
        return ''

    def advance(self) -> str:
        c = self.source[self.i]
        self.i += 1
        self.offset += len(c.encode('utf-8', 'surrogatepass'))
        if c == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return c

    def at_end(self) -> bool:
        return self.i >= len(self.source)

    def skip_whitespace_and_comments(self) -> None:
        while not self.at_end():
            c = self.peek()
            if c in WHITESPACE:
                self.advance()
            elif c == '/' and self.peek(1) == '/':
                while not self.at_end() and self.peek() != '\n':
                    self.advance()
            else:
                return

    def next_token(self) -> Token:
        """Return the next token; EOF is returned forever once input is used up."""
        self.skip_whitespace_and_comments()
        pos = self.position()
        if self.at_end():
            return Token(TokenType.EOF, '', pos)

        c = self.peek()
        if is_ident_start(c):
            return self.scan_identifier(pos)
        if c in DIGITS:
            return self.scan_number(pos)
        if c in ('"', "'"):
            return self.scan_quoted(pos, TokenType.STRING)
        if c == '`':
            return self.scan_quoted(pos, TokenType.TEMPLATE)

        pair = self.source[self.i:self.i + 2]
        if pair in TWO_CHAR_OPERATORS:
            self.advance()
            self.advance()
            return Token(TWO_CHAR_OPERATORS[pair], pair, pos)
        if c in SINGLE_CHAR_OPERATORS:
            self.advance()
            return Token(SINGLE_CHAR_OPERATORS[c], c, pos)

        self.advance()
        return Token(TokenType.ILLEGAL, c, pos)

    def all_tokens(self) -> List[Token]:
        """Scan the remaining input; the result ends with exactly one EOF token."""
        return list(self)

    def scan_identifier(self, pos: Position) -> Token:
        start = self.i
        while not self.at_end() and is_ident_char(self.peek()):
            self.advance()
        lexeme = self.source[start:self.i]
        return Token(lookup_ident(lexeme), lexeme, pos)

    def scan_number(self, pos: Position) -> Token:
        start = self.i
        while not self.at_end() and self.peek() in DIGITS:
            self.advance()
        # a fraction needs at least one digit after the dot
        if self.peek() == '.' and self.peek(1) != '' and self.peek(1) in DIGITS:
            self.advance()
            while not self.at_end() and self.peek() in DIGITS:
                self.advance()
        return Token(TokenType.NUMBER, self.source[start:self.i], pos)

    def scan_quoted(self, pos: Position, token_type: TokenType) -> Token:
        delimiter = self.advance()
        chars: List[str] = []
        while not self.at_end():
            c = self.peek()
            if c == '\\':
                chars.append(self.advance())
                if self.at_end():
                    break
                chars.append(self.advance())
                continue
            if c == delimiter:
                self.advance()
                return Token(token_type, ''.join(chars), pos)
            chars.append(self.advance())
        # unterminated: report what was scanned so far, opening delimiter included
        return Token(TokenType.ILLEGAL, delimiter + ''.join(chars), pos)
