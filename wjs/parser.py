"""Parser for WJS.

This module implements a recursive-descent parser over the token list
produced by `wjs.lexer.Lexer`:

1. **Statements** are `let name = expr;`, `target = expr;` and `expr;`.
   An assignment is recognised after the full left-hand expression has
   been parsed, so `a.b[0] = 1;` needs no extra lookahead.

2. **Expressions** use precedence climbing for the binary operators, a
   prefix rule for `-` and `!`, and an iterative postfix loop for calls,
   indexing and member access.

Template literals are lowered here, not at run time: the raw template
text is split into text and `${...}` spans and every span is lexed and
parsed as a full expression.

The parser fails fast. The first problem raises `ParseError` (or
`LexicalError` when the offending token is ILLEGAL); there is no recovery.
Input nested deeper than the Python stack allows is also a `ParseError`.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Union

from .ast import (
    Program, Stmt, Expr, LetStmt, AssignStmt, ExprStmt, Ident, NumberLit,
    StringLit, BooleanLit, NullLit, TemplateLit, TemplatePart, TextPart,
    Interpolation, BinaryExpr, UnaryExpr, CallExpr, MemberExpr, IndexExpr,
    ASSIGNABLE,
)
from .errors import LexicalError, ParseError
from .lexer import Lexer
from .tokens import Position, Token, TokenType

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

# Higher binds tighter. All binary operators are left associative.
PRECEDENCE = {
    TokenType.EQEQ: 1,
    TokenType.BANGEQ: 1,
    TokenType.LT: 2,
    TokenType.GT: 2,
    TokenType.LTEQ: 2,
    TokenType.GTEQ: 2,
    TokenType.PLUS: 3,
    TokenType.MINUS: 3,
    TokenType.ASTERISK: 4,
    TokenType.SLASH: 4,
    TokenType.PERCENT: 4,
}

ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '0': '\0',
}


def unescape(raw: str) -> str:
    """Decode backslash escapes; an unknown escape stands for the character itself."""
    out: List[str] = []
    i = 0
    while i < len(raw):
        c = raw[i]
        if c == '\\' and i + 1 < len(raw):
            nxt = raw[i + 1]
            out.append(ESCAPES.get(nxt, nxt))
            i += 2
            continue
        out.append(c)
        i += 1
    return ''.join(out)


def parse_number(lexeme: str, pos: Position) -> NumberLit:
    """Lower a NUMBER lexeme: integer if it parses and fits in 64 bits, float otherwise."""
    try:
        value = int(lexeme)
    except ValueError:
        value = None
    if value is not None and INT64_MIN <= value <= INT64_MAX:
        return NumberLit(int_value=value, pos=pos)
    try:
        return NumberLit(float_value=float(lexeme), pos=pos)
    except ValueError:
        raise ParseError(pos, f"invalid number {lexeme!r}")


class Parser:
    def __init__(self, tokens: Iterable[Token]):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            last = self.tokens[-1].pos if self.tokens else Position(1, 1, 0, '')
            self.tokens.append(Token(TokenType.EOF, '', last))
        self.pos = 0

    def peek(self, ahead: int = 0) -> Token:
        j = min(self.pos + ahead, len(self.tokens) - 1)
        return self.tokens[j]

    def advance(self) -> Token:
        token = self.peek()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, expected: Union[TokenType, List[TokenType]]) -> bool:
        token_type = self.peek().type
        if isinstance(expected, list):
            return token_type in expected
        return token_type == expected

    def consume(self, expected: TokenType, what: Optional[str] = None) -> Token:
        token = self.peek()
        if token.type != expected:
            raise self.error(token, f"expected {what or repr(str(expected))}")
        return self.advance()

    def error(self, token: Token, message: str) -> ParseError:
        if token.type == TokenType.ILLEGAL:
            return LexicalError(token.pos, f"illegal token {token.lexeme!r}")
        if token.type == TokenType.EOF:
            return ParseError(token.pos, f"{message}, got end of input")
        return ParseError(token.pos, f"{message}, got {token}")

    # Statements

    def parse_program(self) -> Program:
        start = self.peek().pos
        statements: List[Stmt] = []
        while not self.match(TokenType.EOF):
            statements.append(self.parse_statement())
        return Program(tuple(statements), pos=start)

    def parse_statement(self) -> Stmt:
        if self.match(TokenType.LET):
            return self.parse_let_stmt()
        start = self.peek().pos
        expr = self.parse_expression()
        if self.match(TokenType.EQUAL):
            equal = self.advance()
            if not isinstance(expr, ASSIGNABLE):
                raise ParseError(equal.pos, "invalid assignment target: must be identifier, member, or index")
            value = self.parse_expression()
            self.consume(TokenType.SEMICOLON)
            return AssignStmt(expr, value, pos=start)
        self.consume(TokenType.SEMICOLON)
        return ExprStmt(expr, pos=start)

    def parse_let_stmt(self) -> LetStmt:
        let = self.consume(TokenType.LET)
        name_token = self.consume(TokenType.IDENT, 'identifier after let')
        self.consume(TokenType.EQUAL)
        value = self.parse_expression()
        self.consume(TokenType.SEMICOLON)
        return LetStmt(Ident(name_token.lexeme, pos=name_token.pos), value, pos=let.pos)

    # Expressions

    def parse_expression(self, min_precedence: int = 0) -> Expr:
        left = self.parse_unary()
        while True:
            token = self.peek()
            precedence = PRECEDENCE.get(token.type)
            if precedence is None or precedence <= min_precedence:
                return left
            self.advance()
            right = self.parse_expression(precedence)
            left = BinaryExpr(left, token.lexeme, right, pos=token.pos)

    def parse_unary(self) -> Expr:
        if self.match([TokenType.MINUS, TokenType.BANG]):
            op_token = self.advance()
            operand = self.parse_unary()
            return UnaryExpr(op_token.lexeme, operand, pos=op_token.pos)
        return self.parse_postfix()

    def parse_postfix(self) -> Expr:
        node = self.parse_primary()
        while True:
            if self.match(TokenType.LPAREN):
                lparen = self.advance()
                args: List[Expr] = []
                if not self.match(TokenType.RPAREN):
                    args.append(self.parse_expression())
                    while self.match(TokenType.COMMA):
                        self.advance()
                        args.append(self.parse_expression())
                self.consume(TokenType.RPAREN)
                node = CallExpr(node, tuple(args), pos=lparen.pos)
                continue
            if self.match(TokenType.LBRACK):
                lbrack = self.advance()
                index = self.parse_expression()
                self.consume(TokenType.RBRACK)
                node = IndexExpr(node, index, pos=lbrack.pos)
                continue
            if self.match(TokenType.DOT):
                dot = self.advance()
                name_token = self.consume(TokenType.IDENT, "identifier after '.'")
                node = MemberExpr(node, Ident(name_token.lexeme, pos=name_token.pos), pos=dot.pos)
                continue
            return node

    def parse_primary(self) -> Expr:
        token = self.peek()
        if token.type == TokenType.NUMBER:
            self.advance()
            return parse_number(token.lexeme, token.pos)
        if token.type == TokenType.STRING:
            self.advance()
            return StringLit(unescape(token.lexeme), pos=token.pos)
        if token.type == TokenType.TEMPLATE:
            self.advance()
            return parse_template(token)
        if token.type in (TokenType.TRUE, TokenType.FALSE):
            self.advance()
            return BooleanLit(token.type == TokenType.TRUE, pos=token.pos)
        if token.type == TokenType.NULL:
            self.advance()
            return NullLit(pos=token.pos)
        if token.type == TokenType.IDENT:
            self.advance()
            return Ident(token.lexeme, pos=token.pos)
        if token.type == TokenType.LPAREN:
            self.advance()
            expr = self.parse_expression()
            self.consume(TokenType.RPAREN)
            return expr
        raise self.error(token, "unexpected token in expression")


def content_start(token: Token) -> Position:
    """Position of the first character after a template's opening backtick."""
    pos = token.pos
    return Position(pos.line, pos.column + 1, pos.offset + 1, pos.script)


def step(pos: Position, c: str) -> Position:
    if c == '\n':
        return Position(pos.line + 1, 1, pos.offset + 1, pos.script)
    return Position(pos.line, pos.column + 1, pos.offset + len(c.encode('utf-8', 'surrogatepass')), pos.script)


def parse_template(token: Token) -> TemplateLit:
    """Split a raw template into text and interpolation parts.

    `\\${` keeps a literal dollar sign; `${` opens an interpolation that runs
    to the matching `}` (braces inside quoted strings are ignored).
    """
    raw = token.lexeme
    parts: List[TemplatePart] = []
    text: List[str] = []
    text_pos = content_start(token)
    pos = text_pos
    i = 0

    def flush(at: Position) -> None:
        if text:
            parts.append(TextPart(unescape(''.join(text)), pos=at))
            text.clear()

    while i < len(raw):
        c = raw[i]
        if c == '\\' and i + 1 < len(raw):
            text.append(raw[i:i + 2])
            pos = step(step(pos, c), raw[i + 1])
            i += 2
            continue
        if c == '$' and raw.startswith('${', i):
            flush(text_pos)
            open_pos = pos
            pos = step(step(pos, '$'), '{')
            i += 2
            end = find_interpolation_end(raw, i)
            if end < 0:
                raise ParseError(open_pos, "unterminated interpolation in template")
            source = raw[i:end]
            parts.append(Interpolation(parse_fragment(source, pos, open_pos), pos=open_pos))
            for ch in raw[i:end + 1]:
                pos = step(pos, ch)
            i = end + 1
            text_pos = pos
            continue
        text.append(c)
        pos = step(pos, c)
        i += 1
    flush(text_pos)
    return TemplateLit(tuple(parts), pos=token.pos)


def find_interpolation_end(raw: str, i: int) -> int:
    """Index of the `}` closing an interpolation that starts at `i`, or -1."""
    depth = 0
    quote = ''
    while i < len(raw):
        c = raw[i]
        if quote:
            if c == '\\':
                i += 2
                continue
            if c == quote:
                quote = ''
        elif c in ('"', "'"):
            quote = c
        elif c == '{':
            depth += 1
        elif c == '}':
            if depth == 0:
                return i
            depth -= 1
        i += 1
    return -1


def parse_fragment(source: str, start: Position, open_pos: Position) -> Expr:
    """Parse the source of one interpolation as a single complete expression."""
    tokens = Lexer(start.script, source, start=start).all_tokens()
    if tokens[0].type == TokenType.EOF:
        raise ParseError(open_pos, "empty interpolation in template")
    parser = Parser(tokens)
    expr = parser.parse_expression()
    if not parser.match(TokenType.EOF):
        raise parser.error(parser.peek(), "expected '}' after interpolation")
    return expr


def parse(tokens: Iterable[Token]) -> Program:
    """Parse a token sequence into a Program, raising ParseError on the first error."""
    parser = Parser(tokens)
    try:
        return parser.parse_program()
    except RecursionError:
        raise ParseError(parser.peek().pos, "expression nested too deeply") from None


def parse_program(source: str, script: str = '') -> Program:
    """Lex and parse WJS source text into a Program."""
    return parse(Lexer(script, source).all_tokens())
