import pytest

from wjs.ast import (
    AssignStmt, BinaryExpr, ExprStmt, Ident, IndexExpr, Interpolation,
    LetStmt, MemberExpr, NumberLit, StringLit, TemplateLit, TextPart,
)
from wjs.errors import LexicalError, ParseError
from wjs.lexer import Lexer
from wjs.parser import parse, parse_program
from wjs.printer import format_source
from wjs.tokens import Position


def shape(source):
    """Fully parenthesised rendering of the parsed program."""
    return format_source(parse_program(source))


def only_expr(source):
    program = parse_program(source)
    assert len(program.statements) == 1
    return program.statements[0].value


@pytest.mark.parametrize('source, expected', [
    ('1 + 2 * 3;', '(1 + (2 * 3));\n'),
    ('10 - 3 - 2;', '((10 - 3) - 2);\n'),
    ('8 / 4 / 2;', '((8 / 4) / 2);\n'),
    ('(1 + 2) * 3;', '((1 + 2) * 3);\n'),
    ('a < b == c > d;', '((a < b) == (c > d));\n'),
    ('a + 1 <= b % 2;', '((a + 1) <= (b % 2));\n'),
    ('-a * b;', '((-a) * b);\n'),
    ('!!x;', '(!(!x));\n'),
    ('-m.tiles[0];', '(-m.tiles[0]);\n'),
    ('m.tiles[0].terrain;', 'm.tiles[0].terrain;\n'),
    ('print(1, 2 + 3);', 'print(1, (2 + 3));\n'),
    ('f()(1);', 'f()(1);\n'),
])
def test_precedence_and_associativity(source, expected):
    assert shape(source) == expected


def test_let_statement():
    stmt = parse_program('let answer = 42;').statements[0]
    assert isinstance(stmt, LetStmt)
    assert stmt.name.name == 'answer'
    assert stmt.value == NumberLit(int_value=42, pos=Position(1, 14, 13, ''))
    assert stmt.pos == Position(1, 1, 0, '')


def test_assignment_to_nested_path():
    stmt = parse_program('a.b[0] = 1;').statements[0]
    assert isinstance(stmt, AssignStmt)
    assert isinstance(stmt.target, IndexExpr)
    assert isinstance(stmt.target.target, MemberExpr)
    assert stmt.target.target.field.name == 'b'
    assert stmt.value.int_value == 1


def test_expression_statement():
    stmt = parse_program('x;').statements[0]
    assert isinstance(stmt, ExprStmt)
    assert stmt.value == Ident('x', pos=Position(1, 1, 0, ''))


def test_operator_nodes_take_the_operator_position():
    expr = only_expr('a +\n  b;')
    assert isinstance(expr, BinaryExpr)
    assert expr.pos.line == 1
    assert expr.pos.column == 3
    assert expr.right.pos.line == 2


@pytest.mark.parametrize('lexeme, int_value, float_value', [
    ('0', 0, None),
    ('9223372036854775807', 9223372036854775807, None),
    ('9223372036854775808', None, 9223372036854775808.0),
    ('3.0', None, 3.0),
    ('0.5', None, 0.5),
])
def test_number_literals(lexeme, int_value, float_value):
    node = only_expr(lexeme + ';')
    assert node.int_value == int_value
    assert node.float_value == float_value


def test_string_escapes_are_decoded():
    assert only_expr(r'"a\nb\t\"q\"";').value == 'a\nb\t"q"'
    assert only_expr(r"'it\'s';").value == "it's"
    assert only_expr(r'"back\\slash";').value == 'back\\slash'
    assert only_expr(r'"odd\qescape";').value == 'oddqescape'


def test_literals():
    program = parse_program('true; false; null; "s";')
    values = [stmt.value for stmt in program.statements]
    assert values[0].value is True
    assert values[1].value is False
    assert type(values[2]).__name__ == 'NullLit'
    assert isinstance(values[3], StringLit)


def test_template_is_split_into_parts():
    node = only_expr('`Value is ${1 + 2}`;')
    assert isinstance(node, TemplateLit)
    text, interp = node.parts
    assert text == TextPart('Value is ', pos=Position(1, 2, 1, ''))
    assert isinstance(interp, Interpolation)
    assert interp.pos.column == 11
    assert isinstance(interp.expr, BinaryExpr)
    assert interp.expr.left.pos.column == 13
    assert interp.expr.pos.column == 15


def test_template_text_after_interpolation():
    node = only_expr('`${a}-${b}!`;')
    kinds = [type(part).__name__ for part in node.parts]
    assert kinds == ['Interpolation', 'TextPart', 'Interpolation', 'TextPart']
    assert node.parts[1].value == '-'
    assert node.parts[3].value == '!'


def test_template_escaped_dollar_is_text():
    node = only_expr(r'`cost: \${x}`;')
    assert node.parts == (TextPart('cost: ${x}', pos=Position(1, 2, 1, '')),)


def test_template_braces_inside_strings():
    node = only_expr('`${"}"}`;')
    assert node.parts[0].expr.value == '}'


def test_plain_and_empty_templates():
    assert only_expr('`plain`;').parts == (TextPart('plain', pos=Position(1, 2, 1, '')),)
    assert only_expr('``;').parts == ()


@pytest.mark.parametrize('source, message', [
    ('`${}`;', 'empty interpolation in template'),
    ('`${x`;', 'unterminated interpolation in template'),
])
def test_bad_interpolation(source, message):
    with pytest.raises(ParseError) as excinfo:
        parse_program(source)
    assert excinfo.value.message == message
    assert excinfo.value.pos.column == 2


def test_interpolation_must_be_a_single_expression():
    with pytest.raises(ParseError) as excinfo:
        parse_program('`${1 2}`;')
    assert excinfo.value.message == "expected '}' after interpolation, got NUMBER('2')"
    assert excinfo.value.pos.column == 6


@pytest.mark.parametrize('source', ['1 = 2;', 'f() = 1;', 'a + b = 3;', '"s" = 1;'])
def test_invalid_assignment_target(source):
    with pytest.raises(ParseError) as excinfo:
        parse_program(source)
    assert excinfo.value.message == 'invalid assignment target: must be identifier, member, or index'


def test_missing_semicolon():
    with pytest.raises(ParseError) as excinfo:
        parse_program('let x = 5')
    assert excinfo.value.message == "expected ';', got end of input"
    assert str(excinfo.value) == "Parse error at 1:10: expected ';', got end of input"


def test_let_requires_identifier():
    with pytest.raises(ParseError) as excinfo:
        parse_program('let = 5;')
    assert excinfo.value.message == 'expected identifier after let, got ='
    assert excinfo.value.pos.column == 5


def test_unexpected_token_in_expression():
    with pytest.raises(ParseError) as excinfo:
        parse_program('let x = ;')
    assert excinfo.value.message == 'unexpected token in expression, got ;'


def test_illegal_token_raises_lexical_error():
    with pytest.raises(LexicalError) as excinfo:
        parse_program('let x = @;', script='bad.wjs')
    err = excinfo.value
    assert isinstance(err, ParseError)
    assert err.message == "illegal token '@'"
    assert str(err) == "Lexical error at bad.wjs:1:9: illegal token '@'"


def test_unterminated_string_raises_lexical_error():
    with pytest.raises(LexicalError):
        parse_program('print("abc);')


def test_parse_accepts_tokens_without_eof():
    tokens = [t for t in Lexer('', 'x;').all_tokens() if t.type.name != 'EOF']
    program = parse(tokens)
    assert len(program.statements) == 1


def test_empty_program():
    assert parse_program('  // nothing here\n').statements == ()


def test_moderate_nesting_parses():
    assert shape('(' * 50 + '1' + ')' * 50 + ';') == '1;\n'


@pytest.mark.parametrize('source', [
    '(' * 1000 + '1' + ')' * 1000 + ';',
    '-' * 5000 + '1;',
    '!' * 5000 + 'true;',
    '`${' + '(' * 1000 + 'x' + ')' * 1000 + '}`;',
])
def test_excessive_nesting_is_a_parse_error(source):
    with pytest.raises(ParseError) as excinfo:
        parse_program(source)
    assert excinfo.value.message == 'expression nested too deeply'
    assert excinfo.value.pos.line == 1
