import json

import pytest

from wjs.__main__ import main


def test_direct_statement(capsys):
    assert main(['print(5);']) == 0
    assert capsys.readouterr().out == '5\n'


def test_arguments_are_joined_into_one_statement(capsys):
    assert main(['print(1', '+', '2);']) == 0
    assert capsys.readouterr().out == '3\n'


def test_script_file(tmp_path, capsys):
    script = tmp_path / 'hello.wjs'
    script.write_text('let who = "map";\nprint(`hello ${who}`);\n', encoding='utf-8')
    assert main([str(script)]) == 0
    assert capsys.readouterr().out == 'hello map\n'


def test_runtime_error_in_file(tmp_path, capsys):
    script = tmp_path / 'bad.wjs'
    script.write_text('print(1);\nprint(nope);\n', encoding='utf-8')
    assert main([str(script)]) == 1
    captured = capsys.readouterr()
    assert captured.out == '1\n'
    assert captured.err == f'Error: Runtime error at {script}:2:7: undefined variable: nope\n'


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / 'absent.wjs')]) == 1
    assert 'Error reading file' in capsys.readouterr().err


def test_parse_error(capsys):
    assert main(['let x = ;']) == 1
    assert capsys.readouterr().err == 'Error: Parse error at 1:9: unexpected token in expression, got ;\n'


def test_validation_error(capsys):
    assert main(['``;']) == 1
    assert 'Validation error at 1:1: empty template string' in capsys.readouterr().err


def test_load_is_not_available(capsys):
    assert main(['load("a.wxx");']) == 1
    assert 'load not implemented' in capsys.readouterr().err


def test_check_does_not_execute(capsys):
    assert main(['--check', 'print(y);']) == 0
    assert capsys.readouterr().out == 'ok\n'


def test_emit_ast_then_run_it(tmp_path, capsys):
    assert main(['--emit-ast', 'print(`sum ${2 + 2}`);']) == 0
    emitted = capsys.readouterr().out
    assert json.loads(emitted)['type'] == 'Program'

    ast_file = tmp_path / 'program.json'
    ast_file.write_text(emitted, encoding='utf-8')
    assert main(['--ast', str(ast_file)]) == 0
    assert capsys.readouterr().out == 'sum 4\n'


def test_ast_file_not_found(tmp_path, capsys):
    assert main(['--ast', str(tmp_path / 'missing.json')]) == 1
    assert 'not found' in capsys.readouterr().err


def test_invalid_ast_file(tmp_path, capsys):
    ast_file = tmp_path / 'bad.json'
    ast_file.write_text('{"type": "Nonsense"}', encoding='utf-8')
    assert main(['--ast', str(ast_file)]) == 1
    assert 'invalid AST file' in capsys.readouterr().err


def test_verbose_output_goes_to_debug_stream(capsys):
    assert main(['-v', 'let x = 1;']) == 0
    err = capsys.readouterr().err
    assert 'Tokens:' in err
    assert "IDENT('x') at 1:5" in err
    assert 'LetStmt x =' in err
    assert '1:1: LetStmt' in err
    assert 'Execution completed successfully' in err


def test_debug_file(tmp_path, capsys):
    debug_file = tmp_path / 'debug.log'
    assert main(['-vv', '--debug-file', str(debug_file), 'let x = 1;']) == 0
    assert capsys.readouterr().err == ''
    log = debug_file.read_text(encoding='utf-8')
    assert 'let x: integer = 1' in log


def test_missing_input():
    with pytest.raises(SystemExit):
        main([])


def test_shebang_line_is_ignored(tmp_path, capsys):
    script = tmp_path / 'tool.wjs'
    script.write_text('#!/usr/bin/env wjs\nprint("ran");\nprint(nope);\n', encoding='utf-8')
    assert main([str(script)]) == 1
    captured = capsys.readouterr()
    assert captured.out == 'ran\n'
    assert captured.err == f'Error: Runtime error at {script}:3:7: undefined variable: nope\n'


def test_deep_nesting_is_reported(capsys):
    assert main(['(' * 1000 + '1' + ')' * 1000 + ';']) == 1
    err = capsys.readouterr().err
    assert err.startswith('Error: Parse error at 1:')
    assert err.endswith(': expression nested too deeply\n')


def test_long_chain_runs(capsys):
    assert main(['print(' + ' + '.join(['1'] * 3000) + ');']) == 0
    assert capsys.readouterr().out == '3000\n'


def test_long_chain_too_deep_to_serialise(capsys):
    assert main(['--emit-ast', ' + '.join(['1'] * 3000) + ';']) == 1
    assert capsys.readouterr().err == 'Error: program nested too deeply\n'
