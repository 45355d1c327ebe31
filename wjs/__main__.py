"""CLI entry point for the WJS interpreter.

Usage:
    python -m wjs [-v|-vv|-vvv] <script.wjs>
    python -m wjs [-v...] <WJS statement>
    python -m wjs --check <script.wjs>
    python -m wjs --emit-ast <script.wjs>
    python -m wjs [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --check       Parse and validate only; do not execute
  --emit-ast    Print the AST of the script as JSON
  --ast         Execute a previously emitted AST JSON file
  --debug-file  Write debug output to this file instead of stderr

An argument ending in `.wjs` is read as a script file and its path is used
in error positions; a leading `#!` line in it is ignored. Anything else is
treated as a direct statement: all arguments are joined with spaces,
e.g. `python -m wjs 'print(5);'`.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .ast_json import ast_to_obj, ast_from_obj
from .errors import WjsError
from .interpreter import Interpreter
from .lexer import Lexer
from .parser import parse
from .printer import dump
from .tokens import TokenType
from .validate import check_valid


def dump_tokens(tokens, out: TextIO) -> None:
    out.write("Tokens:\n")
    for i, tok in enumerate(tokens, 1):
        if tok.type == TokenType.EOF:
            out.write(f"{i:3d}: {tok}\n")
        else:
            out.write(f"{i:3d}: {tok} at {tok.pos.line}:{tok.pos.column}\n")
    out.write("---\n")


def strip_shebang(source: str) -> str:
    """Turn a leading `#!` line into a comment so that positions stay unchanged."""
    if source.startswith('#!'):
        return '//' + source[2:]
    return source


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog='wjs', description="WJS map script interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', metavar='PATH', help='write debug output to PATH instead of stderr')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--check', action='store_true', help='parse and validate only')
    group.add_argument('--emit-ast', action='store_true', help='print the AST as JSON')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('input', nargs='*', help='script file (.wjs) or a WJS statement')
    args = parser.parse_args(argv)

    debug_out = open(args.debug_file, 'w', encoding='utf-8') if args.debug_file else sys.stderr
    try:
        return execute(args, parser, debug_out)
    finally:
        if args.debug_file:
            debug_out.close()


def execute(args: argparse.Namespace, parser: argparse.ArgumentParser, debug_out: TextIO) -> int:
    script = ''
    try:
        if args.ast:
            ast_path = Path(args.ast)
            if not ast_path.exists():
                print(f"Error: file {ast_path} not found", file=sys.stderr)
                return 1
            try:
                with open(ast_path, 'r', encoding='utf-8') as f:
                    program = ast_from_obj(json.load(f))
            except (ValueError, TypeError, KeyError) as e:
                print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
                return 1
        else:
            if not args.input:
                parser.error("missing script file or statement")
            source = ' '.join(args.input)
            if len(args.input) == 1 and args.input[0].endswith('.wjs'):
                script = args.input[0]
                try:
                    with open(script, 'r', encoding='utf-8') as f:
                        source = strip_shebang(f.read())
                except OSError as e:
                    print(f"Error reading file {script}: {e}", file=sys.stderr)
                    return 1
            if args.v:
                debug_out.write(f"Executing: {source}\n---\n")
            tokens = Lexer(script, source).all_tokens()
            if args.v:
                dump_tokens(tokens, debug_out)
            program = parse(tokens)

        if args.v:
            debug_out.write(f"AST: {len(program.statements)} statements\n")
            debug_out.write(dump(program))
            debug_out.write("---\n")

        check_valid(program)
        if args.check:
            print("ok")
            return 0
        if args.emit_ast:
            json.dump(ast_to_obj(program), sys.stdout, ensure_ascii=False, indent=2)
            sys.stdout.write('\n')
            return 0

        interpreter = Interpreter(script, debug_level=args.v, debug_stream=debug_out)
        _, err = interpreter.execute(program)
        if err is not None:
            print(f"Error: {err}", file=sys.stderr)
            return 1
    except WjsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except RecursionError:
        # the tree dump and AST JSON conversion recurse once per nesting level
        print("Error: program nested too deeply", file=sys.stderr)
        return 1

    if args.v:
        debug_out.write("Execution completed successfully\n")
    return 0


if __name__ == '__main__':
    sys.exit(main())
