from typing import Any, Callable, List

from .map_io import MapIO, default_load, default_save
from wjs.builtin_function import BuiltinFunction
from wjs.environment import Environment
from wjs.errors import ScriptRuntimeError
from wjs.tokens import Position
from wjs.values import is_map, is_string, stringify

__all__ = ['MapIO', 'default_load', 'default_save', 'populate_builtins']


def populate_builtins(env: Environment, write_line: Callable[[str], None], map_io: MapIO) -> Environment:
    """Bind `print`, `load` and `save` into `env`.

    `write_line` receives each line printed by the script, without the
    trailing newline.
    """

    def std_print(pos: Position, args: List[Any]) -> Any:
        write_line(' '.join(stringify(a) for a in args))
        return None

    def std_load(pos: Position, args: List[Any]) -> Any:
        path = args[0]
        if not is_string(path):
            raise ScriptRuntimeError(pos, 'load expects a string path')
        return map_io.load(path, pos)

    def std_save(pos: Position, args: List[Any]) -> Any:
        value, path = args
        if not is_string(path):
            raise ScriptRuntimeError(pos, 'save expects a string as the second argument')
        if not is_map(value):
            raise ScriptRuntimeError(pos, 'save expects a Map as the first argument')
        map_io.save(value, path, pos)
        return None

    env.declare('print', BuiltinFunction('print', None, std_print))
    env.declare('load', BuiltinFunction('load', 1, std_load))
    env.declare('save', BuiltinFunction('save', 2, std_save))
    return env
