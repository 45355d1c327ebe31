from typing import Any, Callable, Optional

from wjs.errors import ScriptRuntimeError
from wjs.tokens import Position
from wjs.values import MapValue

LoadMap = Callable[[str], Any]
SaveMap = Callable[[Any, str], None]


def default_load(path: str) -> Any:
    raise NotImplementedError("load not implemented")


def default_save(handle: Any, path: str) -> None:
    raise NotImplementedError("save not implemented")


class MapIO:
    """Adapter between the `load`/`save` built-ins and the host's map collaborator.

    The collaborator owns the file format entirely; this class only wraps
    its handles in `MapValue` and converts its failures into runtime errors
    at the position of the call.
    """

    def __init__(self, load_map: Optional[LoadMap] = None, save_map: Optional[SaveMap] = None):
        self.load_map = load_map or default_load
        self.save_map = save_map or default_save

    def load(self, path: str, pos: Position) -> MapValue:
        try:
            handle = self.load_map(path)
        except Exception as e:
            raise ScriptRuntimeError(pos, f"load error: {e}") from e
        return MapValue(handle)

    def save(self, value: MapValue, path: str, pos: Position) -> None:
        try:
            self.save_map(value.handle, path)
        except Exception as e:
            raise ScriptRuntimeError(pos, f"save error: {e}") from e
