from typing import Any, Dict, Iterator

from wjs.errors import ScriptRuntimeError
from wjs.tokens import Position, NO_POS


class Environment:
    """The flat global scope of one interpreter: identifier -> value.

    WJS has no nested scopes, so there is no parent chain. Each
    interpreter owns its own environment.
    """
    def __init__(self):
        self.values: Dict[str, Any] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def get(self, name: str, pos: Position = NO_POS) -> Any:
        if name in self.values:
            return self.values[name]
        raise ScriptRuntimeError(pos, f"undefined variable: {name}")

    def set(self, name: str, value: Any, pos: Position = NO_POS):
        # assignment never creates a binding; only `let` does
        if name not in self.values:
            raise ScriptRuntimeError(pos, f"undefined variable: {name}")
        self.values[name] = value

    def declare(self, name: str, value: Any):
        # `let` on an existing name simply rebinds it
        self.values[name] = value
