from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from wjs.tokens import Position


@dataclass(eq=False)
class BuiltinFunction:
    """A host-provided callable bound into the global environment.

    `arity` is the exact argument count, or None for a variadic function.
    `fn` receives the call position and the evaluated arguments.
    """
    name: str
    arity: Optional[int]
    fn: Callable[[Position, List[Any]], Any]

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
