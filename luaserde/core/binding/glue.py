from dataclasses import dataclass
from typing import Any

from luaserde.core.facade import LuaSerde
from luaserde.core.ports.stack import LuaStack


@dataclass(frozen=True)
class LuaPush:
    """
    A native value ready to be pushed on a Lua stack.

    The value is converted only when pushed; a conversion error leaves
    the stack untouched.

        LuaPush(Point(1.0, 2.0)).push_to(stack, serde)
    """
    value: Any
    tp: Any = None

    def push_to(self, stack: LuaStack, serde: LuaSerde) -> int:
        """Convert and push the value, returning the number of values pushed."""
        stack.push(serde.to_lua(self.value, self.tp))
        return 1


class LuaRead:
    """Reads stack slots into native values."""

    def __init__(self, serde: LuaSerde) -> None:
        self._serde = serde

    def read_at(self, stack: LuaStack, index: int, tp: Any) -> Any:
        return self._serde.from_lua(tp, stack.read(index))

    def read_args(self, stack: LuaStack, nargs: int) -> list[Any]:
        """Return the raw values of the `nargs` topmost slots, bottom first."""
        top = stack.top()
        if nargs > top:
            raise IndexError(f"Expected {nargs} arguments on the stack, found {top}")
        return [stack.read(index) for index in range(top - nargs + 1, top + 1)]
