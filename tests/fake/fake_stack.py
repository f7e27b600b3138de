from luaserde.core.models.value import LuaNil, LuaTable, LuaValue
from luaserde.core.ports.stack import LuaStack


def materialize(value: LuaValue) -> LuaValue:
    """Apply the runtime's table semantics: entries whose value is nil do not exist."""
    if isinstance(value, LuaTable):
        return LuaTable(tuple(
            (key, materialize(item))
            for key, item in value.entries
            if not isinstance(item, LuaNil)
        ))
    return value


class FakeLuaStack(LuaStack):
    """
    A simple in-memory evaluation stack for testing.
    It mimics the index conventions of a real Lua stack.
    """

    def __init__(self) -> None:
        self.slots: list[LuaValue] = []

    def push(self, value: LuaValue) -> None:
        self.slots.append(materialize(value))

    def read(self, index: int) -> LuaValue:
        if index < 0:
            index = len(self.slots) + index + 1
        if not 1 <= index <= len(self.slots):
            raise IndexError(f"Invalid stack index {index}")
        return self.slots[index - 1]

    def top(self) -> int:
        return len(self.slots)

    def pop(self) -> LuaValue:
        return self.slots.pop()
