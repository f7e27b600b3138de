from typing import Protocol

from luaserde.core.models.value import LuaValue


class LuaStack(Protocol):
    """
    Narrow view of the evaluation stack of an embedded Lua runtime.

    This library never creates, runs or owns a runtime. The embedding
    layer implements this interface on top of its own runtime handle, and
    the binding glue only exchanges plain LuaValue trees through it.

    Indices follow Lua conventions: positive indices count from the
    bottom of the stack (1 is the first slot), negative indices count
    from the top (-1 is the last pushed value).
    """

    def push(self, value: LuaValue) -> None:
        """
        Push a value on top of the stack. Tables are materialized by the
        runtime with its own semantics (entries whose value is nil are
        dropped).
        """

    def read(self, index: int) -> LuaValue:
        """
        Return the value at `index` as a LuaValue tree, without popping it.
        Raises IndexError if the slot does not exist.
        """

    def top(self) -> int:
        """Return the number of values currently on the stack."""
