from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class LuaNil:
    """
    The absence of a value. Lua uses the same value for an unset
    variable, an absent optional and the unit value.
    """

    def __repr__(self) -> str:
        return "LuaNil"


@dataclass(frozen=True, slots=True)
class LuaBoolean:
    value: bool


@dataclass(frozen=True, slots=True)
class LuaNumber:
    """A Lua number. Always an IEEE double, integers included."""
    value: float


@dataclass(frozen=True, slots=True)
class LuaString:
    value: str


@dataclass(frozen=True, slots=True)
class LuaAnyString:
    """
    A Lua string whose bytes are not valid UTF-8.
    The embedding layer may hand these over, but no conversion accepts them.
    """
    value: bytes


@dataclass(frozen=True, slots=True)
class LuaTable:
    """
    The only aggregate kind of the runtime.

    A table is an ordered list of (key, value) pairs and plays the role of
    array, map, record and enum envelope depending on its keys. The table
    carries no shape tag: whether it is an array is re-derived from its
    keys every time it is decoded.
    """
    entries: tuple[tuple["LuaValue", "LuaValue"], ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: "LuaValue") -> "LuaValue":
        """Return the value stored under `key`, or nil when absent."""
        for k, v in self.entries:
            if k == key:
                return v
        return NIL


@dataclass(frozen=True, slots=True)
class LuaOther:
    """
    A value the runtime cannot describe as plain data (functions,
    userdata, threads). Never produced by the encoder, always rejected
    by the decoder.
    """
    description: str = "unserializable"


LuaValue = Union[LuaNil, LuaBoolean, LuaNumber, LuaString, LuaAnyString, LuaTable, LuaOther]

NIL = LuaNil()

_LUA_TYPES = (LuaNil, LuaBoolean, LuaNumber, LuaString, LuaAnyString, LuaTable, LuaOther)


def lua_value(obj: Any) -> LuaValue:
    """
    Build a LuaValue from plain Python data, the way a script literal
    would produce it:

        None            -> nil
        bool            -> boolean
        int, float      -> number
        str             -> string
        bytes           -> non-UTF-8 string
        list, tuple     -> table with keys 1..N
        dict            -> table, pairs in insertion order

    LuaValue instances are returned unchanged.
    """
    if isinstance(obj, _LUA_TYPES):
        return obj
    if obj is None:
        return NIL
    if isinstance(obj, bool):
        return LuaBoolean(obj)
    if isinstance(obj, (int, float)):
        return LuaNumber(float(obj))
    if isinstance(obj, str):
        return LuaString(obj)
    if isinstance(obj, (bytes, bytearray)):
        return LuaAnyString(bytes(obj))
    if isinstance(obj, (list, tuple)):
        return LuaTable(tuple(
            (LuaNumber(float(index)), lua_value(item))
            for index, item in enumerate(obj, start=1)
        ))
    if isinstance(obj, dict):
        return LuaTable(tuple(
            (lua_value(key), lua_value(value))
            for key, value in obj.items()
        ))
    raise TypeError(f"Cannot build a lua value from {type(obj).__name__}")
