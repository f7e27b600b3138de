from luaserde.core.ports.errors import DeserializeError, ErrorKind, SerializeError


class LuaSerializeError(SerializeError):
    """An error raised while converting a native value to a LuaValue."""


class LuaDeserializeError(DeserializeError):
    """An error raised while converting a LuaValue to a native value."""


def recursion_limit(max_depth: int) -> str:
    return f"recursion limit exceeded: more than {max_depth} nested tables"
