from typing import Any

from luaserde.bootstrap.deps import get_serde
from luaserde.core.models.value import LuaValue


def to_lua(value: Any, tp: Any = None) -> LuaValue:
    """
    Convert a Python value to a LuaValue with the process-wide default
    converter, configured from the environment and `luaserde.yaml`.
    """
    return get_serde().to_lua(value, tp)


def from_lua(tp: Any, value: LuaValue) -> Any:
    """Convert a LuaValue to an instance of `tp` with the default converter."""
    return get_serde().from_lua(tp, value)
