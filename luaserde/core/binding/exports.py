import inspect
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar, get_type_hints

from luaserde.core.binding.glue import LuaRead
from luaserde.core.facade import LuaSerde
from luaserde.core.models.value import NIL, LuaValue
from luaserde.core.ports.stack import LuaStack


F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class ExportedFunction:
    """A native function together with the types of its arguments and result."""
    func: Callable[..., Any]
    params: tuple[tuple[str, Any], ...]
    returns: Any

    @classmethod
    def from_function(cls, func: Callable[..., Any]) -> "ExportedFunction":
        hints = get_type_hints(func, include_extras=True)
        params = []
        for param in inspect.signature(func).parameters.values():
            if param.kind not in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
                raise TypeError(
                    f"Cannot export '{func.__name__}': parameter '{param.name}' is not positional"
                )
            params.append((param.name, hints.get(param.name, Any)))
        return cls(func=func, params=tuple(params), returns=hints.get("return", Any))


class Exports:
    """
    Registry of native functions callable from Lua scripts.

    Functions are registered once per name with `@exports.function(name)`.
    When called, the arguments are read according to the parameter
    annotations and the result is written according to the return
    annotation. As in Lua, missing arguments read as nil and extra
    arguments are ignored.

    This component never touches a runtime itself: the embedding layer
    installs a trampoline per exported name that calls `call_from_stack`.
    """

    def __init__(self, serde: LuaSerde) -> None:
        self._serde = serde
        self._reader = LuaRead(serde)
        self._functions: dict[str, ExportedFunction] = {}
        self._logger = logging.getLogger("core.binding.exports")

    def function(self, name: str | None = None) -> Callable[[F], F]:
        def decorator(func: F) -> F:
            exported = name or func.__name__
            if exported in self._functions:
                raise RuntimeError(f"Function already exported as '{exported}'")

            self._functions[exported] = ExportedFunction.from_function(func)
            return func

        return decorator

    def resolve(self, name: str) -> ExportedFunction | None:
        return self._functions.get(name)

    def functions(self) -> dict[str, ExportedFunction]:
        return dict(self._functions)

    def call(self, name: str, args: Sequence[LuaValue]) -> LuaValue:
        """Invoke an exported function with raw Lua arguments and return its raw result."""
        exported = self.resolve(name)
        if exported is None:
            raise LookupError(f"Unknown exported function '{name}'")

        try:
            values = [
                self._serde.from_lua(tp, args[index] if index < len(args) else NIL)
                for index, (_, tp) in enumerate(exported.params)
            ]
            result = exported.func(*values)
            return self._serde.to_lua(result, exported.returns)
        except Exception as exc:
            self._logger.error(f"Error in exported function '{name}': {exc}", exc_info=exc)
            raise

    def call_from_stack(self, stack: LuaStack, name: str, nargs: int) -> int:
        """
        Call an exported function with the `nargs` topmost stack values as
        arguments and push its result. Returns the number of pushed values.
        """
        args = self._reader.read_args(stack, nargs)
        result = self.call(name, args)
        self._logger.debug(f"Called '{name}' with {nargs} arguments")
        stack.push(result)
        return 1
