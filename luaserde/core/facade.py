import logging
from typing import Any

from luaserde.core.decoder import LuaDeserializer
from luaserde.core.encoder import LuaSerializer
from luaserde.core.errors import LuaDeserializeError, LuaSerializeError
from luaserde.core.models.config import SerdeConfig
from luaserde.core.models.value import LuaValue
from luaserde.core.ports.codec import BytesCodec
from luaserde.core.ports.errors import DeserializeError, SerializeError
from luaserde.core.schema.resolver import shape_of


class LuaSerde:
    """
    Entry point converting Python values to and from LuaValue trees.

    `to_lua` writes a value according to its type annotation (or its
    runtime type when none is given); `from_lua` reads a LuaValue into
    the annotated type. Errors raised by user visitors or custom
    implementations are re-raised as LuaSerializeError and
    LuaDeserializeError with the same kind, so callers only have two
    exception types to handle.
    """

    def __init__(
        self,
        config: SerdeConfig | None = None,
        bytes_codec: BytesCodec | None = None
    ) -> None:
        self.config = config or SerdeConfig()
        if self.config.bytes_support and bytes_codec is None:
            raise ValueError("bytes_support requires a bytes codec")
        self._bytes_codec = bytes_codec
        self._logger = logging.getLogger("core.facade")

    def to_lua(self, value: Any, tp: Any = None) -> LuaValue:
        shape = shape_of(Any if tp is None else tp)
        serializer = LuaSerializer(self.config, self._bytes_codec)
        try:
            return shape.serialize(value, serializer)
        except LuaSerializeError as ex:
            self._logger.debug(f"Cannot convert {type(value).__name__} to lua: {ex}")
            raise
        except SerializeError as ex:
            self._logger.debug(f"Cannot convert {type(value).__name__} to lua: {ex}")
            raise LuaSerializeError(ex.message, ex.kind) from ex

    def from_lua(self, tp: Any, value: LuaValue) -> Any:
        shape = shape_of(tp)
        deserializer = LuaDeserializer(value, self.config, self._bytes_codec)
        try:
            return shape.deserialize(deserializer)
        except LuaDeserializeError as ex:
            self._logger.debug(f"Cannot convert lua value to {shape.expecting()}: {ex}")
            raise
        except DeserializeError as ex:
            self._logger.debug(f"Cannot convert lua value to {shape.expecting()}: {ex}")
            raise LuaDeserializeError(ex.message, ex.kind) from ex
