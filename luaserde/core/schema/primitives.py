from typing import Any

from luaserde.core.models.numeric import F64_WIDTH, I64_WIDTH, FloatWidth, IntWidth
from luaserde.core.ports.deserializer import Deserializer
from luaserde.core.ports.errors import DeserializeError, Unexpected
from luaserde.core.ports.serializer import Serializer
from luaserde.core.schema.shape import Shape, mismatch


class BoolShape(Shape):
    def expecting(self) -> str:
        return "a boolean"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if not isinstance(value, bool):
            raise mismatch(value, self)
        return serializer.serialize_bool(value)

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_bool(self)

    def visit_bool(self, v: bool) -> bool:
        return v


class IntShape(Shape):
    """A Python int constrained to a fixed width; plain `int` means i64."""

    def __init__(self, width: IntWidth = I64_WIDTH) -> None:
        self.width = width

    def expecting(self) -> str:
        return self.width.name

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if isinstance(value, bool) or not isinstance(value, int):
            raise mismatch(value, self)
        return getattr(serializer, f"serialize_{self.width.name}")(value)

    def deserialize(self, deserializer: Deserializer) -> Any:
        return getattr(deserializer, f"deserialize_{self.width.name}")(self)

    def _checked(self, v: int, unexpected: Unexpected) -> int:
        if not self.width.contains(v):
            raise DeserializeError.invalid_value(unexpected, self)
        return v

    def visit_i64(self, v: int) -> int:
        return self._checked(v, Unexpected.signed(v))

    def visit_u64(self, v: int) -> int:
        return self._checked(v, Unexpected.unsigned(v))


class FloatShape(Shape):
    def __init__(self, width: FloatWidth = F64_WIDTH) -> None:
        self.width = width

    def expecting(self) -> str:
        return self.width.name

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise mismatch(value, self)
        return getattr(serializer, f"serialize_{self.width.name}")(float(value))

    def deserialize(self, deserializer: Deserializer) -> Any:
        return getattr(deserializer, f"deserialize_{self.width.name}")(self)

    def visit_f64(self, v: float) -> float:
        return v

    def visit_i64(self, v: int) -> float:
        return float(v)

    def visit_u64(self, v: int) -> float:
        return float(v)


class StrShape(Shape):
    def expecting(self) -> str:
        return "a string"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if not isinstance(value, str):
            raise mismatch(value, self)
        return serializer.serialize_str(value)

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_string(self)

    def visit_str(self, v: str) -> str:
        return v


class CharShape(Shape):
    def expecting(self) -> str:
        return "a character"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if not isinstance(value, str):
            raise mismatch(value, self)
        return serializer.serialize_char(value)

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_char(self)

    def visit_str(self, v: str) -> str:
        if len(v) != 1:
            raise DeserializeError.invalid_length(len(v), self)
        return v


class BytesShape(Shape):
    def __init__(self, kind: type = bytes) -> None:
        self.kind = kind

    def expecting(self) -> str:
        return "a byte array"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise mismatch(value, self)
        return serializer.serialize_bytes(bytes(value))

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_byte_buf(self)

    def visit_bytes(self, v: bytes) -> Any:
        return self.kind(v)


class UnitShape(Shape):
    """The `None` annotation: a value that carries no data."""

    def expecting(self) -> str:
        return "unit"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if value is not None:
            raise mismatch(value, self)
        return serializer.serialize_unit()

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_unit(self)

    def visit_unit(self) -> None:
        return None
