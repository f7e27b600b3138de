from __future__ import annotations

import math

from luaserde.core.errors import ErrorKind, LuaSerializeError, recursion_limit
from luaserde.core.models.config import SerdeConfig
from luaserde.core.models.numeric import (
    I8_WIDTH, I16_WIDTH, I32_WIDTH, I64_WIDTH,
    U8_WIDTH, U16_WIDTH, U32_WIDTH, U64_WIDTH,
    IntWidth, int_to_number, narrow_f32
)
from luaserde.core.models.value import (
    NIL, LuaBoolean, LuaNil, LuaNumber, LuaString, LuaTable, LuaValue
)
from luaserde.core.ports.codec import BytesCodec
from luaserde.core.ports.serializer import Serialize


Pairs = list[tuple[LuaValue, LuaValue]]


class LuaSerializer:
    """
    Serializer producing LuaValue trees.

    Scalars map directly onto Lua scalars, sequences become tables keyed
    1..N, maps and structs become tables keyed by their encoded keys, and
    non-unit enum variants are wrapped in a one-entry envelope table
    `{tag = payload}`. Unit, unit structs and absent optionals all become nil.

    Integers are only accepted when the cast to a double is lossless.
    Byte strings are only accepted when `config.bytes_support` is enabled
    and a codec is available.

    A serializer is a cheap, stateless value: aggregate builders create a
    child serializer one level deeper for their members.
    """

    def __init__(
        self,
        config: SerdeConfig | None = None,
        bytes_codec: BytesCodec | None = None,
        depth: int = 0
    ) -> None:
        self.config = config or SerdeConfig()
        self.bytes_codec = bytes_codec
        self.depth = depth

    def nested(self) -> LuaSerializer:
        """Return the serializer used for members of an aggregate at this level."""
        depth = self.depth + 1
        if depth > self.config.max_depth:
            raise LuaSerializeError(
                recursion_limit(self.config.max_depth),
                ErrorKind.recursion_limit
            )
        return LuaSerializer(self.config, self.bytes_codec, depth)

    def serialize_bool(self, v: bool) -> LuaValue:
        return LuaBoolean(bool(v))

    def _integer(self, v: int, width: IntWidth) -> LuaValue:
        number = int_to_number(v, width)
        if number is None:
            if not width.contains(v):
                raise LuaSerializeError(
                    f"value {v} is out of range for {width.name}",
                    ErrorKind.lossy_number
                )
            raise LuaSerializeError(
                "value cannot be losslessly represented as lua number (f64)",
                ErrorKind.lossy_number
            )
        return LuaNumber(number)

    def serialize_i8(self, v: int) -> LuaValue:
        return self._integer(v, I8_WIDTH)

    def serialize_i16(self, v: int) -> LuaValue:
        return self._integer(v, I16_WIDTH)

    def serialize_i32(self, v: int) -> LuaValue:
        return self._integer(v, I32_WIDTH)

    def serialize_i64(self, v: int) -> LuaValue:
        return self._integer(v, I64_WIDTH)

    def serialize_u8(self, v: int) -> LuaValue:
        return self._integer(v, U8_WIDTH)

    def serialize_u16(self, v: int) -> LuaValue:
        return self._integer(v, U16_WIDTH)

    def serialize_u32(self, v: int) -> LuaValue:
        return self._integer(v, U32_WIDTH)

    def serialize_u64(self, v: int) -> LuaValue:
        return self._integer(v, U64_WIDTH)

    def serialize_f32(self, v: float) -> LuaValue:
        return LuaNumber(narrow_f32(float(v)))

    def serialize_f64(self, v: float) -> LuaValue:
        return LuaNumber(float(v))

    def serialize_char(self, v: str) -> LuaValue:
        if len(v) != 1:
            raise LuaSerializeError(
                f"expected a single character, found {len(v)} characters",
                ErrorKind.invalid_length
            )
        return LuaString(v)

    def serialize_str(self, v: str) -> LuaValue:
        return LuaString(v)

    def serialize_bytes(self, v: bytes) -> LuaValue:
        if not self.config.bytes_support or self.bytes_codec is None:
            raise LuaSerializeError(
                "cannot serialize bytes; enable 'bytes_support'",
                ErrorKind.unsupported
            )
        return LuaString(self.bytes_codec.encode(bytes(v)))

    def serialize_none(self) -> LuaValue:
        return NIL

    def serialize_some(self, value: Serialize) -> LuaValue:
        return value.serialize(self)

    def serialize_unit(self) -> LuaValue:
        return NIL

    def serialize_unit_struct(self, name: str) -> LuaValue:
        return NIL

    def serialize_unit_variant(self, name: str, variant_index: int, variant: str) -> LuaValue:
        return LuaString(variant)

    def serialize_newtype_struct(self, name: str, value: Serialize) -> LuaValue:
        return value.serialize(self)

    def serialize_newtype_variant(
        self,
        name: str,
        variant_index: int,
        variant: str,
        value: Serialize
    ) -> LuaValue:
        payload = value.serialize(self.nested())
        return LuaTable(((LuaString(variant), payload),))

    def serialize_seq(self, length: int | None) -> LuaSerializeSeq:
        return LuaSerializeSeq(self.nested())

    def serialize_tuple(self, length: int) -> LuaSerializeSeq:
        return LuaSerializeSeq(self.nested())

    def serialize_tuple_struct(self, name: str, length: int) -> LuaSerializeSeq:
        return LuaSerializeSeq(self.nested())

    def serialize_tuple_variant(
        self,
        name: str,
        variant_index: int,
        variant: str,
        length: int
    ) -> LuaSerializeTupleVariant:
        return LuaSerializeTupleVariant(variant, LuaSerializeSeq(self.nested().nested()))

    def serialize_map(self, length: int | None) -> LuaSerializeMap:
        return LuaSerializeMap(self.nested())

    def serialize_struct(self, name: str, length: int) -> LuaSerializeMap:
        return LuaSerializeMap(self.nested())

    def serialize_struct_variant(
        self,
        name: str,
        variant_index: int,
        variant: str,
        length: int
    ) -> LuaSerializeStructVariant:
        return LuaSerializeStructVariant(variant, LuaSerializeMap(self.nested().nested()))


class LuaSerializeSeq:
    """
    Accumulates the elements of a sequence, tuple or tuple struct.
    Element i (0-based) is stored under the key i + 1, so the finished
    table is always array-shaped.
    """

    def __init__(self, serializer: LuaSerializer) -> None:
        self._serializer = serializer
        self._pairs: Pairs = []

    def serialize_element(self, value: Serialize) -> None:
        index = float(len(self._pairs) + 1)
        self._pairs.append((LuaNumber(index), value.serialize(self._serializer)))

    def serialize_field(self, value: Serialize) -> None:
        self.serialize_element(value)

    def end(self) -> LuaValue:
        return LuaTable(tuple(self._pairs))


class LuaSerializeTupleVariant:
    def __init__(self, variant: str, fields: LuaSerializeSeq) -> None:
        self._variant = variant
        self._fields = fields

    def serialize_field(self, value: Serialize) -> None:
        self._fields.serialize_element(value)

    def end(self) -> LuaValue:
        return LuaTable(((LuaString(self._variant), self._fields.end()),))


class LuaSerializeMap:
    """
    Accumulates the entries of a map or struct, in insertion order.

    Keys are encoded as soon as they are produced and rejected when they
    encode to nil or NaN: Lua cannot store such keys, and a table that
    silently dropped them could not be looked up again.
    """

    def __init__(self, serializer: LuaSerializer) -> None:
        self._serializer = serializer
        self._pairs: Pairs = []
        self._pending_key: LuaValue | None = None

    def _key(self, key: Serialize) -> LuaValue:
        encoded = key.serialize(self._serializer)
        if isinstance(encoded, LuaNil):
            raise LuaSerializeError("unserializable key nil", ErrorKind.unserializable_key)
        if isinstance(encoded, LuaNumber) and math.isnan(encoded.value):
            raise LuaSerializeError("unserializable key NaN", ErrorKind.unserializable_key)
        return encoded

    def serialize_key(self, key: Serialize) -> None:
        if self._pending_key is not None:
            raise LuaSerializeError.custom("serialize_key called twice without a value")
        self._pending_key = self._key(key)

    def serialize_value(self, value: Serialize) -> None:
        if self._pending_key is None:
            raise LuaSerializeError.custom("serialize_value called before serialize_key")
        key, self._pending_key = self._pending_key, None
        self._pairs.append((key, value.serialize(self._serializer)))

    def serialize_entry(self, key: Serialize, value: Serialize) -> None:
        self.serialize_key(key)
        self.serialize_value(value)

    def serialize_field(self, key: str, value: Serialize) -> None:
        if self._pending_key is not None:
            raise LuaSerializeError.custom("serialize_field called with a key awaiting its value")
        self._pairs.append((LuaString(key), value.serialize(self._serializer)))

    def skip_field(self, key: str) -> None:
        pass

    def end(self) -> LuaValue:
        if self._pending_key is not None:
            raise LuaSerializeError.custom("map ended with a key awaiting its value")
        return LuaTable(tuple(self._pairs))


class LuaSerializeStructVariant:
    def __init__(self, variant: str, fields: LuaSerializeMap) -> None:
        self._variant = variant
        self._fields = fields

    def serialize_field(self, key: str, value: Serialize) -> None:
        self._fields.serialize_field(key, value)

    def skip_field(self, key: str) -> None:
        self._fields.skip_field(key)

    def end(self) -> LuaValue:
        return LuaTable(((LuaString(self._variant), self._fields.end()),))
