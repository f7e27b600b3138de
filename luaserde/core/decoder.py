from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from luaserde.core.errors import ErrorKind, LuaDeserializeError, recursion_limit
from luaserde.core.models.config import SerdeConfig
from luaserde.core.models.numeric import (
    I8_WIDTH, I16_WIDTH, I32_WIDTH, I64_WIDTH,
    U8_WIDTH, U16_WIDTH, U32_WIDTH, U64_WIDTH,
    IntWidth, narrow_f32, number_to_int
)
from luaserde.core.models.value import (
    NIL,
    LuaAnyString,
    LuaBoolean,
    LuaNil,
    LuaNumber,
    LuaOther,
    LuaString,
    LuaTable,
    LuaValue,
)
from luaserde.core.ports.codec import BytesCodec
from luaserde.core.ports.deserializer import END, DeserializeSeed, Visitor
from luaserde.core.ports.errors import Unexpected


Pair = tuple[LuaValue, LuaValue]


def is_vec(pairs: Sequence[Pair]) -> tuple[bool, list[Pair]]:
    """
    Decide whether the pairs of a table form an array.

    A table is an array when every key is a number and the keys are
    exactly the integers 1..N, N being the number of entries: no gaps,
    no duplicates, no fractional or non-positive keys.

    Returns:
        (True, pairs sorted by key) for an array, ready for positional
        access, or (False, original pairs) for a map, ready for key/value
        access.
    """
    original = list(pairs)

    if any(not isinstance(key, LuaNumber) for key, _ in original):
        return False, original

    ordered = sorted(original, key=lambda pair: pair[0].value)

    for index, (key, _) in enumerate(ordered, start=1):
        if key.value != index:
            return False, original

    return True, ordered


def unexpected(value: LuaValue) -> Unexpected:
    """Describe a LuaValue for an error message."""
    if isinstance(value, LuaString):
        return Unexpected.string(value.value)
    if isinstance(value, LuaAnyString):
        return Unexpected.other("non-utf-8 string")
    if isinstance(value, LuaNumber):
        return Unexpected.floating(value.value)
    if isinstance(value, LuaBoolean):
        return Unexpected.boolean(value.value)
    if isinstance(value, LuaTable):
        return Unexpected.map()
    if isinstance(value, LuaNil):
        return Unexpected.unit()
    if isinstance(value, LuaOther):
        return Unexpected.other(value.description)
    return Unexpected.other(type(value).__name__)


def type_error(value: LuaValue, expected: Any) -> LuaDeserializeError:
    return LuaDeserializeError.invalid_type(unexpected(value), expected)


class LuaDeserializer:
    """
    Deserializer reading a single LuaValue.

    The consumer picks the `deserialize_*` method; the deserializer checks
    that the value has the requested kind and calls the matching visit.

    Tables are interpreted according to the request: sequences and tuples
    require an array-shaped table (see `is_vec`), maps and structs accept
    any table and see its pairs in their original order. `deserialize_any`
    applies `is_vec` to choose between a sequence and a map.

    Each instance consumes its value once.
    """

    def __init__(
        self,
        value: LuaValue,
        config: SerdeConfig | None = None,
        bytes_codec: BytesCodec | None = None,
        depth: int = 0
    ) -> None:
        self.value = value
        self.config = config or SerdeConfig()
        self.bytes_codec = bytes_codec
        self.depth = depth

    def child(self, value: LuaValue) -> LuaDeserializer:
        """Return a deserializer for a value nested one table deeper."""
        depth = self.depth + 1
        if depth > self.config.max_depth:
            raise LuaDeserializeError(
                recursion_limit(self.config.max_depth),
                ErrorKind.recursion_limit
            )
        return LuaDeserializer(value, self.config, self.bytes_codec, depth)

    def sibling(self, value: LuaValue) -> LuaDeserializer:
        """Return a deserializer for a value at the same nesting level."""
        return LuaDeserializer(value, self.config, self.bytes_codec, self.depth)

    def deserialize_any(self, visitor: Visitor) -> Any:
        value = self.value
        if isinstance(value, LuaString):
            return visitor.visit_string(value.value)
        if isinstance(value, LuaNumber):
            return visitor.visit_f64(value.value)
        if isinstance(value, LuaBoolean):
            return visitor.visit_bool(value.value)
        if isinstance(value, LuaTable):
            array, pairs = is_vec(value.entries)
            if array:
                return visitor.visit_seq(LuaSeqAccess(self, pairs))
            return visitor.visit_map(LuaMapAccess(self, pairs))
        if isinstance(value, LuaNil):
            return visitor.visit_unit()
        raise type_error(value, visitor)

    def deserialize_bool(self, visitor: Visitor) -> Any:
        if isinstance(self.value, LuaBoolean):
            return visitor.visit_bool(self.value.value)
        raise type_error(self.value, visitor)

    def _integer(self, width: IntWidth, visitor: Visitor) -> Any:
        if isinstance(self.value, LuaNumber):
            integer = number_to_int(self.value.value, width)
            if integer is not None:
                visit = getattr(visitor, f"visit_{width.name}")
                return visit(integer)
        raise type_error(self.value, visitor)

    def deserialize_i8(self, visitor: Visitor) -> Any:
        return self._integer(I8_WIDTH, visitor)

    def deserialize_i16(self, visitor: Visitor) -> Any:
        return self._integer(I16_WIDTH, visitor)

    def deserialize_i32(self, visitor: Visitor) -> Any:
        return self._integer(I32_WIDTH, visitor)

    def deserialize_i64(self, visitor: Visitor) -> Any:
        return self._integer(I64_WIDTH, visitor)

    def deserialize_u8(self, visitor: Visitor) -> Any:
        return self._integer(U8_WIDTH, visitor)

    def deserialize_u16(self, visitor: Visitor) -> Any:
        return self._integer(U16_WIDTH, visitor)

    def deserialize_u32(self, visitor: Visitor) -> Any:
        return self._integer(U32_WIDTH, visitor)

    def deserialize_u64(self, visitor: Visitor) -> Any:
        return self._integer(U64_WIDTH, visitor)

    def deserialize_f32(self, visitor: Visitor) -> Any:
        if isinstance(self.value, LuaNumber):
            return visitor.visit_f32(narrow_f32(self.value.value))
        raise type_error(self.value, visitor)

    def deserialize_f64(self, visitor: Visitor) -> Any:
        if isinstance(self.value, LuaNumber):
            return visitor.visit_f64(self.value.value)
        raise type_error(self.value, visitor)

    def deserialize_char(self, visitor: Visitor) -> Any:
        if isinstance(self.value, LuaString):
            text = self.value.value
            if len(text) != 1:
                raise LuaDeserializeError.invalid_length(len(text), visitor)
            return visitor.visit_char(text)
        raise type_error(self.value, visitor)

    def deserialize_str(self, visitor: Visitor) -> Any:
        if isinstance(self.value, LuaString):
            return visitor.visit_str(self.value.value)
        raise type_error(self.value, visitor)

    def deserialize_string(self, visitor: Visitor) -> Any:
        if isinstance(self.value, LuaString):
            return visitor.visit_string(self.value.value)
        raise type_error(self.value, visitor)

    def _decode_bytes(self, what: str, visitor: Visitor) -> bytes:
        if not self.config.bytes_support or self.bytes_codec is None:
            raise LuaDeserializeError(
                f"cannot deserialize {what}; enable 'bytes_support'",
                ErrorKind.unsupported
            )
        if not isinstance(self.value, LuaString):
            raise type_error(self.value, visitor)
        try:
            return self.bytes_codec.decode(self.value.value)
        except ValueError:
            raise LuaDeserializeError.invalid_value(
                Unexpected.other("non-base64 data"),
                visitor
            ) from None

    def deserialize_bytes(self, visitor: Visitor) -> Any:
        return visitor.visit_bytes(self._decode_bytes("bytes", visitor))

    def deserialize_byte_buf(self, visitor: Visitor) -> Any:
        return visitor.visit_byte_buf(self._decode_bytes("byte_buf", visitor))

    def deserialize_option(self, visitor: Visitor) -> Any:
        if isinstance(self.value, LuaNil):
            return visitor.visit_none()
        return visitor.visit_some(self)

    def deserialize_unit(self, visitor: Visitor) -> Any:
        if isinstance(self.value, LuaNil):
            return visitor.visit_unit()
        raise type_error(self.value, visitor)

    def deserialize_unit_struct(self, name: str, visitor: Visitor) -> Any:
        return self.deserialize_unit(visitor)

    def deserialize_newtype_struct(self, name: str, visitor: Visitor) -> Any:
        return visitor.visit_newtype_struct(self)

    def deserialize_seq(self, visitor: Visitor) -> Any:
        if not isinstance(self.value, LuaTable):
            raise type_error(self.value, visitor)
        array, pairs = is_vec(self.value.entries)
        if not array:
            raise LuaDeserializeError.invalid_type(Unexpected.map(), visitor)
        return visitor.visit_seq(LuaSeqAccess(self, pairs))

    def deserialize_tuple(self, length: int, visitor: Visitor) -> Any:
        if not isinstance(self.value, LuaTable):
            raise type_error(self.value, visitor)
        if len(self.value) != length:
            raise LuaDeserializeError.invalid_length(len(self.value), visitor)
        array, pairs = is_vec(self.value.entries)
        if not array:
            raise LuaDeserializeError.invalid_type(Unexpected.map(), visitor)
        return visitor.visit_seq(LuaSeqAccess(self, pairs))

    def deserialize_tuple_struct(self, name: str, length: int, visitor: Visitor) -> Any:
        return self.deserialize_tuple(length, visitor)

    def deserialize_map(self, visitor: Visitor) -> Any:
        # Any table, array-shaped ones included; pairs keep their original order.
        if not isinstance(self.value, LuaTable):
            raise type_error(self.value, visitor)
        return visitor.visit_map(LuaMapAccess(self, self.value.entries))

    def deserialize_struct(self, name: str, fields: tuple[str, ...], visitor: Visitor) -> Any:
        return self.deserialize_map(visitor)

    def deserialize_enum(self, name: str, variants: tuple[str, ...], visitor: Visitor) -> Any:
        value = self.value
        if isinstance(value, LuaString):
            return visitor.visit_enum(LuaEnumAccess(self, self.sibling(NIL)))
        if isinstance(value, LuaTable):
            if len(value) != 1:
                raise LuaDeserializeError.invalid_length(len(value), visitor)
            (tag, payload), = value.entries
            return visitor.visit_enum(LuaEnumAccess(self.child(tag), self.child(payload)))
        raise type_error(value, visitor)

    def deserialize_identifier(self, visitor: Visitor) -> Any:
        return self.deserialize_string(visitor)

    def deserialize_ignored_any(self, visitor: Visitor) -> Any:
        return self.deserialize_any(visitor)


class LuaSeqAccess:
    """
    Positional access over an array-shaped table.

    The pairs must be sorted by key; keys are not looked at again, the
    values are yielded in order.
    """

    def __init__(self, parent: LuaDeserializer, pairs: Sequence[Pair]) -> None:
        self._parent = parent
        self._remaining = len(pairs)
        self._values: Iterator[Pair] = iter(pairs)

    def next_element_seed(self, seed: DeserializeSeed) -> Any:
        pair = next(self._values, None)
        if pair is None:
            return END
        self._remaining -= 1
        _, value = pair
        return seed.deserialize(self._parent.child(value))

    def size_hint(self) -> int | None:
        return self._remaining


class LuaMapAccess:
    """
    Key/value access over the pairs of a table, in their original order.

    Holds the value of the last key handed out until `next_value_seed`
    consumes it.
    """

    def __init__(self, parent: LuaDeserializer, pairs: Sequence[Pair]) -> None:
        self._parent = parent
        self._remaining = len(pairs)
        self._pairs: Iterator[Pair] = iter(pairs)
        self._pending: LuaValue | None = None

    def next_key_seed(self, seed: DeserializeSeed) -> Any:
        if self._pending is not None:
            raise LuaDeserializeError.custom("next_key_seed called before the previous value was read")
        pair = next(self._pairs, None)
        if pair is None:
            return END
        self._remaining -= 1
        key, self._pending = pair
        return seed.deserialize(self._parent.child(key))

    def next_value_seed(self, seed: DeserializeSeed) -> Any:
        if self._pending is None:
            raise LuaDeserializeError.custom("next_value_seed called before next_key_seed")
        value, self._pending = self._pending, None
        return seed.deserialize(self._parent.child(value))

    def next_entry_seed(self, key_seed: DeserializeSeed, value_seed: DeserializeSeed) -> Any:
        key = self.next_key_seed(key_seed)
        if key is END:
            return END
        return key, self.next_value_seed(value_seed)

    def size_hint(self) -> int | None:
        return self._remaining


class LuaEnumAccess:
    """Access to the tag of an enum: the bare string, or the envelope's only key."""

    def __init__(self, tag: LuaDeserializer, payload: LuaDeserializer) -> None:
        self._tag = tag
        self._payload = payload

    def variant_seed(self, seed: DeserializeSeed) -> tuple[Any, LuaVariantAccess]:
        return seed.deserialize(self._tag), LuaVariantAccess(self._payload)


class LuaVariantAccess:
    """Access to the payload of an enum variant."""

    def __init__(self, payload: LuaDeserializer) -> None:
        self._payload = payload

    def unit_variant(self) -> None:
        if not isinstance(self._payload.value, LuaNil):
            raise type_error(self._payload.value, "unit variant")

    def newtype_variant_seed(self, seed: DeserializeSeed) -> Any:
        return seed.deserialize(self._payload)

    def tuple_variant(self, length: int, visitor: Visitor) -> Any:
        return self._payload.deserialize_tuple(length, visitor)

    def struct_variant(self, fields: tuple[str, ...], visitor: Visitor) -> Any:
        return self._payload.deserialize_struct("", fields, visitor)
