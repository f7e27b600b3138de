from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Serialize(Protocol):
    """
    A value that knows how to describe itself to a Serializer.

    The value walks its own structure and calls exactly one Serializer
    method for itself; aggregate values then feed their members to the
    builder returned by that method and finish it with `end()`.
    """

    def serialize(self, serializer: Serializer) -> Any:
        ...


class SerializeSeq(Protocol):
    """Builder for a variable-length sequence."""

    def serialize_element(self, value: Serialize) -> None:
        ...

    def end(self) -> Any:
        ...


class SerializeTuple(Protocol):
    """Builder for a fixed-length, heterogeneous sequence."""

    def serialize_element(self, value: Serialize) -> None:
        ...

    def end(self) -> Any:
        ...


class SerializeTupleStruct(Protocol):
    """Builder for a named tuple, e.g. `Point(1, 2)`."""

    def serialize_field(self, value: Serialize) -> None:
        ...

    def end(self) -> Any:
        ...


class SerializeTupleVariant(Protocol):
    """Builder for an enum variant with positional fields."""

    def serialize_field(self, value: Serialize) -> None:
        ...

    def end(self) -> Any:
        ...


class SerializeMap(Protocol):
    """
    Builder for a map.

    Entries are fed either with `serialize_entry`, or with a
    `serialize_key` immediately followed by its `serialize_value`.
    """

    def serialize_key(self, key: Serialize) -> None:
        ...

    def serialize_value(self, value: Serialize) -> None:
        ...

    def serialize_entry(self, key: Serialize, value: Serialize) -> None:
        ...

    def end(self) -> Any:
        ...


class SerializeStruct(Protocol):
    """Builder for a record with named fields."""

    def serialize_field(self, key: str, value: Serialize) -> None:
        ...

    def skip_field(self, key: str) -> None:
        ...

    def end(self) -> Any:
        ...


class SerializeStructVariant(Protocol):
    """Builder for an enum variant with named fields."""

    def serialize_field(self, key: str, value: Serialize) -> None:
        ...

    def skip_field(self, key: str) -> None:
        ...

    def end(self) -> Any:
        ...


class Serializer(Protocol):
    """
    Format-agnostic producer side of the serialization protocol.

    A Serializer receives one call per value describing the value's shape,
    and returns the encoded representation (the type of which is decided
    by the format). It exposes one method per primitive and aggregate
    shape of the data model:

    - scalars: bool, signed and unsigned integers of 8 to 64 bits,
      32 and 64-bit floats, char, str, bytes
    - option: none / some
    - unit, unit struct, unit variant
    - newtype struct, newtype variant
    - seq, tuple, tuple struct, tuple variant
    - map, struct, struct variant

    Aggregate methods return a builder which is fed the members and then
    finished with `end()`.

    Implementations report failures by raising a subclass of
    `SerializeError`. A failed call never yields a partial result.
    """

    def serialize_bool(self, v: bool) -> Any:
        ...

    def serialize_i8(self, v: int) -> Any:
        ...

    def serialize_i16(self, v: int) -> Any:
        ...

    def serialize_i32(self, v: int) -> Any:
        ...

    def serialize_i64(self, v: int) -> Any:
        ...

    def serialize_u8(self, v: int) -> Any:
        ...

    def serialize_u16(self, v: int) -> Any:
        ...

    def serialize_u32(self, v: int) -> Any:
        ...

    def serialize_u64(self, v: int) -> Any:
        ...

    def serialize_f32(self, v: float) -> Any:
        ...

    def serialize_f64(self, v: float) -> Any:
        ...

    def serialize_char(self, v: str) -> Any:
        ...

    def serialize_str(self, v: str) -> Any:
        ...

    def serialize_bytes(self, v: bytes) -> Any:
        ...

    def serialize_none(self) -> Any:
        ...

    def serialize_some(self, value: Serialize) -> Any:
        ...

    def serialize_unit(self) -> Any:
        ...

    def serialize_unit_struct(self, name: str) -> Any:
        ...

    def serialize_unit_variant(self, name: str, variant_index: int, variant: str) -> Any:
        ...

    def serialize_newtype_struct(self, name: str, value: Serialize) -> Any:
        ...

    def serialize_newtype_variant(
        self,
        name: str,
        variant_index: int,
        variant: str,
        value: Serialize
    ) -> Any:
        ...

    def serialize_seq(self, length: int | None) -> SerializeSeq:
        ...

    def serialize_tuple(self, length: int) -> SerializeTuple:
        ...

    def serialize_tuple_struct(self, name: str, length: int) -> SerializeTupleStruct:
        ...

    def serialize_tuple_variant(
        self,
        name: str,
        variant_index: int,
        variant: str,
        length: int
    ) -> SerializeTupleVariant:
        ...

    def serialize_map(self, length: int | None) -> SerializeMap:
        ...

    def serialize_struct(self, name: str, length: int) -> SerializeStruct:
        ...

    def serialize_struct_variant(
        self,
        name: str,
        variant_index: int,
        variant: str,
        length: int
    ) -> SerializeStructVariant:
        ...
