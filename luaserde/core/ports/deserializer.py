from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from luaserde.core.ports.errors import DeserializeError, Unexpected


class _End:
    """Singleton returned by an access object once it is exhausted."""

    _instance: _End | None = None

    def __new__(cls) -> _End:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "END"

    def __bool__(self) -> bool:
        return False


END = _End()


@runtime_checkable
class DeserializeSeed(Protocol):
    """
    Something able to drive a Deserializer and produce a native value.

    Seeds carry the state the consumer needs to pick the right
    `deserialize_*` method: typically the static description of the type
    being built.
    """

    def deserialize(self, deserializer: Deserializer) -> Any:
        ...


class SeqAccess(Protocol):
    """Hands the elements of a sequence to a visitor, one at a time."""

    def next_element_seed(self, seed: DeserializeSeed) -> Any:
        """Decode the next element with `seed`, or return END when exhausted."""

    def size_hint(self) -> int | None:
        ...


class MapAccess(Protocol):
    """
    Hands the entries of a map to a visitor.

    `next_value_seed` must be called exactly once after every key returned
    by `next_key_seed`, before the next key is requested.
    """

    def next_key_seed(self, seed: DeserializeSeed) -> Any:
        """Decode the next key with `seed`, or return END when exhausted."""

    def next_value_seed(self, seed: DeserializeSeed) -> Any:
        """Decode the value belonging to the key just returned."""

    def next_entry_seed(self, key_seed: DeserializeSeed, value_seed: DeserializeSeed) -> Any:
        """Decode a whole entry as a `(key, value)` tuple, or return END."""

    def size_hint(self) -> int | None:
        ...


class VariantAccess(Protocol):
    """Decodes the payload of an enum variant once its tag is known."""

    def unit_variant(self) -> None:
        ...

    def newtype_variant_seed(self, seed: DeserializeSeed) -> Any:
        ...

    def tuple_variant(self, length: int, visitor: Visitor) -> Any:
        ...

    def struct_variant(self, fields: tuple[str, ...], visitor: Visitor) -> Any:
        ...


class EnumAccess(Protocol):
    """Gives access to the tag of an enum variant, then to its payload."""

    def variant_seed(self, seed: DeserializeSeed) -> tuple[Any, VariantAccess]:
        ...


class Visitor:
    """
    Consumer side of the deserialization protocol.

    A Deserializer inspects its input and calls back the one `visit_*`
    method matching what it found. Subclasses override the visits they
    accept; every other visit fails with an invalid-type error built from
    `expecting()`.

    Narrow visits forward to wider ones: `visit_i8` to `visit_i64`,
    `visit_u8` to `visit_u64`, `visit_f32` to `visit_f64`, `visit_char`
    and `visit_string` to `visit_str`, `visit_byte_buf` to `visit_bytes`.
    """

    def expecting(self) -> str:
        return "a value"

    def visit_bool(self, v: bool) -> Any:
        raise DeserializeError.invalid_type(Unexpected.boolean(v), self)

    def visit_i8(self, v: int) -> Any:
        return self.visit_i64(v)

    def visit_i16(self, v: int) -> Any:
        return self.visit_i64(v)

    def visit_i32(self, v: int) -> Any:
        return self.visit_i64(v)

    def visit_i64(self, v: int) -> Any:
        raise DeserializeError.invalid_type(Unexpected.signed(v), self)

    def visit_u8(self, v: int) -> Any:
        return self.visit_u64(v)

    def visit_u16(self, v: int) -> Any:
        return self.visit_u64(v)

    def visit_u32(self, v: int) -> Any:
        return self.visit_u64(v)

    def visit_u64(self, v: int) -> Any:
        raise DeserializeError.invalid_type(Unexpected.unsigned(v), self)

    def visit_f32(self, v: float) -> Any:
        return self.visit_f64(v)

    def visit_f64(self, v: float) -> Any:
        raise DeserializeError.invalid_type(Unexpected.floating(v), self)

    def visit_char(self, v: str) -> Any:
        return self.visit_str(v)

    def visit_str(self, v: str) -> Any:
        raise DeserializeError.invalid_type(Unexpected.string(v), self)

    def visit_string(self, v: str) -> Any:
        return self.visit_str(v)

    def visit_bytes(self, v: bytes) -> Any:
        raise DeserializeError.invalid_type(Unexpected.binary(), self)

    def visit_byte_buf(self, v: bytes) -> Any:
        return self.visit_bytes(v)

    def visit_none(self) -> Any:
        raise DeserializeError.invalid_type(Unexpected.option(), self)

    def visit_some(self, deserializer: Deserializer) -> Any:
        raise DeserializeError.invalid_type(Unexpected.option(), self)

    def visit_unit(self) -> Any:
        raise DeserializeError.invalid_type(Unexpected.unit(), self)

    def visit_newtype_struct(self, deserializer: Deserializer) -> Any:
        raise DeserializeError.invalid_type(Unexpected.other("newtype struct"), self)

    def visit_seq(self, access: SeqAccess) -> Any:
        raise DeserializeError.invalid_type(Unexpected.seq(), self)

    def visit_map(self, access: MapAccess) -> Any:
        raise DeserializeError.invalid_type(Unexpected.map(), self)

    def visit_enum(self, access: EnumAccess) -> Any:
        raise DeserializeError.invalid_type(Unexpected.enum(), self)


class IgnoredAny(Visitor):
    """Accepts any input and throws it away. Also usable as a seed."""

    def expecting(self) -> str:
        return "anything at all"

    def deserialize(self, deserializer: Deserializer) -> None:
        return deserializer.deserialize_ignored_any(self)

    def visit_bool(self, v: bool) -> None:
        return None

    def visit_i64(self, v: int) -> None:
        return None

    def visit_u64(self, v: int) -> None:
        return None

    def visit_f64(self, v: float) -> None:
        return None

    def visit_str(self, v: str) -> None:
        return None

    def visit_bytes(self, v: bytes) -> None:
        return None

    def visit_none(self) -> None:
        return None

    def visit_some(self, deserializer: Deserializer) -> None:
        return deserializer.deserialize_ignored_any(self)

    def visit_unit(self) -> None:
        return None

    def visit_newtype_struct(self, deserializer: Deserializer) -> None:
        return deserializer.deserialize_ignored_any(self)

    def visit_seq(self, access: SeqAccess) -> None:
        while access.next_element_seed(self) is not END:
            pass

    def visit_map(self, access: MapAccess) -> None:
        while access.next_entry_seed(self, self) is not END:
            pass

    def visit_enum(self, access: EnumAccess) -> None:
        _, variant = access.variant_seed(self)
        variant.newtype_variant_seed(self)


class Deserializer(Protocol):
    """
    Format-agnostic, consumer-driven side of the deserialization protocol.

    The consumer calls the `deserialize_*` method matching the type it
    wants to build, passing a Visitor. The Deserializer checks its input
    against the request and calls back the matching `visit_*` method, or
    raises a subclass of `DeserializeError`.

    `deserialize_any` and `deserialize_ignored_any` let self-describing
    formats pick the visit from the input itself.
    """

    def deserialize_any(self, visitor: Visitor) -> Any:
        ...

    def deserialize_bool(self, visitor: Visitor) -> Any:
        ...

    def deserialize_i8(self, visitor: Visitor) -> Any:
        ...

    def deserialize_i16(self, visitor: Visitor) -> Any:
        ...

    def deserialize_i32(self, visitor: Visitor) -> Any:
        ...

    def deserialize_i64(self, visitor: Visitor) -> Any:
        ...

    def deserialize_u8(self, visitor: Visitor) -> Any:
        ...

    def deserialize_u16(self, visitor: Visitor) -> Any:
        ...

    def deserialize_u32(self, visitor: Visitor) -> Any:
        ...

    def deserialize_u64(self, visitor: Visitor) -> Any:
        ...

    def deserialize_f32(self, visitor: Visitor) -> Any:
        ...

    def deserialize_f64(self, visitor: Visitor) -> Any:
        ...

    def deserialize_char(self, visitor: Visitor) -> Any:
        ...

    def deserialize_str(self, visitor: Visitor) -> Any:
        ...

    def deserialize_string(self, visitor: Visitor) -> Any:
        ...

    def deserialize_bytes(self, visitor: Visitor) -> Any:
        ...

    def deserialize_byte_buf(self, visitor: Visitor) -> Any:
        ...

    def deserialize_option(self, visitor: Visitor) -> Any:
        ...

    def deserialize_unit(self, visitor: Visitor) -> Any:
        ...

    def deserialize_unit_struct(self, name: str, visitor: Visitor) -> Any:
        ...

    def deserialize_newtype_struct(self, name: str, visitor: Visitor) -> Any:
        ...

    def deserialize_seq(self, visitor: Visitor) -> Any:
        ...

    def deserialize_tuple(self, length: int, visitor: Visitor) -> Any:
        ...

    def deserialize_tuple_struct(self, name: str, length: int, visitor: Visitor) -> Any:
        ...

    def deserialize_map(self, visitor: Visitor) -> Any:
        ...

    def deserialize_struct(self, name: str, fields: tuple[str, ...], visitor: Visitor) -> Any:
        ...

    def deserialize_enum(self, name: str, variants: tuple[str, ...], visitor: Visitor) -> Any:
        ...

    def deserialize_identifier(self, visitor: Visitor) -> Any:
        ...

    def deserialize_ignored_any(self, visitor: Visitor) -> Any:
        ...
