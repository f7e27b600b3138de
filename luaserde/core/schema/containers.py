from collections.abc import Callable, Collection, Iterable, Mapping
from typing import Any

from luaserde.core.ports.deserializer import END, Deserializer, IgnoredAny, MapAccess, SeqAccess
from luaserde.core.ports.errors import DeserializeError, ErrorKind, SerializeError, Unexpected
from luaserde.core.ports.serializer import Serializer
from luaserde.core.schema.shape import Shape, Typed, mismatch


class OptionShape(Shape):
    """`X | None`: None is written as nil, anything else as X."""

    missing_as_none = True

    def __init__(self, inner: Shape) -> None:
        self.inner = inner

    def expecting(self) -> str:
        return f"option of {self.inner.expecting()}"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if value is None:
            return serializer.serialize_none()
        return serializer.serialize_some(Typed(value, self.inner))

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_option(self)

    def visit_none(self) -> None:
        return None

    def visit_unit(self) -> None:
        return None

    def visit_some(self, deserializer: Deserializer) -> Any:
        return self.inner.deserialize(deserializer)


def _is_sequence(value: Any) -> bool:
    return (
        isinstance(value, Collection)
        and not isinstance(value, (str, bytes, bytearray, Mapping))
    )


class SeqShape(Shape):
    """
    Homogeneous sequences: lists, sets, frozensets and `tuple[X, ...]`.
    `factory` builds the container from the decoded list of items.
    """

    def __init__(self, item: Shape, factory: Callable[[Iterable[Any]], Any] = list) -> None:
        self.item = item
        self.factory = factory

    def expecting(self) -> str:
        return "a sequence"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if not _is_sequence(value):
            raise mismatch(value, self)
        seq = serializer.serialize_seq(len(value))
        for item in value:
            seq.serialize_element(Typed(item, self.item))
        return seq.end()

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_seq(self)

    def visit_seq(self, access: SeqAccess) -> Any:
        items = []
        while (item := access.next_element_seed(self.item)) is not END:
            items.append(item)
        return self.factory(items)


class TupleShape(Shape):
    """Fixed-size heterogeneous tuples, `tuple[A, B, ...]`."""

    def __init__(self, items: tuple[Shape, ...]) -> None:
        self.items = items

    def expecting(self) -> str:
        return f"a tuple of size {len(self.items)}"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if not isinstance(value, (tuple, list)):
            raise mismatch(value, self)
        if len(value) != len(self.items):
            raise SerializeError(
                f"invalid length {len(value)}, expected {self.expecting()}",
                ErrorKind.invalid_length
            )
        tup = serializer.serialize_tuple(len(self.items))
        for item, shape in zip(value, self.items):
            tup.serialize_element(Typed(item, shape))
        return tup.end()

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_tuple(len(self.items), self)

    def visit_seq(self, access: SeqAccess) -> tuple:
        return tuple(read_positional(access, self.items, self))


def read_positional(access: SeqAccess, shapes: Iterable[Shape], expected: Any) -> list[Any]:
    """Read exactly one element per shape, failing on a short or long sequence."""
    values = []
    for index, shape in enumerate(shapes):
        value = access.next_element_seed(shape)
        if value is END:
            raise DeserializeError.invalid_length(index, expected)
        values.append(value)
    if access.next_element_seed(IgnoredAny()) is not END:
        raise DeserializeError.invalid_length(len(values) + 1, expected)
    return values


class MapShape(Shape):
    def __init__(self, key: Shape, value: Shape) -> None:
        self.key = key
        self.value = value

    def expecting(self) -> str:
        return "a map"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if not isinstance(value, Mapping):
            raise mismatch(value, self)
        table = serializer.serialize_map(len(value))
        for k, v in value.items():
            table.serialize_entry(Typed(k, self.key), Typed(v, self.value))
        return table.end()

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_map(self)

    def visit_map(self, access: MapAccess) -> dict:
        result = {}
        while (entry := access.next_entry_seed(self.key, self.value)) is not END:
            key, value = entry
            result[key] = value
        return result


class AnyShape(Shape):
    """
    `typing.Any`: the shape is taken from the data itself.

    Writing inspects the runtime type of the value, reading lets the
    deserializer describe its input. Lua numbers always read back as
    floats, tables as lists or dicts depending on their keys.
    """

    def __init__(self, resolve: Callable[[Any], Shape]) -> None:
        self._resolve = resolve

    def expecting(self) -> str:
        return "any value"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        # Exact types only: subclasses such as NamedTuple or IntEnum have shapes of their own.
        kind = type(value)
        if value is None:
            return serializer.serialize_unit()
        if kind is bool:
            return serializer.serialize_bool(value)
        if kind is int:
            return serializer.serialize_i64(value)
        if kind is float:
            return serializer.serialize_f64(value)
        if kind is str:
            return serializer.serialize_str(value)
        if kind in (bytes, bytearray):
            return serializer.serialize_bytes(bytes(value))
        if kind is dict:
            table = serializer.serialize_map(len(value))
            for k, v in value.items():
                table.serialize_entry(Typed(k, self), Typed(v, self))
            return table.end()
        if kind in (list, tuple, set, frozenset):
            seq = serializer.serialize_seq(len(value))
            for item in value:
                seq.serialize_element(Typed(item, self))
            return seq.end()
        return self._resolve(type(value)).serialize(value, serializer)

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_any(self)

    def visit_bool(self, v: bool) -> bool:
        return v

    def visit_i64(self, v: int) -> int:
        return v

    def visit_u64(self, v: int) -> int:
        return v

    def visit_f64(self, v: float) -> float:
        return v

    def visit_str(self, v: str) -> str:
        return v

    def visit_bytes(self, v: bytes) -> bytes:
        return v

    def visit_none(self) -> None:
        return None

    def visit_unit(self) -> None:
        return None

    def visit_some(self, deserializer: Deserializer) -> Any:
        return self.deserialize(deserializer)

    def visit_newtype_struct(self, deserializer: Deserializer) -> Any:
        return self.deserialize(deserializer)

    def visit_seq(self, access: SeqAccess) -> list:
        items = []
        while (item := access.next_element_seed(self)) is not END:
            items.append(item)
        return items

    def visit_map(self, access: MapAccess) -> dict:
        result = {}
        while (entry := access.next_entry_seed(self, self)) is not END:
            key, value = entry
            try:
                result[key] = value
            except TypeError:
                raise DeserializeError.invalid_type(
                    Unexpected.other(f"unhashable map key of type {type(key).__name__}"),
                    "a hashable map key"
                ) from None
        return result
