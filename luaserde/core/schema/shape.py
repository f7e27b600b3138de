from dataclasses import dataclass
from typing import Any

from luaserde.core.ports.deserializer import Deserializer, Visitor
from luaserde.core.ports.errors import ErrorKind, SerializeError
from luaserde.core.ports.serializer import Serializer


class Shape(Visitor):
    """
    Type-directed implementation of the conversion protocol.

    A shape knows how one Python type is written through a Serializer and
    read back from a Deserializer. It is at the same time the seed that
    picks the `deserialize_*` method and the visitor that receives the
    result, so the decoding state lives in the access objects, never in
    the shape. Shapes are cached per type and shared between threads.
    """

    missing_as_none = False
    """Whether a record field of this shape reads as None when its key is absent."""

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        raise NotImplementedError

    def deserialize(self, deserializer: Deserializer) -> Any:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Typed:
    """A value bound to its shape, so it can be handed to a Serializer."""
    value: Any
    shape: Shape

    def serialize(self, serializer: Serializer) -> Any:
        return self.shape.serialize(self.value, serializer)


def mismatch(value: Any, shape: Shape) -> SerializeError:
    return SerializeError(
        f"invalid value of type {type(value).__name__}, expected {shape.expecting()}",
        ErrorKind.invalid_type
    )
