import dataclasses
import enum
import types
from collections.abc import Mapping, MutableMapping, MutableSequence, MutableSet, Sequence, Set
from functools import lru_cache
from typing import Annotated, Any, NewType, Union, get_args, get_origin

from luaserde.core.models.numeric import FloatWidth, IntWidth
from luaserde.core.schema.containers import AnyShape, MapShape, OptionShape, SeqShape, TupleShape
from luaserde.core.schema.enums import EnumShape, UnionShape
from luaserde.core.schema.options import NO_OPTIONS, ContainerOptions
from luaserde.core.schema.primitives import (
    BoolShape, BytesShape, CharShape, FloatShape, IntShape, StrShape, UnitShape
)
from luaserde.core.schema.records import (
    CustomShape, NewtypeShape, StructShape, TupleStructShape, UnitStructShape, is_record
)
from luaserde.core.schema.shape import Shape
from luaserde.core.schema.types import CharMarker


_SEQUENCES = {
    list: list,
    set: set,
    frozenset: frozenset,
    Sequence: list,
    MutableSequence: list,
    Set: frozenset,
    MutableSet: set,
}

_MAPPINGS = (dict, Mapping, MutableMapping)


def shape_of(tp: Any) -> Shape:
    """
    Return the shape converting values annotated with `tp`.

    Shapes are cached per annotation. Raises TypeError for annotations
    that have no representation.
    """
    try:
        hash(tp)
    except TypeError:
        return _build(tp)
    return _cached(tp)


@lru_cache(maxsize=None)
def _cached(tp: Any) -> Shape:
    return _build(tp)


def _build(tp: Any) -> Shape:
    if tp is Any:
        return AnyShape(shape_of)
    if tp is None or tp is type(None):
        return UnitShape()

    origin = get_origin(tp)
    args = get_args(tp)

    if origin is Annotated:
        return _annotated(args[0], tp.__metadata__)
    if origin is Union or origin is types.UnionType:
        return _union(args, NO_OPTIONS)
    if origin in _SEQUENCES or tp in _SEQUENCES:
        item = shape_of(args[0]) if args else shape_of(Any)
        return SeqShape(item, _SEQUENCES[origin or tp])
    if origin is tuple or tp is tuple:
        if not args or (len(args) == 2 and args[1] is Ellipsis):
            return SeqShape(shape_of(args[0] if args else Any), tuple)
        return TupleShape(tuple(shape_of(arg) for arg in args))
    if origin in _MAPPINGS or tp in _MAPPINGS:
        key, value = args if args else (Any, Any)
        return MapShape(shape_of(key), shape_of(value))
    if isinstance(tp, NewType):
        return NewtypeShape(tp, shape_of(tp.__supertype__))
    if isinstance(tp, type):
        return _class(tp)

    raise TypeError(f"Unsupported type annotation: {tp!r}")


def _class(cls: type) -> Shape:
    if hasattr(cls, "__serialize__") or hasattr(cls, "__deserialize__"):
        return CustomShape(cls)
    if cls is bool:
        return BoolShape()
    if cls is int:
        return IntShape()
    if cls is float:
        return FloatShape()
    if cls is str:
        return StrShape()
    if cls in (bytes, bytearray):
        return BytesShape(cls)
    if issubclass(cls, enum.Enum):
        return EnumShape(cls)
    if issubclass(cls, tuple) and hasattr(cls, "_fields"):
        return TupleStructShape(cls, shape_of)
    if is_record(cls):
        if not _has_fields(cls):
            return UnitStructShape(cls)
        return StructShape(cls, shape_of)

    raise TypeError(f"Unsupported type: {cls.__name__}")


def _has_fields(cls: type) -> bool:
    if dataclasses.is_dataclass(cls):
        return any(f.init for f in dataclasses.fields(cls))
    return bool(cls.model_fields)


def _annotated(base: Any, metadata: tuple[Any, ...]) -> Shape:
    for meta in metadata:
        if isinstance(meta, IntWidth):
            return IntShape(meta)
        if isinstance(meta, FloatWidth):
            return FloatShape(meta)
        if isinstance(meta, CharMarker):
            return CharShape()
        if isinstance(meta, ContainerOptions) and get_origin(base) in (Union, types.UnionType):
            return _union(get_args(base), meta)
    return shape_of(base)


def _union(args: tuple[Any, ...], options: ContainerOptions) -> Shape:
    rest = tuple(arg for arg in args if arg is not type(None))

    if len(rest) < len(args):
        if len(rest) == 1:
            return OptionShape(shape_of(rest[0]))
        return OptionShape(_union(rest, options))

    if all(is_record(arg) for arg in rest):
        return UnionShape(rest, shape_of, options)

    raise TypeError(
        f"Unsupported union of {', '.join(map(repr, args))}: only `X | None` "
        f"and unions of dataclasses or models are supported"
    )
