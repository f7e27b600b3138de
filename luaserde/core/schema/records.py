import dataclasses
from dataclasses import dataclass
from functools import cached_property
from typing import Annotated, Any, Callable, get_origin, get_type_hints

from pydantic import BaseModel

from luaserde.core.ports.deserializer import END, Deserializer, IgnoredAny, MapAccess, SeqAccess
from luaserde.core.ports.errors import DeserializeError
from luaserde.core.ports.serializer import Serializer
from luaserde.core.schema.containers import read_positional
from luaserde.core.schema.options import FIELD_OPTIONS, FieldOptions, container_options
from luaserde.core.schema.shape import Shape, Typed, mismatch


Resolver = Callable[[Any], Shape]

MISSING = dataclasses.MISSING


@dataclass(slots=True)
class RecordField:
    name: str
    """Attribute name on the Python object."""

    key: str
    """Key of the field in the Lua table."""

    shape: Shape
    skip: bool = False
    default_factory: Callable[[], Any] | None = None

    @property
    def has_default(self) -> bool:
        return self.default_factory is not None


class FieldNameShape(Shape):
    def expecting(self) -> str:
        return "field identifier"

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_identifier(self)

    def visit_str(self, v: str) -> str:
        return v


FIELD_NAME = FieldNameShape()


def is_record(tp: Any) -> bool:
    return isinstance(tp, type) and (
        dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)
    )


def _annotated_options(annotation: Any) -> FieldOptions | None:
    if get_origin(annotation) is Annotated:
        for meta in annotation.__metadata__:
            if isinstance(meta, FieldOptions):
                return meta
    return None


def _constant(value: Any) -> Callable[[], Any]:
    return lambda: value


def record_fields(cls: type, resolve: Resolver) -> list[RecordField]:
    """
    Describe the fields of a dataclass or a pydantic model.

    Dataclass annotations are resolved with `get_type_hints`, so string
    and forward annotations work as long as they are resolvable from the
    module of the class. Model annotations come already resolved.
    """
    options = container_options(cls)
    fields = []

    if dataclasses.is_dataclass(cls):
        hints = get_type_hints(cls, include_extras=True)
        for f in dataclasses.fields(cls):
            if not f.init:
                continue
            annotation = hints.get(f.name, Any)
            field_options = f.metadata.get(FIELD_OPTIONS) or _annotated_options(annotation)
            if f.default is not MISSING:
                factory = _constant(f.default)
            elif f.default_factory is not MISSING:
                factory = f.default_factory
            else:
                factory = None
            fields.append((f.name, annotation, field_options, factory))
    else:
        for name, info in cls.model_fields.items():
            # pydantic moves `Annotated` metadata to the field info
            annotation = info.annotation
            if info.metadata:
                annotation = Annotated[(annotation, *info.metadata)]
            factory = None
            if not info.is_required():
                factory = lambda info=info: info.get_default(call_default_factory=True)
            fields.append((name, annotation, _annotated_options(annotation), factory))

    result = []
    for name, annotation, field_options, factory in fields:
        field_options = field_options or FieldOptions()
        if field_options.skip and factory is None:
            raise TypeError(f"Skipped field '{cls.__name__}.{name}' must have a default")
        result.append(
            RecordField(
                name=name,
                key=field_options.rename or options.key_of(name),
                shape=resolve(annotation),
                skip=field_options.skip,
                default_factory=factory
            )
        )
    return result


class StructShape(Shape):
    """
    Dataclasses and pydantic models, written as tables keyed by field name.

    Reading accepts the keys in any order and ignores unknown ones. A
    missing field takes its default, reads as None when it is optional,
    and fails otherwise.

    Pydantic models are built with `model_construct`: the decoded values
    already have their annotated types, and model validators are not run.
    """

    def __init__(self, cls: type, resolve: Resolver) -> None:
        self.cls = cls
        self.name = container_options(cls).name_of(cls.__name__)
        self._resolve = resolve

    @cached_property
    def fields(self) -> list[RecordField]:
        return record_fields(self.cls, self._resolve)

    @cached_property
    def active(self) -> list[RecordField]:
        return [f for f in self.fields if not f.skip]

    @cached_property
    def keys(self) -> tuple[str, ...]:
        return tuple(f.key for f in self.active)

    @cached_property
    def _by_key(self) -> dict[str, RecordField]:
        return {f.key: f for f in self.active}

    def expecting(self) -> str:
        return f"struct {self.name}"

    def write_fields(self, value: Any, builder: Any) -> None:
        for f in self.fields:
            if f.skip:
                builder.skip_field(f.key)
            else:
                builder.serialize_field(f.key, Typed(getattr(value, f.name), f.shape))

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if not isinstance(value, self.cls):
            raise mismatch(value, self)
        builder = serializer.serialize_struct(self.name, len(self.active))
        self.write_fields(value, builder)
        return builder.end()

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_struct(self.name, self.keys, self)

    def visit_map(self, access: MapAccess) -> Any:
        values = {}
        while (key := access.next_key_seed(FIELD_NAME)) is not END:
            f = self._by_key.get(key)
            if f is None:
                access.next_value_seed(IgnoredAny())
                continue
            if f.name in values:
                raise DeserializeError.duplicate_field(f.key)
            values[f.name] = access.next_value_seed(f.shape)
        return self.build(values)

    def build(self, values: dict[str, Any]) -> Any:
        """Instantiate the record, filling in the fields absent from `values`."""
        for f in self.fields:
            if f.name in values:
                continue
            if f.has_default:
                values[f.name] = f.default_factory()
            elif f.shape.missing_as_none:
                values[f.name] = None
            else:
                raise DeserializeError.missing_field(f.key)

        if issubclass(self.cls, BaseModel):
            return self.cls.model_construct(**values)
        return self.cls(**values)


class UnitStructShape(Shape):
    """A record without fields, written as nil."""

    def __init__(self, cls: type) -> None:
        self.cls = cls
        self.name = container_options(cls).name_of(cls.__name__)

    def expecting(self) -> str:
        return f"unit struct {self.name}"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if not isinstance(value, self.cls):
            raise mismatch(value, self)
        return serializer.serialize_unit_struct(self.name)

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_unit_struct(self.name, self)

    def visit_unit(self) -> Any:
        return self.cls()


class TupleStructShape(Shape):
    """NamedTuples, written positionally as arrays."""

    def __init__(self, cls: type, resolve: Resolver) -> None:
        self.cls = cls
        self.name = container_options(cls).name_of(cls.__name__)
        self._resolve = resolve

    @cached_property
    def items(self) -> tuple[Shape, ...]:
        hints = get_type_hints(self.cls, include_extras=True)
        return tuple(self._resolve(hints.get(name, Any)) for name in self.cls._fields)

    def expecting(self) -> str:
        return f"tuple struct {self.name}"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if not isinstance(value, self.cls):
            raise mismatch(value, self)
        builder = serializer.serialize_tuple_struct(self.name, len(self.items))
        for item, shape in zip(value, self.items):
            builder.serialize_field(Typed(item, shape))
        return builder.end()

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_tuple_struct(self.name, len(self.items), self)

    def visit_seq(self, access: SeqAccess) -> Any:
        return self.cls(*read_positional(access, self.items, self))


class NewtypeShape(Shape):
    """`typing.NewType`: transparent, written as its supertype."""

    def __init__(self, newtype: Any, inner: Shape) -> None:
        self.name = newtype.__name__
        self.inner = inner

    def expecting(self) -> str:
        return f"newtype struct {self.name}"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        return serializer.serialize_newtype_struct(self.name, Typed(value, self.inner))

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_newtype_struct(self.name, self)

    def visit_newtype_struct(self, deserializer: Deserializer) -> Any:
        return self.inner.deserialize(deserializer)


class CustomShape(Shape):
    """
    Classes implementing the protocol themselves:

        class Color:
            def __serialize__(self, serializer): ...

            @classmethod
            def __deserialize__(cls, deserializer): ...
    """

    def __init__(self, cls: type) -> None:
        self.cls = cls

    def expecting(self) -> str:
        return self.cls.__name__

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if not hasattr(value, "__serialize__"):
            raise TypeError(f"{self.cls.__name__} does not implement __serialize__")
        return value.__serialize__(serializer)

    def deserialize(self, deserializer: Deserializer) -> Any:
        if not hasattr(self.cls, "__deserialize__"):
            raise TypeError(f"{self.cls.__name__} does not implement __deserialize__")
        return self.cls.__deserialize__(deserializer)
