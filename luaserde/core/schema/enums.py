import enum
from dataclasses import dataclass
from functools import cached_property
from typing import Any

from luaserde.core.ports.deserializer import Deserializer, EnumAccess, SeqAccess, Visitor
from luaserde.core.ports.errors import DeserializeError
from luaserde.core.ports.serializer import Serializer
from luaserde.core.schema.containers import read_positional
from luaserde.core.schema.options import NO_OPTIONS, ContainerOptions, container_options, variant_options
from luaserde.core.schema.records import RecordField, Resolver, StructShape
from luaserde.core.schema.shape import Shape, Typed, mismatch


class TagShape(Shape):
    """Reads a variant tag and maps it to whatever the enum registered for it."""

    def __init__(self, tags: dict[str, Any]) -> None:
        self.tags = tags

    def expecting(self) -> str:
        return "variant identifier"

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_identifier(self)

    def visit_str(self, v: str) -> Any:
        try:
            return self.tags[v]
        except KeyError:
            raise DeserializeError.unknown_variant(v, self.tags) from None


class EnumShape(Shape):
    """
    `enum.Enum` subclasses. Every member is a unit variant written as its
    name, subject to the `rename_all` option of the enum.
    """

    def __init__(self, cls: type[enum.Enum]) -> None:
        options = container_options(cls)
        self.cls = cls
        self.name = options.name_of(cls.__name__)
        self.members = list(cls)
        self.tag_of = {member: options.key_of(member.name) for member in self.members}
        self.index_of = {member: index for index, member in enumerate(self.members)}
        self._tags = TagShape({tag: member for member, tag in self.tag_of.items()})

    def expecting(self) -> str:
        return f"enum {self.name}"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        if not isinstance(value, self.cls):
            raise mismatch(value, self)
        return serializer.serialize_unit_variant(self.name, self.index_of[value], self.tag_of[value])

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_enum(self.name, tuple(self._tags.tags), self)

    def visit_enum(self, access: EnumAccess) -> Any:
        member, payload = access.variant_seed(self._tags)
        payload.unit_variant()
        return member


@dataclass
class Variant:
    tag: str
    index: int
    record: StructShape
    declared: str | None = None

    @cached_property
    def kind(self) -> str:
        if self.declared is not None:
            return self.declared
        return "unit" if not self.record.active else "struct"

    @cached_property
    def single(self) -> RecordField:
        if len(self.record.active) != 1:
            raise TypeError(
                f"Newtype variant '{self.record.cls.__name__}' must have exactly one field, "
                f"found {len(self.record.active)}"
            )
        return self.record.active[0]


class _TupleVariantVisitor(Visitor):
    def __init__(self, variant: Variant) -> None:
        self.variant = variant

    def expecting(self) -> str:
        return f"tuple variant {self.variant.tag}"

    def visit_seq(self, access: SeqAccess) -> Any:
        fields = self.variant.record.active
        values = read_positional(access, [f.shape for f in fields], self)
        return self.variant.record.build({f.name: v for f, v in zip(fields, values)})


class UnionShape(Shape):
    """
    A union of `@variant` classes, i.e. a tagged enum with payloads.

    Unit variants are written as their tag string, all other variants as
    a one-entry table `{tag = payload}`. The payload of a newtype variant
    is its only field, a tuple variant writes its fields as an array and
    a struct variant as a table keyed by field name.
    """

    def __init__(
        self,
        classes: tuple[type, ...],
        resolve: Resolver,
        options: ContainerOptions = NO_OPTIONS
    ) -> None:
        self.name = options.name_of("|".join(cls.__name__ for cls in classes))
        self.by_type: dict[type, Variant] = {}

        for index, cls in enumerate(classes):
            declared = variant_options(cls)
            tag = declared.rename or options.key_of(cls.__name__)
            self.by_type[cls] = Variant(
                tag=tag,
                index=index,
                record=StructShape(cls, resolve),
                declared=declared.shape
            )

        self._tags = TagShape({v.tag: v for v in self.by_type.values()})
        if len(self._tags.tags) != len(self.by_type):
            raise TypeError(f"Duplicate variant tags in {self.name}")

    def expecting(self) -> str:
        return f"enum {self.name}"

    def serialize(self, value: Any, serializer: Serializer) -> Any:
        v = self.by_type.get(type(value))
        if v is None:
            raise mismatch(value, self)

        match v.kind:
            case "unit":
                return serializer.serialize_unit_variant(self.name, v.index, v.tag)
            case "newtype":
                f = v.single
                payload = Typed(getattr(value, f.name), f.shape)
                return serializer.serialize_newtype_variant(self.name, v.index, v.tag, payload)
            case "tuple":
                fields = v.record.active
                builder = serializer.serialize_tuple_variant(self.name, v.index, v.tag, len(fields))
                for f in fields:
                    builder.serialize_field(Typed(getattr(value, f.name), f.shape))
                return builder.end()
            case _:
                builder = serializer.serialize_struct_variant(
                    self.name, v.index, v.tag, len(v.record.active)
                )
                v.record.write_fields(value, builder)
                return builder.end()

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_enum(self.name, tuple(self._tags.tags), self)

    def visit_enum(self, access: EnumAccess) -> Any:
        v, payload = access.variant_seed(self._tags)

        match v.kind:
            case "unit":
                payload.unit_variant()
                return v.record.build({})
            case "newtype":
                f = v.single
                return v.record.build({f.name: payload.newtype_variant_seed(f.shape)})
            case "tuple":
                return payload.tuple_variant(len(v.record.active), _TupleVariantVisitor(v))
            case _:
                return payload.struct_variant(v.record.keys, v.record)
