import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Literal, TypeVar

from luaserde.core.helpers.casing import apply_rule, check_rule


T = TypeVar("T", bound=type)

VariantKind = Literal["unit", "newtype", "tuple", "struct"]

FIELD_OPTIONS = "luaserde"


@dataclass(frozen=True, slots=True)
class FieldOptions:
    """
    Per-field options of a record.

    Attach them to a dataclass field with `lua_field(...)`, or to any
    record field (pydantic models included) as `Annotated` metadata.
    """
    rename: str | None = None
    skip: bool = False


@dataclass(frozen=True, slots=True)
class VariantOptions:
    rename: str | None = None
    shape: VariantKind | None = None


@dataclass(frozen=True, slots=True)
class ContainerOptions:
    """
    Options of a record or enum as a whole.

    Returned by `serde(...)`: apply it as a class decorator, or put it in
    the `Annotated` metadata of a union of variants.
    """
    rename: str | None = None
    rename_all: str | None = None

    def __post_init__(self) -> None:
        if self.rename_all is not None:
            check_rule(self.rename_all)

    def __call__(self, cls: T) -> T:
        cls.__lua_container__ = self
        return cls

    def name_of(self, default: str) -> str:
        return self.rename or default

    def key_of(self, name: str) -> str:
        if self.rename_all is None:
            return name
        return apply_rule(self.rename_all, name)


NO_OPTIONS = ContainerOptions()


def lua_field(*, rename: str | None = None, skip: bool = False, **kwargs: Any) -> Any:
    """
    Drop-in replacement for `dataclasses.field` carrying FieldOptions.

    A skipped field is neither written nor read; it must have a default.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[FIELD_OPTIONS] = FieldOptions(rename=rename, skip=skip)
    return dataclasses.field(metadata=metadata, **kwargs)


def variant(
    cls: T | None = None,
    *,
    rename: str | None = None,
    shape: VariantKind | None = None
) -> T | Callable[[T], T]:
    """
    Mark a dataclass as one variant of a tagged union.

    The tag defaults to the class name. The payload shape defaults to
    "unit" for a class without fields and to "struct" otherwise;
    "newtype" requires exactly one field, "tuple" writes the fields
    positionally.

        @variant
        @dataclass
        class First: ...

        @variant(shape="tuple")
        @dataclass
        class Pair:
            left: float
            right: float

        Event = First | Pair
    """
    def decorator(target: T) -> T:
        target.__lua_variant__ = VariantOptions(rename=rename, shape=shape)
        return target

    if cls is None:
        return decorator
    return decorator(cls)


def serde(*, rename: str | None = None, rename_all: str | None = None) -> ContainerOptions:
    return ContainerOptions(rename=rename, rename_all=rename_all)


def container_options(cls: Any) -> ContainerOptions:
    # Only options declared on the class itself apply, not inherited ones.
    options = getattr(cls, "__dict__", {}).get("__lua_container__")
    return options if isinstance(options, ContainerOptions) else NO_OPTIONS


def variant_options(cls: Any) -> VariantOptions:
    options = getattr(cls, "__dict__", {}).get("__lua_variant__")
    return options if isinstance(options, VariantOptions) else VariantOptions()
