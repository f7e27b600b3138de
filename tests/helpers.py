import enum
from dataclasses import dataclass, field
from typing import Annotated, Any, NamedTuple, NewType

from pydantic import BaseModel

from luaserde.core.schema.options import FieldOptions, lua_field, serde, variant
from luaserde.core.schema.primitives import FloatShape
from luaserde.core.schema.types import F32, U8, U64, Char


@dataclass
class Point:
    x: float
    y: float


@dataclass
class Unit:
    pass


@dataclass
class WithDefaultUnit:
    marker: None = None


@dataclass
class WithUnit:
    marker: None


@dataclass
class Inventory:
    owner: str
    items: list[str] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)
    note: str | None = None


@serde(rename_all="camelCase")
@dataclass
class Profile:
    display_name: str
    login_count: U64
    secret: str = lua_field(skip=True, default="hidden")
    level: U8 = lua_field(rename="lvl", default=1)


@dataclass
class Tree:
    label: str
    children: list["Tree"] = field(default_factory=list)


class Pair(NamedTuple):
    left: int
    right: str


UserId = NewType("UserId", int)


class Color(enum.Enum):
    first = 1
    second = 2


@variant
@dataclass
class First:
    pass


@variant(rename="tuple", shape="tuple")
@dataclass
class TupleVariant:
    a: float
    b: float


@variant(shape="newtype")
@dataclass
class Wrapped:
    value: int


@variant
@dataclass
class Moved:
    x: int
    y: int


Event = Annotated[First | TupleVariant | Wrapped | Moved, serde(rename_all="snake_case")]


@dataclass
class Scalars:
    flag: bool
    ratio: F32
    letter: Char
    small: U8


class Settings(BaseModel):
    name: str
    retries: int = 3
    tags: list[str] = []
    label: Annotated[str | None, FieldOptions(rename="title")] = None


@dataclass
class Dynamic:
    payload: Any


class Celsius:
    """Writes itself as a plain number."""

    def __init__(self, degrees: float) -> None:
        self.degrees = degrees

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Celsius) and other.degrees == self.degrees

    def __serialize__(self, serializer):
        return serializer.serialize_f64(self.degrees)

    @classmethod
    def __deserialize__(cls, deserializer):
        return cls(FloatShape().deserialize(deserializer))
