from typing import Any

import pytest

from luaserde.core.errors import LuaDeserializeError, LuaSerializeError
from luaserde.core.facade import LuaSerde
from luaserde.core.models.config import SerdeConfig
from luaserde.core.models.value import LuaNumber, LuaString, LuaTable, lua_value
from luaserde.core.ports.errors import ErrorKind
from tests.helpers import Color, Event, TupleVariant, Wrapped


Nested3 = list[list[list[int]]]
Nested4 = list[list[list[list[int]]]]


def nest(value, levels):
    for _ in range(levels):
        value = [value]
    return value


def nested_table(levels):
    value = LuaNumber(1.0)
    for _ in range(levels):
        value = LuaTable(((LuaNumber(1.0), value),))
    return value


@pytest.fixture
def shallow():
    return LuaSerde(SerdeConfig(max_depth=3))


@pytest.mark.ut
def test_encode_within_limit(shallow):
    assert shallow.to_lua(nest(1, 3), Nested3) == nested_table(3)


@pytest.mark.ut
def test_encode_beyond_limit(shallow):
    with pytest.raises(LuaSerializeError) as ex:
        shallow.to_lua(nest(1, 4), Nested4)

    assert ex.value.kind == ErrorKind.recursion_limit
    assert str(ex.value) == "recursion limit exceeded: more than 3 nested tables"


@pytest.mark.ut
def test_decode_within_limit(shallow):
    assert shallow.from_lua(Nested3, nested_table(3)) == nest(1, 3)


@pytest.mark.ut
def test_decode_beyond_limit(shallow):
    with pytest.raises(LuaDeserializeError) as ex:
        shallow.from_lua(Nested4, nested_table(4))

    assert ex.value.kind == ErrorKind.recursion_limit


@pytest.mark.ut
def test_default_limit_stops_runaway_nesting(serde):
    with pytest.raises(LuaSerializeError):
        serde.to_lua(nest(1, 100), Any)

    with pytest.raises(LuaDeserializeError):
        serde.from_lua(Any, nested_table(100))


@pytest.mark.ut
def test_each_table_counts_one_level():
    serde = LuaSerde(SerdeConfig(max_depth=1))

    assert serde.to_lua([1.0], list[float]) == LuaTable(((LuaNumber(1.0), LuaNumber(1.0)),))
    with pytest.raises(LuaSerializeError):
        serde.to_lua([[1.0]], list[list[float]])


@pytest.mark.ut
def test_tuple_variant_counts_envelope_and_payload():
    serde = LuaSerde(SerdeConfig(max_depth=1))

    assert serde.to_lua(Wrapped(1), Event) == LuaTable(((LuaString("wrapped"), LuaNumber(1.0)),))
    with pytest.raises(LuaSerializeError):
        serde.to_lua(TupleVariant(1.0, 2.0), Event)


@pytest.mark.ut
def test_bare_enum_tag_does_not_count_as_a_table():
    serde = LuaSerde(SerdeConfig(max_depth=1))

    assert serde.from_lua(list[Color], lua_value(["first"])) == [Color.first]
    assert serde.to_lua([Color.first], list[Color]) == lua_value(["first"])
