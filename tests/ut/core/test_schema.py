from typing import Annotated

import pytest

from luaserde.core.errors import LuaDeserializeError, LuaSerializeError
from luaserde.core.models.value import NIL, LuaNumber, LuaString, LuaTable, lua_value
from luaserde.core.ports.errors import ErrorKind
from luaserde.core.schema.options import serde as serde_options
from luaserde.core.schema.resolver import shape_of
from tests.helpers import (
    Celsius, Color, Event, First, Inventory, Moved, Pair, Profile, Scalars, Settings,
    Tree, TupleVariant, Unit, UserId, WithDefaultUnit, WithUnit, Wrapped
)


@pytest.mark.ut
def test_unit_variant_from_bare_string(serde):
    assert serde.from_lua(Event, LuaString("first")) == First()


@pytest.mark.ut
def test_tuple_variant_from_envelope(serde):
    value = serde.from_lua(Event, lua_value({"tuple": [1.3, 3.1]}))

    assert value == TupleVariant(1.3, 3.1)


@pytest.mark.ut
def test_envelope_with_two_entries_fails(serde):
    with pytest.raises(LuaDeserializeError) as ex:
        serde.from_lua(Event, lua_value({"tuple": [1.0, 2.0], "wrapped": 1}))

    assert ex.value.kind == ErrorKind.invalid_length
    assert str(ex.value).startswith("invalid length 2")


@pytest.mark.ut
def test_unknown_variant(serde):
    with pytest.raises(LuaDeserializeError) as ex:
        serde.from_lua(Event, LuaString("nope"))

    assert ex.value.kind == ErrorKind.unknown_variant
    assert str(ex.value) == (
        "unknown variant `nope`, expected one of `first`, `tuple`, `wrapped`, `moved`"
    )


@pytest.mark.ut
def test_unit_variant_rejects_payload(serde):
    with pytest.raises(LuaDeserializeError) as ex:
        serde.from_lua(Event, lua_value({"first": 1}))

    assert str(ex.value) == "invalid type: floating point `1.0`, expected unit variant"


@pytest.mark.ut
def test_variant_shapes_on_write(serde):
    assert serde.to_lua(First(), Event) == LuaString("first")
    assert serde.to_lua(Wrapped(5), Event) == lua_value({"wrapped": 5})
    assert serde.to_lua(TupleVariant(1.5, 2.5), Event) == lua_value({"tuple": [1.5, 2.5]})
    assert serde.to_lua(Moved(1, 2), Event) == lua_value({"moved": {"x": 1, "y": 2}})


@pytest.mark.ut
def test_variant_shapes_on_read(serde):
    assert serde.from_lua(Event, lua_value({"wrapped": 5})) == Wrapped(5)
    assert serde.from_lua(Event, lua_value({"moved": {"y": 2, "x": 1}})) == Moved(1, 2)


@pytest.mark.ut
def test_plain_enum(serde):
    assert serde.to_lua(Color.first) == LuaString("first")
    assert serde.from_lua(Color, LuaString("second")) is Color.second

    with pytest.raises(LuaDeserializeError) as ex:
        serde.from_lua(Color, LuaString("third"))
    assert ex.value.kind == ErrorKind.unknown_variant


@pytest.mark.ut
def test_unit_field_with_default_accepts_empty_table(serde):
    assert serde.from_lua(WithDefaultUnit, LuaTable()) == WithDefaultUnit()


@pytest.mark.ut
def test_unit_field_without_default_fails_on_empty_table(serde):
    with pytest.raises(LuaDeserializeError) as ex:
        serde.from_lua(WithUnit, LuaTable())

    assert ex.value.kind == ErrorKind.missing_field
    assert str(ex.value) == "missing field `marker`"


@pytest.mark.ut
def test_missing_fields_take_defaults_and_none(serde):
    value = serde.from_lua(Inventory, lua_value({"owner": "ann", "unknown": [1, 2]}))

    assert value == Inventory(owner="ann", items=[], counts={}, note=None)


@pytest.mark.ut
def test_duplicate_field(serde):
    table = LuaTable((
        (LuaString("owner"), LuaString("a")),
        (LuaString("owner"), LuaString("b")),
    ))

    with pytest.raises(LuaDeserializeError) as ex:
        serde.from_lua(Inventory, table)
    assert ex.value.kind == ErrorKind.duplicate_field


@pytest.mark.ut
def test_struct_field_type_error(serde):
    with pytest.raises(LuaDeserializeError) as ex:
        serde.from_lua(Inventory, lua_value({"owner": 3}))
    assert str(ex.value) == "invalid type: floating point `3.0`, expected a string"


@pytest.mark.ut
def test_renames_and_skipped_fields(serde):
    table = serde.to_lua(Profile("Ann", 3, "s3cr3t", 2))

    assert table == lua_value({"displayName": "Ann", "loginCount": 3, "lvl": 2})
    assert serde.from_lua(Profile, table) == Profile("Ann", 3, "hidden", 2)


@pytest.mark.ut
def test_unit_struct_is_nil(serde):
    assert serde.to_lua(Unit()) is NIL
    assert serde.from_lua(Unit, NIL) == Unit()


@pytest.mark.ut
def test_recursive_dataclass(serde):
    tree = Tree("root", [Tree("a"), Tree("b", [Tree("c")])])

    assert serde.from_lua(Tree, serde.to_lua(tree)) == tree


@pytest.mark.ut
def test_named_tuple_is_positional(serde):
    assert serde.to_lua(Pair(1, "a")) == lua_value([1, "a"])
    assert serde.from_lua(Pair, lua_value([1, "a"])) == Pair(1, "a")


@pytest.mark.ut
def test_newtype_is_transparent(serde):
    assert serde.to_lua(UserId(7), UserId) == LuaNumber(7.0)
    assert serde.from_lua(UserId, LuaNumber(7.0)) == 7


@pytest.mark.ut
def test_pydantic_model(serde):
    table = lua_value({"name": "svc", "title": "Service"})
    value = serde.from_lua(Settings, table)

    assert value == Settings(name="svc", retries=3, tags=[], label="Service")
    assert serde.to_lua(value) == lua_value(
        {"name": "svc", "retries": 3, "tags": [], "title": "Service"}
    )


@pytest.mark.ut
def test_scalar_widths_in_record(serde):
    value = Scalars(flag=True, ratio=0.5, letter="z", small=200)

    assert serde.from_lua(Scalars, serde.to_lua(value)) == value

    with pytest.raises(LuaSerializeError) as ex:
        serde.to_lua(Scalars(flag=True, ratio=0.5, letter="z", small=300))
    assert ex.value.kind == ErrorKind.lossy_number


@pytest.mark.ut
def test_custom_implementation(serde):
    assert serde.to_lua(Celsius(20.5)) == LuaNumber(20.5)
    assert serde.from_lua(Celsius, LuaNumber(3.0)) == Celsius(3.0)


@pytest.mark.ut
def test_value_of_wrong_type_fails(serde):
    with pytest.raises(LuaSerializeError) as ex:
        serde.to_lua("x", int)
    assert ex.value.kind == ErrorKind.invalid_type


@pytest.mark.ut
def test_unsupported_annotation():
    with pytest.raises(TypeError):
        shape_of(complex)

    with pytest.raises(TypeError):
        shape_of(int | str)


@pytest.mark.ut
def test_shapes_are_cached():
    assert shape_of(list[int]) is shape_of(list[int])


@pytest.mark.ut
def test_optional_union_keeps_its_options(serde):
    tp = Annotated[First | Moved | None, serde_options(rename_all="snake_case")]

    assert serde.to_lua(First(), tp) == LuaString("first")
    assert serde.to_lua(None, tp) is NIL
    assert serde.from_lua(tp, LuaString("first")) == First()
    assert serde.from_lua(tp, lua_value({"moved": {"x": 1, "y": 2}})) == Moved(1, 2)
    assert serde.from_lua(tp, NIL) is None
