from typing import Any

import pytest

from luaserde.core.errors import LuaDeserializeError
from luaserde.core.schema.types import I8, I64, U16, U64, F32, Char
from tests.fake.fake_stack import materialize
from tests.helpers import (
    Color, Event, First, Inventory, Moved, Pair, Profile, Settings, Tree,
    TupleVariant, WithDefaultUnit, WithUnit, Wrapped
)


CASES = [
    (True, bool),
    (-128, I8),
    (65535, U16),
    (-2 ** 63, I64),
    (2 ** 53, U64),
    (0.1, float),
    (0.5, F32),
    ("ü", Char),
    ("text", str),
    (None, int | None),
    (7, int | None),
    ([1, 2, 3], list[int]),
    ((1, "a", 2.5), tuple[int, str, float]),
    ({"a": 1, "b": 2}, dict[str, int]),
    ({1: "x", 5: "y"}, dict[int, str]),
    ([[1], [], [2, 3]], list[list[int]]),
    (Color.second, Color),
    (First(), Event),
    (TupleVariant(1.3, 3.1), Event),
    (Wrapped(-4), Event),
    (Moved(3, 4), Event),
    ([First(), Wrapped(1)], list[Event]),
    (Inventory("bob", ["axe"], {"axe": 1}, "note"), Inventory),
    (Profile("Ann", 12, "hidden", 9), Profile),
    (Pair(3, "c"), Pair),
    (Tree("r", [Tree("a")]), Tree),
    (Settings(name="n", retries=1, tags=["t"], label=None), Settings),
    ({"k": [1.0, "v", {"n": True}]}, Any),
]


@pytest.mark.ut
@pytest.mark.parametrize("value, tp", CASES)
def test_roundtrip(serde, value, tp):
    assert serde.from_lua(tp, serde.to_lua(value, tp)) == value


@pytest.mark.ut
@pytest.mark.parametrize("value, tp", CASES)
def test_roundtrip_through_runtime_tables(serde, value, tp):
    assert serde.from_lua(tp, materialize(serde.to_lua(value, tp))) == value


@pytest.mark.ut
def test_unit_field_needs_a_default_to_survive_the_runtime(serde):
    with_default = materialize(serde.to_lua(WithDefaultUnit()))
    without_default = materialize(serde.to_lua(WithUnit(None)))

    assert serde.from_lua(WithDefaultUnit, with_default) == WithDefaultUnit()
    with pytest.raises(LuaDeserializeError):
        serde.from_lua(WithUnit, without_default)
