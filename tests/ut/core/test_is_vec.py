import pytest

from luaserde.core.decoder import is_vec
from luaserde.core.models.value import LuaNumber, LuaString


def pairs_for(*keys):
    return [(key if not isinstance(key, (int, float)) else LuaNumber(float(key)), LuaString(str(key)))
            for key in keys]


@pytest.mark.ut
@pytest.mark.parametrize("keys", [(1, 2, 3), (3, 1, 2), (2, 3, 1)])
def test_contiguous_keys_in_any_order_are_an_array(keys):
    array, pairs = is_vec(pairs_for(*keys))

    assert array is True
    assert [k.value for k, _ in pairs] == [1.0, 2.0, 3.0]


@pytest.mark.ut
def test_gap_makes_a_map_with_original_order():
    original = pairs_for(4, 1, 2)
    array, pairs = is_vec(original)

    assert array is False
    assert pairs == original


@pytest.mark.ut
def test_non_number_key_makes_a_map():
    array, _ = is_vec(pairs_for(1, 2) + [(LuaString("x"), LuaString("y"))])
    assert array is False


@pytest.mark.ut
@pytest.mark.parametrize("keys", [(0, 1), (1, 1), (1, 2.5), (-1,), (2,)])
def test_non_canonical_keys_make_a_map(keys):
    array, _ = is_vec(pairs_for(*keys))
    assert array is False


@pytest.mark.ut
def test_empty_table_is_an_array():
    assert is_vec([]) == (True, [])
