import pytest

from luaserde.core.helpers.casing import apply_rule, split_words


@pytest.mark.ut
@pytest.mark.parametrize("rule, expected", [
    ("lowercase", "display_name"),
    ("UPPERCASE", "DISPLAY_NAME"),
    ("PascalCase", "DisplayName"),
    ("camelCase", "displayName"),
    ("snake_case", "display_name"),
    ("SCREAMING_SNAKE_CASE", "DISPLAY_NAME"),
    ("kebab-case", "display-name"),
    ("SCREAMING-KEBAB-CASE", "DISPLAY-NAME"),
])
def test_apply_rule_on_field_names(rule, expected):
    assert apply_rule(rule, "display_name") == expected


@pytest.mark.ut
def test_apply_rule_on_class_names():
    assert apply_rule("snake_case", "TupleVariant") == "tuple_variant"
    assert apply_rule("kebab-case", "HTTPError") == "http-error"


@pytest.mark.ut
def test_split_words():
    assert split_words("HTTPServerError") == ["HTTP", "Server", "Error"]
    assert split_words("max_depth") == ["max", "depth"]


@pytest.mark.ut
def test_unknown_rule_is_rejected():
    with pytest.raises(ValueError):
        apply_rule("Title Case", "name")
