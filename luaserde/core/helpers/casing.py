import re


RENAME_RULES = (
    "lowercase",
    "UPPERCASE",
    "PascalCase",
    "camelCase",
    "snake_case",
    "SCREAMING_SNAKE_CASE",
    "kebab-case",
    "SCREAMING-KEBAB-CASE",
)

_LOWER_TO_UPPER = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_ACRONYM_END = re.compile(r"(?<=[A-Z])(?=[A-Z][a-z])")


def split_words(name: str) -> list[str]:
    """
    Split an identifier into words, whether it is written in snake_case,
    kebab-case, PascalCase or camelCase.

    >>> split_words("HTTPServerError")
    ['HTTP', 'Server', 'Error']
    """
    name = _LOWER_TO_UPPER.sub("_", name)
    name = _ACRONYM_END.sub("_", name)
    return [word for word in re.split(r"[_\-]+", name) if word]


def check_rule(rule: str) -> str:
    if rule not in RENAME_RULES:
        raise ValueError(
            f"Unknown rename rule '{rule}', expected one of {', '.join(RENAME_RULES)}"
        )
    return rule


def apply_rule(rule: str, name: str) -> str:
    """Rename a field or variant name according to a `rename_all` rule."""
    words = split_words(name)

    match check_rule(rule):
        case "lowercase":
            return name.lower()
        case "UPPERCASE":
            return name.upper()
        case "PascalCase":
            return "".join(word.capitalize() for word in words)
        case "camelCase":
            head, *tail = words or [""]
            return head.lower() + "".join(word.capitalize() for word in tail)
        case "snake_case":
            return "_".join(word.lower() for word in words)
        case "SCREAMING_SNAKE_CASE":
            return "_".join(word.upper() for word in words)
        case "kebab-case":
            return "-".join(word.lower() for word in words)
        case "SCREAMING-KEBAB-CASE":
            return "-".join(word.upper() for word in words)
    return name
