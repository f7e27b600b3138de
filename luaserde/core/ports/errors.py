from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Iterable, Self


class ErrorKind(StrEnum):
    """
    Coarse classification of a conversion failure.
    The message always carries the details; the kind lets callers branch
    without parsing it.
    """
    custom = "custom"
    invalid_type = "invalid_type"
    invalid_value = "invalid_value"
    invalid_length = "invalid_length"
    missing_field = "missing_field"
    unknown_field = "unknown_field"
    unknown_variant = "unknown_variant"
    duplicate_field = "duplicate_field"
    lossy_number = "lossy_number"
    unserializable_key = "unserializable_key"
    unsupported = "unsupported"
    recursion_limit = "recursion_limit"


@dataclass(frozen=True, slots=True)
class Unexpected:
    """
    Describes the value actually observed when a conversion fails.
    Rendered inside error messages, e.g. "floating point `1.5`".
    """
    kind: str
    value: Any = None

    @classmethod
    def boolean(cls, value: bool) -> Unexpected:
        return cls("bool", value)

    @classmethod
    def signed(cls, value: int) -> Unexpected:
        return cls("signed", value)

    @classmethod
    def unsigned(cls, value: int) -> Unexpected:
        return cls("unsigned", value)

    @classmethod
    def floating(cls, value: float) -> Unexpected:
        return cls("float", value)

    @classmethod
    def char(cls, value: str) -> Unexpected:
        return cls("char", value)

    @classmethod
    def string(cls, value: str) -> Unexpected:
        return cls("str", value)

    @classmethod
    def binary(cls) -> Unexpected:
        return cls("bytes")

    @classmethod
    def unit(cls) -> Unexpected:
        return cls("unit")

    @classmethod
    def option(cls) -> Unexpected:
        return cls("option")

    @classmethod
    def seq(cls) -> Unexpected:
        return cls("seq")

    @classmethod
    def map(cls) -> Unexpected:
        return cls("map")

    @classmethod
    def enum(cls) -> Unexpected:
        return cls("enum")

    @classmethod
    def other(cls, description: str) -> Unexpected:
        return cls("other", description)

    def __str__(self) -> str:
        match self.kind:
            case "bool":
                return f"boolean `{str(self.value).lower()}`"
            case "signed" | "unsigned":
                return f"integer `{self.value}`"
            case "float":
                return f"floating point `{self.value!r}`"
            case "char":
                return f"character `{self.value}`"
            case "str":
                return f"string \"{self.value}\""
            case "bytes":
                return "byte array"
            case "unit":
                return "unit value"
            case "option":
                return "Option value"
            case "seq":
                return "sequence"
            case "map":
                return "map"
            case "enum":
                return "enum"
        return str(self.value)


def describe(expected: Any) -> str:
    """
    Render what a conversion expected. Visitors and shapes describe
    themselves through `expecting()`; plain strings are used verbatim.
    """
    expecting = getattr(expected, "expecting", None)
    if callable(expecting):
        return expecting()
    return str(expected)


def _one_of(names: Iterable[str]) -> str:
    names = [f"`{name}`" for name in names]
    if not names:
        return "there are no variants"
    if len(names) == 1:
        return f"expected {names[0]}"
    if len(names) == 2:
        return f"expected {names[0]} or {names[1]}"
    return f"expected one of {', '.join(names)}"


class _ConversionError(Exception):
    """
    Error construction contract shared by both directions.

    Every constructor is a classmethod returning an instance of the class
    it is called on, so format-specific subclasses get their own type back.
    """

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.custom) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind

    def __str__(self) -> str:
        return self.message

    @classmethod
    def custom(cls, msg: Any, kind: ErrorKind = ErrorKind.custom) -> Self:
        return cls(str(msg), kind)


class SerializeError(_ConversionError):
    """Raised when a native value cannot be represented in the target format."""


class DeserializeError(_ConversionError):
    """Raised when input data does not fit the requested native type."""

    @classmethod
    def invalid_type(cls, unexpected: Unexpected, expected: Any) -> Self:
        return cls(
            f"invalid type: {unexpected}, expected {describe(expected)}",
            ErrorKind.invalid_type
        )

    @classmethod
    def invalid_value(cls, unexpected: Unexpected, expected: Any) -> Self:
        return cls(
            f"invalid value: {unexpected}, expected {describe(expected)}",
            ErrorKind.invalid_value
        )

    @classmethod
    def invalid_length(cls, length: int, expected: Any) -> Self:
        return cls(
            f"invalid length {length}, expected {describe(expected)}",
            ErrorKind.invalid_length
        )

    @classmethod
    def missing_field(cls, field: str) -> Self:
        return cls(f"missing field `{field}`", ErrorKind.missing_field)

    @classmethod
    def unknown_field(cls, field: str, expected: Iterable[str]) -> Self:
        return cls(
            f"unknown field `{field}`, {_one_of(expected)}",
            ErrorKind.unknown_field
        )

    @classmethod
    def unknown_variant(cls, variant: str, expected: Iterable[str]) -> Self:
        return cls(
            f"unknown variant `{variant}`, {_one_of(expected)}",
            ErrorKind.unknown_variant
        )

    @classmethod
    def duplicate_field(cls, field: str) -> Self:
        return cls(f"duplicate field `{field}`", ErrorKind.duplicate_field)
