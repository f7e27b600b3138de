import math
import struct
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class IntWidth:
    """
    Describes a fixed-width integer type.

    Python integers are unbounded, so the width a value is converted
    with is carried by the type annotation (see `luaserde.core.schema.types`).
    """
    bits: int
    signed: bool

    @property
    def name(self) -> str:
        return f"{'i' if self.signed else 'u'}{self.bits}"

    @property
    def min(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True, slots=True)
class FloatWidth:
    bits: int

    @property
    def name(self) -> str:
        return f"f{self.bits}"


I8_WIDTH = IntWidth(8, True)
I16_WIDTH = IntWidth(16, True)
I32_WIDTH = IntWidth(32, True)
I64_WIDTH = IntWidth(64, True)
U8_WIDTH = IntWidth(8, False)
U16_WIDTH = IntWidth(16, False)
U32_WIDTH = IntWidth(32, False)
U64_WIDTH = IntWidth(64, False)

F32_WIDTH = FloatWidth(32)
F64_WIDTH = FloatWidth(64)


def int_to_number(value: int, width: IntWidth) -> float | None:
    """
    Cast an integer of the given width to a double.

    Returns None when the value is outside the width or when the cast
    is not value-preserving, i.e. when `int(float(value)) != value`.
    """
    if not width.contains(value):
        return None
    number = float(value)
    if int(number) != value:
        return None
    return number


def number_to_int(number: float, width: IntWidth) -> int | None:
    """
    Cast a double to an integer of the given width.

    Returns None unless the number is finite, integral, inside the width
    and survives the trip back to a double unchanged.
    """
    if not math.isfinite(number):
        return None
    value = int(number)
    if float(value) != number or not width.contains(value):
        return None
    return value


def narrow_f32(number: float) -> float:
    """
    Round a double to the nearest single-precision value.

    Finite values beyond the f32 range become infinities of the same sign;
    NaN and infinities are kept.
    """
    try:
        return struct.unpack("f", struct.pack("f", number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)
