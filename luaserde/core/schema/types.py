from dataclasses import dataclass
from typing import Annotated

from luaserde.core.models.numeric import (
    I8_WIDTH, I16_WIDTH, I32_WIDTH, I64_WIDTH,
    U8_WIDTH, U16_WIDTH, U32_WIDTH, U64_WIDTH,
    F32_WIDTH, F64_WIDTH
)


@dataclass(frozen=True, slots=True)
class CharMarker:
    """Marks a `str` annotation that must hold exactly one character."""


I8 = Annotated[int, I8_WIDTH]
I16 = Annotated[int, I16_WIDTH]
I32 = Annotated[int, I32_WIDTH]
I64 = Annotated[int, I64_WIDTH]
U8 = Annotated[int, U8_WIDTH]
U16 = Annotated[int, U16_WIDTH]
U32 = Annotated[int, U32_WIDTH]
U64 = Annotated[int, U64_WIDTH]

F32 = Annotated[float, F32_WIDTH]
F64 = Annotated[float, F64_WIDTH]

Char = Annotated[str, CharMarker()]
