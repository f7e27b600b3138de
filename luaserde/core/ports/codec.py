from typing import Protocol


class BytesCodec(Protocol):
    """
    Reversible binary-to-text encoding used to carry byte strings
    through Lua strings.

    Implementations must be:
    - reversible: decode(encode(data)) == data
    - text-safe: encode only produces valid UTF-8 text
    - strict: decode rejects malformed input instead of guessing
    """

    def encode(self, data: bytes) -> str:
        """Encode raw bytes into text."""

    def decode(self, text: str) -> bytes:
        """Decode text produced by `encode`. Raises ValueError on malformed input."""
