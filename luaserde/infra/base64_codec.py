import base64


class Base64BytesCodec:
    """
    Standard base64 (RFC 4648, with padding) implementation of BytesCodec.

    Decoding is strict: characters outside the alphabet and bad padding
    are rejected instead of being silently discarded.
    """

    def encode(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")

    def decode(self, text: str) -> bytes:
        return base64.b64decode(text, validate=True)
