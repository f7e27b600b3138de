from dataclasses import dataclass


@dataclass(frozen=True)
class SerdeConfig:
    """
    Static configuration shared by the encoder and the decoder.

    Instances are immutable and may be shared freely between conversions;
    no conversion state is ever stored here.
    """

    bytes_support: bool = False
    """
    Enables conversion of byte strings to and from base64 text.
    When disabled, any attempt to convert bytes fails with an explicit
    error instead of guessing a representation.
    """

    max_depth: int = 64
    """
    Maximum number of nested tables a single conversion may build or
    traverse. Both directions recurse once per nesting level, so this
    bounds the interpreter stack used by deeply nested values.
    """
