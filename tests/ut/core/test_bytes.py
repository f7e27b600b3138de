import pytest

from luaserde.core.errors import LuaDeserializeError, LuaSerializeError
from luaserde.core.facade import LuaSerde
from luaserde.core.models.config import SerdeConfig
from luaserde.core.models.value import LuaString
from luaserde.core.ports.errors import ErrorKind
from luaserde.infra.base64_codec import Base64BytesCodec


@pytest.mark.ut
def test_codec_roundtrip():
    codec = Base64BytesCodec()

    assert codec.encode(b"hi") == "aGk="
    assert codec.decode("aGk=") == b"hi"


@pytest.mark.ut
@pytest.mark.parametrize("text", ["not base64!", "aGk", "é"])
def test_codec_is_strict(text):
    with pytest.raises(ValueError):
        Base64BytesCodec().decode(text)


@pytest.mark.ut
def test_bytes_enabled(bytes_serde):
    assert bytes_serde.to_lua(b"\x00\xff", bytes) == LuaString("AP8=")
    assert bytes_serde.from_lua(bytes, LuaString("AP8=")) == b"\x00\xff"
    assert bytes_serde.from_lua(bytearray, LuaString("AP8=")) == bytearray(b"\x00\xff")


@pytest.mark.ut
def test_bytes_disabled(serde):
    with pytest.raises(LuaSerializeError) as ex:
        serde.to_lua(b"data", bytes)
    assert ex.value.kind == ErrorKind.unsupported

    with pytest.raises(LuaDeserializeError) as ex:
        serde.from_lua(bytes, LuaString("ZGF0YQ=="))
    assert ex.value.kind == ErrorKind.unsupported
    assert str(ex.value) == "cannot deserialize byte_buf; enable 'bytes_support'"


@pytest.mark.ut
def test_invalid_base64(bytes_serde):
    with pytest.raises(LuaDeserializeError) as ex:
        bytes_serde.from_lua(bytes, LuaString("%%%"))

    assert ex.value.kind == ErrorKind.invalid_value
    assert str(ex.value) == "invalid value: non-base64 data, expected a byte array"


@pytest.mark.ut
def test_bytes_support_requires_a_codec():
    with pytest.raises(ValueError):
        LuaSerde(SerdeConfig(bytes_support=True))
