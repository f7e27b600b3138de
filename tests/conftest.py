import pytest

from luaserde.bootstrap.deps import get_config, get_serde
from luaserde.core.facade import LuaSerde
from luaserde.core.models.config import SerdeConfig
from luaserde.infra.base64_codec import Base64BytesCodec
from tests.fake.fake_stack import FakeLuaStack


@pytest.fixture
def serde():
    return LuaSerde()


@pytest.fixture
def bytes_serde():
    return LuaSerde(SerdeConfig(bytes_support=True), Base64BytesCodec())


@pytest.fixture
def stack():
    return FakeLuaStack()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ("LUASERDE_CONFIG", "LUASERDE_BYTES_SUPPORT", "LUASERDE_MAX_DEPTH"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def fresh_deps(clean_env):
    get_config.cache_clear()
    get_serde.cache_clear()
    yield clean_env
    get_config.cache_clear()
    get_serde.cache_clear()
