import pytest
import yaml
from pydantic import ValidationError

from luaserde import api
from luaserde.bootstrap.config.loader import get_configfile
from luaserde.bootstrap.config.settings import LuaSerdeSettings
from luaserde.bootstrap.deps import get_config, get_serde
from luaserde.core.models.config import SerdeConfig
from luaserde.core.models.value import LuaNumber, LuaString


@pytest.mark.ut
def test_defaults(clean_env):
    settings = LuaSerdeSettings()

    assert settings.bytes_support is False
    assert settings.max_depth == 64
    assert settings.to_config() == SerdeConfig()


@pytest.mark.ut
def test_from_environment(clean_env, monkeypatch):
    monkeypatch.setenv("LUASERDE_BYTES_SUPPORT", "true")
    monkeypatch.setenv("LUASERDE_MAX_DEPTH", "10")

    assert LuaSerdeSettings().to_config() == SerdeConfig(bytes_support=True, max_depth=10)


@pytest.mark.ut
def test_default_yaml_in_working_directory(clean_env):
    (clean_env / "luaserde.yaml").write_text(yaml.dump({"max_depth": 5}))

    assert get_configfile() == clean_env / "luaserde.yaml"
    assert LuaSerdeSettings().max_depth == 5


@pytest.mark.ut
def test_yaml_from_environment_path(clean_env, monkeypatch):
    file = clean_env / "custom.yaml"
    file.write_text(yaml.dump({"bytes_support": True}))
    monkeypatch.setenv("LUASERDE_CONFIG", str(file))

    assert LuaSerdeSettings().bytes_support is True


@pytest.mark.ut
def test_environment_overrides_yaml(clean_env, monkeypatch):
    (clean_env / "luaserde.yaml").write_text(yaml.dump({"max_depth": 5}))
    monkeypatch.setenv("LUASERDE_MAX_DEPTH", "7")

    assert LuaSerdeSettings().max_depth == 7


@pytest.mark.ut
def test_no_configuration_file(clean_env):
    assert get_configfile() is None


@pytest.mark.ut
def test_missing_explicit_file(clean_env, monkeypatch):
    monkeypatch.setenv("LUASERDE_CONFIG", str(clean_env / "nope.yaml"))

    with pytest.raises(FileNotFoundError):
        LuaSerdeSettings()


@pytest.mark.ut
def test_depth_must_be_positive(clean_env):
    with pytest.raises(ValidationError):
        LuaSerdeSettings(max_depth=0)


@pytest.mark.ut
def test_get_config_reports_validation_errors(fresh_deps, monkeypatch):
    monkeypatch.setenv("LUASERDE_MAX_DEPTH", "0")

    with pytest.raises(ValueError) as ex:
        get_config()

    assert str(ex.value).startswith("Configuration validation failed:")
    assert "max_depth" in str(ex.value)


@pytest.mark.ut
def test_default_serde_follows_settings(fresh_deps, monkeypatch):
    monkeypatch.setenv("LUASERDE_BYTES_SUPPORT", "true")

    assert get_serde().to_lua(b"hi", bytes) == LuaString("aGk=")
    assert get_serde() is get_serde()


@pytest.mark.ut
def test_api_uses_default_serde(fresh_deps):
    assert api.to_lua(3, int) == LuaNumber(3.0)
    assert api.from_lua(int, LuaNumber(3.0)) == 3
