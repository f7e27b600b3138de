from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict, YamlConfigSettingsSource

from luaserde.bootstrap.config.loader import get_configfile
from luaserde.core.models.config import SerdeConfig


class LuaSerdeSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LUASERDE_",
        extra="ignore"
    )

    bytes_support: Annotated[
        bool,
        Field(
            description=(
                "Convert byte strings to and from base64 text.\n"
                "Disabled by default: converting bytes then fails with an explicit\n"
                "error instead of guessing a representation."
            ),
            default=False
        )
    ]

    max_depth: Annotated[
        int,
        Field(
            description=(
                "Maximum number of nested tables a single conversion may build or read.\n"
                "Bounds the recursion of both directions on deeply nested data."
            ),
            default=64,
            gt=0
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        configfile = get_configfile()
        if configfile is None:
            return init_settings, env_settings
        return init_settings, env_settings, YamlConfigSettingsSource(settings_cls, yaml_file=configfile)

    def to_config(self) -> SerdeConfig:
        return SerdeConfig(
            bytes_support=self.bytes_support,
            max_depth=self.max_depth
        )
