import json
from functools import lru_cache

from pydantic import ValidationError

from luaserde.bootstrap.config.settings import LuaSerdeSettings
from luaserde.core.facade import LuaSerde
from luaserde.infra.base64_codec import Base64BytesCodec


@lru_cache
def get_serde() -> LuaSerde:
    config = get_config().to_config()
    return LuaSerde(
        config=config,
        bytes_codec=Base64BytesCodec()
    )


@lru_cache
def get_config() -> LuaSerdeSettings:
    try:
        return LuaSerdeSettings()
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(map(str, err['loc']))}: {err['msg']}")
        raise ValueError("\n".join(msg)) from None
