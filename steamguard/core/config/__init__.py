"""
Library configuration: endpoint bases, transport tuning, linker constants.

Configuration is optional. Without a file every model falls back to the
protocol defaults; a present but unreadable or invalid file is a hard error.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import ValidationError

from steamguard.core.config.io import read_json_file
from steamguard.core.config.models import (
    EndpointsConfig,
    LinkerConfig,
    LoggingConfig,
    SteamGuardConfig,
    TransportConfig,
)
from steamguard.core.errors import ConfigError

CONFIG_ENV_VAR = "STEAMGUARD_CONFIG"


def load_config(path: Optional[str] = None) -> SteamGuardConfig:
    path = path or os.environ.get(CONFIG_ENV_VAR) or ""
    if not path:
        return SteamGuardConfig()
    rr = read_json_file(path)
    if not rr.ok:
        if rr.error == "missing":
            return SteamGuardConfig()
        raise ConfigError("Config file could not be read.", path=path, error=rr.error)
    try:
        return SteamGuardConfig.model_validate(rr.data)
    except ValidationError as e:
        raise ConfigError("Config file failed validation.", path=path, errors=e.errors(include_url=False)) from e


__all__ = [
    "CONFIG_ENV_VAR",
    "EndpointsConfig",
    "LinkerConfig",
    "LoggingConfig",
    "SteamGuardConfig",
    "TransportConfig",
    "load_config",
]
