from __future__ import annotations

import json

import pytest

from steamguard.core.config import CONFIG_ENV_VAR, SteamGuardConfig, load_config
from steamguard.core.errors import ConfigError
from steamguard.web.endpoints import SteamEndpoints

from .helpers.config_builders import build_config_v1, build_linker_section


def _write(tmp_path, data) -> str:
    p = tmp_path / "steamguard.json"
    p.write_text(json.dumps(data), encoding="utf-8")
    return str(p)


def test_defaults_without_file():
    cfg = load_config()
    assert cfg == SteamGuardConfig()
    assert cfg.linker.finalize_max_attempts == 31
    assert cfg.linker.device_id_prefix == "android"
    assert cfg.endpoints.steam_api_base == "https://api.steampowered.com"


def test_missing_file_falls_back_to_defaults(tmp_path):
    assert load_config(str(tmp_path / "nope.json")) == SteamGuardConfig()


def test_file_values_applied(tmp_path):
    path = _write(
        tmp_path,
        build_config_v1(
            linker=build_linker_section(finalize_max_attempts=5),
            transport={"timeout_seconds": 2.5},
            endpoints={"steam_api_base": "https://api.example.test/"},
        ),
    )
    cfg = load_config(path)
    assert cfg.linker.finalize_max_attempts == 5
    assert cfg.transport.timeout_seconds == 2.5
    assert cfg.endpoints.steam_api_base == "https://api.example.test"
    assert SteamEndpoints.from_config(cfg.endpoints).add_authenticator == "https://api.example.test/ITwoFactorService/AddAuthenticator/v0001"


def test_env_var_selects_file(tmp_path, monkeypatch):
    path = _write(tmp_path, build_config_v1(logging={"level": "DEBUG"}))
    monkeypatch.setenv(CONFIG_ENV_VAR, path)
    assert load_config().logging.level == "DEBUG"


def test_corrupt_file_raises(tmp_path):
    p = tmp_path / "steamguard.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError) as ei:
        load_config(str(p))
    assert ei.value.recoverable is False


@pytest.mark.parametrize(
    "data",
    [
        {"unknown_section": {}},
        {"linker": {"finalize_max_attempts": 0}},
        {"linker": {"device_id_prefix": ""}},
        {"transport": {"timeout_seconds": 0}},
        {"endpoints": {"community_base": "steamcommunity.com"}},
        {"config_version": 0},
    ],
)
def test_invalid_values_raise(tmp_path, data):
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, data))


def test_non_object_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, [1, 2, 3]))
