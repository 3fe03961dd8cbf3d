from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EndpointsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    steam_api_base: str = "https://api.steampowered.com"
    community_base: str = "https://steamcommunity.com"

    @field_validator("steam_api_base", "community_base")
    @classmethod
    def _require_scheme(cls, v: str) -> str:
        v = str(v or "").strip().rstrip("/")
        if not v.startswith(("https://", "http://")):
            raise ValueError("base URL must include an http(s) scheme")
        return v


class TransportConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    timeout_seconds: float = Field(default=10.0, gt=0)
    user_agent: str = "okhttp/3.12.12"
    mobile_client_version: str = "0 (2.1.3)"
    language: str = "english"


class LinkerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    device_id_prefix: str = Field(default="android", min_length=1)
    # tries 0..30 inclusive
    finalize_max_attempts: int = Field(default=31, ge=1)
    authenticator_type: int = 1
    sms_phone_id: int = 1


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    log_dir: str = "logs"
    level: str = "INFO"
    events_path: str = ""


class SteamGuardConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    config_version: int = Field(default=1, ge=1)
    endpoints: EndpointsConfig = Field(default_factory=EndpointsConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    linker: LinkerConfig = Field(default_factory=LinkerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
