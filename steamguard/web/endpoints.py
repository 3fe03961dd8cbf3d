from __future__ import annotations

from dataclasses import dataclass

from steamguard.core.config.models import EndpointsConfig


@dataclass(frozen=True)
class SteamEndpoints:
    api_base: str = "https://api.steampowered.com"
    community_base: str = "https://steamcommunity.com"

    @classmethod
    def from_config(cls, cfg: EndpointsConfig) -> "SteamEndpoints":
        return cls(api_base=cfg.steam_api_base, community_base=cfg.community_base)

    def _api(self, path: str) -> str:
        return f"{self.api_base.rstrip('/')}{path}"

    @property
    def add_authenticator(self) -> str:
        return self._api("/ITwoFactorService/AddAuthenticator/v0001")

    @property
    def finalize_add_authenticator(self) -> str:
        return self._api("/ITwoFactorService/FinalizeAddAuthenticator/v0001")

    @property
    def query_time(self) -> str:
        return self._api("/ITwoFactorService/QueryTime/v0001")

    @property
    def phone_ajax(self) -> str:
        return f"{self.community_base.rstrip('/')}/steamguard/phoneajax"
