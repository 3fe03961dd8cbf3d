from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

import requests

from steamguard.auth.models import SessionData
from steamguard.core.config.models import TransportConfig
from steamguard.core.events import redact
from steamguard.core.logger import get_logger


class SteamTransport(Protocol):
    """
    What the linker and the time synchronizer need from HTTP.

    Both calls return the raw response body, or None when no usable response
    arrived (connection error, timeout, non-2xx status).
    """

    def api_post(self, url: str, data: Dict[str, str]) -> Optional[str]: ...

    def community_post(self, url: str, data: Dict[str, str]) -> Optional[str]: ...


class RequestsTransport:
    def __init__(
        self,
        session: SessionData,
        *,
        config: Optional[TransportConfig] = None,
        http: Optional[requests.Session] = None,
        logger: Any = None,
    ):
        self.cfg = config or TransportConfig()
        self.logger = logger or get_logger("transport")
        self.http = http or requests.Session()
        self.http.headers.update(
            {
                "User-Agent": self.cfg.user_agent,
                "Accept": "text/javascript, text/html, application/xml, text/xml, */*",
            }
        )
        for name, value in session.cookies(mobile_client_version=self.cfg.mobile_client_version, language=self.cfg.language).items():
            self.http.cookies.set(name, value)

    def api_post(self, url: str, data: Dict[str, str]) -> Optional[str]:
        return self._post(url, data, headers=None)

    def community_post(self, url: str, data: Dict[str, str]) -> Optional[str]:
        # phoneajax rejects requests without the mobile login referer
        headers = {
            "Referer": "https://steamcommunity.com/mobilelogin?oauth_client_id=DE45CD61&oauth_scope=read_profile%20write_profile%20read_client%20write_client",
            "X-Requested-With": "com.valvesoftware.android.steam.community",
        }
        return self._post(url, data, headers=headers)

    def _post(self, url: str, data: Dict[str, str], *, headers: Optional[Dict[str, str]]) -> Optional[str]:
        try:
            r = self.http.post(url, data=data, headers=headers, timeout=self.cfg.timeout_seconds)
        except requests.RequestException as e:
            self.logger.warning("POST %s failed: %s (form=%s)", url, e.__class__.__name__, redact(dict(data)))
            return None
        if not (200 <= r.status_code < 300):
            self.logger.warning("POST %s returned HTTP %s", url, r.status_code)
            return None
        self.logger.debug("POST %s ok (form=%s)", url, redact(dict(data)))
        return r.text
