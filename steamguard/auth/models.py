from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from steamguard.auth.codes import generate_code
from steamguard.web.wire import AddAuthenticatorPayload

if TYPE_CHECKING:
    from steamguard.auth.time_sync import TimeSynchronizer


class SessionData(BaseModel):
    """
    Credentials of an already logged-in mobile session. Owned by the caller.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    steam_id: int = Field(ge=0)
    session_id: str = Field(repr=False)
    oauth_token: str = Field(repr=False)
    steam_login: str = Field(default="", repr=False)
    steam_login_secure: str = Field(default="", repr=False)

    def cookies(self, *, mobile_client_version: str = "0 (2.1.3)", language: str = "english") -> Dict[str, str]:
        return {
            "mobileClientVersion": mobile_client_version,
            "mobileClient": "android",
            "steamid": str(self.steam_id),
            "steamLogin": self.steam_login,
            "steamLoginSecure": self.steam_login_secure,
            "Steam_Language": language,
            "dob": "",
            "sessionid": self.session_id,
        }


class Authenticator(BaseModel):
    """
    Steam Guard data for one account, as handed back by registration.

    The caller owns persistence. `fully_enrolled` only flips after the linker
    finalizes successfully; an authenticator that never gets there is useless
    and should be discarded.
    """

    model_config = ConfigDict(extra="forbid")

    shared_secret: str = Field(repr=False)
    serial_number: Optional[str] = None
    revocation_code: Optional[str] = Field(default=None, repr=False)
    uri: Optional[str] = Field(default=None, repr=False)
    server_time: Optional[int] = None
    account_name: Optional[str] = None
    token_gid: Optional[str] = None
    identity_secret: Optional[str] = Field(default=None, repr=False)
    secret_1: Optional[str] = Field(default=None, repr=False)
    status: int = 0
    device_id: str
    steam_id: int
    fully_enrolled: bool = False

    @classmethod
    def from_registration(cls, payload: AddAuthenticatorPayload, *, device_id: str, steam_id: int) -> "Authenticator":
        return cls(**payload.model_dump(), device_id=device_id, steam_id=steam_id)

    def code_at(self, aligned_time: int) -> str:
        return generate_code(self.shared_secret, aligned_time)

    def generate_code(self, time_sync: "TimeSynchronizer") -> str:
        return self.code_at(time_sync.aligned_time())
