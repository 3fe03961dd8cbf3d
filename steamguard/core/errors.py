from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from steamguard.core.events import redact


class Severity(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class SteamGuardError(Exception):
    code: str
    user_message: str
    severity: Severity = Severity.ERROR
    recoverable: bool = True
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.code)

    def __str__(self) -> str:
        return f"{self.code}: {self.user_message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "recoverable": bool(self.recoverable),
            "context": redact(self.context or {}),
        }


# ---- Core types ----
class ConfigError(SteamGuardError):
    def __init__(self, user_message: str = "Configuration error.", **ctx: Any):
        super().__init__("config_error", user_message, severity=Severity.CRITICAL, recoverable=False, context=ctx)


class InvalidSecretError(SteamGuardError):
    def __init__(self, user_message: str = "Shared secret is missing or malformed.", **ctx: Any):
        super().__init__("invalid_secret", user_message, severity=Severity.ERROR, recoverable=False, context=ctx)


class CryptoUnavailableError(SteamGuardError):
    def __init__(self, user_message: str = "Required cryptographic primitive is unavailable.", **ctx: Any):
        super().__init__("crypto_unavailable", user_message, severity=Severity.CRITICAL, recoverable=False, context=ctx)


class StateTransitionError(SteamGuardError):
    def __init__(self, user_message: str = "Internal state error.", **ctx: Any):
        super().__init__("state_transition_error", user_message, severity=Severity.ERROR, recoverable=True, context=ctx)
