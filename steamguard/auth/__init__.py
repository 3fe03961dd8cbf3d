"""
Mobile authenticator linking and Steam Guard code generation.

The linker is the entry point; codes, device ids and time alignment are usable
on their own once an authenticator has been saved.
"""

from steamguard.auth.codes import generate_code
from steamguard.auth.device_id import generate_device_id
from steamguard.auth.linker import AuthenticatorLinker, FinalizeResult, LinkerState, LinkResult
from steamguard.auth.models import Authenticator, SessionData
from steamguard.auth.time_sync import TimeSynchronizer

__all__ = [
    "Authenticator",
    "AuthenticatorLinker",
    "FinalizeResult",
    "LinkResult",
    "LinkerState",
    "SessionData",
    "TimeSynchronizer",
    "generate_code",
    "generate_device_id",
]
