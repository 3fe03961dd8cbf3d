from __future__ import annotations

import contextlib
import threading
import uuid
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, Optional, Union

from steamguard.auth.codes import decode_secret, generate_code
from steamguard.auth.device_id import generate_device_id
from steamguard.auth.models import Authenticator, SessionData
from steamguard.auth.retry_policy import STATUS_UNABLE_TO_GENERATE_CODES, FinalizeAction, FinalizeRetryPolicy
from steamguard.auth.time_sync import TimeSynchronizer
from steamguard.core.config import load_config
from steamguard.core.config.models import SteamGuardConfig
from steamguard.core.errors import InvalidSecretError, StateTransitionError
from steamguard.core.events import EventLogger
from steamguard.core.logger import get_logger, setup_logging
from steamguard.web.endpoints import SteamEndpoints
from steamguard.web.wire import (
    AddAuthenticatorResponse,
    FinalizeResponse,
    HasPhoneResponse,
    PhoneAjaxResponse,
    parse_response,
)

if TYPE_CHECKING:
    from steamguard.web.transport import SteamTransport

STATUS_OK = 1
STATUS_AUTHENTICATOR_PRESENT = 29


class LinkResult(str, Enum):
    MUST_PROVIDE_PHONE_NUMBER = "MUST_PROVIDE_PHONE_NUMBER"  # account has no phone and none was given
    MUST_REMOVE_PHONE_NUMBER = "MUST_REMOVE_PHONE_NUMBER"  # account already has a phone; don't pass one
    AWAITING_FINALIZATION = "AWAITING_FINALIZATION"  # registered, waiting for the SMS code
    GENERAL_FAILURE = "GENERAL_FAILURE"  # transport, payload or unexpected status
    AUTHENTICATOR_PRESENT = "AUTHENTICATOR_PRESENT"  # another authenticator is already linked


class FinalizeResult(str, Enum):
    BAD_SMS_CODE = "BAD_SMS_CODE"
    UNABLE_TO_GENERATE_CORRECT_CODES = "UNABLE_TO_GENERATE_CORRECT_CODES"  # clock never lined up
    SUCCESS = "SUCCESS"
    GENERAL_FAILURE = "GENERAL_FAILURE"


class LinkerState(str, Enum):
    CREATED = "CREATED"
    PHONE_CHECKED = "PHONE_CHECKED"
    AWAITING_REGISTRATION = "AWAITING_REGISTRATION"
    REGISTRATION_FAILED = "REGISTRATION_FAILED"
    REGISTERED = "REGISTERED"
    AWAITING_FINALIZATION = "AWAITING_FINALIZATION"
    FINALIZE_FAILED = "FINALIZE_FAILED"
    FINALIZED = "FINALIZED"


_TRANSITIONS: Dict[LinkerState, frozenset] = {
    LinkerState.CREATED: frozenset({LinkerState.PHONE_CHECKED, LinkerState.REGISTRATION_FAILED}),
    LinkerState.PHONE_CHECKED: frozenset({LinkerState.AWAITING_REGISTRATION, LinkerState.REGISTRATION_FAILED}),
    LinkerState.AWAITING_REGISTRATION: frozenset({LinkerState.REGISTERED, LinkerState.REGISTRATION_FAILED}),
    # a failed attempt may be started over with the same device id
    LinkerState.REGISTRATION_FAILED: frozenset({LinkerState.PHONE_CHECKED, LinkerState.REGISTRATION_FAILED}),
    LinkerState.REGISTERED: frozenset({LinkerState.AWAITING_FINALIZATION}),
    LinkerState.AWAITING_FINALIZATION: frozenset({LinkerState.FINALIZED, LinkerState.FINALIZE_FAILED}),
    LinkerState.FINALIZE_FAILED: frozenset({LinkerState.FINALIZED, LinkerState.FINALIZE_FAILED}),
    LinkerState.FINALIZED: frozenset(),
}

CodeGenerator = Callable[[Union[str, bytes], int], str]


class AuthenticatorLinker:
    """
    Links a new mobile authenticator to the session's account.

    Usage::

        linker = AuthenticatorLinker.from_config(session)
        linker.phone_number = "+15551234567"  # only if the account has no phone yet
        if linker.add_authenticator() is LinkResult.AWAITING_FINALIZATION:
            save(linker.linked_account)       # before finalizing
            linker.finalize_add_authenticator(sms_code)

    One linker drives one attempt and must not be shared between threads.
    """

    def __init__(
        self,
        session: SessionData,
        *,
        transport: "SteamTransport",
        config: Optional[SteamGuardConfig] = None,
        time_sync: Optional[TimeSynchronizer] = None,
        code_generator: CodeGenerator = generate_code,
        event_logger: Optional[EventLogger] = None,
        logger: Any = None,
    ):
        self.cfg = config or SteamGuardConfig()
        self.session = session
        self.transport = transport
        self.endpoints = SteamEndpoints.from_config(self.cfg.endpoints)
        self.time_sync = time_sync or TimeSynchronizer(transport, endpoints=self.endpoints)
        self.code_generator = code_generator
        self.retry_policy = FinalizeRetryPolicy(max_attempts=int(self.cfg.linker.finalize_max_attempts))
        self.event_logger = event_logger
        self.logger = logger or get_logger("linker")
        self.trace_id = uuid.uuid4().hex

        # Set before add_authenticator() when the account has no phone yet.
        self.phone_number: Optional[str] = None
        self.device_id: str = generate_device_id(self.cfg.linker.device_id_prefix)
        self.linked_account: Optional[Authenticator] = None
        self.finalized = False

        self._state = LinkerState.CREATED
        self._busy = threading.Lock()

    @classmethod
    def from_config(
        cls,
        session: SessionData,
        config: Optional[SteamGuardConfig] = None,
        *,
        transport: Optional["SteamTransport"] = None,
        **kwargs: Any,
    ) -> "AuthenticatorLinker":
        """
        Build a linker with logging, events and HTTP set up from configuration.

        Without `config` the file named by STEAMGUARD_CONFIG is loaded.
        """
        cfg = config or load_config()
        setup_logging(cfg.logging.log_dir, cfg.logging.level)
        if transport is None:
            from steamguard.web.transport import RequestsTransport

            transport = RequestsTransport(session, config=cfg.transport)
        if cfg.logging.events_path and "event_logger" not in kwargs:
            kwargs["event_logger"] = EventLogger(cfg.logging.events_path)
        return cls(session, transport=transport, config=cfg, **kwargs)

    @property
    def state(self) -> LinkerState:
        return self._state

    # ── phone helpers ─────────────────────────────────────────────

    def has_phone_attached(self) -> bool:
        return bool(self._query_has_phone())

    def check_sms_code(self, sms_code: str) -> bool:
        return bool(self._phone_ajax("check_sms_code", sms_code))

    # ── linking ───────────────────────────────────────────────────

    def add_authenticator(self) -> LinkResult:
        with self._exclusive("add_authenticator"):
            if self._state not in (LinkerState.CREATED, LinkerState.REGISTRATION_FAILED):
                raise StateTransitionError("Authenticator is already registered for this linker.", state=self._state.value)
            result = self._add_authenticator()
            self._event("link.add_authenticator", result=result.value)
            return result

    def _add_authenticator(self) -> LinkResult:
        has_phone = self._query_has_phone()
        if has_phone is None:
            self._transition(LinkerState.REGISTRATION_FAILED)
            return LinkResult.GENERAL_FAILURE
        self._transition(LinkerState.PHONE_CHECKED)

        if has_phone and self.phone_number:
            self._transition(LinkerState.REGISTRATION_FAILED)
            return LinkResult.MUST_REMOVE_PHONE_NUMBER
        if not has_phone and not self.phone_number:
            self._transition(LinkerState.REGISTRATION_FAILED)
            return LinkResult.MUST_PROVIDE_PHONE_NUMBER

        self._transition(LinkerState.AWAITING_REGISTRATION)
        if not has_phone and not self._phone_ajax("add_phone_number", str(self.phone_number)):
            self.logger.warning("Adding phone number failed")
            self._transition(LinkerState.REGISTRATION_FAILED)
            return LinkResult.GENERAL_FAILURE

        form = {
            "access_token": self.session.oauth_token,
            "steamid": str(self.session.steam_id),
            "authenticator_type": str(self.cfg.linker.authenticator_type),
            "device_identifier": self.device_id,
            "sms_phone_id": str(self.cfg.linker.sms_phone_id),
        }
        parsed = parse_response(AddAuthenticatorResponse, self.transport.api_post(self.endpoints.add_authenticator, form))
        if parsed is None:
            self.logger.warning("AddAuthenticator returned no usable response")
            self._transition(LinkerState.REGISTRATION_FAILED)
            return LinkResult.GENERAL_FAILURE

        payload = parsed.response
        if payload.status == STATUS_AUTHENTICATOR_PRESENT:
            self._transition(LinkerState.REGISTRATION_FAILED)
            return LinkResult.AUTHENTICATOR_PRESENT
        if payload.status != STATUS_OK or not payload.shared_secret:
            self.logger.warning("AddAuthenticator rejected (status=%s)", payload.status)
            self._transition(LinkerState.REGISTRATION_FAILED)
            return LinkResult.GENERAL_FAILURE
        try:
            decode_secret(payload.shared_secret)
        except InvalidSecretError as e:
            self.logger.warning("AddAuthenticator returned an unusable shared secret (%s)", e.code)
            self._transition(LinkerState.REGISTRATION_FAILED)
            return LinkResult.GENERAL_FAILURE

        self.linked_account = Authenticator.from_registration(payload, device_id=self.device_id, steam_id=self.session.steam_id)
        self._transition(LinkerState.REGISTERED)
        self._transition(LinkerState.AWAITING_FINALIZATION)
        self.logger.info("Authenticator registered for %s; awaiting finalization", self.session.steam_id)
        return LinkResult.AWAITING_FINALIZATION

    def finalize_add_authenticator(self, sms_code: str) -> FinalizeResult:
        with self._exclusive("finalize_add_authenticator"):
            if self.linked_account is None or self._state not in (LinkerState.AWAITING_FINALIZATION, LinkerState.FINALIZE_FAILED):
                raise StateTransitionError("Nothing to finalize; call add_authenticator() first.", state=self._state.value)
            result = self._finalize(self.linked_account, sms_code)
            self._transition(LinkerState.FINALIZED if result is FinalizeResult.SUCCESS else LinkerState.FINALIZE_FAILED)
            self._event("link.finalize", result=result.value)
            return result

    def _finalize(self, account: Authenticator, sms_code: str) -> FinalizeResult:
        if self.phone_number:
            sms_ok = self._phone_ajax("check_sms_code", sms_code)
            if sms_ok is None:
                return FinalizeResult.GENERAL_FAILURE
            if not sms_ok:
                return FinalizeResult.BAD_SMS_CODE

        form = {
            "steamid": str(self.session.steam_id),
            "access_token": self.session.oauth_token,
            "activation_code": sms_code,
        }
        for attempt in self.retry_policy.attempts():
            aligned = self.time_sync.aligned_time()
            form["authenticator_code"] = self.code_generator(account.shared_secret, aligned)
            form["authenticator_time"] = str(aligned)

            parsed = parse_response(FinalizeResponse, self.transport.api_post(self.endpoints.finalize_add_authenticator, form))
            action = self.retry_policy.decide(parsed.response if parsed else None, attempt)
            if action is FinalizeAction.SUCCEED:
                account.fully_enrolled = True
                self.finalized = True
                self.logger.info("Authenticator finalized after %s attempt(s)", attempt + 1)
                return FinalizeResult.SUCCESS
            if action is FinalizeAction.BAD_SMS_CODE:
                return FinalizeResult.BAD_SMS_CODE
            if action is FinalizeAction.GIVE_UP:
                self.logger.warning("Steam rejected %s generated codes; giving up", attempt + 1)
                return FinalizeResult.UNABLE_TO_GENERATE_CORRECT_CODES
            if action is FinalizeAction.FAIL:
                return FinalizeResult.GENERAL_FAILURE

            # RETRY: either want_more or a rejected code
            status = parsed.response.status if parsed else 0
            if status == STATUS_UNABLE_TO_GENERATE_CODES and not self.time_sync.verified:
                self.time_sync.resync()
            self.logger.debug("Finalize attempt %s needs another round (status=%s)", attempt, status)
        return FinalizeResult.GENERAL_FAILURE

    # ── internals ─────────────────────────────────────────────────

    @contextlib.contextmanager
    def _exclusive(self, op: str) -> Iterator[None]:
        if not self._busy.acquire(blocking=False):
            raise StateTransitionError("Linker is already running an operation.", op=op)
        try:
            yield
        finally:
            self._busy.release()

    def _transition(self, new: LinkerState) -> None:
        if new not in _TRANSITIONS[self._state]:
            raise StateTransitionError("Illegal linker transition.", from_state=self._state.value, to_state=new.value)
        self._state = new

    def _query_has_phone(self) -> Optional[bool]:
        form = {"op": "has_phone", "arg": "null", "sessionid": self.session.session_id}
        parsed = parse_response(HasPhoneResponse, self.transport.community_post(self.endpoints.phone_ajax, form))
        return None if parsed is None else bool(parsed.has_phone)

    def _phone_ajax(self, op: str, arg: str) -> Optional[bool]:
        form = {"op": op, "arg": arg, "sessionid": self.session.session_id}
        parsed = parse_response(PhoneAjaxResponse, self.transport.community_post(self.endpoints.phone_ajax, form))
        return None if parsed is None else bool(parsed.success)

    def _event(self, event_type: str, **details: Any) -> None:
        if self.event_logger is None:
            return
        self.event_logger.log(self.trace_id, event_type, {"steam_id": str(self.session.steam_id), "state": self._state.value, **details})
