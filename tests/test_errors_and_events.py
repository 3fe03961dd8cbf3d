from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler

from steamguard.core.errors import InvalidSecretError, Severity, StateTransitionError
from steamguard.core.events import EventLogger, redact
from steamguard.core.logger import setup_logging

from .helpers.log_assertions import read_jsonl


def test_error_to_dict_redacts_context():
    e = StateTransitionError("Illegal linker transition.", from_state="CREATED", access_token="oauth-token-SECRET")
    d = e.to_dict()
    assert d["code"] == "state_transition_error"
    assert d["severity"] == Severity.ERROR.value
    assert d["context"]["from_state"] == "CREATED"
    assert "oauth-token-SECRET" not in json.dumps(d)


def test_error_str_includes_code():
    assert str(InvalidSecretError()).startswith("invalid_secret:")


def test_redact_nested():
    out = redact({"response": {"shared_secret": "s", "status": 1}, "items": [{"identity_secret": "i"}]})
    assert out == {"response": {"shared_secret": "***REDACTED***", "status": 1}, "items": [{"identity_secret": "***REDACTED***"}]}


def test_event_logger_appends_redacted_lines(tmp_path):
    ev = EventLogger(str(tmp_path / "events" / "link.jsonl"))
    ev.log("t1", "link.add_authenticator", {"result": "AWAITING_FINALIZATION", "shared_secret": "MTIz"})
    ev.log("t1", "link.finalize", {"result": "SUCCESS"})
    rows = read_jsonl(ev.path)
    assert [r["event"] for r in rows] == ["link.add_authenticator", "link.finalize"]
    assert rows[0]["details"]["shared_secret"] == "***REDACTED***"
    assert all(r["trace_id"] == "t1" for r in rows)


def test_setup_logging_is_idempotent(tmp_path):
    logger = logging.getLogger("steamguard")
    saved = (list(logger.handlers), logger.propagate, logger.level)
    try:
        for h in list(logger.handlers):
            logger.removeHandler(h)
        setup_logging(str(tmp_path / "logs"), level="debug")
        setup_logging(str(tmp_path / "logs"))
        assert sum(isinstance(h, RotatingFileHandler) for h in logger.handlers) == 1
        assert len(logger.handlers) == 2
        logging.getLogger("steamguard.linker").info("hello")
        for h in logger.handlers:
            h.flush()
        assert "hello" in (tmp_path / "logs" / "steamguard.log").read_text(encoding="utf-8")
    finally:
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()
        for h in saved[0]:
            logger.addHandler(h)
        logger.propagate = saved[1]
        logger.setLevel(saved[2])
