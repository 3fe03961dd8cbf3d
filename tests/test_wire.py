from __future__ import annotations

import json

import pytest

from steamguard.web.wire import (
    AddAuthenticatorResponse,
    FinalizeResponse,
    HasPhoneResponse,
    PhoneAjaxResponse,
    QueryTimeResponse,
    parse_response,
)

from .helpers.fakes import SECRET_B64, registration_reply


def test_registration_payload_parsed():
    parsed = parse_response(AddAuthenticatorResponse, json.dumps(registration_reply(status=1)))
    assert parsed is not None
    assert parsed.response.status == 1
    assert parsed.response.shared_secret == SECRET_B64
    assert parsed.response.server_time == 1_700_000_000


def test_secrets_hidden_from_repr():
    parsed = parse_response(AddAuthenticatorResponse, json.dumps(registration_reply(status=1)))
    assert SECRET_B64 not in repr(parsed)
    assert "R12345" not in repr(parsed)


def test_finalize_defaults():
    parsed = parse_response(FinalizeResponse, '{"response": {"success": true}}')
    assert parsed is not None
    assert parsed.response.status == 0
    assert parsed.response.want_more is False


def test_finalize_success_flag_defaults_to_false():
    parsed = parse_response(FinalizeResponse, '{"response": {"status": 89}}')
    assert parsed is not None
    assert parsed.response.status == 89
    assert parsed.response.success is False


def test_unknown_fields_ignored():
    parsed = parse_response(HasPhoneResponse, '{"has_phone": true, "extra": [1, 2]}')
    assert parsed is not None and parsed.has_phone is True


def test_query_time_accepts_string_seconds():
    parsed = parse_response(QueryTimeResponse, '{"response": {"server_time": "1700000123"}}')
    assert parsed is not None and parsed.response.server_time == 1_700_000_123


@pytest.mark.parametrize(
    "model,body",
    [
        (PhoneAjaxResponse, None),
        (PhoneAjaxResponse, ""),
        (PhoneAjaxResponse, "null"),
        (PhoneAjaxResponse, "[]"),
        (PhoneAjaxResponse, "{}"),
        (HasPhoneResponse, '{"success": true}'),
        (AddAuthenticatorResponse, '{"response": {"shared_secret": "x"}}'),
        (FinalizeResponse, '{"status": 88}'),
        (QueryTimeResponse, '{"response": {"server_time": "soon"}}'),
    ],
)
def test_malformed_bodies_are_none(model, body):
    assert parse_response(model, body) is None
