from __future__ import annotations

import pytest

from steamguard.auth.models import SessionData

from .helpers.fakes import FakeClock, FakeTransport
from .helpers.harness import make_session


@pytest.fixture
def session() -> SessionData:
    return make_session()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch):
    monkeypatch.delenv("STEAMGUARD_CONFIG", raising=False)
