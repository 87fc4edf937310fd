"""Shared fixtures: a fake clock, an in-memory store and a one-backend chain."""

from __future__ import annotations

import pytest

from infrastructure.delivery.chain import DeliveryChain
from infrastructure.session_store.memory import InMemorySessionStore
from services.otp_service import OtpService
from tests.fakes import FakeClock, ScriptedBackend


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemorySessionStore(clock=clock)


@pytest.fixture
def backend():
    return ScriptedBackend("primary")


@pytest.fixture
def chain(backend):
    return DeliveryChain([backend], timeout_seconds=1.0)


@pytest.fixture
def service(store, chain, clock):
    return OtpService(
        store,
        chain,
        code_length=6,
        ttl_seconds=60,
        max_attempts=3,
        expose_code=True,
        clock=clock,
    )
