"""Pytest configuration and shared fixtures."""

from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio

from jetbridge.config import BackendConfig, RegistryConfig
from jetbridge.state import BridgeState
from tests.helpers import (
    FIRST_PORT,
    HOST,
    LAST_PORT,
    FakeClock,
    FakeIDE,
    RecordingSleep,
)


@pytest.fixture
def fake_ide() -> FakeIDE:
    return FakeIDE()


@pytest_asyncio.fixture
async def http_client(fake_ide: FakeIDE) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client whose requests are answered by ``fake_ide``."""
    async with fake_ide.client() as client:
        yield client


@pytest.fixture
def state() -> BridgeState:
    return BridgeState()


@pytest.fixture
def backend_config() -> BackendConfig:
    """Scan range 63342-63352 on loopback, no port override."""
    return BackendConfig(
        host=HOST, port_range_start=FIRST_PORT, port_range_end=LAST_PORT
    )


@pytest.fixture
def registry_config() -> RegistryConfig:
    return RegistryConfig(ttl_seconds=30.0, fetch_attempts=3, backoff_unit_seconds=1.0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()
