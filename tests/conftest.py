"""
Shared test fixtures for the EG4 proxy tests.

Provides an isolated environment for ProxySettings, a controllable clock,
a mocked Eg4Client, and a TestClient whose app uses that mock in place of
the real upstream client.

CHANGELOG:
- 2026-10-15: Add logged_in fixture for device-scoped routes
- 2026-10-12: Initial creation
"""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from eg4_proxy.api.deps import get_eg4_client
from eg4_proxy.api.main import create_app
from eg4_proxy.auth.session import SessionContext
from eg4_proxy.client import Eg4Client
from eg4_proxy.config import ProxySettings

# All ProxySettings environment variable names, used for cleanup.
_ALL_PROXY_ENV_VARS = (
    "EG4_BASE_URL",
    "HOST",
    "PORT",
    "API_PREFIX",
    "SESSION_TIMEOUT_S",
    "PLANT_PAGE_ROWS",
    "INVERTER_PAGE_ROWS",
    "REGISTER_POINT_COUNT",
    "CORS_ORIGINS",
    "LOG_LEVEL",
)

COOKIE = "JSESSIONID=abc123; SERVERID=node-1"
SERIAL = "4512670118"


class FakeClock:
    """Manually advanced clock for session timeout tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 10, 16, 8, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def _clean_proxy_env(monkeypatch: pytest.MonkeyPatch, tmp_path: str) -> None:
    """Remove all proxy env vars and isolate from .env files before each test."""
    for var in _ALL_PROXY_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def mock_eg4() -> AsyncMock:
    """An Eg4Client stand-in whose coroutine methods are AsyncMocks."""
    client = AsyncMock(spec=Eg4Client)
    client.login = AsyncMock(return_value=COOKIE)
    client.post_form = AsyncMock(return_value={})
    client.get_json = AsyncMock(return_value={})
    client.post_json = AsyncMock(return_value={"success": True})
    client.read_registers = AsyncMock(return_value={"success": True})
    return client


@pytest.fixture()
def app(mock_eg4: AsyncMock) -> FastAPI:
    application = create_app(ProxySettings())
    application.dependency_overrides[get_eg4_client] = lambda: mock_eg4
    return application


@pytest.fixture()
def client(app: FastAPI, clock: FakeClock) -> Generator[TestClient, None, None]:
    """TestClient with lifespan run and the session clock replaced.

    Yields:
        TestClient: Configured test client for the proxy app.
    """
    with TestClient(app) as test_client:
        app.state.session = SessionContext(clock=clock)
        yield test_client


@pytest.fixture()
def logged_in(app: FastAPI, client: TestClient) -> SessionContext:
    """Start a session and select an inverter directly on app.state."""
    session: SessionContext = app.state.session
    session.start(COOKIE)
    session.select_device(SERIAL)
    return session
