"""Shared fixtures for the OAuth token proxy test suite."""

from unittest.mock import AsyncMock
from urllib.parse import parse_qsl

import httpx
import pytest

from src.config.settings import get_settings
from src.proxy.upstream import UpstreamResponse, get_upstream

CONFIG_ENV_VARS = (
    "CLIENT_MAP",
    "CLIENT_ID",
    "CLIENT_SECRET",
    "ALLOWED_ORIGINS",
    "LOG_LEVEL",
    "AUDIT_LOG_FILE",
)

FORM = "application/x-www-form-urlencoded"


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Any config var not passed is removed from the environment, so each
    test starts from the defaults.

    Usage:
        override_settings(CLIENT_ID="abc", CLIENT_SECRET="secret1")
    """
    def _override(**kwargs):
        for key in CONFIG_ENV_VARS:
            monkeypatch.delenv(key, raising=False)
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()
        return get_settings()

    yield _override

    get_settings.cache_clear()


@pytest.fixture
def token_response() -> UpstreamResponse:
    return UpstreamResponse(
        status_code=200,
        body=b'{"access_token":"at-123","token_type":"bearer"}',
        content_type="application/json",
    )


@pytest.fixture
def mock_upstream(token_response) -> AsyncMock:
    """Upstream client stand-in that answers both endpoints with 200."""
    upstream = AsyncMock()
    upstream.exchange_token.return_value = token_response
    upstream.fetch_user.return_value = UpstreamResponse(
        status_code=200,
        body=b'{"id":1,"username":"alice"}',
        content_type="application/json",
    )
    return upstream


@pytest.fixture
def app_client(override_settings, mock_upstream):
    """Factory: httpx AsyncClient wired to the FastAPI app with a mocked upstream.

    Usage:
        async with app_client(CLIENT_ID="abc") as client: ...
    """
    from src.main import app

    app.dependency_overrides[get_upstream] = lambda: mock_upstream

    def _client(**env) -> httpx.AsyncClient:
        override_settings(**env)
        transport = httpx.ASGITransport(app=app)
        return httpx.AsyncClient(transport=transport, base_url="http://test")

    yield _client

    app.dependency_overrides.clear()


def sent_form(mock_upstream: AsyncMock) -> dict[str, str]:
    """Decode the form body the proxy sent to the token endpoint."""
    body = mock_upstream.exchange_token.call_args.args[0]
    return dict(parse_qsl(body, keep_blank_values=True))
