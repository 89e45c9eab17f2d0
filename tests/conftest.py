"""Root conftest — shared fixtures for relay and client tests."""

import os

# Never pick up real credentials from the environment or a .env file
os.environ["TURNSTILE_SECRET_KEY"] = ""
os.environ["FORMSPREE_FORM_ID"] = ""
os.environ["TURNSTILE_SITE_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from app.config import Settings, get_settings
from app.main import app
from app.routers.contact import get_http_client
from app.utils import rate_limit
from tests.fakes import FakeTurnstile, FakeUpstream, make_settings


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def turnstile() -> FakeTurnstile:
    return FakeTurnstile()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def api(upstream, settings, monkeypatch):
    """TestClient with settings and outbound HTTP overridden, rate limit counters cleared."""

    async def _http_client():
        async with upstream.client() as client:
            yield client

    monkeypatch.setattr(rate_limit, "get_settings", lambda: settings)
    monkeypatch.setattr(rate_limit.limiter, "enabled", settings.rate_limit_enabled)
    rate_limit.limiter.reset()
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = _http_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def base_payload() -> dict:
    return {
        "email": "test@example.com",
        "phone": "123",
        "message": "Hello there",
        "turnstileToken": "token-123",
        "honeypot": "",
    }
