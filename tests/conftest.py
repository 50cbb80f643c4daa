"""Shared fixtures: provider stubs on httpx.MockTransport and an app wired to them."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from core.config import settings
from core.container import build_container
from core.limiter import limiter
from modules.countries.models import CountryBlockEntry
from modules.countries.repository import CountryBlockStore

# ipapi.co-shaped bodies keyed by IP
IPAPI_BODIES = {
    "8.8.8.8": {
        "ip": "8.8.8.8",
        "country_code": "US",
        "country_name": "United States",
        "city": "Mountain View",
        "region": "California",
        "org": "GOOGLE",
    },
    "2.2.2.2": {
        "ip": "2.2.2.2",
        "country": "fr",
        "country_name": "France",
        "city": "Paris",
        "org": "Orange",
    },
    "127.0.0.1": {
        "ip": "127.0.0.1",
        "error": True,
        "reason": "Reserved IP Address",
        "reserved": True,
    },
}


class ProviderStub:
    """Counts requests and answers like ipapi.co"""

    def __init__(self, bodies=None):
        self.bodies = IPAPI_BODIES if bodies is None else bodies
        self.requests = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        ip = request.url.path.strip("/").split("/")[0]
        body = self.bodies.get(ip, {"ip": ip, "error": True, "reason": "Invalid IP Address"})
        return httpx.Response(200, json=body)


def make_entry(code, name=None, minutes=None, blocked_at=None):
    """Permanent entry, or temporal when `minutes` is given (negative = already expired)"""
    blocked_at = blocked_at or datetime.now(timezone.utc)
    if minutes is None:
        return CountryBlockEntry(code, name or code, blocked_at)
    return CountryBlockEntry(
        code,
        name or code,
        blocked_at,
        is_temporal=True,
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=minutes),
    )


@pytest.fixture
def store():
    return CountryBlockStore()


@pytest.fixture
def provider_stub():
    return ProviderStub()


@pytest.fixture
def fast_settings():
    # 6000/min -> pacing interval of 10 ms between lookups
    return settings.model_copy(update={
        "GEOLOCATION_PROVIDER": "ipapi",
        "GEOLOCATION_BASE_URL": "https://ipapi.test",
        "GEOLOCATION_RATE_LIMIT_PER_MINUTE": 6000,
    })


@pytest.fixture
def client(fast_settings, provider_stub):
    from main import app

    app.state.container = build_container(
        fast_settings,
        transport=httpx.MockTransport(provider_stub),
        cleanup_interval_seconds=3600,
    )
    limiter.reset()

    with TestClient(app) as test_client:
        yield test_client
