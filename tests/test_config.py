"""Tests for settings validation."""

import pytest
from pydantic import ValidationError

from core.config import Settings


class TestSettings:

    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.GEOLOCATION_PROVIDER == "ipapi"
        assert s.GEOLOCATION_BASE_URL == "https://ipapi.co"
        assert s.GEOLOCATION_RATE_LIMIT_PER_MINUTE == 60
        assert s.GEOLOCATION_TIMEOUT_SECONDS == 30.0

    @pytest.mark.parametrize("provider,url", [
        ("ipgeolocation", "https://api.ipgeolocation.io"),
        ("ip-api", "http://ip-api.com"),
    ])
    def test_provider_default_base_url(self, provider, url):
        s = Settings(_env_file=None, GEOLOCATION_PROVIDER=provider)
        assert s.GEOLOCATION_BASE_URL == url

    def test_explicit_base_url_wins(self):
        s = Settings(_env_file=None, GEOLOCATION_BASE_URL="http://geo.internal")
        assert s.GEOLOCATION_BASE_URL == "http://geo.internal"

    def test_unknown_provider(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, GEOLOCATION_PROVIDER="maxmind")

    def test_rate_limit_is_clamped(self):
        s = Settings(_env_file=None, GEOLOCATION_RATE_LIMIT_PER_MINUTE=0)
        assert s.GEOLOCATION_RATE_LIMIT_PER_MINUTE == 1

    def test_cors_origins_comma_separated(self):
        s = Settings(_env_file=None, CORS_ORIGINS="http://a.test, http://b.test")
        assert s.CORS_ORIGINS == ["http://a.test", "http://b.test"]

    def test_cors_origins_from_env_json(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", '["http://a.test"]')
        assert Settings(_env_file=None).CORS_ORIGINS == ["http://a.test"]
