"""
Geolocation client: one IP address in, one normalized record (or None) out.

Call path for a lookup:
    validation -> pacing -> rate limiter -> response cache -> provider
"""
import asyncio
import ipaddress
import json
import logging
from time import monotonic
from typing import Optional

import httpx

from core.constants import LookupOutcome
from core.monitoring.metrics import record_lookup
from modules.geolocation.cache import CachingTransport, ResponseCache
from modules.geolocation.providers import GeolocationProvider
from modules.geolocation.rate_limiter import FixedWindowRateLimiter, RateLimitTransport
from modules.geolocation.schemas import IpLookupResult

logger = logging.getLogger("app")


def is_valid_ip(ip_address: Optional[str]) -> bool:
    """IPv4 или IPv6 в текстовом виде"""
    if not ip_address:
        return False
    try:
        ipaddress.ip_address(ip_address.strip())
    except ValueError:
        return False
    return True


class GeolocationClient:
    """
    Rate-limited, cached lookups against the configured provider.

    Every failure (bad input, 429, non-2xx, provider error flag, bad JSON,
    transport error) is logged with its own event name and reported to the
    caller as None. Nothing is retried here.
    """

    def __init__(
        self,
        provider: GeolocationProvider,
        base_url: str,
        max_per_minute: int = 60,
        timeout_seconds: float = 30.0,
        user_agent: str = "BlockedCountries/1.0",
        rate_limiter: Optional[FixedWindowRateLimiter] = None,
        cache: Optional[ResponseCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.provider = provider
        self.max_per_minute = max(1, int(max_per_minute))
        self.rate_limiter = rate_limiter or FixedWindowRateLimiter(max_per_minute=self.max_per_minute)
        self.cache = cache or ResponseCache()

        # Собственный интервал между запросами, поверх rate limiter
        self.min_interval_seconds = 60.0 / self.max_per_minute
        self._pace_lock = asyncio.Lock()
        self._last_request_at: Optional[float] = None
        self._in_flight = asyncio.Semaphore(self.max_per_minute)

        inner = transport or httpx.AsyncHTTPTransport()
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            transport=RateLimitTransport(self.rate_limiter, CachingTransport(self.cache, inner)),
        )

    async def _pace(self):
        async with self._pace_lock:
            if self._last_request_at is not None:
                elapsed = monotonic() - self._last_request_at
                if elapsed < self.min_interval_seconds:
                    await asyncio.sleep(self.min_interval_seconds - elapsed)
            self._last_request_at = monotonic()

    def _fail(self, outcome: LookupOutcome, ip_address: str, level: int = logging.WARNING, **details) -> None:
        logger.log(level, {
            "event": "ip_lookup_failed",
            "outcome": outcome.value,
            "ip": ip_address,
            "provider": self.provider.name,
            **details,
        })
        record_lookup(outcome.value)

    async def lookup(self, ip_address: Optional[str]) -> Optional[IpLookupResult]:
        if not is_valid_ip(ip_address):
            self._fail(LookupOutcome.INVALID_IP, str(ip_address))
            return None

        ip_address = ip_address.strip()
        path, params = self.provider.build_request(ip_address)

        async with self._in_flight:
            await self._pace()
            try:
                response = await self._http.get(path, params=params)
            except httpx.TimeoutException as e:
                self._fail(LookupOutcome.TRANSPORT_ERROR, ip_address, level=logging.ERROR,
                           error="timeout", error_type=type(e).__name__)
                return None
            except httpx.HTTPError as e:
                self._fail(LookupOutcome.TRANSPORT_ERROR, ip_address, level=logging.ERROR,
                           error=str(e), error_type=type(e).__name__)
                return None

        if response.status_code == 429:
            self._fail(LookupOutcome.RATE_LIMITED, ip_address, status_code=429)
            return None

        if not response.is_success:
            self._fail(LookupOutcome.PROVIDER_ERROR, ip_address,
                       status_code=response.status_code, body=response.text[:500])
            return None

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            self._fail(LookupOutcome.INVALID_PAYLOAD, ip_address, error=str(e))
            return None

        if not isinstance(data, dict):
            self._fail(LookupOutcome.INVALID_PAYLOAD, ip_address, error="payload is not an object")
            return None

        payload = self.provider.parse(data)
        reason = payload.error_reason()
        if reason is not None:
            self._fail(LookupOutcome.PROVIDER_REJECTED, ip_address, reason=reason)
            return None

        record_lookup(LookupOutcome.SUCCESS.value)
        result = payload.to_result(ip_address)
        logger.debug({
            "event": "ip_lookup_success",
            "ip": ip_address,
            "country_code": result.country_code,
        })
        return result

    async def aclose(self):
        await self._http.aclose()
