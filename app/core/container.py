"""
Process-wide services, built once at startup and kept on app.state
"""
from dataclasses import dataclass
from typing import Optional

import httpx

from core.config import Settings
from modules.countries.cleanup import TemporalBlockCleanupScheduler
from modules.countries.repository import CountryBlockStore
from modules.countries.service import CountryManagementService
from modules.geolocation.cache import ResponseCache
from modules.geolocation.client import GeolocationClient
from modules.geolocation.providers import get_provider
from modules.geolocation.rate_limiter import FixedWindowRateLimiter
from modules.ip.service import IpBlockingService
from modules.logs.repository import AttemptLog
from modules.logs.service import AttemptLogService


@dataclass
class ServiceContainer:
    settings: Settings
    country_store: CountryBlockStore
    attempt_log: AttemptLog
    rate_limiter: FixedWindowRateLimiter
    response_cache: ResponseCache
    geolocation: GeolocationClient
    countries: CountryManagementService
    attempts: AttemptLogService
    ip_blocking: IpBlockingService
    cleanup: TemporalBlockCleanupScheduler

    async def aclose(self):
        await self.cleanup.stop()
        await self.geolocation.aclose()


def build_container(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    cleanup_interval_seconds: Optional[float] = None,
) -> ServiceContainer:
    """
    Args:
        settings: Application settings
        transport: Outbound transport override (tests plug httpx.MockTransport here)
        cleanup_interval_seconds: Sweep interval override, 5 minutes by default
    """
    country_store = CountryBlockStore()
    attempt_log = AttemptLog()

    rate_limiter = FixedWindowRateLimiter(max_per_minute=settings.GEOLOCATION_RATE_LIMIT_PER_MINUTE)
    response_cache = ResponseCache()
    geolocation = GeolocationClient(
        provider=get_provider(settings.GEOLOCATION_PROVIDER, settings.GEOLOCATION_API_KEY),
        base_url=settings.GEOLOCATION_BASE_URL,
        max_per_minute=settings.GEOLOCATION_RATE_LIMIT_PER_MINUTE,
        timeout_seconds=settings.GEOLOCATION_TIMEOUT_SECONDS,
        user_agent=settings.GEOLOCATION_USER_AGENT,
        rate_limiter=rate_limiter,
        cache=response_cache,
        transport=transport,
    )

    countries = CountryManagementService(country_store)
    attempts = AttemptLogService(attempt_log)

    if cleanup_interval_seconds is None:
        cleanup = TemporalBlockCleanupScheduler(country_store)
    else:
        cleanup = TemporalBlockCleanupScheduler(country_store, interval_seconds=cleanup_interval_seconds)

    return ServiceContainer(
        settings=settings,
        country_store=country_store,
        attempt_log=attempt_log,
        rate_limiter=rate_limiter,
        response_cache=response_cache,
        geolocation=geolocation,
        countries=countries,
        attempts=attempts,
        ip_blocking=IpBlockingService(geolocation, countries, attempts),
        cleanup=cleanup,
    )
