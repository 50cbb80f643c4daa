"""
IP lookup and caller block checks
"""
import logging
from typing import Optional

from core.constants import ErrorKind, UNKNOWN_COUNTRY
from core.monitoring.metrics import record_block_check
from core.results import ServiceResult
from modules.countries.service import CountryManagementService
from modules.geolocation.client import GeolocationClient, is_valid_ip
from modules.geolocation.schemas import IpLookupResult
from modules.ip.schemas import CheckBlockResponse
from modules.logs.service import AttemptLogService

logger = logging.getLogger("app")
security_logger = logging.getLogger("security")


class IpBlockingService:
    """Glue between the geolocation client, the block store and the attempt log"""

    def __init__(
        self,
        geolocation: GeolocationClient,
        countries: CountryManagementService,
        attempts: AttemptLogService,
    ):
        self.geolocation = geolocation
        self.countries = countries
        self.attempts = attempts

    async def lookup_ip(self, ip_address: Optional[str]) -> ServiceResult[IpLookupResult]:
        if not is_valid_ip(ip_address):
            logger.warning({"event": "invalid_ip_address", "ip": ip_address})
            return ServiceResult.failure(
                f"Invalid IP address format: {ip_address}", ErrorKind.VALIDATION
            )

        result = await self.geolocation.lookup(ip_address)
        if result is None:
            return ServiceResult.failure(
                f"Could not lookup information for IP address: {ip_address}",
                ErrorKind.PROVIDER,
            )
        return ServiceResult.success(result)

    async def check_block(
        self,
        ip_address: str,
        user_agent: Optional[str] = None,
    ) -> ServiceResult[CheckBlockResponse]:
        """
        Resolve the caller's country, check it against the block store and
        record the attempt whatever the outcome.
        """
        lookup = await self.geolocation.lookup(ip_address)

        country_code = UNKNOWN_COUNTRY
        if lookup is not None and lookup.country_code:
            country_code = lookup.country_code

        is_blocked = False
        if country_code != UNKNOWN_COUNTRY:
            is_blocked = self.countries.is_country_blocked(country_code)

        self.attempts.record_attempt(
            ip_address=ip_address,
            country_code=country_code,
            is_blocked=is_blocked,
            user_agent=user_agent,
        )
        record_block_check(is_blocked)

        if is_blocked:
            security_logger.warning({
                "event": "blocked_country_attempt",
                "ip": ip_address,
                "country_code": country_code,
                "user_agent": user_agent,
            })

        return ServiceResult.success(CheckBlockResponse(
            ip_address=ip_address,
            country_code=country_code,
            is_blocked=is_blocked,
        ))
