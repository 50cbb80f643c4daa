"""
Service layer for country blocking
"""
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from core.constants import (
    ErrorKind,
    TEMPORAL_BLOCK_MAX_MINUTES,
    TEMPORAL_BLOCK_MIN_MINUTES,
    get_country_name,
)
from core.pagination import normalize_paging, paginate
from core.results import ServiceResult
from modules.countries.models import CountryBlockEntry
from modules.countries.repository import CountryBlockStore
from modules.countries.schemas import BlockedCountryListResponse, BlockedCountryResponse

logger = logging.getLogger("app")

COUNTRY_CODE_RE = re.compile(r"^[A-Z]{2}$")


def normalize_country_code(country_code: Optional[str]) -> str:
    return (country_code or "").strip().upper()


def is_valid_country_code(country_code: str) -> bool:
    """Ровно две заглавные латинские буквы"""
    return bool(COUNTRY_CODE_RE.match(country_code))


def _to_response(entry: CountryBlockEntry) -> BlockedCountryResponse:
    return BlockedCountryResponse.model_validate(entry)


class CountryManagementService:
    """Block, unblock and query countries on top of CountryBlockStore"""

    def __init__(self, store: CountryBlockStore):
        self.store = store

    def _validate_code(self, raw_code: Optional[str]) -> ServiceResult[str]:
        code = normalize_country_code(raw_code)
        if not code:
            return ServiceResult.failure("Country code is required", ErrorKind.VALIDATION)
        if not is_valid_country_code(code):
            logger.warning({"event": "invalid_country_code", "country_code": raw_code})
            return ServiceResult.failure("Invalid country code", ErrorKind.VALIDATION)
        return ServiceResult.success(code)

    def block_country(self, country_code: Optional[str]) -> ServiceResult[BlockedCountryResponse]:
        """
        Permanently block a country.

        Blocking an already blocked country is idempotent: the existing entry
        is returned unchanged.
        """
        validated = self._validate_code(country_code)
        if not validated.is_success:
            return validated
        code = validated.data

        existing = self.store.get(code)
        if existing is not None:
            logger.info({"event": "country_already_blocked", "country_code": code})
            return ServiceResult.success(_to_response(existing))

        entry = CountryBlockEntry(
            country_code=code,
            country_name=get_country_name(code),
            blocked_at=datetime.now(timezone.utc),
            is_temporal=False,
        )

        if not self.store.add(entry):
            # Параллельный запрос успел заблокировать страну раньше нас
            existing = self.store.get(code)
            if existing is not None:
                return ServiceResult.success(_to_response(existing))
            return ServiceResult.failure(f"Failed to block country {code}", ErrorKind.CONFLICT)

        logger.info({"event": "country_blocked", "country_code": code})
        return ServiceResult.success(_to_response(entry))

    def unblock_country(self, country_code: Optional[str]) -> ServiceResult[bool]:
        validated = self._validate_code(country_code)
        if not validated.is_success:
            return validated
        code = validated.data

        if self.store.remove(code):
            logger.info({"event": "country_unblocked", "country_code": code})
            return ServiceResult.success(True)

        logger.warning({"event": "unblock_not_blocked", "country_code": code})
        return ServiceResult.failure(
            f"Country {code} is not currently blocked", ErrorKind.NOT_FOUND
        )

    def list_blocked_countries(
        self,
        page: int = 1,
        page_size: int = 10,
        search_term: Optional[str] = None,
    ) -> ServiceResult[BlockedCountryListResponse]:
        """
        List active blocks.

        Expired temporal blocks are filtered first, then the search term
        (case-insensitive substring of code or name), then pagination.
        """
        page, page_size = normalize_paging(page, page_size)

        entries = sorted(
            self.store.list_all(filter_expired=True),
            key=lambda e: (e.blocked_at, e.country_code),
        )

        if search_term and search_term.strip():
            needle = search_term.strip().casefold()
            entries = [
                e for e in entries
                if needle in e.country_code.casefold() or needle in e.country_name.casefold()
            ]

        return ServiceResult.success(BlockedCountryListResponse(
            items=[_to_response(e) for e in paginate(entries, page, page_size)],
            total_count=len(entries),
            page=page,
            page_size=page_size,
        ))

    def add_temporal_block(
        self,
        country_code: Optional[str],
        duration_minutes: int,
    ) -> ServiceResult[BlockedCountryResponse]:
        if not normalize_country_code(country_code):
            return ServiceResult.failure("Country code is required", ErrorKind.VALIDATION)

        if not TEMPORAL_BLOCK_MIN_MINUTES <= duration_minutes <= TEMPORAL_BLOCK_MAX_MINUTES:
            logger.warning({
                "event": "invalid_temporal_duration",
                "country_code": country_code,
                "duration_minutes": duration_minutes,
            })
            return ServiceResult.failure(
                "Duration must be between 1 and 1440 minutes (24 hours)",
                ErrorKind.VALIDATION,
            )

        validated = self._validate_code(country_code)
        if not validated.is_success:
            return validated
        code = validated.data

        if self.store.get(code) is not None:
            logger.warning({"event": "temporal_block_conflict", "country_code": code})
            return ServiceResult.failure(
                f"Country {code} is already blocked", ErrorKind.CONFLICT
            )

        now = datetime.now(timezone.utc)
        entry = CountryBlockEntry(
            country_code=code,
            country_name=get_country_name(code),
            blocked_at=now,
            is_temporal=True,
            expires_at=now + timedelta(minutes=duration_minutes),
        )

        if not self.store.add_temporal(entry):
            logger.warning({"event": "temporal_block_conflict", "country_code": code})
            return ServiceResult.failure(
                f"Country {code} is already blocked", ErrorKind.CONFLICT
            )

        logger.info({
            "event": "country_temporarily_blocked",
            "country_code": code,
            "duration_minutes": duration_minutes,
            "expires_at": entry.expires_at.isoformat(),
        })
        return ServiceResult.success(_to_response(entry))

    def is_country_blocked(self, country_code: Optional[str]) -> bool:
        code = normalize_country_code(country_code)
        if not is_valid_country_code(code):
            return False
        return self.store.is_blocked(code)
