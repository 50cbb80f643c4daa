"""
Service layer for the block-check attempt log
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from core.pagination import normalize_paging
from core.results import ServiceResult
from modules.logs.models import AttemptRecord
from modules.logs.repository import AttemptLog
from modules.logs.schemas import AttemptListResponse, AttemptResponse

logger = logging.getLogger("app")


class AttemptLogService:

    def __init__(self, log: AttemptLog):
        self.log = log

    def record_attempt(
        self,
        ip_address: str,
        country_code: str,
        is_blocked: bool,
        user_agent: Optional[str] = None,
    ) -> AttemptRecord:
        """Append an attempt; the timestamp is taken at append time (UTC)"""
        record = AttemptRecord(
            ip_address=ip_address,
            timestamp=datetime.now(timezone.utc),
            country_code=country_code,
            is_blocked=is_blocked,
            user_agent=user_agent or "",
        )
        self.log.append(record)
        return record

    def list_attempts(self, page: int = 1, page_size: int = 10) -> ServiceResult[AttemptListResponse]:
        page, page_size = normalize_paging(page, page_size)
        records, total = self.log.page(page, page_size)

        return ServiceResult.success(AttemptListResponse(
            items=[AttemptResponse.model_validate(r) for r in records],
            total_count=total,
            page=page,
            page_size=page_size,
        ))
